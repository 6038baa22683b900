"""
由扁平条目列表构建目录树，并按固定顺序做深度优先遍历。

遍历顺序：
- 子目录在前，按首次出现（插入）顺序，不排序
- 文件在后，按名称忽略大小写降序（Z→A）
- 根节点本身不产生事件
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from obstree.models import Entry, FolderNode, NodeKind, RenderEvent

logger = logging.getLogger(__name__)

NO_CONTENT = "No content available."


def build_tree(entries: Iterable[Entry]) -> FolderNode:
    """
    将条目按 base_name 逐段挂到目录树上，返回根节点。

    同一目录下同名（即 key 相同）的条目后者覆盖前者，用于多个前缀结果有重叠时去重。
    """
    root = FolderNode.root()
    count = 0
    for entry in entries:
        folder = root
        base = entry.base_name
        for segment in base.split("/") if base else ():
            folder = folder.child_folder(segment)
        existing = folder.children.get(entry.name)
        if existing is not None and existing.kind is NodeKind.FOLDER:
            logger.warning("file %s replaces folder %s", entry.key, existing.path)
        folder.children[entry.name] = entry
        count += 1
    logger.debug("built tree from %d entries (%d top-level nodes)", count, len(root.children))
    return root


def sorted_files(folder: FolderNode) -> list[Entry]:
    """目录下的直接文件，按名称忽略大小写降序。"""
    files = [child for child in folder.children.values() if child.kind is NodeKind.FILE]
    return sorted(files, key=lambda e: e.name.casefold(), reverse=True)


def subfolders(folder: FolderNode) -> list[FolderNode]:
    return [child for child in folder.children.values() if child.kind is NodeKind.FOLDER]


def iter_events(folder: FolderNode) -> Iterator[RenderEvent]:
    if not folder.is_root:
        yield RenderEvent.folder_open(folder)
    for sub in subfolders(folder):
        yield from iter_events(sub)
    for entry in sorted_files(folder):
        yield RenderEvent.file(entry, folder.depth + 1)
    if not folder.is_root:
        yield RenderEvent.folder_close(folder)


def render(root: FolderNode) -> list[RenderEvent]:
    """
    深度优先遍历目录树，返回事件列表。

    根节点无子项时返回空列表，调用方应显示「无内容」占位（NO_CONTENT），而不是空树。
    """
    if not root.children:
        return []
    return list(iter_events(root))


def iter_entries(folder: FolderNode, segments: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], Entry]]:
    """按插入顺序遍历所有文件，产出 (祖先目录名序列, 条目)。"/".join(segments + (entry.name,)) 即 key。"""
    for name, child in folder.children.items():
        if child.kind is NodeKind.FOLDER:
            yield from iter_entries(child, segments + (name,))
        else:
            yield segments, child


def count_files(folder: FolderNode) -> int:
    return sum(1 for _ in iter_entries(folder))
