"""
对象存储列表的数据模型：Entry（一个对象）、FolderNode（按 / 切分得到的虚拟目录）、RenderEvent（渲染遍历的一步）。

FolderNode.children 中同时存放目录与文件，遍历时按 kind（NodeKind）区分，不做 isinstance 判断。
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union

from obstree.errors import MalformedResponse

logger = logging.getLogger(__name__)


class NodeKind(enum.Enum):
    FOLDER = "folder"
    FILE = "file"


def parse_timestamp(value: str) -> datetime:
    """解析 ISO 8601 时间（如 2024-05-02T10:11:12.000Z），末尾 Z 视为 UTC。"""
    text = (value or "").strip()
    if not text:
        raise MalformedResponse("missing LastModified")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedResponse(f"invalid LastModified: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class Entry:
    """
    列表中的一个对象。

    key 为完整路径（以 / 分隔），name / base_name / depth 由 key 推导：
    - name: 最后一个 / 之后的部分（无 / 时为整个 key）
    - base_name: 最后一个 / 之前的部分（无 / 时为空串）
    - depth: base_name 的段数（base_name 为空时为 0）
    """

    key: str
    last_modified: datetime
    etag: str
    size: int

    kind = NodeKind.FILE

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Entry.key must not be empty")
        if self.size < 0:
            raise ValueError(f"Entry.size must not be negative: {self.size}")

    @classmethod
    def from_listing(cls, key: str | None, last_modified: str | None, etag: str | None, size: str | None) -> Entry:
        """由列表响应中的原始字符串构造；字段缺失或无法解析时抛 MalformedResponse。"""
        if not key:
            raise MalformedResponse("Contents without Key")
        try:
            size_value = int((size or "").strip())
        except ValueError as e:
            raise MalformedResponse(f"invalid Size for {key!r}: {size!r}") from e
        if size_value < 0:
            raise MalformedResponse(f"negative Size for {key!r}: {size_value}")
        return cls(
            key=key,
            last_modified=parse_timestamp(last_modified or ""),
            etag=etag or "",
            size=size_value,
        )

    @property
    def name(self) -> str:
        return self.key.rpartition("/")[2]

    @property
    def base_name(self) -> str:
        return self.key.rpartition("/")[0]

    @property
    def depth(self) -> int:
        base = self.base_name
        return len(base.split("/")) if base else 0


@dataclass
class FolderNode:
    """虚拟目录节点；根节点 name/path 为空、depth 为 -1，使其直接子节点 depth 为 0。"""

    name: str
    path: str
    depth: int = 0
    children: dict[str, Node] = field(default_factory=dict)

    kind = NodeKind.FOLDER

    @classmethod
    def root(cls) -> FolderNode:
        return cls(name="", path="", depth=-1)

    @property
    def is_root(self) -> bool:
        return self.depth < 0

    def child_folder(self, segment: str) -> FolderNode:
        """返回名为 segment 的子目录，不存在则创建（按首次出现顺序插入）。"""
        node = self.children.get(segment)
        if node is not None and node.kind is NodeKind.FOLDER:
            return node
        # 同名文件已存在时由目录替换；S3 中 "a" 与 "a/b" 可同时存在
        if node is not None:
            logger.warning("folder %s/%s replaces file %s", self.path, segment, node.key)
        folder = FolderNode(name=segment, path=f"{self.path}/{segment}", depth=self.depth + 1)
        self.children[segment] = folder
        return folder


Node = Union[FolderNode, Entry]


class EventKind(enum.Enum):
    FOLDER_OPEN = "folder_open"
    FOLDER_CLOSE = "folder_close"
    FILE = "file"


@dataclass(frozen=True)
class RenderEvent:
    """
    渲染遍历产生的一步。

    - FOLDER_OPEN: name, path, child_count（直接子项数）, depth
    - FOLDER_CLOSE: 与对应 FOLDER_OPEN 相同的 path
    - FILE: entry, depth；path 为 "/" + key，与目录 path 同一写法（如 /a/b 与 /a/b/c.png）
    """

    kind: EventKind
    name: str
    path: str
    depth: int
    child_count: int = 0
    entry: Entry | None = None

    @classmethod
    def folder_open(cls, folder: FolderNode) -> RenderEvent:
        return cls(EventKind.FOLDER_OPEN, folder.name, folder.path, folder.depth, child_count=len(folder.children))

    @classmethod
    def folder_close(cls, folder: FolderNode) -> RenderEvent:
        return cls(EventKind.FOLDER_CLOSE, folder.name, folder.path, folder.depth)

    @classmethod
    def file(cls, entry: Entry, depth: int) -> RenderEvent:
        return cls(EventKind.FILE, entry.name, f"/{entry.key}", depth, entry=entry)
