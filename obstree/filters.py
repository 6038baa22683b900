"""
条目过滤：去掉站点自身的文件（index.html、favicon、脚本）以及资源目录（images、fonts）。
"""

from __future__ import annotations

import logging
from typing import Iterable

from obstree.models import Entry

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_NAMES: frozenset[str] = frozenset({"index.html", "favicon.ico"})
# 子串匹配而非后缀匹配：名称中任意位置含 .js 即排除（如 app.js.map、foo.json）
DEFAULT_EXTENSION_MARKERS: frozenset[str] = frozenset({".js"})
DEFAULT_RESERVED_FOLDERS: frozenset[str] = frozenset({"images", "fonts"})


class EntryFilter:
    """
    按三组规则排除条目，任一命中即排除：

    - name 等于 reserved_names 中某项
    - name 包含 extension_markers 中某项（子串）
    - base_name 等于 reserved_folders 中某项（仅比较完整 base_name，images/sub 不受影响）

    不传参数时使用默认规则；传入的集合替换对应的默认集合。
    """

    def __init__(
        self,
        reserved_names: Iterable[str] | None = None,
        extension_markers: Iterable[str] | None = None,
        reserved_folders: Iterable[str] | None = None,
    ):
        self.reserved_names = frozenset(DEFAULT_RESERVED_NAMES if reserved_names is None else reserved_names)
        self.extension_markers = frozenset(DEFAULT_EXTENSION_MARKERS if extension_markers is None else extension_markers)
        self.reserved_folders = frozenset(DEFAULT_RESERVED_FOLDERS if reserved_folders is None else reserved_folders)

    @classmethod
    def disabled(cls) -> EntryFilter:
        """不排除任何条目的过滤器。"""
        return cls(reserved_names=(), extension_markers=(), reserved_folders=())

    def excludes(self, entry: Entry) -> bool:
        name = entry.name
        if name in self.reserved_names:
            return True
        if any(marker and marker in name for marker in self.extension_markers):
            return True
        return entry.base_name in self.reserved_folders

    def filter(self, entries: Iterable[Entry]) -> list[Entry]:
        """返回未被排除的条目，保持原顺序，不修改输入。"""
        kept = [e for e in entries if not self.excludes(e)]
        logger.debug("filter kept %d entries", len(kept))
        return kept

    __call__ = filter

    def __repr__(self) -> str:
        return (
            f"EntryFilter(reserved_names={sorted(self.reserved_names)!r}, "
            f"extension_markers={sorted(self.extension_markers)!r}, "
            f"reserved_folders={sorted(self.reserved_folders)!r})"
        )
