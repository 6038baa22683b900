"""
完整流程：取列表 → 过滤 → 建树 → 遍历。每次调用都从头执行，不保留状态。
"""

from __future__ import annotations

import asyncio
from typing import Iterable

import httpx

from obstree.client import BucketClient
from obstree.filters import EntryFilter
from obstree.models import Entry, FolderNode, RenderEvent
from obstree.tree import build_tree, render


async def collect_entries(
    base_url: str,
    prefixes: Iterable[str] | None = None,
    entry_filter: EntryFilter | None = None,
    *,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Entry]:
    """取回全部前缀的条目并过滤；entry_filter 为 None 时使用默认规则。"""
    async with BucketClient(base_url, timeout=timeout, transport=transport) as client:
        entries = await client.fetch_entries(prefixes)
    return (entry_filter or EntryFilter()).filter(entries)


def load_entries(
    base_url: str,
    prefixes: Iterable[str] | None = None,
    entry_filter: EntryFilter | None = None,
    **kwargs,
) -> list[Entry]:
    """collect_entries 的同步版本。"""
    return asyncio.run(collect_entries(base_url, prefixes, entry_filter, **kwargs))


def load_tree(
    base_url: str,
    prefixes: Iterable[str] | None = None,
    entry_filter: EntryFilter | None = None,
    **kwargs,
) -> tuple[FolderNode, list[RenderEvent]]:
    """取列表并建树，返回 (根节点, 遍历事件)。事件为空表示过滤后无内容。"""
    root = build_tree(load_entries(base_url, prefixes, entry_filter, **kwargs))
    return root, render(root)
