"""obstree：把对象存储桶的扁平分页列表还原为目录树并渲染。"""

from obstree.client import BucketClient, ListPage, parse_list_page
from obstree.errors import MalformedResponse, ObsTreeError, TransportError
from obstree.filters import EntryFilter
from obstree.models import Entry, EventKind, FolderNode, NodeKind, RenderEvent
from obstree.pipeline import collect_entries, load_entries, load_tree
from obstree.tree import NO_CONTENT, build_tree, render

__all__ = [
    "BucketClient",
    "ListPage",
    "parse_list_page",
    "ObsTreeError",
    "TransportError",
    "MalformedResponse",
    "EntryFilter",
    "Entry",
    "FolderNode",
    "NodeKind",
    "EventKind",
    "RenderEvent",
    "collect_entries",
    "load_entries",
    "load_tree",
    "build_tree",
    "render",
    "NO_CONTENT",
]
