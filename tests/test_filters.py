"""
EntryFilter 单元测试：默认规则、自定义规则、幂等与不修改输入。
"""

from __future__ import annotations

from obstree.filters import EntryFilter

from tests.config import SITE_KEYS


def _keys(entries) -> list[str]:
    return [e.key for e in entries]


def test_default_filter_drops_site_files(make_entry) -> None:
    """x.png / index.html / images/y.png 用默认规则过滤后只剩 x.png。"""
    entries = [make_entry(k) for k in ["x.png", "index.html", "images/y.png"]]
    assert _keys(EntryFilter().filter(entries)) == ["x.png"]


def test_default_filter_drops_all_site_keys(make_entry) -> None:
    entries = [make_entry(k) for k in SITE_KEYS]
    assert EntryFilter()(entries) == []


def test_extension_marker_is_substring_match(make_entry) -> None:
    """.js 为子串匹配：foo.json、bundle.js.map 都被排除。"""
    entries = [make_entry(k) for k in ["a/foo.json", "a/bundle.js.map", "a/notes.txt", "a/jsfile.png"]]
    assert _keys(EntryFilter().filter(entries)) == ["a/notes.txt", "a/jsfile.png"]


def test_reserved_folder_only_matches_whole_base_name(make_entry) -> None:
    """images 目录本身被排除，但 images/sub、gallery/images 不受影响。"""
    entries = [make_entry(k) for k in ["images/a.png", "images/sub/b.png", "gallery/images/c.png"]]
    assert _keys(EntryFilter().filter(entries)) == ["images/sub/b.png", "gallery/images/c.png"]


def test_reserved_names_match_in_any_folder(make_entry) -> None:
    entries = [make_entry(k) for k in ["docs/index.html", "docs/readme.html"]]
    assert _keys(EntryFilter().filter(entries)) == ["docs/readme.html"]


def test_custom_rules_replace_defaults(make_entry) -> None:
    f = EntryFilter(reserved_names=["thumbs.db"], extension_markers=[".tmp"], reserved_folders=["cache"])
    entries = [make_entry(k) for k in ["index.html", "thumbs.db", "a.tmp.png", "cache/x.png", "images/y.png"]]
    assert _keys(f.filter(entries)) == ["index.html", "images/y.png"]


def test_disabled_filter_keeps_everything(make_entry) -> None:
    entries = [make_entry(k) for k in SITE_KEYS]
    assert EntryFilter.disabled().filter(entries) == entries


def test_empty_marker_is_ignored(make_entry) -> None:
    """空字符串标记不应排除所有条目。"""
    f = EntryFilter(extension_markers=[""])
    assert _keys(f.filter([make_entry("a.png")])) == ["a.png"]


def test_filter_is_idempotent_order_preserving_and_pure(make_entry) -> None:
    keys = ["z.png", "index.html", "a/b.png", "images/c.png", "a/app.js", "m.png"]
    entries = [make_entry(k) for k in keys]
    original = list(entries)
    f = EntryFilter()
    once = f.filter(entries)
    assert _keys(once) == ["z.png", "a/b.png", "m.png"]
    assert f.filter(once) == once
    assert entries == original
