"""
obstree CLI：保存一次桶地址，之后 list / tree / html 均使用该地址（或 --base-url 覆盖）。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Iterable, Optional

import typer

from obstree.cli_config import clear_config, load_config, save_config
from obstree.errors import ObsTreeError
from obstree.filters import EntryFilter
from obstree.models import EventKind, RenderEvent
from obstree.page import format_size, format_timestamp, render_page
from obstree.pipeline import load_entries, load_tree
from obstree.tree import NO_CONTENT

app = typer.Typer(
    name="obstree",
    help="Browse an object-storage bucket listing as a folder tree.",
)

_base_url_option: type = Annotated[
    Optional[str],
    typer.Option("--base-url", "-b", help="Bucket URL (overrides saved config; required if none saved)"),
]
_prefixes_argument: type = Annotated[
    Optional[list[str]],
    typer.Argument(help="Key prefixes to list (default: saved prefixes, or the whole bucket)"),
]
_all_option: type = Annotated[bool, typer.Option("--all", "-a", help="Do not filter out site/asset files")]
_exclude_name_option: type = Annotated[
    Optional[list[str]],
    typer.Option("--exclude-name", help="File name to exclude (repeatable; replaces defaults)"),
]
_exclude_ext_option: type = Annotated[
    Optional[list[str]],
    typer.Option("--exclude-ext", help="Substring of file names to exclude (repeatable; replaces defaults)"),
]
_exclude_folder_option: type = Annotated[
    Optional[list[str]],
    typer.Option("--exclude-folder", help="Parent folder to exclude (repeatable; replaces defaults)"),
]


@app.callback()
def _main_callback(
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _resolve_base_url(base_url: str | None) -> str:
    cfg = load_config()
    url = base_url or (cfg and cfg.get("base_url"))
    if not url:
        typer.echo("error: no saved bucket URL. run 'obstree login' or pass --base-url", err=True)
        raise typer.Exit(1)
    return url


def _resolve_prefixes(prefixes: list[str] | None) -> list[str] | None:
    if prefixes:
        return prefixes
    cfg = load_config()
    return (cfg and cfg.get("prefixes")) or None


def _make_filter(
    show_all: bool,
    exclude_name: list[str] | None,
    exclude_ext: list[str] | None,
    exclude_folder: list[str] | None,
) -> EntryFilter:
    if show_all:
        return EntryFilter.disabled()
    return EntryFilter(
        reserved_names=exclude_name or None,
        extension_markers=exclude_ext or None,
        reserved_folders=exclude_folder or None,
    )


def format_text_tree(events: Iterable[RenderEvent]) -> list[str]:
    """把遍历事件转为缩进文本行：目录为 name/ (N items)，文件为 name  大小  修改时间。"""
    lines: list[str] = []
    for event in events:
        indent = "  " * event.depth
        if event.kind is EventKind.FOLDER_OPEN:
            lines.append(f"{indent}{event.name}/ ({event.child_count} items)")
        elif event.kind is EventKind.FILE:
            entry = event.entry
            size = format_size(entry.size) or "-"
            lines.append(f"{indent}{entry.name}  {size}  {format_timestamp(entry.last_modified)}")
    return lines


# ------------------------- login / logout / info -------------------------


@app.command("login", help="Save bucket URL (and default prefixes) to local config")
def login(
    base_url: Annotated[Optional[str], typer.Option("--base-url", "-b", help="Bucket URL")] = None,
    prefix: Annotated[Optional[list[str]], typer.Option("--prefix", "-p", help="Default prefix (repeatable)")] = None,
) -> None:
    base_url = base_url or input("Bucket URL (e.g. https://bucket.obs.example.com): ").strip()
    if not base_url:
        typer.echo("error: bucket URL required", err=True)
        raise typer.Exit(1)
    save_config(base_url, prefix)
    typer.echo("Saved.")


@app.command("logout", help="Clear saved config")
def logout() -> None:
    if clear_config():
        typer.echo("Cleared.")
    else:
        typer.echo("No saved config.")


@app.command("info", help="Show saved bucket URL and prefixes")
def info_cmd() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo("Not configured. Run 'obstree login' or pass --base-url for commands.")
        return
    typer.echo(f"base_url: {cfg.get('base_url')}")
    prefixes = cfg.get("prefixes") or []
    typer.echo(f"prefixes: {', '.join(prefixes) if prefixes else '-'}")


# ------------------------- list / ls -------------------------


def _cmd_list_impl(
    prefixes: list[str] | None,
    base_url: str | None,
    entry_filter: EntryFilter,
) -> None:
    url = _resolve_base_url(base_url)
    try:
        entries = load_entries(url, _resolve_prefixes(prefixes), entry_filter)
    except ObsTreeError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    for e in entries:
        typer.echo(f"  {e.key}  {e.size} B  {e.last_modified.isoformat()}  {e.etag}")


@app.command("list", help="List all objects (flat, after filtering)")
def list_cmd(
    prefixes: _prefixes_argument = None,
    base_url: _base_url_option = None,
    show_all: _all_option = False,
    exclude_name: _exclude_name_option = None,
    exclude_ext: _exclude_ext_option = None,
    exclude_folder: _exclude_folder_option = None,
) -> None:
    _cmd_list_impl(prefixes, base_url, _make_filter(show_all, exclude_name, exclude_ext, exclude_folder))


@app.command("ls", help="Alias for list")
def ls_cmd(
    prefixes: _prefixes_argument = None,
    base_url: _base_url_option = None,
    show_all: _all_option = False,
    exclude_name: _exclude_name_option = None,
    exclude_ext: _exclude_ext_option = None,
    exclude_folder: _exclude_folder_option = None,
) -> None:
    _cmd_list_impl(prefixes, base_url, _make_filter(show_all, exclude_name, exclude_ext, exclude_folder))


# ------------------------- tree -------------------------


@app.command("tree", help="Print objects as a folder tree")
def tree_cmd(
    prefixes: _prefixes_argument = None,
    base_url: _base_url_option = None,
    show_all: _all_option = False,
    exclude_name: _exclude_name_option = None,
    exclude_ext: _exclude_ext_option = None,
    exclude_folder: _exclude_folder_option = None,
) -> None:
    url = _resolve_base_url(base_url)
    entry_filter = _make_filter(show_all, exclude_name, exclude_ext, exclude_folder)
    try:
        _, events = load_tree(url, _resolve_prefixes(prefixes), entry_filter)
    except ObsTreeError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    if not events:
        typer.echo(NO_CONTENT)
        return
    for line in format_text_tree(events):
        typer.echo(line)


# ------------------------- html -------------------------


@app.command("html", help="Write a standalone, collapsible HTML browser page")
def html_cmd(
    prefixes: _prefixes_argument = None,
    output: Annotated[Path, typer.Option("--output", "-o", help="Output HTML file")] = Path("index.html"),
    title: Annotated[str, typer.Option("--title", help="Page title")] = "Bucket browser",
    base_url: _base_url_option = None,
    show_all: _all_option = False,
    exclude_name: _exclude_name_option = None,
    exclude_ext: _exclude_ext_option = None,
    exclude_folder: _exclude_folder_option = None,
) -> None:
    url = _resolve_base_url(base_url)
    entry_filter = _make_filter(show_all, exclude_name, exclude_ext, exclude_folder)
    try:
        _, events = load_tree(url, _resolve_prefixes(prefixes), entry_filter)
    except ObsTreeError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_page(events, url, title), encoding="utf-8")
    typer.echo(f"Saved to {output}.")


# ------------------------- main -------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
