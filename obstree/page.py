"""
HTML 输出：把遍历事件渲染为可折叠的目录浏览页面。

核心不做转义；这里对所有名称、路径统一用 html.escape 转义后再输出。
展开/折叠由页面脚本根据 data-toggle-folder / data-folder 属性（即目录 path）完成。
"""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable
from urllib.parse import quote

from obstree.models import EventKind, RenderEvent

KB = 1024
MB = 1024 * 1024
GB = 1024 * 1024 * 1024

PLACEHOLDER_HTML = '<div class="text-center p-3"><b>No images available.</b></div>'

# 与 encodeURI 保留的字符一致
_URI_SAFE = "/;,?:@&=+$!*'()#"

_CHEVRON_ICON = (
    '<svg class="ob-folder-icon" viewBox="0 0 32 32" width="12" height="12">'
    '<path d="M12 1 L26 16 L12 31 L8 27 L18 16 L8 5 z"/></svg>'
)


def format_size(size: int) -> str:
    """字节数转为 1 KB / 1.25 MB 等；0 返回空串（目录占位对象等）。"""
    if size == 0:
        return ""
    if size < KB:
        return f"{size} B"
    if size < MB:
        return f"{size / KB:.0f} KB"
    if size < GB:
        return f"{size / MB:.2f} MB"
    return f"{size / GB:.2f} GB"


def format_timestamp(dt: datetime) -> str:
    """德语区格式，如 2.5.2024, 10:11:12（日、月不补零）。"""
    return f"{dt.day}.{dt.month}.{dt.year}, {dt:%H:%M:%S}"


def object_url(base_url: str, key: str) -> str:
    """对象的直接访问地址：桶地址 + / + key（按 encodeURI 规则编码）。"""
    return quote(f"{base_url.rstrip('/')}/{key}", safe=_URI_SAFE)


def _folder_html(event: RenderEvent) -> str:
    path = escape(event.path)
    return (
        f'<div class="ob-folder" data-toggle-folder="{path}">'
        f'<div class="flex-grow ob-name">{_CHEVRON_ICON} {escape(event.name)}</div>'
        '<div class="ob-modified"></div>'
        f'<div class="ob-size">{event.child_count} items</div>'
        "</div>"
        f'<div class="ob-folder-contents" data-folder="{path}" style="display: none;">'
    )


def _file_html(event: RenderEvent, base_url: str) -> str:
    entry = event.entry
    if entry is None:
        raise ValueError(f"FILE event without entry: {event.path}")
    url = escape(object_url(base_url, entry.key))
    return (
        '<div class="ob-file">'
        f'<div class="flex-grow ob-name"><a href="{url}">{escape(entry.name)}</a></div>'
        f'<div class="ob-modified">{format_timestamp(entry.last_modified)}</div>'
        f'<div class="ob-size">{format_size(entry.size)}</div>'
        "</div>"
    )


def render_html(events: Iterable[RenderEvent], base_url: str) -> str:
    """
    渲染浏览器片段（表头 + 内容）。

    :param events: tree.render 的结果；为空时输出无内容占位
    :param base_url: 桶地址，用于生成文件链接
    """
    parts: list[str] = []
    for event in events:
        if event.kind is EventKind.FOLDER_OPEN:
            parts.append(_folder_html(event))
        elif event.kind is EventKind.FOLDER_CLOSE:
            parts.append("</div>")
        else:
            parts.append(_file_html(event, base_url))
    content = "\n".join(parts) if parts else PLACEHOLDER_HTML
    return (
        '<div class="ob-header">'
        '<div class="flex-grow ob-name">Name</div>'
        '<div class="ob-modified">Modified</div>'
        '<div class="ob-size">Size</div>'
        "</div>\n"
        f'<div class="ob-content">\n{content}\n</div>'
    )


_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; margin: 2em; }}
.ob-header, .ob-folder, .ob-file {{ display: flex; padding: 4px 0; border-bottom: 1px solid #eee; }}
.ob-header {{ font-weight: bold; }}
.flex-grow {{ flex-grow: 1; }}
.ob-modified {{ width: 12em; }}
.ob-size {{ width: 7em; text-align: right; }}
.ob-folder {{ cursor: pointer; }}
.ob-folder-contents {{ padding-left: 1.5em; }}
.ob-folder-icon {{ transition: transform .2s; }}
.ob-folder-icon.ob-open {{ transform: rotate(90deg); }}
.text-center {{ text-align: center; }}
</style>
</head>
<body>
<div id="obstree">
{body}
</div>
<script>
document.getElementById("obstree").addEventListener("click", function (event) {{
  var item = event.target.closest("div[data-toggle-folder]");
  if (!item) return;
  var path = item.getAttribute("data-toggle-folder");
  var folders = document.querySelectorAll("div[data-folder]");
  for (var i = 0; i < folders.length; i++) {{
    if (folders[i].getAttribute("data-folder") === path) {{
      folders[i].style.display = folders[i].style.display === "none" ? "" : "none";
    }}
  }}
  item.querySelector(".ob-folder-icon").classList.toggle("ob-open");
}});
</script>
</body>
</html>
"""


def render_page(events: Iterable[RenderEvent], base_url: str, title: str = "Bucket browser") -> str:
    """渲染完整的独立 HTML 页面。"""
    return _PAGE_TEMPLATE.format(title=escape(title), body=render_html(events, base_url))
