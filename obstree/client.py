"""
对象存储桶列表客户端（S3 / OBS ListObjects v1 接口）。

对桶地址发 GET ?prefix=&marker=，解析 ListBucketResult XML；
IsTruncated 为 true 时用 NextMarker 继续请求下一页，直到取完该前缀的全部对象。
多个前缀之间并发请求，同一前缀内严格按页顺序请求。
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable
from xml.etree.ElementTree import Element, ParseError, fromstring

import httpx

from obstree.errors import MalformedResponse, TransportError
from obstree.models import Entry

logger = logging.getLogger(__name__)


@dataclass
class ListPage:
    """一页列表结果；truncated 为 True 时 next_marker 必有值。"""

    entries: list[Entry] = field(default_factory=list)
    truncated: bool = False
    next_marker: str | None = None


def _local_name(tag: str) -> str:
    # S3 与 OBS 的 XML 命名空间不同，只比较本地名
    return tag.rpartition("}")[2]


def _child(element: Element, name: str) -> Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: Element, name: str) -> str | None:
    child = _child(element, name)
    if child is None:
        return None
    return child.text or ""


def parse_list_page(body: bytes | str) -> ListPage:
    """
    解析 ListBucketResult XML 为 ListPage。

    :raises MalformedResponse: XML 无法解析、根元素不是 ListBucketResult、
        IsTruncated=true 但无 NextMarker、或某个 Contents 字段不合法
    """
    try:
        root = fromstring(body)
    except ParseError as e:
        raise MalformedResponse(f"invalid listing XML: {e}") from e
    if _local_name(root.tag) != "ListBucketResult":
        raise MalformedResponse(f"unexpected root element: {_local_name(root.tag)}")

    entries = [
        Entry.from_listing(
            _child_text(item, "Key"),
            _child_text(item, "LastModified"),
            _child_text(item, "ETag"),
            _child_text(item, "Size"),
        )
        for item in root
        if _local_name(item.tag) == "Contents"
    ]
    truncated = (_child_text(root, "IsTruncated") or "").strip().lower() == "true"
    next_marker = None
    if truncated:
        next_marker = _child_text(root, "NextMarker")
        if not next_marker:
            raise MalformedResponse("IsTruncated is true but NextMarker is missing")
    return ListPage(entries=entries, truncated=truncated, next_marker=next_marker)


class BucketClient:
    """
    桶列表客户端（异步）。

    用法::

        async with BucketClient("https://bucket.obs.example.com") as client:
            entries = await client.fetch_entries(["photos/", "docs/"])
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        :param base_url: 桶地址，如 https://bucket.obs.eu-de.example.com（末尾 / 会去掉）
        :param timeout: 请求超时秒数
        :param verify: 是否验证 HTTPS 证书
        :param transport: 自定义 httpx 传输层（测试时传 httpx.MockTransport）
        """
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify = verify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._closed = False

    def _get_client(self) -> httpx.AsyncClient:
        if self._closed:
            raise TransportError("client is closed")
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """关闭底层 HTTP 客户端；关闭后不再发起请求。"""
        self._closed = True
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BucketClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # ------------------------- 单页 -------------------------

    async def list_page(self, prefix: str | None = None, marker: str | None = None) -> ListPage:
        """
        请求一页列表。

        :param prefix: 键前缀，为空时不传
        :param marker: 上一页返回的 NextMarker，首页不传
        :raises TransportError: 网络错误或非 2xx 状态码
        :raises MalformedResponse: 响应无法解析
        """
        params: dict[str, str] = {}
        if marker:
            params["marker"] = marker
        if prefix:
            params["prefix"] = prefix
        logger.debug("GET %s params=%s", self.base_url, params)
        try:
            r = await self._get_client().get(self.base_url, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"listing request failed: HTTP {e.response.status_code} for {e.request.url}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"listing request failed: {e}") from e
        page = parse_list_page(r.content)
        logger.debug(
            "got %d entries (truncated=%s, next_marker=%s)", len(page.entries), page.truncated, page.next_marker
        )
        return page

    # ------------------------- 单个前缀的全部页 -------------------------

    async def fetch_all(self, prefix: str | None = None) -> list[Entry]:
        """取回某前缀下的全部条目；按页顺序依次请求并拼接，任一页失败则整体失败。"""
        entries: list[Entry] = []
        marker: str | None = None
        pages = 0
        while True:
            page = await self.list_page(prefix, marker)
            pages += 1
            entries.extend(page.entries)
            if not page.truncated:
                break
            marker = page.next_marker
        logger.info("prefix %r: %d entries in %d page(s)", prefix or "", len(entries), pages)
        return entries

    # ------------------------- 多个前缀 -------------------------

    async def fetch_entries(self, prefixes: Iterable[str | None] | None = None) -> list[Entry]:
        """
        并发取回多个前缀的全部条目并拼接。

        :param prefixes: 前缀列表；None 或空列表表示不带前缀请求一次
        :return: 各前缀结果按前缀顺序拼接（跨前缀的顺序对后续处理无意义）
        :raises TransportError: 任一前缀失败时取消其余前缀并抛出该错误
        """
        prefix_list = list(prefixes) if prefixes else [None]
        tasks = [asyncio.create_task(self.fetch_all(p)) for p in prefix_list]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [entry for batch in results for entry in batch]
