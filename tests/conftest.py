"""
pytest 配置与共享 fixture。

- make_entry: 由 key 快速构造 Entry
- list_xml: 生成 ListBucketResult XML
- FakeBucket: 按 (prefix, marker) 返回预置页面的 httpx.MockTransport，并记录请求
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest

from obstree.models import Entry

from tests.config import OBS_HOST, S3_NAMESPACE, SAMPLE_ETAG, SAMPLE_TIMESTAMP


def build_entry(key: str, size: int = 1, last_modified: datetime | None = None) -> Entry:
    return Entry(
        key=key,
        last_modified=last_modified or datetime(2024, 5, 2, 10, 11, 12, tzinfo=timezone.utc),
        etag=SAMPLE_ETAG,
        size=size,
    )


def build_list_xml(
    keys: list[str],
    *,
    truncated: bool = False,
    next_marker: str | None = None,
    namespace: str | None = S3_NAMESPACE,
    size: int = 1,
) -> str:
    """生成一页 ListBucketResult；namespace 为 None 时不带 xmlns。"""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    contents = "".join(
        "<Contents>"
        f"<Key>{key}</Key>"
        f"<LastModified>{SAMPLE_TIMESTAMP}</LastModified>"
        f"<ETag>{SAMPLE_ETAG.replace(chr(34), '&quot;')}</ETag>"
        f"<Size>{size}</Size>"
        "<StorageClass>STANDARD</StorageClass>"
        "</Contents>"
        for key in keys
    )
    marker = f"<NextMarker>{next_marker}</NextMarker>" if next_marker is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<ListBucketResult{xmlns}>"
        "<Name>images</Name><Prefix></Prefix><Marker></Marker><MaxKeys>1000</MaxKeys>"
        f"<IsTruncated>{'true' if truncated else 'false'}</IsTruncated>"
        f"{marker}{contents}"
        "</ListBucketResult>"
    )


class FakeBucket:
    """
    模拟桶列表接口。

    pages 的键为 (prefix, marker)，值为响应 XML 或 httpx.Response；
    未登记的组合返回 404。requests 记录每次请求的 (prefix, marker)。
    """

    def __init__(self, pages: dict[tuple[str | None, str | None], str | httpx.Response]):
        self.pages = pages
        self.requests: list[tuple[str | None, str | None]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        assert request.url.host == OBS_HOST
        prefix = request.url.params.get("prefix")
        marker = request.url.params.get("marker")
        self.requests.append((prefix, marker))
        page = self.pages.get((prefix, marker))
        if page is None:
            return httpx.Response(404, text="NoSuchKey")
        if isinstance(page, httpx.Response):
            return page
        return httpx.Response(200, text=page, headers={"Content-Type": "application/xml"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def make_entry() -> Callable[..., Entry]:
    return build_entry


@pytest.fixture
def list_xml() -> Callable[..., str]:
    return build_list_xml


@pytest.fixture
def fake_bucket() -> Callable[..., FakeBucket]:
    return FakeBucket


@pytest.fixture(autouse=True)
def _patch_config_path(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """将配置路径指向临时目录，避免污染用户 ~/.config/obstree。"""
    config_dir = tmp_path / "obstree"
    config_dir.mkdir(parents=True, exist_ok=True)

    def _config_dir():
        return config_dir

    monkeypatch.setattr("obstree.cli_config._config_dir", _config_dir)
