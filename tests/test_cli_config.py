"""
CLI 配置（cli_config）单元测试。配置目录由 conftest 指向临时目录。
"""

from __future__ import annotations

from obstree.cli_config import _config_path, clear_config, load_config, save_config

from tests.config import OBS_BASE_URL, PREFIX_A, PREFIX_B


def test_load_config_missing_returns_none() -> None:
    assert load_config() is None


def test_load_config_invalid_json_returns_none() -> None:
    _config_path().write_text("not json", encoding="utf-8")
    assert load_config() is None


def test_load_config_missing_base_url_returns_none() -> None:
    _config_path().write_text('{"prefixes": ["a/"]}', encoding="utf-8")
    assert load_config() is None


def test_save_config_strips_trailing_slash() -> None:
    save_config(f"{OBS_BASE_URL}/")
    cfg = load_config()
    assert cfg is not None
    assert cfg["base_url"] == OBS_BASE_URL
    assert "prefixes" not in cfg


def test_save_config_with_prefixes() -> None:
    save_config(OBS_BASE_URL, [PREFIX_A, PREFIX_B])
    cfg = load_config()
    assert cfg is not None
    assert cfg["prefixes"] == [PREFIX_A, PREFIX_B]


def test_load_config_drops_invalid_prefixes() -> None:
    _config_path().write_text(f'{{"base_url": "{OBS_BASE_URL}", "prefixes": "p1/"}}', encoding="utf-8")
    cfg = load_config()
    assert cfg == {"base_url": OBS_BASE_URL}


def test_clear_config() -> None:
    save_config(OBS_BASE_URL)
    assert clear_config() is True
    assert load_config() is None
    assert clear_config() is False
