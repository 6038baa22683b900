"""
CLI 配置：本地保存/读取桶地址与默认前缀。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    """配置目录：~/.config/obstree（所有平台统一）。"""
    return Path.home() / ".config" / "obstree"


def _config_path() -> Path:
    return _config_dir() / "config.json"


def load_config() -> dict[str, Any] | None:
    """读取本地配置；不存在或无效则返回 None。"""
    p = _config_path()
    if not p.exists():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("ignoring unreadable config %s: %s", p, e)
        return None
    if not isinstance(data, dict) or not data.get("base_url"):
        return None
    prefixes = data.get("prefixes")
    if prefixes is not None and not (isinstance(prefixes, list) and all(isinstance(x, str) for x in prefixes)):
        data.pop("prefixes")
    return data


def save_config(base_url: str, prefixes: Iterable[str] | None = None) -> None:
    """保存桶地址（去掉末尾 /）及可选的默认前缀。"""
    p = _config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, Any] = {"base_url": base_url.rstrip("/")}
    if prefixes:
        data["prefixes"] = list(prefixes)
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def clear_config() -> bool:
    """清除本地配置；存在则删除并返回 True。"""
    p = _config_path()
    if p.exists():
        p.unlink()
        return True
    return False
