"""YAML 文档读写

注册表、设置与配置文件都是顶层为字典的单个 YAML 文档，每次变更整体重写。
文档损坏时抛出 ConfigError，由 Web 层映射为 500，CLI 输出友好提示。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from mygit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 这些文档都很小，超过此大小视为损坏
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """同目录临时文件 + fsync + os.replace

    并发读者要么看到旧文档，要么看到完整的新文档。
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取文档；不存在或为空返回 {}，顶层不是字典时告警并返回 {}"""
    p = Path(path)
    if not p.exists():
        return {}
    if p.stat().st_size > MAX_YAML_SIZE:
        raise ConfigError(f"YAML 文件过大: {p}")
    try:
        result = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        logger.error("解析 YAML 失败 %s: %s", p, e)
        raise ConfigError(f"无法解析 {p}: {e}") from e

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning("%s 顶层不是字典 (%s)，按空文档处理", p, type(result).__name__)
        return {}
    return result


def save_yaml(path: str | Path, data: dict[str, Any]) -> None:
    """保持键顺序与中文原样写出"""
    content = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    atomic_write(Path(path), content)
