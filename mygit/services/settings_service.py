"""应用设置: 扁平键值文档，合并更新，后写覆盖"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from mygit.core.exceptions import ValidationError
from mygit.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "theme": "light",
    "editor": "vscode",
    "confirmActions": True,
}


class SettingsService:

    def __init__(self, settings_file: str = "") -> None:
        if not settings_file:
            from mygit.core.config import get_config
            settings_file = get_config().settings_file
        self.settings_file = Path(settings_file)
        self._lock = threading.Lock()

    def get(self) -> dict[str, Any]:
        """默认值 + 已保存的设置"""
        return {**DEFAULT_SETTINGS, **load_yaml(self.settings_file)}

    def update(self, changes: dict[str, Any]) -> dict[str, Any]:
        """把 changes 合并进已保存的设置并整体重写"""
        if not isinstance(changes, dict):
            raise ValidationError("设置必须是键值对象")
        with self._lock:
            merged = {**load_yaml(self.settings_file), **changes}
            save_yaml(self.settings_file, merged)
        logger.info("设置已更新: %s", ", ".join(sorted(changes)) or "(无变更)")
        return {**DEFAULT_SETTINGS, **merged}
