"""YAML 文件注册表基类

整个注册表是一个 YAML 文档，每次变更后整体原子重写。
子类只需指定 section_key，即可继承 CRUD。
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from mygit.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class YamlRegistry:
    """YAML 文件注册表基类

    子类用法:
        class MyRegistry(YamlRegistry):
            section_key = "items"

    _lock 串行化同一进程内的读改写，子类的复合操作（查重 + 写入）也应持有它。
    """

    section_key: str = "entries"

    def __init__(self, registry_file: str) -> None:
        self.registry_file = Path(registry_file)
        self._lock = threading.RLock()
        self._data: dict[str, Any] = load_yaml(self.registry_file)

    def _section(self) -> dict[str, dict[str, Any]]:
        """获取当前 section 字典（自动创建）"""
        section = self._data.get(self.section_key)
        if not isinstance(section, dict):
            section = {}
            self._data[self.section_key] = section
        return section

    def _save(self) -> None:
        save_yaml(self.registry_file, self._data)

    def _commit(self, before: dict[str, dict[str, Any]]) -> None:
        """保存；写盘失败时把内存中的 section 恢复为变更前的快照"""
        try:
            self._save()
        except BaseException:
            self._data[self.section_key] = before
            raise

    def _put(self, key: str, entry: dict[str, Any]) -> dict[str, Any]:
        """写入条目并保存"""
        with self._lock:
            section = self._section()
            before = dict(section)
            section[key] = entry
            self._commit(before)
        return entry

    def _get_raw(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            entry = self._section().get(key)
            return dict(entry) if entry is not None else None

    def _items(self) -> list[tuple[str, dict[str, Any]]]:
        """按插入顺序返回 (key, entry) 副本"""
        with self._lock:
            return [(k, dict(v)) for k, v in self._section().items()]

    def _remove(self, key: str) -> bool:
        with self._lock:
            section = self._section()
            if key not in section:
                return False
            before = dict(section)
            del section[key]
            self._commit(before)
            return True
