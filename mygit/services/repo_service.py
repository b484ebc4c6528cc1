"""仓库注册表服务: 已知仓库的增删改查与克隆

注册表只记录仓库在哪里，从不改动工作区本身：
  - add / update 的路径必须通过有效性检查
  - 同一规范化路径只能注册一次
  - remove 只删除记录，不删除磁盘上的工作区
  - 每次变更后整体原子重写 YAML 文档
"""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from datetime import datetime, timezone
from typing import Any

from mygit.core.exceptions import (
    CloneFailedError,
    DuplicateError,
    InvalidPathError,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)
from mygit.core.locks import PathLockManager, normalize_path
from mygit.core.models import RepoRecord
from mygit.core.registry import YamlRegistry
from mygit.git.backend import GitCliBackend, VcsBackend
from mygit.git.classify import failure_message
from mygit.git.validity import is_valid_repo

logger = logging.getLogger(__name__)


def _absolute(path: str) -> str:
    return os.path.normpath(os.path.abspath(os.path.expanduser(path.strip())))


def _default_name(path: str) -> str:
    return os.path.basename(path.rstrip(os.sep)) or path


class RepoService(YamlRegistry):
    """仓库注册表"""

    section_key = "repos"

    def __init__(
        self, registry_file: str = "", backend: VcsBackend | None = None,
        locks: PathLockManager | None = None,
    ) -> None:
        if not registry_file:
            from mygit.core.config import get_config
            registry_file = get_config().repos_file
        super().__init__(registry_file)
        self._backend = backend or GitCliBackend()
        self._locks = locks or PathLockManager()

    # ---- 查询 ----

    def is_valid(self, path: str) -> bool:
        return is_valid_repo(path, self._backend)

    def list_all(self) -> list[dict[str, Any]]:
        """列出所有仓库，附带实时计算的 valid 标记"""
        return [
            {**RepoRecord.from_dict(repo_id, entry).to_dict(), "valid": self.is_valid(entry.get("path", ""))}
            for repo_id, entry in self._items()
        ]

    def get(self, repo_id: str) -> RepoRecord | None:
        entry = self._get_raw(repo_id)
        if entry is None:
            return None
        return RepoRecord.from_dict(repo_id, entry)

    def find_by_path(self, path: str) -> RepoRecord | None:
        key = normalize_path(_absolute(path))
        for repo_id, entry in self._items():
            if normalize_path(entry.get("path", "")) == key:
                return RepoRecord.from_dict(repo_id, entry)
        return None

    # ---- 变更 ----

    def add(self, path: str, name: str = "") -> RepoRecord:
        """注册已有工作区"""
        if not path or not path.strip():
            raise ValidationError("需要提供 path")
        abs_path = _absolute(path)
        if not self.is_valid(abs_path):
            raise InvalidPathError(f"不是有效的 git 仓库: {abs_path}")
        with self._lock:
            if self.find_by_path(abs_path) is not None:
                raise DuplicateError(f"仓库已添加: {abs_path}")
            record = self._store(abs_path, name)
        logger.info("仓库已注册: %s -> %s", record.name, record.path)
        return record

    def remove(self, repo_id: str) -> None:
        """删除注册记录（不触碰工作区）"""
        if not self._remove(repo_id):
            raise NotFoundError(f"仓库不存在: {repo_id}")
        logger.info("仓库已移除: %s", repo_id)

    def update(self, repo_id: str, *, name: str | None = None, path: str | None = None) -> RepoRecord:
        with self._lock:
            entry = self._get_raw(repo_id)
            if entry is None:
                raise NotFoundError(f"仓库不存在: {repo_id}")
            if name:
                entry["name"] = name
            if path:
                abs_path = _absolute(path)
                if not self.is_valid(abs_path):
                    raise InvalidPathError(f"不是有效的 git 仓库: {abs_path}")
                owner = self.find_by_path(abs_path)
                if owner is not None and owner.id != repo_id:
                    raise DuplicateError(f"路径已被其他仓库注册: {abs_path}")
                entry["path"] = abs_path
            self._put(repo_id, entry)
        logger.info("仓库已更新: %s", repo_id)
        return RepoRecord.from_dict(repo_id, entry)

    def clone(self, url: str, target_path: str, name: str = "") -> RepoRecord:
        """克隆远程仓库并注册

        目标目录在克隆前不存在时，失败后删除残留目录；已存在的目录保持原样。
        整个过程持有目标路径的写锁，同一目标的并发克隆排队，后到者看到已注册的记录。
        """
        if not url or not url.strip():
            raise ValidationError("需要提供 url")
        if not target_path or not target_path.strip():
            raise ValidationError("需要提供 path")
        abs_path = _absolute(target_path)
        with self._locks.write(abs_path):
            if self.find_by_path(abs_path) is not None:
                raise DuplicateError(f"仓库已添加: {abs_path}")

            existed = os.path.exists(abs_path)
            parent = os.path.dirname(abs_path)
            os.makedirs(parent, exist_ok=True)
            logger.info("开始克隆 %s -> %s", url, abs_path)
            try:
                result = self._backend.run(parent, ["clone", "--", url.strip(), abs_path])
            except OperationFailedError as e:
                self._cleanup_partial_clone(abs_path, existed)
                raise CloneFailedError(f"克隆失败: {e}", command=e.command) from e
            if not result.success:
                self._cleanup_partial_clone(abs_path, existed)
                raise CloneFailedError(
                    f"克隆失败: {failure_message(result)}",
                    command=["clone", url, abs_path], output=result.output,
                )

            with self._lock:
                if self.find_by_path(abs_path) is not None:
                    raise DuplicateError(f"仓库已添加: {abs_path}")
                record = self._store(abs_path, name, clone_url=url.strip())
        logger.info("仓库已克隆并注册: %s -> %s", record.name, record.path)
        return record

    # ---- 内部方法 ----

    def _store(self, abs_path: str, name: str, clone_url: str = "") -> RepoRecord:
        record = RepoRecord(
            id=str(uuid.uuid4()),
            path=abs_path,
            name=name or _default_name(abs_path),
            added_at=datetime.now(timezone.utc).isoformat(),
            clone_url=clone_url,
        )
        entry = record.to_dict()
        del entry["id"]
        self._put(record.id, entry)
        return record

    @staticmethod
    def _cleanup_partial_clone(abs_path: str, existed: bool) -> None:
        if existed or not os.path.exists(abs_path):
            return
        shutil.rmtree(abs_path, ignore_errors=True)
        logger.warning("克隆失败，已清理残留目录: %s", abs_path)
