"""执行器基类

每个操作族一个执行器，绑定到单个工作区路径。
读操作取该路径的读锁，写操作取写锁；锁在 with 块退出时无条件释放。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from mygit.core.exceptions import ValidationError
from mygit.core.locks import PathLockManager
from mygit.git.backend import VcsBackend
from mygit.git.classify import classify_failure
from mygit.utils.shell import CommandResult

logger = logging.getLogger(__name__)


class GitExecutor:
    """操作执行器公共基类"""

    def __init__(self, path: str, backend: VcsBackend, locks: PathLockManager) -> None:
        self.path = path
        self._backend = backend
        self._locks = locks

    @contextmanager
    def _reading(self) -> Iterator[None]:
        with self._locks.read(self.path):
            yield

    @contextmanager
    def _writing(self) -> Iterator[None]:
        with self._locks.write(self.path):
            yield

    def _run(self, *args: str) -> CommandResult:
        """执行 git，不检查返回码（调用方自行分类）"""
        return self._backend.run(self.path, list(args))

    def _git(self, *args: str) -> CommandResult:
        """执行 git，失败时抛出分类后的异常"""
        result = self._run(*args)
        if not result.success:
            raise classify_failure(result, list(args))
        return result

    @staticmethod
    def _require(value: Any, field: str) -> str:
        """必填参数校验，在调用 git 之前执行"""
        if value is None or not str(value).strip():
            raise ValidationError(f"参数 '{field}' 为必填")
        return str(value)

    @classmethod
    def _ref(cls, value: Any, field: str) -> str:
        """必填的引用名（分支 / 提交 / 标签 / 远程），不允许以 - 开头被 git 当作选项"""
        ref = cls._require(value, field).strip()
        if ref.startswith("-"):
            raise ValidationError(f"参数 '{field}' 不能以 - 开头: {ref}")
        return ref

    @classmethod
    def _optional_ref(cls, value: Any, field: str) -> str | None:
        if value is None or not str(value).strip():
            return None
        return cls._ref(value, field)

    @staticmethod
    def _files(files: str | list[str] | None) -> list[str]:
        """文件参数: None / 空表示全部，单个字符串视为一个路径"""
        if files is None:
            return []
        if isinstance(files, str):
            files = [files]
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ValidationError("files 必须是路径字符串或路径数组")
        return [f for f in files if f]
