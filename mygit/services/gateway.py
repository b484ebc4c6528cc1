"""操作网关: 仓库 id → 记录 + 有效性 → 操作句柄"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mygit.core.exceptions import NotFoundError, ValidationError
from mygit.core.models import RepoRecord
from mygit.services.git import GitService

if TYPE_CHECKING:
    from mygit.core.locks import PathLockManager
    from mygit.git.backend import VcsBackend
    from mygit.services.repo_service import RepoService

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRepo:
    record: RepoRecord
    valid: bool


class OperationGateway:
    """解析请求中的仓库 id 并构造绑定路径的 GitService

    无效路径不在此处拦截，由调用方决定是否继续；git 会自然失败。
    """

    def __init__(
        self,
        repos: RepoService,
        backend: VcsBackend,
        locks: PathLockManager,
        protected_branches: list[str] | None = None,
    ) -> None:
        self._repos = repos
        self._backend = backend
        self._locks = locks
        self._protected = protected_branches

    def resolve(self, repo_id: str) -> ResolvedRepo:
        if not repo_id:
            raise ValidationError("需要提供 repoId")
        record = self._repos.get(repo_id)
        if record is None:
            raise NotFoundError(f"仓库不存在: {repo_id}")
        return ResolvedRepo(record=record, valid=self._repos.is_valid(record.path))

    def open(self, repo_id: str) -> GitService:
        resolved = self.resolve(repo_id)
        if not resolved.valid:
            logger.warning("仓库路径当前无效，仍尝试执行: %s", resolved.record.path)
        return GitService(
            resolved.record, self._backend, self._locks,
            valid=resolved.valid, protected_branches=self._protected,
        )
