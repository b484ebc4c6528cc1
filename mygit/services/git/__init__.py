"""git 操作执行器

拆分说明:
- base.py: 执行器基类（加锁 / 调用 / 失败分类 / 参数校验）
- status.py: 状态、暂存、提交
- sync.py: push / pull / fetch / prune / remotes
- branches.py: 分支管理、批量删除、过期分支
- history.py: log / diff / reset / revert
- merge.py: merge / rebase
- stash.py: 贮藏
- tags.py: 标签

GitService 把各执行器绑定到同一个已解析的工作区路径。
"""

from __future__ import annotations

from mygit.core.locks import PathLockManager
from mygit.core.models import RepoRecord
from mygit.git.backend import VcsBackend
from mygit.services.git.base import GitExecutor
from mygit.services.git.branches import BranchExecutor
from mygit.services.git.history import HistoryExecutor
from mygit.services.git.merge import MergeExecutor
from mygit.services.git.stash import StashExecutor
from mygit.services.git.status import StatusExecutor
from mygit.services.git.sync import SyncExecutor
from mygit.services.git.tags import TagExecutor


class GitService:
    """单个仓库的操作句柄（每个请求构造一次）"""

    def __init__(
        self,
        record: RepoRecord,
        backend: VcsBackend,
        locks: PathLockManager,
        *,
        valid: bool = True,
        protected_branches: list[str] | None = None,
    ) -> None:
        self.record = record
        self.valid = valid
        path = record.path
        self.status = StatusExecutor(path, backend, locks)
        self.sync = SyncExecutor(path, backend, locks)
        self.branches = BranchExecutor(path, backend, locks, protected=protected_branches)
        self.history = HistoryExecutor(path, backend, locks)
        self.merge = MergeExecutor(path, backend, locks)
        self.stash = StashExecutor(path, backend, locks)
        self.tags = TagExecutor(path, backend, locks)

    @property
    def path(self) -> str:
        return self.record.path


__all__ = [
    "GitService",
    "GitExecutor",
    "StatusExecutor",
    "SyncExecutor",
    "BranchExecutor",
    "HistoryExecutor",
    "MergeExecutor",
    "StashExecutor",
    "TagExecutor",
]
