"""分支: 列表 / 创建 / 切换 / 重命名 / 删除 / 批量删除 / 过期分支"""

from __future__ import annotations

import logging

from mygit.core.config import DEFAULT_PROTECTED_BRANCHES
from mygit.core.exceptions import MyGitError
from mygit.core.locks import PathLockManager
from mygit.core.models import BranchDeleteResult, BranchSet, StaleBranchReport
from mygit.git import parsers
from mygit.git.backend import VcsBackend
from mygit.services.git.base import GitExecutor
from mygit.services.git.sync import DEFAULT_REMOTE

logger = logging.getLogger(__name__)


class BranchExecutor(GitExecutor):
    """分支管理"""

    def __init__(
        self, path: str, backend: VcsBackend, locks: PathLockManager,
        protected: list[str] | None = None,
    ) -> None:
        super().__init__(path, backend, locks)
        names = DEFAULT_PROTECTED_BRANCHES if protected is None else protected
        self.protected = {n.lower() for n in names}

    def _list(self) -> BranchSet:
        return parsers.parse_branches(self._git(*parsers.BRANCH_ARGS).stdout)

    def branches(self) -> BranchSet:
        with self._reading():
            return self._list()

    def create(self, name: str, start_point: str | None = None) -> str:
        """创建并切换到新分支"""
        name = self._ref(name, "name")
        args = ["checkout", "-b", name]
        start_point = self._optional_ref(start_point, "start_point")
        if start_point:
            args.append(start_point)
        with self._writing():
            self._git(*args)
        logger.info("已创建分支 %s: %s", name, self.path)
        return name

    def checkout(self, branch: str) -> str:
        """仅切换，不创建"""
        branch = self._ref(branch, "branch")
        with self._writing():
            self._git("checkout", branch)
        return branch

    def checkout_remote(self, remote_branch: str, local_branch: str | None = None) -> str:
        """以远程分支为起点创建本地跟踪分支"""
        remote_branch = self._ref(remote_branch, "remote_branch")
        local = self._ref(local_branch or remote_branch.split("/", 1)[-1], "local_branch")
        with self._writing():
            self._git("checkout", "-b", local, "--track", remote_branch)
        return local

    def rename(self, old_name: str, new_name: str) -> None:
        old_name = self._ref(old_name, "old_name")
        new_name = self._ref(new_name, "new_name")
        with self._writing():
            self._git("branch", "-m", old_name, new_name)

    def delete(self, name: str, force: bool = False) -> None:
        name = self._ref(name, "name")
        with self._writing():
            self._git("branch", "-D" if force else "-d", name)

    def delete_many(self, names: list[str], force: bool = False) -> list[BranchDeleteResult]:
        """逐个删除，单个失败不影响其余分支"""
        results = []
        with self._writing():
            for raw in names:
                try:
                    name = self._ref(raw, "name")
                    self._git("branch", "-D" if force else "-d", name)
                    results.append(BranchDeleteResult(name=name, success=True))
                except MyGitError as e:
                    results.append(BranchDeleteResult(name=str(raw), success=False, error=str(e)))
        deleted = sum(1 for r in results if r.success)
        logger.info("批量删除分支 %d/%d 成功: %s", deleted, len(results), self.path)
        return results

    def stale(self, remote: str = DEFAULT_REMOTE) -> StaleBranchReport:
        """先 fetch --prune 刷新远程跟踪分支，再找出远程已不存在的本地分支

        排除当前分支与受保护分支（大小写不敏感），按名称排序。
        """
        remote = self._ref(remote or DEFAULT_REMOTE, "remote")
        with self._writing():
            self._git("fetch", remote, "--prune")
            branches = self._list()
        prefix = f"{remote}/"
        remote_names = {b.name[len(prefix):] for b in branches.remote if b.name.startswith(prefix)}
        stale = sorted(
            b.name for b in branches.local
            if b.name != branches.current
            and b.name.lower() not in self.protected
            and b.name not in remote_names
        )
        return StaleBranchReport(stale_branches=stale, current_branch=branches.current)
