"""合并与变基

冲突是需要用户解决的正常终态：返回 MergeOutcome(conflict=True)，不抛异常。
其他失败照常抛出。
"""

from __future__ import annotations

import logging

from mygit.core.exceptions import ValidationError
from mygit.core.models import MergeOutcome
from mygit.git.classify import classify_failure, is_conflict, is_index_locked
from mygit.services.git.base import GitExecutor
from mygit.utils.shell import CommandResult

logger = logging.getLogger(__name__)


class MergeExecutor(GitExecutor):
    """merge / rebase / rebase --abort / rebase --continue"""

    def merge(self, branch: str, *, no_ff: bool = False, squash: bool = False) -> MergeOutcome:
        branch = self._ref(branch, "branch")
        if no_ff and squash:
            raise ValidationError("no_ff 与 squash 不能同时使用")
        args = ["merge", "--no-edit"]
        if no_ff:
            args.append("--no-ff")
        if squash:
            args.append("--squash")
        args.append(branch)
        with self._writing():
            result = self._run(*args)
        return self._outcome(result, args, f"merge {branch}")

    def rebase(self, branch: str) -> MergeOutcome:
        branch = self._ref(branch, "branch")
        args = ["rebase", branch]
        with self._writing():
            result = self._run(*args)
        return self._outcome(result, args, f"rebase {branch}")

    def rebase_abort(self) -> None:
        with self._writing():
            self._git("rebase", "--abort")

    def rebase_continue(self) -> None:
        with self._writing():
            self._git("rebase", "--continue")

    def _outcome(self, result: CommandResult, args: list[str], action: str) -> MergeOutcome:
        if result.success:
            return MergeOutcome(success=True, message=result.stdout.strip())
        text = result.output
        if is_conflict(text) and not is_index_locked(text):
            logger.info("%s 产生冲突，等待用户解决: %s", action, self.path)
            return MergeOutcome(success=False, conflict=True, message=text.strip())
        raise classify_failure(result, args)
