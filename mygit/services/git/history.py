"""历史与差异: log / diff / diff-summary / reset / revert"""

from __future__ import annotations

import logging

from mygit.core.exceptions import MyGitError, ValidationError
from mygit.core.models import DiffResult, DiffSummary, LogResult, ResetMode
from mygit.git import parsers
from mygit.services.git.base import GitExecutor

logger = logging.getLogger(__name__)

DEFAULT_LOG_COUNT = 100


class HistoryExecutor(GitExecutor):
    """提交历史、差异与回退"""

    def log(self, max_count: int = DEFAULT_LOG_COUNT) -> LogResult:
        """最新在前的提交列表

        git 失败（空仓库、历史损坏等）时返回空结果而不是抛出，
        失败原因以 WARNING 记录，调用方看到的是"没有提交"。
        """
        if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count < 0:
            raise ValidationError(f"max_count 必须是非负整数: {max_count!r}")
        with self._reading():
            try:
                result = self._git("log", f"--max-count={max_count}", parsers.LOG_FORMAT)
            except MyGitError as e:
                return self._empty_log_on_failure(e)
        return LogResult(commits=parsers.parse_log(result.stdout))

    def _empty_log_on_failure(self, error: MyGitError) -> LogResult:
        logger.warning("读取提交历史失败，返回空列表 %s: %s", self.path, error)
        return LogResult()

    def diff(
        self, file: str | None = None, commit1: str | None = None,
        commit2: str | None = None, cached: bool = False,
    ) -> DiffResult:
        """选择器优先级: 提交对 > 单文件 > 仅暂存区 > 整个工作区"""
        commit1 = self._optional_ref(commit1, "commit1")
        commit2 = self._optional_ref(commit2, "commit2")
        if commit1 and commit2:
            args = ["diff", commit1, commit2]
        elif file:
            args = ["diff", "--", file]
        elif cached:
            args = ["diff", "--cached"]
        else:
            args = ["diff"]
        with self._reading():
            result = self._git(*args)
        return DiffResult(diff=result.stdout)

    def diff_summary(self, cached: bool = False) -> DiffSummary:
        args = ["diff", "--numstat"]
        if cached:
            args.append("--cached")
        with self._reading():
            result = self._git(*args)
        return DiffSummary(files=parsers.parse_numstat(result.stdout))

    def reset_to(self, commit: str, mode: str = ResetMode.MIXED.value) -> None:
        commit = self._ref(commit, "commit")
        try:
            reset_mode = ResetMode(mode or ResetMode.MIXED.value)
        except ValueError:
            raise ValidationError(f"不支持的 reset 模式: {mode}") from None
        with self._writing():
            self._git("reset", f"--{reset_mode.value}", commit)
        logger.info("已 reset --%s 到 %s: %s", reset_mode.value, commit, self.path)

    def revert(self, commit: str, no_commit: bool = False) -> None:
        commit = self._ref(commit, "commit")
        args = ["revert", "--no-edit"]
        if no_commit:
            args.append("--no-commit")
        args.append(commit)
        with self._writing():
            self._git(*args)
