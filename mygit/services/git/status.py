"""状态 / 暂存 / 提交"""

from __future__ import annotations

import logging

from mygit.core.models import CommitResult, StatusSnapshot
from mygit.git import parsers
from mygit.services.git.base import GitExecutor

logger = logging.getLogger(__name__)


class StatusExecutor(GitExecutor):
    """工作区状态与索引操作"""

    def status(self) -> StatusSnapshot:
        with self._reading():
            result = self._git(*parsers.STATUS_ARGS)
        return parsers.parse_status(result.stdout)

    def stage(self, files: str | list[str] | None = None) -> None:
        """暂存文件；空列表表示全部"""
        paths = self._files(files)
        with self._writing():
            if paths:
                self._git("add", "--", *paths)
            else:
                self._git("add", "-A")

    def unstage(self, files: str | list[str] | None = None) -> None:
        """取消暂存；空列表表示全部"""
        paths = self._files(files)
        with self._writing():
            if self._run("rev-parse", "--verify", "-q", "HEAD").success:
                self._git("reset", "-q", "HEAD", "--", *paths)
                return
            # 尚无提交时 HEAD 不存在，只能从索引中移除
            if paths:
                self._git("rm", "--cached", "-r", "-q", "--", *paths)
            else:
                self._git("rm", "--cached", "-r", "-q", "--ignore-unmatch", ".")

    def commit(self, message: str) -> CommitResult:
        message = self._require(message, "message")
        with self._writing():
            result = self._git("commit", "-m", message)
        commit = parsers.parse_commit(result.stdout)
        logger.info("已提交 %s@%s: %s", commit.branch, commit.commit_id, self.path)
        return commit
