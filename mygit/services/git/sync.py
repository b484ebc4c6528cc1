"""远程同步: push / pull / fetch / prune / remotes"""

from __future__ import annotations

import logging

from mygit.core.models import FetchResult, PullResult, PushResult, RemoteInfo
from mygit.git import parsers
from mygit.services.git.base import GitExecutor

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


class SyncExecutor(GitExecutor):
    """与远程仓库同步"""

    def push(
        self, remote: str = DEFAULT_REMOTE, branch: str | None = None,
        *, set_upstream: bool = False,
    ) -> PushResult:
        remote = self._ref(remote or DEFAULT_REMOTE, "remote")
        branch = self._optional_ref(branch, "branch")
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        args.append(remote)
        if branch:
            args.append(branch)
        with self._writing():
            result = self._git(*args)
        pushed, _ = parsers.parse_ref_updates(result.stderr)
        logger.info("已推送 %s %s: %s", remote, branch or "(当前分支)", self.path)
        return PushResult(remote=remote, branch=branch, set_upstream=set_upstream, pushed=pushed)

    def pull(self, remote: str = DEFAULT_REMOTE, branch: str | None = None) -> PullResult:
        remote = self._ref(remote or DEFAULT_REMOTE, "remote")
        branch = self._optional_ref(branch, "branch")
        args = ["pull", "--stat", "--no-edit", remote]
        if branch:
            args.append(branch)
        with self._writing():
            result = self._git(*args)
        return parsers.parse_pull(result.stdout)

    def fetch(self, remote: str = DEFAULT_REMOTE, *, prune: bool = False) -> FetchResult:
        remote = self._ref(remote or DEFAULT_REMOTE, "remote")
        args = ["fetch", remote]
        if prune:
            args.append("--prune")
        with self._writing():
            result = self._git(*args)
        updated, pruned = parsers.parse_ref_updates(result.stderr)
        return FetchResult(remote=remote, updated=updated, pruned=pruned)

    def prune(self, remote: str = DEFAULT_REMOTE) -> FetchResult:
        """删除远程已不存在的远程跟踪分支"""
        remote = self._ref(remote or DEFAULT_REMOTE, "remote")
        with self._writing():
            result = self._git("remote", "prune", remote)
        _, pruned = parsers.parse_ref_updates(result.stdout)
        return FetchResult(remote=remote, pruned=pruned)

    def remotes(self) -> list[RemoteInfo]:
        with self._reading():
            result = self._git("remote", "-v")
        return parsers.parse_remotes(result.stdout)
