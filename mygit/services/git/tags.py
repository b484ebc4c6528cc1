"""标签: 创建（轻量 / 附注）/ 删除 / 列表"""

from __future__ import annotations

from mygit.core.models import TagList
from mygit.git import parsers
from mygit.services.git.base import GitExecutor


class TagExecutor(GitExecutor):

    def create(self, name: str, message: str = "", commit: str | None = None) -> str:
        """有 message 时创建附注标签，否则创建轻量标签"""
        name = self._ref(name, "name")
        args = ["tag", "-a", name, "-m", message] if message else ["tag", name]
        commit = self._optional_ref(commit, "commit")
        if commit:
            args.append(commit)
        with self._writing():
            self._git(*args)
        return name

    def delete(self, name: str) -> None:
        name = self._ref(name, "name")
        with self._writing():
            self._git("tag", "-d", name)

    def tags(self) -> TagList:
        with self._reading():
            result = self._git("tag", "--list", "--sort=version:refname")
        return TagList(tags=parsers.parse_lines(result.stdout))
