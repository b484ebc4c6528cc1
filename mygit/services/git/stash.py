"""贮藏: push / pop / apply / drop + 列表"""

from __future__ import annotations

from mygit.core.exceptions import ValidationError
from mygit.core.models import StashEntry, StashMode
from mygit.git import parsers
from mygit.services.git.base import GitExecutor


class StashExecutor(GitExecutor):

    def stash(self, mode: str = StashMode.PUSH.value, message: str = "", index: int = 0) -> None:
        """按模式执行单个贮藏操作；index 默认 0（最近一次）"""
        try:
            stash_mode = StashMode(mode or StashMode.PUSH.value)
        except ValueError:
            raise ValidationError(f"不支持的 stash 模式: {mode}") from None
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValidationError(f"stash index 必须是非负整数: {index!r}")

        if stash_mode is StashMode.PUSH:
            args = ["stash", "push"]
            if message:
                args += ["-m", message]
        else:
            args = ["stash", stash_mode.value, f"stash@{{{index}}}"]
        with self._writing():
            self._git(*args)

    def stash_list(self) -> list[StashEntry]:
        with self._reading():
            result = self._git(*parsers.STASH_LIST_ARGS)
        return parsers.parse_stash_list(result.stdout)
