"""Git 后端: 所有 git 子进程调用的唯一出口

VcsBackend 协议只暴露 run()：输入工作区路径与参数，返回原始文本结果。
输出解析在 parsers.py，失败分类在 classify.py，二者都不感知子进程。
测试可注入按参数回放录制输出的实现。
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from mygit.core.exceptions import OperationFailedError
from mygit.utils.shell import CommandExecutor, CommandResult, LocalExecutor

logger = logging.getLogger(__name__)

# 非交互、不抢占可选索引锁、英文输出（冲突/锁标记匹配依赖英文文本）
GIT_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_EDITOR": "true",
    "GIT_SEQUENCE_EDITOR": "true",
    "GIT_MERGE_AUTOEDIT": "no",
    "GIT_OPTIONAL_LOCKS": "0",
    "LC_ALL": "C",
    "LANG": "C",
}


class VcsBackend(Protocol):
    """版本控制后端协议"""

    def run(self, path: str, args: list[str]) -> CommandResult:
        """在 path 下执行一条 git 子命令，非零退出码不抛异常"""
        ...


class GitCliBackend:
    """通过 git 命令行实现的后端"""

    def __init__(self, binary: str = "git", executor: CommandExecutor | None = None) -> None:
        self.binary = binary
        self._executor = executor or LocalExecutor()
        self._env = {**os.environ, **GIT_ENV}

    def run(self, path: str, args: list[str]) -> CommandResult:
        cmd = [self.binary, *args]
        try:
            result = self._executor.execute(cmd, cwd=path, env=self._env)
        except OSError as e:
            # git 未安装或工作区目录不存在
            raise OperationFailedError(f"无法执行 git: {e}", command=cmd) from e
        context = {
            "repo": path, "command": args, "returncode": result.returncode,
            "duration": round(result.duration, 3),
        }
        if result.success:
            logger.debug("git %s (%.2fs)", " ".join(args[:2]), result.duration, extra=context)
        else:
            logger.debug("git 返回非零 (rc=%d): %s\n%s", result.returncode, cmd, result.output, extra=context)
        return result
