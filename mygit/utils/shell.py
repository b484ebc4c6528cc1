"""子进程执行

GitCliBackend 经由 CommandExecutor 协议调用 git，测试可注入替身而不 patch subprocess。
参数以列表形式传递，从不经过 shell。
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """一次命令执行的原始结果"""

    returncode: int
    stdout: str
    stderr: str
    duration: float = 0.0  # 秒

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout + stderr 合并文本（git 的冲突提示写在 stdout，错误写在 stderr）"""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class CommandExecutor(Protocol):

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """执行命令；非零退出码不抛异常，OSError 原样抛出"""
        ...


class LocalExecutor:
    """在本机直接执行参数列表

    stdin 接 /dev/null，子进程不可能等待交互输入；
    输出按 UTF-8 解码，无法解码的字节替换而不是报错（文件名可能是任意编码）。
    """

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        started = time.monotonic()
        r = subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", errors="replace",
            cwd=cwd, env=env, check=False, timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
        return CommandResult(r.returncode, r.stdout, r.stderr, time.monotonic() - started)
