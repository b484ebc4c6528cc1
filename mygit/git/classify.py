"""git 失败输出分类

基于子串匹配的尽力分类：锁冲突与合并冲突有固定英文标记
（backend 以 LC_ALL=C 运行 git），其余一律归为通用失败，不做猜测。
"""

from __future__ import annotations

from mygit.core.exceptions import IndexLockedError, OperationFailedError
from mygit.utils.shell import CommandResult

INDEX_LOCK_MARKERS = ("index.lock",)
CONFLICT_MARKERS = ("CONFLICT", "could not apply")

INDEX_LOCKED_MESSAGE = "Git 索引被锁定，请删除 .git/index.lock 后重试"


def is_index_locked(text: str) -> bool:
    return any(marker in text for marker in INDEX_LOCK_MARKERS)


def is_conflict(text: str) -> bool:
    return any(marker in text for marker in CONFLICT_MARKERS)


def failure_message(result: CommandResult) -> str:
    """取最有诊断价值的输出: stderr 优先，其次 stdout"""
    return (result.stderr.strip() or result.stdout.strip()
            or f"git 退出码 {result.returncode}")


def classify_failure(result: CommandResult, args: list[str] | None = None) -> Exception:
    """将失败结果映射为异常实例（锁标记优先于其他）"""
    text = result.output
    if is_index_locked(text):
        return IndexLockedError(INDEX_LOCKED_MESSAGE)
    return OperationFailedError(
        failure_message(result), command=list(args or []), output=text,
    )
