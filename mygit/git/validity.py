"""仓库有效性检查

只执行 `git rev-parse --git-dir`：不读取完整索引，不取任何锁。
失败是预期情况，只记 DEBUG 日志。
"""

from __future__ import annotations

import logging
import os

from mygit.core.exceptions import MyGitError
from mygit.git.backend import GitCliBackend, VcsBackend

logger = logging.getLogger(__name__)


def is_valid_repo(path: str, backend: VcsBackend | None = None) -> bool:
    """判断 path 是否为可用的 git 工作区"""
    if not path or not isinstance(path, str):
        return False
    if not os.path.isdir(path):
        return False
    backend = backend or GitCliBackend()
    try:
        result = backend.run(path, ["rev-parse", "--git-dir"])
    except (MyGitError, OSError) as e:
        logger.debug("有效性检查失败 %s: %s", path, e)
        return False
    if not result.success:
        logger.debug("不是 git 仓库: %s", path)
    return result.success
