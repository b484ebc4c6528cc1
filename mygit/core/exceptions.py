"""统一异常体系

所有业务异常继承 MyGitError，替代散落的 ValueError / RuntimeError。
Web 层据 code 映射 HTTP 状态码，CLI 层据此输出友好提示。

注意: 合并/变基冲突不是异常，而是 MergeOutcome(conflict=True) 正常返回。
"""

from __future__ import annotations


class MyGitError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(MyGitError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class NotFoundError(MyGitError):
    """仓库 id 在注册表中不存在"""

    code = "NOT_FOUND"


class InvalidPathError(MyGitError):
    """路径不是可用的 Git 工作区（不存在、不可读或 git 不可用）"""

    code = "INVALID_PATH"


class DuplicateError(MyGitError):
    """路径已注册"""

    code = "DUPLICATE"


class ValidationError(MyGitError):
    """调用方提供的参数校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class IndexLockedError(MyGitError):
    """Git 索引被锁定（存在 index.lock），用户清理后可重试"""

    code = "INDEX_LOCKED"


class OperationFailedError(MyGitError):
    """其他 git 执行失败，保留原始输出用于诊断"""

    code = "OPERATION_FAILED"

    def __init__(
        self, message: str, *, command: list[str] | None = None, output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.output = output


class CloneFailedError(OperationFailedError):
    """git clone 失败"""

    code = "CLONE_FAILED"
