"""Web 层统一响应辅助函数

所有响应都带 success 字段；失败时附带 error 与 code。
"""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

from mygit.core.exceptions import MyGitError

# 异常 code → HTTP 状态码
STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "INVALID_PATH": 400,
    "CLONE_FAILED": 400,
    "NOT_FOUND": 404,
    "DUPLICATE": 409,
    "INDEX_LOCKED": 423,
    "OPERATION_FAILED": 500,
    "CONFIG_ERROR": 500,
}


def ok(**data: Any) -> Response:
    """成功响应"""
    return jsonify(success=True, **data)


def fail(message: str, status: int = 400, **extra: Any) -> tuple[Response, int]:
    """失败响应"""
    return jsonify(success=False, error=message, **extra), status


def from_error(exc: MyGitError) -> tuple[Response, int]:
    """业务异常 → JSON 响应"""
    status = STATUS_BY_CODE.get(exc.code, 500)
    return fail(str(exc), status, code=exc.code)


def conflict(message: str) -> Response:
    """合并/变基冲突: 正常返回 200，由调用方根据 conflict 标记分支处理"""
    return jsonify(success=False, conflict=True, message=message)
