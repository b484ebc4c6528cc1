"""Web API（基于 Flask）

提供：仓库注册表、git 操作、应用设置三组资源。

启动方式: mygit serve --port 3000
生产部署: gunicorn --config deploy/gunicorn.conf.py mygit.web.app:app
"""

from __future__ import annotations

import logging

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from mygit.core.exceptions import MyGitError
from mygit.web.blueprints import config_bp, git_bp, repos_bp
from mygit.web.responses import fail, from_error

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1 MB，请求体只有 JSON 参数

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
app.register_blueprint(repos_bp)
app.register_blueprint(git_bp)
app.register_blueprint(config_bp)


@app.before_request
def log_request() -> None:
    logger.info("%s %s", request.method, request.full_path.rstrip("?"))


# =========================================================================
# 全局 JSON 错误处理
# =========================================================================


@app.errorhandler(MyGitError)
def handle_mygit_error(exc: MyGitError):
    if exc.code == "OPERATION_FAILED":
        logger.warning("git 操作失败: %s", exc)
    return from_error(exc)


@app.errorhandler(HTTPException)
def handle_http_exception(exc: HTTPException):
    """将所有 HTTP 异常统一返回 JSON"""
    return fail(exc.description or exc.name, exc.code or 500)


@app.errorhandler(Exception)
def handle_generic_exception(exc: Exception):  # noqa: ARG001
    """捕获未处理异常，返回 500 JSON"""
    logger.exception("未处理的异常")
    return fail("服务器内部错误", 500)


def run_server(port: int = 3000, debug: bool = False, host: str = "127.0.0.1") -> None:
    logger.info("mygit 服务已启动: http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug, threaded=True)
