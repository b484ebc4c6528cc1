"""仓库注册表 API Blueprint"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, request

from mygit.web.responses import fail, ok

repos_bp = Blueprint("repos", __name__, url_prefix="/api/repos")


def _container():  # type: ignore[no-untyped-def]
    from mygit.services.container import get_container
    return get_container()


def parse_limit(value: Any, default: int | None = None) -> int:
    """解析 limit 查询参数；缺省、非数字或负数回退到配置的 log_max_count"""
    if default is None:
        default = _container().config.log_max_count
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n >= 0 else default


@repos_bp.route("", methods=["GET"])
def list_all() -> Response:
    return ok(repos=_container().repos.list_all())


@repos_bp.route("/<repo_id>", methods=["GET"])
def get(repo_id: str) -> tuple[Response, int] | Response:
    record = _container().repos.get(repo_id)
    if record is None:
        return fail("仓库不存在", 404, code="NOT_FOUND")
    return ok(repo=record.to_dict())


@repos_bp.route("", methods=["POST"])
def add() -> tuple[Response, int] | Response:
    """按路径注册；同时给出 url 时改为克隆"""
    body = request.get_json(silent=True) or {}
    path = body.get("path", "")
    if not path:
        return fail("需要提供 path", 400, code="VALIDATION_ERROR")
    repos = _container().repos
    if body.get("url"):
        record = repos.clone(body["url"], path, body.get("name", ""))
    else:
        record = repos.add(path, body.get("name", ""))
    return ok(repo=record.to_dict())


@repos_bp.route("/clone", methods=["POST"])
def clone() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    url, path = body.get("url", ""), body.get("path", "")
    if not url or not path:
        return fail("需要提供 url 和 path", 400, code="VALIDATION_ERROR")
    record = _container().repos.clone(url, path, body.get("name", ""))
    return ok(repo=record.to_dict())


@repos_bp.route("/<repo_id>", methods=["PUT"])
def update(repo_id: str) -> Response:
    body = request.get_json(silent=True) or {}
    record = _container().repos.update(
        repo_id, name=body.get("name") or None, path=body.get("path") or None,
    )
    return ok(repo=record.to_dict())


@repos_bp.route("/<repo_id>", methods=["DELETE"])
def delete(repo_id: str) -> Response:
    _container().repos.remove(repo_id)
    return ok()


# ---- 按仓库的只读视图 ----

@repos_bp.route("/<repo_id>/status", methods=["GET"])
def status(repo_id: str) -> Response:
    handle = _container().gateway.open(repo_id)
    return ok(status=handle.status.status().to_dict())


@repos_bp.route("/<repo_id>/branches", methods=["GET"])
def branches(repo_id: str) -> Response:
    handle = _container().gateway.open(repo_id)
    return ok(branches=handle.branches.branches().to_dict())


@repos_bp.route("/<repo_id>/log", methods=["GET"])
def log(repo_id: str) -> Response:
    handle = _container().gateway.open(repo_id)
    limit = parse_limit(request.args.get("limit"))
    return ok(log=handle.history.log(max_count=limit).to_dict())
