"""git 操作 API Blueprint

每个请求通过 repoId（query 或 JSON body）定位仓库，由网关构造操作句柄。
参数缺失在调用 git 之前返回 400；合并/变基冲突返回 200 + conflict=true。
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flask import Blueprint, Response, request

from mygit.core.exceptions import ValidationError
from mygit.services.git import GitService
from mygit.web.blueprints.repos_bp import parse_limit
from mygit.web.responses import conflict, ok

git_bp = Blueprint("git", __name__, url_prefix="/api/git")


def _body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _handle() -> GitService:
    from mygit.services.container import get_container
    repo_id = request.args.get("repoId") or _body().get("repoId", "")
    return get_container().gateway.open(repo_id)


def _remote(value: str | None) -> str:
    from mygit.services.container import get_container
    return value or get_container().config.default_remote


def _required(body: dict[str, Any], key: str) -> Any:
    value = body.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"需要提供 {key}")
    return value


def _flag(value: Any) -> bool:
    """JSON 布尔或 query 字符串 'true'"""
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


# ---- 状态 / 暂存 / 提交 ----

@git_bp.route("/status", methods=["GET"])
def status() -> Response:
    return ok(status=_handle().status.status().to_dict())


@git_bp.route("/add", methods=["POST"])
def stage() -> Response:
    _handle().status.stage(_body().get("files"))
    return ok()


@git_bp.route("/reset", methods=["POST"])
def unstage() -> Response:
    _handle().status.unstage(_body().get("files"))
    return ok()


@git_bp.route("/commit", methods=["POST"])
def commit() -> Response:
    body = _body()
    message = _required(body, "message")
    result = _handle().status.commit(message)
    return ok(result=asdict(result))


# ---- 远程同步 ----

@git_bp.route("/push", methods=["POST"])
def push() -> Response:
    body = _body()
    result = _handle().sync.push(
        _remote(body.get("remote")), body.get("branch") or None,
        set_upstream=_flag(body.get("setUpstream")),
    )
    return ok(result=asdict(result))


@git_bp.route("/pull", methods=["POST"])
def pull() -> Response:
    body = _body()
    result = _handle().sync.pull(_remote(body.get("remote")), body.get("branch") or None)
    return ok(result=asdict(result))


@git_bp.route("/fetch", methods=["POST"])
def fetch() -> Response:
    body = _body()
    result = _handle().sync.fetch(_remote(body.get("remote")), prune=_flag(body.get("prune")))
    return ok(result=asdict(result))


@git_bp.route("/prune", methods=["POST"])
def prune() -> Response:
    result = _handle().sync.prune(_remote(_body().get("remote")))
    return ok(result=asdict(result))


@git_bp.route("/remotes", methods=["GET"])
def remotes() -> Response:
    return ok(remotes=[asdict(r) for r in _handle().sync.remotes()])


# ---- 分支 ----

@git_bp.route("/branches", methods=["GET"])
def branches() -> Response:
    return ok(branches=_handle().branches.branches().to_dict())


@git_bp.route("/stale-branches", methods=["GET"])
def stale_branches() -> Response:
    report = _handle().branches.stale(_remote(request.args.get("remote")))
    return ok(**report.to_dict())


@git_bp.route("/delete-branches", methods=["POST"])
def delete_branches() -> Response:
    body = _body()
    names = body.get("branches")
    if not isinstance(names, list) or not names:
        raise ValidationError("需要提供 branches 数组")
    results = _handle().branches.delete_many(names, force=_flag(body.get("force")))
    return ok(results=[asdict(r) for r in results])


@git_bp.route("/branch", methods=["POST"])
def create_branch() -> Response:
    body = _body()
    name = _required(body, "name")
    branch = _handle().branches.create(name, body.get("startPoint") or None)
    return ok(result={"branch": branch})


@git_bp.route("/branch", methods=["DELETE"])
def delete_branch() -> Response:
    body = _body()
    name = _required(body, "name")
    _handle().branches.delete(name, force=_flag(body.get("force")))
    return ok()


@git_bp.route("/checkout", methods=["POST"])
def checkout() -> Response:
    body = _body()
    branch = _required(body, "branch")
    _handle().branches.checkout(branch)
    return ok(branch=branch)


@git_bp.route("/checkout-remote", methods=["POST"])
def checkout_remote() -> Response:
    body = _body()
    remote_branch = _required(body, "remoteBranch")
    local = _handle().branches.checkout_remote(remote_branch, body.get("localBranch") or None)
    return ok(localBranch=local, remoteBranch=remote_branch)


@git_bp.route("/rename-branch", methods=["POST"])
def rename_branch() -> Response:
    body = _body()
    old_name, new_name = _required(body, "oldName"), _required(body, "newName")
    _handle().branches.rename(old_name, new_name)
    return ok()


# ---- 历史 / 差异 ----

@git_bp.route("/log", methods=["GET"])
def log() -> Response:
    limit = parse_limit(request.args.get("limit"))
    return ok(log=_handle().history.log(max_count=limit).to_dict())


@git_bp.route("/diff", methods=["GET"])
def diff() -> Response:
    args = request.args
    result = _handle().history.diff(
        file=args.get("file") or None,
        commit1=args.get("commit1") or None,
        commit2=args.get("commit2") or None,
        cached=_flag(args.get("cached", "")),
    )
    return ok(diff=result.diff)


@git_bp.route("/diff-summary", methods=["GET"])
def diff_summary() -> Response:
    summary = _handle().history.diff_summary(cached=_flag(request.args.get("cached", "")))
    return ok(summary=summary.to_dict())


@git_bp.route("/reset-to", methods=["POST"])
def reset_to() -> Response:
    body = _body()
    commit_ref = _required(body, "commit")
    _handle().history.reset_to(commit_ref, body.get("mode") or "mixed")
    return ok()


@git_bp.route("/revert", methods=["POST"])
def revert() -> Response:
    body = _body()
    commit_ref = _required(body, "commit")
    _handle().history.revert(commit_ref, no_commit=_flag(body.get("noCommit")))
    return ok()


# ---- 合并 / 变基 ----

@git_bp.route("/merge", methods=["POST"])
def merge() -> Response:
    body = _body()
    branch = _required(body, "branch")
    outcome = _handle().merge.merge(
        branch, no_ff=_flag(body.get("noFF")), squash=_flag(body.get("squash")),
    )
    return ok(conflict=False, message=outcome.message) if outcome.success else conflict(outcome.message)


@git_bp.route("/rebase", methods=["POST"])
def rebase() -> Response:
    branch = _required(_body(), "branch")
    outcome = _handle().merge.rebase(branch)
    return ok(conflict=False, message=outcome.message) if outcome.success else conflict(outcome.message)


@git_bp.route("/rebase/abort", methods=["POST"])
def rebase_abort() -> Response:
    _handle().merge.rebase_abort()
    return ok()


@git_bp.route("/rebase/continue", methods=["POST"])
def rebase_continue() -> Response:
    _handle().merge.rebase_continue()
    return ok()


# ---- 贮藏 ----

def _stash_mode(body: dict[str, Any]) -> str:
    """兼容 {pop: true} 形式与 {mode: "pop"} 形式"""
    if body.get("mode"):
        return str(body["mode"])
    flags = [m for m in ("pop", "apply", "drop") if _flag(body.get(m))]
    if len(flags) > 1:
        raise ValidationError("pop / apply / drop 只能指定一个")
    return flags[0] if flags else "push"


@git_bp.route("/stash", methods=["POST"])
def stash() -> Response:
    body = _body()
    index = body.get("index", 0)
    try:
        index = int(index or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"stash index 必须是非负整数: {index!r}") from None
    _handle().stash.stash(_stash_mode(body), message=body.get("message") or "", index=index)
    return ok()


@git_bp.route("/stash/list", methods=["GET"])
def stash_list() -> Response:
    return ok(stashes=[asdict(s) for s in _handle().stash.stash_list()])


# ---- 标签 ----

@git_bp.route("/tag", methods=["POST"])
def create_tag() -> Response:
    body = _body()
    name = _required(body, "name")
    _handle().tags.create(name, body.get("message") or "", body.get("commit") or None)
    return ok(tag=name)


@git_bp.route("/tag", methods=["DELETE"])
def delete_tag() -> Response:
    name = _required(_body(), "name")
    _handle().tags.delete(name)
    return ok()


@git_bp.route("/tags", methods=["GET"])
def tags() -> Response:
    return ok(**_handle().tags.tags().to_dict())
