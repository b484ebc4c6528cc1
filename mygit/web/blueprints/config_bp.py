"""应用设置 API Blueprint"""

from __future__ import annotations

from flask import Blueprint, Response, request

from mygit.web.responses import ok

config_bp = Blueprint("config", __name__, url_prefix="/api/config")


def _settings():  # type: ignore[no-untyped-def]
    from mygit.services.container import get_container
    return get_container().settings


@config_bp.route("", methods=["GET"])
def get_settings() -> Response:
    return ok(settings=_settings().get())


@config_bp.route("", methods=["PUT"])
def update_settings() -> Response:
    body = request.get_json(silent=True) or {}
    return ok(settings=_settings().update(body))
