"""服务启动命令"""

from __future__ import annotations

import click

from mygit.cli import _svc


def register(main: click.Group) -> None:
    main.add_command(serve)


@click.command()
@click.option("--host", default="", help="监听地址（默认取配置）")
@click.option("--port", default=0, type=int, help="监听端口（默认取配置）")
def serve(host: str, port: int) -> None:
    """启动 Web API 服务"""
    from mygit.web.app import run_server
    cfg = _svc().config
    run_server(port=port or cfg.port, host=host or cfg.host)
