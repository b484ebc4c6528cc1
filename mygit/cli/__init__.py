"""mygit 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os
from typing import Any

import click

from mygit import __version__
from mygit.core.exceptions import MyGitError
from mygit.services.container import get_container
from mygit.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


class MyGitGroup(click.Group):
    """业务异常转为友好提示 + 非零退出码"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except MyGitError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e


@click.group(cls=MyGitGroup)
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path", default=lambda: os.getenv("MYGIT_CONFIG", ""),
    help="配置文件路径（默认读取 MYGIT_CONFIG）",
)
def main(config_path: str) -> None:
    """mygit - 本地 Git 仓库管理"""
    setup_logging(
        level=os.getenv("MYGIT_LOG_LEVEL", "INFO"),
        json_output=os.getenv("MYGIT_LOG_JSON", "") == "1",
    )
    if config_path:
        from mygit.core.config import init_config
        from mygit.services.container import reset_container
        init_config(config_path)
        reset_container()


# 注册各领域子命令
from mygit.cli.cmd_repo import register as _reg_repo  # noqa: E402
from mygit.cli.cmd_git import register as _reg_git  # noqa: E402
from mygit.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_repo(main)
_reg_git(main)
_reg_misc(main)
