"""仓库注册表命令"""

from __future__ import annotations

import click

from mygit.cli import _svc


def register(main: click.Group) -> None:
    main.add_command(repo_group)


@click.group(name="repo")
def repo_group() -> None:
    """仓库注册表管理"""


@repo_group.command(name="list")
def repo_list() -> None:
    """列出已注册的仓库"""
    repos = _svc().repos.list_all()
    if not repos:
        click.echo("没有已注册的仓库。")
        return
    for r in repos:
        mark = "ok " if r["valid"] else "BAD"
        click.echo(f"  [{mark}] {r['id']}  {r['name']:20s} {r['path']}")


@repo_group.command(name="add")
@click.argument("path")
@click.option("--name", default="", help="显示名称（默认取目录名）")
def repo_add(path: str, name: str) -> None:
    """注册已有的本地工作区"""
    record = _svc().repos.add(path, name)
    click.echo(f"仓库已注册: {record.name} ({record.id})")


@repo_group.command(name="clone")
@click.argument("url")
@click.argument("path")
@click.option("--name", default="", help="显示名称（默认取目录名）")
def repo_clone(url: str, path: str, name: str) -> None:
    """克隆远程仓库并注册"""
    record = _svc().repos.clone(url, path, name)
    click.echo(f"仓库已克隆: {record.name} ({record.id}) -> {record.path}")


@repo_group.command(name="rename")
@click.argument("repo_id")
@click.argument("name")
def repo_rename(repo_id: str, name: str) -> None:
    """修改显示名称"""
    record = _svc().repos.update(repo_id, name=name)
    click.echo(f"仓库已更新: {record.name}")


@repo_group.command(name="remove")
@click.argument("repo_id")
def repo_remove(repo_id: str) -> None:
    """移除注册记录（不删除工作区）"""
    _svc().repos.remove(repo_id)
    click.echo(f"仓库已移除: {repo_id}")
