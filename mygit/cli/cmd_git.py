"""只读 git 视图命令"""

from __future__ import annotations

import click

from mygit.cli import _svc


def register(main: click.Group) -> None:
    main.add_command(git_group)


@click.group(name="git")
def git_group() -> None:
    """查看已注册仓库的 git 状态"""


@git_group.command(name="status")
@click.argument("repo_id")
def git_status(repo_id: str) -> None:
    """工作区状态"""
    snap = _svc().gateway.open(repo_id).status.status()
    branch = snap.branch or "(detached)"
    upstream = f" ... {snap.tracking} [+{snap.ahead} -{snap.behind}]" if snap.tracking else ""
    click.echo(f"分支: {branch}{upstream}")
    for f in snap.files:
        click.echo(f"  {f.index_state.value:10s} {f.working_state.value:10s} {f.path}")


@git_group.command(name="log")
@click.argument("repo_id")
@click.option("-n", "--limit", default=20, type=click.IntRange(min=0), help="最多显示条数")
def git_log(repo_id: str, limit: int) -> None:
    """提交历史"""
    result = _svc().gateway.open(repo_id).history.log(max_count=limit)
    for c in result.commits:
        refs = f" ({', '.join(c.refs)})" if c.refs else ""
        click.echo(f"  {c.short_hash} {c.message}{refs}  - {c.author_name}")


@git_group.command(name="branches")
@click.argument("repo_id")
def git_branches(repo_id: str) -> None:
    """本地与远程分支"""
    branches = _svc().gateway.open(repo_id).branches.branches()
    for b in branches.local:
        click.echo(f"{'*' if b.is_current else ' '} {b.name}")
    for b in branches.remote:
        click.echo(f"  remotes/{b.name}")


@git_group.command(name="stale")
@click.argument("repo_id")
@click.option("--remote", default="", help="远程名（默认取配置）")
@click.option("--delete", is_flag=True, help="删除找到的过期分支")
@click.option("--force", is_flag=True, help="强制删除未合并的分支")
def git_stale(repo_id: str, remote: str, delete: bool, force: bool) -> None:
    """列出（并可删除）远程已不存在的本地分支"""
    svc = _svc()
    handle = svc.gateway.open(repo_id)
    report = handle.branches.stale(remote or svc.config.default_remote)
    if not report.stale_branches:
        click.echo("没有过期分支。")
        return
    for name in report.stale_branches:
        click.echo(f"  {name}")
    if delete:
        for r in handle.branches.delete_many(report.stale_branches, force=force):
            click.echo(f"  {'已删除' if r.success else '删除失败'}: {r.name} {r.error}")
