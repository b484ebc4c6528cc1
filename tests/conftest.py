"""共享 fixture: 真实 git 仓库工厂 + 回放录制输出的后端

真实 git 用例在未安装 git 时跳过；回放后端用于不依赖 git 的执行器单元测试。
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from mygit.core.locks import PathLockManager
from mygit.utils.shell import CommandResult

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git 未安装")

_GIT_ENV = {**os.environ, "LC_ALL": "C", "GIT_EDITOR": "true", "GIT_TERMINAL_PROMPT": "0"}


def git(path: Path, *args: str) -> str:
    """在测试仓库中执行 git，失败即断言失败"""
    r = subprocess.run(
        ["git", *args], cwd=str(path), capture_output=True, text=True,
        check=False, env=_GIT_ENV,
    )
    assert r.returncode == 0, f"git {' '.join(args)} 失败: {r.stderr}"
    return r.stdout


def write(path: Path, name: str, content: str) -> Path:
    f = path / name
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def commit_file(path: Path, name: str, content: str, message: str) -> None:
    write(path, name, content)
    git(path, "add", name)
    git(path, "commit", "-q", "-m", message)


@pytest.fixture()
def make_repo(tmp_path: Path):
    """创建 main 分支上的测试仓库；commit=True 时带一个初始提交"""

    def _make(name: str = "repo", *, commit: bool = True) -> Path:
        path = tmp_path / name
        path.mkdir(parents=True)
        git(path, "init", "-q")
        git(path, "symbolic-ref", "HEAD", "refs/heads/main")
        git(path, "config", "user.name", "Test User")
        git(path, "config", "user.email", "test@example.com")
        git(path, "config", "commit.gpgsign", "false")
        git(path, "config", "tag.gpgsign", "false")
        if commit:
            commit_file(path, "README.md", "hello\n", "initial")
        return path

    return _make


class ScriptedBackend:
    """按参数前缀回放录制输出的后端，记录每次调用"""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._responses: list[tuple[tuple[str, ...], CommandResult]] = []

    def when(self, *prefix: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> ScriptedBackend:
        self._responses.append((prefix, CommandResult(returncode, stdout, stderr)))
        return self

    def run(self, path: str, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        # 后注册的规则优先
        for prefix, result in reversed(self._responses):
            if tuple(args[:len(prefix)]) == prefix:
                return result
        return CommandResult(0, "", "")


@pytest.fixture()
def scripted() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture()
def locks() -> PathLockManager:
    return PathLockManager()
