"""核心数据模型

注册表记录 + 各类 git 操作的规范化结果。所有结果都是每次调用现算的
只读快照，Web 层通过 to_dict() 序列化。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

# =========================================================================
# 注册表
# =========================================================================


@dataclass
class RepoRecord:
    """已注册的仓库

    id 是稳定的不透明标识，path 为规范化后的绝对路径。
    有效性不存储，每次列出/解析时重新计算。
    """

    id: str
    path: str
    name: str
    added_at: str = ""
    clone_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, repo_id: str, entry: dict[str, Any]) -> RepoRecord:
        return cls(
            id=repo_id,
            path=entry.get("path", ""),
            name=entry.get("name", ""),
            added_at=entry.get("added_at", ""),
            clone_url=entry.get("clone_url", ""),
        )


# =========================================================================
# 状态
# =========================================================================


class FileState(str, Enum):
    """文件在索引区 / 工作区中的状态"""
    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNTRACKED = "untracked"
    IGNORED = "ignored"
    CONFLICTED = "conflicted"


_NOT_STAGED = (FileState.UNMODIFIED, FileState.UNTRACKED, FileState.IGNORED)


@dataclass
class FileEntry:
    """状态快照中的单个文件"""

    path: str
    index_state: FileState = FileState.UNMODIFIED
    working_state: FileState = FileState.UNMODIFIED
    orig_path: str = ""  # 重命名/复制的原路径

    @property
    def staged(self) -> bool:
        return self.index_state not in _NOT_STAGED

    @property
    def unstaged(self) -> bool:
        return self.working_state != FileState.UNMODIFIED

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "index_state": self.index_state.value,
            "working_state": self.working_state.value,
            "orig_path": self.orig_path,
            "staged": self.staged,
            "unstaged": self.unstaged,
        }


@dataclass
class StatusSnapshot:
    """git status 快照"""

    branch: str | None = None     # 分离 HEAD 时为 None
    tracking: str | None = None   # 上游跟踪分支
    ahead: int = 0
    behind: int = 0
    files: list[FileEntry] = field(default_factory=list)

    def _paths(self, pred: Any) -> list[str]:
        return [f.path for f in self.files if pred(f)]

    @property
    def staged(self) -> list[str]:
        return self._paths(lambda f: f.staged)

    @property
    def conflicted(self) -> list[str]:
        return self._paths(
            lambda f: FileState.CONFLICTED in (f.index_state, f.working_state),
        )

    @property
    def not_added(self) -> list[str]:
        return self._paths(lambda f: f.working_state == FileState.UNTRACKED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.branch,
            "tracking": self.tracking,
            "ahead": self.ahead,
            "behind": self.behind,
            "staged": self.staged,
            "modified": self._paths(lambda f: FileState.MODIFIED in (f.index_state, f.working_state)),
            "created": self._paths(lambda f: f.index_state == FileState.ADDED),
            "deleted": self._paths(lambda f: FileState.DELETED in (f.index_state, f.working_state)),
            "renamed": self._paths(lambda f: f.index_state == FileState.RENAMED),
            "conflicted": self.conflicted,
            "not_added": self.not_added,
            "files": [f.to_dict() for f in self.files],
        }


# =========================================================================
# 分支
# =========================================================================


@dataclass
class BranchEntry:
    name: str
    is_current: bool = False


@dataclass
class BranchSet:
    """本地 + 远程跟踪分支集合"""

    current: str | None = None
    local: list[BranchEntry] = field(default_factory=list)
    remote: list[BranchEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "local": [{"name": b.name, "is_current": b.is_current} for b in self.local],
            "remote": [{"name": b.name} for b in self.remote],
        }


@dataclass
class StaleBranchReport:
    """远程已不存在的本地分支"""

    stale_branches: list[str] = field(default_factory=list)
    current_branch: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stale_branches": [
                {"name": name, "remote_exists": False} for name in self.stale_branches
            ],
            "current_branch": self.current_branch,
        }


@dataclass
class BranchDeleteResult:
    name: str
    success: bool
    error: str = ""


# =========================================================================
# 提交 / 历史
# =========================================================================


@dataclass
class CommitRecord:
    hash: str
    short_hash: str
    message: str
    author_name: str
    author_email: str
    date: str
    refs: list[str] = field(default_factory=list)


@dataclass
class LogResult:
    commits: list[CommitRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.commits)

    def to_dict(self) -> dict[str, Any]:
        return {"commits": [asdict(c) for c in self.commits], "total": self.total}


@dataclass
class ChangeSummary:
    """diffstat 汇总行: N files changed, X insertions(+), Y deletions(-)"""

    changes: int = 0
    insertions: int = 0
    deletions: int = 0


@dataclass
class CommitResult:
    commit_id: str
    branch: str
    root_commit: bool = False
    summary: ChangeSummary = field(default_factory=ChangeSummary)


# =========================================================================
# 远程同步
# =========================================================================


@dataclass
class PushResult:
    remote: str
    branch: str | None = None
    set_upstream: bool = False
    pushed: list[str] = field(default_factory=list)


@dataclass
class PullResult:
    files: list[str] = field(default_factory=list)
    summary: ChangeSummary = field(default_factory=ChangeSummary)
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


@dataclass
class FetchResult:
    remote: str
    updated: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)


@dataclass
class RemoteInfo:
    name: str
    refs: dict[str, str] = field(default_factory=dict)  # fetch / push -> url


# =========================================================================
# 差异
# =========================================================================


@dataclass
class DiffResult:
    diff: str = ""


@dataclass
class DiffFileStat:
    path: str
    insertions: int = 0
    deletions: int = 0
    is_binary: bool = False


@dataclass
class DiffSummary:
    files: list[DiffFileStat] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return len(self.files)

    @property
    def insertions(self) -> int:
        return sum(f.insertions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [asdict(f) for f in self.files],
            "changed": self.changed,
            "insertions": self.insertions,
            "deletions": self.deletions,
        }


# =========================================================================
# 合并 / 暂存 / 标签
# =========================================================================


@dataclass
class MergeOutcome:
    """合并/变基结果

    conflict=True 是需要用户解决（continue/abort）的正常终态，不是异常。
    """

    success: bool
    conflict: bool = False
    message: str = ""


class StashMode(str, Enum):
    PUSH = "push"
    POP = "pop"
    APPLY = "apply"
    DROP = "drop"


class ResetMode(str, Enum):
    SOFT = "soft"
    MIXED = "mixed"
    HARD = "hard"


@dataclass
class StashEntry:
    index: int
    message: str
    hash: str = ""
    date: str = ""


@dataclass
class TagList:
    tags: list[str] = field(default_factory=list)

    @property
    def latest(self) -> str | None:
        return self.tags[-1] if self.tags else None

    def to_dict(self) -> dict[str, Any]:
        return {"tags": [{"name": t} for t in self.tags], "latest": self.latest}
