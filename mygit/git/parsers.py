"""git 文本输出解析

纯函数：输入 git 的原始输出，输出 core.models 中的规范化对象。
调用方负责选择与这里匹配的格式参数（见各函数上方的 *_ARGS 常量）。
"""

from __future__ import annotations

import re

from mygit.core.models import (
    BranchEntry,
    BranchSet,
    ChangeSummary,
    CommitRecord,
    CommitResult,
    DiffFileStat,
    FileEntry,
    FileState,
    PullResult,
    RemoteInfo,
    StashEntry,
    StatusSnapshot,
)

# =========================================================================
# status
# =========================================================================

STATUS_ARGS = ["status", "--porcelain=v2", "--branch", "-z"]

_STATE_CODES = {
    ".": FileState.UNMODIFIED,
    "M": FileState.MODIFIED,
    "T": FileState.MODIFIED,
    "A": FileState.ADDED,
    "D": FileState.DELETED,
    "R": FileState.RENAMED,
    "C": FileState.COPIED,
    "U": FileState.CONFLICTED,
}

_AB_RE = re.compile(r"^\+(\d+) -(\d+)$")


def _state(code: str) -> FileState:
    return _STATE_CODES.get(code, FileState.MODIFIED)


def parse_status(text: str) -> StatusSnapshot:
    """解析 `git status --porcelain=v2 --branch -z`"""
    snap = StatusSnapshot()
    tokens = text.split("\0")
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        i += 1
        if not tok:
            continue
        kind = tok[0]
        if kind == "#":
            _apply_branch_header(snap, tok)
        elif kind == "1":
            parts = tok.split(" ", 8)
            xy = parts[1]
            snap.files.append(FileEntry(parts[8], _state(xy[0]), _state(xy[1])))
        elif kind == "2":
            parts = tok.split(" ", 9)
            xy = parts[1]
            orig = tokens[i] if i < len(tokens) else ""
            i += 1
            snap.files.append(FileEntry(parts[9], _state(xy[0]), _state(xy[1]), orig))
        elif kind == "u":
            parts = tok.split(" ", 10)
            snap.files.append(
                FileEntry(parts[10], FileState.CONFLICTED, FileState.CONFLICTED),
            )
        elif kind == "?":
            snap.files.append(FileEntry(tok[2:], FileState.UNMODIFIED, FileState.UNTRACKED))
        elif kind == "!":
            snap.files.append(FileEntry(tok[2:], FileState.UNMODIFIED, FileState.IGNORED))
    return snap


def _apply_branch_header(snap: StatusSnapshot, line: str) -> None:
    _, _, rest = line.partition(" ")
    key, _, value = rest.partition(" ")
    if key == "branch.head":
        snap.branch = None if value == "(detached)" else value
    elif key == "branch.upstream":
        snap.tracking = value
    elif key == "branch.ab":
        m = _AB_RE.match(value)
        if m:
            snap.ahead, snap.behind = int(m.group(1)), int(m.group(2))


# =========================================================================
# 分支
# =========================================================================

BRANCH_ARGS = [
    "for-each-ref", "--format=%(HEAD)%09%(refname)%09%(symref)",
    "refs/heads", "refs/remotes",
]


def parse_branches(text: str) -> BranchSet:
    """解析 for-each-ref 输出；符号引用（origin/HEAD）不计入远程分支"""
    branches = BranchSet()
    for line in text.splitlines():
        if not line.strip():
            continue
        head, refname, symref = (line.split("\t") + ["", ""])[:3]
        if refname.startswith("refs/heads/"):
            name = refname[len("refs/heads/"):]
            is_current = head == "*"
            branches.local.append(BranchEntry(name, is_current))
            if is_current:
                branches.current = name
        elif refname.startswith("refs/remotes/") and not symref:
            branches.remote.append(BranchEntry(refname[len("refs/remotes/"):]))
    return branches


# =========================================================================
# log
# =========================================================================

_FS = "\x1f"
_RS = "\x1e"
LOG_FORMAT = "--format=" + "%x1f".join(["%H", "%an", "%ae", "%aI", "%D", "%s"]) + "%x1e"


def parse_log(text: str) -> list[CommitRecord]:
    commits = []
    for record in text.split(_RS):
        record = record.strip("\n")
        if not record:
            continue
        fields = record.split(_FS)
        if len(fields) < 6:
            continue
        sha, author, email, date, decorations, subject = fields[:6]
        refs = [r.strip() for r in decorations.split(",") if r.strip()]
        commits.append(CommitRecord(
            hash=sha,
            short_hash=sha[:7],
            message=subject,
            author_name=author or "Unknown",
            author_email=email,
            date=date,
            refs=refs,
        ))
    return commits


# =========================================================================
# commit / diffstat
# =========================================================================

_COMMIT_HEAD_RE = re.compile(
    r"^\[(?P<branch>.+?) (?P<root>\(root-commit\) )?(?P<commit>[0-9a-f]{4,})\]",
)
_SHORTSTAT_RE = re.compile(
    r"(\d+) files? changed"
    r"(?:, (\d+) insertions?\(\+\))?"
    r"(?:, (\d+) deletions?\(-\))?",
)


def parse_shortstat(text: str) -> ChangeSummary:
    m = _SHORTSTAT_RE.search(text)
    if not m:
        return ChangeSummary()
    return ChangeSummary(
        changes=int(m.group(1)),
        insertions=int(m.group(2) or 0),
        deletions=int(m.group(3) or 0),
    )


def parse_commit(text: str) -> CommitResult:
    """解析 `git commit` 的输出: [branch (root-commit) abc1234] subject"""
    for line in text.splitlines():
        m = _COMMIT_HEAD_RE.match(line.strip())
        if m:
            return CommitResult(
                commit_id=m.group("commit"),
                branch=m.group("branch"),
                root_commit=bool(m.group("root")),
                summary=parse_shortstat(text),
            )
    return CommitResult(commit_id="", branch="", summary=parse_shortstat(text))


_DIFFSTAT_FILE_RE = re.compile(r"^\s(?P<path>\S.*?)\s+\|\s+(?:\d+|Bin)")
_MODE_RE = re.compile(r"^\s*(?P<kind>create|delete) mode \d+ (?P<path>.+)$")


def parse_pull(text: str) -> PullResult:
    """解析 `git pull --stat` 的 diffstat；已是最新时返回空结果"""
    result = PullResult(summary=parse_shortstat(text))
    for line in text.splitlines():
        m = _DIFFSTAT_FILE_RE.match(line)
        if m:
            result.files.append(m.group("path"))
            continue
        m = _MODE_RE.match(line)
        if m:
            target = result.created if m.group("kind") == "create" else result.deleted
            target.append(m.group("path"))
    return result


def parse_numstat(text: str) -> list[DiffFileStat]:
    """解析 `git diff --numstat`；二进制文件的增删列为 '-'"""
    stats = []
    for line in text.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        ins, dels, path = parts
        binary = ins == "-" and dels == "-"
        stats.append(DiffFileStat(
            path=path,
            insertions=0 if binary else int(ins),
            deletions=0 if binary else int(dels),
            is_binary=binary,
        ))
    return stats


# =========================================================================
# push / fetch 的引用更新行
# =========================================================================


def parse_ref_updates(text: str) -> tuple[list[str], list[str]]:
    """从 push/fetch 的进度输出中提取 (已更新引用, 已删除引用)

    行形如 `   1a2b..3c4d  main -> origin/main`、` - [deleted] (none) -> origin/x`
    或 `remote prune` 的 ` * [pruned] origin/x`
    """
    updated: list[str] = []
    deleted: list[str] = []
    for line in text.splitlines():
        if "[pruned]" in line:
            deleted.append(line.split()[-1])
            continue
        if "->" not in line:
            continue
        target = line.split("->", 1)[1].split()
        if not target:
            continue
        if "[deleted]" in line:
            deleted.append(target[0])
        else:
            updated.append(target[0])
    return updated, deleted


# =========================================================================
# stash / remote / tag
# =========================================================================

STASH_LIST_ARGS = ["stash", "list", "--format=%gd%x1f%H%x1f%aI%x1f%gs"]
_STASH_REF_RE = re.compile(r"stash@\{(\d+)\}")


def parse_stash_list(text: str) -> list[StashEntry]:
    stashes = []
    for line in text.splitlines():
        fields = line.split(_FS)
        if len(fields) < 4:
            continue
        m = _STASH_REF_RE.search(fields[0])
        stashes.append(StashEntry(
            index=int(m.group(1)) if m else len(stashes),
            message=fields[3],
            hash=fields[1],
            date=fields[2],
        ))
    return stashes


def parse_remotes(text: str) -> list[RemoteInfo]:
    """解析 `git remote -v`，保持首次出现的顺序"""
    remotes: dict[str, RemoteInfo] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 3:
            continue
        name, url, kind = parts[0], parts[1], parts[2].strip("()")
        remotes.setdefault(name, RemoteInfo(name)).refs[kind] = url
    return list(remotes.values())


def parse_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]
