"""git 执行器单元测试（回放后端，不依赖 git）"""

from __future__ import annotations

import pytest

from mygit.core.exceptions import IndexLockedError, OperationFailedError, ValidationError
from mygit.core.locks import PathLockManager
from mygit.core.models import RepoRecord
from mygit.services.git import GitService
from tests.conftest import ScriptedBackend

LOCKED = "fatal: Unable to create '/w/.git/index.lock': File exists."


@pytest.fixture()
def svc(scripted: ScriptedBackend, locks: PathLockManager) -> GitService:
    return GitService(RepoRecord(id="r1", path="/w", name="w"), scripted, locks)


class TestStatusExecutor:
    def test_commit_without_message_never_calls_git(self, svc: GitService, scripted: ScriptedBackend) -> None:
        with pytest.raises(ValidationError):
            svc.status.commit("")
        with pytest.raises(ValidationError):
            svc.status.commit("   ")
        assert scripted.calls == []

    def test_commit_parses_result(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("commit", stdout="[main 1a2b3c4] msg\n 1 file changed, 2 insertions(+)\n")
        result = svc.status.commit("msg")
        assert scripted.calls == [["commit", "-m", "msg"]]
        assert result.commit_id == "1a2b3c4"
        assert result.summary.insertions == 2

    def test_stage_files_or_all(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.status.stage(["a.txt", ""])
        svc.status.stage([])
        assert scripted.calls == [["add", "--", "a.txt"], ["add", "-A"]]

    def test_stage_single_path_string(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.status.stage("dir/a b.txt")
        svc.status.unstage("a.txt")
        assert scripted.calls[0] == ["add", "--", "dir/a b.txt"]
        assert scripted.calls[-1] == ["reset", "-q", "HEAD", "--", "a.txt"]

    @pytest.mark.parametrize("files", [5, {"a.txt": 1}, ["a.txt", 3], ("a.txt",)])
    def test_stage_rejects_non_path_files(self, svc: GitService, scripted: ScriptedBackend, files: object) -> None:
        with pytest.raises(ValidationError):
            svc.status.stage(files)  # type: ignore[arg-type]
        with pytest.raises(ValidationError):
            svc.status.unstage(files)  # type: ignore[arg-type]
        assert scripted.calls == []

    def test_unstage_with_head(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.status.unstage(["a.txt"])
        assert scripted.calls[-1] == ["reset", "-q", "HEAD", "--", "a.txt"]

    def test_unstage_without_head(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("rev-parse", returncode=1)
        svc.status.unstage(["a.txt"])
        assert scripted.calls[-1] == ["rm", "--cached", "-r", "-q", "--", "a.txt"]

    def test_index_lock_raises(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("add", stderr=LOCKED, returncode=128)
        with pytest.raises(IndexLockedError):
            svc.status.stage(["a.txt"])


class TestSyncExecutor:
    def test_push_args(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("push", stderr="To /tmp/o\n * [new branch]      feat -> feat\n")
        result = svc.sync.push("origin", "feat", set_upstream=True)
        assert scripted.calls == [["push", "--set-upstream", "origin", "feat"]]
        assert result.pushed == ["feat"]

    def test_push_defaults_remote(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.sync.push("")
        assert scripted.calls == [["push", "origin"]]

    def test_fetch_prune(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("fetch", stderr=" - [deleted]         (none)     -> origin/old\n")
        result = svc.sync.fetch("origin", prune=True)
        assert scripted.calls == [["fetch", "origin", "--prune"]]
        assert result.pruned == ["origin/old"]

    def test_pull_failure(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("pull", stderr="fatal: 'nowhere' does not appear to be a git repository", returncode=1)
        with pytest.raises(OperationFailedError):
            svc.sync.pull("nowhere")


class TestBranchExecutor:
    def test_delete_many_partial_failure(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("branch", "-d", "b", stderr="error: branch 'b' not found.", returncode=1)
        results = svc.branches.delete_many(["a", "b", "c"])
        assert [(r.name, r.success) for r in results] == [("a", True), ("b", False), ("c", True)]
        assert "not found" in results[1].error
        assert scripted.calls == [["branch", "-d", "a"], ["branch", "-d", "b"], ["branch", "-d", "c"]]

    def test_delete_many_bad_names_do_not_abort_batch(self, svc: GitService, scripted: ScriptedBackend) -> None:
        results = svc.branches.delete_many(["b1", 5, None, "--force", "b2"])  # type: ignore[list-item]
        assert [(r.name, r.success) for r in results] == [
            ("b1", True), ("5", True), ("None", False), ("--force", False), ("b2", True),
        ]
        assert scripted.calls == [["branch", "-d", "b1"], ["branch", "-d", "5"], ["branch", "-d", "b2"]]

    def test_delete_many_force(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.branches.delete_many(["a"], force=True)
        assert scripted.calls == [["branch", "-D", "a"]]

    def test_checkout_remote_derives_local_name(self, svc: GitService, scripted: ScriptedBackend) -> None:
        local = svc.branches.checkout_remote("origin/feature/x")
        assert local == "feature/x"
        assert scripted.calls == [["checkout", "-b", "feature/x", "--track", "origin/feature/x"]]

    def test_create_requires_name(self, svc: GitService, scripted: ScriptedBackend) -> None:
        with pytest.raises(ValidationError):
            svc.branches.create("")
        assert scripted.calls == []

    def test_stale_excludes_current_and_protected(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("for-each-ref", stdout=(
            "*\trefs/heads/gone-current\t\n"
            " \trefs/heads/Main\t\n"
            " \trefs/heads/zeta\t\n"
            " \trefs/heads/alpha\t\n"
            " \trefs/heads/kept\t\n"
            " \trefs/remotes/origin/kept\t\n"
            " \trefs/remotes/upstream/alpha\t\n"
        ))
        report = svc.branches.stale("origin")
        assert scripted.calls[0] == ["fetch", "origin", "--prune"]
        assert report.current_branch == "gone-current"
        assert report.stale_branches == ["alpha", "zeta"]
        assert report.to_dict()["stale_branches"][0] == {"name": "alpha", "remote_exists": False}

    def test_stale_custom_protected(self, scripted: ScriptedBackend, locks: PathLockManager) -> None:
        svc = GitService(RepoRecord(id="r", path="/w", name="w"), scripted, locks,
                         protected_branches=["release"])
        scripted.when("for-each-ref", stdout="*\trefs/heads/x\t\n \trefs/heads/main\t\n \trefs/heads/release\t\n")
        assert svc.branches.stale().stale_branches == ["main"]

    def test_stale_fetch_failure_propagates(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("fetch", stderr="fatal: 'origin' does not appear to be a git repository", returncode=128)
        with pytest.raises(OperationFailedError):
            svc.branches.stale()


class TestHistoryExecutor:
    def test_log_failure_returns_empty(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("log", stderr="fatal: your current branch 'main' does not have any commits yet",
                      returncode=128)
        result = svc.history.log()
        assert result.commits == []
        assert result.to_dict() == {"commits": [], "total": 0}

    @pytest.mark.parametrize("bad", [-1, "10", True])
    def test_log_rejects_bad_count(self, svc: GitService, bad: object) -> None:
        with pytest.raises(ValidationError):
            svc.history.log(max_count=bad)  # type: ignore[arg-type]

    def test_log_zero_count(self, svc: GitService, scripted: ScriptedBackend) -> None:
        assert svc.history.log(max_count=0).total == 0
        assert scripted.calls[0][:2] == ["log", "--max-count=0"]

    @pytest.mark.parametrize(("kwargs", "expected"), [
        ({"commit1": "a", "commit2": "b", "file": "f", "cached": True}, ["diff", "a", "b"]),
        ({"commit1": "a", "file": "f", "cached": True}, ["diff", "--", "f"]),
        ({"cached": True}, ["diff", "--cached"]),
        ({}, ["diff"]),
    ])
    def test_diff_selector_precedence(self, svc: GitService, scripted: ScriptedBackend,
                                      kwargs: dict, expected: list[str]) -> None:
        svc.history.diff(**kwargs)
        assert scripted.calls == [expected]

    def test_diff_summary(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("diff", stdout="3\t1\ta.txt\n-\t-\tb.bin\n")
        summary = svc.history.diff_summary(cached=True)
        assert scripted.calls == [["diff", "--numstat", "--cached"]]
        assert (summary.changed, summary.insertions, summary.deletions) == (2, 3, 1)

    def test_reset_modes(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.history.reset_to("HEAD~1", "hard")
        svc.history.reset_to("HEAD~1", "")
        assert scripted.calls == [["reset", "--hard", "HEAD~1"], ["reset", "--mixed", "HEAD~1"]]
        with pytest.raises(ValidationError):
            svc.history.reset_to("HEAD~1", "keep")

    def test_revert_no_commit(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.history.revert("abc", no_commit=True)
        assert scripted.calls == [["revert", "--no-edit", "--no-commit", "abc"]]


class TestMergeExecutor:
    def test_conflict_is_an_outcome(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("merge", stdout="CONFLICT (content): Merge conflict in a.txt\n", returncode=1)
        outcome = svc.merge.merge("feature")
        assert outcome.success is False
        assert outcome.conflict is True
        assert "Merge conflict in a.txt" in outcome.message

    def test_rebase_conflict(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("rebase", stderr="error: could not apply 1a2b3c4... change\n", returncode=1)
        assert svc.merge.rebase("main").conflict is True

    def test_other_failure_raises(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("merge", stderr="merge: nope - not something we can merge", returncode=1)
        with pytest.raises(OperationFailedError):
            svc.merge.merge("nope")

    def test_lock_raises_even_with_conflict_text(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("merge", stdout="CONFLICT", stderr=LOCKED, returncode=128)
        with pytest.raises(IndexLockedError):
            svc.merge.merge("feature")

    def test_merge_flags(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("merge", stdout="Merge made by the 'ort' strategy.\n")
        outcome = svc.merge.merge("feature", no_ff=True)
        assert scripted.calls == [["merge", "--no-edit", "--no-ff", "feature"]]
        assert outcome.success is True
        with pytest.raises(ValidationError):
            svc.merge.merge("feature", no_ff=True, squash=True)


class TestStashAndTags:
    def test_stash_args(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.stash.stash("push", message="wip")
        svc.stash.stash("push")
        svc.stash.stash("pop")
        svc.stash.stash("drop", index=2)
        assert scripted.calls == [
            ["stash", "push", "-m", "wip"],
            ["stash", "push"],
            ["stash", "pop", "stash@{0}"],
            ["stash", "drop", "stash@{2}"],
        ]

    def test_stash_rejects_bad_input(self, svc: GitService, scripted: ScriptedBackend) -> None:
        with pytest.raises(ValidationError):
            svc.stash.stash("shelve")
        with pytest.raises(ValidationError):
            svc.stash.stash("pop", index=-1)
        assert scripted.calls == []

    def test_tag_args(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.tags.create("v1.0")
        svc.tags.create("v1.1", "release", "abc")
        svc.tags.delete("v1.0")
        assert scripted.calls == [
            ["tag", "v1.0"],
            ["tag", "-a", "v1.1", "-m", "release", "abc"],
            ["tag", "-d", "v1.0"],
        ]

    def test_tags_latest(self, svc: GitService, scripted: ScriptedBackend) -> None:
        scripted.when("tag", "--list", stdout="v1.2\nv1.10\n")
        assert svc.tags.tags().to_dict() == {
            "tags": [{"name": "v1.2"}, {"name": "v1.10"}], "latest": "v1.10",
        }

    def test_empty_tags(self, svc: GitService) -> None:
        assert svc.tags.tags().latest is None


class TestOptionLikeRefs:
    """以 - 开头的引用名会被 git 解析为选项（如 diff --output=<file>），在调用 git 之前拒绝"""

    @pytest.mark.parametrize("call", [
        lambda s: s.history.diff(commit1="--output=/tmp/x", commit2="HEAD"),
        lambda s: s.history.diff(commit1="HEAD~1", commit2="-R"),
        lambda s: s.history.reset_to("--hard"),
        lambda s: s.history.revert("--continue"),
        lambda s: s.branches.create("-f"),
        lambda s: s.branches.create("feat", "--orphan"),
        lambda s: s.branches.checkout("--detach"),
        lambda s: s.branches.checkout_remote("--orphan"),
        lambda s: s.branches.checkout_remote("origin/-x"),
        lambda s: s.branches.checkout_remote("origin/x", "-b"),
        lambda s: s.branches.rename("a", "--force"),
        lambda s: s.branches.delete("--all"),
        lambda s: s.branches.stale("--upload-pack=touch /tmp/x"),
        lambda s: s.merge.merge("--abort"),
        lambda s: s.merge.rebase("--exec=touch /tmp/x"),
        lambda s: s.tags.create("-f"),
        lambda s: s.tags.create("v1", commit="--contains"),
        lambda s: s.tags.delete("-l"),
        lambda s: s.sync.push("--mirror"),
        lambda s: s.sync.push("origin", "--delete"),
        lambda s: s.sync.pull("origin", "--upload-pack=touch /tmp/x"),
        lambda s: s.sync.fetch("--upload-pack=touch /tmp/x"),
        lambda s: s.sync.prune("--dry-run"),
    ])
    def test_rejected_before_git_runs(self, svc: GitService, scripted: ScriptedBackend, call) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(ValidationError):
            call(svc)
        assert scripted.calls == []

    def test_file_after_separator_may_start_with_dash(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.history.diff(file="-notes.txt")
        svc.status.stage(["-notes.txt"])
        assert scripted.calls == [["diff", "--", "-notes.txt"], ["add", "--", "-notes.txt"]]

    def test_refs_are_stripped(self, svc: GitService, scripted: ScriptedBackend) -> None:
        svc.history.diff(commit1=" HEAD~1 ", commit2="HEAD")
        assert scripted.calls == [["diff", "HEAD~1", "HEAD"]]
