"""Integration tests for Git adapter.

These tests create real git repositories and exercise all SnapshotStore
protocol methods.
"""

import io
import subprocess
from pathlib import Path

import pytest

from sensei.adapters.git_cmd import GitAdapter
from sensei.domain.config import AuthorConfig
from sensei.domain.entities import WORKING_COPY, ChangeClassification, Snapshot
from sensei.domain.exceptions import NotFoundError, ResolutionError, StorageError
from tests.conftest import head_sha


def test_git_adapter_initialization(git_repo: Path):
    """Test GitAdapter can be initialized with a valid git repo."""
    adapter = GitAdapter(git_repo)
    assert adapter.repo_root == git_repo.resolve()


def test_git_adapter_rejects_non_repo(tmp_path: Path):
    """Test GitAdapter raises error for non-git directories."""
    non_repo = tmp_path / "not_a_repo"
    non_repo.mkdir()

    with pytest.raises(StorageError, match="Not a git repository"):
        GitAdapter(non_repo)


def test_init_creates_repository(tmp_path: Path):
    adapter = GitAdapter.init(tmp_path / "fresh")

    assert (tmp_path / "fresh" / ".git").is_dir()
    assert adapter.status() == {}
    assert adapter.list_paths(WORKING_COPY) == []


class TestResolveSnapshot:
    def test_head(self, git_adapter: GitAdapter, git_repo: Path):
        assert git_adapter.resolve_snapshot("HEAD") == Snapshot(head_sha(git_repo))

    def test_short_sha_resolves_to_full(self, git_adapter: GitAdapter, git_repo: Path):
        sha = head_sha(git_repo)
        assert git_adapter.resolve_snapshot(sha[:8]).sha == sha

    def test_unknown_revision(self, git_adapter: GitAdapter):
        with pytest.raises(ResolutionError, match="does not resolve"):
            git_adapter.resolve_snapshot("0" * 40)

    def test_option_like_revision_rejected(self, git_adapter: GitAdapter):
        with pytest.raises(ResolutionError):
            git_adapter.resolve_snapshot("--all")

    def test_head_snapshot_on_empty_repo(self, tmp_path: Path):
        adapter = GitAdapter.init(tmp_path / "empty")
        with pytest.raises(ResolutionError, match="no commits yet"):
            adapter.head_snapshot()


class TestListPaths:
    def test_snapshot(self, git_adapter: GitAdapter):
        snapshot = git_adapter.head_snapshot()
        assert sorted(git_adapter.list_paths(snapshot)) == ["file1.txt", "src/file2.py"]

    def test_working_copy_excludes_git_dir(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "new" / "deep").mkdir(parents=True)
        (git_repo / "new" / "deep" / "x.txt").write_text("x")

        paths = git_adapter.list_paths(WORKING_COPY)

        assert sorted(paths) == ["file1.txt", "new/deep/x.txt", "src/file2.py"]
        assert not any(p.startswith(".git") for p in paths)


class TestReadBytes:
    def test_working_copy(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "file1.txt").write_text("changed\n")
        assert git_adapter.read_bytes(WORKING_COPY, "file1.txt") == b"changed\n"

    def test_snapshot(self, git_adapter: GitAdapter, git_repo: Path):
        snapshot = git_adapter.head_snapshot()
        (git_repo / "file1.txt").write_text("changed\n")

        assert git_adapter.read_bytes(snapshot, "file1.txt") == b"Hello world\n"
        assert git_adapter.read_bytes(snapshot, "src/file2.py") == b"print('hello')\n"

    def test_missing_in_working_copy(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.read_bytes(WORKING_COPY, "nope.txt")

    def test_directory_in_working_copy(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.read_bytes(WORKING_COPY, "src")

    def test_missing_in_snapshot(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.read_bytes(git_adapter.head_snapshot(), "nope.txt")

    def test_directory_in_snapshot(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.read_bytes(git_adapter.head_snapshot(), "src")

    def test_path_outside_repository(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError, match="not within repository"):
            git_adapter.read_bytes(WORKING_COPY, "../outside.txt")


class TestStatus:
    def test_clean(self, git_adapter: GitAdapter):
        assert git_adapter.status() == {}

    def test_untracked_then_added(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "new.txt").write_text("new\n")
        assert git_adapter.status() == {"new.txt": ChangeClassification.UNTRACKED}

        git_adapter.stage([("new.txt", b"new\n")])
        assert git_adapter.status() == {"new.txt": ChangeClassification.ADDED}

    def test_modified_and_deleted(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "file1.txt").write_text("changed\n")
        (git_repo / "src" / "file2.py").unlink()

        assert git_adapter.status() == {
            "file1.txt": ChangeClassification.MODIFIED,
            "src/file2.py": ChangeClassification.DELETED,
        }

    def test_emptied_tracked_file_is_deleted(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "file1.txt").write_bytes(b"")
        (git_repo / "empty_new.txt").write_bytes(b"")

        assert git_adapter.status() == {
            "file1.txt": ChangeClassification.DELETED,
            "empty_new.txt": ChangeClassification.UNTRACKED,
        }


class TestStage:
    def test_write_creates_parents_and_stages(self, git_adapter: GitAdapter, git_repo: Path):
        git_adapter.stage([("a/b/c.txt", b"deep\n")])

        assert (git_repo / "a" / "b" / "c.txt").read_bytes() == b"deep\n"
        assert git_adapter.status() == {"a/b/c.txt": ChangeClassification.ADDED}

    def test_empty_content_removes_and_stages(self, git_adapter: GitAdapter, git_repo: Path):
        git_adapter.stage([("file1.txt", b"")])

        assert not (git_repo / "file1.txt").exists()
        assert git_adapter.status() == {"file1.txt": ChangeClassification.DELETED}

    def test_removing_missing_path_fails(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.stage([("missing.txt", b"")])

    def test_partial_staging_not_rolled_back(self, git_adapter: GitAdapter):
        with pytest.raises(NotFoundError):
            git_adapter.stage([("first.txt", b"1\n"), ("missing.txt", b"")])

        assert git_adapter.status() == {"first.txt": ChangeClassification.ADDED}

    def test_ignored_path_is_still_staged(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / ".gitignore").write_text("*.log\n")
        git_adapter.stage([("debug.log", b"trace\n")])

        assert git_adapter.status()["debug.log"] == ChangeClassification.ADDED


class TestCommit:
    def test_commit_returns_new_head(self, git_adapter: GitAdapter, git_repo: Path):
        before = head_sha(git_repo)
        git_adapter.stage([("new.txt", b"new\n")])

        sha = git_adapter.commit("add new")

        assert sha == head_sha(git_repo) != before
        assert git_adapter.status() == {}

    def test_commit_uses_configured_author(self, git_repo: Path):
        adapter = GitAdapter(git_repo, author=AuthorConfig(name="Robot", email="robot@example.com"))
        adapter.stage([("new.txt", b"new\n")])
        sha = adapter.commit("add new")

        result = subprocess.run(
            ["git", "log", "-1", "--format=%an <%ae>|%s", sha],
            cwd=git_repo,
            check=True,
            capture_output=True,
        )
        assert result.stdout.decode().strip() == "Robot <robot@example.com>|add new"

    def test_commit_includes_tracked_modifications(self, git_adapter: GitAdapter, git_repo: Path):
        (git_repo / "file1.txt").write_text("edited\n")

        sha = git_adapter.commit("edit")

        assert git_adapter.read_bytes(Snapshot(sha), "file1.txt") == b"edited\n"

    def test_nothing_to_commit(self, git_adapter: GitAdapter):
        with pytest.raises(StorageError, match="Nothing to commit"):
            git_adapter.commit("empty")


def test_encode_patch(git_adapter: GitAdapter, git_repo: Path):
    first = git_adapter.head_snapshot()
    git_adapter.stage([("file1.txt", b"Goodbye world\n"), ("src/file2.py", b"")])
    second = Snapshot(git_adapter.commit("second"))

    buf = io.BytesIO()
    git_adapter.encode_patch(first, second, buf)
    patch = buf.getvalue().decode()

    assert "diff --git a/file1.txt b/file1.txt" in patch
    assert "-Hello world" in patch
    assert "+Goodbye world" in patch
    assert "deleted file mode" in patch
