"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path

import pytest

from sensei.adapters.git_cmd import GitAdapter
from sensei.core.repo import Repository
from tests.helpers.fake_store import InMemoryStore


@pytest.fixture(autouse=True)
def isolate_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the global config lookup at an empty per-test directory.

    Without this, a developer's ~/.config/sensei/config.toml would leak
    into test results.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


# ============================================================================
# Git Repository Helpers
# ============================================================================
# These helpers consolidate git setup code to avoid duplication across tests.


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    """Initialize a git repository with user configuration.

    Args:
        path: Directory to initialize as a git repository.
        user_name: Git user.name configuration value.
        user_email: Git user.email configuration value.

    Raises:
        subprocess.CalledProcessError: If git commands fail.
    """
    path.mkdir(parents=True, exist_ok=True)
    for args in (
        ["git", "init"],
        ["git", "config", "user.name", user_name],
        ["git", "config", "user.email", user_email],
        ["git", "config", "commit.gpgsign", "false"],
    ):
        subprocess.run(args, cwd=path, check=True, capture_output=True, timeout=5)


def git_add_and_commit(path: Path, message: str = "Initial commit") -> None:
    """Stage every file with 'git add .' and commit.

    Raises:
        subprocess.CalledProcessError: If git commands fail.
    """
    subprocess.run(["git", "add", "."], cwd=path, check=True, capture_output=True, timeout=5)
    subprocess.run(
        ["git", "commit", "-m", message],
        cwd=path,
        check=True,
        capture_output=True,
        timeout=5,
    )


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create multiple files in a directory.

    Args:
        path: Base directory for file creation.
        files: Mapping of relative file paths to file contents.
               Parent directories are created automatically.
    """
    for file_path, content in files.items():
        full_path = path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)


def create_git_repo(path: Path, files: dict[str, str] | None = None) -> Path:
    """Create a git repository, optionally with an initial commit of files.

    Returns:
        Path to the repository root.
    """
    init_git_repo(path)
    if files:
        create_test_files(path, files)
        git_add_and_commit(path)
    return path


def head_sha(path: Path) -> str:
    """Return the commit id HEAD points at."""
    result = subprocess.run(
        ["git", "rev-parse", "HEAD"],
        cwd=path,
        check=True,
        capture_output=True,
        timeout=5,
    )
    return result.stdout.decode().strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository with one commit of two files.

    Returns:
        Path to the git repository root.
    """
    return create_git_repo(
        tmp_path / "test_repo",
        {"file1.txt": "Hello world\n", "src/file2.py": "print('hello')\n"},
    )


@pytest.fixture
def git_adapter(git_repo: Path) -> GitAdapter:
    """Create a GitAdapter for the test repository."""
    return GitAdapter(git_repo)


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Create an empty in-memory snapshot store."""
    return InMemoryStore()


@pytest.fixture
def memory_repo(memory_store: InMemoryStore) -> Repository:
    """Create a Repository over an empty in-memory store."""
    return Repository(memory_store)
