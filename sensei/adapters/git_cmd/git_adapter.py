"""Git adapter implementing the SnapshotStore protocol using subprocess git commands."""

import logging
import subprocess
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from sensei.adapters.fs.local import LocalFileSystem
from sensei.domain.config import AuthorConfig
from sensei.domain.entities import (
    HEAD_REVISION,
    ChangeClassification,
    ReadTarget,
    Snapshot,
    WorkingCopy,
)
from sensei.domain.exceptions import NotFoundError, ResolutionError, StorageError
from sensei.ports.fs import FileSystem

logger = logging.getLogger(__name__)

# Entries never reported as part of the working copy
_WORKTREE_EXCLUDES = frozenset({".git"})

# Porcelain v1 status letters, applied to the index column first and the
# worktree column when the index column is blank.
# Renames and copies surface as additions at the new path.
_STATUS_CODE_MAP: dict[str, ChangeClassification] = {
    "A": ChangeClassification.ADDED,
    "M": ChangeClassification.MODIFIED,
    "T": ChangeClassification.MODIFIED,  # Type change (e.g., file -> symlink)
    "D": ChangeClassification.DELETED,
    "R": ChangeClassification.ADDED,
    "C": ChangeClassification.ADDED,
}

# stderr fragments git prints when a path is missing from a commit
_MISSING_PATH_MARKERS = (
    "does not exist",
    "exists on disk, but not in",
    "not a valid object name",
    "bad file",
)

# stdout fragments git prints when a commit would be empty
_NOTHING_TO_COMMIT_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)


def _parse_status_code(code: str) -> ChangeClassification | None:
    """Convert a two-letter porcelain status code into a classification.

    Args:
        code: XY code from `git status --porcelain=v1`.

    Returns:
        ChangeClassification, or None for ignored, unmerged or unknown codes.
    """
    if code == "??":
        return ChangeClassification.UNTRACKED
    if len(code) != 2 or code == "!!" or "U" in code:
        return None

    index, worktree = code[0], code[1]
    # Content gone from disk wins over whatever the index says
    if worktree == "D":
        return ChangeClassification.DELETED
    if index != " ":
        return _STATUS_CODE_MAP.get(index)
    return _STATUS_CODE_MAP.get(worktree)


def _parse_status_output(output: str) -> dict[str, ChangeClassification]:
    """Parse NUL-separated `git status --porcelain=v1 -z` output.

    Args:
        output: Raw decoded stdout.

    Returns:
        Mapping of path to classification, in git's output order.
    """
    changes: dict[str, ChangeClassification] = {}
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        if code[0] in "RC":
            # Next field is the source path of the rename/copy
            i += 1
        status = _parse_status_code(code)
        if status is None:
            logger.warning("Unknown git status code '%s' for path '%s'. Skipping.", code, path)
            continue
        changes[path] = status
    return changes


def _normalize_path(path: str) -> str:
    """Normalize a repository-relative path to POSIX form.

    Raises:
        NotFoundError: If path is empty, absolute, or escapes the repository.
    """
    normalized = PurePosixPath(path.replace("\\", "/"))
    if normalized.is_absolute() or ".." in normalized.parts or str(normalized) in ("", "."):
        raise NotFoundError(
            f"Path '{path}' is not within repository",
            hint="Specify a path relative to the repository root",
        )
    return str(normalized)


class GitAdapter:
    """Git snapshot store adapter using subprocess calls to git CLI."""

    def __init__(
        self,
        repo_root: Path,
        author: AuthorConfig | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        """Initialize Git adapter.

        Args:
            repo_root: Path to git repository root (working copy).
            author: Identity recorded on commits. Default: AuthorConfig().
            fs: File system used for working-copy access. Default: LocalFileSystem.

        Raises:
            StorageError: If repo_root is not a git repository.
        """
        self.repo_root = repo_root.resolve()
        self.author = author or AuthorConfig()
        self.fs: FileSystem = fs or LocalFileSystem()
        # Verify this is a git repo
        if not self._is_git_repo():
            raise StorageError(
                f"Not a git repository: {self.repo_root}",
                hint="Run 'sensei init' to create one",
            )

    @classmethod
    def init(cls, repo_root: Path, author: AuthorConfig | None = None) -> "GitAdapter":
        """Create an empty repository at repo_root and open it.

        Raises:
            StorageError: If git init fails.
        """
        repo_root.mkdir(parents=True, exist_ok=True)
        try:
            subprocess.run(
                ["git", "init", "-q", str(repo_root)],
                capture_output=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
            raise StorageError(f"Failed to initialize repository at {repo_root}: {stderr}") from e
        except FileNotFoundError as e:
            raise StorageError("git executable not found", hint="Install git") from e
        logger.debug("Initialized repository at %s", repo_root)
        return cls(repo_root, author=author)

    def _is_git_repo(self) -> bool:
        """Check if repo_root is a git repository."""
        try:
            self._run_git(["rev-parse", "--git-dir"], check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _run_git(
        self,
        args: list[str],
        check: bool = True,
        capture_output: bool = True,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run a git command in the repository.

        Args:
            args: Git command arguments (without 'git' prefix).
            check: Whether to raise CalledProcessError on non-zero exit.
            capture_output: Whether to capture stdout/stderr.

        Returns:
            CompletedProcess with command results.

        Raises:
            subprocess.CalledProcessError: If check=True and command fails.
        """
        cmd = ["git", "-C", str(self.repo_root)] + args
        logger.debug("Running %s", " ".join(cmd))
        return subprocess.run(
            cmd,
            capture_output=capture_output,
            check=check,
        )

    def _format_git_error(
        self,
        error: subprocess.CalledProcessError,
        context: str,
    ) -> str:
        """Format git error with full context.

        Args:
            error: The CalledProcessError from git command.
            context: Human-readable description of what was being done.

        Returns:
            Formatted error message with exit code and stderr.
        """
        stderr = error.stderr.decode("utf-8", errors="replace").strip() if error.stderr else ""

        msg = f"{context} (git exit code {error.returncode})"
        if stderr:
            msg += f": {stderr}"
        else:
            msg += " (no error output from git)"

        return msg

    def resolve_snapshot(self, revision: str) -> Snapshot:
        """Resolve a revision string to an immutable snapshot.

        Args:
            revision: Commit SHA, branch name, tag, etc.

        Returns:
            Snapshot pinned to the full commit SHA.

        Raises:
            ResolutionError: If revision does not name a reachable commit.
        """
        if not revision or revision.startswith("-"):
            raise ResolutionError(f"Invalid revision '{revision}'")

        result = self._run_git(
            ["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"],
            check=False,
        )
        sha = result.stdout.decode("utf-8", errors="replace").strip()
        if result.returncode != 0 or not sha:
            raise ResolutionError(
                f"Revision '{revision}' does not resolve to any snapshot",
                hint="Use a commit id returned by 'sensei commit'",
            )
        return Snapshot(sha=sha)

    def head_snapshot(self) -> Snapshot:
        """Resolve the most recent snapshot of the working copy.

        Raises:
            ResolutionError: If the repository has no commits yet.
        """
        try:
            return self.resolve_snapshot(HEAD_REVISION)
        except ResolutionError as e:
            raise ResolutionError(
                f"Repository at {self.repo_root} has no commits yet",
                hint="Make an initial commit first",
            ) from e

    def list_paths(self, target: ReadTarget) -> list[str]:
        """List every file visible in a read target.

        Args:
            target: WorkingCopy or a resolved Snapshot.

        Returns:
            Repository-relative POSIX paths.

        Raises:
            StorageError: If the listing fails.
        """
        match target:
            case WorkingCopy():
                return self._list_worktree()
            case Snapshot(sha=sha):
                return self._list_snapshot(sha)

    def _list_worktree(self) -> list[str]:
        try:
            files = self.fs.walk_files(self.repo_root, exclude=_WORKTREE_EXCLUDES)
        except OSError as e:
            raise StorageError(f"Failed to list working copy: {e}") from e
        return [f.as_posix() for f in files]

    def _list_snapshot(self, sha: str) -> list[str]:
        try:
            result = self._run_git(["ls-tree", "-r", "-z", "--name-only", sha])
        except subprocess.CalledProcessError as e:
            raise StorageError(self._format_git_error(e, f"Failed to list snapshot {sha}")) from e
        output = result.stdout.decode("utf-8", errors="replace")
        return [f for f in output.split("\0") if f]

    def read_bytes(self, target: ReadTarget, path: str) -> bytes:
        """Read a file's bytes from a read target.

        Args:
            target: WorkingCopy or a resolved Snapshot.
            path: Repository-relative path.

        Returns:
            File content as bytes.

        Raises:
            NotFoundError: If path doesn't exist in target.
            StorageError: If the read fails for any other reason.
        """
        path = _normalize_path(path)
        match target:
            case WorkingCopy():
                return self._read_worktree(path)
            case Snapshot(sha=sha):
                return self._read_snapshot(sha, path)

    def _read_worktree(self, path: str) -> bytes:
        try:
            return self.fs.read(self.repo_root / path)
        except (FileNotFoundError, IsADirectoryError) as e:
            raise NotFoundError(f"File '{path}' not found in working copy") from e
        except OSError as e:
            raise StorageError(f"Failed to read '{path}' from working copy: {e}") from e

    def _read_snapshot(self, sha: str, path: str) -> bytes:
        try:
            result = self._run_git(["cat-file", "blob", f"{sha}:{path}"])
            return result.stdout
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").lower() if e.stderr else ""
            if any(marker in stderr for marker in _MISSING_PATH_MARKERS):
                raise NotFoundError(f"File '{path}' not found at revision '{sha}'") from e
            error_msg = self._format_git_error(
                e, f"Failed to get content for '{path}' at revision '{sha}'"
            )
            raise StorageError(error_msg) from e

    def status(self) -> dict[str, ChangeClassification]:
        """Classify changed working-copy paths against the last snapshot.

        Returns:
            Mapping of path to classification. Empty for a clean tree.

        Raises:
            StorageError: If git status fails.
        """
        try:
            result = self._run_git(
                ["status", "--porcelain=v1", "-z", "--untracked-files=all"]
            )
        except subprocess.CalledProcessError as e:
            raise StorageError(self._format_git_error(e, "Failed to get working copy status")) from e
        changes = _parse_status_output(result.stdout.decode("utf-8", errors="replace"))
        # A recorded file truncated to zero bytes counts as deleted
        for path, change in changes.items():
            if change is ChangeClassification.MODIFIED and self._is_emptied(path):
                changes[path] = ChangeClassification.DELETED
        return changes

    def _is_emptied(self, path: str) -> bool:
        file_path = self.repo_root / path
        return file_path.is_file() and file_path.stat().st_size == 0

    def stage(self, entries: list[tuple[str, bytes]]) -> None:
        """Write or remove working-copy files and stage each change.

        Empty content removes the path. Entries are processed in order;
        entries before a failing one stay staged.

        Args:
            entries: (path, content) pairs.

        Raises:
            NotFoundError: If a path to remove does not exist.
            StorageError: On any other filesystem or staging failure.
        """
        for raw_path, content in entries:
            path = _normalize_path(raw_path)
            if content:
                self._stage_write(path, content)
            else:
                self._stage_remove(path)

    def _stage_write(self, path: str, content: bytes) -> None:
        try:
            self.fs.write(self.repo_root / path, content)
        except OSError as e:
            raise StorageError(f"Failed to write '{path}': {e}") from e
        try:
            # Explicitly staged files are added even when ignored
            self._run_git(["add", "--force", "--", path])
        except subprocess.CalledProcessError as e:
            raise StorageError(self._format_git_error(e, f"Failed to stage '{path}'")) from e
        logger.debug("Staged %s (%d bytes)", path, len(content))

    def _stage_remove(self, path: str) -> None:
        try:
            self.fs.remove(self.repo_root / path)
        except FileNotFoundError as e:
            raise NotFoundError(f"File '{path}' not found in working copy") from e
        except OSError as e:
            raise StorageError(f"Failed to remove '{path}': {e}") from e
        try:
            self._run_git(["rm", "--cached", "--ignore-unmatch", "-q", "--", path])
        except subprocess.CalledProcessError as e:
            raise StorageError(
                self._format_git_error(e, f"Failed to stage removal of '{path}'")
            ) from e
        logger.debug("Staged removal of %s", path)

    def commit(self, message: str) -> str:
        """Commit all tracked working-copy changes.

        Args:
            message: Commit message.

        Returns:
            SHA of the new commit.

        Raises:
            StorageError: If there is nothing to commit or git fails.
        """
        result = self._run_git(
            [
                "-c", f"user.name={self.author.name}",
                "-c", f"user.email={self.author.email}",
                "-c", "commit.gpgsign=false",
                "commit", "--all", "--no-verify", "-m", message,
            ],
            check=False,
        )
        if result.returncode != 0:
            output = (result.stdout + result.stderr).decode("utf-8", errors="replace")
            if any(marker in output for marker in _NOTHING_TO_COMMIT_MARKERS):
                raise StorageError(
                    "Nothing to commit",
                    hint="Stage changes with 'sensei add' first",
                )
            error = subprocess.CalledProcessError(
                result.returncode, result.args, result.stdout, result.stderr
            )
            raise StorageError(self._format_git_error(error, "Failed to commit"))

        sha = self.head_snapshot().sha
        logger.info("Committed %s", sha)
        return sha

    def encode_patch(self, from_snapshot: Snapshot, to_snapshot: Snapshot, sink: BinaryIO) -> None:
        """Write git's native patch between two snapshots to sink.

        Raises:
            StorageError: If git diff fails.
        """
        try:
            result = self._run_git(
                [
                    "diff", "--no-color", "--no-ext-diff", "--no-renames",
                    from_snapshot.sha, to_snapshot.sha,
                ]
            )
        except subprocess.CalledProcessError as e:
            raise StorageError(
                self._format_git_error(e, f"Failed to diff {from_snapshot} -> {to_snapshot}")
            ) from e
        sink.write(result.stdout)
