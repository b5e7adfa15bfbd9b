"""Local file system adapter.

Implements the FileSystem port using the standard library pathlib.
This is the default adapter for working-copy file operations.
"""

from collections import deque
from pathlib import Path


class LocalFileSystem:
    """Local file system implementation using pathlib.

    This adapter implements the FileSystem port protocol for standard
    local file system operations.
    """

    def read(self, path: Path) -> bytes:
        """Read file contents.

        Args:
            path: Path to file.

        Returns:
            File contents as bytes.

        Raises:
            FileNotFoundError: If file doesn't exist.
            IsADirectoryError: If path is a directory.
        """
        return path.read_bytes()

    def write(self, path: Path, content: bytes) -> None:
        """Write content to file.

        Args:
            path: Path to file.
            content: Content to write.

        Raises:
            OSError: If write fails.
        """
        # Ensure parent directory exists
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def remove(self, path: Path) -> None:
        """Remove a file.

        Args:
            path: Path to file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        path.unlink()

    def walk_files(self, root: Path, exclude: frozenset[str] = frozenset()) -> list[Path]:
        """List every file below root, breadth-first.

        Args:
            root: Directory to walk.
            exclude: Entry names to skip at any depth (e.g. ".git").

        Returns:
            File paths relative to root. Directories are traversed but not listed;
            symlinks are listed as files.
        """
        files: list[Path] = []
        queue: deque[Path] = deque([Path(".")])
        while queue:
            current = queue.popleft()
            for entry in sorted((root / current).iterdir()):
                if entry.name in exclude:
                    continue
                relative = current / entry.name
                if entry.is_dir() and not entry.is_symlink():
                    queue.append(relative)
                else:
                    files.append(relative)
        return files
