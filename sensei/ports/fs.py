"""File System port interface.

Defines abstract interface for working-copy file operations.
Enables testing and potential alternative storage backends.
"""

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Protocol for file system operations."""

    def read(self, path: Path) -> bytes:
        """Read file contents.

        Raises:
            FileNotFoundError: If file doesn't exist.
            IsADirectoryError: If path is a directory.
        """
        ...

    def write(self, path: Path, content: bytes) -> None:
        """Write content to file, creating parent directories as needed.

        Raises:
            OSError: If write fails.
        """
        ...

    def remove(self, path: Path) -> None:
        """Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def walk_files(self, root: Path, exclude: frozenset[str] = frozenset()) -> list[Path]:
        """List every file below root breadth-first.

        Args:
            root: Directory to walk.
            exclude: Entry names skipped wherever they appear.

        Returns:
            Paths relative to root. Directories themselves are not listed.
        """
        ...
