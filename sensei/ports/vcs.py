"""Snapshot store port interface.

Defines the access layer over a version-controlled content store: the
live working copy on one side, immutable snapshots on the other.
"""

from typing import BinaryIO, Protocol

from sensei.domain.entities import ChangeClassification, ReadTarget, Snapshot


class SnapshotStore(Protocol):
    """Protocol for versioned-storage operations (Git)."""

    def resolve_snapshot(self, revision: str) -> Snapshot:
        """Resolve a revision string to an immutable snapshot.

        Args:
            revision: Commit id, branch, tag or any other revision expression.

        Returns:
            Snapshot pinned to the full commit id.

        Raises:
            ResolutionError: If revision does not name a reachable snapshot.
        """
        ...

    def head_snapshot(self) -> Snapshot:
        """Resolve the most recent snapshot of the working copy.

        Raises:
            ResolutionError: If nothing has been committed yet.
        """
        ...

    def list_paths(self, target: ReadTarget) -> list[str]:
        """List every file visible in a read target.

        Args:
            target: WorkingCopy or a resolved Snapshot.

        Returns:
            Repository-relative POSIX paths, each exactly once. No ordering
            is guaranteed.
        """
        ...

    def read_bytes(self, target: ReadTarget, path: str) -> bytes:
        """Read a file's bytes from a read target.

        Args:
            target: WorkingCopy or a resolved Snapshot.
            path: Repository-relative path.

        Returns:
            File content.

        Raises:
            NotFoundError: If path is absent from target.
            StorageError: If the read fails for any other reason.
        """
        ...

    def status(self) -> dict[str, ChangeClassification]:
        """Classify every changed path of the working copy against its last snapshot.

        Returns:
            Mapping of path to classification. Empty when the tree is clean.
        """
        ...

    def stage(self, entries: list[tuple[str, bytes]]) -> None:
        """Write or remove working-copy files and stage them.

        Empty content removes the path. Entries are applied in order and
        earlier entries stay staged if a later one fails.

        Raises:
            StorageError: On any filesystem or staging failure.
        """
        ...

    def commit(self, message: str) -> str:
        """Commit the staged working-copy state.

        Returns:
            Id of the new snapshot.

        Raises:
            StorageError: If there is nothing to commit or the commit fails.
        """
        ...

    def encode_patch(self, from_snapshot: Snapshot, to_snapshot: Snapshot, sink: BinaryIO) -> None:
        """Write the native tree-to-tree patch between two snapshots to sink."""
        ...
