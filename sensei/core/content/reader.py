"""Content reader: revision-aware file reads and listings."""

import logging
from typing import BinaryIO

from sensei.core.revision_context import RevisionContext, revision_of
from sensei.domain.entities import WORKING_COPY, ReadTarget, is_head
from sensei.ports.vcs import SnapshotStore

logger = logging.getLogger(__name__)


class ContentReader:
    """Reads file content and listings at the revision selected by the context.

    The HEAD revision always reads the live working copy and is never
    pinned; any other revision is resolved to a snapshot on every call.
    """

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def _target(self, ctx: RevisionContext | None) -> ReadTarget:
        revision = revision_of(ctx)
        if is_head(revision):
            return WORKING_COPY
        return self.store.resolve_snapshot(revision)

    def read(self, ctx: RevisionContext | None, path: str, sink: BinaryIO) -> None:
        """Write the content of path at the context's revision to sink.

        Raises:
            NotFoundError: If path does not exist at that revision.
            ResolutionError: If the revision does not resolve.
        """
        target = self._target(ctx)
        logger.debug("Reading %s from %s", path, target)
        sink.write(self.store.read_bytes(target, path))

    def read_snapshot(self, ctx: RevisionContext | None, path: str, sink: BinaryIO) -> None:
        """Write the content of path at the context's revision, always as a snapshot.

        Unlike read, the HEAD revision resolves to the last commit rather
        than the working copy.

        Raises:
            NotFoundError: If path does not exist at that revision.
            ResolutionError: If the revision does not resolve.
        """
        snapshot = self.store.resolve_snapshot(revision_of(ctx))
        sink.write(self.store.read_bytes(snapshot, path))

    def head(self, ctx: RevisionContext | None, path: str, sink: BinaryIO) -> None:
        """Write the content of path at the last committed snapshot to sink.

        Any revision attached to ctx is ignored.

        Raises:
            NotFoundError: If path is not in the last snapshot.
            ResolutionError: If nothing has been committed yet.
        """
        snapshot = self.store.head_snapshot()
        sink.write(self.store.read_bytes(snapshot, path))

    def list(self, ctx: RevisionContext | None) -> list[str]:
        """List every path visible at the context's revision."""
        return self.store.list_paths(self._target(ctx))
