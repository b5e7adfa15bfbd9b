"""Staging/commit orchestrator: turns named byte streams into a commit."""

import logging
from contextlib import closing

from sensei.core.revision_context import RevisionContext
from sensei.ports.streams import NamedStream
from sensei.ports.vcs import SnapshotStore

logger = logging.getLogger(__name__)


class CommitOrchestrator:
    """Drains named streams into the working copy, stages them and commits."""

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def add(self, ctx: RevisionContext | None, streams: list[NamedStream]) -> None:
        """Stage the content of every stream at its name.

        Each stream is fully read and closed before the next one is touched.
        An empty stream stages removal of its path. Staging is not atomic
        across the call: entries before a failing one remain staged.

        Raises:
            OSError: If reading a stream fails.
            NotFoundError: If removing a path that does not exist.
            StorageError: If staging fails.
        """
        entries: list[tuple[str, bytes]] = []
        for stream in streams:
            with closing(stream):
                entries.append((stream.name, stream.read()))
        self.store.stage(entries)
        logger.debug("Staged %d entries", len(entries))

    def commit(self, ctx: RevisionContext | None, message: str) -> str:
        """Commit everything staged and return the new revision."""
        return self.store.commit(message)
