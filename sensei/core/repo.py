"""Repository facade over one snapshot store.

Bundles the content reader, diff engine, patch synthesizer and commit
orchestrator so callers hold a single handle. Operations are synchronous
and not serialized: concurrent writers on the same working copy must
coordinate externally.
"""

from __future__ import annotations

from typing import BinaryIO

from sensei.core.content.reader import ContentReader
from sensei.core.diff.diff_engine import DiffEngine
from sensei.core.diff.patch_synthesizer import PatchSynthesizer
from sensei.core.revision_context import RevisionContext
from sensei.core.staging.commit_orchestrator import CommitOrchestrator
from sensei.domain.entities import ChangeClassification
from sensei.ports.streams import NamedStream
from sensei.ports.vcs import SnapshotStore


class Repository:
    """Revision-aware read, diff and commit access to a working copy."""

    def __init__(self, store: SnapshotStore, context_lines: int = 3) -> None:
        """Initialize repository.

        Args:
            store: Snapshot store adapter.
            context_lines: Unchanged lines kept around each worktree hunk.
        """
        self.store = store
        self.reader = ContentReader(store)
        self.engine = DiffEngine(self.reader, context_lines=context_lines)
        self.synthesizer = PatchSynthesizer(store, self.engine)
        self.orchestrator = CommitOrchestrator(store)

    def read(self, ctx: RevisionContext | None, path: str, sink: BinaryIO) -> None:
        self.reader.read(ctx, path, sink)

    def head(self, ctx: RevisionContext | None, path: str, sink: BinaryIO) -> None:
        self.reader.head(ctx, path, sink)

    def list(self, ctx: RevisionContext | None) -> list[str]:
        return self.reader.list(ctx)

    def status(self) -> dict[str, ChangeClassification]:
        return self.store.status()

    def diff(self, ctx: RevisionContext | None, path: str) -> tuple[str, str]:
        return self.engine.diff(ctx, path)

    def diff_patch(self, ctx: RevisionContext | None, sink: BinaryIO) -> None:
        self.synthesizer.diff_patch(ctx, sink)

    def add(self, ctx: RevisionContext | None, streams: list[NamedStream]) -> None:
        self.orchestrator.add(ctx, streams)

    def commit(self, ctx: RevisionContext | None, message: str) -> str:
        return self.orchestrator.commit(ctx, message)
