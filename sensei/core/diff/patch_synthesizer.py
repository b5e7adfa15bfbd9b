"""Patch synthesizer: one patch document for a pending or historical change set.

Worktree mode (no diff range) walks the status report and emits a patch
for every untracked, added or modified path; deleted paths are not
emitted. Commit-range mode streams the store's native tree-to-tree patch.
"""

import logging
from typing import BinaryIO

from sensei.core.diff.diff_engine import DiffEngine, read_text
from sensei.core.revision_context import RevisionContext, diff_range_of, with_revision
from sensei.domain.entities import HEAD_REVISION, ChangeClassification, DiffRange, PathPatch
from sensei.ports.vcs import SnapshotStore

logger = logging.getLogger(__name__)


class PatchSynthesizer:
    """Assembles per-path patches into a single document."""

    def __init__(self, store: SnapshotStore, engine: DiffEngine) -> None:
        self.store = store
        self.engine = engine

    def diff_patch(self, ctx: RevisionContext | None, sink: BinaryIO) -> None:
        """Write the patch document for the context's diff range to sink.

        Raises:
            NotFoundError: If a changed path cannot be read.
            ResolutionError: If a range revision does not resolve.
            StorageError: On underlying storage failure.
        """
        diff_range = diff_range_of(ctx)
        if diff_range.is_zero:
            self._patch_worktree(ctx, sink)
        else:
            self._patch_range(diff_range, sink)

    def worktree_patches(self, ctx: RevisionContext | None) -> list[PathPatch]:
        """Per-path patches of the working copy against its last snapshot.

        Returns:
            Patches in status-report order; empty for a clean tree.
        """
        status = self.store.status()
        if not status:
            return []

        patches: list[PathPatch] = []
        for path, change in status.items():
            match change:
                case ChangeClassification.UNTRACKED | ChangeClassification.ADDED:
                    to_text = read_text(
                        with_revision(ctx, HEAD_REVISION), path, self.engine.reader.read
                    )
                    patches.append(self.engine.path_patch(path, "", to_text))
                case ChangeClassification.MODIFIED:
                    from_text, to_text = self.engine.diff(ctx, path)
                    patches.append(self.engine.path_patch(path, from_text, to_text))
                case ChangeClassification.DELETED | ChangeClassification.UNMODIFIED:
                    continue
            logger.debug("Patched %s (%s)", path, change.value)
        return patches

    def _patch_worktree(self, ctx: RevisionContext | None, sink: BinaryIO) -> None:
        patches = self.worktree_patches(ctx)
        if not patches:
            return
        parts: list[str] = []
        for patch in patches:
            parts.extend((patch.path, patch.body))
        sink.write("\n".join(parts).encode("utf-8"))

    def _patch_range(self, diff_range: DiffRange, sink: BinaryIO) -> None:
        from_snapshot = self.store.resolve_snapshot(diff_range.from_rev)
        to_snapshot = self.store.resolve_snapshot(diff_range.to_rev)
        self.store.encode_patch(from_snapshot, to_snapshot, sink)
