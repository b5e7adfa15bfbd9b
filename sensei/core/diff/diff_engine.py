"""Diff engine: two-sided text for one path and its rendered patch.

Patches are unified diffs produced by difflib. Identical sides render to
an empty patch; an empty "from" side renders as a pure insertion and an
empty "to" side as a pure deletion.
"""

import difflib
import io
import logging
from collections.abc import Callable
from typing import BinaryIO

from sensei.core.content.reader import ContentReader
from sensei.core.revision_context import RevisionContext, diff_range_of, with_revision
from sensei.domain.entities import HEAD_REVISION, PathPatch

logger = logging.getLogger(__name__)

ReadFunc = Callable[[RevisionContext | None, str, BinaryIO], None]

NO_NEWLINE_MARKER = "\\ No newline at end of file\n"


def read_text(ctx: RevisionContext | None, path: str, read: ReadFunc) -> str:
    """Run a sink-style read and return its output as text.

    Undecodable bytes are replaced rather than rejected.
    """
    buf = io.BytesIO()
    read(ctx, path, buf)
    return buf.getvalue().decode("utf-8", errors="replace")


def render_unified(path: str, from_text: str, to_text: str, context_lines: int = 3) -> str:
    """Render the unified diff between two texts, addressed to path.

    Args:
        path: Repository-relative path used in the ---/+++ headers.
        from_text: Old content.
        to_text: New content.
        context_lines: Unchanged lines kept around each hunk.

    Returns:
        Patch text, empty when both sides are identical.
    """
    lines = difflib.unified_diff(
        from_text.splitlines(keepends=True),
        to_text.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        n=context_lines,
    )
    out = []
    for line in lines:
        if line.endswith("\n"):
            out.append(line)
        else:
            out.append(line + "\n" + NO_NEWLINE_MARKER)
    return "".join(out)


class DiffEngine:
    """Computes (from, to) text pairs and renders single-path patches."""

    def __init__(self, reader: ContentReader, context_lines: int = 3) -> None:
        """Initialize diff engine.

        Args:
            reader: Content reader used for every side of a diff.
            context_lines: Unchanged lines kept around each hunk.
        """
        self.reader = reader
        self.context_lines = context_lines

    def diff(self, ctx: RevisionContext | None, path: str) -> tuple[str, str]:
        """Return the (from, to) texts of path for the context's diff range.

        With a diff range attached both sides are snapshot reads, so HEAD
        means the last commit there. Without one, "from" is the last snapshot and "to" is the live working copy.

        Raises:
            NotFoundError: If path is missing on either side. Callers that
                want "did not exist" semantics substitute empty text themselves.
            ResolutionError: If a revision does not resolve.
        """
        diff_range = diff_range_of(ctx)
        if not diff_range.is_zero:
            from_text = read_text(
                with_revision(None, diff_range.from_rev), path, self.reader.read_snapshot
            )
            to_text = read_text(
                with_revision(None, diff_range.to_rev), path, self.reader.read_snapshot
            )
            return from_text, to_text

        from_text = read_text(ctx, path, self.reader.head)
        to_text = read_text(with_revision(ctx, HEAD_REVISION), path, self.reader.read)
        return from_text, to_text

    def render_patch(self, path: str, from_text: str, to_text: str) -> str:
        """Render the patch turning from_text into to_text for path."""
        return render_unified(path, from_text, to_text, self.context_lines)

    def path_patch(self, path: str, from_text: str, to_text: str) -> PathPatch:
        """Render a patch and pair it with its path."""
        return PathPatch(path=path, body=self.render_patch(path, from_text, to_text))
