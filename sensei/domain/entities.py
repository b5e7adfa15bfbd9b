"""Core domain entities for revision-aware repository access.

Revisions are plain strings. The distinguished value HEAD_REVISION means
"whatever the live working copy currently contains" and is never pinned
to a snapshot id; every other revision names an immutable snapshot.
"""

from dataclasses import dataclass
from enum import Enum

HEAD_REVISION = "HEAD"


def is_head(revision: str) -> bool:
    """Check whether a revision is the live working copy sentinel.

    Args:
        revision: Revision string to check.

    Returns:
        True if revision is HEAD_REVISION.
    """
    return revision == HEAD_REVISION


@dataclass(frozen=True)
class DiffRange:
    """A (from, to) pair of revisions to diff between.

    The zero range (both sides empty) means no range was selected: diffs
    then compare the live working copy against its last snapshot.

    Attributes:
        from_rev: Starting revision.
        to_rev: Ending revision.
    """

    from_rev: str = ""
    to_rev: str = ""

    @property
    def is_zero(self) -> bool:
        """True when neither side of the range is set."""
        return self.from_rev == "" and self.to_rev == ""


class ChangeClassification(Enum):
    """How a working-copy path differs from the last snapshot."""

    UNTRACKED = "untracked"
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNMODIFIED = "unmodified"


@dataclass(frozen=True)
class WorkingCopy:
    """Read target for the live, mutable on-disk file set."""


@dataclass(frozen=True)
class Snapshot:
    """Read target for an immutable recorded state.

    Attributes:
        sha: Full commit id the snapshot was resolved to.
    """

    sha: str

    def __str__(self) -> str:
        return self.sha


ReadTarget = WorkingCopy | Snapshot

WORKING_COPY = WorkingCopy()


@dataclass(frozen=True)
class PathPatch:
    """Rendered textual patch for a single path.

    Attributes:
        path: Repository-relative path (POSIX separators).
        body: Unified diff text, empty when the two sides are identical.
    """

    path: str
    body: str

    @property
    def is_empty(self) -> bool:
        return self.body == ""


@dataclass(frozen=True)
class ModelMetadata:
    """Generation options for the language-model collaborator.

    Attributes:
        temperature: Sampling temperature, 0 means backend default.
        output_token_limit: Maximum generated tokens, 0 means backend default.
    """

    temperature: float = 0.0
    output_token_limit: int = 0
