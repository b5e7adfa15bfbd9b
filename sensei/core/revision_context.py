"""Revision context carrier.

Callers select which revision (or diff range) an operation targets by
attaching it to an immutable RevisionContext instead of threading extra
parameters through every call. Each with_* helper returns a derived
context and never alters the one passed in, so concurrent operations
sharing a parent context cannot interfere.

Example:
    ctx = with_revision(None, "3f2a9c1")
    repo.read(ctx, "README.md", sink)
"""

from dataclasses import dataclass, replace

from sensei.domain.entities import HEAD_REVISION, DiffRange, ModelMetadata


@dataclass(frozen=True)
class RevisionContext:
    """Immutable bag of per-operation selections.

    Unset slots are None; use the *_of accessors to read them with their
    defaults applied.
    """

    revision: str | None = None
    diff_range: DiffRange | None = None
    model_metadata: ModelMetadata | None = None


EMPTY_CONTEXT = RevisionContext()


def _base(ctx: RevisionContext | None) -> RevisionContext:
    return EMPTY_CONTEXT if ctx is None else ctx


def with_revision(ctx: RevisionContext | None, revision: str) -> RevisionContext:
    """Derive a context that reads from revision."""
    return replace(_base(ctx), revision=revision)


def revision_of(ctx: RevisionContext | None) -> str:
    """Revision selected by ctx, HEAD_REVISION when none was attached."""
    if ctx is None or ctx.revision is None:
        return HEAD_REVISION
    return ctx.revision


def with_diff_range(ctx: RevisionContext | None, from_rev: str, to_rev: str) -> RevisionContext:
    """Derive a context that diffs from_rev against to_rev."""
    return replace(_base(ctx), diff_range=DiffRange(from_rev=from_rev, to_rev=to_rev))


def diff_range_of(ctx: RevisionContext | None) -> DiffRange:
    """Diff range selected by ctx, the zero range when none was attached."""
    if ctx is None or ctx.diff_range is None:
        return DiffRange()
    return ctx.diff_range


def with_model_metadata(ctx: RevisionContext | None, metadata: ModelMetadata) -> RevisionContext:
    """Derive a context carrying generation options for the model client."""
    return replace(_base(ctx), model_metadata=metadata)


def model_metadata_of(ctx: RevisionContext | None) -> ModelMetadata:
    """Generation options attached to ctx, defaults when none were attached."""
    if ctx is None or ctx.model_metadata is None:
        return ModelMetadata()
    return ctx.model_metadata
