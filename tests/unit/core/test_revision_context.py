"""Tests for the revision context carrier."""

from sensei.core.revision_context import (
    EMPTY_CONTEXT,
    RevisionContext,
    diff_range_of,
    model_metadata_of,
    revision_of,
    with_diff_range,
    with_model_metadata,
    with_revision,
)
from sensei.domain.entities import HEAD_REVISION, DiffRange, ModelMetadata


class TestRevisionOf:
    """Tests for revision lookup."""

    def test_default_is_head(self) -> None:
        assert revision_of(None) == HEAD_REVISION
        assert revision_of(RevisionContext()) == HEAD_REVISION

    def test_with_revision(self) -> None:
        assert revision_of(with_revision(None, "test")) == "test"

    def test_nearest_attachment_wins(self) -> None:
        ctx = with_revision(with_revision(None, "outer"), "inner")
        assert revision_of(ctx) == "inner"


class TestDiffRangeOf:
    """Tests for diff range lookup."""

    def test_default_is_zero(self) -> None:
        assert diff_range_of(None) == DiffRange()
        assert diff_range_of(None).is_zero

    def test_with_from_to(self) -> None:
        got = diff_range_of(with_diff_range(None, "src", "dst"))
        assert got == DiffRange(from_rev="src", to_rev="dst")
        assert not got.is_zero

    def test_half_range_is_not_zero(self) -> None:
        assert not DiffRange(from_rev="src").is_zero


class TestImmutability:
    """Derived contexts never alter their parent."""

    def test_parent_untouched(self) -> None:
        parent = with_revision(None, "abc")
        child = with_diff_range(parent, "a", "b")

        assert parent.diff_range is None
        assert revision_of(child) == "abc"
        assert diff_range_of(child) == DiffRange("a", "b")

    def test_siblings_independent(self) -> None:
        parent = with_revision(None, "base")
        left = with_revision(parent, "left")
        right = with_revision(parent, "right")

        assert revision_of(left) == "left"
        assert revision_of(right) == "right"
        assert revision_of(parent) == "base"

    def test_empty_context_shared_default(self) -> None:
        with_revision(EMPTY_CONTEXT, "x")
        assert EMPTY_CONTEXT.revision is None


class TestModelMetadata:
    """Tests for model metadata lookup."""

    def test_default(self) -> None:
        assert model_metadata_of(None) == ModelMetadata()

    def test_with_metadata_keeps_revision(self) -> None:
        meta = ModelMetadata(temperature=0.2, output_token_limit=256)
        ctx = with_model_metadata(with_revision(None, "abc"), meta)

        assert model_metadata_of(ctx) == meta
        assert revision_of(ctx) == "abc"
