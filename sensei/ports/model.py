"""Language-model port interface.

The model client is an external collaborator; only the request/response
contract lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:
    from sensei.core.revision_context import RevisionContext


@dataclass(frozen=True)
class Message:
    """One prompt request.

    Attributes:
        system: System instruction, may be empty.
        user: User prompt.
        context: Extra text placed before the user prompt.
        template: Prompt template name understood by the backend.
        metadata: Free-form backend options.
    """

    system: str = ""
    user: str = ""
    context: str = ""
    template: str = ""
    metadata: dict[str, str] = field(default_factory=dict)


class Prompter(Protocol):
    """Protocol for text generation."""

    def prompt(self, ctx: RevisionContext | None, message: Message, sink: BinaryIO) -> None:
        """Generate text for message and write it to sink.

        Generation options are read with model_metadata_of(ctx).
        """
        ...


class Embedder(Protocol):
    """Protocol for text embeddings."""

    def embeddings(self, ctx: RevisionContext | None, text: str) -> list[float]:
        """Embed text into a vector.

        Identical input text must always produce an identical vector.
        """
        ...


class Model(Prompter, Embedder, Protocol):
    """A backend offering both generation and embeddings."""
