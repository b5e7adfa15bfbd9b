"""Named byte stream port.

A NamedStream is one file handed over for staging. Whoever receives it
drains and closes it; the caller must not touch it concurrently.
"""

from typing import Protocol


class NamedStream(Protocol):
    """Readable, closeable byte source carrying its repository path."""

    @property
    def name(self) -> str:
        """Repository-relative path the content is staged at."""
        ...

    def read(self, size: int = -1, /) -> bytes: ...

    def close(self) -> None: ...
