"""In-memory NamedStream implementation."""

import io


class BufferedStream(io.BytesIO):
    """BytesIO that carries the repository path it should be staged at."""

    def __init__(self, name: str, content: bytes = b"") -> None:
        super().__init__(content)
        self.name = name

    @classmethod
    def from_text(cls, name: str, text: str) -> "BufferedStream":
        return cls(name, text.encode("utf-8"))
