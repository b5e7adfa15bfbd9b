"""Config domain models for sensei.

Configuration is stored in TOML (global ~/.config/sensei/config.toml or an
explicit file) and controls the commit identity and patch rendering. This
module defines the domain models that represent validated configuration state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class AuthorConfig:
    """Fixed identity recorded on every commit.

    Attributes:
        name: Author and committer name.
        email: Author and committer email.

    Raises:
        ValueError: If name or email is not a string or is empty.
    """

    name: str = "sensei"
    email: str = "sensei@localhost"

    def __post_init__(self) -> None:
        """Validate author config after initialization."""
        if not isinstance(self.name, str) or not isinstance(self.email, str):
            raise ValueError("author name and email must be strings")
        if not self.name.strip():
            raise ValueError("author name cannot be empty")
        if not self.email.strip():
            raise ValueError("author email cannot be empty")


@dataclass(frozen=True)
class DiffConfig:
    """Configuration for per-path patch rendering.

    Attributes:
        context_lines: Unchanged lines shown around each hunk.

    Raises:
        ValueError: If context_lines is not an integer or is negative.
    """

    context_lines: int = 3

    def __post_init__(self) -> None:
        """Validate diff config after initialization."""
        if not isinstance(self.context_lines, int) or isinstance(self.context_lines, bool):
            raise ValueError(
                f"context_lines must be an integer, got {self.context_lines!r}"
            )
        if self.context_lines < 0:
            raise ValueError(
                f"context_lines cannot be negative, got {self.context_lines}"
            )


@dataclass(frozen=True)
class SenseiConfig:
    """Complete sensei configuration.

    Attributes:
        author: Commit identity.
        diff: Patch rendering settings.
    """

    author: AuthorConfig = field(default_factory=AuthorConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)

    @staticmethod
    def default() -> "SenseiConfig":
        """Create config with all default values."""
        return SenseiConfig()

    @staticmethod
    def from_partial(base: "SenseiConfig", partial: dict[str, Any]) -> "SenseiConfig":
        """Create a new config by overlaying partial data on a base config.

        Only keys present in partial are changed; each section is validated
        again as it is rebuilt.

        Args:
            base: Config to start from.
            partial: Raw TOML data, keyed by section name.

        Returns:
            New SenseiConfig with merged values.

        Raises:
            ValueError: If a section is not a table, a key is unknown, or a
                value fails validation.
        """
        sections: dict[str, Any] = {}
        for section in fields(base):
            if section.name not in partial:
                continue
            data = partial[section.name]
            if not isinstance(data, dict):
                raise ValueError(f"[{section.name}] must be a table")
            current = getattr(base, section.name)
            known = {f.name for f in fields(current)}
            unknown = set(data) - known
            if unknown:
                raise ValueError(
                    f"Unknown keys in [{section.name}]: {', '.join(sorted(unknown))}"
                )
            try:
                sections[section.name] = replace(current, **data)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid [{section.name}] section: {e}") from e
        return replace(base, **sections)
