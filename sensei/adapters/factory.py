"""Factory functions for adapter instantiation.

Keeps the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sensei.core.repo import Repository
    from sensei.domain.config import SenseiConfig
    from sensei.ports.config import ConfigProvider


def create_config_provider() -> ConfigProvider:
    """Create the default configuration provider."""
    from sensei.adapters.config.toml_config_provider import TomlConfigProvider

    return TomlConfigProvider()


def open_repository(repo_root: Path, config: SenseiConfig | None = None) -> Repository:
    """Open the git repository at repo_root.

    Args:
        repo_root: Working copy root.
        config: Configuration; defaults when None.

    Returns:
        Repository backed by the git CLI adapter.

    Raises:
        StorageError: If repo_root is not a git repository.
    """
    from sensei.adapters.git_cmd import GitAdapter
    from sensei.core.repo import Repository
    from sensei.domain.config import SenseiConfig

    config = config or SenseiConfig.default()
    store = GitAdapter(repo_root, author=config.author)
    return Repository(store, context_lines=config.diff.context_lines)


def init_repository(repo_root: Path, config: SenseiConfig | None = None) -> Repository:
    """Create an empty git repository at repo_root and open it.

    Raises:
        StorageError: If the repository cannot be created.
    """
    from sensei.adapters.git_cmd import GitAdapter
    from sensei.core.repo import Repository
    from sensei.domain.config import SenseiConfig

    config = config or SenseiConfig.default()
    store = GitAdapter.init(repo_root, author=config.author)
    return Repository(store, context_lines=config.diff.context_lines)
