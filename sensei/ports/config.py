"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from sensei.domain.config import SenseiConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, config_path: Path | None = None) -> SenseiConfig:
        """Load configuration.

        Args:
            config_path: Optional explicit config file layered over the
                global config.

        Returns:
            SenseiConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if a config file is missing or invalid.
        """
        ...
