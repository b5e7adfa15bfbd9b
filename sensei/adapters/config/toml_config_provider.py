"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Explicit: file passed with --config
2. Global: ~/.config/sensei/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from sensei.domain.config import SenseiConfig
from sensei.shared.config_io import get_global_config_path, load_config_data

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load explicit config if given
    3. Explicit values override global values (key-level merge per section)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, config_path: Path | None = None) -> SenseiConfig:
        """Load configuration with global fallback.

        Args:
            config_path: Optional explicit config file.

        Returns:
            SenseiConfig instance with merged values or defaults
        """
        config = SenseiConfig.default()

        global_path = get_global_config_path()
        if global_path.exists():
            try:
                config = SenseiConfig.from_partial(config, load_config_data(global_path))
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if config_path is not None:
            try:
                config = SenseiConfig.from_partial(config, load_config_data(config_path))
                logger.debug("Loaded config from %s", config_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to load config %s: %s. Using global/default configuration.",
                    config_path,
                    e,
                )

        return config
