"""
Extractor Configuration

Loads configuration from a YAML file, then applies environment variable
overrides. Command line options are applied on top of this by the CLI.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from xivextract.archive.exd import Language
from xivextract.schema.providers import PROVIDERS

logger = logging.getLogger(__name__)


# Default configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".xivextract" / "config.yaml",
]


DEFAULT_CONFIG: Dict[str, Any] = {
    "game_path": None,
    "schema_path": str(Path.home() / ".xivextract" / "schemas"),
    "schema_format": "exdschema",
    "schema_version": None,     # None: use the archive's own version
    "language": "en",
    "debug": False,
}


ENV_MAPPINGS = {
    "XIV_GAME_PATH": "game_path",
    "XIVEXTRACT_SCHEMA_PATH": "schema_path",
    "XIVEXTRACT_SCHEMA_VERSION": "schema_version",
    "XIVEXTRACT_DEBUG": "debug",
}

TRUE_VALUES = ("1", "true", "yes", "on")


class ExtractorConfig:
    """Configuration for the extractor and its command line."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None

        self._load_config(config_path)
        self._apply_env_overrides()

    def _load_config(self, explicit_path: Optional[Path] = None) -> None:
        """Load configuration from the first YAML file found."""
        search_paths = [explicit_path] if explicit_path else CONFIG_SEARCH_PATHS

        for config_path in search_paths:
            if config_path and config_path.exists():
                try:
                    with open(config_path, 'r', encoding='utf-8') as f:
                        user_config = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Failed to load config from {config_path}: {e}")
                    continue
                if not isinstance(user_config, dict):
                    logger.warning(f"Ignoring config {config_path}: expected a mapping")
                    continue
                self._config.update(user_config)
                self._config_path = config_path
                logger.debug(f"Loaded config from {config_path}")
                return

    def _apply_env_overrides(self) -> None:
        for env_var, config_key in ENV_MAPPINGS.items():
            if env_var in os.environ:
                self._config[config_key] = os.environ[env_var]

    def override(self, **values: Any) -> None:
        """Set keys from command line options; ``None`` values are ignored."""
        for key, value in values.items():
            if value is not None:
                self._config[key] = value

    @property
    def config_path(self) -> Optional[Path]:
        """Path to the loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def game_path(self) -> Optional[Path]:
        """Game installation folder (the one holding ``ffxivgame.ver``)."""
        value = self._config.get("game_path")
        return Path(value).expanduser() if value else None

    @property
    def schema_path(self) -> Path:
        """Folder of per-version schema definitions."""
        return Path(self._config["schema_path"]).expanduser()

    @property
    def schema_format(self) -> str:
        value = str(self._config.get("schema_format") or "exdschema").lower()
        if value not in PROVIDERS:
            raise ValueError(
                f"Unknown schema format {value!r}; expected one of {', '.join(sorted(PROVIDERS))}"
            )
        return value

    @property
    def schema_version(self) -> Optional[str]:
        value = self._config.get("schema_version")
        return str(value) if value else None

    @property
    def language(self) -> Language:
        return Language.from_code(str(self._config.get("language") or "en"))

    @property
    def debug(self) -> bool:
        value = self._config.get("debug", False)
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        return bool(value)

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as dict."""
        return {
            "game_path": str(self.game_path) if self.game_path else None,
            "schema_path": str(self.schema_path),
            "schema_format": self.schema_format,
            "schema_version": self.schema_version,
            "language": self.language.suffix or "none",
            "debug": self.debug,
            "config_file": str(self._config_path) if self._config_path else None,
        }
