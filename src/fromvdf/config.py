"""
fromvdf Configuration

Loads configuration from a YAML file or environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from fromvdf.parser.parser import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)


# Default configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".fromvdf" / "config.yaml",
    Path.cwd() / "fromvdf.yaml",
]


DEFAULT_CONFIG = {
    # Parsing
    "lossy": False,                  # Accept strings left open at end of input
    "max_depth": DEFAULT_MAX_DEPTH,  # Deepest table nesting allowed

    # Formatting
    "indent_char": "\t",
    "sort_keys": False,

    # Logging
    "log_level": "WARNING",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_STRINGS


class FromVdfConfig:
    """Configuration for parsing and formatting."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None

        # Load from file if found
        self._load_config(config_path)

        # Override with environment variables
        self._apply_env_overrides()

    def _load_config(self, explicit_path: Optional[Path] = None) -> None:
        """Load configuration from YAML file."""
        search_paths = [explicit_path] if explicit_path else CONFIG_SEARCH_PATHS

        for config_path in search_paths:
            if config_path and config_path.exists():
                try:
                    with open(config_path, 'r', encoding='utf-8') as f:
                        user_config = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning("Failed to load config from %s: %s", config_path, e)
                    continue
                if not isinstance(user_config, dict):
                    logger.warning("Ignoring config %s: top level must be a mapping", config_path)
                    continue
                self._config.update(user_config)
                self._config_path = config_path
                return

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if "FROMVDF_LOSSY" in os.environ:
            self._config["lossy"] = _parse_bool(os.environ["FROMVDF_LOSSY"])
        if "FROMVDF_MAX_DEPTH" in os.environ:
            raw = os.environ["FROMVDF_MAX_DEPTH"]
            try:
                max_depth = int(raw)
            except ValueError:
                logger.warning("Ignoring FROMVDF_MAX_DEPTH=%r: not an integer", raw)
            else:
                if max_depth < 0:
                    logger.warning("Ignoring FROMVDF_MAX_DEPTH=%r: must not be negative", raw)
                else:
                    self._config["max_depth"] = max_depth
        if "FROMVDF_LOG_LEVEL" in os.environ:
            self._config["log_level"] = os.environ["FROMVDF_LOG_LEVEL"]

    @property
    def config_path(self) -> Optional[Path]:
        """Path to loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def lossy(self) -> bool:
        """Whether an unterminated string at end of input is accepted."""
        return bool(self._config.get("lossy", False))

    @property
    def max_depth(self) -> int:
        """Deepest table nesting the parser allows."""
        value = self._config.get("max_depth", DEFAULT_MAX_DEPTH)
        try:
            max_depth = int(value)
        except (TypeError, ValueError):
            max_depth = -1
        if max_depth < 0:
            logger.warning("Ignoring max_depth=%r: expected a non-negative integer", value)
            return DEFAULT_MAX_DEPTH
        return max_depth

    @property
    def indent_char(self) -> str:
        """Indentation used when writing VDF."""
        return self._config.get("indent_char", "\t")

    @property
    def sort_keys(self) -> bool:
        """Whether written tables are sorted by key."""
        return bool(self._config.get("sort_keys", False))

    @property
    def log_level(self) -> str:
        """Logging level name for the command line."""
        return str(self._config.get("log_level", "WARNING")).upper()

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as dict."""
        return {
            "lossy": self.lossy,
            "max_depth": self.max_depth,
            "indent_char": self.indent_char,
            "sort_keys": self.sort_keys,
            "log_level": self.log_level,
            "config_file": str(self._config_path) if self._config_path else None,
        }


# Global config instance (lazy-loaded)
_config: Optional[FromVdfConfig] = None


def get_config(config_path: Optional[Path] = None) -> FromVdfConfig:
    """Get the global config instance, loading if needed."""
    global _config
    if _config is None or config_path is not None:
        _config = FromVdfConfig(config_path)
    return _config


def reset_config() -> None:
    """Drop the cached global config so the next get_config() reloads it."""
    global _config
    _config = None


def write_default_config(path: Optional[Path] = None) -> Path:
    """
    Write a default configuration file.

    Returns the path where config was written.
    """
    if path is None:
        path = Path.home() / ".fromvdf" / "config.yaml"

    path.parent.mkdir(parents=True, exist_ok=True)

    config_content = f"""# fromvdf configuration
#
# Every setting can also be overridden with an environment variable:
# FROMVDF_LOSSY, FROMVDF_MAX_DEPTH, FROMVDF_LOG_LEVEL

# Accept a quoted string left open at end of input instead of failing
lossy: false

# Deepest table nesting allowed before parsing fails
max_depth: {DEFAULT_MAX_DEPTH}

# Output layout for `fromvdf format`
indent_char: "\\t"
sort_keys: false

# DEBUG, INFO, WARNING, ERROR
log_level: WARNING
"""

    with open(path, 'w', encoding='utf-8') as f:
        f.write(config_content)

    return path
