"""
PdfMarkup - Configuration Manager

This module provides centralized JSON-based configuration management
for editor tolerances, default markup styles and export options.
"""

import copy
import json
import os
from dataclasses import dataclass
from typing import Any, Final

from pdfmarkup.config import CONFIG_FILE_PATH
from pdfmarkup.constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_STROKE_WIDTH,
    MIN_SHAPE_SIZE_PX,
    SNAP_TOLERANCE_PX,
)
from pdfmarkup.utils.exceptions import ConfigurationError
from pdfmarkup.utils.logger import logger

# Default configuration values
DEFAULT_CONFIG: Final[dict[str, Any]] = {
    "version": 1,
    "editor": {
        "snap_tolerance_px": SNAP_TOLERANCE_PX,
        "min_shape_size_px": MIN_SHAPE_SIZE_PX,
        "history_limit": 0,
    },
    "defaults": {
        "shape": {
            "stroke_color": "#000000",
            "fill_color": "transparent",
            "stroke_width": DEFAULT_STROKE_WIDTH,
            "stroke_style": "solid",
        },
        "text": {
            "content": "Text",
            "font_size": DEFAULT_FONT_SIZE,
            "font_family": "Helvetica",
            "color": "black",
        },
    },
    "export": {
        "compress_streams": True,
    },
}


class ConfigManager:
    """Manages application configuration in JSON format.

    Values are addressed by dot-separated paths such as
    ``"editor.snap_tolerance_px"``. Missing keys in an older file are filled
    in from DEFAULT_CONFIG when the stored version is behind.
    """

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            config_path: Optional path to the configuration file.
                        Defaults to CONFIG_FILE_PATH.
        """
        self.config_path = config_path or CONFIG_FILE_PATH
        self._config: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file or fall back to defaults."""
        if not os.path.exists(self.config_path):
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = json.load(f)
            logger.info("Configuration loaded from JSON")
            self._upgrade_config()
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> dict[str, Any]:
        """Get a deep copy of the default configuration."""
        return copy.deepcopy(DEFAULT_CONFIG)

    def _upgrade_config(self) -> None:
        """Upgrade configuration to latest version if needed."""
        current_version = self._config.get("version", 0)

        if current_version < DEFAULT_CONFIG["version"]:
            self._merge_defaults(self._config, DEFAULT_CONFIG)
            self._config["version"] = DEFAULT_CONFIG["version"]
            logger.info(f"Configuration upgraded to version {DEFAULT_CONFIG['version']}")

    def _merge_defaults(self, config: dict, defaults: dict) -> None:
        """Merge default values into config for missing keys.

        Args:
            config: Current configuration dictionary.
            defaults: Default configuration dictionary.
        """
        for key, value in defaults.items():
            if key not in config:
                config[key] = copy.deepcopy(value)
            elif isinstance(value, dict) and isinstance(config.get(key), dict):
                self._merge_defaults(config[key], value)

    def save(self) -> bool:
        """Save configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        try:
            os.makedirs(os.path.dirname(self.config_path) or ".", exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            logger.debug("Configuration saved to JSON")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config

        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any, save_immediately: bool = True) -> None:
        """Set a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value
            value: Value to set
            save_immediately: Whether to save to file immediately
        """
        keys = key_path.split(".")
        config = self._config

        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        if save_immediately:
            self.save()


def _number(manager: ConfigManager, key_path: str, minimum: float = 0.0) -> float:
    """Read a numeric setting, rejecting non-numbers and values below minimum."""
    value = manager.get(key_path, None)
    if value is None:
        value = _default_value(key_path)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(key_path, f"expected a number, got {value!r}")
    if value < minimum:
        raise ConfigurationError(key_path, f"must be >= {minimum}")
    return float(value)


def _string(manager: ConfigManager, key_path: str) -> str:
    value = manager.get(key_path, None)
    if value is None:
        value = _default_value(key_path)
    if not isinstance(value, str):
        raise ConfigurationError(key_path, f"expected a string, got {value!r}")
    return value


def _default_value(key_path: str) -> Any:
    value: Any = DEFAULT_CONFIG
    for key in key_path.split("."):
        value = value[key]
    return value


@dataclass(frozen=True)
class EditorSettings:
    """Validated snapshot of the settings an editing session needs."""

    snap_tolerance_px: float = SNAP_TOLERANCE_PX
    min_shape_size_px: float = MIN_SHAPE_SIZE_PX
    history_limit: int = 0
    stroke_color: str = "#000000"
    fill_color: str = "transparent"
    stroke_width: float = DEFAULT_STROKE_WIDTH
    stroke_style: str = "solid"
    text_content: str = "Text"
    font_size: float = DEFAULT_FONT_SIZE
    font_family: str = "Helvetica"
    text_color: str = "black"
    compress_streams: bool = True

    @classmethod
    def from_config(cls, manager: ConfigManager) -> "EditorSettings":
        """Build settings from a ConfigManager.

        Args:
            manager: Loaded configuration

        Returns:
            New EditorSettings instance

        Raises:
            ConfigurationError: If a value has the wrong type or range
        """
        stroke_style = _string(manager, "defaults.shape.stroke_style")
        if stroke_style not in ("solid", "dashed", "dotted"):
            raise ConfigurationError("defaults.shape.stroke_style", f"unknown style {stroke_style!r}")

        font_size = _number(manager, "defaults.text.font_size")
        if font_size <= 0:
            raise ConfigurationError("defaults.text.font_size", "must be positive")

        compress = manager.get("export.compress_streams", True)
        if not isinstance(compress, bool):
            raise ConfigurationError("export.compress_streams", "expected true or false")

        return cls(
            snap_tolerance_px=_number(manager, "editor.snap_tolerance_px"),
            min_shape_size_px=_number(manager, "editor.min_shape_size_px"),
            history_limit=int(_number(manager, "editor.history_limit")),
            stroke_color=_string(manager, "defaults.shape.stroke_color"),
            fill_color=_string(manager, "defaults.shape.fill_color"),
            stroke_width=_number(manager, "defaults.shape.stroke_width"),
            stroke_style=stroke_style,
            text_content=_string(manager, "defaults.text.content"),
            font_size=font_size,
            font_family=_string(manager, "defaults.text.font_family"),
            text_color=_string(manager, "defaults.text.color"),
            compress_streams=compress,
        )


# Singleton instance for global access
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance.

    Returns:
        The singleton ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
