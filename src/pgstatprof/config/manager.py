"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config, merge_overrides
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# None means "no file": built-in defaults plus any overrides.
_CONFIG_FILE_PATH: Optional[Path] = None

_CONFIG_OVERRIDES: Dict[str, Dict[str, Any]] = {}


def set_config_path(config_path: Optional[Path]) -> None:
    """
    Set the configuration file path.

    Args:
        config_path: Path to a TOML file, or None to use defaults only

    Note:
        Clears the cached configuration so the next get_config() reloads.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = config_path
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def set_config_overrides(overrides: Dict[str, Dict[str, Any]]) -> None:
    """
    Set per-section values that take precedence over the configuration file.

    Used by the CLI to layer command-line flags over the TOML file.
    """
    global _CONFIG_OVERRIDES, _CONFIG
    _CONFIG_OVERRIDES = {section: dict(values) for section, values in overrides.items()}
    _CONFIG = None


def clear_config_cache() -> None:
    """
    Clear the cached configuration and overrides, forcing a reload on next
    access.
    """
    global _CONFIG, _CONFIG_OVERRIDES
    _CONFIG = None
    _CONFIG_OVERRIDES = {}
    logger.debug("Configuration cache cleared")


def load_config(
    config_path: Optional[Path],
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> AppConfig:
    """
    Load and validate the application configuration.

    Args:
        config_path: TOML file to read, or None for defaults only
        overrides: Per-section values layered over the file

    Returns:
        Fully validated AppConfig instance

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
        KeyError: If a section has the wrong shape
    """
    try:
        config_data = load_main_config(config_path)
        merged = merge_overrides(config_data, overrides)
        app_config = validate_app_config(merged)
    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.info(
        f"Configuration loaded: target={app_config.connection.describe()}, "
        f"window_size={app_config.profiler.window_size}, "
        f"interval={app_config.profiler.interval_seconds}s"
    )
    return app_config


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config(_CONFIG_FILE_PATH, _CONFIG_OVERRIDES)
    return _CONFIG


def is_config_loaded() -> bool:
    """
    Check if configuration has been loaded and cached.
    """
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH) if _CONFIG_FILE_PATH else None,
        "override_sections": sorted(_CONFIG_OVERRIDES),
    }
