"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the TOML
configuration file and the merging of command-line overrides on top of it.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("connection", "profiler")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_main_config(config_path: Optional[Path]) -> Dict[str, Any]:
    """
    Load the main configuration file, or return an empty mapping when no
    file was configured.
    """
    if config_path is None:
        logger.debug("No configuration file set, using built-in defaults")
        return {}
    return load_toml_file(config_path, "main configuration file")


def merge_overrides(
    config_data: Dict[str, Any],
    overrides: Optional[Dict[str, Dict[str, Any]]],
) -> Dict[str, Dict[str, Any]]:
    """
    Layer per-section overrides over the file data.

    Keys whose override value is None are left untouched, so callers can pass
    every command-line option and only the ones actually given take effect.

    Args:
        config_data: Parsed configuration file data
        overrides: Mapping of section name to {key: value}

    Returns:
        A new mapping holding only the known sections
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for section in CONFIG_SECTIONS:
        section_data = config_data.get(section, {})
        if not isinstance(section_data, dict):
            raise KeyError(f"[{section}] must be a table in the configuration file")
        merged[section] = dict(section_data)

    for section, values in (overrides or {}).items():
        if section not in merged:
            raise KeyError(f"Unknown configuration section: {section}")
        for key, value in values.items():
            if value is not None:
                merged[section][key] = value
    return merged
