"""
Configuration validation utilities.

This module turns the raw `[connection]` and `[profiler]` tables into the
frozen configuration dataclasses, applying defaults and bounds.
"""

import logging
from typing import Any, Dict

from ..models.config import AppConfig, ConnectionConfig, ProfilerConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

_CONNECTION_KEYS = {"host", "port", "user", "password", "database"}
_PROFILER_KEYS = {"interval_seconds", "delay", "top", "diff", "normalize", "window_size"}

# One day; keeps the millisecond conversion and the sleep timeout in range.
MAX_INTERVAL_SECONDS = 86400.0


def _reject_unknown_keys(data: Dict[str, Any], known: set, section: str) -> None:
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValidationError(
            f"Unknown key(s) in [{section}]: {', '.join(unknown)}",
            field_name=section,
            value=unknown,
        )


def _validate_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {value!r}",
            field_name=field_name,
            value=value,
        )
    return value


def validate_connection_config(connection_data: Dict[str, Any]) -> ConnectionConfig:
    """
    Validate and create a ConnectionConfig from raw configuration data.

    Args:
        connection_data: Raw `[connection]` table

    Returns:
        Validated ConnectionConfig instance

    Raises:
        ValidationError: If validation fails
    """
    _reject_unknown_keys(connection_data, _CONNECTION_KEYS, "connection")
    defaults = ConnectionConfig()

    host = validate_non_empty_string(
        connection_data.get("host", defaults.host),
        field_name="connection.host",
    )
    port = validate_positive_integer(
        connection_data.get("port", defaults.port),
        min_value=1,
        max_value=65535,
        field_name="connection.port",
    )
    user = _validate_string(connection_data.get("user", defaults.user), "connection.user")
    password = _validate_string(
        connection_data.get("password", defaults.password), "connection.password"
    )
    database = _validate_string(
        connection_data.get("database", defaults.database), "connection.database"
    )

    return ConnectionConfig(
        host=host,
        port=port,
        user=user,
        password=password,
        database=database,
    )


def validate_profiler_config(profiler_data: Dict[str, Any]) -> ProfilerConfig:
    """
    Validate and create a ProfilerConfig from raw configuration data.

    Args:
        profiler_data: Raw `[profiler]` table

    Returns:
        Validated ProfilerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    _reject_unknown_keys(profiler_data, _PROFILER_KEYS, "profiler")
    defaults = ProfilerConfig()

    interval_seconds = validate_positive_float(
        profiler_data.get("interval_seconds", defaults.interval_seconds),
        min_value=0.0,
        exclusive_min=True,
        max_value=MAX_INTERVAL_SECONDS,
        field_name="profiler.interval_seconds",
    )
    delay = validate_positive_integer(
        profiler_data.get("delay", defaults.delay),
        min_value=1,
        field_name="profiler.delay",
    )
    top = validate_positive_integer(
        profiler_data.get("top", defaults.top),
        min_value=1,
        field_name="profiler.top",
    )
    window_size = validate_positive_integer(
        profiler_data.get("window_size", defaults.window_size),
        min_value=0,
        field_name="profiler.window_size",
    )
    diff = validate_boolean(profiler_data.get("diff", defaults.diff), "profiler.diff")
    normalize = validate_boolean(
        profiler_data.get("normalize", defaults.normalize), "profiler.normalize"
    )

    if int(1000 * interval_seconds) == 0:
        logger.warning(
            f"profiler.interval_seconds={interval_seconds} rounds to 0 ms; "
            "the loop will poll without sleeping"
        )

    return ProfilerConfig(
        interval_seconds=interval_seconds,
        delay=delay,
        top=top,
        diff=diff,
        normalize=normalize,
        window_size=window_size,
    )


def validate_app_config(config_data: Dict[str, Dict[str, Any]]) -> AppConfig:
    """Validate every section and assemble the AppConfig."""
    return AppConfig(
        connection=validate_connection_config(config_data.get("connection", {})),
        profiler=validate_profiler_config(config_data.get("profiler", {})),
    )
