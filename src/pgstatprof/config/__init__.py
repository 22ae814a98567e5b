"""
Configuration management for the pgstatprof package.

This module provides a clean interface for loading, validating, and accessing
configuration data from an optional TOML file plus command-line overrides.
"""

# Main configuration interface
from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    load_config,
    set_config_overrides,
    set_config_path,
)

# For advanced usage - direct access to loaders and validators
from .loader import (
    load_main_config,
    load_toml_file,
    merge_overrides,
)
from .validators import (
    validate_app_config,
    validate_connection_config,
    validate_profiler_config,
)

__all__ = [
    # Main interface
    "get_config",
    "load_config",
    "set_config_path",
    "set_config_overrides",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "load_toml_file",
    "load_main_config",
    "merge_overrides",
    "validate_app_config",
    "validate_connection_config",
    "validate_profiler_config",
]
