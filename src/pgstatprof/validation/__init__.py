"""
Validation and error handling for the pgstatprof package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    DataSourceConnectionError,
    DataSourceError,
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)
from .validators import (
    validate_boolean,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Errors
    "DataSourceConnectionError",
    "DataSourceError",
    "ErrorSeverity",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    # Validators
    "validate_boolean",
    "validate_non_empty_string",
    "validate_positive_float",
    "validate_positive_integer",
]
