"""
pgstatprof: live query-frequency profiler for PostgreSQL.

The profiler repeatedly samples the statements currently executing on a
server, normalizes each one into a query shape by erasing its literals, and
reports which shapes occur most often, either since startup or over a
trailing window of recent samples.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Configuration and runtime data structures
- validation: Input validation and error handling
- normalization: Literal-erasing query normalization
- summarizers: Cumulative and sliding-window aggregation
- collectors: Sources of active statements (pg_stat_activity)
- orchestration: The sampling loop and signal handling
- system: Operating-system lookups
- cli: Command-line interface

Usage:
    From command line:
        pgstatprof [options]

    Programmatically:
        from pgstatprof import normalize_query, create_summarizer
        summarizer = create_summarizer(window_size=10)
        summarizer.update([normalize_query(q) for q in queries])
        summarizer.show(10)
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli
from .orchestration import QueryProfiler

# Model classes for external use
from .models import AppConfig, ConnectionConfig, ProfilerConfig

# Core engines
from .normalization import normalize_query
from .summarizers import (
    AbstractSummarizer,
    CumulativeSummarizer,
    RecentSummarizer,
    create_summarizer,
)

# Data sources
from .collectors import AbstractStatementSource, PgActivitySource, RawStatement

# Validation utilities
from .validation import DataSourceConnectionError, DataSourceError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    "QueryProfiler",
    # Models
    "AppConfig",
    "ConnectionConfig",
    "ProfilerConfig",
    # Engines
    "normalize_query",
    "AbstractSummarizer",
    "CumulativeSummarizer",
    "RecentSummarizer",
    "create_summarizer",
    # Data sources
    "AbstractStatementSource",
    "PgActivitySource",
    "RawStatement",
    # Errors
    "DataSourceConnectionError",
    "DataSourceError",
    "ValidationError",
]
