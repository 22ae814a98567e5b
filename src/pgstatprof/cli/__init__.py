"""
Command-line interface for the pgstatprof package.

This module provides the main CLI entry point for the profiler.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
