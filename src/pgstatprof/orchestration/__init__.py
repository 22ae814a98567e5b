"""
Orchestration of the sampling loop.

This module provides the QueryProfiler loop and the signal handling that
stops it.
"""

from .profiler import QueryProfiler, format_report_header
from .signal_handler import SignalHandler

__all__ = [
    "QueryProfiler",
    "SignalHandler",
    "format_report_header",
]
