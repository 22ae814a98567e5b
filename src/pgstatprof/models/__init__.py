"""
Data models for the profiler.

Configuration Models:
- Connection parameters for the database server
- Sampling loop settings
- The aggregated application configuration

Runtime Models:
- State owned by the sampling loop
"""

from .config import AppConfig, ConnectionConfig, ProfilerConfig
from .runtime import ProfilerRuntimeState

__all__ = [
    # Configuration
    "AppConfig",
    "ConnectionConfig",
    "ProfilerConfig",
    # Runtime
    "ProfilerRuntimeState",
]
