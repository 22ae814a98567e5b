"""
Configuration data models.

This module contains the configuration structures for the database
connection and the profiler loop. Both are frozen: configuration is supplied
once at startup and never changes afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Connection parameters for the PostgreSQL server, from `[connection]`.
    """

    host: str = "localhost"
    port: int = 5432
    # Empty means "use the current OS user" and is resolved by the CLI.
    user: str = ""
    password: str = ""
    # Empty means the server's default database for the user.
    database: str = ""

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for the driver's connect(), omitting empty values."""
        kwargs: Dict[str, Any] = {"host": self.host, "port": self.port}
        if self.user:
            kwargs["user"] = self.user
        if self.password:
            kwargs["password"] = self.password
        if self.database:
            kwargs["dbname"] = self.database
        return kwargs

    def describe(self) -> str:
        """Connection target for log messages; never includes the password."""
        return f"{self.user or '<default>'}@{self.host}:{self.port}/{self.database}"


@dataclass(frozen=True)
class ProfilerConfig:
    """
    Settings of the sampling loop, from `[profiler]`.
    """

    # Seconds between two polls; converted to whole milliseconds for sleeping.
    interval_seconds: float = 1.0
    # Number of ticks per report.
    delay: int = 1
    # Number of query shapes printed per report.
    top: int = 10
    # Only print when the change signature moved since the last report.
    diff: bool = False
    # Replace literals with placeholders before counting.
    normalize: bool = True
    # Number of recent samples summarized; 0 summarizes everything.
    window_size: int = 0

    @property
    def interval_millis(self) -> int:
        return int(1000 * self.interval_seconds)


@dataclass(frozen=True)
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    profiler: ProfilerConfig = field(default_factory=ProfilerConfig)
