"""
Defines the statement record and the abstract statement source.

This module provides:
- RawStatement: one row of the server's activity view.
- filter_active_statements: keeps the rows worth counting.
- AbstractStatementSource: the interface every data source implements.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawStatement:
    """
    A statement reported by the server at one poll.

    Attributes:
        state: Backend state, e.g. "active" or "idle".
        text: The statement text as sent by the client.
    """

    state: str
    text: str


def filter_active_statements(
    rows: Iterable[Tuple[Optional[str], Optional[str]]],
    own_query: str,
) -> List[RawStatement]:
    """
    Keep the rows that describe a running statement.

    A row is kept when its state is "active", its text is non-empty and its
    text is not the profiler's own polling query. Rows with a NULL state or
    text are skipped.

    Args:
        rows: (state, text) pairs as returned by the server.
        own_query: The query the profiler itself uses to poll.

    Returns:
        The retained statements, in server order.
    """
    statements = []
    for state, text in rows:
        if state is None or text is None:
            continue
        if state != "active" or text == "" or text == own_query:
            continue
        statements.append(RawStatement(state=state, text=text))
    return statements


class AbstractStatementSource(ABC):
    """
    Abstract base class for statement sources.

    A statement source owns the connection to one database server and lists
    the statements currently executing on it. Every failure is fatal to the
    caller; implementations do not retry.
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Open the connection to the server.

        Raises:
            DataSourceConnectionError: If the server cannot be reached.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection; safe to call more than once."""
        pass

    @abstractmethod
    def list_active_statements(self) -> List[RawStatement]:
        """
        Return the statements currently executing on the server.

        Raises:
            DataSourceError: If the poll fails.
        """
        pass

    def __enter__(self) -> "AbstractStatementSource":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
