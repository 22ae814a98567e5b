"""
Sources of currently executing statements.
"""

from .base import AbstractStatementSource, RawStatement, filter_active_statements
from .pg_activity import QUERY_SHOW_PROCESS, PgActivitySource

__all__ = [
    "AbstractStatementSource",
    "PgActivitySource",
    "QUERY_SHOW_PROCESS",
    "RawStatement",
    "filter_active_statements",
]
