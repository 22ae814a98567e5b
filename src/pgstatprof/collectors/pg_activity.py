"""
Statement source for PostgreSQL.

This module provides the PgActivitySource class, which polls the
`pg_stat_activity` view through psycopg2.
"""

import logging
from typing import List, Optional

import psycopg2

from ..models.config import ConnectionConfig
from ..validation import DataSourceConnectionError, DataSourceError
from .base import AbstractStatementSource, RawStatement, filter_active_statements

logger = logging.getLogger(__name__)

QUERY_SHOW_PROCESS = "SELECT state,query FROM pg_stat_activity"


class PgActivitySource(AbstractStatementSource):
    """
    Lists active statements from `pg_stat_activity`.

    The connection runs in autocommit mode: inside a transaction PostgreSQL
    serves the statistics views from a snapshot taken at first access, and
    every poll would return the same rows.

    Attributes:
        connection_config: Where and how to connect.
        query: The polling query; rows equal to it are dropped.
    """

    def __init__(self, connection_config: ConnectionConfig, query: str = QUERY_SHOW_PROCESS):
        self.connection_config = connection_config
        self.query = query
        self._connection: Optional["psycopg2.extensions.connection"] = None

    @property
    def connected(self) -> bool:
        return self._connection is not None and not self._connection.closed

    def connect(self) -> None:
        if self.connected:
            return
        target = self.connection_config.describe()
        logger.info(f"Connecting to PostgreSQL at {target}")
        try:
            connection = psycopg2.connect(**self.connection_config.connect_kwargs())
            connection.autocommit = True
        except psycopg2.Error as e:
            raise DataSourceConnectionError(
                f"fail get postgres connection: {target}: {e}"
            ) from e
        self._connection = connection

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None
            logger.debug("PostgreSQL connection closed")

    def list_active_statements(self) -> List[RawStatement]:
        if not self.connected:
            raise DataSourceConnectionError("PostgreSQL connection is not open")
        try:
            with self._connection.cursor() as cursor:
                cursor.execute(self.query)
                rows = cursor.fetchall()
        except psycopg2.Error as e:
            raise DataSourceError(f"fail query(): {e}") from e
        statements = filter_active_statements(rows, self.query)
        logger.debug(f"Polled {len(rows)} backends, {len(statements)} active statements")
        return statements
