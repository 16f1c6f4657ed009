"""
Safe KuzuDB Connection Manager

Provides thread-safe access to KuzuDB connections. The database is opened
lazily on first use and the schema is created at that point.
"""

import threading
import logging
import kuzu  # type: ignore
import os
import time
from pathlib import Path
from typing import Optional, Dict, Any, List, Generator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Logging controls
_QUERY_LOG_ENABLED = os.getenv('KUZU_QUERY_LOG', 'false').lower() in ('1', 'true', 'on', 'yes')
try:
    _SLOW_QUERY_MS = int(os.getenv('KUZU_SLOW_QUERY_MS', '150'))
except ValueError:
    _SLOW_QUERY_MS = 150

SCHEMA_STATEMENTS = (
    """
    CREATE NODE TABLE IF NOT EXISTS Book(
        id STRING,
        title STRING,
        author_first_name STRING,
        author_last_name STRING,
        shelf STRING,
        custom_shelf STRING,
        genre STRING,
        number_of_pages INT64,
        pages_read INT64,
        series_position INT64,
        edition INT64,
        isbn STRING,
        year_of_publication INT64,
        date_started_reading STRING,
        date_finished_reading STRING,
        rating DOUBLE,
        book_review STRING,
        recommended_by STRING,
        created_at STRING,
        PRIMARY KEY(id)
    )
    """,
)


class SafeKuzuManager:
    """
    Thread-safe KuzuDB connection manager.

    - Lazy database initialization guarded by a re-entrant lock
    - Connection-per-operation pattern to avoid shared connection state
    - Slow query logging
    """

    def __init__(self, database_path: Optional[str] = None):
        """Initialize manager state (no heavy I/O)."""
        if database_path:
            self.database_path = database_path
        else:
            kuzu_dir = os.getenv('KUZU_DB_PATH', 'data/kuzu')
            self.database_path = os.path.join(kuzu_dir, 'books.kuzu')

        self._lock = threading.RLock()  # Reentrant lock for nested calls
        self._database: Optional[kuzu.Database] = None

        logger.info(f"SafeKuzuManager initialized for database: {self.database_path}")

    def _initialize_database(self) -> kuzu.Database:
        """Open the database and create the schema. Caller holds the lock."""
        if self._database is not None:
            return self._database

        Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)
        start = time.time()
        database = kuzu.Database(self.database_path)
        connection = kuzu.Connection(database)
        try:
            for statement in SCHEMA_STATEMENTS:
                connection.execute(statement)
        finally:
            connection.close()

        self._database = database
        logger.info(f"[KUZU] Database ready at {self.database_path} ({(time.time() - start) * 1000:.1f}ms)")
        return database

    @contextmanager
    def get_connection(self, operation: str = "unknown") -> Generator[kuzu.Connection, None, None]:
        """Yield a fresh connection while holding the manager lock."""
        with self._lock:
            database = self._initialize_database()
            connection = kuzu.Connection(database)
            try:
                yield connection
            finally:
                connection.close()
                if _QUERY_LOG_ENABLED:
                    logger.debug(f"[KUZU] Connection closed for operation '{operation}'")

    def execute_query(self, query: str, params: Optional[Dict[str, Any]] = None,
                      operation: str = "query") -> List[Dict[str, Any]]:
        """Run a query and return its rows as dictionaries keyed by column name."""
        start = time.time()
        with self.get_connection(operation=operation) as connection:
            result = connection.execute(query, params or {})
            # Multi-statement queries return a list; the last result carries the rows
            if isinstance(result, list):
                result = result[-1] if result else None
            rows = _convert_query_result_to_list(result)

        elapsed_ms = (time.time() - start) * 1000
        if _QUERY_LOG_ENABLED:
            logger.debug(f"[KUZU] {operation}: {len(rows)} rows in {elapsed_ms:.1f}ms")
        elif elapsed_ms > _SLOW_QUERY_MS:
            logger.warning(f"[KUZU] Slow query '{operation}' took {elapsed_ms:.1f}ms")
        return rows

    def close(self) -> None:
        """Close the underlying database; it is reopened on next use."""
        with self._lock:
            if self._database is not None:
                self._database.close()
                self._database = None
                logger.info(f"[KUZU] Database closed: {self.database_path}")


def _convert_query_result_to_list(result) -> List[Dict[str, Any]]:
    """Convert a KuzuDB QueryResult to a list of dictionaries."""
    if result is None:
        return []

    columns = result.get_column_names()
    rows = []
    while result.has_next():
        row = result.get_next()
        rows.append({columns[i]: row[i] for i in range(len(columns))})
    return rows
