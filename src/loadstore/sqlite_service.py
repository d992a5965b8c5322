"""SQLite implementation of DatabaseService."""

import sqlite3
from typing import Any

from loadstore.service import DatabaseService
from loadstore.types import Params


class SQLiteDatabaseService(DatabaseService):
    """SQLite backend using stdlib sqlite3.

    An in-memory database is private to its connection, so ``:memory:``
    always gets a single-connection pool.
    """

    placeholder = "?"
    driver_errors = (sqlite3.Error,)

    def __init__(self, db_path: str, pool_size: int = 4):
        super().__init__(1 if db_path == ":memory:" else pool_size)
        self._db_path = db_path

    def _open_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        if self._db_path != ":memory:":
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        cursor = self._get_conn().execute(sql, params or ())
        if cursor.description is None:
            return []
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def execute_ddl(self, sql: str) -> None:
        conn = self._acquire()
        try:
            conn.executescript(sql)
            conn.commit()
        finally:
            self._release(conn)
