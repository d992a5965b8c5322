"""DatabaseService: pooled connections, transactions and upserts."""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from queue import Empty, Queue
from typing import Any, ClassVar, Iterator

from loadstore.types import Params, ParamsList


class DatabaseService(ABC):
    """Database-agnostic interface for the statements the load archive issues.

    Callers program against this class, never a concrete backend. Every
    statement runs inside ``transaction()``, which owns one pooled connection
    for its duration; the pool makes the service safe to share across threads.
    Backends supply the connection factory and the dialect bits.
    """

    #: Parameter placeholder of the backend's DB-API driver.
    placeholder: ClassVar[str] = "?"

    #: Exception base classes raised by the driver for failed statements.
    driver_errors: ClassVar[tuple[type[Exception], ...]] = ()

    def __init__(self, pool_size: int = 4):
        self._pool_size = pool_size
        self._pool: Queue = Queue(maxsize=pool_size)
        self._local = threading.local()

    @abstractmethod
    def _open_connection(self):
        """Open one DB-API connection with autocommit off."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        """Execute a single SQL statement and return rows as dicts."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Execute DDL statements (CREATE TABLE, CREATE INDEX, etc.)."""

    def connect(self) -> None:
        for _ in range(self._pool_size):
            self._pool.put(self._open_connection())

    def close(self) -> None:
        while not self._pool.empty():
            try:
                self._pool.get_nowait().close()
            except Empty:
                break

    def _acquire(self):
        return self._pool.get(timeout=30)

    def _release(self, conn) -> None:
        self._pool.put(conn)

    def _get_conn(self):
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            return conn
        raise RuntimeError(
            "No active transaction. Wrap calls in a `with service.transaction():` block."
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Acquire a connection; commit on success, roll back on error."""
        conn = self._acquire()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        cur = self._get_conn().cursor()
        try:
            cur.executemany(sql, params_list)
        finally:
            cur.close()

    def upsert(
        self,
        table: str,
        columns: list[str],
        rows: list[tuple],
        conflict_columns: list[str],
    ) -> None:
        """Insert rows, overwriting the non-key columns on conflict."""
        if not rows:
            return
        self.execute_many(self.upsert_sql(table, columns, conflict_columns), rows)

    def upsert_sql(self, table: str, columns: list[str], conflict_columns: list[str]) -> str:
        cols = ", ".join(columns)
        placeholders = ", ".join(self.placeholder for _ in columns)
        conflict_cols = ", ".join(conflict_columns)
        update_cols = [c for c in columns if c not in conflict_columns]

        sql = f"INSERT INTO {table} ({cols}) VALUES ({placeholders}) ON CONFLICT ({conflict_cols}) "
        if not update_cols:
            return sql + "DO NOTHING"
        update_clause = ", ".join(f"{c} = excluded.{c}" for c in update_cols)
        return sql + f"DO UPDATE SET {update_clause}"

    def delete_all(self, table: str) -> None:
        """Remove every row from ``table``."""
        self.execute(f"DELETE FROM {table}")
