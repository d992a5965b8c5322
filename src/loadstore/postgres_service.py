"""PostgreSQL implementation of DatabaseService."""

from typing import Any

import psycopg2
import psycopg2.extras

from loadstore.service import DatabaseService
from loadstore.types import Params


class PostgresDatabaseService(DatabaseService):
    """PostgreSQL backend using psycopg2."""

    placeholder = "%s"
    driver_errors = (psycopg2.Error,)

    def __init__(self, dsn: str, pool_size: int = 4):
        super().__init__(pool_size)
        self._dsn = dsn

    def _open_connection(self):
        conn = psycopg2.connect(self._dsn)
        conn.autocommit = False
        return conn

    def execute(self, sql: str, params: Params | None = None) -> list[dict[str, Any]]:
        conn = self._get_conn()
        with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
            cur.execute(sql, params or None)
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def execute_ddl(self, sql: str) -> None:
        # psycopg2 runs one statement per execute()
        conn = self._acquire()
        try:
            with conn.cursor() as cur:
                for statement in filter(None, (s.strip() for s in sql.split(";"))):
                    cur.execute(statement)
            conn.commit()
        finally:
            self._release(conn)
