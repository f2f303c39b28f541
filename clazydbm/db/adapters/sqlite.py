"""SQLite adapter using built-in sqlite3."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any

from clazydbm.db.models import ColumnInfo, Database, TableRef
from clazydbm.errors import ClazyError, ConfigError, DatabaseConnectionError, NotFoundError, QueryError

from .base import DatabaseAdapter, resolve_file_path

if TYPE_CHECKING:
    from clazydbm.connection import Connection


class SQLiteAdapter(DatabaseAdapter):
    """Adapter for SQLite using built-in sqlite3."""

    @property
    def name(self) -> str:
        return "SQLite"

    @property
    def tool_name(self) -> str:
        return "litecli"

    def _file_path(self, connection: Connection) -> Path:
        if not connection.path:
            raise ConfigError("type sqlite needs the path field")
        return resolve_file_path(connection.path)

    def build_target(self, connection: Connection) -> str:
        return f"sqlite://{self._file_path(connection)}"

    def tool_arguments(self, connection: Connection) -> list[str]:
        return [self.tool_name, str(self._file_path(connection))]

    def connect(self, connection: Connection) -> Any:
        """Open the database file; a missing file is an error, not a new database."""
        file_path = self._file_path(connection)
        if not file_path.exists():
            raise DatabaseConnectionError(f"unable to open database file: {file_path}")
        # check_same_thread=False: the connection is created and used on a worker thread.
        return sqlite3.connect(f"{file_path.as_uri()}?mode=rw", uri=True, check_same_thread=False)

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def qualified_table(self, ref: TableRef) -> str:
        return self.quote_identifier(ref.table)

    def get_databases(self, conn: Any, connection: Connection) -> list[Database]:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' " "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        tables = tuple(row[0] for row in cursor.fetchall())
        name = connection.name or self._file_path(connection).stem or "sqlite"
        return [Database(name=name, tables=tables)]

    def count_rows(self, conn: Any, ref: TableRef, where: str | None) -> int | None:
        query = f"SELECT COUNT(*) FROM {self.qualified_table(ref)}"
        if where:
            query += f" WHERE ({where})"
        cursor = conn.cursor()
        cursor.execute(query)
        return int(cursor.fetchone()[0])

    def get_columns(self, conn: Any, ref: TableRef) -> list[ColumnInfo]:
        table = self.quote_identifier(ref.table)
        cursor = conn.cursor()

        # foreign_key_list rows: id, seq, table, from, to, on_update, on_delete, match
        cursor.execute(f"PRAGMA foreign_key_list({table})")
        references = {row[3]: f"{row[2]}.{row[4]}" if row[4] else row[2] for row in cursor.fetchall()}

        # index_list rows: seq, name, unique, origin, partial
        unique_columns = set()
        cursor.execute(f"PRAGMA index_list({table})")
        for index in cursor.fetchall():
            if not index[2] or index[3] == "pk":
                continue
            index_cursor = conn.cursor()
            index_cursor.execute(f"PRAGMA index_info({self.quote_identifier(index[1])})")
            indexed = [row[2] for row in index_cursor.fetchall()]
            if len(indexed) == 1:
                unique_columns.add(indexed[0])

        # table_info rows: cid, name, type, notnull, dflt_value, pk
        cursor.execute(f"PRAGMA table_info({table})")
        return [
            ColumnInfo(
                name=row[1],
                data_type=row[2] or "",
                nullable=not row[3],
                default=None if row[4] is None else str(row[4]),
                primary_key=row[5] > 0,
                unique=row[1] in unique_columns,
                references=references.get(row[1]),
            )
            for row in cursor.fetchall()
        ]

    def translate_error(self, error: Exception, *, connecting: bool = False) -> ClazyError:
        message = str(error)
        if "no such table" in message:
            return NotFoundError(message)
        if connecting or "unable to open" in message:
            return DatabaseConnectionError(message)
        return QueryError(message)
