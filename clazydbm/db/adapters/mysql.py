"""MySQL adapter using PyMySQL (pure Python)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from clazydbm.db.models import ColumnInfo, Database, TableRef
from clazydbm.errors import (
    AuthenticationError,
    ClazyError,
    DatabaseConnectionError,
    NotFoundError,
    QueryError,
)

from .base import DatabaseAdapter, build_server_url

if TYPE_CHECKING:
    from clazydbm.connection import Connection

SYSTEM_DATABASES = frozenset({"information_schema", "mysql", "performance_schema", "sys"})

# MySQL server error numbers (first element of the exception args).
_ER_ACCESS_DENIED = (1044, 1045, 1698)
_ER_NOT_FOUND = (1049, 1146)
_CR_CONNECTION = (2002, 2003, 2005, 2006, 2013)


class MySQLAdapter(DatabaseAdapter):
    """Adapter for MySQL using PyMySQL."""

    @property
    def name(self) -> str:
        return "MySQL"

    @property
    def tool_name(self) -> str:
        return "mycli"

    @property
    def install_extra(self) -> str:
        return "mysql"

    @property
    def install_package(self) -> str:
        return "PyMySQL"

    def build_target(self, connection: Connection) -> str:
        return build_server_url("mysql", connection)

    def connect(self, connection: Connection) -> Any:
        """Connect to MySQL database."""
        self.build_target(connection)
        pymysql = self._import_driver_module("pymysql")

        return pymysql.connect(
            host=connection.host,
            port=int(connection.port),
            database=connection.database or None,
            user=connection.user,
            password=connection.password or "",
            connect_timeout=10,
            autocommit=True,
            charset="utf8mb4",
        )

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def qualified_table(self, ref: TableRef) -> str:
        return f"{self.quote_identifier(ref.database)}.{self.quote_identifier(ref.table)}"

    def get_databases(self, conn: Any, connection: Connection) -> list[Database]:
        cursor = conn.cursor()
        if connection.database:
            names = [connection.database]
        else:
            cursor.execute("SHOW DATABASES")
            names = [row[0] for row in cursor.fetchall() if row[0].lower() not in SYSTEM_DATABASES]

        databases = []
        for name in names:
            cursor.execute(
                "SELECT TABLE_NAME FROM information_schema.TABLES "
                "WHERE TABLE_SCHEMA = %s ORDER BY TABLE_NAME",
                (name,),
            )
            databases.append(Database(name=name, tables=tuple(row[0] for row in cursor.fetchall())))
        return databases

    def get_columns(self, conn: Any, ref: TableRef) -> list[ColumnInfo]:
        cursor = conn.cursor()
        cursor.execute(
            "SELECT COLUMN_NAME, REFERENCED_TABLE_NAME, REFERENCED_COLUMN_NAME "
            "FROM information_schema.KEY_COLUMN_USAGE "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s AND REFERENCED_TABLE_NAME IS NOT NULL",
            (ref.database, ref.table),
        )
        references = {row[0]: f"{row[1]}.{row[2]}" for row in cursor.fetchall()}

        cursor.execute(
            "SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_DEFAULT, COLUMN_KEY "
            "FROM information_schema.COLUMNS "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
            "ORDER BY ORDINAL_POSITION",
            (ref.database, ref.table),
        )
        return [
            ColumnInfo(
                name=row[0],
                data_type=row[1],
                nullable=str(row[2]).upper() == "YES",
                default=None if row[3] is None else str(row[3]),
                primary_key=row[4] == "PRI",
                unique=row[4] == "UNI",
                references=references.get(row[0]),
            )
            for row in cursor.fetchall()
        ]

    def translate_error(self, error: Exception, *, connecting: bool = False) -> ClazyError:
        code = error.args[0] if error.args and isinstance(error.args[0], int) else None
        message = str(error.args[1]) if len(error.args) > 1 else str(error)
        if code in _ER_ACCESS_DENIED:
            return AuthenticationError(message)
        if code in _ER_NOT_FOUND:
            return NotFoundError(message)
        if connecting or code in _CR_CONNECTION:
            return DatabaseConnectionError(message)
        return QueryError(message)
