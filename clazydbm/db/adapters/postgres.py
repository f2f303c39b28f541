"""PostgreSQL adapter using psycopg2."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from clazydbm.db.models import ColumnInfo, Database, Schema, TableRef
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

DEFAULT_DATABASE = "postgres"
DEFAULT_SCHEMA = "public"
SYSTEM_SCHEMAS = ("pg_catalog", "information_schema")

# SQLSTATE classes, see the PostgreSQL "Errcodes" appendix.
_AUTH_CODES = ("28000", "28P01")
_NOT_FOUND_CODES = ("3D000", "3F000", "42P01")


class PostgreSQLAdapter(DatabaseAdapter):
    """Adapter for PostgreSQL using psycopg2."""

    @property
    def name(self) -> str:
        return "PostgreSQL"

    @property
    def tool_name(self) -> str:
        return "pgcli"

    @property
    def install_extra(self) -> str:
        return "postgres"

    @property
    def install_package(self) -> str:
        return "psycopg2-binary"

    def build_target(self, connection: Connection) -> str:
        return build_server_url("postgres", connection)

    def connect(self, connection: Connection) -> Any:
        """Connect to PostgreSQL database."""
        self.build_target(connection)
        psycopg2 = self._import_driver_module("psycopg2")

        conn = psycopg2.connect(
            host=connection.host,
            port=int(connection.port),
            database=connection.database or DEFAULT_DATABASE,
            user=connection.user,
            password=connection.password or "",
            connect_timeout=10,
        )
        # Enable autocommit to avoid "transaction aborted" errors on failed statements
        conn.autocommit = True
        return conn

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def qualified_table(self, ref: TableRef) -> str:
        schema = ref.schema or DEFAULT_SCHEMA
        return f"{self.quote_identifier(schema)}.{self.quote_identifier(ref.table)}"

    def get_databases(self, conn: Any, connection: Connection) -> list[Database]:
        """The connected database, with its tables grouped by schema."""
        cursor = conn.cursor()
        cursor.execute(
            "SELECT table_schema, table_name FROM information_schema.tables "
            "WHERE table_type = 'BASE TABLE' AND table_schema NOT IN %s "
            "ORDER BY table_schema, table_name",
            (SYSTEM_SCHEMAS,),
        )
        by_schema: dict[str, list[str]] = defaultdict(list)
        for schema, table in cursor.fetchall():
            by_schema[schema].append(table)

        schemas = tuple(Schema(name=name, tables=tuple(tables)) for name, tables in sorted(by_schema.items()))
        return [Database(name=connection.database or DEFAULT_DATABASE, schemas=schemas)]

    def get_columns(self, conn: Any, ref: TableRef) -> list[ColumnInfo]:
        schema = ref.schema or DEFAULT_SCHEMA
        cursor = conn.cursor()
        cursor.execute(
            "SELECT kcu.column_name, tc.constraint_type, ccu.table_name, ccu.column_name "
            "FROM information_schema.table_constraints tc "
            "JOIN information_schema.key_column_usage kcu "
            "ON tc.constraint_name = kcu.constraint_name AND tc.table_schema = kcu.table_schema "
            "LEFT JOIN information_schema.constraint_column_usage ccu "
            "ON tc.constraint_name = ccu.constraint_name AND tc.constraint_type = 'FOREIGN KEY' "
            "WHERE tc.table_schema = %s AND tc.table_name = %s",
            (schema, ref.table),
        )
        primary, unique, references = set(), set(), {}
        for column, constraint_type, target_table, target_column in cursor.fetchall():
            if constraint_type == "PRIMARY KEY":
                primary.add(column)
            elif constraint_type == "UNIQUE":
                unique.add(column)
            elif constraint_type == "FOREIGN KEY" and target_table:
                references[column] = f"{target_table}.{target_column}"

        cursor.execute(
            "SELECT column_name, data_type, is_nullable, column_default "
            "FROM information_schema.columns "
            "WHERE table_schema = %s AND table_name = %s "
            "ORDER BY ordinal_position",
            (schema, ref.table),
        )
        return [
            ColumnInfo(
                name=row[0],
                data_type=row[1],
                nullable=str(row[2]).upper() == "YES",
                default=row[3],
                primary_key=row[0] in primary,
                unique=row[0] in unique,
                references=references.get(row[0]),
            )
            for row in cursor.fetchall()
        ]

    def translate_error(self, error: Exception, *, connecting: bool = False) -> ClazyError:
        code = getattr(error, "pgcode", None)
        message = (getattr(error, "pgerror", None) or str(error)).strip()
        if code in _AUTH_CODES or (connecting and "password authentication failed" in message):
            return AuthenticationError(message)
        if code in _NOT_FOUND_CODES:
            return NotFoundError(message)
        if connecting:
            return DatabaseConnectionError(message)
        return QueryError(message)
