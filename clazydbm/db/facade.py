"""Single entry point the UI uses to reach a database backend."""

from __future__ import annotations

from loguru import logger

from clazydbm.connection import Connection, DatabaseType
from clazydbm.errors import ToolUnavailableError

from .adapters import DatabaseAdapter, MySQLAdapter, PostgreSQLAdapter, SQLiteAdapter
from .models import Database, Records, TableProperties, TableRef, ToolOutcome
from .tools import SubprocessToolRunner, ToolRunner

ADAPTER_TYPES: dict[DatabaseType, type[DatabaseAdapter]] = {
    DatabaseType.MYSQL: MySQLAdapter,
    DatabaseType.POSTGRES: PostgreSQLAdapter,
    DatabaseType.SQLITE: SQLiteAdapter,
}


class DatabaseFacade:
    """Dispatches each call to the adapter for the connection's type.

    Methods block; callers run them on a background worker, except
    ``launch_external_tool`` which expects the terminal to be released.
    """

    def __init__(self, tool_runner: ToolRunner | None = None):
        self._tool_runner = tool_runner or SubprocessToolRunner()
        self._adapters = {db_type: adapter_cls() for db_type, adapter_cls in ADAPTER_TYPES.items()}

    def adapter_for(self, db_type: DatabaseType) -> DatabaseAdapter:
        return self._adapters[db_type]

    def build_connection_target(self, connection: Connection) -> str:
        return self.adapter_for(connection.type).build_target(connection)

    def list_databases(self, connection: Connection) -> list[Database]:
        logger.debug("{}: listing databases", connection.display_name)
        databases = self.adapter_for(connection.type).list_databases(connection)
        logger.debug("{}: {} database(s)", connection.display_name, len(databases))
        return databases

    def list_records(
        self,
        connection: Connection,
        ref: TableRef,
        limit: int,
        offset: int = 0,
        where: str | None = None,
    ) -> Records:
        logger.debug(
            "{}: records {} limit={} offset={} where={!r}",
            connection.display_name,
            ref.qualified_name,
            limit,
            offset,
            where,
        )
        return self.adapter_for(connection.type).list_records(connection, ref, limit, offset, where)

    def describe_table(self, connection: Connection, ref: TableRef) -> TableProperties:
        logger.debug("{}: describing {}", connection.display_name, ref.qualified_name)
        return self.adapter_for(connection.type).describe_table(connection, ref)

    def external_tool_name(self, db_type: DatabaseType) -> str:
        return self.adapter_for(db_type).tool_name

    def is_external_tool_available(self, db_type: DatabaseType) -> bool:
        return self._tool_runner.which(self.external_tool_name(db_type)) is not None

    def launch_external_tool(self, connection: Connection) -> ToolOutcome:
        """Run the backend's CLI in the foreground until it exits.

        Raises ToolUnavailableError without launching anything when the tool
        is not on PATH.
        """
        adapter = self.adapter_for(connection.type)
        tool = adapter.tool_name
        if self._tool_runner.which(tool) is None:
            raise ToolUnavailableError(tool)

        command = adapter.tool_arguments(connection)
        logger.info("Launching {} for {}", tool, connection.display_name)
        try:
            returncode = self._tool_runner.run(command)
        except FileNotFoundError as e:
            raise ToolUnavailableError(tool) from e
        except OSError as e:
            raise ToolUnavailableError(tool, f"failed to launch {tool}: {e}") from e
        logger.info("{} exited with status {}", tool, returncode)
        return ToolOutcome(tool=tool, returncode=returncode)


__all__ = ["ADAPTER_TYPES", "DatabaseFacade"]
