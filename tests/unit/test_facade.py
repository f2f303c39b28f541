"""Tests for the database facade and external tool launching."""

from __future__ import annotations

import pytest

from clazydbm.connection import Connection, DatabaseType
from clazydbm.db.adapters import MySQLAdapter, PostgreSQLAdapter, SQLiteAdapter
from clazydbm.db.facade import DatabaseFacade
from clazydbm.db.models import TableRef, ToolOutcome
from clazydbm.errors import ConfigError, ToolUnavailableError
from tests.mocks import FakeToolRunner


class RaisingToolRunner(FakeToolRunner):
    def __init__(self, error: OSError):
        super().__init__(installed={"litecli"})
        self.error = error

    def run(self, command: list[str]) -> int:
        raise self.error


def test_adapter_dispatch_by_type() -> None:
    facade = DatabaseFacade(tool_runner=FakeToolRunner())

    assert isinstance(facade.adapter_for(DatabaseType.SQLITE), SQLiteAdapter)
    assert isinstance(facade.adapter_for(DatabaseType.MYSQL), MySQLAdapter)
    assert isinstance(facade.adapter_for(DatabaseType.POSTGRES), PostgreSQLAdapter)


@pytest.mark.parametrize(
    ("db_type", "tool"),
    [(DatabaseType.SQLITE, "litecli"), (DatabaseType.MYSQL, "mycli"), (DatabaseType.POSTGRES, "pgcli")],
)
def test_external_tool_name(db_type, tool) -> None:
    assert DatabaseFacade(tool_runner=FakeToolRunner()).external_tool_name(db_type) == tool


def test_build_connection_target_validates_fields() -> None:
    facade = DatabaseFacade(tool_runner=FakeToolRunner())

    with pytest.raises(ConfigError):
        facade.build_connection_target(Connection(type=DatabaseType.POSTGRES, name="pg", user="u"))


def test_browse_sqlite_through_facade(demo_connection) -> None:
    facade = DatabaseFacade(tool_runner=FakeToolRunner())
    ref = TableRef(database="demo-sqlite", table="users")

    databases = facade.list_databases(demo_connection)
    records = facade.list_records(demo_connection, ref, limit=2, offset=2)
    properties = facade.describe_table(demo_connection, ref)

    assert "users" in databases[0].tables
    assert [row[1] for row in records.rows] == ["Carol", "Dave"]
    assert records.total == 5
    assert records.has_next_page
    assert properties.table == ref
    assert len(properties.columns) == 3


def test_tool_availability_uses_runner() -> None:
    facade = DatabaseFacade(tool_runner=FakeToolRunner(installed={"litecli"}))

    assert facade.is_external_tool_available(DatabaseType.SQLITE)
    assert not facade.is_external_tool_available(DatabaseType.POSTGRES)


def test_launch_unavailable_tool_runs_nothing() -> None:
    runner = FakeToolRunner()
    facade = DatabaseFacade(tool_runner=runner)
    connection = Connection(
        type=DatabaseType.POSTGRES, name="pg", user="u", host="localhost", port=5432, database="app"
    )

    with pytest.raises(ToolUnavailableError) as excinfo:
        facade.launch_external_tool(connection)

    assert excinfo.value.tool == "pgcli"
    assert "pip install pgcli" in str(excinfo.value)
    assert runner.commands == []


def test_launch_runs_tool_and_reports_status(demo_connection, demo_db_path) -> None:
    runner = FakeToolRunner(installed={"litecli"}, returncode=3)
    facade = DatabaseFacade(tool_runner=runner)

    outcome = facade.launch_external_tool(demo_connection)

    assert outcome == ToolOutcome(tool="litecli", returncode=3)
    assert runner.commands == [["litecli", str(demo_db_path.resolve())]]


def test_launch_missing_executable_is_tool_unavailable(demo_connection) -> None:
    facade = DatabaseFacade(tool_runner=RaisingToolRunner(FileNotFoundError("litecli")))

    with pytest.raises(ToolUnavailableError, match="not installed"):
        facade.launch_external_tool(demo_connection)


def test_launch_os_error_is_tool_unavailable(demo_connection) -> None:
    facade = DatabaseFacade(tool_runner=RaisingToolRunner(PermissionError("denied")))

    with pytest.raises(ToolUnavailableError, match="failed to launch litecli"):
        facade.launch_external_tool(demo_connection)
