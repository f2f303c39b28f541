"""Unit tests for the SQLite adapter against a real database file."""

from __future__ import annotations

from pathlib import Path

import pytest

from clazydbm.connection import Connection, DatabaseType
from clazydbm.db.adapters import SQLiteAdapter
from clazydbm.db.models import TableRef
from clazydbm.errors import ConfigError, DatabaseConnectionError, NotFoundError, QueryError


@pytest.fixture
def adapter() -> SQLiteAdapter:
    return SQLiteAdapter()


def users_ref(connection: Connection) -> TableRef:
    return TableRef(database=connection.name, table="users")


def test_build_target_resolves_path(adapter, demo_connection, demo_db_path) -> None:
    assert adapter.build_target(demo_connection) == f"sqlite://{demo_db_path.resolve()}"


def test_build_target_expands_home(adapter, monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    connection = Connection(type=DatabaseType.SQLITE, path="~/data/sample.db")

    assert adapter.build_target(connection) == f"sqlite://{(tmp_path / 'data' / 'sample.db').resolve()}"


def test_build_target_requires_path(adapter) -> None:
    with pytest.raises(ConfigError, match="path"):
        adapter.build_target(Connection(type=DatabaseType.SQLITE, name="nopath"))


def test_tool_arguments_pass_plain_path(adapter, demo_connection, demo_db_path) -> None:
    assert adapter.tool_arguments(demo_connection) == ["litecli", str(demo_db_path.resolve())]


def test_missing_file_is_connection_error_and_not_created(adapter, tmp_path) -> None:
    missing = tmp_path / "missing.db"
    connection = Connection(type=DatabaseType.SQLITE, name="missing", path=str(missing))

    with pytest.raises(DatabaseConnectionError):
        adapter.list_databases(connection)
    assert not missing.exists()


def test_list_databases_single_node_named_after_connection(adapter, demo_connection) -> None:
    databases = adapter.list_databases(demo_connection)

    assert len(databases) == 1
    assert databases[0].name == "demo-sqlite"
    assert databases[0].tables == ("blobs", "events", "orders", "users")
    assert databases[0].schemas == ()


def test_list_databases_falls_back_to_file_stem(adapter, demo_db_path: Path) -> None:
    connection = Connection(type=DatabaseType.SQLITE, path=str(demo_db_path))

    assert adapter.list_databases(connection)[0].name == "demo"


def test_list_records_returns_page_with_total(adapter, demo_connection) -> None:
    records = adapter.list_records(demo_connection, users_ref(demo_connection), limit=200)

    assert records.columns == ("id", "name", "email")
    assert len(records.rows) == 5
    assert records.rows[0] == ("1", "Alice", "alice@example.com")
    assert records.total == 5
    assert not records.has_next_page


def test_list_records_pages_with_offset(adapter, demo_connection) -> None:
    ref = TableRef(database="demo-sqlite", table="events")

    first = adapter.list_records(demo_connection, ref, limit=10)
    last = adapter.list_records(demo_connection, ref, limit=10, offset=20)

    assert [row[0] for row in first.rows] == [str(i) for i in range(1, 11)]
    assert first.has_next_page
    assert [row[0] for row in last.rows] == [str(i) for i in range(21, 26)]
    assert last.offset == 20
    assert last.total == 25
    assert not last.has_next_page


def test_list_records_applies_where(adapter, demo_connection) -> None:
    records = adapter.list_records(demo_connection, users_ref(demo_connection), limit=200, where=" name LIKE 'A%' ")

    assert records.rows == (("1", "Alice", "alice@example.com"),)
    assert records.total == 1


def test_blank_where_is_ignored(adapter, demo_connection) -> None:
    records = adapter.list_records(demo_connection, users_ref(demo_connection), limit=200, where="   ")

    assert len(records.rows) == 5


def test_null_and_blob_cells_are_stringified(adapter, demo_connection) -> None:
    ref = TableRef(database="demo-sqlite", table="blobs")

    records = adapter.list_records(demo_connection, ref, limit=200)

    assert records.rows == (("1", "<blob 3 bytes>", ""),)


def test_invalid_where_raises_query_error(adapter, demo_connection) -> None:
    with pytest.raises(QueryError):
        adapter.list_records(demo_connection, users_ref(demo_connection), limit=200, where="nope ==")


def test_dropped_table_raises_not_found(adapter, demo_connection) -> None:
    ref = TableRef(database="demo-sqlite", table="ghosts")

    with pytest.raises(NotFoundError):
        adapter.list_records(demo_connection, ref, limit=200)
    with pytest.raises(NotFoundError):
        adapter.describe_table(demo_connection, ref)


def test_describe_table_reports_keys(adapter, demo_connection) -> None:
    properties = adapter.describe_table(demo_connection, users_ref(demo_connection))
    columns = {column.name: column for column in properties.columns}

    assert [column.name for column in properties.columns] == ["id", "name", "email"]
    assert columns["id"].primary_key
    assert columns["id"].key_flags == "PK"
    assert columns["name"].nullable is False
    assert columns["email"].unique
    assert columns["email"].nullable is True


def test_describe_table_reports_foreign_keys_and_defaults(adapter, demo_connection) -> None:
    ref = TableRef(database="demo-sqlite", table="orders")

    columns = {column.name: column for column in adapter.describe_table(demo_connection, ref).columns}

    assert columns["user_id"].references == "users.id"
    assert columns["user_id"].key_flags == "FK users.id"
    assert columns["total"].default == "0"
    assert columns["total"].data_type == "REAL"


def test_quote_identifier_escapes_quotes(adapter) -> None:
    assert adapter.quote_identifier('we"ird') == '"we""ird"'


def test_build_select_query_wraps_where(adapter) -> None:
    ref = TableRef(database="main", table="users")

    query = adapter.build_select_query(ref, limit=50, offset=100, where="id > 3 OR id < 2")

    assert query == 'SELECT * FROM "users" WHERE (id > 3 OR id < 2) LIMIT 50 OFFSET 100'


@pytest.mark.parametrize("offset", [0, 3, 20])
def test_consecutive_pages_are_disjoint_and_contiguous(adapter, demo_connection, offset) -> None:
    ref = TableRef(database="demo-sqlite", table="events")

    first = adapter.list_records(demo_connection, ref, limit=4, offset=offset)
    second = adapter.list_records(demo_connection, ref, limit=4, offset=offset + 4)
    both = adapter.list_records(demo_connection, ref, limit=8, offset=offset)

    assert not set(first.rows) & set(second.rows)
    assert first.rows + second.rows == both.rows
