"""Tests for database value types."""

from __future__ import annotations

import datetime
import decimal

import pytest

from clazydbm.db.models import ColumnInfo, Records, TableRef, stringify_cell
from clazydbm.errors import MissingDriverError, ToolUnavailableError


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        (42, "42"),
        (b"\x00\x01", "<blob 2 bytes>"),
        (datetime.datetime(2024, 1, 2, 3, 4, 5), "2024-01-02 03:04:05"),
        (datetime.date(2024, 1, 2), "2024-01-02"),
        (datetime.timedelta(hours=26, minutes=3, seconds=4), "26:03:04"),
        (decimal.Decimal("1E+2"), "100"),
        (True, "True"),
    ],
)
def test_stringify_cell(value, expected):
    assert stringify_cell(value) == expected


def test_qualified_name():
    assert TableRef("app", "users").qualified_name == "app.users"
    assert TableRef("app", "users", "public").qualified_name == "app.public.users"


class TestHasNextPage:
    def test_known_total(self):
        assert Records(("id",), (("1",),) * 10, offset=0, limit=10, total=11).has_next_page
        assert not Records(("id",), (("1",),) * 10, offset=10, limit=10, total=20).has_next_page

    def test_unknown_total_uses_full_page(self):
        assert Records(("id",), (("1",),) * 10, limit=10).has_next_page
        assert not Records(("id",), (("1",),) * 3, limit=10).has_next_page

    def test_zero_limit_never_pages(self):
        assert not Records((), (), limit=0).has_next_page


def test_key_flags_combine():
    column = ColumnInfo("id", "int", primary_key=True, unique=True, references="teams.id")

    assert column.key_flags == "PK UNIQUE FK teams.id"


def test_error_messages_name_the_fix():
    assert str(MissingDriverError("PostgreSQL", "postgres", "psycopg2-binary")) == (
        "Missing driver for PostgreSQL: pip install 'clazydbm[postgres]' (or psycopg2-binary)"
    )
    assert str(ToolUnavailableError("pgcli")) == "pgcli is not installed (pip install pgcli)"
