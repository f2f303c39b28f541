"""Value types returned by the database layer."""

from __future__ import annotations

import datetime
import decimal
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Schema:
    """A namespace of tables inside a database (PostgreSQL)."""

    name: str
    tables: tuple[str, ...] = ()


@dataclass(frozen=True)
class Database:
    """A database and its children.

    Backends without schemas fill ``tables``; PostgreSQL fills ``schemas``.
    """

    name: str
    tables: tuple[str, ...] = ()
    schemas: tuple[Schema, ...] = ()


@dataclass(frozen=True)
class TableRef:
    database: str
    table: str
    schema: str | None = None

    @property
    def qualified_name(self) -> str:
        parts = [self.database]
        if self.schema:
            parts.append(self.schema)
        parts.append(self.table)
        return ".".join(parts)


@dataclass(frozen=True)
class Records:
    """One page of stringified rows.

    ``total`` is None when the backend cannot report it cheaply.
    """

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    offset: int = 0
    limit: int = 0
    total: int | None = None

    @property
    def has_next_page(self) -> bool:
        if self.total is not None:
            return self.offset + len(self.rows) < self.total
        return len(self.rows) >= self.limit > 0


@dataclass(frozen=True)
class ColumnInfo:
    """Information about a table column."""

    name: str
    data_type: str
    nullable: bool = True
    default: str | None = None
    primary_key: bool = False
    unique: bool = False
    references: str | None = None

    @property
    def key_flags(self) -> str:
        flags = []
        if self.primary_key:
            flags.append("PK")
        if self.unique:
            flags.append("UNIQUE")
        if self.references:
            flags.append(f"FK {self.references}")
        return " ".join(flags)


@dataclass(frozen=True)
class TableProperties:
    table: TableRef
    columns: tuple[ColumnInfo, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ToolOutcome:
    """Exit status of an external query tool run."""

    tool: str
    returncode: int


def stringify_cell(value: Any) -> str:
    """Render a driver value the way the grid shows it; NULL becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<blob {len(bytes(value))} bytes>"
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        total = int(value.total_seconds())
        sign = "-" if total < 0 else ""
        hours, rest = divmod(abs(total), 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{sign}{hours:02}:{minutes:02}:{seconds:02}"
    if isinstance(value, decimal.Decimal):
        return format(value, "f")
    return str(value)


__all__ = [
    "ColumnInfo",
    "Database",
    "Records",
    "Schema",
    "TableProperties",
    "TableRef",
    "ToolOutcome",
    "stringify_cell",
]
