"""Database access layer."""

from .facade import DatabaseFacade
from .models import ColumnInfo, Database, Records, Schema, TableProperties, TableRef, ToolOutcome

__all__ = [
    "ColumnInfo",
    "Database",
    "DatabaseFacade",
    "Records",
    "Schema",
    "TableProperties",
    "TableRef",
    "ToolOutcome",
]
