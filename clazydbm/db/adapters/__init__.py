"""Backend adapters, one per supported database type."""

from .base import DatabaseAdapter
from .mysql import MySQLAdapter
from .postgres import PostgreSQLAdapter
from .sqlite import SQLiteAdapter

__all__ = ["DatabaseAdapter", "MySQLAdapter", "PostgreSQLAdapter", "SQLiteAdapter"]
