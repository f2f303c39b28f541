"""Pytest fixtures for clazydbm tests."""

from __future__ import annotations

import os
import sqlite3
import tempfile
from pathlib import Path

import pytest

from clazydbm.connection import Connection, DatabaseType

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="clazydbm-test-config-"))
os.environ.setdefault("CLAZYDBM_CONFIG_DIR", str(_TEST_CONFIG_DIR))

USERS = [
    (1, "Alice", "alice@example.com"),
    (2, "Bob", "bob@example.com"),
    (3, "Carol", "carol@example.com"),
    (4, "Dave", "dave@example.com"),
    (5, "Eve", "eve@example.com"),
]


def create_demo_database(path: Path) -> Path:
    """Users, orders (FK to users), an events table for paging, and a blob table."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT UNIQUE
            );
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users(id),
                total REAL DEFAULT 0
            );
            CREATE TABLE events (id INTEGER PRIMARY KEY, kind TEXT);
            CREATE TABLE blobs (id INTEGER PRIMARY KEY, data BLOB, note TEXT);
            """
        )
        conn.executemany("INSERT INTO users (id, name, email) VALUES (?, ?, ?)", USERS)
        conn.executemany("INSERT INTO orders (user_id, total) VALUES (?, ?)", [(1, 9.5), (2, 20.0)])
        conn.executemany("INSERT INTO events (id, kind) VALUES (?, ?)", [(i, f"kind-{i % 3}") for i in range(1, 26)])
        conn.execute("INSERT INTO blobs (id, data, note) VALUES (1, ?, NULL)", (b"\x00\x01\x02",))
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def demo_db_path(tmp_path: Path) -> Path:
    return create_demo_database(tmp_path / "demo.db")


@pytest.fixture
def demo_connection(demo_db_path: Path) -> Connection:
    return Connection(type=DatabaseType.SQLITE, name="demo-sqlite", path=str(demo_db_path))


@pytest.fixture
def filter_db_connection(tmp_path: Path) -> Connection:
    """SQLite database whose table names exercise the tree filter."""
    path = tmp_path / "filter.db"
    conn = sqlite3.connect(path)
    try:
        for table in ("abc_events", "customers", "data_abc", "orders", "users"):
            conn.execute(f'CREATE TABLE "{table}" (id INTEGER PRIMARY KEY)')
        conn.commit()
    finally:
        conn.close()
    return Connection(type=DatabaseType.SQLITE, name="filter-db", path=str(path))
