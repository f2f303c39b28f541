"""Connection domain models and enums."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping

from .errors import ConfigError


class DatabaseType(str, Enum):
    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLITE = "sqlite"


DATABASE_TYPE_LABELS = {
    DatabaseType.MYSQL: "MySQL",
    DatabaseType.POSTGRES: "PostgreSQL",
    DatabaseType.SQLITE: "SQLite",
}

# Accepted spellings in config files besides the enum values.
_TYPE_ALIASES = {
    "postgresql": DatabaseType.POSTGRES,
    "pg": DatabaseType.POSTGRES,
    "sqlite3": DatabaseType.SQLITE,
    "mariadb": DatabaseType.MYSQL,
}


def parse_database_type(value: Any) -> DatabaseType:
    """Map a config ``type`` value onto a DatabaseType, raising ConfigError if unknown."""
    if isinstance(value, DatabaseType):
        return value
    text = str(value or "").strip().lower()
    if not text:
        raise ConfigError("connection entry is missing the type field")
    if text in _TYPE_ALIASES:
        return _TYPE_ALIASES[text]
    try:
        return DatabaseType(text)
    except ValueError:
        supported = ", ".join(t.value for t in DatabaseType)
        raise ConfigError(f"unknown connection type {text!r} (supported: {supported})") from None


@dataclass(frozen=True)
class Connection:
    """Database connection parameters as loaded from the config files."""

    type: DatabaseType
    name: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    path: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Connection:
        """Create a Connection from a config entry, with legacy key support."""
        payload = dict(data)

        if "server" in payload and "host" not in payload:
            payload["host"] = payload.pop("server")
        if "username" in payload and "user" not in payload:
            payload["user"] = payload.pop("username")
        if "file_path" in payload and "path" not in payload:
            payload["path"] = payload.pop("file_path")

        payload["type"] = parse_database_type(payload.get("type"))

        port = payload.get("port")
        if port is not None and port != "":
            try:
                payload["port"] = int(port)
            except (TypeError, ValueError):
                raise ConfigError(f"port must be a number, got {port!r}") from None
        else:
            payload["port"] = None

        base_fields = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in payload.items():
            if key not in base_fields:
                continue
            if key not in ("type", "port") and value is not None:
                value = str(value)
            kwargs[key] = value
        return cls(**kwargs)

    @property
    def display_name(self) -> str:
        return self.name or "unknown"

    @property
    def label(self) -> str:
        return DATABASE_TYPE_LABELS[self.type]


__all__ = ["Connection", "DATABASE_TYPE_LABELS", "DatabaseType", "parse_database_type"]
