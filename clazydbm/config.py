"""Connection configuration loaded from YAML files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .connection import Connection
from .errors import ConfigError, ConfigFileError

APP_NAME = "clazydbm"
CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_FILENAME = ".clazydbm.yaml"
DEFAULT_PAGE_SIZE = 200

CONFIG_SAMPLE = """conn:
  # MySQL example
  - type: mysql
    name: my-mysql
    user: root
    password: secret
    host: 127.0.0.1
    port: 3306
    database: mydb

  # PostgreSQL example
  - type: postgres
    name: my-postgres
    user: postgres
    password: secret
    host: 127.0.0.1
    port: 5432
    database: mydb

  # SQLite example
  - type: sqlite
    name: my-sqlite
    path: ~/data/sample.db
"""


def app_config_dir() -> Path:
    """Per-user directory for the config file and the log.

    ``CLAZYDBM_CONFIG_DIR`` overrides the location (used by the tests).
    """
    override = os.environ.get("CLAZYDBM_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / APP_NAME


@dataclass
class AppConfig:
    """Everything read from the config files."""

    connections: list[Connection] = field(default_factory=list)
    page_size: int = DEFAULT_PAGE_SIZE


def config_sources(cli_path: str | os.PathLike[str] | None = None) -> list[Path]:
    """Candidate config files in merge order: global, local, env, CLI."""
    sources = [app_config_dir() / CONFIG_FILENAME, Path(LOCAL_CONFIG_FILENAME)]
    env_path = os.environ.get("CLAZYDBM_CONFIG")
    if env_path:
        sources.append(Path(env_path).expanduser())
    if cli_path:
        sources.append(Path(cli_path).expanduser())
    return sources


def _read_document(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(str(path), f"failed to read: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigFileError(
            str(path), f"failed to parse YAML\n\nError: {e}\n\nExpected format:\n{CONFIG_SAMPLE}"
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(str(path), f"expected a mapping at top level\n\nExpected format:\n{CONFIG_SAMPLE}")
    return data


def parse_document(data: dict[str, Any], source: str = "<config>") -> AppConfig:
    """Build an AppConfig from one parsed YAML document."""
    entries = data.get("conn") or []
    if not isinstance(entries, list):
        raise ConfigFileError(source, f"'conn' must be a list\n\nExpected format:\n{CONFIG_SAMPLE}")

    connections = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigFileError(source, f"conn[{index}] must be a mapping")
        try:
            connections.append(Connection.from_dict(entry))
        except ConfigError as e:
            raise ConfigFileError(source, f"conn[{index}]: {e}") from e

    config = AppConfig(connections=connections)
    if "page_size" in data:
        try:
            config.page_size = max(1, int(data["page_size"]))
        except (TypeError, ValueError):
            raise ConfigFileError(source, f"page_size must be a number, got {data['page_size']!r}") from None
    return config


def load_config(cli_path: str | os.PathLike[str] | None = None) -> AppConfig:
    """Merge every config source; later files append connections and override settings."""
    merged = AppConfig()
    if cli_path and not Path(cli_path).expanduser().exists():
        raise ConfigFileError(str(cli_path), "file does not exist")

    for path in config_sources(cli_path):
        data = _read_document(path)
        if data is None:
            continue
        parsed = parse_document(data, str(path))
        logger.debug("Loaded {} connection(s) from {}", len(parsed.connections), path)
        merged.connections.extend(parsed.connections)
        if "page_size" in data:
            merged.page_size = parsed.page_size
    return merged


__all__ = [
    "APP_NAME",
    "AppConfig",
    "CONFIG_SAMPLE",
    "DEFAULT_PAGE_SIZE",
    "app_config_dir",
    "config_sources",
    "load_config",
    "parse_document",
]
