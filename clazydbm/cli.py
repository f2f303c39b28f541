#!/usr/bin/env python3
"""clazydbm - browse SQLite, MySQL and PostgreSQL databases from the terminal."""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from .config import CONFIG_SAMPLE, AppConfig, app_config_dir, load_config
from .errors import ConfigError
from .logger import LOG_LEVELS, setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clazydbm",
        description="A terminal browser for SQLite, MySQL and PostgreSQL databases",
        epilog=f"Connections are read from YAML files like:\n\n{CONFIG_SAMPLE}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="Extra config file, merged after the global, local and $CLAZYDBM_CONFIG files",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for clazydbm.log (default: $CLAZYDBM_LOG or INFO)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        metavar="N",
        help="Rows fetched per page in the Records tab (default: 200)",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("connections", help="List configured connections and exit")
    return parser


def cmd_connections(config: AppConfig) -> int:
    from rich.console import Console
    from rich.table import Table

    from .components.connection import masked_target
    from .db.facade import DatabaseFacade

    console = Console()
    if not config.connections:
        console.print("(no connections found)")
        return 0

    facade = DatabaseFacade()
    table = Table(title="Connections")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Target")
    for connection in config.connections:
        try:
            target = masked_target(connection, facade.build_connection_target(connection))
        except ConfigError as e:
            target = f"[red]invalid config: {e}[/]"
        table.add_row(connection.display_name, connection.label, target)
    console.print(table)
    return 0


def main() -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(app_config_dir(), args.log_level)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"clazydbm: {e}", file=sys.stderr)
        return 1
    if args.page_size is not None:
        if args.page_size < 1:
            parser.error("--page-size must be at least 1")
        config.page_size = args.page_size

    if args.command == "connections":
        return cmd_connections(config)

    from .ui.app import ClazyApp

    logger.info("Starting with {} connection(s); logging to {}", len(config.connections), log_file)
    app = ClazyApp(config.connections, page_size=config.page_size)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
