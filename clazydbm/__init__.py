"""clazydbm - A terminal browser for relational databases."""

from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "ClazyApp",
    "Connection",
    "DatabaseType",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .cli import main
    from .connection import Connection, DatabaseType
    from .ui.app import ClazyApp


def __getattr__(name: str) -> Any:
    """Lazy import for heavy modules to keep package import side-effect free."""
    if name == "main":
        from .cli import main

        return main
    if name == "ClazyApp":
        from .ui.app import ClazyApp

        return ClazyApp
    if name in ("Connection", "DatabaseType"):
        from . import connection

        return getattr(connection, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
