"""Driver import helpers."""

from __future__ import annotations

import importlib
from typing import Any

from clazydbm.errors import MissingDriverError


def import_driver_module(
    module_name: str,
    *,
    driver_name: str,
    extra_name: str | None,
    package_name: str | None,
) -> Any:
    """Import a driver module, raising MissingDriverError with detail if it fails."""
    if not extra_name or not package_name:
        return importlib.import_module(module_name)

    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise MissingDriverError(
            driver_name,
            extra_name,
            package_name,
            module_name=module_name,
            import_error=str(e),
        ) from e
