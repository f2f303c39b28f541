"""View tree: connection picker, dashboard, database list and table tabs."""

from .base import Area, Component, Notice
from .root import RootComponent

__all__ = ["Area", "Component", "Notice", "RootComponent"]
