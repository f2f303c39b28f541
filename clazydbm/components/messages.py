"""Messages that cross component boundaries.

Each is handled by the common parent of the components involved.
"""

from __future__ import annotations

from dataclasses import dataclass

from clazydbm.connection import Connection
from clazydbm.db.models import TableRef
from clazydbm.runtime.commands import Message


class RootMsg(Message):
    pass


class DashboardMsg(Message):
    pass


@dataclass(frozen=True)
class ConnectionSelected(RootMsg):
    connection: Connection


@dataclass(frozen=True)
class LeaveDashboard(RootMsg):
    pass


@dataclass(frozen=True)
class SelectTable(DashboardMsg):
    ref: TableRef


@dataclass(frozen=True)
class FocusDBList(DashboardMsg):
    pass


@dataclass(frozen=True)
class FocusTable(DashboardMsg):
    pass
