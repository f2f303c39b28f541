"""Dashboard: database tree on the left, selected table on the right."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import RenderableType
from rich.table import Table

from clazydbm.config import DEFAULT_PAGE_SIZE
from clazydbm.connection import Connection
from clazydbm.runtime.commands import Message, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component
from .dblist import DBListComponent, DBListMode, DBListMsg
from .messages import DashboardMsg, FocusDBList, FocusTable, SelectTable
from .table import TableComponent

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade

LIST_WIDTH_PERCENT = 15
MIN_LIST_WIDTH = 20


class DashboardComponent(Component):
    name = "dashboard"

    def __init__(self, facade: DatabaseFacade, page_size: int = DEFAULT_PAGE_SIZE):
        self.dblist = DBListComponent(facade)
        self.table = TableComponent(facade, page_size)
        self.focus = "dblist"
        self.connection: Connection | None = None

    @property
    def focused_child(self) -> Component:
        return self.table if self.focus == "table" else self.dblist

    def open(self, connection: Connection) -> Update:
        self.close()
        self.connection = connection
        return self.dblist.load(connection)

    def close(self) -> None:
        self.connection = None
        self.focus = "dblist"
        self.dblist.reset()
        self.table.close()

    def map_input(self, key: KeyPress) -> Message | None:
        message = self.focused_child.map_input(key)
        if message is not None:
            return message
        if self.focus == "table" and key.key in ("escape", "tab"):
            return FocusDBList()
        if self.focus == "dblist" and key.key == "tab" and self.dblist.mode is DBListMode.TREE:
            return FocusTable()
        return None

    def update(self, msg: Message) -> Update:
        if isinstance(msg, DBListMsg):
            return self.dblist.update(msg)
        if isinstance(msg, DashboardMsg):
            return self._update_self(msg)
        return self.table.update(msg)

    def _update_self(self, msg: DashboardMsg) -> Update:
        if isinstance(msg, SelectTable):
            if self.connection is None:
                return Update.none()
            self.focus = "table"
            return self.table.open(self.connection, msg.ref)
        if isinstance(msg, FocusDBList):
            self.focus = "dblist"
        elif isinstance(msg, FocusTable) and self.table.is_open:
            self.focus = "table"
        return Update.none()

    def focus_path(self) -> tuple[str, ...]:
        return (self.name,) + self.focused_child.focus_path()

    def render(self, area: Area, focused: bool) -> RenderableType:
        left_width = min(max(area.width * LIST_WIDTH_PERCENT // 100, MIN_LIST_WIDTH), area.width)
        right_width = max(area.width - left_width, 1)
        layout = Table.grid(expand=True)
        layout.add_column(width=left_width)
        layout.add_column(width=right_width)
        layout.add_row(
            self.dblist.render(Area(left_width, area.height), focused and self.focus == "dblist"),
            self.table.render(Area(right_width, area.height), focused and self.focus == "table"),
        )
        return layout
