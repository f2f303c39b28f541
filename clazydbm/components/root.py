"""Root of the view tree: connection picker or dashboard."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Group, RenderableType
from rich.text import Text

from clazydbm.config import DEFAULT_PAGE_SIZE
from clazydbm.connection import Connection
from clazydbm.runtime.commands import Message, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component
from .connection import ConnectionComponent, ConnectionMsg
from .messages import ConnectionSelected, LeaveDashboard, RootMsg
from .dashboard import DashboardComponent

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade

HINTS = {
    ("root", "connection"): "j/k move  enter connect  q quit",
    ("root", "dashboard", "dblist"): "j/k move  l/h expand/fold  enter open  / filter  r reload  tab table  esc back",
    ("root", "dashboard", "table", "records"): (
        "1/2/3 tabs  j/k rows  h/l [/] columns  n/p page  / where  x clear  r reload  esc back"
    ),
    ("root", "dashboard", "table", "sql"): "1/2/3 tabs  enter launch tool  esc back",
    ("root", "dashboard", "table", "properties"): "1/2/3 tabs  j/k rows  h/l columns  r reload  esc back",
}


class RootComponent(Component):
    name = "root"

    def __init__(
        self,
        connections: Sequence[Connection],
        facade: DatabaseFacade,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.connection = ConnectionComponent(connections, facade)
        self.dashboard = DashboardComponent(facade, page_size)
        self.screen = "connection"

    @property
    def active(self) -> Component:
        return self.dashboard if self.screen == "dashboard" else self.connection

    def map_input(self, key: KeyPress) -> Message | None:
        message = self.active.map_input(key)
        if message is not None:
            return message
        if self.screen == "dashboard" and key.key == "escape":
            return LeaveDashboard()
        return None

    def update(self, msg: Message) -> Update:
        if isinstance(msg, ConnectionSelected):
            logger.info("Opening connection {}", msg.connection.display_name)
            self.screen = "dashboard"
            return self.dashboard.open(msg.connection)
        if isinstance(msg, LeaveDashboard):
            logger.info("Leaving dashboard")
            self.dashboard.close()
            self.screen = "connection"
            return Update.none()
        if isinstance(msg, RootMsg):
            return Update.none()
        if isinstance(msg, ConnectionMsg):
            return self.connection.update(msg)
        return self.dashboard.update(msg)

    def focus_path(self) -> tuple[str, ...]:
        return (self.name,) + self.active.focus_path()

    def render(self, area: Area, focused: bool) -> RenderableType:
        body_area = Area(area.width, max(area.height - 1, 1))
        hint = Text(HINTS.get(self.focus_path(), ""), style="dim", no_wrap=True, overflow="ellipsis")
        return Group(self.active.render(body_area, focused), hint)
