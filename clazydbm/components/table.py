"""Table view: Records, SQL and Properties tabs for the selected table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from rich.console import Group, RenderableType
from rich.text import Text

from clazydbm.config import DEFAULT_PAGE_SIZE
from clazydbm.connection import Connection
from clazydbm.db.models import TableRef
from clazydbm.runtime.commands import Message, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, frame
from .properties import PropertiesComponent, PropertiesMsg
from .records import RecordsComponent, RecordsMsg
from .sql import SqlComponent, SqlMsg

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade


class Tab(Enum):
    RECORDS = "records"
    SQL = "sql"
    PROPERTIES = "properties"


TAB_KEYS = {"1": Tab.RECORDS, "2": Tab.SQL, "3": Tab.PROPERTIES}
TAB_TITLES = {Tab.RECORDS: "Records", Tab.SQL: "SQL", Tab.PROPERTIES: "Properties"}


class TableMsg(Message):
    pass


@dataclass(frozen=True)
class SwitchTab(TableMsg):
    tab: Tab


class TableComponent(Component):
    name = "table"

    def __init__(self, facade: DatabaseFacade, page_size: int = DEFAULT_PAGE_SIZE):
        self.records = RecordsComponent(facade, page_size)
        self.sql = SqlComponent(facade)
        self.properties = PropertiesComponent(facade)
        self.tab = Tab.RECORDS
        self.connection: Connection | None = None
        self.ref: TableRef | None = None

    @property
    def current(self) -> RecordsComponent | SqlComponent | PropertiesComponent:
        return {Tab.RECORDS: self.records, Tab.SQL: self.sql, Tab.PROPERTIES: self.properties}[self.tab]

    @property
    def is_open(self) -> bool:
        return self.ref is not None

    def open(self, connection: Connection, ref: TableRef) -> Update:
        """Show a new table, keeping the current tab, and fetch for that tab."""
        self.connection = connection
        self.ref = ref
        for child in (self.records, self.sql, self.properties):
            child.open(connection, ref)
        return self.current.enter()

    def close(self) -> None:
        self.connection = None
        self.ref = None
        self.tab = Tab.RECORDS
        for child in (self.records, self.sql, self.properties):
            child.tokens.invalidate()

    def map_input(self, key: KeyPress) -> Message | None:
        message = self.current.map_input(key)
        if message is not None:
            return message
        if key.name in TAB_KEYS:
            return SwitchTab(TAB_KEYS[key.name])
        return None

    def update(self, msg: Message) -> Update:
        if isinstance(msg, RecordsMsg):
            return self.records.update(msg)
        if isinstance(msg, SqlMsg):
            return self.sql.update(msg)
        if isinstance(msg, PropertiesMsg):
            return self.properties.update(msg)
        if isinstance(msg, SwitchTab):
            # Every entry, including re-entry of the current tab, fetches once.
            self.tab = msg.tab
            return self.current.enter()
        return Update.none()

    def focus_path(self) -> tuple[str, ...]:
        return (self.name,) + self.current.focus_path()

    def tab_bar(self) -> Text:
        bar = Text()
        for key, tab in TAB_KEYS.items():
            label = f" [{key}] {TAB_TITLES[tab]} "
            bar.append(label, style="reverse bold" if tab is self.tab else "dim")
            bar.append(" ")
        return bar

    def render(self, area: Area, focused: bool) -> RenderableType:
        if self.ref is None:
            body: RenderableType = Text("Select a table from the list.", style="dim")
            return frame(body, area, focused, title="Table")
        inner = Area(width=max(area.width - 4, 1), height=max(area.height - 1, 1))
        body = Group(self.tab_bar(), self.current.render(inner, focused))
        return frame(body, area, focused, title=self.ref.qualified_name)
