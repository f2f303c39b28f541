"""Tree of databases, schemas and tables for the active connection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import RenderableType
from rich.text import Text

from clazydbm.connection import Connection
from clazydbm.db.models import Database, TableRef
from clazydbm.runtime.commands import Message, Spawn, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, Notice, RequestTokens, clamp, frame, move_cursor
from .filtering import LineEdit, highlight, match_text
from .grid import window_top
from .messages import SelectTable

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade


class DBListMsg(Message):
    pass


@dataclass(frozen=True)
class TreeMove(DBListMsg):
    delta: int = 0
    jump: str | None = None


@dataclass(frozen=True)
class TreeExpand(DBListMsg):
    pass


@dataclass(frozen=True)
class TreeFold(DBListMsg):
    pass


@dataclass(frozen=True)
class TreeActivate(DBListMsg):
    pass


@dataclass(frozen=True)
class TreeReload(DBListMsg):
    pass


@dataclass(frozen=True)
class FilterStart(DBListMsg):
    pass


@dataclass(frozen=True)
class FilterInput(DBListMsg):
    char: str


@dataclass(frozen=True)
class FilterBackspace(DBListMsg):
    pass


@dataclass(frozen=True)
class FilterConfirm(DBListMsg):
    pass


@dataclass(frozen=True)
class FilterCancel(DBListMsg):
    pass


@dataclass(frozen=True)
class DatabasesLoaded(DBListMsg):
    token: int
    databases: tuple[Database, ...]


@dataclass(frozen=True)
class DatabasesFailed(DBListMsg):
    token: int
    error: Exception


class DBListMode(Enum):
    TREE = "tree"
    FILTER = "filter"


_TREE_KEYS: dict[str, DBListMsg] = {
    "j": TreeMove(1),
    "down": TreeMove(1),
    "k": TreeMove(-1),
    "up": TreeMove(-1),
    "g": TreeMove(jump="start"),
    "home": TreeMove(jump="start"),
    "G": TreeMove(jump="end"),
    "end": TreeMove(jump="end"),
    "l": TreeExpand(),
    "right": TreeExpand(),
    "h": TreeFold(),
    "left": TreeFold(),
    "enter": TreeActivate(),
    "/": FilterStart(),
    "r": TreeReload(),
}

_FILTER_KEYS: dict[str, DBListMsg] = {
    "enter": FilterConfirm(),
    "escape": FilterCancel(),
    "backspace": FilterBackspace(),
    "down": TreeMove(1),
    "up": TreeMove(-1),
}


@dataclass(frozen=True)
class TreeRow:
    """One visible line of the tree; ``ref`` is set for tables only."""

    key: tuple[str, ...]
    label: str
    depth: int
    ref: TableRef | None = None
    expanded: bool = False
    matches: tuple[int, ...] = ()

    @property
    def expandable(self) -> bool:
        return self.ref is None


class DBListComponent(Component):
    name = "dblist"

    def __init__(self, facade: DatabaseFacade):
        self.facade = facade
        self.connection: Connection | None = None
        self.databases: tuple[Database, ...] = ()
        self.loading = False
        self.notice: Notice | None = None
        self.mode = DBListMode.TREE
        self.filter = LineEdit()
        self.cursor = 0
        self.expanded: set[tuple[str, ...]] = set()
        self.tokens = RequestTokens()

    def load(self, connection: Connection) -> Update:
        self.reset()
        self.connection = connection
        return self._fetch()

    def reset(self) -> None:
        self.tokens.invalidate()
        self.connection = None
        self.databases = ()
        self.loading = False
        self.notice = None
        self.mode = DBListMode.TREE
        self.filter.clear()
        self.cursor = 0
        self.expanded.clear()

    def _fetch(self) -> Update:
        if self.connection is None:
            return Update.none()
        token = self.tokens.next()
        self.loading = True
        facade, connection = self.facade, self.connection
        return Update.run(
            Spawn(
                work=lambda: DatabasesLoaded(token, tuple(facade.list_databases(connection))),
                on_error=lambda e: DatabasesFailed(token, e),
                key=("dblist", connection),
                name="list databases",
            )
        )

    # Tree model

    def _table_rows(self, database: str, schema: str | None, tables: tuple[str, ...], depth: int) -> list[TreeRow]:
        rows = []
        for table in tables:
            matched, indices = match_text(self.filter.text, table)
            if matched:
                rows.append(
                    TreeRow(
                        key=("table", database, schema or "", table),
                        label=table,
                        depth=depth,
                        ref=TableRef(database=database, table=table, schema=schema),
                        matches=tuple(indices),
                    )
                )
        return rows

    def _children(self, database: Database) -> list[TreeRow]:
        filtering = bool(self.filter.text)
        rows = self._table_rows(database.name, None, database.tables, 1)
        for schema in database.schemas:
            key = ("schema", database.name, schema.name)
            tables = self._table_rows(database.name, schema.name, schema.tables, 2)
            if filtering:
                if tables:
                    rows.append(TreeRow(key=key, label=schema.name, depth=1, expanded=True))
                    rows.extend(tables)
                continue
            is_open = key in self.expanded
            rows.append(TreeRow(key=key, label=schema.name, depth=1, expanded=is_open))
            if is_open:
                rows.extend(tables)
        return rows

    def visible_rows(self) -> list[TreeRow]:
        """Rows as displayed; an active filter shows every match with its parents open."""
        filtering = bool(self.filter.text)
        rows: list[TreeRow] = []
        for database in self.databases:
            key = ("db", database.name)
            if filtering:
                children = self._children(database)
                if children:
                    rows.append(TreeRow(key=key, label=database.name, depth=0, expanded=True))
                    rows.extend(children)
                continue
            is_open = key in self.expanded
            rows.append(TreeRow(key=key, label=database.name, depth=0, expanded=is_open))
            if is_open:
                rows.extend(self._children(database))
        return rows

    @property
    def selected_row(self) -> TreeRow | None:
        rows = self.visible_rows()
        if not rows:
            return None
        return rows[clamp(self.cursor, 0, len(rows) - 1)]

    def _clamp_cursor(self) -> None:
        self.cursor = clamp(self.cursor, 0, max(len(self.visible_rows()) - 1, 0))

    def _cursor_to_first_table(self) -> None:
        rows = self.visible_rows()
        self.cursor = next((i for i, row in enumerate(rows) if row.ref is not None), 0)

    # Component protocol

    def map_input(self, key: KeyPress) -> Message | None:
        if self.mode is DBListMode.FILTER:
            if key.key in _FILTER_KEYS:
                return _FILTER_KEYS[key.key]
            if key.is_printable:
                return FilterInput(key.name)
            return None
        return _TREE_KEYS.get(key.name)

    def update(self, msg: Message) -> Update:
        if isinstance(msg, DatabasesLoaded):
            return self._on_loaded(msg)
        if isinstance(msg, DatabasesFailed):
            return self._on_failed(msg)

        self.notice = None
        if isinstance(msg, TreeMove):
            length = len(self.visible_rows())
            if msg.jump == "start":
                self.cursor = 0
            elif msg.jump == "end":
                self.cursor = max(length - 1, 0)
            else:
                self.cursor = move_cursor(self.cursor, msg.delta, length)
        elif isinstance(msg, TreeExpand):
            row = self.selected_row
            if row is not None and row.expandable and not self.filter.text:
                self.expanded.add(row.key)
        elif isinstance(msg, TreeFold):
            self._fold()
        elif isinstance(msg, TreeActivate):
            row = self.selected_row
            if row is None:
                return Update.none()
            if row.ref is not None:
                return Update.emit(SelectTable(row.ref))
            if not self.filter.text:
                self.expanded.symmetric_difference_update({row.key})
        elif isinstance(msg, TreeReload):
            return self._fetch()
        elif isinstance(msg, FilterStart):
            self.mode = DBListMode.FILTER
        elif isinstance(msg, FilterInput):
            self.filter.push(msg.char)
            self._cursor_to_first_table()
        elif isinstance(msg, FilterBackspace):
            self.filter.pop()
            self._cursor_to_first_table()
        elif isinstance(msg, FilterConfirm):
            self.mode = DBListMode.TREE
        elif isinstance(msg, FilterCancel):
            self.mode = DBListMode.TREE
            self.filter.clear()
        self._clamp_cursor()
        return Update.none()

    def _fold(self) -> None:
        row = self.selected_row
        if row is None:
            return
        if row.expandable and row.expanded and not self.filter.text:
            self.expanded.discard(row.key)
            return
        rows = self.visible_rows()
        for index in range(self.cursor - 1, -1, -1):
            if rows[index].depth < row.depth:
                self.cursor = index
                return

    def _on_loaded(self, msg: DatabasesLoaded) -> Update:
        if not self.tokens.is_current(msg.token):
            logger.debug("Discarding stale database list (token {})", msg.token)
            return Update.none()
        self.loading = False
        self.databases = msg.databases
        self.expanded = {("db", db.name) for db in msg.databases}
        self.expanded.update(("schema", db.name, schema.name) for db in msg.databases for schema in db.schemas)
        self._clamp_cursor()
        return Update.none()

    def _on_failed(self, msg: DatabasesFailed) -> Update:
        if not self.tokens.is_current(msg.token):
            logger.debug("Discarding stale database list failure (token {})", msg.token)
            return Update.none()
        self.loading = False
        self.notice = Notice.from_error(msg.error)
        return Update.none()

    def render(self, area: Area, focused: bool) -> RenderableType:
        lines: list[Text] = []
        if self.mode is DBListMode.FILTER or self.filter.text:
            prompt = Text("/", style="bold yellow")
            prompt.append(self.filter.text)
            if self.mode is DBListMode.FILTER:
                prompt.append("_", style="blink")
            lines.append(prompt)

        rows = self.visible_rows()
        if self.loading and not rows:
            lines.append(Text("Loading...", style="dim"))
        elif not rows:
            lines.append(Text("(no matches)" if self.filter.text else "(no tables)", style="dim"))

        height = max(area.height - 2 - len(lines) - (1 if self.notice else 0), 1)
        top = window_top(self.cursor, height)
        for index in range(top, min(top + height, len(rows))):
            row = rows[index]
            marker = ("▾ " if row.expanded else "▸ ") if row.expandable else "  "
            line = Text("  " * row.depth + marker)
            label = highlight(row.label, list(row.matches))
            if row.expandable:
                label.stylize("bold")
            line.append_text(label)
            if index == self.cursor:
                line.stylize("reverse" if focused and self.mode is DBListMode.TREE else "underline")
            lines.append(line)

        body = Text("\n").join(lines)
        title = "Databases" if self.connection is None else self.connection.display_name
        return frame(body, area, focused, title=title, notice=self.notice)
