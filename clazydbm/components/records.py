"""Records tab: one page of rows with scrolling, paging and a WHERE filter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Group, RenderableType
from rich.text import Text

from clazydbm.config import DEFAULT_PAGE_SIZE
from clazydbm.connection import Connection
from clazydbm.db.models import Records, TableRef
from clazydbm.runtime.commands import Message, Spawn, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, Notice, RequestTokens
from .filtering import LineEdit
from .grid import GridCursor, Motion, grid_motion, render_grid

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade


class RecordsMsg(Message):
    pass


@dataclass(frozen=True)
class RecordsScroll(RecordsMsg):
    motion: Motion


@dataclass(frozen=True)
class RecordsPage(RecordsMsg):
    direction: int


@dataclass(frozen=True)
class RecordsReload(RecordsMsg):
    pass


@dataclass(frozen=True)
class WhereStart(RecordsMsg):
    pass


@dataclass(frozen=True)
class WhereInput(RecordsMsg):
    char: str


@dataclass(frozen=True)
class WhereBackspace(RecordsMsg):
    pass


@dataclass(frozen=True)
class WhereApply(RecordsMsg):
    pass


@dataclass(frozen=True)
class WhereCancel(RecordsMsg):
    pass


@dataclass(frozen=True)
class WhereClear(RecordsMsg):
    pass


@dataclass(frozen=True)
class RecordsLoaded(RecordsMsg):
    token: int
    records: Records


@dataclass(frozen=True)
class RecordsFailed(RecordsMsg):
    token: int
    error: Exception


class RecordsMode(Enum):
    MATRIX = "matrix"
    WHERE = "where"


_MATRIX_KEYS: dict[str, RecordsMsg] = {
    "n": RecordsPage(1),
    "p": RecordsPage(-1),
    "r": RecordsReload(),
    "/": WhereStart(),
    "x": WhereClear(),
}

_WHERE_KEYS: dict[str, RecordsMsg] = {
    "enter": WhereApply(),
    "escape": WhereCancel(),
    "backspace": WhereBackspace(),
}


class RecordsComponent(Component):
    name = "records"

    def __init__(self, facade: DatabaseFacade, page_size: int = DEFAULT_PAGE_SIZE):
        self.facade = facade
        self.page_size = page_size
        self.connection: Connection | None = None
        self.ref: TableRef | None = None
        self.records: Records | None = None
        self.loading = False
        self.notice: Notice | None = None
        self.mode = RecordsMode.MATRIX
        self.offset = 0
        self.where = ""
        self.edit = LineEdit()
        self.cursor = GridCursor()
        self.tokens = RequestTokens()

    def open(self, connection: Connection, ref: TableRef) -> None:
        """Point the view at a new table; the previous snapshot is dropped."""
        self.tokens.invalidate()
        self.connection = connection
        self.ref = ref
        self.records = None
        self.loading = False
        self.notice = None
        self.mode = RecordsMode.MATRIX
        self.offset = 0
        self.where = ""
        self.edit.clear()
        self.cursor.reset()

    def enter(self) -> Update:
        return self._fetch()

    def _fetch(self) -> Update:
        if self.connection is None or self.ref is None:
            return Update.none()
        token = self.tokens.next()
        self.loading = True
        facade, connection, ref = self.facade, self.connection, self.ref
        limit, offset, where = self.page_size, self.offset, self.where or None
        return Update.run(
            Spawn(
                work=lambda: RecordsLoaded(token, facade.list_records(connection, ref, limit, offset, where)),
                on_error=lambda e: RecordsFailed(token, e),
                key=("records", connection, ref, limit, offset, where),
                name="list records",
            )
        )

    def map_input(self, key: KeyPress) -> Message | None:
        if self.mode is RecordsMode.WHERE:
            if key.key in _WHERE_KEYS:
                return _WHERE_KEYS[key.key]
            if key.is_printable:
                return WhereInput(key.name)
            return None
        motion = grid_motion(key)
        if motion is not None:
            return RecordsScroll(motion)
        return _MATRIX_KEYS.get(key.name)

    def update(self, msg: Message) -> Update:
        if isinstance(msg, RecordsLoaded):
            return self._on_loaded(msg)
        if isinstance(msg, RecordsFailed):
            return self._on_failed(msg)

        self.notice = None
        if isinstance(msg, RecordsScroll):
            if self.records is not None:
                self.cursor.apply(msg.motion, len(self.records.rows), len(self.records.columns))
        elif isinstance(msg, RecordsPage):
            return self._page(msg.direction)
        elif isinstance(msg, RecordsReload):
            return self._fetch()
        elif isinstance(msg, WhereStart):
            self.mode = RecordsMode.WHERE
            self.edit.text = self.where
        elif isinstance(msg, WhereInput):
            self.edit.push(msg.char)
        elif isinstance(msg, WhereBackspace):
            self.edit.pop()
        elif isinstance(msg, WhereCancel):
            self.mode = RecordsMode.MATRIX
            self.edit.clear()
        elif isinstance(msg, WhereApply):
            self.mode = RecordsMode.MATRIX
            self.where = self.edit.text.strip()
            self.edit.clear()
            self.offset = 0
            return self._fetch()
        elif isinstance(msg, WhereClear):
            if not self.where:
                return Update.none()
            self.where = ""
            self.offset = 0
            return self._fetch()
        return Update.none()

    def _page(self, direction: int) -> Update:
        if direction > 0:
            if self.records is None or not self.records.has_next_page:
                return Update.none()
            self.offset += self.page_size
        else:
            if self.offset == 0:
                return Update.none()
            self.offset = max(self.offset - self.page_size, 0)
        return self._fetch()

    def _on_loaded(self, msg: RecordsLoaded) -> Update:
        if not self.tokens.is_current(msg.token):
            logger.debug("Discarding stale records (token {})", msg.token)
            return Update.none()
        previous = self.records
        self.loading = False
        self.records = msg.records
        if previous is None or previous.offset != msg.records.offset or previous.columns != msg.records.columns:
            self.cursor.reset()
        self.cursor.clamp_to(len(msg.records.rows), len(msg.records.columns))
        return Update.none()

    def _on_failed(self, msg: RecordsFailed) -> Update:
        if not self.tokens.is_current(msg.token):
            logger.debug("Discarding stale records failure (token {})", msg.token)
            return Update.none()
        self.loading = False
        self.notice = Notice.from_error(msg.error)
        return Update.none()

    def status_line(self) -> Text:
        status = Text(style="dim")
        records = self.records
        if records is not None:
            if records.rows:
                first, last = records.offset + 1, records.offset + len(records.rows)
                status.append(f"rows {first}-{last}")
            else:
                status.append("no rows")
            if records.total is not None:
                status.append(f" of {records.total}")
            if records.columns:
                status.append(f"  col {self.cursor.column + 1}/{len(records.columns)}")
        if self.loading:
            status.append("  loading...")
        return status

    def render(self, area: Area, focused: bool) -> RenderableType:
        parts: list[RenderableType] = []
        if self.mode is RecordsMode.WHERE:
            prompt = Text("WHERE ", style="bold yellow")
            prompt.append(self.edit.text)
            prompt.append("_", style="blink")
            parts.append(prompt)
        elif self.where:
            parts.append(Text(f"WHERE {self.where}", style="yellow"))

        if self.records is None:
            parts.append(Text("Loading..." if self.loading else "", style="dim"))
        else:
            reserved = len(parts) + 1 + (1 if self.notice else 0)
            headers = self.records.columns or ("(no columns)",)
            parts.append(render_grid(headers, self.records.rows, self.cursor, area, focused, reserved_rows=reserved))
        parts.append(self.status_line())
        if self.notice is not None:
            parts.append(self.notice.render())
        return Group(*parts)
