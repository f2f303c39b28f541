"""Properties tab: column definitions of the selected table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Group, RenderableType
from rich.text import Text

from clazydbm.connection import Connection
from clazydbm.db.models import TableProperties, TableRef
from clazydbm.runtime.commands import Message, Spawn, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, Notice, RequestTokens
from .grid import GridCursor, Motion, grid_motion, render_grid

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade

HEADERS = ("Column", "Type", "Nullable", "Default", "Key")


class PropertiesMsg(Message):
    pass


@dataclass(frozen=True)
class PropertiesScroll(PropertiesMsg):
    motion: Motion


@dataclass(frozen=True)
class PropertiesReload(PropertiesMsg):
    pass


@dataclass(frozen=True)
class PropertiesLoaded(PropertiesMsg):
    token: int
    properties: TableProperties


@dataclass(frozen=True)
class PropertiesFailed(PropertiesMsg):
    token: int
    error: Exception


def property_rows(properties: TableProperties) -> tuple[tuple[str, ...], ...]:
    return tuple(
        (
            column.name,
            column.data_type,
            "YES" if column.nullable else "NO",
            "" if column.default is None else column.default,
            column.key_flags,
        )
        for column in properties.columns
    )


class PropertiesComponent(Component):
    name = "properties"

    def __init__(self, facade: DatabaseFacade):
        self.facade = facade
        self.connection: Connection | None = None
        self.ref: TableRef | None = None
        self.properties: TableProperties | None = None
        self.rows: tuple[tuple[str, ...], ...] = ()
        self.loading = False
        self.notice: Notice | None = None
        self.cursor = GridCursor()
        self.tokens = RequestTokens()

    def open(self, connection: Connection, ref: TableRef) -> None:
        self.tokens.invalidate()
        self.connection = connection
        self.ref = ref
        self.properties = None
        self.rows = ()
        self.loading = False
        self.notice = None
        self.cursor.reset()

    def enter(self) -> Update:
        if self.connection is None or self.ref is None:
            return Update.none()
        token = self.tokens.next()
        self.loading = True
        facade, connection, ref = self.facade, self.connection, self.ref
        return Update.run(
            Spawn(
                work=lambda: PropertiesLoaded(token, facade.describe_table(connection, ref)),
                on_error=lambda e: PropertiesFailed(token, e),
                key=("properties", connection, ref),
                name="describe table",
            )
        )

    def map_input(self, key: KeyPress) -> Message | None:
        motion = grid_motion(key)
        if motion is not None:
            return PropertiesScroll(motion)
        if key.name == "r":
            return PropertiesReload()
        return None

    def update(self, msg: Message) -> Update:
        if isinstance(msg, PropertiesLoaded):
            if not self.tokens.is_current(msg.token):
                logger.debug("Discarding stale properties (token {})", msg.token)
                return Update.none()
            self.loading = False
            self.properties = msg.properties
            self.rows = property_rows(msg.properties)
            self.cursor.clamp_to(len(self.rows), len(HEADERS))
            return Update.none()
        if isinstance(msg, PropertiesFailed):
            if not self.tokens.is_current(msg.token):
                logger.debug("Discarding stale properties failure (token {})", msg.token)
                return Update.none()
            self.loading = False
            self.notice = Notice.from_error(msg.error)
            return Update.none()

        self.notice = None
        if isinstance(msg, PropertiesScroll):
            self.cursor.apply(msg.motion, len(self.rows), len(HEADERS))
        elif isinstance(msg, PropertiesReload):
            return self.enter()
        return Update.none()

    def render(self, area: Area, focused: bool) -> RenderableType:
        parts: list[RenderableType] = []
        if self.properties is None:
            parts.append(Text("Loading..." if self.loading else "", style="dim"))
        else:
            reserved = 1 if self.notice else 0
            parts.append(render_grid(HEADERS, self.rows, self.cursor, area, focused, reserved_rows=reserved))
        if self.notice is not None:
            parts.append(self.notice.render())
        return Group(*parts)
