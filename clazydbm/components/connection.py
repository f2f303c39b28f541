"""Connection picker shown at startup."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote

from rich.console import RenderableType
from rich.text import Text

from clazydbm.connection import Connection
from clazydbm.errors import ConfigError
from clazydbm.runtime.commands import Message, Quit, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, Notice, frame, move_cursor
from .grid import PAGE_ROWS, window_top
from .messages import ConnectionSelected

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade


class ConnectionMsg(Message):
    pass


@dataclass(frozen=True)
class ConnectionMove(ConnectionMsg):
    delta: int = 0
    jump: str | None = None


@dataclass(frozen=True)
class ConnectionActivate(ConnectionMsg):
    pass


_MOVES = {
    "j": ConnectionMove(1),
    "down": ConnectionMove(1),
    "k": ConnectionMove(-1),
    "up": ConnectionMove(-1),
    "pagedown": ConnectionMove(PAGE_ROWS),
    "pageup": ConnectionMove(-PAGE_ROWS),
    "home": ConnectionMove(jump="start"),
    "g": ConnectionMove(jump="start"),
    "end": ConnectionMove(jump="end"),
    "G": ConnectionMove(jump="end"),
}


@dataclass(frozen=True)
class ConnectionEntry:
    connection: Connection
    target: str | None
    error: str | None

    @property
    def label(self) -> Text:
        text = Text(self.connection.display_name, style="bold")
        if self.error is not None:
            text.append(f" (invalid config: {self.error})", style="red")
        else:
            text.append(f" ({self.target})", style="dim")
        return text


def masked_target(connection: Connection, target: str) -> str:
    if not connection.password:
        return target
    return target.replace(f":{quote(connection.password, safe='')}@", ":***@", 1)


class ConnectionComponent(Component):
    name = "connection"

    def __init__(self, connections: Sequence[Connection], facade: DatabaseFacade):
        self.entries: list[ConnectionEntry] = []
        for connection in connections:
            try:
                target = masked_target(connection, facade.build_connection_target(connection))
                self.entries.append(ConnectionEntry(connection, target, None))
            except ConfigError as e:
                self.entries.append(ConnectionEntry(connection, None, str(e)))
        self.cursor = 0
        self.notice: Notice | None = None

    @property
    def selected(self) -> ConnectionEntry | None:
        if not self.entries:
            return None
        return self.entries[self.cursor]

    def map_input(self, key: KeyPress) -> Message | None:
        if key.name in _MOVES:
            return _MOVES[key.name]
        if key.key == "enter":
            return ConnectionActivate()
        if key.name == "q":
            return Quit()
        return None

    def update(self, msg: Message) -> Update:
        self.notice = None
        if isinstance(msg, ConnectionMove):
            if msg.jump == "start":
                self.cursor = 0
            elif msg.jump == "end":
                self.cursor = max(len(self.entries) - 1, 0)
            else:
                self.cursor = move_cursor(self.cursor, msg.delta, len(self.entries))
        elif isinstance(msg, ConnectionActivate):
            entry = self.selected
            if entry is None:
                return Update.none()
            if entry.error is not None:
                self.notice = Notice.from_error(ConfigError(entry.error))
                return Update.none()
            return Update.emit(ConnectionSelected(entry.connection))
        return Update.none()

    def render(self, area: Area, focused: bool) -> RenderableType:
        if not self.entries:
            body: RenderableType = Text("(no connections found)", style="dim")
        else:
            height = max(area.height - 2 - (1 if self.notice else 0), 1)
            top = window_top(self.cursor, height)
            body = Text()
            for index in range(top, min(top + height, len(self.entries))):
                line = self.entries[index].label
                if index == self.cursor:
                    line = Text("> ").append_text(line)
                    line.stylize("reverse" if focused else "underline")
                else:
                    line = Text("  ").append_text(line)
                if index > top:
                    body.append("\n")
                body.append_text(line)
        return frame(body, area, focused, title="Connections", notice=self.notice)
