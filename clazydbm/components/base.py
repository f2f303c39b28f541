"""Component protocol and helpers shared by every view."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from clazydbm.errors import (
    AuthenticationError,
    ConfigError,
    DatabaseConnectionError,
    MissingDriverError,
    NotFoundError,
    QueryError,
    TerminalError,
    ToolInterrupted,
    ToolUnavailableError,
)
from clazydbm.runtime.commands import Message, Update
from clazydbm.runtime.keys import KeyPress

FOCUSED_BORDER = "bright_cyan"
BLURRED_BORDER = "grey50"

_ERROR_LABELS: tuple[tuple[type[BaseException], str], ...] = (
    (ConfigError, "Config error"),
    (MissingDriverError, "Missing driver"),
    (AuthenticationError, "Authentication failed"),
    (DatabaseConnectionError, "Connection failed"),
    (NotFoundError, "Not found"),
    (QueryError, "Query failed"),
    (ToolUnavailableError, "Tool unavailable"),
    (TerminalError, "Terminal error"),
    (ToolInterrupted, "Interrupted"),
)


@dataclass(frozen=True)
class Area:
    width: int
    height: int


@dataclass(frozen=True)
class Notice:
    """A transient message shown inside the view that produced it."""

    text: str
    severity: str = "error"

    @classmethod
    def from_error(cls, error: BaseException) -> Notice:
        label = next((text for kind, text in _ERROR_LABELS if isinstance(error, kind)), "Error")
        return cls(f"{label}: {error}")

    @classmethod
    def info(cls, text: str) -> Notice:
        return cls(text, severity="info")

    def render(self) -> Text:
        style = "bold red" if self.severity == "error" else "green"
        return Text(self.text, style=style)


class Component(ABC):
    """A node of the view tree.

    ``map_input`` turns a key into a message without side effects,
    ``update`` applies a message and returns what to run next, and
    ``render`` draws the current state.
    """

    name: ClassVar[str]

    @abstractmethod
    def map_input(self, key: KeyPress) -> Message | None:
        pass

    @abstractmethod
    def update(self, msg: Message) -> Update:
        pass

    @abstractmethod
    def render(self, area: Area, focused: bool) -> RenderableType:
        pass

    def focus_path(self) -> tuple[str, ...]:
        return (self.name,)


class RequestTokens:
    """Monotonic ids tying background results to the request that asked for them."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self.current = 0

    def next(self) -> int:
        self.current = next(self._counter)
        return self.current

    def invalidate(self) -> None:
        self.next()

    def is_current(self, token: int) -> bool:
        return token == self.current


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def move_cursor(cursor: int, delta: int, length: int) -> int:
    if length <= 0:
        return 0
    return clamp(cursor + delta, 0, length - 1)


def frame(
    body: RenderableType,
    area: Area,
    focused: bool,
    *,
    title: str | None = None,
    notice: Notice | None = None,
) -> Panel:
    """Bordered box sized to ``area`` with an optional notice line under the body."""
    content: RenderableType = body if notice is None else Group(body, notice.render())
    return Panel(
        content,
        title=title,
        title_align="left",
        border_style=FOCUSED_BORDER if focused else BLURRED_BORDER,
        height=max(area.height, 3),
        width=max(area.width, 4),
    )


__all__ = [
    "Area",
    "Component",
    "Notice",
    "RequestTokens",
    "clamp",
    "frame",
    "move_cursor",
]
