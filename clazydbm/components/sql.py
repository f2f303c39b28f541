"""SQL tab: hands the terminal to the backend's interactive CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import Group, RenderableType
from rich.text import Text

from clazydbm.connection import Connection
from clazydbm.db.models import TableRef, ToolOutcome
from clazydbm.errors import ToolUnavailableError
from clazydbm.runtime.commands import Message, Spawn, SuspendTerminal, Update
from clazydbm.runtime.keys import KeyPress

from .base import Area, Component, Notice, RequestTokens

if TYPE_CHECKING:
    from clazydbm.db.facade import DatabaseFacade


class SqlMsg(Message):
    pass


@dataclass(frozen=True)
class LaunchTool(SqlMsg):
    pass


@dataclass(frozen=True)
class ToolProbed(SqlMsg):
    token: int
    tool: str
    available: bool


@dataclass(frozen=True)
class ToolProbeFailed(SqlMsg):
    token: int
    error: Exception


@dataclass(frozen=True)
class ToolExited(SqlMsg):
    outcome: ToolOutcome


@dataclass(frozen=True)
class ToolFailed(SqlMsg):
    error: Exception


class SqlComponent(Component):
    name = "sql"

    def __init__(self, facade: DatabaseFacade):
        self.facade = facade
        self.connection: Connection | None = None
        self.ref: TableRef | None = None
        self.tool: str | None = None
        self.available: bool | None = None
        self.notice: Notice | None = None
        self.tokens = RequestTokens()

    def open(self, connection: Connection, ref: TableRef) -> None:
        self.tokens.invalidate()
        self.connection = connection
        self.ref = ref
        self.tool = self.facade.external_tool_name(connection.type)
        self.available = None
        self.notice = None

    def enter(self) -> Update:
        """Check whether the tool is on PATH before offering to launch it."""
        if self.connection is None:
            return Update.none()
        token = self.tokens.next()
        facade, db_type = self.facade, self.connection.type
        tool = self.tool or facade.external_tool_name(db_type)
        return Update.run(
            Spawn(
                work=lambda: ToolProbed(token, tool, facade.is_external_tool_available(db_type)),
                on_error=lambda e: ToolProbeFailed(token, e),
                key=("sql", db_type),
                name="probe external tool",
            )
        )

    def map_input(self, key: KeyPress) -> Message | None:
        if key.key == "enter":
            return LaunchTool()
        return None

    def update(self, msg: Message) -> Update:
        if isinstance(msg, ToolProbed):
            if not self.tokens.is_current(msg.token):
                logger.debug("Discarding stale tool probe (token {})", msg.token)
                return Update.none()
            self.tool = msg.tool
            self.available = msg.available
            return Update.none()
        if isinstance(msg, ToolProbeFailed):
            if self.tokens.is_current(msg.token):
                self.available = False
                self.notice = Notice.from_error(msg.error)
            return Update.none()
        if isinstance(msg, ToolExited):
            self.notice = Notice.info(f"{msg.outcome.tool} exited with status {msg.outcome.returncode}")
            return Update.none()
        if isinstance(msg, ToolFailed):
            self.notice = Notice.from_error(msg.error)
            return Update.none()
        if isinstance(msg, LaunchTool):
            return self._launch()
        return Update.none()

    def _launch(self) -> Update:
        self.notice = None
        if self.connection is None:
            return Update.none()
        tool = self.tool or self.facade.external_tool_name(self.connection.type)
        if self.available is None:
            self.notice = Notice.info(f"Still looking for {tool}...")
            return Update.none()
        if not self.available:
            self.notice = Notice.from_error(ToolUnavailableError(tool))
            return Update.none()
        facade, connection = self.facade, self.connection
        return Update.run(
            SuspendTerminal(
                work=lambda: ToolExited(facade.launch_external_tool(connection)),
                on_error=ToolFailed,
                name=tool,
            )
        )

    def render(self, area: Area, focused: bool) -> RenderableType:
        tool = self.tool or "external tool"
        lines: list[RenderableType] = []
        if self.available is None:
            lines.append(Text(f"Checking for {tool}...", style="dim"))
        elif self.available:
            lines.append(Text.assemble("Press ", ("Enter", "bold"), f" to open {tool} on this connection."))
            lines.append(Text(f"{tool} takes over the terminal until you quit it.", style="dim"))
        else:
            lines.append(Text(f"{tool} is not installed.", style="yellow"))
            lines.append(Text.assemble("Install it with ", (f"pip install {tool}", "bold"), "."))
        if self.notice is not None:
            lines.append(self.notice.render())
        return Group(*lines)
