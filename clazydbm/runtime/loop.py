"""The update loop: key events and inbox messages in, commands out."""

from __future__ import annotations

import queue
from collections import deque
from typing import TYPE_CHECKING

from loguru import logger
from rich.console import RenderableType

from clazydbm.errors import TerminalError, TerminalInterrupted

from .commands import Command, Message, Quit
from .keys import KeyPress
from .scheduler import CommandScheduler, WorkerStarter
from .terminal import TerminalController, TerminalDevice

if TYPE_CHECKING:
    from clazydbm.components.base import Area, Component

QUIT_KEY = "ctrl+c"


class Runtime:
    """Single-threaded owner of the component tree.

    Only the thread that calls ``handle_key``/``pump`` touches component
    state; workers communicate through ``inbox``.
    """

    def __init__(self, root: Component, scheduler: CommandScheduler):
        self.root = root
        self.scheduler = scheduler
        self.inbox = scheduler.inbox
        self.should_quit = False
        self.fatal_error: TerminalError | None = None

    @classmethod
    def create(
        cls,
        root: Component,
        device: TerminalDevice,
        *,
        start_worker: WorkerStarter,
        handle_signals: bool = True,
    ) -> Runtime:
        terminal = TerminalController(device, handle_signals=handle_signals)
        scheduler = CommandScheduler(queue.SimpleQueue(), terminal, start_worker=start_worker)
        return cls(root, scheduler)

    @property
    def terminal(self) -> TerminalController:
        return self.scheduler.terminal

    def handle_key(self, key: KeyPress) -> None:
        if self.should_quit:
            return
        if key.key == QUIT_KEY:
            self.dispatch(Quit())
            return
        message = self.root.map_input(key)
        if message is not None:
            self.dispatch(message)

    def dispatch(self, message: Message) -> None:
        """Apply a message and every follow-up it produces, in order."""
        pending: deque[Message] = deque([message])
        while pending and not self.should_quit:
            current = pending.popleft()
            if isinstance(current, Quit):
                logger.info("Quit requested")
                self.should_quit = True
                break
            update = self.root.update(current)
            pending.extend(update.messages)
            self._execute(update.command)

    def _execute(self, command: Command) -> None:
        try:
            self.scheduler.execute(command)
        except TerminalInterrupted as e:
            logger.warning("Stopping: {}", e)
            self.should_quit = True
        except TerminalError as e:
            logger.error("Stopping after terminal failure: {}", e)
            self.fatal_error = e
            self.should_quit = True

    def pump(self) -> int:
        """Dispatch every message waiting in the inbox; returns how many."""
        handled = 0
        while not self.should_quit:
            try:
                message = self.inbox.get_nowait()
            except queue.Empty:
                break
            self.dispatch(message)
            handled += 1
        return handled

    def focus_path(self) -> tuple[str, ...]:
        return self.root.focus_path()

    def render(self, area: Area) -> RenderableType:
        return self.root.render(area, True)


__all__ = ["QUIT_KEY", "Runtime"]
