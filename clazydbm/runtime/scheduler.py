"""Executes Command values produced by component updates."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Hashable

from loguru import logger

from clazydbm.errors import TerminalError, TerminalInterrupted, ToolInterrupted

from .commands import Batch, Command, Message, NoCommand, Spawn, SuspendTerminal
from .terminal import TerminalController

WorkerStarter = Callable[[Callable[[], None], str], None]


class CommandScheduler:
    """Runs background work through ``start_worker`` and terminal hand-offs on the caller.

    Every Spawn produces exactly one message on ``inbox``. Spawns sharing a
    key (the same request) are serialized: while one runs, the newest repeat
    waits and older waiting repeats are dropped. Different keys run side by
    side.
    """

    def __init__(
        self,
        inbox: queue.SimpleQueue[Message],
        terminal: TerminalController,
        start_worker: WorkerStarter,
    ):
        self.inbox = inbox
        self.terminal = terminal
        self._start_worker = start_worker
        self._lock = threading.Lock()
        self._running: set[Hashable] = set()
        self._pending: dict[Hashable, Spawn] = {}

    def execute(self, command: Command) -> None:
        if isinstance(command, NoCommand):
            return
        if isinstance(command, Batch):
            for item in command.commands:
                self.execute(item)
        elif isinstance(command, Spawn):
            self._spawn(command)
        elif isinstance(command, SuspendTerminal):
            self._suspend(command)
        else:
            raise TypeError(f"unknown command {command!r}")

    def in_flight(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._running

    def _spawn(self, spawn: Spawn) -> None:
        if spawn.key is not None:
            with self._lock:
                if spawn.key in self._running:
                    logger.debug("{} already running for {!r}; queued newest request", spawn.name, spawn.key)
                    self._pending[spawn.key] = spawn
                    return
                self._running.add(spawn.key)
        self._start_worker(lambda: self._run_spawn(spawn), spawn.name)

    def _run_spawn(self, spawn: Spawn) -> None:
        try:
            try:
                message = spawn.work()
            except Exception as e:
                logger.warning("{} failed: {}", spawn.name, e)
                message = spawn.on_error(e)
            self.inbox.put(message)
        finally:
            if spawn.key is not None:
                self._finish(spawn.key)

    def _finish(self, key: Hashable) -> None:
        with self._lock:
            following = self._pending.pop(key, None)
            if following is None:
                self._running.discard(key)
        if following is not None:
            self._start_worker(lambda: self._run_spawn(following), following.name)

    def _suspend(self, command: SuspendTerminal) -> None:
        logger.debug("Suspending terminal for {}", command.name)
        try:
            message = self.terminal.with_suspended(command.work)
        except TerminalInterrupted:
            raise
        except TerminalError as e:
            if e.fatal:
                raise
            message = command.on_error(e)
        except Exception as e:
            logger.warning("{} failed: {}", command.name, e)
            message = command.on_error(e)
        except KeyboardInterrupt:
            logger.info("{} interrupted with Ctrl-C", command.name)
            message = command.on_error(ToolInterrupted(command.name))
        if message is not None:
            self.inbox.put(message)


__all__ = ["CommandScheduler", "WorkerStarter"]
