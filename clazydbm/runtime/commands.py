"""Messages, commands and the Update value returned by components."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field


class Message:
    """Base class for everything that flows through the update loop.

    Concrete messages are frozen dataclasses; each component family has its
    own marker subclass that parents use for routing.
    """


@dataclass(frozen=True)
class Quit(Message):
    pass


class Command:
    """Base class for side effects requested by an update."""


@dataclass(frozen=True)
class NoCommand(Command):
    pass


NONE = NoCommand()


@dataclass(frozen=True)
class Batch(Command):
    commands: tuple[Command, ...]


@dataclass(frozen=True)
class Spawn(Command):
    """Run ``work`` on a background thread and deliver its Message.

    Exactly one message reaches the inbox: ``work()``'s return value, or
    ``on_error(exc)`` if it raised. Spawns sharing a ``key`` never overlap.
    """

    work: Callable[[], Message]
    on_error: Callable[[Exception], Message]
    key: Hashable | None = None
    name: str = "task"


@dataclass(frozen=True)
class SuspendTerminal(Command):
    """Run ``work`` on the main thread with the terminal released."""

    work: Callable[[], Message | None]
    on_error: Callable[[Exception], Message]
    name: str = "external process"


def batch(*commands: Command) -> Command:
    """Combine commands, dropping no-ops and flattening nested batches."""
    flat: list[Command] = []
    for command in commands:
        if isinstance(command, Batch):
            flat.extend(command.commands)
        elif not isinstance(command, NoCommand):
            flat.append(command)
    if not flat:
        return NONE
    if len(flat) == 1:
        return flat[0]
    return Batch(tuple(flat))


@dataclass
class Update:
    """Result of ``Component.update``: a command plus follow-up messages.

    Follow-up messages are dispatched again from the root of the tree, which
    is how one component asks another for something without touching it.
    """

    command: Command = NONE
    messages: tuple[Message, ...] = field(default_factory=tuple)

    @classmethod
    def none(cls) -> Update:
        return cls()

    @classmethod
    def run(cls, command: Command) -> Update:
        return cls(command=command)

    @classmethod
    def emit(cls, *messages: Message) -> Update:
        return cls(messages=tuple(messages))

    def merge(self, other: Update) -> Update:
        return Update(batch(self.command, other.command), self.messages + other.messages)


__all__ = [
    "Batch",
    "Command",
    "Message",
    "NONE",
    "NoCommand",
    "Quit",
    "Spawn",
    "SuspendTerminal",
    "Update",
    "batch",
]
