"""Update loop, command scheduler and terminal controller."""

from .commands import NONE, Batch, Command, Message, Quit, Spawn, SuspendTerminal, Update, batch
from .keys import KeyPress
from .loop import Runtime
from .scheduler import CommandScheduler
from .terminal import TerminalController, TerminalDevice, TerminalMode

__all__ = [
    "Batch",
    "Command",
    "CommandScheduler",
    "KeyPress",
    "Message",
    "NONE",
    "Quit",
    "Runtime",
    "Spawn",
    "SuspendTerminal",
    "TerminalController",
    "TerminalDevice",
    "TerminalMode",
    "Update",
    "batch",
]
