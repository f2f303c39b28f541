"""Terminal ownership: release it to a foreign process and always take it back."""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

from loguru import logger

from clazydbm.errors import TerminalError, TerminalInterrupted

T = TypeVar("T")

# Signals that would otherwise kill the process while the terminal is released.
TERMINATION_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig is not None
)


class TerminalMode(Enum):
    APPLICATION = "application"
    RELEASED = "released"


@runtime_checkable
class TerminalDevice(Protocol):
    """Something that can leave application mode for the duration of a block."""

    def suspended(self) -> AbstractContextManager[Any]:
        ...


@contextmanager
def termination_signals_raise() -> Iterator[None]:
    """Turn SIGTERM/SIGHUP into TerminalInterrupted while the block runs.

    Only the main thread may install handlers; elsewhere this is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _raise(signum: int, frame: Any) -> None:
        raise TerminalInterrupted(signum)

    previous = {}
    for sig in TERMINATION_SIGNALS:
        previous[sig] = signal.signal(sig, _raise)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


class TerminalController:
    """Owns the terminal mode flag and the release/restore protocol."""

    def __init__(self, device: TerminalDevice, *, handle_signals: bool = True):
        self._device = device
        self._handle_signals = handle_signals
        self._mode = TerminalMode.APPLICATION

    @property
    def mode(self) -> TerminalMode:
        return self._mode

    def with_suspended(self, action: Callable[[], T]) -> T:
        """Run ``action`` with the terminal released, then restore it.

        Restoration happens whether ``action`` returns, raises, or is
        interrupted by a termination signal; the action's exception is
        re-raised afterwards. A failed release leaves the terminal untouched
        and raises TerminalError; a failed restore raises a fatal one.
        """
        if self._mode is TerminalMode.RELEASED:
            raise TerminalError("terminal is already released")

        try:
            suspension = self._device.suspended()
            suspension.__enter__()
        except Exception as e:
            raise TerminalError(f"could not release the terminal: {e}") from e

        self._mode = TerminalMode.RELEASED
        logger.debug("Terminal released")
        failure: BaseException | None = None
        result: Any = None
        try:
            if self._handle_signals:
                with termination_signals_raise():
                    result = action()
            else:
                result = action()
        except BaseException as e:
            failure = e

        try:
            suspension.__exit__(None, None, None)
        except Exception as e:
            logger.error("Terminal restore failed: {}", e)
            raise TerminalError(f"could not restore the terminal: {e}", fatal=True) from e

        self._mode = TerminalMode.APPLICATION
        logger.debug("Terminal restored")
        if failure is not None:
            raise failure
        return result


__all__ = [
    "TERMINATION_SIGNALS",
    "TerminalController",
    "TerminalDevice",
    "TerminalMode",
    "termination_signals_raise",
]
