"""Textual host for the component tree."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Any

from loguru import logger
from rich.console import RenderableType
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key
from textual.widget import Widget

from clazydbm.components.base import Area
from clazydbm.components.root import RootComponent
from clazydbm.config import DEFAULT_PAGE_SIZE
from clazydbm.connection import Connection
from clazydbm.db.facade import DatabaseFacade
from clazydbm.runtime.keys import KeyPress
from clazydbm.runtime.loop import QUIT_KEY, Runtime
from clazydbm.runtime.scheduler import WorkerStarter

PUMP_INTERVAL = 0.05


class TextualTerminalDevice:
    """Terminal device backed by ``App.suspend``."""

    def __init__(self, app: App[Any]):
        self._app = app

    def suspended(self) -> AbstractContextManager[Any]:
        return self._app.suspend()


class ComponentView(Widget):
    """Draws the root component and forwards every key to the runtime."""

    can_focus = True

    DEFAULT_CSS = """
    ComponentView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, runtime: Runtime, **kwargs: Any):
        super().__init__(**kwargs)
        self._runtime = runtime

    def render(self) -> RenderableType:
        width, height = self.size
        return self._runtime.render(Area(width=max(width, 1), height=max(height, 1)))

    def on_key(self, event: Key) -> None:
        event.stop()
        event.prevent_default()
        app = self.app
        if isinstance(app, ClazyApp):
            app.handle_key(KeyPress(key=event.key, character=event.character))


class ClazyApp(App[int]):
    """Main clazydbm application."""

    TITLE = "clazydbm"

    CSS = """
    Screen {
        background: $surface;
    }

    #view {
        width: 100%;
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "runtime_quit", "Quit", show=False, priority=True),
        Binding("ctrl+q", "runtime_quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        connections: Sequence[Connection],
        facade: DatabaseFacade | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        start_worker: WorkerStarter | None = None,
    ):
        super().__init__()
        self._app_thread = threading.get_ident()
        self.facade = facade or DatabaseFacade()
        root = RootComponent(connections, self.facade, page_size)
        self.runtime = Runtime.create(
            root, TextualTerminalDevice(self), start_worker=start_worker or self.start_worker
        )

    @property
    def view(self) -> ComponentView:
        return self.query_one("#view", ComponentView)

    def compose(self) -> ComposeResult:
        yield ComponentView(self.runtime, id="view")

    def on_mount(self) -> None:
        self.view.focus()
        self.set_interval(PUMP_INTERVAL, self._pump)

    def start_worker(self, target: Callable[[], None], name: str) -> None:
        """Run scheduler work in a threaded Textual worker.

        Queued repeats are started from the worker that just finished, so
        those hop back onto the app thread first.
        """
        if threading.get_ident() != self._app_thread:
            self.call_from_thread(self.start_worker, target, name)
            return
        self.run_worker(target, name=name, group="runtime", thread=True, exit_on_error=False)

    def handle_key(self, key: KeyPress) -> None:
        self.runtime.handle_key(key)
        self.runtime.pump()
        self._after_step()

    def action_runtime_quit(self) -> None:
        self.handle_key(KeyPress(key=QUIT_KEY))

    def _pump(self) -> None:
        if self.runtime.pump():
            self._after_step()

    def _after_step(self) -> None:
        if not self.runtime.should_quit:
            self.view.refresh()
            return
        fatal = self.runtime.fatal_error
        if fatal is not None:
            logger.error("Exiting: {}", fatal)
            self.exit(1, return_code=1, message=str(fatal))
        else:
            self.exit(0)
