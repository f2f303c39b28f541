"""UI tests for the Textual host."""

from __future__ import annotations

import asyncio

import pytest

from clazydbm.db.facade import DatabaseFacade
from clazydbm.ui.app import ClazyApp
from tests.mocks import FakeToolRunner


async def wait_for(pilot, predicate, timeout: float = 5.0) -> None:
    """Let the app run until ``predicate()`` holds; results arrive on worker threads."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await pilot.pause(0.05)


def make_app(connections, installed=()) -> ClazyApp:
    return ClazyApp(connections, DatabaseFacade(tool_runner=FakeToolRunner(installed=set(installed))))


class TestClazyApp:
    @pytest.mark.asyncio
    async def test_browse_to_records(self, demo_connection):
        app = make_app([demo_connection])

        async with app.run_test(size=(120, 35)) as pilot:
            runtime = app.runtime
            assert app.view.has_focus
            assert runtime.focus_path() == ("root", "connection")

            await pilot.press("enter")
            dblist = runtime.root.dashboard.dblist
            await wait_for(pilot, lambda: bool(dblist.databases))

            # blobs, events, orders, users
            await pilot.press("j", "j", "j", "j", "enter")
            records = runtime.root.dashboard.table.records
            await wait_for(pilot, lambda: records.records is not None)

            assert runtime.focus_path() == ("root", "dashboard", "table", "records")
            assert records.records.columns == ("id", "name", "email")
            assert len(records.records.rows) == 5

    @pytest.mark.asyncio
    async def test_ctrl_c_exits_cleanly(self, demo_connection):
        app = make_app([demo_connection])

        async with app.run_test(size=(120, 35)) as pilot:
            await pilot.press("ctrl+c")
            await pilot.pause()

        assert app.runtime.should_quit
        assert app.return_code == 0

    @pytest.mark.asyncio
    async def test_q_exits_from_connection_screen(self, demo_connection):
        app = make_app([demo_connection])

        async with app.run_test(size=(120, 35)) as pilot:
            await pilot.press("q")
            await pilot.pause()

        assert app.runtime.should_quit

    @pytest.mark.asyncio
    async def test_launch_without_real_terminal_reports_error(self, demo_connection):
        app = make_app([demo_connection], installed={"litecli"})

        async with app.run_test(size=(120, 35)) as pilot:
            runtime = app.runtime
            await pilot.press("enter")
            await wait_for(pilot, lambda: bool(runtime.root.dashboard.dblist.databases))
            await pilot.press("j", "j", "j", "j", "enter")
            await wait_for(pilot, lambda: runtime.root.dashboard.table.records.records is not None)

            await pilot.press("2")
            sql = runtime.root.dashboard.table.sql
            await wait_for(pilot, lambda: sql.available is not None)
            assert sql.available is True

            # The headless driver cannot suspend, so the release fails and the app keeps running.
            await pilot.press("enter")
            await wait_for(pilot, lambda: sql.notice is not None)

            assert sql.notice.text.startswith("Terminal error:")
            assert not runtime.should_quit
            assert runtime.focus_path() == ("root", "dashboard", "table", "sql")

    @pytest.mark.asyncio
    async def test_background_work_runs_in_textual_workers(self, demo_connection):
        app = make_app([demo_connection])
        started = []
        run_worker = app.run_worker

        def recording_run_worker(work, **kwargs):
            started.append((kwargs["name"], kwargs["thread"]))
            return run_worker(work, **kwargs)

        app.run_worker = recording_run_worker

        async with app.run_test(size=(120, 35)) as pilot:
            await pilot.press("enter")
            dblist = app.runtime.root.dashboard.dblist
            await wait_for(pilot, lambda: bool(dblist.databases))

        assert started == [("list databases", True)]
        assert [database.name for database in dblist.databases] == ["demo-sqlite"]
