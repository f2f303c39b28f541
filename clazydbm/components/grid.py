"""Row/column scrolling shared by the records and properties views."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich import box
from rich.table import Table

from clazydbm.runtime.keys import KeyPress

from .base import Area, clamp

PAGE_ROWS = 10
COLUMN_STEP = 5
MAX_CELL_WIDTH = 40
# Panel border (2), header and its rule (2).
GRID_CHROME_ROWS = 4


@dataclass(frozen=True)
class Motion:
    """A cursor movement; ``jump`` is "start" or "end" and overrides ``delta``."""

    axis: str
    delta: int = 0
    jump: str | None = None


_MOTIONS = {
    "j": Motion("row", 1),
    "down": Motion("row", 1),
    "k": Motion("row", -1),
    "up": Motion("row", -1),
    "pagedown": Motion("row", PAGE_ROWS),
    "pageup": Motion("row", -PAGE_ROWS),
    "home": Motion("row", jump="start"),
    "end": Motion("row", jump="end"),
    "l": Motion("column", 1),
    "right": Motion("column", 1),
    "h": Motion("column", -1),
    "left": Motion("column", -1),
    "]": Motion("column", COLUMN_STEP),
    "[": Motion("column", -COLUMN_STEP),
    "ctrl+a": Motion("column", jump="start"),
    "ctrl+e": Motion("column", jump="end"),
}


def grid_motion(key: KeyPress) -> Motion | None:
    return _MOTIONS.get(key.name)


@dataclass
class GridCursor:
    """Selected row and first visible column."""

    row: int = 0
    column: int = 0

    def apply(self, motion: Motion, row_count: int, column_count: int) -> None:
        if motion.axis == "row":
            self.row = _moved(self.row, motion, row_count)
        else:
            self.column = _moved(self.column, motion, column_count)

    def clamp_to(self, row_count: int, column_count: int) -> None:
        self.row = clamp(self.row, 0, max(row_count - 1, 0))
        self.column = clamp(self.column, 0, max(column_count - 1, 0))

    def reset(self) -> None:
        self.row = 0
        self.column = 0


def _moved(position: int, motion: Motion, count: int) -> int:
    last = max(count - 1, 0)
    if motion.jump == "start":
        return 0
    if motion.jump == "end":
        return last
    return clamp(position + motion.delta, 0, last)


def window_top(row: int, height: int) -> int:
    """First visible row so that ``row`` stays on screen."""
    if height <= 0 or row < height:
        return 0
    return row - height + 1


def render_grid(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    cursor: GridCursor,
    area: Area,
    focused: bool,
    *,
    reserved_rows: int = 0,
) -> Table:
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False, header_style="bold")
    for header in headers[cursor.column :]:
        table.add_column(header, no_wrap=True, overflow="ellipsis", max_width=MAX_CELL_WIDTH)

    height = max(area.height - GRID_CHROME_ROWS - reserved_rows, 1)
    top = window_top(cursor.row, height)
    for index in range(top, min(top + height, len(rows))):
        style = "reverse" if focused and index == cursor.row else None
        table.add_row(*rows[index][cursor.column :], style=style)
    return table


__all__ = ["GridCursor", "Motion", "grid_motion", "render_grid", "window_top"]
