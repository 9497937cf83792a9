"""Shared Textual widgets for grid rendering."""

from __future__ import annotations

from typing import Callable

from rich.console import Group, RenderableType
from textual.events import Click
from textual.message import Message
from textual.widget import Widget

from pathviz.engine.contracts import Position
from pathviz.engine.grid import Grid
from pathviz.render.grid_view import render_grid_lines


class CellClicked(Message):
    """Message emitted when a click resolves to a grid cell."""

    def __init__(self, *, position: Position) -> None:
        super().__init__()
        self.position = position


class GridWidget(Widget):
    """Render a grid, one character per cell, and emit cell clicks."""

    def __init__(
        self, get_grid: Callable[[], Grid], *, id: str | None = None
    ) -> None:
        super().__init__(id=id)
        self._get_grid = get_grid

    def render(self) -> RenderableType:
        return Group(*render_grid_lines(self._get_grid()))

    def on_click(self, event: Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        col, row = offset
        position = Position(row=row, col=col)
        if not self._get_grid().in_bounds(position):
            return
        self.post_message(CellClicked(position=position))
