"""Occupancy grid with per-cell search bookkeeping."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Iterator

from pathviz.engine.contracts import (
    CellKind,
    CellRecord,
    DrawingMode,
    GridExport,
    Position,
    StepKind,
    VisualizationStep,
)

INFINITY = math.inf

# up, down, left, right; traversal order and tie-breaks depend on it
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

ENDPOINT_KINDS = frozenset({CellKind.START, CellKind.END})


class GridConfigError(ValueError):
    """Raised when a grid cannot be searched as configured."""


@dataclass
class Cell:
    row: int
    col: int
    kind: CellKind = CellKind.EMPTY
    visited: bool = False
    path: bool = False
    distance: float = INFINITY
    g_score: float = INFINITY
    f_score: float = INFINITY
    heuristic: float = 0
    parent: Position | None = None

    @property
    def position(self) -> Position:
        return Position(row=self.row, col=self.col)

    @property
    def is_endpoint(self) -> bool:
        return self.kind in ENDPOINT_KINDS

    def reset_search_state(self) -> None:
        self.visited = False
        self.path = False
        self.distance = INFINITY
        self.g_score = INFINITY
        self.f_score = INFINITY
        self.heuristic = 0
        self.parent = None


class Grid:
    """Fixed-size rectangular array of cells, mutated in place.

    A grid is not safe to share between concurrent searches or maze
    generations; callers serialize access or work on ``copy()``.
    """

    def __init__(self, rows: int, cols: int) -> None:
        if rows < 1 or cols < 1:
            raise GridConfigError(f"Grid must be at least 1x1, got {rows}x{cols}.")
        self._rows = rows
        self._cols = cols
        self._cells = [[Cell(row, col) for col in range(cols)] for row in range(rows)]

    @classmethod
    def create(
        cls, rows: int, cols: int, *, start: Position, end: Position
    ) -> "Grid":
        grid = cls(rows, cols)
        for label, point in (("start", start), ("end", end)):
            if not grid.in_bounds(point):
                raise GridConfigError(
                    f"{label} {point.row},{point.col} is outside a {rows}x{cols} grid."
                )
        grid.cell(start).kind = CellKind.START
        if end != start:
            grid.cell(end).kind = CellKind.END
        return grid

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def total_cells(self) -> int:
        return self._rows * self._cols

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.row < self._rows and 0 <= position.col < self._cols

    def cell(self, position: Position) -> Cell:
        return self._cells[position.row][position.col]

    def at(self, row: int, col: int) -> Cell:
        return self._cells[row][col]

    def cells(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def positions_of(self, kind: CellKind) -> list[Position]:
        return [cell.position for cell in self.cells() if cell.kind == kind]

    def count(self, kind: CellKind) -> int:
        return sum(1 for cell in self.cells() if cell.kind == kind)

    def neighbors(self, cell: Cell) -> list[Cell]:
        result: list[Cell] = []
        for d_row, d_col in DIRECTIONS:
            row = cell.row + d_row
            col = cell.col + d_col
            if not (0 <= row < self._rows and 0 <= col < self._cols):
                continue
            neighbor = self._cells[row][col]
            if neighbor.kind == CellKind.WALL:
                continue
            result.append(neighbor)
        return result

    def reset_search_state(self) -> None:
        for cell in self.cells():
            cell.reset_search_state()

    def clear_visualization(self) -> None:
        for cell in self.cells():
            cell.visited = False
            cell.path = False

    def clear_walls(self) -> None:
        for cell in self.cells():
            if cell.is_endpoint:
                continue
            cell.kind = CellKind.EMPTY
            cell.visited = False
            cell.path = False

    def copy(self) -> "Grid":
        return copy.deepcopy(self)

    def to_export(
        self,
        *,
        start: Position,
        end: Position,
        name: str = "Exported Grid",
        description: str = "",
    ) -> GridExport:
        cells = [
            [
                CellRecord(
                    row=cell.row,
                    col=cell.col,
                    kind=cell.kind,
                    visited=cell.visited,
                    path=cell.path,
                    distance=cell.distance,
                    g_score=cell.g_score,
                    f_score=cell.f_score,
                    heuristic=cell.heuristic,
                    parent=cell.parent,
                )
                for cell in row
            ]
            for row in self._cells
        ]
        return GridExport(
            name=name,
            description=description,
            rows=self._rows,
            cols=self._cols,
            cells=cells,
            start=start,
            end=end,
        )

    @classmethod
    def from_export(cls, export: GridExport) -> "Grid":
        grid = cls(export.rows, export.cols)
        for row in export.cells:
            for record in row:
                cell = grid.at(record.row, record.col)
                cell.kind = record.kind
                cell.visited = record.visited
                cell.path = record.path
                cell.distance = _score(record.distance)
                cell.g_score = _score(record.g_score)
                cell.f_score = _score(record.f_score)
                cell.heuristic = record.heuristic
                cell.parent = record.parent
        return grid


def validate_endpoints(grid: Grid, start: Position, end: Position) -> None:
    for label, point in (("start", start), ("end", end)):
        if not grid.in_bounds(point):
            raise GridConfigError(
                f"{label} {point.row},{point.col} is outside a "
                f"{grid.rows}x{grid.cols} grid."
            )

    starts = grid.positions_of(CellKind.START)
    ends = grid.positions_of(CellKind.END)

    if start == end:
        if grid.cell(start).kind not in ENDPOINT_KINDS or len(starts) + len(ends) != 1:
            raise GridConfigError(
                "start and end share a cell, which must be the only endpoint."
            )
        return

    if len(starts) != 1:
        raise GridConfigError(f"Grid must have exactly one start cell, found {len(starts)}.")
    if len(ends) != 1:
        raise GridConfigError(f"Grid must have exactly one end cell, found {len(ends)}.")
    if starts[0] != start:
        raise GridConfigError(
            f"start {start.row},{start.col} is not the grid's start cell."
        )
    if ends[0] != end:
        raise GridConfigError(f"end {end.row},{end.col} is not the grid's end cell.")


def apply_drawing(grid: Grid, mode: DrawingMode, position: Position) -> bool:
    """Apply one editor click; returns True when the grid changed."""
    if not grid.in_bounds(position):
        return False
    cell = grid.cell(position)

    if mode in {DrawingMode.WALL, DrawingMode.ERASE}:
        if cell.is_endpoint:
            return False
        if mode == DrawingMode.WALL:
            cell.kind = CellKind.EMPTY if cell.kind == CellKind.WALL else CellKind.WALL
        else:
            cell.kind = CellKind.EMPTY
    else:
        kind = CellKind.START if mode == DrawingMode.START else CellKind.END
        for other in grid.cells():
            if other.kind == kind:
                other.kind = CellKind.EMPTY
        cell.kind = kind

    cell.visited = False
    cell.path = False
    return True


def apply_step(grid: Grid, step: VisualizationStep) -> None:
    if step.kind == StepKind.COMPLETE:
        return
    cell = grid.cell(step.position)
    if step.kind == StepKind.VISIT:
        cell.visited = True
    elif step.kind == StepKind.PATH:
        cell.path = True


def _score(value: float | None) -> float:
    return INFINITY if value is None else value
