"""In-place maze generation over an occupancy grid."""

from __future__ import annotations

import logging
import random
from enum import Enum

from pathviz.engine.contracts import CellKind
from pathviz.engine.grid import DIRECTIONS, Cell, Grid

logger = logging.getLogger(__name__)

DEFAULT_DENSITY = 0.3


class MazeKind(str, Enum):
    RANDOM = "random"
    RECURSIVE = "recursive"
    SIMPLE = "simple"


def generate_maze(
    grid: Grid,
    kind: MazeKind,
    *,
    density: float = DEFAULT_DENSITY,
    rng: random.Random | None = None,
) -> None:
    kind = MazeKind(kind)
    if kind == MazeKind.RANDOM:
        random_fill(grid, density, rng=rng)
    elif kind == MazeKind.RECURSIVE:
        recursive_division(grid, rng=rng)
    else:
        simple_maze(grid, rng=rng)
    logger.debug(
        "%s maze on %dx%d grid: %d walls",
        kind.value,
        grid.rows,
        grid.cols,
        grid.count(CellKind.WALL),
    )


def random_fill(
    grid: Grid, density: float = DEFAULT_DENSITY, *, rng: random.Random | None = None
) -> None:
    """Turn each non-endpoint cell into a wall with probability ``density``."""
    if not 0.0 <= density <= 1.0:
        raise ValueError(f"density must be within [0, 1], got {density}.")
    rng = rng or random.Random()
    for cell in grid.cells():
        if cell.is_endpoint:
            continue
        cell.kind = CellKind.WALL if rng.random() < density else CellKind.EMPTY
        cell.visited = False
        cell.path = False


def recursive_division(grid: Grid, *, rng: random.Random | None = None) -> None:
    """Carve a recursive-division maze inside a one-cell wall border.

    Dividing walls sit on even rows/columns and passages on odd ones, so a
    later wall can never seal a passage left by an earlier one. Start and end
    cells are never overwritten; where they fall on a wall line they only
    open an extra gap.
    """
    rng = rng or random.Random()
    grid.clear_walls()
    _draw_border(grid)
    _divide(grid, 1, 1, grid.rows - 2, grid.cols - 2, rng)


def simple_maze(grid: Grid, *, rng: random.Random | None = None) -> None:
    """Pillars on even coordinates, each maybe extended by one cell."""
    rng = rng or random.Random()
    grid.clear_walls()
    for row in range(2, grid.rows - 2, 2):
        for col in range(2, grid.cols - 2, 2):
            _place_wall(grid.at(row, col))
            if rng.random() < 0.5:
                d_row, d_col = DIRECTIONS[rng.randrange(len(DIRECTIONS))]
                _place_wall(grid.at(row + d_row, col + d_col))


def choose_orientation(width: int, height: int, rng: random.Random) -> bool:
    """Return True for a horizontal dividing wall."""
    if width < height:
        return True
    if height < width:
        return False
    return rng.random() < 0.5


def _draw_border(grid: Grid) -> None:
    last_row = grid.rows - 1
    last_col = grid.cols - 1
    for col in range(grid.cols):
        _place_wall(grid.at(0, col))
        _place_wall(grid.at(last_row, col))
    for row in range(grid.rows):
        _place_wall(grid.at(row, 0))
        _place_wall(grid.at(row, last_col))


def _divide(
    grid: Grid, top: int, left: int, bottom: int, right: int, rng: random.Random
) -> None:
    width = right - left + 1
    height = bottom - top + 1
    if width < 2 or height < 2:
        return

    horizontal = choose_orientation(width, height, rng)
    if horizontal:
        lines = [row for row in range(top + 1, bottom) if row % 2 == 0]
        gaps = [col for col in range(left, right + 1) if col % 2 == 1]
    else:
        lines = [col for col in range(left + 1, right) if col % 2 == 0]
        gaps = [row for row in range(top, bottom + 1) if row % 2 == 1]
    if not lines or not gaps:
        return

    line = rng.choice(lines)
    gap = rng.choice(gaps)

    if horizontal:
        for col in range(left, right + 1):
            if col != gap:
                _place_wall(grid.at(line, col))
        _divide(grid, top, left, line - 1, right, rng)
        _divide(grid, line + 1, left, bottom, right, rng)
    else:
        for row in range(top, bottom + 1):
            if row != gap:
                _place_wall(grid.at(row, line))
        _divide(grid, top, left, bottom, line - 1, rng)
        _divide(grid, top, line + 1, bottom, right, rng)


def _place_wall(cell: Cell) -> None:
    if cell.is_endpoint:
        return
    cell.kind = CellKind.WALL
    cell.visited = False
    cell.path = False
