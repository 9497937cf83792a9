"""Rich rendering for grids and run statistics."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pathviz.engine.contracts import CellKind, PathfindingStats
from pathviz.engine.grid import Cell, Grid
from pathviz.engine.search import ALGORITHM_INFO, Algorithm

CELL_GLYPHS = {
    CellKind.EMPTY: "·",
    CellKind.WALL: "█",
    CellKind.START: "S",
    CellKind.END: "E",
}

EMPTY_STYLE = "grey35"
WALL_STYLE = "grey85"
START_STYLE = "bold green3"
END_STYLE = "bold red3"
VISITED_STYLE = "sky_blue2"
PATH_STYLE = "bold dark_orange"

VISITED_GLYPH = "•"
PATH_GLYPH = "*"


def cell_glyph(cell: Cell) -> tuple[str, str]:
    if cell.kind == CellKind.START:
        return CELL_GLYPHS[CellKind.START], START_STYLE
    if cell.kind == CellKind.END:
        return CELL_GLYPHS[CellKind.END], END_STYLE
    if cell.kind == CellKind.WALL:
        return CELL_GLYPHS[CellKind.WALL], WALL_STYLE
    if cell.path:
        return PATH_GLYPH, PATH_STYLE
    if cell.visited:
        return VISITED_GLYPH, VISITED_STYLE
    return CELL_GLYPHS[CellKind.EMPTY], EMPTY_STYLE


def render_grid_lines(grid: Grid) -> list[Text]:
    lines: list[Text] = []
    for row in range(grid.rows):
        line = Text()
        for col in range(grid.cols):
            glyph, style = cell_glyph(grid.at(row, col))
            line.append(glyph, style=style)
        lines.append(line)
    return lines


def render_stats(
    stats: PathfindingStats,
    *,
    algorithm: Algorithm | None = None,
    status: str = "ready",
) -> RenderableType:
    table = Table(show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    if algorithm is not None:
        table.add_row("Algorithm", ALGORITHM_INFO[Algorithm(algorithm)].name)
    table.add_row("Status", status)
    table.add_row("Visited", str(stats.nodes_visited))
    table.add_row("Path length", str(stats.path_length))
    table.add_row("Time", f"{stats.time_taken_ms:.2f} ms")
    table.add_row("Walls", f"{stats.wall_cells}/{stats.total_cells}")
    return Panel(table, title="Statistics")


def render_frame(
    grid: Grid,
    stats: PathfindingStats,
    *,
    algorithm: Algorithm | None = None,
    status: str = "ready",
) -> RenderableType:
    board = Panel(Group(*render_grid_lines(grid)), title="Grid")
    return Group(board, render_stats(stats, algorithm=algorithm, status=status))
