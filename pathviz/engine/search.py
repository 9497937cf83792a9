"""Grid search algorithms producing replayable visualization steps."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum

from pathviz.engine.contracts import (
    CellKind,
    Position,
    StepKind,
    VisualizationStep,
)
from pathviz.engine.grid import INFINITY, Cell, Grid, validate_endpoints

logger = logging.getLogger(__name__)


class Algorithm(str, Enum):
    ASTAR = "astar"
    DIJKSTRA = "dijkstra"
    BFS = "bfs"
    DFS = "dfs"


@dataclass(frozen=True)
class AlgorithmInfo:
    name: str
    description: str
    shortest_path: bool


ALGORITHM_INFO: dict[Algorithm, AlgorithmInfo] = {
    Algorithm.ASTAR: AlgorithmInfo(
        name="A* Search",
        description="Heuristic best-first search on g + Manhattan distance.",
        shortest_path=True,
    ),
    Algorithm.DIJKSTRA: AlgorithmInfo(
        name="Dijkstra's Algorithm",
        description="Expands the closest unvisited cell first.",
        shortest_path=True,
    ),
    Algorithm.BFS: AlgorithmInfo(
        name="Breadth-First Search",
        description="Explores level by level from the start.",
        shortest_path=True,
    ),
    Algorithm.DFS: AlgorithmInfo(
        name="Depth-First Search",
        description="Follows one branch as deep as possible before backtracking.",
        shortest_path=False,
    ),
}


def run_search(
    grid: Grid, algorithm: Algorithm, start: Position, end: Position
) -> list[VisualizationStep]:
    algorithm = Algorithm(algorithm)
    if algorithm == Algorithm.ASTAR:
        steps = astar(grid, start, end)
    elif algorithm == Algorithm.DIJKSTRA:
        steps = dijkstra(grid, start, end)
    elif algorithm == Algorithm.BFS:
        steps = breadth_first(grid, start, end)
    else:
        steps = depth_first(grid, start, end)
    logger.debug(
        "%s produced %d steps from %s to %s",
        algorithm.value,
        len(steps),
        start.as_tuple(),
        end.as_tuple(),
    )
    return steps


def astar(grid: Grid, start: Position, end: Position) -> list[VisualizationStep]:
    steps = _prepare(grid, start, end)
    if steps is not None:
        return steps
    steps = []

    start_cell = grid.cell(start)
    end_cell = grid.cell(end)
    start_cell.g_score = 0
    start_cell.heuristic = start.manhattan(end)
    start_cell.f_score = start_cell.heuristic

    open_list: list[Cell] = [start_cell]
    open_members: set[tuple[int, int]] = {(start.row, start.col)}
    closed: set[tuple[int, int]] = set()

    while open_list:
        current_index = 0
        for index in range(1, len(open_list)):
            if open_list[index].f_score < open_list[current_index].f_score:
                current_index = index
        current = open_list.pop(current_index)
        key = (current.row, current.col)
        open_members.discard(key)
        closed.add(key)

        _close(current, steps)

        if current is end_cell:
            return _finish(grid, end, steps, reached=True)

        for neighbor in grid.neighbors(current):
            neighbor_key = (neighbor.row, neighbor.col)
            if neighbor_key in closed:
                continue
            tentative = current.g_score + 1
            if neighbor_key not in open_members:
                open_list.append(neighbor)
                open_members.add(neighbor_key)
            elif tentative >= neighbor.g_score:
                continue
            neighbor.parent = current.position
            neighbor.g_score = tentative
            neighbor.heuristic = neighbor.position.manhattan(end)
            neighbor.f_score = neighbor.g_score + neighbor.heuristic

    return _finish(grid, end, steps, reached=False)


def dijkstra(grid: Grid, start: Position, end: Position) -> list[VisualizationStep]:
    steps = _prepare(grid, start, end)
    if steps is not None:
        return steps
    steps = []

    end_cell = grid.cell(end)
    unvisited = [cell for cell in grid.cells() if cell.kind != CellKind.WALL]
    grid.cell(start).distance = 0

    while unvisited:
        # list.sort is stable, so equal distances keep their previous order
        unvisited.sort(key=lambda cell: cell.distance)
        current = unvisited.pop(0)
        if current.distance == INFINITY:
            break

        current.visited = True
        if not current.is_endpoint:
            steps.append(_step(StepKind.VISIT, current.position))

        if current is end_cell:
            return _finish(grid, end, steps, reached=True)

        for neighbor in grid.neighbors(current):
            if neighbor.visited:
                continue
            tentative = current.distance + 1
            if tentative < neighbor.distance:
                neighbor.distance = tentative
                neighbor.parent = current.position

    return _finish(grid, end, steps, reached=False)


def breadth_first(
    grid: Grid, start: Position, end: Position
) -> list[VisualizationStep]:
    steps = _prepare(grid, start, end)
    if steps is not None:
        return steps
    steps = []

    start_cell = grid.cell(start)
    end_cell = grid.cell(end)
    start_cell.visited = True
    queue: deque[Cell] = deque([start_cell])

    while queue:
        current = queue.popleft()
        _emit_visit(current, steps)
        if current is end_cell:
            return _finish(grid, end, steps, reached=True)
        for neighbor in grid.neighbors(current):
            if neighbor.visited:
                continue
            neighbor.visited = True
            neighbor.parent = current.position
            queue.append(neighbor)

    return _finish(grid, end, steps, reached=False)


def depth_first(grid: Grid, start: Position, end: Position) -> list[VisualizationStep]:
    steps = _prepare(grid, start, end)
    if steps is not None:
        return steps
    steps = []

    start_cell = grid.cell(start)
    end_cell = grid.cell(end)
    start_cell.visited = True
    stack: list[Cell] = [start_cell]

    while stack:
        current = stack.pop()
        _emit_visit(current, steps)
        if current is end_cell:
            return _finish(grid, end, steps, reached=True)
        for neighbor in grid.neighbors(current):
            if neighbor.visited:
                continue
            neighbor.visited = True
            neighbor.parent = current.position
            stack.append(neighbor)

    return _finish(grid, end, steps, reached=False)


def reconstruct_path(grid: Grid, end: Position) -> list[Position]:
    """Walk parents back from ``end``; the start itself is not included."""
    path: list[Position] = []
    current: Cell | None = grid.cell(end)
    while current is not None and current.parent is not None:
        path.append(current.position)
        current = grid.cell(current.parent)
    path.reverse()
    return path


def _prepare(
    grid: Grid, start: Position, end: Position
) -> list[VisualizationStep] | None:
    validate_endpoints(grid, start, end)
    grid.reset_search_state()
    if start == end:
        return [_step(StepKind.COMPLETE, end)]
    return None


def _close(cell: Cell, steps: list[VisualizationStep]) -> None:
    if cell.is_endpoint:
        return
    cell.visited = True
    steps.append(_step(StepKind.VISIT, cell.position))


def _emit_visit(cell: Cell, steps: list[VisualizationStep]) -> None:
    if not cell.is_endpoint:
        steps.append(_step(StepKind.VISIT, cell.position))


def _finish(
    grid: Grid, end: Position, steps: list[VisualizationStep], *, reached: bool
) -> list[VisualizationStep]:
    if reached:
        for position in reconstruct_path(grid, end):
            cell = grid.cell(position)
            if cell.is_endpoint:
                continue
            cell.path = True
            steps.append(_step(StepKind.PATH, position))
    steps.append(_step(StepKind.COMPLETE, end))
    return steps


def _step(kind: StepKind, position: Position) -> VisualizationStep:
    return VisualizationStep(kind=kind, position=position)
