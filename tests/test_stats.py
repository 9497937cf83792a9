from pathviz.engine.contracts import CellKind, Position, StepKind, VisualizationStep
from pathviz.engine.grid import Grid
from pathviz.engine.search import Algorithm
from pathviz.engine.stats import build_stats, tally_steps, timed_search, to_algorithm_run


def test_tally_steps_counts_visits_and_path() -> None:
    steps = [
        _step(StepKind.VISIT, 0, 1),
        _step(StepKind.VISIT, 1, 0),
        _step(StepKind.PATH, 0, 1),
        _step(StepKind.COMPLETE, 1, 1),
    ]

    assert tally_steps(steps) == (2, 1)
    assert tally_steps([]) == (0, 0)


def test_build_stats_reports_grid_totals() -> None:
    grid = _grid(4, 5, (0, 0), (3, 4))
    grid.at(1, 1).kind = CellKind.WALL
    grid.at(2, 2).kind = CellKind.WALL

    stats = build_stats(grid, [_step(StepKind.VISIT, 0, 1)], time_taken_ms=1.5)

    assert stats.nodes_visited == 1
    assert stats.path_length == 0
    assert stats.total_cells == 20
    assert stats.wall_cells == 2
    assert stats.time_taken_ms == 1.5


def test_timed_search_reports_success_and_path() -> None:
    grid = _grid(5, 5, (0, 0), (4, 4))

    run = timed_search(grid, Algorithm.BFS, Position(row=0, col=0), Position(row=4, col=4))

    assert run.success
    assert run.stats.nodes_visited == 23
    assert run.stats.path_length == 7
    assert len(run.path) == 7
    assert run.stats.time_taken_ms >= 0


def test_timed_search_counts_adjacent_endpoints_as_success() -> None:
    grid = _grid(1, 2, (0, 0), (0, 1))

    run = timed_search(grid, "astar", Position(row=0, col=0), Position(row=0, col=1))

    assert run.algorithm == Algorithm.ASTAR
    assert run.success
    assert run.path == []


def test_timed_search_reports_failure_when_sealed() -> None:
    grid = _grid(3, 3, (0, 0), (2, 2))
    grid.at(1, 2).kind = CellKind.WALL
    grid.at(2, 1).kind = CellKind.WALL

    run = timed_search(grid, Algorithm.DFS, Position(row=0, col=0), Position(row=2, col=2))

    assert not run.success
    assert run.stats.path_length == 0
    assert run.stats.wall_cells == 2


def test_to_algorithm_run_copies_summary() -> None:
    grid = _grid(2, 3, (0, 0), (1, 2))
    run = timed_search(grid, Algorithm.DIJKSTRA, Position(row=0, col=0), Position(row=1, col=2))

    summary = to_algorithm_run(run, grid_name="tiny")

    assert summary.algorithm == "dijkstra"
    assert summary.grid_name == "tiny"
    assert summary.success
    assert summary.path_length == len(summary.path) == 2
    assert summary.nodes_visited == run.stats.nodes_visited


def _grid(rows: int, cols: int, start: tuple[int, int], end: tuple[int, int]) -> Grid:
    return Grid.create(
        rows,
        cols,
        start=Position(row=start[0], col=start[1]),
        end=Position(row=end[0], col=end[1]),
    )


def _step(kind: StepKind, row: int, col: int) -> VisualizationStep:
    return VisualizationStep(kind=kind, position=Position(row=row, col=col))
