import random

from rich.console import Console

from pathviz.engine.contracts import CellKind, DrawingMode, Position
from pathviz.engine.grid import Grid
from pathviz.engine.maze import MazeKind
from pathviz.engine.search import Algorithm
from pathviz.render.editor import EditorSession, _render_status


def test_click_draws_walls_and_moves_endpoints() -> None:
    session = _session()

    assert session.click(Position(row=1, col=1))
    assert session.grid.at(1, 1).kind == CellKind.WALL

    session.mode = DrawingMode.START
    assert session.click(Position(row=2, col=0))
    assert session.start == Position(row=2, col=0)
    assert session.grid.at(0, 0).kind == CellKind.EMPTY

    session.mode = DrawingMode.END
    assert session.click(Position(row=0, col=4))
    assert session.end == Position(row=0, col=4)


def test_cycle_algorithm_wraps_around() -> None:
    session = _session()

    seen = [session.cycle_algorithm() for _ in range(4)]

    assert seen == [Algorithm.DIJKSTRA, Algorithm.BFS, Algorithm.DFS, Algorithm.ASTAR]
    assert session.message


def test_run_plays_to_completion() -> None:
    session = _session()

    assert session.start_run()
    assert session.running
    assert session.status == "running"
    assert not session.click(Position(row=1, col=1))

    while session.tick():
        pass

    assert not session.running
    assert session.status == "completed"
    assert session.playback.path_length == session.run.stats.path_length
    assert any(cell.path for cell in session.grid.cells())


def test_run_reports_no_path_when_sealed() -> None:
    session = _session()
    for row in range(4):
        session.grid.at(row, 2).kind = CellKind.WALL

    assert session.start_run()
    while session.tick():
        pass

    assert session.status == "no path"


def test_start_run_reports_configuration_errors() -> None:
    session = _session()
    session.grid.at(3, 4).kind = CellKind.EMPTY

    assert not session.start_run()
    assert "end" in session.message
    assert session.status == "ready"


def test_generate_and_clear_reset_the_run() -> None:
    session = _session()
    session.start_run()

    while session.tick():
        pass
    session.generate(MazeKind.RECURSIVE)

    assert session.run is None
    assert session.status == "ready"
    assert session.grid.count(CellKind.WALL) > 0
    assert not any(cell.visited or cell.path for cell in session.grid.cells())

    session.clear()
    assert session.grid.count(CellKind.WALL) == 0
    assert session.grid.at(0, 0).kind == CellKind.START


def test_render_status_summarizes_session() -> None:
    session = _session()
    session.message = "hello"

    console = Console(width=100, record=True)
    console.print(_render_status(session))
    output = console.export_text()

    assert "A* Search" in output
    assert "mode=wall" in output
    assert "status=ready" in output
    assert "hello" in output


def _session() -> EditorSession:
    start = Position(row=0, col=0)
    end = Position(row=3, col=4)
    grid = Grid.create(4, 5, start=start, end=end)
    return EditorSession(grid=grid, start=start, end=end, rng=random.Random(0))
