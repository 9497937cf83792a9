import math
import random

import pytest
from pydantic import ValidationError

from pathviz.engine.contracts import (
    CellKind,
    DrawingMode,
    GridExport,
    Position,
    StepKind,
    VisualizationStep,
)
from pathviz.engine.grid import (
    Grid,
    GridConfigError,
    apply_drawing,
    apply_step,
    validate_endpoints,
)
from pathviz.engine.maze import random_fill
from pathviz.engine.search import Algorithm, run_search


def test_neighbors_follow_up_down_left_right_order() -> None:
    grid = _open_grid(3, 3)
    center = grid.at(1, 1)

    positions = [cell.position.as_tuple() for cell in grid.neighbors(center)]

    assert positions == [(0, 1), (2, 1), (1, 0), (1, 2)]


def test_neighbors_skip_walls_and_bounds() -> None:
    grid = _open_grid(3, 3)
    grid.at(1, 0).kind = CellKind.WALL

    corner = [cell.position.as_tuple() for cell in grid.neighbors(grid.at(0, 0))]

    assert corner == [(0, 1)]


def test_reset_search_state_clears_bookkeeping() -> None:
    grid = _open_grid(2, 2)
    cell = grid.at(1, 1)
    cell.visited = True
    cell.path = True
    cell.distance = 3
    cell.g_score = 2
    cell.f_score = 4
    cell.heuristic = 2
    cell.parent = Position(row=0, col=1)

    grid.reset_search_state()

    assert not cell.visited
    assert not cell.path
    assert math.isinf(cell.distance)
    assert math.isinf(cell.g_score)
    assert math.isinf(cell.f_score)
    assert cell.heuristic == 0
    assert cell.parent is None


def test_create_rejects_empty_dimensions_and_outside_endpoints() -> None:
    with pytest.raises(GridConfigError):
        Grid(0, 4)
    with pytest.raises(GridConfigError):
        Grid.create(3, 3, start=Position(row=0, col=0), end=Position(row=3, col=0))


def test_validate_endpoints_rejects_bad_configurations() -> None:
    start = Position(row=0, col=0)
    end = Position(row=2, col=2)
    grid = Grid.create(3, 3, start=start, end=end)
    validate_endpoints(grid, start, end)

    grid.at(1, 1).kind = CellKind.START
    with pytest.raises(GridConfigError, match="exactly one start"):
        validate_endpoints(grid, start, end)

    grid.at(1, 1).kind = CellKind.EMPTY
    grid.at(2, 2).kind = CellKind.EMPTY
    with pytest.raises(GridConfigError, match="exactly one end"):
        validate_endpoints(grid, start, end)

    grid.at(2, 2).kind = CellKind.END
    with pytest.raises(GridConfigError, match="outside"):
        validate_endpoints(grid, start, Position(row=5, col=5))
    with pytest.raises(GridConfigError, match="not the grid's end"):
        validate_endpoints(grid, start, Position(row=1, col=1))


def test_validate_endpoints_accepts_shared_cell() -> None:
    point = Position(row=1, col=1)
    grid = Grid.create(3, 3, start=point, end=point)

    validate_endpoints(grid, point, point)
    assert grid.count(CellKind.START) == 1
    assert grid.count(CellKind.END) == 0


def test_drawing_toggles_walls_and_moves_endpoints() -> None:
    grid = _open_grid(3, 3)
    target = Position(row=1, col=1)

    assert apply_drawing(grid, DrawingMode.WALL, target)
    assert grid.cell(target).kind == CellKind.WALL
    assert apply_drawing(grid, DrawingMode.WALL, target)
    assert grid.cell(target).kind == CellKind.EMPTY

    assert not apply_drawing(grid, DrawingMode.WALL, Position(row=0, col=0))
    assert grid.at(0, 0).kind == CellKind.START

    assert apply_drawing(grid, DrawingMode.START, Position(row=0, col=2))
    assert grid.positions_of(CellKind.START) == [Position(row=0, col=2)]
    assert grid.at(0, 0).kind == CellKind.EMPTY

    grid.at(1, 2).kind = CellKind.WALL
    grid.at(1, 2).visited = True
    assert apply_drawing(grid, DrawingMode.ERASE, Position(row=1, col=2))
    assert grid.at(1, 2).kind == CellKind.EMPTY
    assert not grid.at(1, 2).visited

    assert not apply_drawing(grid, DrawingMode.ERASE, Position(row=9, col=9))


def test_export_writes_null_for_unset_scores() -> None:
    start = Position(row=0, col=0)
    end = Position(row=1, col=1)
    grid = Grid.create(2, 2, start=start, end=end)
    grid.at(0, 1).distance = 1
    grid.at(0, 1).parent = start

    payload = grid.to_export(start=start, end=end, name="tiny").model_dump(mode="json")

    assert payload["rows"] == 2
    assert payload["cells"][0][0]["distance"] is None
    assert payload["cells"][0][0]["g_score"] is None
    assert payload["cells"][0][1]["distance"] == 1
    assert payload["cells"][0][1]["parent"] == {"row": 0, "col": 0}
    assert payload["start"] == {"row": 0, "col": 0}


def test_import_treats_every_unset_representation_as_infinite() -> None:
    payload = _export_payload()
    payload["cells"][0][1]["distance"] = "inf"
    payload["cells"][1][0]["distance"] = float("inf")
    payload["cells"][1][1]["distance"] = 4

    grid = Grid.from_export(GridExport.model_validate(payload))

    assert math.isinf(grid.at(0, 0).distance)
    assert math.isinf(grid.at(0, 1).distance)
    assert math.isinf(grid.at(1, 0).distance)
    assert grid.at(1, 1).distance == 4
    assert grid.at(0, 0).kind == CellKind.START
    assert grid.at(1, 1).kind == CellKind.END


def test_import_rejects_non_rectangular_grid() -> None:
    payload = _export_payload()
    payload["cells"][1].pop()

    with pytest.raises(ValidationError):
        GridExport.model_validate(payload)


def test_import_rejects_missing_fields() -> None:
    payload = _export_payload()
    del payload["start"]

    with pytest.raises(ValidationError):
        GridExport.model_validate(payload)


def test_apply_step_sets_visual_flags() -> None:
    grid = _open_grid(2, 2)
    apply_step(grid, VisualizationStep(kind=StepKind.VISIT, position=Position(row=0, col=1)))
    apply_step(grid, VisualizationStep(kind=StepKind.PATH, position=Position(row=1, col=0)))
    apply_step(grid, VisualizationStep(kind=StepKind.COMPLETE, position=Position(row=1, col=1)))

    assert grid.at(0, 1).visited
    assert grid.at(1, 0).path
    assert not grid.at(1, 1).visited
    assert not grid.at(1, 1).path


def _open_grid(rows: int, cols: int) -> Grid:
    return Grid.create(
        rows,
        cols,
        start=Position(row=0, col=0),
        end=Position(row=rows - 1, col=cols - 1),
    )


def _export_payload() -> dict:
    grid = _open_grid(2, 2)
    return grid.to_export(
        start=Position(row=0, col=0), end=Position(row=1, col=1)
    ).model_dump(mode="json")


def test_copy_is_independent_of_the_original() -> None:
    start = Position(row=0, col=0)
    end = Position(row=4, col=4)
    original = Grid.create(5, 5, start=start, end=end)
    original.at(2, 2).kind = CellKind.WALL

    copied = original.copy()
    random_fill(copied, 1.0, rng=random.Random(0))
    run_search(copied, Algorithm.BFS, start, end)

    assert copied.count(CellKind.WALL) == 23
    assert original.count(CellKind.WALL) == 1
    assert not any(cell.visited or cell.path for cell in original.cells())
    assert all(cell.parent is None for cell in original.cells())
