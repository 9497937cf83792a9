"""Application entry for building grids, running searches and replays."""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from pathviz.db.grid_store import LoadedGrid, export_grid, import_grid
from pathviz.db.run_log import (
    RUN_LOG_NAME,
    append_run_summary,
    append_steps,
    create_run_folder,
    write_header,
)
from pathviz.engine.contracts import Position
from pathviz.engine.grid import Grid
from pathviz.engine.maze import DEFAULT_DENSITY, MazeKind, generate_maze
from pathviz.engine.search import Algorithm
from pathviz.engine.stats import SearchRun, timed_search, to_algorithm_run
from pathviz.render.player import play_steps
from pathviz.render.run_reader import read_run_summary, read_steps

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 25
DEFAULT_COLS = 50
DEFAULT_START = Position(row=12, col=5)
DEFAULT_END = Position(row=12, col=44)
DEFAULT_ALGORITHM = Algorithm.ASTAR
DEFAULT_SPEED = 50
DEFAULT_RUNS_DIR = Path("runs")
DEFAULT_GRIDS_DIR = Path("grids")
DEFAULT_LOG_LEVEL = "INFO"
GRID_FILE_NAME = "grid.json"


@dataclass(frozen=True)
class GridSetup:
    grid: Grid
    start: Position
    end: Position
    name: str


def build_grid(
    *,
    rows: int | None = None,
    cols: int | None = None,
    start: Position | None = None,
    end: Position | None = None,
    maze: MazeKind | None = None,
    density: float = DEFAULT_DENSITY,
    seed: int | None = None,
    load_path: Path | None = None,
) -> GridSetup:
    if load_path is not None:
        loaded: LoadedGrid = import_grid(load_path)
        setup = GridSetup(
            grid=loaded.grid,
            start=loaded.start,
            end=loaded.end,
            name=loaded.export.name,
        )
    else:
        rows = resolve_int(rows, "PATHVIZ_ROWS", DEFAULT_ROWS)
        cols = resolve_int(cols, "PATHVIZ_COLS", DEFAULT_COLS)
        start = start or _clamp(DEFAULT_START, rows, cols)
        end = end or _clamp(DEFAULT_END, rows, cols)
        setup = GridSetup(
            grid=Grid.create(rows, cols, start=start, end=end),
            start=start,
            end=end,
            name="Untitled Grid",
        )
    if maze is not None:
        generate_maze(setup.grid, maze, density=density, rng=random.Random(seed))
    return setup


def run_visualization(
    setup: GridSetup,
    *,
    runs_dir: Path | None = None,
    algorithm: Algorithm | None = None,
    speed: int | None = None,
    play: bool = True,
    console: Console | None = None,
) -> tuple[Path, SearchRun]:
    algorithm = resolve_algorithm(algorithm)
    speed = resolve_int(speed, "PATHVIZ_SPEED", DEFAULT_SPEED)
    runs_dir = resolve_path(runs_dir, "PATHVIZ_RUNS_DIR", DEFAULT_RUNS_DIR)

    run = timed_search(setup.grid, algorithm, setup.start, setup.end)
    run_dir = record_run(runs_dir, setup, run)
    logger.info(
        "%s: visited %d, path length %d, %.2f ms",
        algorithm.value,
        run.stats.nodes_visited,
        run.stats.path_length,
        run.stats.time_taken_ms,
    )
    if play:
        play_steps(
            setup.grid,
            run.steps,
            speed=speed,
            algorithm=algorithm,
            time_taken_ms=run.stats.time_taken_ms,
            console=console,
        )
    return run_dir, run


def record_run(runs_dir: Path, setup: GridSetup, run: SearchRun) -> Path:
    run_dir, log_path = create_run_folder(runs_dir)
    write_header(
        log_path,
        metadata={
            "run_id": run_dir.name,
            "algorithm": run.algorithm.value,
            "grid_name": setup.name,
            "rows": setup.grid.rows,
            "cols": setup.grid.cols,
            "steps": len(run.steps),
        },
    )
    append_steps(log_path, run.steps)
    append_run_summary(log_path, to_algorithm_run(run, grid_name=setup.name))
    setup.grid.clear_visualization()
    export_grid(
        run_dir / GRID_FILE_NAME,
        setup.grid,
        start=setup.start,
        end=setup.end,
        name=setup.name,
    )
    return run_dir


def replay_run(
    run_folder: Path,
    *,
    speed: int | None = None,
    console: Console | None = None,
) -> None:
    speed = resolve_int(speed, "PATHVIZ_SPEED", DEFAULT_SPEED)
    log_path = run_folder / RUN_LOG_NAME
    loaded = import_grid(run_folder / GRID_FILE_NAME)
    steps = list(read_steps(log_path))
    summary = read_run_summary(log_path)
    play_steps(
        loaded.grid,
        steps,
        speed=speed,
        algorithm=Algorithm(summary.algorithm) if summary else None,
        time_taken_ms=summary.time_taken_ms if summary else 0.0,
        console=console,
    )


def resolve_algorithm(value: Algorithm | str | None) -> Algorithm:
    raw = value or os.getenv("PATHVIZ_ALGORITHM") or DEFAULT_ALGORITHM
    return Algorithm(raw.lower() if isinstance(raw, str) else raw)


def resolve_int(value: int | None, env_var: str, default: int) -> int:
    if value is not None:
        return value
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be an integer, got {raw!r}.") from exc


def resolve_path(value: Path | None, env_var: str, default: Path) -> Path:
    if value is not None:
        return value
    raw = os.getenv(env_var)
    return Path(raw) if raw else default


def _clamp(position: Position, rows: int, cols: int) -> Position:
    return Position(
        row=max(0, min(rows - 1, position.row)),
        col=max(0, min(cols - 1, position.col)),
    )
