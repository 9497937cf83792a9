"""Playback driver that replays visualization steps onto a grid."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Sequence

from rich.console import Console
from rich.live import Live

from pathviz.engine.contracts import (
    CellKind,
    PathfindingStats,
    StepKind,
    VisualizationStep,
)
from pathviz.engine.grid import Grid, apply_step
from pathviz.engine.search import Algorithm
from pathviz.render.grid_view import render_frame

MIN_SPEED = 1
MAX_SPEED = 100


@dataclass
class PlaybackController:
    index: int = 0
    visited: int = 0
    path_length: int = 0
    finished: bool = False

    @property
    def status(self) -> str:
        return "completed" if self.finished else "running"


def step_delay(speed: int) -> float:
    """Seconds between steps; speed 100 is fastest."""
    speed = max(MIN_SPEED, min(MAX_SPEED, speed))
    return (MAX_SPEED + 1 - speed) / 1000.0


def advance(
    controller: PlaybackController, grid: Grid, steps: Sequence[VisualizationStep]
) -> VisualizationStep | None:
    if controller.finished or controller.index >= len(steps):
        controller.finished = True
        return None
    step = steps[controller.index]
    apply_step(grid, step)
    controller.index += 1
    if step.kind == StepKind.VISIT:
        controller.visited += 1
    elif step.kind == StepKind.PATH:
        controller.path_length += 1
    else:
        controller.finished = True
    return step


def play_steps(
    grid: Grid,
    steps: Sequence[VisualizationStep],
    *,
    speed: int = 50,
    algorithm: Algorithm | None = None,
    time_taken_ms: float = 0.0,
    console: Console | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PlaybackController:
    """Animate ``steps`` on ``grid``; Ctrl-C stops consuming steps."""
    grid.clear_visualization()
    console = console or Console()
    controller = PlaybackController()
    delay = step_delay(speed)
    walls = grid.count(CellKind.WALL)

    with Live(console=console, auto_refresh=False) as live:
        try:
            while not controller.finished:
                advance(controller, grid, steps)
                stats = _stats(grid, controller, time_taken_ms, walls)
                live.update(
                    render_frame(
                        grid, stats, algorithm=algorithm, status=controller.status
                    ),
                    refresh=True,
                )
                if not controller.finished:
                    sleep(delay)
        except KeyboardInterrupt:
            live.update(
                render_frame(
                    grid,
                    _stats(grid, controller, time_taken_ms, walls),
                    algorithm=algorithm,
                    status="stopped",
                ),
                refresh=True,
            )
    return controller


def _stats(
    grid: Grid, controller: PlaybackController, time_taken_ms: float, walls: int
) -> PathfindingStats:
    return PathfindingStats(
        nodes_visited=controller.visited,
        path_length=controller.path_length,
        time_taken_ms=time_taken_ms,
        total_cells=grid.total_cells,
        wall_cells=walls,
    )
