"""Run statistics derived from visualization steps."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable

from pathviz.engine.contracts import (
    AlgorithmRun,
    CellKind,
    PathfindingStats,
    Position,
    StepKind,
    VisualizationStep,
)
from pathviz.engine.grid import Grid
from pathviz.engine.search import Algorithm, run_search


@dataclass(frozen=True)
class SearchRun:
    algorithm: Algorithm
    start: Position
    end: Position
    steps: list[VisualizationStep]
    stats: PathfindingStats
    reached: bool

    @property
    def success(self) -> bool:
        return self.reached

    @property
    def path(self) -> list[Position]:
        return [step.position for step in self.steps if step.kind == StepKind.PATH]


def tally_steps(steps: Iterable[VisualizationStep]) -> tuple[int, int]:
    visited = 0
    path_length = 0
    for step in steps:
        if step.kind == StepKind.VISIT:
            visited += 1
        elif step.kind == StepKind.PATH:
            path_length += 1
    return visited, path_length


def build_stats(
    grid: Grid, steps: Iterable[VisualizationStep], *, time_taken_ms: float = 0.0
) -> PathfindingStats:
    visited, path_length = tally_steps(steps)
    return PathfindingStats(
        nodes_visited=visited,
        path_length=path_length,
        time_taken_ms=time_taken_ms,
        total_cells=grid.total_cells,
        wall_cells=grid.count(CellKind.WALL),
    )


def timed_search(
    grid: Grid, algorithm: Algorithm, start: Position, end: Position
) -> SearchRun:
    started = time.perf_counter()
    steps = run_search(grid, algorithm, start, end)
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    return SearchRun(
        algorithm=Algorithm(algorithm),
        start=start,
        end=end,
        steps=steps,
        stats=build_stats(grid, steps, time_taken_ms=elapsed_ms),
        reached=start == end or grid.cell(end).parent is not None,
    )


def to_algorithm_run(run: SearchRun, *, grid_name: str | None = None) -> AlgorithmRun:
    return AlgorithmRun(
        algorithm=run.algorithm.value,
        nodes_visited=run.stats.nodes_visited,
        path_length=run.stats.path_length,
        time_taken_ms=run.stats.time_taken_ms,
        success=run.success,
        path=run.path,
        grid_name=grid_name,
    )
