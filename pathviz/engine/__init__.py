"""Search-and-trace engine and maze generation."""

from pathviz.engine.contracts import (
    AlgorithmRun,
    CellKind,
    CellRecord,
    DrawingMode,
    GridExport,
    PathfindingStats,
    Position,
    StepKind,
    VisualizationStep,
)
from pathviz.engine.grid import (
    Cell,
    Grid,
    GridConfigError,
    apply_drawing,
    apply_step,
    validate_endpoints,
)
from pathviz.engine.maze import (
    MazeKind,
    generate_maze,
    random_fill,
    recursive_division,
    simple_maze,
)
from pathviz.engine.search import (
    ALGORITHM_INFO,
    Algorithm,
    astar,
    breadth_first,
    depth_first,
    dijkstra,
    run_search,
)
from pathviz.engine.stats import SearchRun, build_stats, tally_steps, timed_search

__all__ = [
    "ALGORITHM_INFO",
    "Algorithm",
    "AlgorithmRun",
    "Cell",
    "CellKind",
    "CellRecord",
    "DrawingMode",
    "Grid",
    "GridConfigError",
    "GridExport",
    "MazeKind",
    "PathfindingStats",
    "Position",
    "SearchRun",
    "StepKind",
    "VisualizationStep",
    "apply_drawing",
    "apply_step",
    "astar",
    "breadth_first",
    "build_stats",
    "depth_first",
    "dijkstra",
    "generate_maze",
    "random_fill",
    "recursive_division",
    "run_search",
    "simple_maze",
    "tally_steps",
    "timed_search",
    "validate_endpoints",
]
