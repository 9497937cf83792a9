"""Module entry point for `python -m pathviz`."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from rich.logging import RichHandler

from pathviz.app import (
    DEFAULT_GRIDS_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RUNS_DIR,
    DEFAULT_SPEED,
    build_grid,
    replay_run,
    resolve_algorithm,
    resolve_int,
    resolve_path,
    run_visualization,
)
from pathviz.db.grid_store import GridNameError, GridStore
from pathviz.engine.contracts import Position
from pathviz.engine.grid import GridConfigError
from pathviz.engine.maze import DEFAULT_DENSITY, MazeKind
from pathviz.engine.search import Algorithm
from pathviz.render.editor import run_editor
from pathviz.render.run_reader import latest_run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Visualize grid pathfinding.")
    parser.add_argument(
        "--algorithm",
        choices=[algorithm.value for algorithm in Algorithm],
        default=None,
        help="Search algorithm (defaults to $PATHVIZ_ALGORITHM or astar).",
    )
    parser.add_argument("--rows", type=int, default=None, help="Grid rows.")
    parser.add_argument("--cols", type=int, default=None, help="Grid columns.")
    parser.add_argument(
        "--start", type=parse_position, default=None, help="Start cell as ROW,COL."
    )
    parser.add_argument(
        "--end", type=parse_position, default=None, help="End cell as ROW,COL."
    )
    parser.add_argument(
        "--maze",
        choices=[kind.value for kind in MazeKind],
        default=None,
        help="Generate a maze before searching.",
    )
    parser.add_argument(
        "--density",
        type=float,
        default=DEFAULT_DENSITY,
        help="Wall probability for the random maze, within [0, 1].",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for maze generation."
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=None,
        help="Playback speed 1-100 (defaults to $PATHVIZ_SPEED or 50).",
    )
    parser.add_argument(
        "--load", type=Path, default=None, help="Load a grid export JSON file."
    )
    parser.add_argument(
        "--save",
        default=None,
        metavar="NAME",
        help="Save the grid under NAME in the grids directory before searching.",
    )
    parser.add_argument(
        "--grids-dir",
        type=Path,
        default=None,
        help="Directory for saved grids.",
    )
    parser.add_argument(
        "--runs-dir",
        type=Path,
        default=None,
        help="Base directory for recorded runs.",
    )
    parser.add_argument(
        "--no-play",
        action="store_true",
        help="Record the run without animating it.",
    )
    parser.add_argument(
        "--replay",
        nargs="?",
        const="latest",
        default=None,
        help="Replay a recorded run folder (defaults to the latest run).",
    )
    parser.add_argument(
        "--edit",
        action="store_true",
        help="Open the interactive grid editor.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to $PATHVIZ_LOG_LEVEL or INFO).",
    )
    return parser


def parse_position(value: str) -> Position:
    try:
        row_text, col_text = value.split(",")
        return Position(row=int(row_text), col=int(col_text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"expected ROW,COL but got {value!r}"
        ) from exc


def configure_logging(level: str | None, *, editor: bool = False) -> None:
    level_name = (level or os.getenv("PATHVIZ_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    if editor:
        from textual.logging import TextualHandler

        handler: logging.Handler = TextualHandler()
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, editor=args.edit)

    runs_dir = resolve_path(args.runs_dir, "PATHVIZ_RUNS_DIR", DEFAULT_RUNS_DIR)
    grids_dir = resolve_path(args.grids_dir, "PATHVIZ_GRIDS_DIR", DEFAULT_GRIDS_DIR)

    if args.replay is not None:
        run_folder = (
            latest_run(runs_dir) if args.replay == "latest" else Path(args.replay)
        )
        if run_folder is None:
            raise SystemExit("No run folder found. Run a search first.")
        try:
            replay_run(run_folder, speed=args.speed)
        except (ValueError, FileNotFoundError) as exc:
            raise SystemExit(str(exc)) from exc
        return

    try:
        setup = build_grid(
            rows=args.rows,
            cols=args.cols,
            start=args.start,
            end=args.end,
            maze=MazeKind(args.maze) if args.maze else None,
            density=args.density,
            seed=args.seed,
            load_path=args.load,
        )
        algorithm = resolve_algorithm(args.algorithm)
        speed = resolve_int(args.speed, "PATHVIZ_SPEED", DEFAULT_SPEED)
    except (GridConfigError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.save:
        try:
            GridStore(grids_dir).save(
                args.save, setup.grid, start=setup.start, end=setup.end
            )
        except GridNameError as exc:
            raise SystemExit(str(exc)) from exc

    if args.edit:
        run_editor(
            setup.grid,
            start=setup.start,
            end=setup.end,
            algorithm=algorithm,
            speed=speed,
            grids_dir=grids_dir,
            grid_name=args.save or setup.name,
            seed=args.seed,
        )
        return

    try:
        run_dir, run = run_visualization(
            setup,
            runs_dir=runs_dir,
            algorithm=algorithm,
            speed=speed,
            play=not args.no_play,
        )
    except GridConfigError as exc:
        raise SystemExit(str(exc)) from exc

    outcome = "path found" if run.success else "no path"
    print(f"{outcome}; run saved to {run_dir}")


if __name__ == "__main__":
    main()
