"""Interactive grid editor: draw walls, move endpoints, run searches."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import Static

from pathviz.db.grid_store import GridNameError, GridStore
from pathviz.engine.contracts import CellKind, DrawingMode, Position
from pathviz.engine.grid import Grid, GridConfigError, apply_drawing
from pathviz.engine.maze import MazeKind, generate_maze
from pathviz.engine.search import ALGORITHM_INFO, Algorithm
from pathviz.engine.stats import SearchRun, timed_search
from pathviz.render.player import PlaybackController, advance, step_delay
from pathviz.render.textual_widgets import CellClicked, GridWidget

logger = logging.getLogger(__name__)

ALGORITHM_ORDER = [Algorithm.ASTAR, Algorithm.DIJKSTRA, Algorithm.BFS, Algorithm.DFS]


@dataclass
class EditorSession:
    grid: Grid
    start: Position
    end: Position
    algorithm: Algorithm = Algorithm.ASTAR
    mode: DrawingMode = DrawingMode.WALL
    speed: int = 50
    density: float = 0.3
    rng: random.Random = field(default_factory=random.Random)
    run: SearchRun | None = None
    playback: PlaybackController | None = None
    message: str = ""

    @property
    def running(self) -> bool:
        return self.playback is not None and not self.playback.finished

    @property
    def status(self) -> str:
        if self.playback is None:
            return "ready"
        if self.playback.finished and self.run is not None and not self.run.success:
            return "no path"
        return self.playback.status

    def click(self, position: Position) -> bool:
        if self.running:
            return False
        changed = apply_drawing(self.grid, self.mode, position)
        if changed and self.mode == DrawingMode.START:
            self.start = position
        elif changed and self.mode == DrawingMode.END:
            self.end = position
        return changed

    def cycle_algorithm(self) -> Algorithm:
        index = ALGORITHM_ORDER.index(self.algorithm)
        self.algorithm = ALGORITHM_ORDER[(index + 1) % len(ALGORITHM_ORDER)]
        self.message = ALGORITHM_INFO[self.algorithm].description
        return self.algorithm

    def generate(self, kind: MazeKind) -> None:
        if self.running:
            return
        generate_maze(self.grid, kind, density=self.density, rng=self.rng)
        self.reset()
        self.message = f"Generated {MazeKind(kind).value} maze."

    def clear(self) -> None:
        if self.running:
            return
        self.grid.clear_walls()
        self.reset()
        self.message = "Grid cleared."

    def reset(self) -> None:
        self.grid.clear_visualization()
        self.run = None
        self.playback = None

    def start_run(self) -> bool:
        if self.running:
            return False
        try:
            self.run = timed_search(self.grid, self.algorithm, self.start, self.end)
        except GridConfigError as exc:
            self.message = str(exc)
            return False
        self.grid.clear_visualization()
        self.playback = PlaybackController()
        self.message = ALGORITHM_INFO[self.algorithm].name
        return True

    def tick(self) -> bool:
        """Apply one step; returns True while playback continues."""
        if self.run is None or self.playback is None:
            return False
        advance(self.playback, self.grid, self.run.steps)
        return not self.playback.finished


class EditorScreen(Screen):
    CSS = """
    Screen {
        layout: vertical;
    }
    #grid {
        height: 1fr;
    }
    #status {
        height: auto;
    }
    """

    BINDINGS = [
        ("a", "cycle_algorithm", "Algorithm"),
        ("w", "mode('wall')", "Wall"),
        ("e", "mode('erase')", "Erase"),
        ("s", "mode('start')", "Start"),
        ("g", "mode('end')", "End"),
        ("m", "maze('recursive')", "Maze"),
        ("n", "maze('random')", "Noise"),
        ("p", "maze('simple')", "Pillars"),
        ("r", "run", "Run"),
        ("c", "clear", "Clear"),
        ("x", "reset", "Reset"),
        ("ctrl+s", "save", "Save"),
        ("q", "app.quit", "Quit"),
    ]

    def __init__(
        self,
        session: EditorSession,
        *,
        store: GridStore | None = None,
        grid_name: str = "Untitled Grid",
    ) -> None:
        super().__init__()
        self._session = session
        self._store = store
        self._grid_name = grid_name
        self._timer: Timer | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield GridWidget(lambda: self._session.grid, id="grid")
            yield Static(id="status")

    def on_mount(self) -> None:
        self._refresh()

    def on_cell_clicked(self, message: CellClicked) -> None:
        if self._session.click(message.position):
            self._refresh()

    def action_cycle_algorithm(self) -> None:
        self._session.cycle_algorithm()
        self._refresh()

    def action_mode(self, mode: str) -> None:
        self._session.mode = DrawingMode(mode)
        self._refresh()

    def action_maze(self, kind: str) -> None:
        self._session.generate(MazeKind(kind))
        self._refresh()

    def action_clear(self) -> None:
        self._stop_timer()
        self._session.clear()
        self._refresh()

    def action_reset(self) -> None:
        self._stop_timer()
        self._session.reset()
        self._refresh()

    def action_run(self) -> None:
        if not self._session.start_run():
            self._refresh()
            return
        self._timer = self.set_interval(step_delay(self._session.speed), self._tick)
        self._refresh()

    def action_save(self) -> None:
        if self._store is None:
            self._session.message = "No grid store configured."
        else:
            try:
                self._store.save(
                    self._grid_name,
                    self._session.grid,
                    start=self._session.start,
                    end=self._session.end,
                )
            except GridNameError as exc:
                self._session.message = str(exc)
            else:
                self._session.message = f"Saved {self._grid_name}."
        self._refresh()

    def _tick(self) -> None:
        if not self._session.tick():
            self._stop_timer()
            run = self._session.run
            if run is not None:
                logger.info(
                    "%s visited %d cells, path length %d",
                    run.algorithm.value,
                    run.stats.nodes_visited,
                    run.stats.path_length,
                )
        self._refresh()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _refresh(self) -> None:
        self.query_one("#grid", GridWidget).refresh()
        self.query_one("#status", Static).update(_render_status(self._session))


class PathvizApp(App):
    """Hosts the editor screen."""

    def __init__(self, screen: Screen, *, title: str = "Pathviz") -> None:
        super().__init__()
        self._initial_screen = screen
        self.title = title

    def on_mount(self) -> None:
        self.push_screen(self._initial_screen)


def run_editor(
    grid: Grid,
    *,
    start: Position,
    end: Position,
    algorithm: Algorithm = Algorithm.ASTAR,
    speed: int = 50,
    grids_dir: Path | None = None,
    grid_name: str = "Untitled Grid",
    seed: int | None = None,
) -> None:
    session = EditorSession(
        grid=grid,
        start=start,
        end=end,
        algorithm=algorithm,
        speed=speed,
        rng=random.Random(seed),
    )
    store = GridStore(grids_dir) if grids_dir is not None else None
    app = PathvizApp(
        EditorScreen(session, store=store, grid_name=grid_name),
        title="Pathviz Editor",
    )
    app.run()


def _render_status(session: EditorSession) -> Panel:
    stats_line = ""
    if session.playback is not None:
        stats_line = (
            f" | visited={session.playback.visited}"
            f" path={session.playback.path_length}"
        )
    walls = session.grid.count(CellKind.WALL)
    text = Text(
        f"{ALGORITHM_INFO[session.algorithm].name} | mode={session.mode.value} | "
        f"status={session.status}{stats_line} | walls={walls}",
        style="bold",
    )
    if session.message:
        text.append(f"\n{session.message}")
    return Panel(text, padding=(0, 1))
