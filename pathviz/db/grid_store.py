"""Named grid configurations stored as JSON files."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from pathviz.engine.contracts import GridExport, Position
from pathviz.engine.grid import Grid

logger = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class GridNameError(ValueError):
    """Raised when a save would overwrite a grid stored under another name."""


@dataclass(frozen=True)
class StoredGrid:
    name: str
    description: str
    rows: int
    cols: int
    path: Path
    updated_at: datetime | None


@dataclass(frozen=True)
class LoadedGrid:
    grid: Grid
    start: Position
    end: Position
    export: GridExport


def slugify(name: str) -> str:
    slug = _SLUG_PATTERN.sub("_", name.strip())
    return slug or "grid"


def export_grid(
    path: Path,
    grid: Grid,
    *,
    start: Position,
    end: Position,
    name: str = "Exported Grid",
    description: str = "",
) -> GridExport:
    export = grid.to_export(start=start, end=end, name=name, description=description)
    _write_export(path, export)
    return export


def import_grid(path: Path) -> LoadedGrid:
    export = GridExport.model_validate(_load_json(path))
    logger.info("Loaded grid %r (%dx%d) from %s", export.name, export.rows, export.cols, path)
    return LoadedGrid(
        grid=Grid.from_export(export),
        start=export.start,
        end=export.end,
        export=export,
    )


class GridStore:
    """Create, read, update, list and delete grids under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    def path_for(self, name: str) -> Path:
        return self._base_dir / f"{slugify(name)}.json"

    def save(
        self,
        name: str,
        grid: Grid,
        *,
        start: Position,
        end: Position,
        description: str = "",
    ) -> GridExport:
        path = self.path_for(name)
        now = datetime.now(timezone.utc)
        created_at = now
        if path.exists():
            existing = self.load(name).export
            if existing.name != name:
                raise GridNameError(
                    f"{path.name} already holds grid {existing.name!r}; "
                    f"choose another name than {name!r}."
                )
            created_at = existing.created_at or now
        export = grid.to_export(start=start, end=end, name=name, description=description)
        export = export.model_copy(update={"created_at": created_at, "updated_at": now})
        _write_export(path, export)
        logger.info("Saved grid %r to %s", name, path)
        return export

    def load(self, name: str) -> LoadedGrid:
        return import_grid(self.path_for(name))

    def update(
        self,
        name: str,
        grid: Grid,
        *,
        start: Position,
        end: Position,
        description: str | None = None,
    ) -> GridExport | None:
        if not self.path_for(name).exists():
            return None
        existing = self.load(name).export
        return self.save(
            name,
            grid,
            start=start,
            end=end,
            description=existing.description if description is None else description,
        )

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted grid %r", name)
        return True

    def list_grids(self) -> list[StoredGrid]:
        if not self._base_dir.exists():
            return []
        entries: list[StoredGrid] = []
        for path in sorted(self._base_dir.glob("*.json")):
            try:
                export = GridExport.model_validate(_load_json(path))
            except ValueError as exc:
                logger.warning("Skipping unreadable grid file %s: %s", path, exc)
                continue
            entries.append(
                StoredGrid(
                    name=export.name,
                    description=export.description,
                    rows=export.rows,
                    cols=export.cols,
                    path=path,
                    updated_at=export.updated_at,
                )
            )
        return entries


def _write_export(path: Path, export: GridExport) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(export.model_dump(mode="json"), indent=2) + "\n", encoding="utf-8"
    )


def _load_json(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Missing grid file: {path}") from exc
    return json.loads(text)
