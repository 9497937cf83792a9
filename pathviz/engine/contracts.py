"""Data contracts shared by the engine, persistence and renderers."""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class CellKind(str, Enum):
    EMPTY = "empty"
    WALL = "wall"
    START = "start"
    END = "end"


class StepKind(str, Enum):
    VISIT = "visit"
    PATH = "path"
    COMPLETE = "complete"


class DrawingMode(str, Enum):
    WALL = "wall"
    ERASE = "erase"
    START = "start"
    END = "end"


class Position(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    row: int
    col: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)

    def manhattan(self, other: "Position") -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)


class VisualizationStep(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: StepKind
    position: Position


class CellRecord(BaseModel):
    """Serialized cell; infinite scores are written as null."""

    model_config = ConfigDict(extra="forbid")

    row: int
    col: int
    kind: CellKind = CellKind.EMPTY
    visited: bool = False
    path: bool = False
    distance: float | None = None
    g_score: float | None = None
    f_score: float | None = None
    heuristic: float = 0
    parent: Position | None = None

    @field_validator("distance", "g_score", "f_score", mode="before")
    @classmethod
    def _read_unset_score(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in {"inf", "infinity"}:
            return None
        if isinstance(value, (int, float)) and math.isinf(value):
            return None
        return value

    @field_serializer("distance", "g_score", "f_score")
    def _write_unset_score(self, value: float | None) -> float | None:
        if value is None or math.isinf(value):
            return None
        return value


class GridExport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "Exported Grid"
    description: str = ""
    rows: int = Field(gt=0)
    cols: int = Field(gt=0)
    cells: list[list[CellRecord]]
    start: Position
    end: Position
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def validate_shape(self) -> "GridExport":
        if len(self.cells) != self.rows:
            raise ValueError("cells must have exactly `rows` rows")
        for row_index, row in enumerate(self.cells):
            if len(row) != self.cols:
                raise ValueError("grid must be rectangular with `cols` columns")
            for col_index, record in enumerate(row):
                if record.row != row_index or record.col != col_index:
                    raise ValueError(
                        f"cell at {row_index},{col_index} has coordinates "
                        f"{record.row},{record.col}"
                    )
        for label, point in (("start", self.start), ("end", self.end)):
            if not (0 <= point.row < self.rows and 0 <= point.col < self.cols):
                raise ValueError(f"{label} position is outside the grid")
        return self


class PathfindingStats(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nodes_visited: int = 0
    path_length: int = 0
    time_taken_ms: float = 0.0
    total_cells: int = 0
    wall_cells: int = 0


class AlgorithmRun(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algorithm: str
    nodes_visited: int
    path_length: int
    time_taken_ms: float
    success: bool
    path: list[Position] = Field(default_factory=list)
    grid_name: str | None = None
