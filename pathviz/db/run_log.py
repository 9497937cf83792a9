"""Search run logging helpers (JSONL)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from pathviz.engine.contracts import AlgorithmRun, VisualizationStep

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
RUN_LOG_NAME = "run.jsonl"


def create_run_folder(
    base_dir: Path, *, timestamp: str | None = None
) -> tuple[Path, Path]:
    run_id = timestamp or _format_timestamp(datetime.now(timezone.utc))
    run_dir = base_dir / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Recording run in %s", run_dir)
    return run_dir, run_dir / RUN_LOG_NAME


def write_header(path: Path, metadata: dict[str, Any]) -> None:
    record: dict[str, Any] = {
        "type": "header",
        "schema_version": SCHEMA_VERSION,
        "metadata": metadata,
    }
    _append_records(path, [record])


def append_steps(path: Path, steps: Iterable[VisualizationStep]) -> None:
    records = [
        {
            "type": "step",
            "schema_version": SCHEMA_VERSION,
            "step": step.model_dump(mode="json"),
        }
        for step in steps
    ]
    _append_records(path, records)


def append_run_summary(path: Path, run: AlgorithmRun) -> None:
    record: dict[str, Any] = {
        "type": "run",
        "schema_version": SCHEMA_VERSION,
        "run": run.model_dump(mode="json"),
    }
    _append_records(path, [record])


def _append_records(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record))
            handle.write("\n")


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
