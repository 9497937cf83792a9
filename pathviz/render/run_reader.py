"""Read run logs back into steps and summaries."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from pathviz.db.run_log import RUN_LOG_NAME
from pathviz.engine.contracts import AlgorithmRun, VisualizationStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunEntry:
    run_dir: Path
    run_id: str
    algorithm: str | None
    steps: int | None


def read_steps(path: Path) -> Iterator[VisualizationStep]:
    for record in _read_records(path):
        if record.get("type") != "step":
            continue
        step = record.get("step")
        if step is None:
            continue
        try:
            yield VisualizationStep.model_validate(step)
        except ValidationError:
            logger.warning("Skipping malformed step record in %s", path)


def read_run_summary(path: Path) -> AlgorithmRun | None:
    summary = None
    for record in _read_records(path):
        if record.get("type") != "run" or record.get("run") is None:
            continue
        try:
            summary = AlgorithmRun.model_validate(record["run"])
        except ValidationError:
            logger.warning("Skipping malformed run record in %s", path)
    return summary


def read_header(path: Path) -> dict:
    for record in _read_records(path):
        if record.get("type") == "header":
            return record.get("metadata", {})
        break
    return {}


def list_runs(base_dir: Path) -> list[RunEntry]:
    if not base_dir.exists():
        return []
    entries: list[RunEntry] = []
    for path in sorted(base_dir.iterdir()):
        if not path.is_dir():
            continue
        log_path = path / RUN_LOG_NAME
        if not log_path.exists():
            continue
        metadata = read_header(log_path)
        entries.append(
            RunEntry(
                run_dir=path,
                run_id=metadata.get("run_id") or path.name,
                algorithm=metadata.get("algorithm"),
                steps=metadata.get("steps"),
            )
        )
    return entries


def latest_run(base_dir: Path) -> Path | None:
    runs = list_runs(base_dir)
    if not runs:
        return None
    return runs[-1].run_dir


def _read_records(path: Path) -> Iterator[dict]:
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            record = _parse_record(line)
            if record is None:
                continue
            yield record


def _parse_record(line: str) -> dict | None:
    if not line.strip():
        return None
    try:
        return json.loads(line)
    except json.JSONDecodeError:
        logger.warning("Skipping undecodable run log line")
        return None
