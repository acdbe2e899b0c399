from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .errors import InvalidInput
from .models import Process

logger = logging.getLogger(__name__)

# Demo workload used when no file is given.
DEFAULT_WORKLOAD: List[Process] = [
    Process("P1", arrival_time=0, burst_time=4, priority=2),
    Process("P2", arrival_time=1, burst_time=3, priority=1),
    Process("P3", arrival_time=2, burst_time=1, priority=3),
    Process("P4", arrival_time=3, burst_time=2, priority=2),
]

_ALIASES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrivalTime"),
    "burst_time": ("burst_time", "burstTime"),
}


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path}: not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"{path}: not valid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    # utf-8-sig drops the BOM spreadsheet exports put in front of the header
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        try:
            rows = list(csv.DictReader(f))
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path}: not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    return [_process_from_mapping(row) for row in rows]


def _lookup(mapping: Mapping, field: str):
    for key in _ALIASES[field]:
        if key in mapping:
            return mapping[key]
    raise KeyError(field)


def _as_int(value) -> int:
    # int() would quietly truncate 2.7 to 2 and accept True as 1
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(_lookup(mapping, "pid")).strip()
        arrival_time = _as_int(_lookup(mapping, "arrival_time"))
        burst_time = _as_int(_lookup(mapping, "burst_time"))
        priority_val = mapping.get("priority")
        priority = _as_int(priority_val) if priority_val not in (None, "") else None
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
