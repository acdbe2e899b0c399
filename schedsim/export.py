from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from .gantt import process_color
from .models import SchedulingResult

logger = logging.getLogger(__name__)


def default_export_name(result: SchedulingResult) -> str:
    return f"scheduling-results-{result.algorithm.value}.json"


def result_to_dict(result: SchedulingResult) -> dict:
    """
    JSON-ready view of a result, including the parameters that produced it.
    """
    data: dict = {
        "algorithm": result.algorithm.label,
        "algorithm_id": result.algorithm.value,
    }
    if result.algorithm.uses_quantum:
        data["quantum"] = result.quantum

    data["processes"] = [asdict(p) for p in result.process_results]
    data["average_waiting_time"] = result.average_waiting_time
    data["average_turnaround_time"] = result.average_turnaround_time
    data["total_time"] = result.total_time
    data["gantt_chart"] = [
        {**asdict(iv), "color": process_color(iv.pid)} for iv in result.intervals
    ]
    return data


def export_json(result: SchedulingResult, path: Optional[str | Path] = None) -> Path:
    path = Path(path) if path is not None else Path(default_export_name(result))
    with path.open("w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)
        f.write("\n")
    logger.info("exported %s results to %s", result.algorithm.value, path)
    return path
