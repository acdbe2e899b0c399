from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .errors import InvalidInput
from .models import AlgorithmKind, Process

logger = logging.getLogger(__name__)


def validate_processes(
    processes: Sequence[Process],
    algorithm: "Optional[str | AlgorithmKind]" = None,
    require_priority: bool = True,
) -> None:
    """
    Check a workload before it is handed to the engine.

    The engine assumes well-formed input and may not terminate otherwise, so
    every problem found here is collected and reported in one InvalidInput.
    Priority algorithms need a priority on every process unless
    ``require_priority`` is False, i.e. the caller supplies a default.
    """
    errors: List[str] = []

    if not processes:
        errors.append("at least one process is required")

    kind = AlgorithmKind.parse(algorithm) if algorithm is not None else None

    seen = set()
    for p in processes:
        label = p.pid if p.pid else "<blank>"
        if not p.pid or not p.pid.strip():
            errors.append("process id must not be blank")
        elif p.pid in seen:
            errors.append(f"duplicate process id '{p.pid}'")
        seen.add(p.pid)

        if p.arrival_time < 0:
            errors.append(f"{label}: arrival time must be >= 0 (got {p.arrival_time})")
        if p.burst_time < 1:
            errors.append(f"{label}: burst time must be >= 1 (got {p.burst_time})")
        if require_priority and kind is not None and kind.uses_priority and p.priority is None:
            errors.append(f"{label}: priority is required for {kind.label}")

    if errors:
        logger.warning("rejected workload: %s", "; ".join(errors))
        raise InvalidInput(errors)


def validate_quantum(quantum: Optional[int]) -> None:
    if quantum is not None and quantum < 1:
        logger.warning("rejected quantum %s", quantum)
        raise InvalidInput(f"time quantum must be >= 1 (got {quantum})")
