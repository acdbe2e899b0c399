from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import AlgorithmKind

DEFAULT_QUANTUM = 2
DEFAULT_PRIORITY = 0


@dataclass(frozen=True)
class SimulationConfig:
    """
    Parameters for a single engine run.

    ``quantum`` only matters for round robin; ``default_priority`` is what a
    process without an explicit priority compares as in the priority
    algorithms.
    """

    algorithm: AlgorithmKind
    quantum: Optional[int] = None
    default_priority: int = DEFAULT_PRIORITY

    @classmethod
    def build(
        cls,
        algorithm: "str | AlgorithmKind",
        quantum: Optional[int] = None,
        default_priority: int = DEFAULT_PRIORITY,
    ) -> "SimulationConfig":
        kind = AlgorithmKind.parse(algorithm)
        if kind.uses_quantum and quantum is None:
            quantum = DEFAULT_QUANTUM
        if not kind.uses_quantum:
            quantum = None
        return cls(algorithm=kind, quantum=quantum, default_priority=default_priority)
