from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import UnknownAlgorithm


class AlgorithmKind(Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    ROUND_ROBIN = "rr"
    PRIORITY_NON_PREEMPTIVE = "priority"
    PRIORITY_PREEMPTIVE = "priority-preemptive"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def uses_priority(self) -> bool:
        return self in (AlgorithmKind.PRIORITY_NON_PREEMPTIVE, AlgorithmKind.PRIORITY_PREEMPTIVE)

    @property
    def uses_quantum(self) -> bool:
        return self is AlgorithmKind.ROUND_ROBIN

    @classmethod
    def parse(cls, name: "str | AlgorithmKind") -> "AlgorithmKind":
        """
        Accept either the short id (``rr``) or the member name
        (``ROUND_ROBIN``), case-insensitively.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for kind in cls:
            if key in (kind.value, kind.name.lower()):
                return kind
        raise UnknownAlgorithm(str(name))


_LABELS = {
    AlgorithmKind.FCFS: "First Come First Serve",
    AlgorithmKind.SJF: "Shortest Job First",
    AlgorithmKind.ROUND_ROBIN: "Round Robin",
    AlgorithmKind.PRIORITY_NON_PREEMPTIVE: "Priority (Non-Preemptive)",
    AlgorithmKind.PRIORITY_PREEMPTIVE: "Priority (Preemptive)",
}


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None


@dataclass
class SimulationProcess:
    """
    Mutable working copy of a Process, owned by a single simulation run.

    ``index`` is the position of the process in the caller's input list and
    is the final tie-breaker for every selection.
    """

    process: Process
    index: int
    remaining_time: int

    @classmethod
    def from_process(cls, process: Process, index: int) -> "SimulationProcess":
        return cls(process=process, index=index, remaining_time=process.burst_time)

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time


@dataclass(frozen=True)
class ExecutionInterval:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ProcessResult:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    idle_time: int = 0


@dataclass(frozen=True)
class SchedulingResult:
    algorithm: AlgorithmKind
    quantum: Optional[int]
    process_results: List[ProcessResult] = field(default_factory=list)
    intervals: List[ExecutionInterval] = field(default_factory=list)
    average_waiting_time: float = 0.0
    average_turnaround_time: float = 0.0
    total_time: int = 0
    system: Optional[SystemMetrics] = None
