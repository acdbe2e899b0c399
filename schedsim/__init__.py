"""
CPU scheduling simulator.

Computes the execution timeline and per-process metrics for the classical
uniprocessor disciplines (FCFS, SJF, Round Robin, Priority in both
non-preemptive and preemptive variants) and renders them in the terminal.
"""

from .algorithms import simulate
from .errors import InvalidInput, SchedulerError, SimulationError, UnknownAlgorithm
from .models import AlgorithmKind, ExecutionInterval, Process, ProcessResult, SchedulingResult

__all__ = [
    "AlgorithmKind",
    "ExecutionInterval",
    "InvalidInput",
    "Process",
    "ProcessResult",
    "SchedulerError",
    "SchedulingResult",
    "SimulationError",
    "UnknownAlgorithm",
    "cli",
    "simulate",
]
