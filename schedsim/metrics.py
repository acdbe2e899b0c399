from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .errors import SimulationError
from .models import ExecutionInterval, ProcessResult, SchedulingResult, SystemMetrics

logger = logging.getLogger(__name__)


def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def compute_system_metrics(
    results: Sequence[ProcessResult], intervals: Sequence[ExecutionInterval]
) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given per-process results and
    the execution timeline.
    """
    if not results:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0, idle_time=0)

    makespan = max(r.completion_time for r in results)
    cpu_busy_time = sum(iv.duration for iv in intervals)

    throughput = len(results) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        idle_time=makespan - cpu_busy_time,
    )


def summarize(result: SchedulingResult) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    processes = result.process_results
    return {
        "avg_waiting": average(p.waiting_time for p in processes),
        "avg_turnaround": average(p.turnaround_time for p in processes),
        "avg_response": average(p.response_time for p in processes),
    }


def check_invariants(result: SchedulingResult) -> None:
    """
    Raise SimulationError if the result is internally inconsistent.
    """
    problems: List[str] = []

    for iv in result.intervals:
        if iv.start_time >= iv.end_time:
            problems.append(f"empty interval for {iv.pid} at {iv.start_time}")

    for prev, cur in zip(result.intervals, result.intervals[1:]):
        if cur.start_time < prev.end_time:
            problems.append(f"interval {cur.pid}@{cur.start_time} overlaps {prev.pid}@{prev.end_time}")

    worked = {}
    for iv in result.intervals:
        worked[iv.pid] = worked.get(iv.pid, 0) + iv.duration

    for p in result.process_results:
        if p.waiting_time < 0:
            problems.append(f"{p.pid} has negative waiting time {p.waiting_time}")
        if p.turnaround_time < p.burst_time:
            problems.append(f"{p.pid} turnaround {p.turnaround_time} is shorter than burst {p.burst_time}")
        if worked.get(p.pid, 0) != p.burst_time:
            problems.append(f"{p.pid} ran for {worked.get(p.pid, 0)} units, burst is {p.burst_time}")

    last_end = result.intervals[-1].end_time if result.intervals else 0
    max_completion = max((p.completion_time for p in result.process_results), default=0)
    if not result.total_time == last_end == max_completion:
        problems.append(
            f"total time {result.total_time} disagrees with last interval end {last_end} "
            f"or latest completion {max_completion}"
        )

    if problems:
        for problem in problems:
            logger.error("invariant violated (%s): %s", result.algorithm.value, problem)
        raise SimulationError("; ".join(problems))
