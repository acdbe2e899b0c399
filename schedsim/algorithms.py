from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .config import DEFAULT_PRIORITY, DEFAULT_QUANTUM, SimulationConfig
from .errors import InvalidInput
from .metrics import average, check_invariants, compute_system_metrics
from .models import (
    AlgorithmKind,
    ExecutionInterval,
    Process,
    ProcessResult,
    SchedulingResult,
    SimulationProcess,
)

logger = logging.getLogger(__name__)

# Every selection breaks ties on earlier arrival, then on input position.


def _working_copies(processes: Sequence[Process]) -> List[SimulationProcess]:
    return [SimulationProcess.from_process(p, index) for index, p in enumerate(processes)]


def _arrival_order(procs: Sequence[SimulationProcess]) -> List[SimulationProcess]:
    return sorted(procs, key=lambda sp: (sp.arrival_time, sp.index))


def _priority_of(sp: SimulationProcess, default_priority: int) -> int:
    prio = sp.process.priority
    return default_priority if prio is None else prio


def _finish(sp: SimulationProcess, start_time: int, completion_time: int) -> ProcessResult:
    turnaround_time = completion_time - sp.arrival_time
    return ProcessResult(
        pid=sp.pid,
        arrival_time=sp.arrival_time,
        burst_time=sp.burst_time,
        start_time=start_time,
        completion_time=completion_time,
        turnaround_time=turnaround_time,
        waiting_time=turnaround_time - sp.burst_time,
        response_time=start_time - sp.arrival_time,
        priority=sp.process.priority,
    )


def _build_result(
    kind: AlgorithmKind,
    quantum: Optional[int],
    results: List[ProcessResult],
    intervals: List[ExecutionInterval],
) -> SchedulingResult:
    result = SchedulingResult(
        algorithm=kind,
        quantum=quantum,
        process_results=results,
        intervals=intervals,
        average_waiting_time=average(r.waiting_time for r in results),
        average_turnaround_time=average(r.turnaround_time for r in results),
        total_time=intervals[-1].end_time if intervals else 0,
        system=compute_system_metrics(results, intervals),
    )
    check_invariants(result)
    return result


def schedule_fcfs(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[ProcessResult] = []

    for sp in _arrival_order(_working_copies(processes)):
        if time < sp.arrival_time:
            time = sp.arrival_time

        start_time = time
        end_time = start_time + sp.burst_time
        intervals.append(ExecutionInterval(pid=sp.pid, start_time=start_time, end_time=end_time))
        results.append(_finish(sp, start_time, end_time))
        time = end_time

    return _build_result(AlgorithmKind.FCFS, None, results, intervals)


def _run_to_completion(
    kind: AlgorithmKind,
    processes: Sequence[Process],
    select_key: Callable[[SimulationProcess], tuple],
) -> SchedulingResult:
    """
    Shared loop of the non-preemptive selection algorithms: at each decision
    point pick the ready process with the smallest ``select_key`` and run it
    to completion.
    """
    pending = _working_copies(processes)

    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[ProcessResult] = []

    while pending:
        ready = [sp for sp in pending if sp.arrival_time <= time]

        if not ready:
            # If nothing is ready, jump time to the next arrival.
            time = min(sp.arrival_time for sp in pending)
            continue

        chosen = min(ready, key=select_key)
        logger.debug("%s: t=%d dispatch %s out of %d ready", kind.value, time, chosen.pid, len(ready))

        start_time = time
        end_time = start_time + chosen.burst_time
        intervals.append(ExecutionInterval(pid=chosen.pid, start_time=start_time, end_time=end_time))
        results.append(_finish(chosen, start_time, end_time))

        pending = [sp for sp in pending if sp is not chosen]
        time = end_time

    return _build_result(kind, None, results, intervals)


def schedule_sjf(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. A shorter job
    arriving later never interrupts the running one.
    """
    return _run_to_completion(
        AlgorithmKind.SJF,
        processes,
        lambda sp: (sp.burst_time, sp.arrival_time, sp.index),
    )


def schedule_round_robin(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running (or exactly when it ends)
    join the queue ahead of the process that was just preempted.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise InvalidInput(f"Round Robin requires a positive quantum, got {quantum}")

    pending: Deque[SimulationProcess] = deque(_arrival_order(_working_copies(processes)))
    ready: Deque[SimulationProcess] = deque()
    first_start: Dict[str, int] = {}

    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[ProcessResult] = []

    def admit_arrivals(current_time: int) -> None:
        while pending and pending[0].arrival_time <= current_time:
            ready.append(pending.popleft())

    admit_arrivals(time)

    while ready or pending:
        if not ready:
            # Jump to next arrival if CPU is idle
            time = pending[0].arrival_time
            admit_arrivals(time)
            continue

        current = ready.popleft()
        first_start.setdefault(current.pid, time)

        run_time = min(quantum, current.remaining_time)
        intervals.append(ExecutionInterval(pid=current.pid, start_time=time, end_time=time + run_time))
        time += run_time
        current.remaining_time -= run_time

        admit_arrivals(time)

        if current.remaining_time > 0:
            ready.append(current)
        else:
            results.append(_finish(current, first_start[current.pid], time))

    return _build_result(AlgorithmKind.ROUND_ROBIN, quantum, results, intervals)


def schedule_priority(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    Static Priority scheduling (non-preemptive).

    Higher numeric priority value means more urgent. Processes without a
    priority compare as ``default_priority``.
    """
    return _run_to_completion(
        AlgorithmKind.PRIORITY_NON_PREEMPTIVE,
        processes,
        lambda sp: (-_priority_of(sp, default_priority), sp.arrival_time, sp.index),
    )


def schedule_priority_preemptive(
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    Preemptive priority scheduling.

    The running process is re-evaluated at every arrival: each slice runs
    until completion or the next arrival, whichever comes first, and is
    recorded as its own interval.
    """
    pending: Deque[SimulationProcess] = deque(_arrival_order(_working_copies(processes)))
    active: List[SimulationProcess] = []
    first_start: Dict[str, int] = {}

    time = 0
    intervals: List[ExecutionInterval] = []
    results: List[ProcessResult] = []

    while pending or active:
        while pending and pending[0].arrival_time <= time:
            active.append(pending.popleft())

        if not active:
            time = pending[0].arrival_time
            continue

        current = min(
            active,
            key=lambda sp: (-_priority_of(sp, default_priority), sp.arrival_time, sp.index),
        )
        first_start.setdefault(current.pid, time)

        # Run until completion or next arrival, whichever comes first.
        run_time = current.remaining_time
        if pending:
            run_time = min(run_time, pending[0].arrival_time - time)

        intervals.append(ExecutionInterval(pid=current.pid, start_time=time, end_time=time + run_time))
        time += run_time
        current.remaining_time -= run_time

        if current.remaining_time == 0:
            results.append(_finish(current, first_start[current.pid], time))
            active = [sp for sp in active if sp is not current]

    return _build_result(AlgorithmKind.PRIORITY_PREEMPTIVE, None, results, intervals)


ALGORITHMS = {
    AlgorithmKind.FCFS: schedule_fcfs,
    AlgorithmKind.SJF: schedule_sjf,
    AlgorithmKind.ROUND_ROBIN: schedule_round_robin,
    AlgorithmKind.PRIORITY_NON_PREEMPTIVE: schedule_priority,
    AlgorithmKind.PRIORITY_PREEMPTIVE: schedule_priority_preemptive,
}


def simulate(
    processes: Sequence[Process],
    algorithm: "str | AlgorithmKind",
    quantum: Optional[int] = None,
    *,
    default_priority: int = DEFAULT_PRIORITY,
) -> SchedulingResult:
    """
    Run one scheduling algorithm over ``processes`` and return the timeline
    and per-process metrics.

    The caller's list and records are never modified. Input is assumed to be
    valid (see ``validation.validate_processes``); an unrecognised algorithm
    name raises UnknownAlgorithm.
    """
    kind = AlgorithmKind.parse(algorithm)
    logger.debug("simulating %d processes with %s (quantum=%s)", len(processes), kind.value, quantum)

    func = ALGORITHMS[kind]
    result = func(processes, quantum=quantum, default_priority=default_priority)

    logger.debug(
        "%s finished at t=%d with %d intervals, avg waiting %.2f",
        kind.value,
        result.total_time,
        len(result.intervals),
        result.average_waiting_time,
    )
    return result


def run_config(config: SimulationConfig, processes: Sequence[Process]) -> SchedulingResult:
    return simulate(
        processes,
        config.algorithm,
        quantum=config.quantum,
        default_priority=config.default_priority,
    )
