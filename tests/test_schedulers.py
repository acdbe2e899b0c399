import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    schedule_fcfs,
    schedule_priority,
    schedule_priority_preemptive,
    schedule_round_robin,
    schedule_sjf,
    simulate,
)
from schedsim.errors import InvalidInput, UnknownAlgorithm
from schedsim.models import AlgorithmKind, Process


def _spans(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.intervals]


def test_fcfs_order(demo_procs):
    res = schedule_fcfs(demo_procs)
    assert _spans(res) == [("P1", 0, 4), ("P2", 4, 7), ("P3", 7, 8), ("P4", 8, 10)]
    assert [p.completion_time for p in res.process_results] == [4, 7, 8, 10]
    assert [p.waiting_time for p in res.process_results] == [0, 3, 5, 5]
    assert res.average_waiting_time == pytest.approx(3.25)
    assert res.average_turnaround_time == pytest.approx(5.75)
    assert res.total_time == 10


def test_fcfs_equal_arrivals_keep_input_order():
    res = schedule_fcfs([Process("B", 0, 2), Process("A", 0, 1)])
    assert [s.pid for s in res.intervals] == ["B", "A"]


def test_sjf_order(demo_procs):
    res = schedule_sjf(demo_procs)
    assert _spans(res) == [("P1", 0, 4), ("P3", 4, 5), ("P4", 5, 7), ("P2", 7, 10)]
    waits = {p.pid: p.waiting_time for p in res.process_results}
    assert waits == {"P1": 0, "P2": 6, "P3": 2, "P4": 2}
    assert res.average_waiting_time == pytest.approx(2.5)


def test_sjf_is_not_preempted_by_shorter_arrival():
    res = schedule_sjf([Process("long", 0, 6), Process("short", 1, 1)])
    assert _spans(res) == [("long", 0, 6), ("short", 6, 7)]


def test_sjf_burst_tie_goes_to_earlier_arrival():
    procs = [Process("A", 0, 5), Process("C", 2, 2), Process("B", 1, 2)]
    res = schedule_sjf(procs)
    assert [s.pid for s in res.intervals] == ["A", "B", "C"]


def test_rr_quantum_2(demo_procs):
    res = schedule_round_robin(demo_procs, quantum=2)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P3", 4, 5),
        ("P1", 5, 7),
        ("P4", 7, 9),
        ("P2", 9, 10),
    ]
    assert len(res.intervals) > len(demo_procs)
    assert [p.pid for p in res.process_results] == ["P3", "P1", "P4", "P2"]
    assert res.average_waiting_time == pytest.approx(3.75)
    assert res.quantum == 2

    for proc in demo_procs:
        ran = sum(s.end_time - s.start_time for s in res.intervals if s.pid == proc.pid)
        assert ran == proc.burst_time


def test_rr_new_arrival_queues_ahead_of_preempted_process():
    res = schedule_round_robin([Process("A", 0, 4), Process("B", 2, 2)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("B", 2, 4), ("A", 4, 6)]


def test_rr_does_not_merge_adjacent_slices_and_skips_idle_time():
    res = schedule_round_robin([Process("A", 0, 2), Process("B", 5, 3)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("B", 5, 7), ("B", 7, 8)]
    assert res.system.idle_time == 3


def test_rr_defaults_quantum_and_rejects_non_positive():
    assert schedule_round_robin([Process("A", 0, 5)]).quantum == 2
    with pytest.raises(InvalidInput):
        schedule_round_robin([Process("A", 0, 5)], quantum=0)


def test_priority_static(demo_procs):
    res = schedule_priority(demo_procs)
    # P1 is alone at t=0 and runs to completion; P3 (priority 3) goes next
    assert _spans(res) == [("P1", 0, 4), ("P3", 4, 5), ("P4", 5, 7), ("P2", 7, 10)]


def test_priority_tie_goes_to_earlier_arrival_then_input_order():
    procs = [Process("X", 0, 2, priority=9), Process("C", 1, 1, priority=5), Process("D", 0, 1, priority=5)]
    res = schedule_priority(procs)
    assert [s.pid for s in res.intervals] == ["X", "D", "C"]

    same = [Process("A", 0, 3, priority=1), Process("B", 0, 2, priority=1)]
    runs = [_spans(schedule_priority(same)) for _ in range(5)]
    assert runs[0] == [("A", 0, 3), ("B", 3, 5)]
    assert all(r == runs[0] for r in runs)


def test_priority_default_is_explicit():
    procs = [Process("A", 0, 3), Process("B", 1, 2, priority=-1), Process("C", 1, 2)]
    assert [s.pid for s in schedule_priority(procs).intervals] == ["A", "C", "B"]
    lowered = schedule_priority(procs, default_priority=-5)
    assert [s.pid for s in lowered.intervals] == ["A", "B", "C"]


def test_priority_preemptive(demo_procs):
    res = schedule_priority_preemptive(demo_procs)
    assert _spans(res) == [
        ("P1", 0, 1),
        ("P1", 1, 2),
        ("P3", 2, 3),
        ("P1", 3, 5),
        ("P4", 5, 7),
        ("P2", 7, 10),
    ]
    waits = {p.pid: p.waiting_time for p in res.process_results}
    assert waits == {"P1": 1, "P2": 6, "P3": 0, "P4": 2}


def test_priority_preemptive_interrupts_running_process():
    res = schedule_priority_preemptive([Process("L", 0, 5, priority=1), Process("H", 2, 2, priority=5)])
    assert _spans(res) == [("L", 0, 2), ("H", 2, 4), ("L", 4, 7)]
    assert [p.pid for p in res.process_results] == ["H", "L"]
    assert res.process_results[1].waiting_time == 2
    assert res.process_results[1].start_time == 0


@pytest.mark.parametrize("kind", list(AlgorithmKind))
def test_invariants_hold_for_every_algorithm(kind, demo_procs):
    procs = demo_procs + [Process("P5", 20, 3, priority=4), Process("P6", 21, 1, priority=1)]
    res = simulate(procs, kind, quantum=3)

    assert sum(s.end_time - s.start_time for s in res.intervals) == sum(p.burst_time for p in procs)
    assert sorted(p.pid for p in res.process_results) == sorted(p.pid for p in procs)
    for p in res.process_results:
        assert p.waiting_time == p.turnaround_time - p.burst_time
        assert p.waiting_time >= 0
    assert res.total_time == max(p.completion_time for p in res.process_results)
    assert res.total_time == res.intervals[-1].end_time
    assert all(s.start_time < s.end_time for s in res.intervals)


@pytest.mark.parametrize("kind", list(AlgorithmKind))
def test_single_process(kind):
    res = simulate([Process("P1", 3, 4, priority=1)], kind, quantum=4)
    assert _spans(res) == [("P1", 3, 7)]
    assert res.process_results[0].waiting_time == 0
    assert res.total_time == 7


@pytest.mark.parametrize("kind", list(AlgorithmKind))
def test_simulate_is_idempotent_and_leaves_input_alone(kind, demo_procs):
    before = list(demo_procs)
    first = simulate(demo_procs, kind, quantum=2)
    second = simulate(demo_procs, kind, quantum=2)
    assert first == second
    assert demo_procs == before


def test_simulate_accepts_names():
    assert simulate([Process("A", 0, 1)], "RR").algorithm is AlgorithmKind.ROUND_ROBIN
    assert simulate([Process("A", 0, 1)], "priority_preemptive").algorithm is AlgorithmKind.PRIORITY_PREEMPTIVE
    assert set(ALGORITHMS) == set(AlgorithmKind)


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithm) as excinfo:
        simulate([Process("A", 0, 1)], "srtf")
    assert excinfo.value.name == "srtf"
    assert isinstance(excinfo.value, ValueError)


def test_rr_admits_unsorted_input_by_arrival_then_position():
    res = schedule_round_robin([Process("B", 1, 2), Process("A", 0, 3), Process("C", 1, 1)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("B", 2, 4), ("C", 4, 5), ("A", 5, 6)]

    # C is listed first but arrives after A, so A starts at t=0
    res = schedule_round_robin([Process("C", 1, 1), Process("A", 0, 3), Process("B", 1, 2)], quantum=2)
    assert _spans(res) == [("A", 0, 2), ("C", 2, 3), ("B", 3, 5), ("A", 5, 6)]


def test_priority_preemptive_ties_are_deterministic():
    # a later equal-priority arrival does not take the CPU from the running process
    procs = [Process("C", 2, 2, priority=2), Process("A", 0, 4, priority=2)]
    runs = [_spans(schedule_priority_preemptive(procs)) for _ in range(5)]
    assert runs[0] == [("A", 0, 2), ("A", 2, 4), ("C", 4, 6)]
    assert all(r == runs[0] for r in runs)

    # simultaneous equal-priority arrivals run in input order
    procs = [Process("B", 1, 2, priority=3), Process("D", 1, 1, priority=3), Process("A", 0, 1, priority=1)]
    assert _spans(schedule_priority_preemptive(procs)) == [("A", 0, 1), ("B", 1, 3), ("D", 3, 4)]
