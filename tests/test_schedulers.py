import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
    simulate,
)
from schedsim.config import RunConfig
from schedsim.errors import InvalidConfiguration, InvalidInput
from schedsim.models import Process


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=8),
        Process(2, arrival_time=1, burst_time=4),
        Process(3, arrival_time=2, burst_time=9),
        Process(4, arrival_time=3, burst_time=5),
    ]


def _completions(res):
    return {p.pid: p.completion_time for p in res.processes}


def _spans(res):
    return [(e.pid, e.start_time, e.end_time) for e in res.timeline]


def test_fcfs_sample():
    res = schedule_fcfs(_procs())
    assert _completions(res) == {1: 8, 2: 12, 3: 21, 4: 26}
    assert res.system.avg_waiting_time == 8.75
    assert res.system.avg_turnaround_time == 15.25


def test_sjf_sample():
    res = schedule_sjf(_procs())
    assert _completions(res) == {1: 8, 2: 12, 4: 17, 3: 26}
    assert _spans(res) == [(1, 0, 8), (2, 8, 12), (4, 12, 17), (3, 17, 26)]
    assert res.system.avg_waiting_time == 7.75
    assert res.system.avg_turnaround_time == 14.25


def test_srtf_sample():
    res = schedule_srtf(_procs())
    assert _completions(res) == {2: 5, 4: 10, 1: 17, 3: 26}
    assert _spans(res) == [(1, 0, 1), (2, 1, 5), (4, 5, 10), (1, 10, 17), (3, 17, 26)]
    assert res.system.avg_waiting_time == 6.5
    assert res.system.avg_turnaround_time == 13.0


def test_rr_quantum_4_sample():
    res = schedule_rr(_procs(), quantum=4)
    assert _completions(res) == {2: 8, 1: 20, 3: 26, 4: 25}
    assert res.system.avg_waiting_time == 11.75
    assert res.system.avg_turnaround_time == 18.25


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    res = schedule_rr(_procs(), quantum=4)
    # P2, P3 and P4 all arrive during P1's first slice and run before P1 again.
    assert [e.pid for e in res.timeline[:5]] == [1, 2, 3, 4, 1]


def test_rr_burst_equal_to_quantum_runs_once():
    procs = [Process(1, 0, 3), Process(2, 0, 3)]
    res = schedule_rr(procs, quantum=3)
    assert _spans(res) == [(1, 0, 3), (2, 3, 6)]


def test_rr_consolidates_consecutive_slices():
    res = schedule_rr([Process(1, 0, 7)], quantum=2)
    assert _spans(res) == [(1, 0, 7)]


def test_fcfs_idle_gap_at_start_and_middle():
    procs = [Process(1, 2, 3), Process(2, 10, 1)]
    res = schedule_fcfs(procs)
    assert _spans(res) == [(None, 0, 2), (1, 2, 5), (None, 5, 10), (2, 10, 11)]
    assert res.system.idle_time == 7


@pytest.mark.parametrize("name", ["sjf", "srtf", "rr"])
def test_idle_gaps_are_single_events(name):
    procs = [Process(1, 0, 2), Process(2, 100, 2)]
    res = run_algorithm(name, procs, quantum=1)
    assert _spans(res) == [(1, 0, 2), (None, 2, 100), (2, 100, 102)]


def test_ties_broken_by_arrival_then_pid():
    procs = [Process(3, 0, 2), Process(1, 0, 2), Process(2, 0, 2)]
    for name in ALGORITHMS:
        res = run_algorithm(name, procs, quantum=2)
        assert [e.pid for e in res.timeline] == [1, 2, 3], name


def test_sjf_equal_burst_prefers_earlier_arrival():
    procs = [Process(1, 0, 5), Process(2, 2, 3), Process(3, 1, 3)]
    res = schedule_sjf(procs)
    assert [e.pid for e in res.timeline] == [1, 3, 2]


def test_sjf_does_not_preempt():
    procs = [Process(1, 0, 10), Process(2, 1, 1)]
    res = schedule_sjf(procs)
    assert _spans(res) == [(1, 0, 10), (2, 10, 11)]


def test_srtf_preempts_for_shorter_arrival():
    procs = [Process(1, 0, 10), Process(2, 1, 1)]
    res = schedule_srtf(procs)
    assert _spans(res) == [(1, 0, 1), (2, 1, 2), (1, 2, 11)]


@pytest.mark.parametrize("name", ["fcfs", "sjf", "srtf", "rr"])
def test_schedule_invariants(name):
    procs = [
        Process(1, 0, 3),
        Process(2, 0, 6),
        Process(3, 4, 2),
        Process(4, 4, 4),
        Process(5, 20, 3),
        Process(6, 21, 1),
    ]
    res = run_algorithm(name, procs, quantum=2)

    # tiles [0, makespan]
    assert res.timeline[0].start_time == 0
    for prev, cur in zip(res.timeline, res.timeline[1:]):
        assert prev.end_time == cur.start_time
        assert prev.pid != cur.pid
    assert res.timeline[-1].end_time == res.system.makespan

    for p in procs:
        ran = sum(e.duration for e in res.timeline if e.pid == p.pid)
        assert ran == p.burst_time

    for m in res.processes:
        assert m.turnaround_time == m.completion_time - m.arrival_time
        assert m.waiting_time == m.turnaround_time - m.burst_time
        assert m.waiting_time >= 0

    assert [m.pid for m in res.processes] == sorted(p.pid for p in procs)
    assert res.system.cpu_busy_time == sum(p.burst_time for p in procs)


@pytest.mark.parametrize("name", ["fcfs", "sjf", "srtf", "rr"])
def test_runs_are_deterministic(name):
    procs = _procs()
    first = run_algorithm(name, procs, quantum=3)
    second = run_algorithm(name, procs, quantum=3)
    assert first == second
    assert procs == _procs()


def test_simulate_does_not_touch_input():
    procs = _procs()
    simulate(procs, RunConfig("srtf"))
    assert procs == _procs()


def test_quantum_ignored_for_non_rr():
    res = run_algorithm("FCFS", _procs(), quantum=5)
    assert res.quantum is None


@pytest.mark.parametrize("quantum", [None, 0, -3, "abc", 2.5, True])
def test_rr_rejects_bad_quantum(quantum):
    procs = _procs()
    with pytest.raises(InvalidConfiguration):
        run_algorithm("rr", procs, quantum=quantum)
    assert procs == _procs()


def test_rr_accepts_numeric_string_quantum():
    res = run_algorithm("rr", _procs(), quantum="4")
    assert res.quantum == 4


@pytest.mark.parametrize("name", ["fcfs", "sjf", "srtf", "rr"])
def test_empty_process_set_rejected(name):
    with pytest.raises(InvalidInput, match="At least one process"):
        run_algorithm(name, [], quantum=2)


def test_duplicate_pids_rejected():
    procs = [Process(1, 0, 2), Process(1, 3, 4)]
    with pytest.raises(InvalidInput, match="Duplicate"):
        schedule_fcfs(procs)


def test_unknown_algorithm():
    with pytest.raises(InvalidConfiguration, match="Unknown algorithm"):
        run_algorithm("priority", _procs())
