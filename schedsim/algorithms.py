from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional, Sequence

from .config import RunConfig, parse_quantum
from .errors import InvalidInput
from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduleResult, TimelineEvent, WorkingProcess
from .ordering import by_arrival, shortest_burst_key, shortest_remaining_key
from .timeline import consolidate

logger = logging.getLogger(__name__)


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject process sets the engine cannot simulate: empty sets, foreign
    objects and duplicate pids.
    """
    if not processes:
        raise InvalidInput("At least one process is required to run a simulation")

    seen: set[int] = set()
    for p in processes:
        if not isinstance(p, Process):
            raise InvalidInput(f"Expected a Process, got {p!r}")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process id P{p.pid}")
        seen.add(p.pid)


def _working_copies(processes: Sequence[Process]) -> List[WorkingProcess]:
    validate_processes(processes)
    return [WorkingProcess.from_process(p) for p in processes]


def _idle(timeline: List[TimelineEvent], start: int, end: int) -> int:
    logger.debug("CPU idle from %d to %d", start, end)
    timeline.append(TimelineEvent(pid=None, start_time=start, end_time=end))
    return end


def _admit(pending: Deque[WorkingProcess], ready: List[WorkingProcess] | Deque[WorkingProcess], time: int) -> None:
    # pending is in arrival order, so admission stops at the first future arrival.
    while pending and pending[0].arrival_time <= time:
        ready.append(pending.popleft())


def _build_result(
    algorithm: str,
    quantum: Optional[int],
    metrics: List[ProcessMetrics],
    timeline: List[TimelineEvent],
) -> ScheduleResult:
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=sorted(metrics, key=lambda m: m.pid),
        timeline=consolidate(timeline),
    )
    compute_system_metrics(result)
    logger.info(
        "%s finished %d processes at t=%d (avg waiting %.2f, avg turnaround %.2f)",
        algorithm,
        len(result.processes),
        result.system.makespan,
        result.system.avg_waiting_time,
        result.system.avg_turnaround_time,
    )
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    time = 0
    timeline: List[TimelineEvent] = []
    metrics: List[ProcessMetrics] = []

    for p in by_arrival(_working_copies(processes)):
        if time < p.arrival_time:
            time = _idle(timeline, time, p.arrival_time)

        start_time = time
        time = start_time + p.burst_time
        logger.debug("fcfs: P%d runs %d-%d", p.pid, start_time, time)

        timeline.append(TimelineEvent(pid=p.pid, start_time=start_time, end_time=time))
        metrics.append(p.finish(time))

    return _build_result("FCFS", None, metrics, timeline)


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time. A shorter job that
    arrives mid-run waits for the current one to finish.
    """
    pending = deque(by_arrival(_working_copies(processes)))
    ready: List[WorkingProcess] = []

    time = 0
    timeline: List[TimelineEvent] = []
    metrics: List[ProcessMetrics] = []

    while pending or ready:
        _admit(pending, ready, time)

        if not ready:
            # Nothing is ready; jump straight to the next arrival.
            time = _idle(timeline, time, pending[0].arrival_time)
            continue

        p = min(ready, key=shortest_burst_key)
        ready.remove(p)

        start_time = time
        time = start_time + p.burst_time
        logger.debug("sjf: P%d (burst %d) runs %d-%d", p.pid, p.burst_time, start_time, time)

        timeline.append(TimelineEvent(pid=p.pid, start_time=start_time, end_time=time))
        metrics.append(p.finish(time))

    return _build_result("SJF (non-preemptive)", None, metrics, timeline)


def schedule_srtf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).

    The choice is re-evaluated after every time unit, since an arrival or a
    decrement can change which process has the least work left. Idle gaps
    are skipped in one step.
    """
    procs = _working_copies(processes)

    time = 0
    timeline: List[TimelineEvent] = []
    metrics: List[ProcessMetrics] = []

    while len(metrics) < len(procs):
        ready = [p for p in procs if p.arrival_time <= time and p.remaining_time > 0]

        if not ready:
            next_arrival = min(p.arrival_time for p in procs if p.remaining_time > 0)
            time = _idle(timeline, time, next_arrival)
            continue

        current = min(ready, key=shortest_remaining_key)
        current.run_for(1)
        timeline.append(TimelineEvent(pid=current.pid, start_time=time, end_time=time + 1))
        time += 1

        if current.remaining_time == 0:
            logger.debug("srtf: P%d completes at %d", current.pid, time)
            metrics.append(current.finish(time))

    return _build_result("SRTF", None, metrics, timeline)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running are queued ahead of the
    process that was just preempted.
    """
    quantum = parse_quantum(quantum)

    pending = deque(by_arrival(_working_copies(processes)))
    ready: Deque[WorkingProcess] = deque()

    time = 0
    timeline: List[TimelineEvent] = []
    metrics: List[ProcessMetrics] = []

    while pending or ready:
        _admit(pending, ready, time)

        if not ready:
            time = _idle(timeline, time, pending[0].arrival_time)
            continue

        p = ready.popleft()
        run_time = min(quantum, p.remaining_time)
        p.run_for(run_time)

        timeline.append(TimelineEvent(pid=p.pid, start_time=time, end_time=time + run_time))
        time += run_time
        logger.debug("rr: P%d ran %d unit(s), %d left", p.pid, run_time, p.remaining_time)

        # Enqueue any new arrivals that appeared during this slice
        _admit(pending, ready, time)

        if p.remaining_time > 0:
            ready.append(p)
        else:
            metrics.append(p.finish(time))

    return _build_result("Round Robin", quantum, metrics, timeline)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "rr": schedule_rr,
}


def simulate(processes: Sequence[Process], config: RunConfig) -> ScheduleResult:
    """
    Run one validated configuration over a snapshot of the process set.

    Both the configuration and the process set are checked before any
    scheduling state exists, so a rejected run produces no output at all.
    """
    config = config.validated()
    validate_processes(processes)
    func = ALGORITHMS[config.algorithm]
    return func(list(processes), quantum=config.quantum)


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by name. The quantum is only used by
    round-robin.
    """
    return simulate(processes, RunConfig(algorithm=name, quantum=quantum))
