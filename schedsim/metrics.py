from __future__ import annotations

from typing import List

from .errors import InvalidInput
from .models import ProcessMetrics, ScheduleResult, SystemMetrics
from .timeline import busy_time


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return average waiting and turnaround time, rounded for display.
    """
    if not processes:
        raise InvalidInput("Cannot average metrics over an empty process set")

    n = len(processes)
    return {
        "avg_waiting": round(sum(p.waiting_time for p in processes) / n, 2),
        "avg_turnaround": round(sum(p.turnaround_time for p in processes) / n, 2),
    }


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and the final timeline.
    """
    summary = summarize_process_metrics(result.processes)

    makespan = max(p.completion_time for p in result.processes)
    cpu_busy_time = busy_time(result.timeline)

    system = SystemMetrics(
        avg_waiting_time=summary["avg_waiting"],
        avg_turnaround_time=summary["avg_turnaround"],
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        idle_time=makespan - cpu_busy_time,
        throughput=len(result.processes) / makespan,
        cpu_utilization=cpu_busy_time / makespan,
    )
    result.system = system
    return system
