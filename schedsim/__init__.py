"""
CPU scheduling simulator.

Simulates FCFS, SJF, SRTF and Round Robin on a single CPU and reports the
Gantt timeline plus per-process and average waiting/turnaround times.
"""

from .algorithms import run_algorithm, simulate
from .config import RunConfig
from .errors import InvalidConfiguration, InvalidInput, SchedulerError
from .models import Process, ProcessMetrics, ScheduleResult, TimelineEvent
from .registry import ProcessRegistry

__all__ = [
    "InvalidConfiguration",
    "InvalidInput",
    "Process",
    "ProcessMetrics",
    "ProcessRegistry",
    "RunConfig",
    "ScheduleResult",
    "SchedulerError",
    "TimelineEvent",
    "run_algorithm",
    "simulate",
]
