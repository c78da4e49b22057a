from __future__ import annotations

import argparse
import logging
import time
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .config import DEFAULT_QUANTUM, QUANTUM_ALGORITHMS
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .models import Process, ScheduleResult
from .registry import ProcessRegistry
from .workload_io import load_workload

EXIT_REJECTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every scheduling decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srtf, rr).",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by FCFS, SJF, SRTF).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw the Gantt chart as plain text instead of colored blocks.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf srtf rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to define processes and run algorithms.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in four-process sample workload.",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.sample:
        registry = ProcessRegistry()
        registry.add_samples()
        return registry.snapshot()
    return load_workload(args.workload)


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks, highlight=False)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Complete", "Turnaround", "Wait"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
        )

    console.print(proc_table)
    console.print()

    sys = result.system
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{sys.avg_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{sys.avg_turnaround_time:.2f}")
    sys_table.add_row("Makespan", str(sys.makespan))
    sys_table.add_row("Idle time", str(sys.idle_time))
    sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _run_compare(processes: List[Process], algorithms: List[str], quantum: int, console: Console) -> None:
    """
    Run each algorithm on the same workload and print the summary table.
    """
    results = [
        run_algorithm(alg, processes, quantum=quantum if alg.lower() in QUANTUM_ALGORITHMS else None)
        for alg in algorithms
    ]

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Makespan", justify="right")

    for result in results:
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.system.avg_waiting_time:.2f}",
            f"{result.system.avg_turnaround_time:.2f}",
            str(result.system.makespan),
        )

    console.print(summary_table)


def _animate_result(result: ScheduleResult, console: Console, delay: float) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    timeline = result.timeline
    makespan = result.system.makespan
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        ev = next(e for e in timeline if e.start_time <= t < e.end_time)
        if ev.is_idle:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            bar = "█" * (t - ev.start_time + 1)
            console.print(f"t={t:2d}: {ev.label} [green]{bar}[/green]")
        time.sleep(delay)


def _print_processes(registry: ProcessRegistry, console: Console) -> None:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Arrive", justify="right")
    table.add_column("Burst", justify="right")
    for p in registry:
        table.add_row(p.label, str(p.arrival_time), str(p.burst_time))
    if not len(registry):
        table.add_row("", "No processes added.", "")
    console.print(table)


def _interactive_menu(default_quantum: int, console: Console) -> None:
    registry = ProcessRegistry()
    registry.add_samples()
    alg_choices = list(ALGORITHMS)

    while True:
        console.print("\n[bold cyan]Scheduler Menu[/bold cyan] [dim](q to quit)[/dim]")
        console.print(f"[bold]Processes defined:[/bold] [green]{len(registry)}[/green]")
        console.print("  [yellow]a[/yellow]. Add a process")
        console.print("  [yellow]l[/yellow]. List processes")
        console.print("  [yellow]s[/yellow]. Add sample processes")
        console.print("  [yellow]r[/yellow]. Reset")
        for idx, alg in enumerate(alg_choices, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. Run [white]{alg}[/white]")
        console.print(f"  [yellow]c[/yellow]. Compare all")

        choice = input("Choice: ").strip().lower()
        if choice in {"q", "quit", "exit"}:
            return

        try:
            if choice == "a":
                arrival_in = input(f"Arrival time for P{registry.next_pid}: ").strip()
                burst_in = input(f"Burst time for P{registry.next_pid}: ").strip()
                try:
                    arrival, burst = int(arrival_in), int(burst_in)
                except ValueError:
                    console.print("[red]Arrival and burst time must be integers.[/red]")
                    continue
                p = registry.add(arrival, burst)
                console.print(f"[green]Added {p.label}.[/green]")
            elif choice == "l":
                _print_processes(registry, console)
            elif choice == "s":
                registry.add_samples()
                _print_processes(registry, console)
            elif choice == "r":
                registry.reset()
                console.print("[yellow]Processes cleared.[/yellow]")
            elif choice == "c":
                _run_compare(registry.snapshot(), alg_choices, default_quantum, console)
            elif choice.isdigit() and 1 <= int(choice) <= len(alg_choices):
                alg = alg_choices[int(choice) - 1]
                quantum = None
                if alg in QUANTUM_ALGORITHMS:
                    q_in = input(f"Quantum for {alg} [{default_quantum}]: ").strip()
                    quantum = q_in or default_quantum
                result = run_algorithm(alg, registry.snapshot(), quantum=quantum)
                _print_result(result, console)
            else:
                console.print("[red]Invalid selection.[/red]")
        except SchedulerError as exc:
            console.print(f"[red]Error: {exc}[/red]")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = _load_processes(args)
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, console, delay=args.step_delay)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            processes = _load_processes(args)
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "menu":
            _interactive_menu(args.quantum, console)
            return 0
    except (SchedulerError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return EXIT_REJECTED

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
