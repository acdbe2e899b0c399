from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import run_config
from .config import DEFAULT_PRIORITY, DEFAULT_QUANTUM, SimulationConfig
from .errors import InvalidInput, UnknownAlgorithm
from .export import default_export_name, export_json
from .gantt import build_rich_gantt, process_color
from .metrics import summarize
from .models import AlgorithmKind, Process, SchedulingResult
from .validation import validate_processes, validate_quantum
from .workload_io import DEFAULT_WORKLOAD, load_workload

logger = logging.getLogger(__name__)

ALGORITHM_IDS = [kind.value for kind in AlgorithmKind]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, RR, Priority, Priority-preemptive).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHM_IDS)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in demo workload).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}; ignored by the others).",
    )
    run_parser.add_argument(
        "--default-priority",
        type=int,
        default=None,
        help="Priority assumed for processes that have none. Without it, priority algorithms reject such workloads.",
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
        "--export",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Write the result as JSON (default name: scheduling-results-<algorithm>.json).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in demo workload).",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_IDS,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_IDS)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument(
        "--default-priority",
        type=int,
        default=None,
        help="Priority assumed for processes that have none. Without it, priority algorithms reject such workloads.",
    )

    subparsers.add_parser("list", help="List the available algorithms.")

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load(workload: Optional[str]) -> List[Process]:
    if workload is None:
        logger.info("no workload given, using the built-in demo workload")
        return list(DEFAULT_WORKLOAD)
    return load_workload(Path(workload))


def _build_config(algorithm: str, args: argparse.Namespace) -> SimulationConfig:
    default_priority = DEFAULT_PRIORITY if args.default_priority is None else args.default_priority
    return SimulationConfig.build(algorithm, args.quantum, default_priority)


def _print_result(result: SchedulingResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.intervals)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process results (completion order)", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.process_results:
        proc_table.add_row(
            f"[{process_color(p.pid)}]{p.pid}[/]",
            str(p.arrival_time),
            str(p.burst_time),
            "" if p.priority is None else str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize(result)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Total time", str(result.total_time))
    if result.system:
        sys = result.system
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _animate_result(result: SchedulingResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    if not result.intervals:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Simulating {result.algorithm.label}[/bold] (duration {result.total_time} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(result.total_time):
        running = next((iv for iv in result.intervals if iv.start_time <= t < iv.end_time), None)
        if running is None:
            console.print(f"t={t:2d}: [dim]\\[idle][/dim]")
        else:
            bar = "█" * (t - running.start_time + 1)
            color = process_color(running.pid)
            console.print(f"t={t:2d}: {running.pid} [{color}]{bar}[/]")
        time.sleep(delay)


def _run(args: argparse.Namespace, console: Console) -> int:
    validate_quantum(args.quantum)
    config = _build_config(args.algorithm, args)
    processes = _load(args.workload)
    validate_processes(processes, config.algorithm, require_priority=args.default_priority is None)

    result = run_config(config, processes)
    if args.step:
        try:
            _animate_result(result, delay=args.step_delay, console=console)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")
    _print_result(result, console)

    if args.export is not None:
        path = export_json(result, args.export or default_export_name(result))
        console.print(f"[green]Results written to {path}[/green]")
    return 0


def _compare(args: argparse.Namespace, console: Console) -> int:
    validate_quantum(args.quantum)
    configs = [_build_config(alg, args) for alg in args.algorithms]
    processes = _load(args.workload)
    for config in configs:
        validate_processes(processes, config.algorithm, require_priority=args.default_priority is None)

    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Total time", justify="right")

    for config in configs:
        result = run_config(config, processes)
        summary = summarize(result)
        summary_table.add_row(
            result.algorithm.label,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            str(result.total_time),
        )

    console.print(summary_table)
    return 0


def _list(console: Console) -> int:
    table = Table(title="Algorithms", box=box.SIMPLE_HEAVY)
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Preemptive", justify="center")
    for kind in AlgorithmKind:
        preemptive = kind in (AlgorithmKind.ROUND_ROBIN, AlgorithmKind.PRIORITY_PREEMPTIVE)
        table.add_row(kind.value, kind.label, "yes" if preemptive else "no")
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            return _run(args, console)
        if args.command == "compare":
            return _compare(args, console)
        if args.command == "list":
            return _list(console)
    except (InvalidInput, UnknownAlgorithm) as exc:
        logger.debug("command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2
    except OSError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
