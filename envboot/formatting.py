"""Console rendering of reconciliation reports."""

from __future__ import annotations

import json
from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import InstallOutcome, InstallStatus, ReconciliationReport

_STATUS_STYLE = {
    InstallStatus.ALREADY_PRESENT: "dim",
    InstallStatus.INSTALLED: "bold green",
    InstallStatus.FAILED: "bold red",
}


def format_outcome(outcome: InstallOutcome) -> str:
    pkg = outcome.package
    label = pkg.name if pkg.name == pkg.identifier else f"{pkg.name} ({pkg.identifier})"
    line = f"[{outcome.status.value}] {label}"
    if outcome.detail:
        line += f": {outcome.detail}"
    return line


def format_summary(report: ReconciliationReport) -> str:
    counts = report.counts()
    parts = ", ".join(f"{k}={v}" for k, v in counts.items())
    return f"{len(report)} package(s): {parts}; failures: {report.failure_count}"


def format_report(report: ReconciliationReport) -> str:
    lines: List[str] = [format_outcome(o) for o in report]
    lines.append(format_summary(report))
    return "\n".join(lines)


def report_to_json(report: ReconciliationReport) -> str:
    payload = report.to_dict()
    payload["failure_count"] = report.failure_count
    return json.dumps(payload, ensure_ascii=False, indent=2)


def render_rich(report: ReconciliationReport, console: Console | None = None) -> None:
    console = console or Console()

    table = Table(title="Packages", box=box.SIMPLE_HEAD)
    table.add_column("Package", style="bold")
    table.add_column("Identifier")
    table.add_column("Kind")
    table.add_column("Status")
    table.add_column("Detail")

    if not len(report):
        table.add_row("-", "no packages in profile", "-", "-", "-")

    for o in report:
        table.add_row(
            escape(o.package.name),
            o.package.identifier,
            o.package.kind.value,
            f"[{_STATUS_STYLE[o.status]}]{o.status.value}[/]",
            escape(o.detail or ""),
        )
    console.print(table)

    style = "bold red" if report.failure_count else "bold green"
    console.print(format_summary(report), style=style)
