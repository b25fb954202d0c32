"""Rich terminal formatter for QualityHub."""

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..display import format_duration, percent_change
from ..models import AnalysisResult, Decision, RiskLevel
from .base import BaseFormatter, ReportContext

RULE = "━" * 50

_LEVEL_STYLE = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold white on red",
}

_LEVEL_ICON = {
    RiskLevel.LOW: "✅",
    RiskLevel.MEDIUM: "⚠️",
    RiskLevel.HIGH: "🔶",
    RiskLevel.CRITICAL: "🔴",
}

_DECISION_BANNER = {
    Decision.PROCEED: "[green bold]✅ PROCEED — Safe to deploy[/green bold]",
    Decision.CAUTION: "[yellow bold]⚠️  CAUTION — Review issues before deploying[/yellow bold]",
    Decision.BLOCK: "[red bold]🛑 BLOCK — Do not deploy, fix critical issues first[/red bold]",
}


def _bar(value: float, width: int = 20) -> str:
    filled = max(0, min(width, round(value / 100 * width)))
    if value >= 80:
        color = "green"
    elif value >= 60:
        color = "yellow"
    else:
        color = "red"
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/{color}]"


def _delta(current: float, previous: float, higher_is_better: bool = True) -> str:
    diff = current - previous
    if abs(diff) < 0.05:
        return " [dim](no change)[/dim]"
    good = diff > 0 if higher_is_better else diff < 0
    color = "green" if good else "red"
    arrow = "▲" if good else "▼"
    sign = "+" if diff > 0 else ""
    return f" [{color}]{arrow} {sign}{diff:.1f}%[/{color}]"


class RichFormatter(BaseFormatter):
    """Terminal view: tests, coverage bars, issues, risk gauge and decision."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result: AnalysisResult, context: ReportContext) -> None:
        self._print(self.console, result, context)

    def format(self, result: AnalysisResult, context: ReportContext) -> str:
        buffer = Console(file=io.StringIO(), record=True, width=100, color_system=None)
        self._print(buffer, result, context)
        return buffer.export_text()

    # -- private helpers --

    def _print(self, console: Console, result: AnalysisResult, context: ReportContext) -> None:
        current, previous = result.current, result.previous
        project, tests, coverage = current.project, current.tests, current.coverage

        console.print()
        console.print("[bold]🔍 QualityHub Analysis[/bold]")
        console.print(f"[dim]{RULE}[/dim]")
        console.print()
        console.print(f"[dim]   Project:  {escape(project.name)}@{escape(project.version)}[/dim]")
        console.print(f"[dim]   Branch:   {escape(project.branch)}[/dim]")
        console.print(f"[dim]   Commit:   {escape(project.commit[:7])}[/dim]")
        if previous is not None:
            baseline = f"{escape(previous.branch)} ({escape(previous.commit[:7])})"
            console.print(f"[dim]   Compared: last run on {baseline}[/dim]")
        else:
            console.print("[dim]   Compared: first run (no history)[/dim]")

        console.print()
        console.print("[bold]   📊 Tests[/bold]")
        if tests.total == 0:
            console.print("[dim]      ℹ️  No test results found[/dim]")
        else:
            icon = "[green]✅[/green]" if tests.failed == 0 else "[red]❌[/red]"
            console.print(
                f"      {icon} {tests.passed}/{tests.total} passed ({tests.pass_rate:.1f}%)"
            )
            if tests.failed > 0:
                console.print(f"[red]      ❌ {tests.failed} failed[/red]")
            if tests.skipped > 0:
                console.print(f"[dim]      ⏭️  {tests.skipped} skipped[/dim]")
        if tests.duration_ms > 0:
            line = f"      ⏱️  Duration: {format_duration(tests.duration_ms)}"
            if previous is not None and previous.duration_ms > 0:
                change = percent_change(tests.duration_ms, previous.duration_ms)
                line += _delta(change, 0, higher_is_better=False)
            console.print(line)

        console.print()
        console.print("[bold]   📈 Coverage[/bold]")
        table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
        table.add_column(style="bold", min_width=14)
        table.add_column()
        table.add_column(justify="right")
        table.add_column()
        for label, value, prev in (
            ("Lines", coverage.lines, previous.coverage_lines if previous else None),
            ("Branches", coverage.branches, previous.coverage_branches if previous else None),
            ("Functions", coverage.functions, previous.coverage_functions if previous else None),
        ):
            delta = _delta(value, prev) if prev is not None else ""
            table.add_row(f"      {label}", _bar(value), f"{value:.1f}%", delta)
        console.print(table)

        console.print()
        if result.issues:
            console.print("[bold]   🚨 Issues Detected[/bold]")
            for issue in result.issues:
                console.print(f"      {issue.icon} {escape(issue.message)}")
                if issue.detail:
                    console.print(f"[dim]         {escape(issue.detail)}[/dim]")
        else:
            console.print("[green]   ✨ No issues detected[/green]")

        style = _LEVEL_STYLE[result.risk_level]
        gauge = (
            f"{_LEVEL_ICON[result.risk_level]} [{style}]{result.risk_score}/100 "
            f"({result.risk_level.value} RISK)[/{style}]"
        )
        console.print()
        console.print(
            Panel(
                f"🎯 Risk Score:  {gauge}\n📋 Decision:    {_DECISION_BANNER[result.decision]}",
                expand=False,
            )
        )

        if context.history_count > 0:
            runs = "run" if context.history_count == 1 else "runs"
            where = f" stored in {context.history_location}" if context.history_location else ""
            console.print(f"[dim]   📁 History: {context.history_count} previous {runs}{where}[/dim]")
        console.print()
