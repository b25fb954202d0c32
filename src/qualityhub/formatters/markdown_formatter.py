"""Markdown formatter — body for a pull/merge request comment."""

from typing import List

from ..display import delta_string, format_duration, percent_change
from ..models import AnalysisResult, Decision, Severity
from .base import BaseFormatter, ReportContext

DECISION_EMOJI = {
    Decision.PROCEED: "✅",
    Decision.CAUTION: "⚠️",
    Decision.BLOCK: "🛑",
}

DECISION_TEXT = {
    Decision.PROCEED: "Safe to deploy",
    Decision.CAUTION: "Review issues before deploying",
    Decision.BLOCK: "Do not deploy, fix critical issues first",
}

SEVERITY_BADGE = {
    Severity.CRITICAL: "🔴",
    Severity.WARNING: "🟡",
    Severity.INFO: "ℹ️",
}


class MarkdownFormatter(BaseFormatter):
    """Summary table plus a collapsible issue list."""

    def render(self, result: AnalysisResult, context: ReportContext) -> None:
        print(self.format(result, context))

    def format(self, result: AnalysisResult, context: ReportContext) -> str:
        tests = result.current.tests
        coverage = result.current.coverage
        previous = result.previous
        project = result.current.project

        lines: List[str] = [
            f"## {DECISION_EMOJI[result.decision]} QualityHub — "
            f"Risk Score: {result.risk_score}/100 ({result.risk_level.value})",
            "",
            f"**{DECISION_TEXT[result.decision]}**",
            "",
            "| Metric | Value | Delta |",
            "|--------|-------|-------|",
        ]

        if tests.total > 0:
            icon = "✅" if tests.failed == 0 else "❌"
            fail_delta = "—"
            if previous and tests.failed != previous.tests_failed:
                diff = tests.failed - previous.tests_failed
                fail_delta = f"{'+' if diff > 0 else ''}{diff} failed"
            lines.append(
                f"| {icon} Tests | {tests.passed}/{tests.total} passed "
                f"({tests.pass_rate:.1f}%) | {fail_delta} |"
            )
            if tests.failed > 0:
                lines.append(f"| ❌ Failed | {tests.failed} | |")
            if tests.skipped > 0:
                lines.append(f"| ⏭️ Skipped | {tests.skipped} | |")

        for icon, label, value, prev_value in (
            ("📈", "Line Coverage", coverage.lines, previous.coverage_lines if previous else None),
            ("🔀", "Branch Coverage", coverage.branches,
             previous.coverage_branches if previous else None),
            ("⚙️", "Function Coverage", coverage.functions,
             previous.coverage_functions if previous else None),
        ):
            delta = "—"
            if prev_value is not None:
                delta = delta_string(value, prev_value) or "—"
            lines.append(f"| {icon} {label} | {value:.1f}% | {delta} |")

        if tests.duration_ms > 0:
            duration_delta = "—"
            if previous and previous.duration_ms > 0:
                pct = percent_change(tests.duration_ms, previous.duration_ms)
                if abs(pct) >= 1:
                    duration_delta = f"{'+' if pct > 0 else ''}{pct:.0f}%"
            lines.append(
                f"| ⏱️ Duration | {format_duration(tests.duration_ms)} | {duration_delta} |"
            )

        if result.issues:
            count = len(result.issues)
            lines += [
                "",
                "<details>",
                f"<summary>🚨 {count} issue{'s' if count > 1 else ''} detected</summary>",
                "",
            ]
            for issue in result.issues:
                lines.append(f"- {SEVERITY_BADGE[issue.severity]} **{issue.message}**")
                if issue.detail:
                    lines.append(f"  - _{issue.detail}_")
            lines += ["", "</details>"]

        lines += [
            "",
            "---",
            f"<sub>Generated by QualityHub · {project.branch}@{project.commit[:7]}</sub>",
        ]
        return "\n".join(lines)
