"""
Console Presenter - Per-URL detail view and cross-URL summary table.

Styling is a capability: with ``styled=False`` the same text is produced
without ANSI codes. Cells are padded and truncated before they are colored,
so escape sequences never affect alignment.
"""
import sys
from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from colorama import Fore, Style

from wcag_auditor.schemas.finding import CheckOutcome, Engine, Finding, RecordType, Severity
from wcag_auditor.services.categorizer import SEVERITY_DOMAINS

URL_WIDTH = 40
CELL_WIDTH = 12
RULE_WIDTH = 100
FAILED_CELL = "FAILED"
PLACEHOLDER_CELL = "-"

SEVERITY_COLORS = {
    Severity.CRITICAL: Fore.RED,
    Severity.SERIOUS: Fore.YELLOW,
    Severity.WARNING: Fore.YELLOW,
    Severity.NOTICE: Fore.BLUE,
    Severity.NONE: Fore.GREEN,
    Severity.UNKNOWN: Fore.MAGENTA,
}

# Column headings per engine, in the engine's own vocabulary
SEVERITY_LABELS: Dict[Engine, Dict[Severity, str]] = {
    Engine.AXE: {
        Severity.CRITICAL: "Critical",
        Severity.SERIOUS: "Serious",
        Severity.WARNING: "Moderate",
        Severity.NOTICE: "Minor",
        Severity.UNKNOWN: "Unknown",
    },
    Engine.PA11Y: {
        Severity.CRITICAL: "Errors",
        Severity.SERIOUS: "Warnings",
        Severity.UNKNOWN: "Unknown",
    },
}
REVIEW_LABELS = {Engine.AXE: "Review", Engine.PA11Y: "Notices"}

LEGENDS = {
    Engine.AXE: [
        (Severity.CRITICAL, "Critical/Serious", "Violations that block users; these fail WCAG compliance"),
        (Severity.WARNING, "Moderate/Minor", "Violations with lower user impact; still worth fixing"),
        (Severity.NOTICE, "Review", "Checks axe could not decide; verify manually"),
    ],
    Engine.PA11Y: [
        (Severity.CRITICAL, "Errors", "These are critical issues that fail WCAG compliance"),
        (Severity.SERIOUS, "Warnings", "These are potential issues that should be reviewed"),
        (Severity.NOTICE, "Notices", "These are informational items that may be worth checking"),
    ],
}


def fit(text: str, width: int) -> str:
    """Pad or truncate to exactly ``width`` characters, keeping one space gap."""
    if len(text) > width - 1:
        text = text[: max(width - 4, 0)] + "..."
    return text.ljust(width)


def indent_block(text: str, prefix: str) -> List[str]:
    """Every line of a multi-line value as an indented continuation line."""
    lines = text.strip("\n").splitlines()
    return [prefix + line.rstrip() if line.strip() else "" for line in lines]


class ConsolePresenter:
    """Renders audit outcomes for humans."""

    def __init__(self, styled: bool = True, stream: Optional[TextIO] = None):
        self.styled = styled
        self.stream = stream

    def _out(self) -> TextIO:
        return self.stream or sys.stdout

    def paint(self, text: str, *codes: str) -> str:
        if not self.styled or not codes:
            return text
        return "".join(codes) + text + Style.RESET_ALL

    def emit(self, text: str) -> None:
        out = self._out()
        try:
            print(text, file=out)
        except UnicodeEncodeError:
            encoding = getattr(out, "encoding", None) or "utf-8"
            print(text.encode(encoding, "backslashreplace").decode(encoding), file=out)

    def print_progress(self, text: str) -> None:
        self.emit(self.paint(f"\n{text}", Fore.BLUE))

    # ----- per-URL detail -----

    def print_detail(self, outcome: CheckOutcome) -> None:
        self.emit(self.format_detail(outcome))

    def format_detail(self, outcome: CheckOutcome) -> str:
        lines = ["", self.paint(f"Accessibility check results for {outcome.url}", Style.BRIGHT)]

        if outcome.failed:
            lines.append(self.paint(f"✗ Check failed ({outcome.error_kind or 'error'}): {outcome.error}", Fore.RED))
            if outcome.hint:
                lines.append(self.paint("Try the following:", Fore.YELLOW))
                lines.extend(indent_block(outcome.hint, "  "))
            return "\n".join(lines)

        lines.append(self._count_line(outcome))

        issues = [f for f in outcome.findings if f.record_type is not RecordType.PASS]
        if not issues:
            lines.append(self.paint("\n✓ No accessibility issues found!", Fore.GREEN))
        else:
            lines.append(self.paint(f"\nIssues found ({len(issues)}):", Fore.YELLOW))
            for index, finding in enumerate(issues, start=1):
                lines.extend(self._finding_lines(index, finding))

        passes = outcome.counts_by_type.get(RecordType.PASS, 0)
        if passes or outcome.passed_rules:
            lines.append(self.paint(
                f"\n✓ Passed {outcome.passed_rules or passes} accessibility checks", Fore.GREEN
            ))

        if outcome.report_path:
            lines.append(self.paint(f"\nResults have been saved to: {outcome.report_path}", Fore.GREEN))
        elif outcome.write_error:
            lines.append(self.paint(f"\nReport not saved: {outcome.write_error}", Fore.RED))

        return "\n".join(lines)

    def _count_line(self, outcome: CheckOutcome) -> str:
        labels = SEVERITY_LABELS[outcome.engine]
        parts = []
        for severity, count in outcome.counts_by_severity.items():
            label = labels.get(severity, severity.value.title()).lower()
            color = SEVERITY_COLORS[severity] if count else Fore.GREEN
            parts.append(f"{self.paint(str(count), color)} {label}")
        review_label = REVIEW_LABELS[outcome.engine].lower()
        review = outcome.review_count
        parts.append(f"{self.paint(str(review), Fore.BLUE if review else Fore.GREEN)} {review_label}")

        total = outcome.violation_count
        return f"Found {self.paint(str(total), Fore.RED if total else Fore.GREEN)} violations: " + ", ".join(parts)

    def _finding_lines(self, index: int, finding: Finding) -> List[str]:
        color = SEVERITY_COLORS[finding.severity]
        title = finding.help_text or finding.description or ""
        rule = f" ({finding.rule_id})" if finding.rule_id else ""
        lines = [
            "",
            f"{index}. " + self.paint(f"{finding.severity.value.upper()}", color)
            + f" {finding.record_type.value}: {title}{rule}",
        ]
        if finding.help_text and finding.description:
            lines.append(f"   Description: {finding.description}")
        if finding.compliance_tags:
            lines.append(self.paint(f"   Tags: {', '.join(finding.compliance_tags)}", Style.DIM))
        if finding.selector:
            lines.append(f"   Selector: {finding.selector}")
        if finding.runner:
            lines.append(f"   Runner: {finding.runner}")
        if finding.element_html:
            lines.append(self.paint(f"   Element: {finding.element_html}", Style.DIM))
        if finding.failure_detail:
            lines.extend(self.paint(line, Fore.RED) if line else line
                         for line in indent_block(finding.failure_detail, "     "))
        if finding.help_url:
            lines.append(f"   More info: {finding.help_url}")
        return lines

    # ----- cross-URL summary -----

    def print_summary(self, outcomes: Sequence[CheckOutcome], engine: Engine) -> None:
        self.emit(self.format_summary(outcomes, engine))

    def summary_columns(self, outcomes: Sequence[CheckOutcome], engine: Engine) -> List[Severity]:
        """Engine domain plus any extra severity seen in an outcome."""
        columns = list(SEVERITY_DOMAINS[engine])
        for outcome in outcomes:
            for severity in outcome.counts_by_severity:
                if severity not in columns:
                    columns.append(severity)
        return columns

    def format_summary(self, outcomes: Sequence[CheckOutcome], engine: Engine) -> str:
        engine = Engine(engine)
        columns = self.summary_columns(outcomes, engine)
        labels = SEVERITY_LABELS[engine]
        width = max(RULE_WIDTH, URL_WIDTH + CELL_WIDTH * (len(columns) + 2))
        rule = self.paint("─" * width, Style.DIM)

        heading = fit("URL", URL_WIDTH) + fit("Issues", CELL_WIDTH)
        heading += "".join(fit(labels.get(s, s.value.title()), CELL_WIDTH) for s in columns)
        heading += REVIEW_LABELS[engine]

        lines = ["", self.paint("=== Accessibility Audit Summary ===", Fore.BLUE), rule,
                 self.paint(heading, Fore.YELLOW), rule]

        totals = {severity: 0 for severity in columns}
        total_issues = total_review = failed = 0
        for outcome in outcomes:
            if outcome.failed:
                failed += 1
                lines.append(self._failed_row(outcome, len(columns)))
                continue
            lines.append(self._row(outcome.url, outcome.issue_count,
                                   [outcome.severity_count(s) for s in columns], columns, outcome.review_count))
            total_issues += outcome.issue_count
            total_review += outcome.review_count
            for severity in columns:
                totals[severity] += outcome.severity_count(severity)

        lines.append(rule)
        lines.append(self._row("TOTAL", total_issues, [totals[s] for s in columns], columns, total_review))
        lines.append(rule)

        lines.append("\n" + self.paint("Issue Categories:", Style.BRIGHT))
        for severity, label, text in LEGENDS[engine]:
            lines.append(self.paint(label, SEVERITY_COLORS[severity]) + f" - {text}")

        if failed:
            lines.append(self.paint(f"\n✗ {failed} of {len(outcomes)} URL(s) could not be checked", Fore.RED))
        else:
            lines.append(self.paint(f"\nAll {engine.value} accessibility checks completed!", Fore.GREEN))
        return "\n".join(lines)

    def _row(self, label: str, issues: int, counts: List[int],
             columns: List[Severity], review: int) -> str:
        cells = [fit(label, URL_WIDTH), self._count_cell(issues, Fore.RED)]
        for severity, count in zip(columns, counts):
            cells.append(self._count_cell(count, SEVERITY_COLORS[severity]))
        cells.append(self._count_cell(review, Fore.BLUE, width=None))
        return "".join(cells)

    def _count_cell(self, count: int, color: str, width: Optional[int] = CELL_WIDTH) -> str:
        text = fit(str(count), width) if width else str(count)
        return self.paint(text, color if count > 0 else Fore.GREEN)

    def _failed_row(self, outcome: CheckOutcome, severity_columns: int) -> str:
        cells: Tuple[str, ...] = (fit(outcome.url, URL_WIDTH), self.paint(fit(FAILED_CELL, CELL_WIDTH), Fore.RED))
        placeholders = [fit(PLACEHOLDER_CELL, CELL_WIDTH)] * severity_columns + [PLACEHOLDER_CELL]
        return "".join(cells) + self.paint("".join(placeholders), Style.DIM)
