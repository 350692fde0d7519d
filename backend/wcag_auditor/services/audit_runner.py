"""
Audit Runner - Main orchestrator for accessibility audits.

Coordinates the check runner, normalization, categorization, CSV reports
and console output. URLs are checked strictly one after another: each
check owns a full browser instance.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Type

from wcag_auditor.config import Settings, settings as default_settings
from wcag_auditor.errors import AuditError, NoUrlsError, WriteError
from wcag_auditor.logger import logger
from wcag_auditor.schemas.finding import CheckOutcome, Engine, Severity
from wcag_auditor.services.categorizer import Categorizer
from wcag_auditor.services.console import ConsolePresenter
from wcag_auditor.services.normalizer import get_normalizer
from wcag_auditor.services.report_writer import CsvReportWriter
from wcag_auditor.services.runners.axe_runner import AxeCheckRunner
from wcag_auditor.services.runners.base import CheckRunner
from wcag_auditor.services.runners.pa11y_runner import Pa11yCheckRunner

CHECK_RUNNERS: Dict[Engine, Type] = {
    Engine.AXE: AxeCheckRunner,
    Engine.PA11Y: Pa11yCheckRunner,
}


@dataclass
class RunSummary:
    """Outcomes of one run, in the order the URLs were checked."""
    engine: Engine
    outcomes: List[CheckOutcome] = field(default_factory=list)

    def add(self, outcome: CheckOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    def total_by_severity(self) -> Dict[Severity, int]:
        totals: Dict[Severity, int] = {}
        for outcome in self.outcomes:
            for severity, count in outcome.counts_by_severity.items():
                totals[severity] = totals.get(severity, 0) + count
        return totals

    @property
    def critical_total(self) -> int:
        return self.total_by_severity().get(Severity.CRITICAL, 0)

    def exit_code(self) -> int:
        """1 when any critical finding exists (or nothing was checked), else 0."""
        if not self.outcomes:
            return 1
        return 1 if self.critical_total > 0 else 0


class AuditRunner:
    """Orchestrates a complete audit run."""

    def __init__(
        self,
        engine: Engine,
        check_runner: Optional[CheckRunner] = None,
        config: Optional[Settings] = None,
        writer: Optional[CsvReportWriter] = None,
        presenter: Optional[ConsolePresenter] = None,
    ):
        self.settings = config or default_settings
        self.engine = Engine(engine)
        self.check_runner = check_runner or CHECK_RUNNERS[self.engine]()
        self.check_config = self.settings.check_config()
        self.normalizer = get_normalizer(self.engine, self.settings.normalize_options())
        self.categorizer = Categorizer()
        self.writer = writer or CsvReportWriter(self.settings.OUTPUT_DIR)
        self.presenter = presenter or ConsolePresenter()

    async def run(self, urls: Iterable[str]) -> RunSummary:
        """Check every URL in order and print the summary.

        Raises:
            NoUrlsError: if ``urls`` is empty; nothing is checked in that case
        """
        urls = list(urls)
        if not urls:
            raise NoUrlsError()

        logger.info(f"Starting {self.engine.value} accessibility checks for {len(urls)} URL(s)")
        summary = RunSummary(engine=self.engine)

        for url in urls:
            self.presenter.print_progress(f"Checking accessibility for {url}...")
            outcome = await self.check_url(url)
            self.presenter.print_detail(outcome)
            summary.add(outcome)

        self.presenter.print_summary(summary.outcomes, self.engine)
        logger.info(
            f"Run finished: {len(summary.outcomes)} URL(s), {summary.failed_count} failed, "
            f"{summary.critical_total} critical"
        )
        return summary

    async def check_url(self, url: str) -> CheckOutcome:
        """Audit one URL. Failures come back as an outcome, never as an exception."""
        started_at = datetime.now()

        try:
            raw = await self.check_runner.run(url, self.check_config)
            findings = self.normalizer.normalize(raw)
            passed_rules = self.normalizer.passed_rules(raw)
        except AuditError as e:
            logger.warning(f"Check failed for {url}: {e}")
            return self._error_result(url, started_at, e)
        except Exception as e:
            logger.exception(f"Check failed for {url}: {e}")
            return self._error_result(url, started_at, e)

        categories = self.categorizer.categorize(findings, self.engine)

        report_path = None
        write_error = None
        try:
            report_path = self.writer.write(findings, self.writer.report_path(url, self.engine))
        except WriteError as e:
            logger.error(str(e))
            write_error = str(e)

        completed_at = datetime.now()
        return CheckOutcome(
            url=url,
            engine=self.engine,
            findings=tuple(findings),
            counts_by_severity=categories.counts_by_severity,
            counts_by_type=categories.counts_by_type,
            counts_by_tag=categories.counts_by_tag,
            passed_rules=passed_rules,
            report_path=report_path,
            write_error=write_error,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=round((completed_at - started_at).total_seconds(), 2),
        )

    def _error_result(self, url: str, started_at: datetime, error: Exception) -> CheckOutcome:
        """Create error result."""
        completed_at = datetime.now()
        return CheckOutcome(
            url=url,
            engine=self.engine,
            error=str(error) or type(error).__name__,
            error_kind=getattr(error, "kind", "error"),
            hint=getattr(error, "hint", None),
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=round((completed_at - started_at).total_seconds(), 2),
        )
