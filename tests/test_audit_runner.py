"""Tests for the audit orchestrator."""
import csv
import os

import pytest

from wcag_auditor.errors import AnalysisTimeout, NavigationTimeout, NoUrlsError, WriteError
from wcag_auditor.schemas.finding import Engine, Severity
from wcag_auditor.services.audit_runner import AuditRunner, RunSummary
from wcag_auditor.services.report_writer import CsvReportWriter


class FailingWriter(CsvReportWriter):
    def write(self, findings, path):
        raise WriteError(path, "Permission denied")


@pytest.mark.asyncio
async def test_empty_url_list_fails_before_any_check(scripted_runner, audit_settings, plain_presenter):
    runner = scripted_runner({})
    audit = AuditRunner(Engine.AXE, check_runner=runner, config=audit_settings, presenter=plain_presenter)

    with pytest.raises(NoUrlsError):
        await audit.run([])

    assert runner.calls == []


@pytest.mark.asyncio
async def test_urls_processed_in_order(scripted_runner, audit_settings, plain_presenter, axe_result):
    urls = ["https://a.example", "https://b.example", "https://c.example"]
    runner = scripted_runner({url: axe_result for url in urls})
    audit = AuditRunner(Engine.AXE, check_runner=runner, config=audit_settings, presenter=plain_presenter)

    summary = await audit.run(urls)

    assert runner.calls == urls
    assert [o.url for o in summary.outcomes] == urls


@pytest.mark.asyncio
async def test_check_url_builds_outcome_and_report(scripted_runner, audit_settings, plain_presenter, axe_result):
    url = "https://example.com"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: axe_result}),
                        config=audit_settings, presenter=plain_presenter)

    outcome = await audit.check_url(url)

    assert not outcome.failed
    assert len(outcome.findings) == 4
    assert outcome.counts_by_severity[Severity.CRITICAL] == 2
    assert outcome.counts_by_tag["wcag2a"] == 3
    assert outcome.passed_rules == 2
    assert outcome.report_path.startswith(audit_settings.OUTPUT_DIR)
    with open(outcome.report_path, encoding="utf-8", newline="") as f:
        assert len(list(csv.reader(f))) == 5


@pytest.mark.asyncio
async def test_runner_failure_does_not_stop_the_run(scripted_runner, audit_settings, plain_presenter, axe_result):
    urls = ["https://down.example", "https://example.com"]
    runner = scripted_runner({
        urls[0]: NavigationTimeout(urls[0], 60),
        urls[1]: axe_result,
    })
    audit = AuditRunner(Engine.AXE, check_runner=runner, config=audit_settings, presenter=plain_presenter)

    summary = await audit.run(urls)

    failed, ok = summary.outcomes
    assert runner.calls == urls
    assert failed.failed
    assert failed.error_kind == "navigation_timeout"
    assert "internet connection" in failed.hint
    assert failed.findings == ()
    assert failed.counts_by_severity == {}
    assert not ok.failed
    assert summary.failed_count == 1

    output = plain_presenter.stream.getvalue()
    assert "FAILED" in output


@pytest.mark.asyncio
async def test_unexpected_exception_is_captured(scripted_runner, audit_settings, plain_presenter):
    url = "https://example.com"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: RuntimeError("browser crashed")}),
                        config=audit_settings, presenter=plain_presenter)

    outcome = await audit.check_url(url)

    assert outcome.error == "browser crashed"
    assert outcome.error_kind == "error"


@pytest.mark.asyncio
async def test_analysis_timeout_classified(scripted_runner, audit_settings, plain_presenter):
    url = "https://slow.example"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: AnalysisTimeout(url, 30)}),
                        config=audit_settings, presenter=plain_presenter)

    outcome = await audit.check_url(url)

    assert outcome.error_kind == "analysis_timeout"
    assert "30s" in outcome.error


@pytest.mark.asyncio
async def test_malformed_result_becomes_failed_outcome(scripted_runner, audit_settings, plain_presenter):
    url = "https://example.com"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: {"passes": []}}),
                        config=audit_settings, presenter=plain_presenter)

    outcome = await audit.check_url(url)

    assert outcome.failed
    assert outcome.error_kind == "malformed_result"


@pytest.mark.asyncio
async def test_write_error_is_reported_and_run_continues(scripted_runner, audit_settings, plain_presenter, axe_result):
    urls = ["https://a.example", "https://b.example"]
    runner = scripted_runner({url: axe_result for url in urls})
    audit = AuditRunner(Engine.AXE, check_runner=runner, config=audit_settings, presenter=plain_presenter,
                        writer=FailingWriter(audit_settings.OUTPUT_DIR))

    summary = await audit.run(urls)

    assert runner.calls == urls
    for outcome in summary.outcomes:
        assert not outcome.failed
        assert outcome.report_path is None
        assert "Permission denied" in outcome.write_error
    assert "Report not saved" in plain_presenter.stream.getvalue()


@pytest.mark.asyncio
async def test_exit_code_reflects_critical_findings(scripted_runner, audit_settings, plain_presenter, axe_result, pa11y_result):
    clean = {"violations": [], "incomplete": []}
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({"https://ok": clean}),
                        config=audit_settings, presenter=plain_presenter)
    assert (await audit.run(["https://ok"])).exit_code() == 0

    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({"https://bad": axe_result}),
                        config=audit_settings, presenter=plain_presenter)
    assert (await audit.run(["https://bad"])).exit_code() == 1

    audit = AuditRunner(Engine.PA11Y, check_runner=scripted_runner({"https://bad": pa11y_result}),
                        config=audit_settings, presenter=plain_presenter)
    assert (await audit.run(["https://bad"])).exit_code() == 1


@pytest.mark.asyncio
async def test_failed_url_alone_exits_zero(scripted_runner, audit_settings, plain_presenter):
    url = "https://down.example"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: NavigationTimeout(url, 5)}),
                        config=audit_settings, presenter=plain_presenter)

    summary = await audit.run([url])

    assert summary.exit_code() == 0


@pytest.mark.asyncio
async def test_reports_do_not_overwrite_each_other(scripted_runner, audit_settings, plain_presenter, axe_result):
    url = "https://example.com"
    audit = AuditRunner(Engine.AXE, check_runner=scripted_runner({url: axe_result}),
                        config=audit_settings, presenter=plain_presenter)

    first = await audit.check_url(url)
    second = await audit.check_url(url)

    assert first.report_path != second.report_path
    assert os.path.exists(first.report_path) and os.path.exists(second.report_path)


def test_run_summary_totals():
    summary = RunSummary(engine=Engine.AXE)
    assert summary.exit_code() == 1
    assert summary.total_by_severity() == {}


@pytest.mark.asyncio
async def test_unencodable_element_html_does_not_stop_the_run(scripted_runner, audit_settings, plain_presenter, axe_result):
    bad, ok = "https://bad.example", "https://example.com"
    raw = {"violations": [{"id": "image-alt", "impact": "critical", "nodes": [{"html": "<p>\ud83d</p>"}]}]}
    runner = scripted_runner({bad: raw, ok: axe_result})
    audit = AuditRunner(Engine.AXE, check_runner=runner, config=audit_settings, presenter=plain_presenter)

    summary = await audit.run([bad, ok])

    assert runner.calls == [bad, ok]
    first, second = summary.outcomes
    assert first.write_error is None
    with open(first.report_path, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 2
    assert not second.failed
