"""
Pa11y Normalizer - One Finding per pa11y issue, no element fan-out.
"""
from typing import List, Mapping, Tuple

from wcag_auditor.schemas.finding import Engine, Finding, RecordType, Severity
from wcag_auditor.services.normalizers.base import FindingNormalizer, text_or_none

# pa11y issue type -> (record type, severity)
ISSUE_TYPE_MAP = {
    "error": (RecordType.VIOLATION, Severity.CRITICAL),
    "warning": (RecordType.VIOLATION, Severity.SERIOUS),
    "notice": (RecordType.NEEDS_REVIEW, Severity.NOTICE),
}


class Pa11yNormalizer(FindingNormalizer):
    """Normalizes the flat ``issues`` list produced by pa11y."""

    engine = Engine.PA11Y

    def _normalize(self, raw: Mapping) -> List[Finding]:
        issues = self._require_list(raw, "issues")

        findings = []
        for issue in issues:
            if not isinstance(issue, Mapping):
                continue
            issue_type = str(issue.get("type") or "").strip().lower()
            record_type, severity = ISSUE_TYPE_MAP.get(
                issue_type, (RecordType.NEEDS_REVIEW, Severity.UNKNOWN)
            )
            if record_type is RecordType.NEEDS_REVIEW and not self.options.include_incomplete:
                continue

            extras = issue.get("runnerExtras")
            if not isinstance(extras, Mapping):
                extras = {}

            findings.append(Finding(
                record_type=record_type,
                severity=severity,
                rule_id=text_or_none(issue.get("code")),
                description=text_or_none(issue.get("message")),
                help_text=text_or_none(extras.get("help")),
                help_url=text_or_none(extras.get("helpUrl")),
                compliance_tags=self._tags(issue),
                element_html=text_or_none(issue.get("context")),
                selector=text_or_none(issue.get("selector")),
                source_engine=self.engine,
                runner=text_or_none(issue.get("runner")),
            ))
        return findings

    def _tags(self, issue: Mapping) -> Tuple[str, ...]:
        """htmlcs codes start with the standard, e.g. ``WCAG2AA.Principle1...``."""
        code = issue.get("code")
        if isinstance(code, str) and "." in code:
            return self.filter_tags([code.split(".", 1)[0].lower()])
        return ()
