"""
Categorizer - Severity, record-type and compliance-tag breakdowns.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple

from wcag_auditor.schemas.finding import Engine, Finding, RecordType, Severity

# Buckets always reported for an engine, even when empty
SEVERITY_DOMAINS: Dict[Engine, Tuple[Severity, ...]] = {
    Engine.AXE: (Severity.CRITICAL, Severity.SERIOUS, Severity.WARNING, Severity.NOTICE),
    Engine.PA11Y: (Severity.CRITICAL, Severity.SERIOUS),
}

RECORD_TYPES: Tuple[RecordType, ...] = (RecordType.VIOLATION, RecordType.NEEDS_REVIEW, RecordType.PASS)


@dataclass
class Categories:
    """Counts derived from one URL's findings."""
    counts_by_severity: Dict[Severity, int] = field(default_factory=dict)
    counts_by_type: Dict[RecordType, int] = field(default_factory=dict)
    counts_by_tag: Dict[str, int] = field(default_factory=dict)


class Categorizer:
    """Counts findings; every finding counts independently."""

    def categorize(self, findings: Iterable[Finding], engine: Engine) -> Categories:
        by_severity = {severity: 0 for severity in SEVERITY_DOMAINS[Engine(engine)]}
        by_type = {record_type: 0 for record_type in RECORD_TYPES}
        by_tag: Dict[str, int] = {}

        for finding in findings:
            by_type[finding.record_type] += 1

            # Severity buckets describe violations only
            if finding.record_type is RecordType.VIOLATION:
                by_severity[finding.severity] = by_severity.get(finding.severity, 0) + 1

            for tag in dict.fromkeys(finding.compliance_tags):
                by_tag[tag] = by_tag.get(tag, 0) + 1

        return Categories(
            counts_by_severity=by_severity,
            counts_by_type=by_type,
            counts_by_tag=by_tag,
        )
