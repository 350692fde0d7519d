"""
Axe Normalizer - Fan out axe-core rule groups into one Finding per node.
"""
from typing import List, Mapping, Optional

from wcag_auditor.schemas.finding import Engine, Finding, RecordType, Severity
from wcag_auditor.services.normalizers.base import FindingNormalizer, text_or_none

# axe-core impact vocabulary -> canonical severity
IMPACT_MAP = {
    "critical": Severity.CRITICAL,
    "serious": Severity.SERIOUS,
    "moderate": Severity.WARNING,
    "minor": Severity.NOTICE,
}


def map_impact(impact) -> Severity:
    """Null, missing or unrecognised impacts are Unknown."""
    if not isinstance(impact, str):
        return Severity.UNKNOWN
    return IMPACT_MAP.get(impact.strip().lower(), Severity.UNKNOWN)


class AxeNormalizer(FindingNormalizer):
    """Normalizes ``axe.run()`` results (violations / incomplete / passes)."""

    engine = Engine.AXE

    def _normalize(self, raw: Mapping) -> List[Finding]:
        violations = self._require_list(raw, "violations")

        findings = self._expand(violations, RecordType.VIOLATION)
        if self.options.include_incomplete:
            findings.extend(self._expand(self._optional_list(raw, "incomplete"), RecordType.NEEDS_REVIEW))
        if self.options.include_passes:
            findings.extend(self._expand(self._optional_list(raw, "passes"), RecordType.PASS))
        return findings

    def passed_rules(self, raw) -> int:
        if not isinstance(raw, Mapping):
            return 0
        return sum(1 for group in self._optional_list(raw, "passes") if isinstance(group, Mapping))

    def _optional_list(self, raw: Mapping, key: str) -> list:
        value = raw.get(key)
        return value if isinstance(value, list) else []

    def _expand(self, groups: list, record_type: RecordType) -> List[Finding]:
        findings = []
        for group in groups:
            if not isinstance(group, Mapping):
                continue
            nodes = group.get("nodes")
            if not isinstance(nodes, list):
                continue

            if record_type is RecordType.PASS:
                severity = Severity.NONE
            else:
                severity = map_impact(group.get("impact"))
            tags = self.filter_tags(group.get("tags"))

            for node in nodes:
                if not isinstance(node, Mapping):
                    continue
                findings.append(Finding(
                    record_type=record_type,
                    severity=severity,
                    rule_id=text_or_none(group.get("id")),
                    description=text_or_none(group.get("description")),
                    help_text=text_or_none(group.get("help")),
                    help_url=text_or_none(group.get("helpUrl")),
                    compliance_tags=tags,
                    element_html=text_or_none(node.get("html")),
                    failure_detail=None if record_type is RecordType.PASS else text_or_none(node.get("failureSummary")),
                    selector=self._selector(node),
                    source_engine=self.engine,
                ))
        return findings

    def _selector(self, node: Mapping) -> Optional[str]:
        target = node.get("target")
        if isinstance(target, list) and target:
            first = target[0]
            # Shadow DOM targets are nested lists
            if isinstance(first, list):
                return " >>> ".join(str(part) for part in first)
            return text_or_none(first)
        return None
