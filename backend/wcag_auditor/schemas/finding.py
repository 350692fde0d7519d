"""
Pydantic schemas for normalized audit results.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RecordType(str, Enum):
    """What kind of record a finding is."""
    VIOLATION = "Violation"
    NEEDS_REVIEW = "Needs Review"
    PASS = "Pass"


class Severity(str, Enum):
    """Canonical impact level shared by both engines."""
    CRITICAL = "critical"
    SERIOUS = "serious"
    WARNING = "warning"
    NOTICE = "notice"
    NONE = "none"
    UNKNOWN = "unknown"


class Engine(str, Enum):
    """Accessibility testing engine that produced a result."""
    AXE = "axe"
    PA11Y = "pa11y"


class Finding(BaseModel):
    """One normalized accessibility issue, review item or pass."""
    model_config = ConfigDict(frozen=True)

    record_type: RecordType
    severity: Severity = Severity.UNKNOWN
    rule_id: Optional[str] = None
    description: Optional[str] = None
    help_text: Optional[str] = None
    help_url: Optional[str] = None
    compliance_tags: Tuple[str, ...] = ()
    element_html: Optional[str] = None
    failure_detail: Optional[str] = None
    selector: Optional[str] = None
    source_engine: Engine
    runner: Optional[str] = None


class CheckOutcome(BaseModel):
    """Complete result of auditing one URL."""
    model_config = ConfigDict(frozen=True)

    url: str
    engine: Engine

    # Findings in engine order
    findings: Tuple[Finding, ...] = ()

    # Categorization
    counts_by_severity: Dict[Severity, int] = Field(default_factory=dict)
    counts_by_type: Dict[RecordType, int] = Field(default_factory=dict)
    counts_by_tag: Dict[str, int] = Field(default_factory=dict)
    passed_rules: int = 0

    # Report
    report_path: Optional[str] = None
    write_error: Optional[str] = None

    # Error (if failed)
    error: Optional[str] = None
    error_kind: Optional[str] = None
    hint: Optional[str] = None

    # Timestamps
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def violation_count(self) -> int:
        return self.counts_by_type.get(RecordType.VIOLATION, 0)

    @property
    def review_count(self) -> int:
        return self.counts_by_type.get(RecordType.NEEDS_REVIEW, 0)

    @property
    def issue_count(self) -> int:
        """Violations plus records that need manual review."""
        return self.violation_count + self.review_count

    def severity_count(self, severity: Severity) -> int:
        return self.counts_by_severity.get(severity, 0)
