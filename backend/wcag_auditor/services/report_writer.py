"""
Report Writer - Persist normalized findings as one CSV file per URL.
"""
import csv
import os
import re
from datetime import datetime
from typing import Iterable, Optional

from wcag_auditor.errors import WriteError
from wcag_auditor.logger import logger
from wcag_auditor.schemas.finding import Engine, Finding

CSV_HEADER = [
    "Type",
    "Impact",
    "Description",
    "Help Text",
    "Help URL",
    "Rule ID",
    "Tags",
    "Element",
    "Failure Summary",
]

MAX_SLUG_LENGTH = 80


def url_slug(url: str) -> str:
    """Filesystem-safe form of a URL, e.g. ``example-com-docs``."""
    slug = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", url.strip())
    slug = re.sub(r"[^\w]+", "-", slug, flags=re.ASCII).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-") or "page"


def report_timestamp(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).isoformat(timespec="microseconds")
    return stamp.replace(":", "-").replace(".", "-")


def finding_row(finding: Finding) -> list:
    return [
        finding.record_type.value,
        finding.severity.value,
        finding.description or "",
        finding.help_text or "",
        finding.help_url or "",
        finding.rule_id or "",
        ", ".join(finding.compliance_tags),
        finding.element_html or "",
        finding.failure_detail or "",
    ]


class CsvReportWriter:
    """Writes findings to ``<output_dir>/<slug>-<engine>-report-<timestamp>.csv``."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def report_path(self, url: str, engine: Engine, now: Optional[datetime] = None) -> str:
        """Pick a file name that never overwrites an earlier report."""
        base = f"{url_slug(url)}-{Engine(engine).value}-report-{report_timestamp(now)}"
        path = os.path.join(self.output_dir, f"{base}.csv")

        counter = 1
        while os.path.exists(path):
            path = os.path.join(self.output_dir, f"{base}-{counter}.csv")
            counter += 1
        return path

    def write(self, findings: Iterable[Finding], path: str) -> str:
        """Write findings to ``path``.

        Raises:
            WriteError: if the directory or file cannot be written; a partly
                written file is removed
        """
        opened = False
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

            count = 0
            # Lone surrogates (engines truncate HTML by code unit) are escaped
            with open(path, "w", encoding="utf-8", errors="backslashreplace", newline="") as f:
                opened = True
                writer = csv.writer(f)
                writer.writerow(CSV_HEADER)
                for finding in findings:
                    writer.writerow(finding_row(finding))
                    count += 1
        except (OSError, UnicodeError, csv.Error) as e:
            if opened:
                self._discard(path)
            raise WriteError(path, getattr(e, "strerror", None) or str(e)) from e

        logger.info(f"Wrote {count} rows to {path}")
        return path

    def _discard(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove partial report {path}: {e}")
