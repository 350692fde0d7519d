"""
Error taxonomy for audit runs.

Every per-URL failure is one of these. The orchestrator turns them into a
failed CheckOutcome using ``kind`` and ``hint``; only ``NoUrlsError`` ends a run.
"""
from typing import Optional

TIMEOUT_HINT = (
    "1. Check your internet connection\n"
    "2. Verify the website is accessible\n"
    "3. Try running the check again\n"
    "4. If the issue persists, increase PAGE_TIMEOUT / ANALYSIS_TIMEOUT"
)


class AuditError(Exception):
    """Base class for audit failures."""
    kind: str = "error"
    hint: Optional[str] = None


class CheckTimeout(AuditError):
    """The check runner exceeded its time budget."""
    kind = "timeout"
    hint = TIMEOUT_HINT

    def __init__(self, url: str, timeout: float, stage: str):
        self.url = url
        self.timeout = timeout
        self.stage = stage
        super().__init__(f"{stage} timed out after {timeout:g}s for {url}")


class NavigationTimeout(CheckTimeout):
    kind = "navigation_timeout"

    def __init__(self, url: str, timeout: float):
        super().__init__(url, timeout, "Navigation")


class AnalysisTimeout(CheckTimeout):
    kind = "analysis_timeout"

    def __init__(self, url: str, timeout: float):
        super().__init__(url, timeout, "Accessibility analysis")


class NavigationError(AuditError):
    """The page could not be loaded."""
    kind = "navigation_error"
    hint = "Verify the URL is correct and reachable from this machine."


class EngineError(AuditError):
    """The accessibility engine itself failed."""
    kind = "engine_error"
    hint = "Make sure the engine is installed (playwright install chromium / npm install -g pa11y)."


class MalformedEngineResult(AuditError):
    """Raw engine result is structurally unusable."""
    kind = "malformed_result"


class WriteError(AuditError):
    """A report file could not be written."""
    kind = "write_error"
    hint = "Check that the output directory is writable."

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write report {path}: {reason}")


class NoUrlsError(AuditError):
    """No URLs were given on the command line or in the configuration."""
    kind = "no_urls"
    hint = "Set AUDIT_URLS in the environment or pass a URL as an argument."

    def __init__(self):
        super().__init__("No URLs specified")
