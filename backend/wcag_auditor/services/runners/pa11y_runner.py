"""
Pa11y Runner - Run the pa11y CLI with the axe and htmlcs runners.
"""
import asyncio
import json
import os
import tempfile
from typing import Any, Dict, List

from wcag_auditor.errors import AnalysisTimeout, EngineError, NavigationError, NavigationTimeout
from wcag_auditor.logger import logger
from wcag_auditor.services.runners.base import LAUNCH_ARGS, CheckConfig

NPX = "npx.cmd" if os.name == "nt" else "npx"
PA11Y_STANDARD = "WCAG2AA"
PA11Y_RUNNERS = ["axe", "htmlcs"]

# Extra time the subprocess gets beyond pa11y's own timeout
PROCESS_GRACE_SECONDS = 15


def pa11y_config(config: CheckConfig) -> Dict[str, Any]:
    """JSON config file contents for ``pa11y --config``."""
    return {
        "standard": PA11Y_STANDARD,
        "runners": PA11Y_RUNNERS,
        "timeout": config.page_timeout_ms,
        "wait": config.wait_ms,
        "includeWarnings": True,
        "includeNotices": config.include_incomplete,
        "ignore": list(config.disable_rules),
        "viewport": {"width": config.viewport_width, "height": config.viewport_height},
        "chromeLaunchConfig": {
            "headless": config.headless,
            "args": LAUNCH_ARGS,
        },
    }


class Pa11yCheckRunner:
    """Check runner for pa11y; needs Node.js and ``npx pa11y`` available."""

    def __init__(self, command: List[str] = None):
        self.command = command or [NPX, "pa11y"]

    async def run(self, url: str, config: CheckConfig) -> Dict[str, Any]:
        """Audit ``url`` and return ``{"pageUrl": url, "issues": [...]}``."""
        fd, config_path = tempfile.mkstemp(prefix="pa11y-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(pa11y_config(config), f)

            args = self.command + ["--reporter", "json", "--config", config_path, url]
            logger.info(f"Running pa11y for {url}")
            try:
                proc = await asyncio.create_subprocess_exec(
                    *args,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise EngineError(f"Could not start pa11y: {e}") from e

            budget = config.page_timeout + config.analysis_timeout + PROCESS_GRACE_SECONDS
            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=budget)
            except asyncio.TimeoutError as e:
                proc.kill()
                await proc.wait()
                raise AnalysisTimeout(url, budget) from e
        finally:
            os.unlink(config_path)

        return self._parse(url, proc.returncode, stdout.decode("utf-8", "replace"),
                           stderr.decode("utf-8", "replace"), config)

    def _parse(self, url: str, returncode: int, stdout: str, stderr: str,
               config: CheckConfig) -> Dict[str, Any]:
        # pa11y exits 2 when issues were found; that is still a result
        try:
            issues = json.loads(stdout) if stdout.strip() else None
        except json.JSONDecodeError:
            issues = None

        if isinstance(issues, list):
            return {"pageUrl": url, "issues": issues}

        message = (stderr or stdout).strip() or f"pa11y exited with code {returncode}"
        lowered = message.lower()
        if "timed out" in lowered or "timeout" in lowered:
            raise NavigationTimeout(url, config.page_timeout)
        if "net::" in lowered or "failed to run" in lowered:
            raise NavigationError(message)
        raise EngineError(message)
