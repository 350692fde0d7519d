"""
Check runner contract shared by the engine adapters.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

# Chromium flags used for every headless check
LAUNCH_ARGS = [
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-setuid-sandbox",
    "--no-sandbox",
]


@dataclass
class CheckConfig:
    """Per-check configuration bundle."""
    tags: List[str] = field(default_factory=list)
    page_timeout: float = 60
    analysis_timeout: float = 60
    wait_ms: int = 1000
    viewport_width: int = 1920
    viewport_height: int = 1080
    headless: bool = True
    block_resources: bool = True
    disable_rules: List[str] = field(default_factory=list)
    include_passes: bool = False
    include_incomplete: bool = True
    axe_source_url: str = ""

    @property
    def page_timeout_ms(self) -> int:
        return int(self.page_timeout * 1000)


class CheckRunner(Protocol):
    """Runs one engine against one URL and returns its raw result."""

    async def run(self, url: str, config: CheckConfig) -> Dict[str, Any]:
        ...
