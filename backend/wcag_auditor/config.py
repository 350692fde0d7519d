"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from wcag_auditor.schemas.finding import Engine
from wcag_auditor.services.normalizers.base import NormalizeOptions
from wcag_auditor.services.runners.base import CheckConfig

# Load .env file
load_dotenv()

DEFAULT_WCAG_TAGS = "wcag2a,wcag2aa,wcag2aaa,wcag21a,wcag21aa,wcag22aa"
DEFAULT_AXE_SOURCE_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"


def _env_list(name: str, default: str = "") -> List[str]:
    """Comma separated env value as a list, blanks dropped."""
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = "WCAG Auditor"

    # Targets
    AUDIT_URLS: List[str] = field(default_factory=lambda: _env_list("AUDIT_URLS"))
    AUDIT_ENGINE: str = os.getenv("AUDIT_ENGINE", Engine.AXE.value)

    # Rule selection
    WCAG_TAGS: List[str] = field(default_factory=lambda: _env_list("WCAG_TAGS", DEFAULT_WCAG_TAGS))
    COMPLIANCE_TAG_PREFIXES: List[str] = field(default_factory=lambda: _env_list("COMPLIANCE_TAG_PREFIXES", "wcag"))
    DISABLE_RULES: List[str] = field(default_factory=lambda: _env_list("DISABLE_RULES"))

    # Timeouts (seconds) and page stabilization (milliseconds)
    PAGE_TIMEOUT: float = float(os.getenv("PAGE_TIMEOUT", "60"))
    ANALYSIS_TIMEOUT: float = float(os.getenv("ANALYSIS_TIMEOUT", "60"))
    STABILIZE_WAIT_MS: int = int(os.getenv("STABILIZE_WAIT_MS", "1000"))

    # Browser
    VIEWPORT_WIDTH: int = int(os.getenv("VIEWPORT_WIDTH", "1920"))
    VIEWPORT_HEIGHT: int = int(os.getenv("VIEWPORT_HEIGHT", "1080"))
    HEADLESS: bool = _env_bool("HEADLESS", "true")
    BLOCK_RESOURCES: bool = _env_bool("BLOCK_RESOURCES", "true")
    AXE_SOURCE_URL: str = os.getenv("AXE_SOURCE_URL", DEFAULT_AXE_SOURCE_URL)

    # Output
    OUTPUT_DIR: str = os.getenv("OUTPUT_DIR", "results")
    INCLUDE_PASSES: bool = _env_bool("INCLUDE_PASSES", "false")
    INCLUDE_INCOMPLETE: bool = _env_bool("INCLUDE_INCOMPLETE", "true")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def engine(self) -> Engine:
        return Engine(self.AUDIT_ENGINE.strip().lower())

    def check_config(self) -> CheckConfig:
        """Bundle handed to the check runner for every URL."""
        return CheckConfig(
            tags=list(self.WCAG_TAGS),
            page_timeout=self.PAGE_TIMEOUT,
            analysis_timeout=self.ANALYSIS_TIMEOUT,
            wait_ms=self.STABILIZE_WAIT_MS,
            viewport_width=self.VIEWPORT_WIDTH,
            viewport_height=self.VIEWPORT_HEIGHT,
            headless=self.HEADLESS,
            block_resources=self.BLOCK_RESOURCES,
            disable_rules=list(self.DISABLE_RULES),
            include_passes=self.INCLUDE_PASSES,
            include_incomplete=self.INCLUDE_INCOMPLETE,
            axe_source_url=self.AXE_SOURCE_URL,
        )

    def normalize_options(self) -> NormalizeOptions:
        """Options for the finding normalizer."""
        return NormalizeOptions(
            include_passes=self.INCLUDE_PASSES,
            include_incomplete=self.INCLUDE_INCOMPLETE,
            tag_prefixes=tuple(self.COMPLIANCE_TAG_PREFIXES),
        )


settings = Settings()
