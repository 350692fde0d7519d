"""
Axe Runner - Run axe-core inside headless Chromium.

Architecture:
1. Download axe-core once per process
2. Launch Chromium, optionally skipping heavy resources
3. Navigate and wait for the page to settle
4. Inject axe and race the analysis against a timer
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Route
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from wcag_auditor.errors import AnalysisTimeout, EngineError, NavigationError, NavigationTimeout
from wcag_auditor.logger import logger
from wcag_auditor.services.runners.base import LAUNCH_ARGS, CheckConfig

BLOCKED_RESOURCE_TYPES = {"image", "stylesheet", "font", "media"}

AXE_RUN_SCRIPT = """
async (options) => {
    if (!window.axe || !window.axe.run) {
        throw new Error('axe-core failed to load');
    }
    return await window.axe.run(document, options);
}
"""


def axe_run_options(config: CheckConfig) -> Dict[str, Any]:
    """Options object passed to ``axe.run``."""
    result_types = ["violations"]
    if config.include_incomplete:
        result_types.append("incomplete")
    if config.include_passes:
        result_types.append("passes")

    options: Dict[str, Any] = {"resultTypes": result_types}
    if config.tags:
        options["runOnly"] = {"type": "tag", "values": list(config.tags)}
    if config.disable_rules:
        options["rules"] = {rule: {"enabled": False} for rule in config.disable_rules}
    return options


async def _block_non_essential(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class AxeCheckRunner:
    """Check runner for the axe-core engine."""

    # axe-core source keyed by download URL
    _axe_sources: Dict[str, str] = {}

    def __init__(self, axe_source: Optional[str] = None):
        self.axe_source = axe_source

    async def _get_axe_source(self, source_url: str) -> str:
        if self.axe_source:
            return self.axe_source
        if source_url in self._axe_sources:
            return self._axe_sources[source_url]

        logger.info(f"Downloading axe-core from {source_url}")
        try:
            async with httpx.AsyncClient(timeout=30, follow_redirects=True) as client:
                response = await client.get(source_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise EngineError(f"Could not download axe-core: {e}") from e

        self._axe_sources[source_url] = response.text
        return response.text

    async def run(self, url: str, config: CheckConfig) -> Dict[str, Any]:
        """Audit ``url`` and return the raw ``axe.run`` result."""
        axe_source = await self._get_axe_source(config.axe_source_url)

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=config.headless, args=LAUNCH_ARGS)
            try:
                page = await browser.new_page(
                    viewport={"width": config.viewport_width, "height": config.viewport_height}
                )
                page.set_default_navigation_timeout(config.page_timeout_ms)
                page.set_default_timeout(config.page_timeout_ms)

                if config.block_resources:
                    await page.route("**/*", _block_non_essential)

                await self._navigate(page, url, config)

                if config.wait_ms:
                    await page.wait_for_timeout(config.wait_ms)

                logger.info(f"Page loaded, running accessibility checks on {url}")
                await page.add_script_tag(content=axe_source)
                try:
                    return await asyncio.wait_for(
                        page.evaluate(AXE_RUN_SCRIPT, axe_run_options(config)),
                        timeout=config.analysis_timeout,
                    )
                except asyncio.TimeoutError as e:
                    raise AnalysisTimeout(url, config.analysis_timeout) from e
                except PlaywrightError as e:
                    raise EngineError(f"axe-core analysis failed: {e}") from e
            finally:
                await browser.close()

    async def _navigate(self, page, url: str, config: CheckConfig) -> None:
        logger.info(f"Navigating to {url}")
        try:
            await page.goto(url, wait_until="domcontentloaded")
            try:
                await page.wait_for_load_state("networkidle")
            except PlaywrightTimeoutError:
                # Long-polling pages never go idle; the DOM is already there
                logger.warning(f"Network did not go idle for {url}, continuing")
            await page.wait_for_selector("body", state="attached")
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(url, config.page_timeout) from e
        except PlaywrightError as e:
            raise NavigationError(f"Could not load {url}: {e}") from e
