"""Shared fixtures: raw engine results and a scripted check runner."""
import copy

import pytest

from wcag_auditor.config import Settings
from wcag_auditor.services.console import ConsolePresenter

AXE_RESULT = {
    "url": "https://example.com/",
    "violations": [
        {
            "id": "image-alt",
            "impact": "critical",
            "tags": ["cat.text-alternatives", "wcag2a", "wcag111", "section508"],
            "description": "Ensures <img> elements have alternate text",
            "help": "Images must have alternate text",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/image-alt",
            "nodes": [
                {
                    "html": '<img src="logo.png">',
                    "target": ["img.logo"],
                    "failureSummary": "Fix any of the following:\n  Element does not have an alt attribute",
                },
                {
                    "html": '<img src="hero.png">',
                    "target": ["#hero > img"],
                    "failureSummary": "Fix any of the following:\n  Element does not have an alt attribute",
                },
            ],
        },
        {
            "id": "color-contrast",
            "impact": "serious",
            "tags": ["cat.color", "wcag2aa", "wcag143"],
            "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
            "help": "Elements must meet minimum color contrast ratio thresholds",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/color-contrast",
            "nodes": [
                {
                    "html": '<a href="/pricing">Pricing</a>',
                    "target": ["nav > a:nth-child(2)"],
                    "failureSummary": "Fix any of the following:\n  Element has insufficient color contrast of 2.5",
                },
            ],
        },
    ],
    "incomplete": [
        {
            "id": "aria-valid-attr-value",
            "impact": None,
            "tags": ["cat.aria", "wcag2a", "wcag412"],
            "description": "Ensures all ARIA attributes have valid values",
            "help": "ARIA attributes must conform to valid values",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/aria-valid-attr-value",
            "nodes": [
                {"html": '<div aria-controls="menu">', "target": ["div.toggle"], "failureSummary": "Fix all of the following:\n  ARIA attribute element ID does not exist on the page"},
            ],
        },
    ],
    "passes": [
        {
            "id": "document-title",
            "impact": None,
            "tags": ["cat.text-alternatives", "wcag2a", "wcag242"],
            "description": "Ensures each HTML document contains a non-empty <title> element",
            "help": "Documents must have <title> element to aid in navigation",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/document-title",
            "nodes": [{"html": "<html lang=\"en\">", "target": ["html"]}],
        },
        {
            "id": "frame-title",
            "impact": None,
            "tags": ["wcag2a", "wcag412"],
            "description": "Ensures <iframe> and <frame> elements have an accessible name",
            "help": "Frames must have an accessible name",
            "nodes": [],
        },
    ],
}

PA11Y_RESULT = {
    "pageUrl": "https://example.com/",
    "issues": [
        {
            "code": "WCAG2AA.Principle1.Guideline1_1.1_1_1.H37",
            "type": "error",
            "typeCode": 1,
            "message": "Img element missing an alt attribute.",
            "context": '<img src="logo.png">',
            "selector": "html > body > img",
            "runner": "htmlcs",
            "runnerExtras": {},
        },
        {
            "code": "color-contrast",
            "type": "warning",
            "typeCode": 2,
            "message": "Elements must meet minimum color contrast ratio thresholds",
            "context": '<a href="/pricing">Pricing</a>',
            "selector": "nav > a:nth-child(2)",
            "runner": "axe",
            "runnerExtras": {
                "description": "Ensures the contrast between foreground and background colors meets WCAG 2 AA",
                "impact": "serious",
                "help": "Elements must meet minimum color contrast ratio thresholds",
                "helpUrl": "https://dequeuniversity.com/rules/axe/4.9/color-contrast?application=axeAPI",
            },
        },
        {
            "code": "WCAG2AA.Principle2.Guideline2_4.2_4_2.H25.2",
            "type": "notice",
            "typeCode": 3,
            "message": "Check that the title element describes the document.",
            "context": "<title>Example</title>",
            "selector": "html > head > title",
            "runner": "htmlcs",
        },
    ],
}


@pytest.fixture
def axe_result():
    return copy.deepcopy(AXE_RESULT)


@pytest.fixture
def pa11y_result():
    return copy.deepcopy(PA11Y_RESULT)


class ScriptedCheckRunner:
    """Returns a canned raw result (or raises) per URL and records the calls."""

    def __init__(self, results):
        self.results = results
        self.calls = []

    async def run(self, url, config):
        self.calls.append(url)
        result = self.results[url]
        if isinstance(result, BaseException):
            raise result
        return copy.deepcopy(result)


@pytest.fixture
def scripted_runner():
    return ScriptedCheckRunner


@pytest.fixture
def audit_settings(tmp_path):
    return Settings(
        AUDIT_URLS=[],
        AUDIT_ENGINE="axe",
        OUTPUT_DIR=str(tmp_path / "results"),
        INCLUDE_PASSES=False,
        INCLUDE_INCOMPLETE=True,
        COMPLIANCE_TAG_PREFIXES=["wcag"],
    )


@pytest.fixture
def plain_presenter():
    import io

    return ConsolePresenter(styled=False, stream=io.StringIO())
