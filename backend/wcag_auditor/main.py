"""
WCAG Auditor - Command line entry point.
"""
import argparse
import asyncio
import sys
from dataclasses import replace
from typing import List, Optional

from colorama import Fore, Style, init

from wcag_auditor.config import Settings, settings
from wcag_auditor.errors import NoUrlsError
from wcag_auditor.logger import logger, set_level
from wcag_auditor.schemas.finding import Engine
from wcag_auditor.services.audit_runner import AuditRunner
from wcag_auditor.services.console import ConsolePresenter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wcag-audit",
        description="Audit web pages for WCAG accessibility compliance with axe-core or pa11y.",
    )
    parser.add_argument("url", nargs="?", help="Audit only this URL instead of the configured AUDIT_URLS")
    parser.add_argument("--engine", choices=[e.value for e in Engine], help="Testing engine (default: AUDIT_ENGINE or axe)")
    parser.add_argument("--output-dir", help="Directory for CSV reports (default: OUTPUT_DIR)")
    parser.add_argument("--include-passes", action="store_true", help="Also report passing checks")
    parser.add_argument("--no-incomplete", action="store_true", help="Drop needs-review records")
    parser.add_argument("--timeout", type=float, help="Page and analysis timeout in seconds")
    parser.add_argument("--no-color", action="store_true", help="Plain text output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    overrides = {}
    if args.engine:
        overrides["AUDIT_ENGINE"] = args.engine
    if args.output_dir:
        overrides["OUTPUT_DIR"] = args.output_dir
    if args.include_passes:
        overrides["INCLUDE_PASSES"] = True
    if args.no_incomplete:
        overrides["INCLUDE_INCOMPLETE"] = False
    if args.timeout:
        overrides["PAGE_TIMEOUT"] = args.timeout
        overrides["ANALYSIS_TIMEOUT"] = args.timeout
    if args.url:
        overrides["AUDIT_URLS"] = [args.url]
    return replace(base, **overrides) if overrides else base


def main(argv: Optional[List[str]] = None, base_settings: Optional[Settings] = None,
         runner: Optional[AuditRunner] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_level("DEBUG")

    styled = not args.no_color
    if styled:
        init()

    config = resolve_settings(args, base_settings or settings)
    try:
        engine = config.engine
    except ValueError:
        parser.error(f"unknown engine {config.AUDIT_ENGINE!r}; choose from axe, pa11y")

    presenter = ConsolePresenter(styled=styled)
    runner = runner or AuditRunner(engine, config=config, presenter=presenter)

    try:
        summary = asyncio.run(runner.run(config.AUDIT_URLS))
    except NoUrlsError as e:
        print(presenter.paint(f"{e}. {e.hint}", Fore.RED), file=sys.stderr)
        print("Usage: wcag-audit https://example.com", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    code = summary.exit_code()
    if code:
        print(presenter.paint(
            f"\n{summary.critical_total} critical finding(s); exiting with status {code}", Style.BRIGHT
        ))
    return code


if __name__ == "__main__":
    sys.exit(main())
