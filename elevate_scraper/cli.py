"""Command line entry point for the Elevate 401k scraper.

Prints the account balance and recent transactions to stdout. Logs go to
stderr. Exit status is 0 on success or when the user cancels the prompt,
1 on any other failure.
"""

import argparse
import asyncio
import logging
import sys

import structlog

from elevate_scraper.config import Settings, load_site_config, settings as default_settings
from elevate_scraper.models import AccountSnapshot
from elevate_scraper.prompt import PromptCanceled
from elevate_scraper.report import Reporter
from elevate_scraper.session import SessionOrchestrator

TITLE = "Elevate 401k Retirement Status Scraper"

logger = structlog.get_logger(__name__)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure structlog for JSON or console output on stderr."""
    if log_format == "json":
        processors = [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.WARNING)
        ),
        cache_logger_on_first_use=False,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="elevate-401k",
        description="Show the balance and recent transactions of an Elevate 401k account.",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=None,
        help="Months of transaction history before the current month (default: MONTHS_BACK or 1)",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-format", choices=["console", "json"], default=None)
    parser.add_argument("--selectors", default=None, help="Path to a selectors YAML file")
    args = parser.parse_args(argv)
    if args.months is not None and args.months < 0:
        parser.error("--months must be zero or positive")
    return args


def apply_overrides(base: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of the settings with command line flags applied."""
    overrides: dict = {}
    if args.months is not None:
        overrides["months_back"] = args.months
    if args.headed:
        overrides["browser_headless"] = False
    if args.no_color:
        overrides["color_output"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    if args.selectors:
        overrides["selectors_path"] = args.selectors
    return base.model_copy(update=overrides)


async def run(settings: Settings, reporter: Reporter) -> AccountSnapshot:
    site = load_site_config(settings.selectors_path)
    reporter.fields = site.fields
    orchestrator = SessionOrchestrator.from_config(settings, site, reporter)
    return await orchestrator.run(settings.months_back)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = apply_overrides(default_settings, args)
    configure_logging(settings.log_level, settings.log_format)

    reporter = Reporter(color=settings.color_output)
    reporter.title(TITLE)

    try:
        snapshot = asyncio.run(run(settings, reporter))
    except (PromptCanceled, KeyboardInterrupt):
        logger.info("workflow_canceled")
        return 0
    except Exception as e:
        logger.error("workflow_failed", error=str(e), exc_info=True)
        reporter.error(e)
        return 1

    reporter.balance(snapshot.balance)
    reporter.transactions(snapshot.transactions)
    return 0


if __name__ == "__main__":
    sys.exit(main())
