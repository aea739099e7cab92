# main.py

"""Entry point for the smart_shopping assistant (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from smart_shopping.config.logging_config import (
    detach_console_handler,
    setup_logging,
)
from smart_shopping.config.settings import Settings

logger = logging.getLogger("smart_shopping.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_codes = ", ".join(Settings.currency_codes())

    parser = argparse.ArgumentParser(
        prog="smart_shopping",
        description="AI-powered shopping assistant.",
        epilog=f"Supported currencies: {valid_codes}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Shopping request. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-c",
        "--currency",
        default=None,
        help="Currency for this search (default: saved preference).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Also export results as smart-shopping-list.json here.",
    )
    parser.add_argument(
        "--set-currency",
        default=None,
        dest="set_currency",
        metavar="CODE",
        help="Save CODE as the default currency and exit.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from smart_shopping.ui.app import SmartShoppingApp

    # Textual draws on the terminal; records go to the run file only
    detach_console_handler()
    try:
        app = SmartShoppingApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("smart_shopping TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from smart_shopping.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            currency=args.currency,
            output_format=args.output_format,
            output_dir=args.output_dir,
        )
    )
    sys.exit(exit_code)


def _run_set_currency(code: str) -> None:
    """Persist the default currency."""
    from smart_shopping.cli.runner import set_default_currency

    sys.exit(set_default_currency(code))


def main() -> None:
    """Route to TUI (no args) or headless CLI (query provided)."""
    log_file = setup_logging()
    logger.info("smart_shopping starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.set_currency is not None:
        _run_set_currency(args.set_currency)
    elif args.query is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
