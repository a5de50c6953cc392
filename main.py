# main.py

"""Entry point for agri_feed (headless CLI or HTTP API server)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("agri_feed.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="agri_feed",
        description=(
            "Kalimati market prices and farming weather advisories."
        ),
        epilog=(
            "Exit status is 1 when fallback or unavailable data was served."
        ),
    )
    parser.add_argument(
        "-w",
        "--weather",
        nargs="?",
        const="",
        default=None,
        metavar="LOCATION",
        help=(
            "Show weather and advisory instead of market prices "
            f"(default location: {Settings.DEFAULT_LOCATION})."
        ),
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
        "-t",
        "--track",
        action="store_true",
        default=False,
        help=(
            "Compare against the last stored snapshot and store this one."
        ),
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Snapshot directory for --track (default: results/).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all upstream sources.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the HTTP API instead of a one-shot fetch.",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    return parser


def _run_market(args: argparse.Namespace) -> None:
    """Fetch market prices once and exit."""
    from src.cli.runner import cli_market

    exit_code = asyncio.run(
        cli_market(
            output_format=args.output_format,
            track=args.track,
            output_dir=args.output_dir,
        )
    )
    sys.exit(exit_code)


def _run_weather(args: argparse.Namespace) -> None:
    """Fetch the weather once and exit."""
    from src.cli.runner import cli_weather

    exit_code = asyncio.run(
        cli_weather(args.weather or None, args.output_format)
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run upstream connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def _run_server(args: argparse.Namespace) -> None:
    """Serve the HTTP API."""
    from src.cli.runner import run_server

    try:
        exit_code = run_server(args.host, args.port)
    except Exception:
        logger.critical("Fatal error while serving", exc_info=True)
        raise
    finally:
        logger.info("agri_feed server shutting down")
    sys.exit(exit_code)


def main() -> None:
    """Route to the server, health check, weather or market fetch."""
    log_file = setup_logging()
    logger.info("agri_feed starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.serve:
        _run_server(args)
    elif args.health:
        _run_health_check()
    elif args.weather is not None:
        _run_weather(args)
    else:
        _run_market(args)


if __name__ == "__main__":
    main()
