"""Command-line interface for Subscription Detector.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from subscription_detector import __version__
from subscription_detector.config import Settings, get_settings
from subscription_detector.detector import SubscriptionDetector
from subscription_detector.models import EmailRecord
from subscription_detector.storage import load_emails, save_subscriptions

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subscription-detector",
        description="Detect recurring subscriptions from email records",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser("detect", help="Detect subscriptions and write them as JSON")
    source = detect_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON file with email records (default: settings input_path)",
    )
    source.add_argument(
        "--gmail",
        action="store_true",
        help="Read emails from Gmail instead of a file",
    )
    detect_parser.add_argument(
        "--query",
        default=None,
        help="Gmail search query (default: settings gmail_query); only with --gmail",
    )
    detect_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of Gmail messages to analyze (default: all); only with --gmail",
    )
    detect_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the subscriptions (default: settings output_path)",
    )
    detect_parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Use only the rule-based extractors, even if an API key is configured",
    )

    return parser


async def _read_emails(args: argparse.Namespace, settings: Settings) -> list[EmailRecord]:
    if args.gmail:
        from subscription_detector.gmail import GmailClient

        gmail = GmailClient(settings)
        await gmail.authenticate()
        return await gmail.fetch_emails(query=args.query, limit=args.limit)

    return load_emails(args.input or settings.input_path)


async def _cmd_detect(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.no_ai:
        settings = settings.model_copy(update={"use_ai": False})
    output_path: Path = args.output or settings.output_path

    emails = await _read_emails(args, settings)
    logger.info("emails_read", email_count=len(emails), source="gmail" if args.gmail else "file")

    detector = SubscriptionDetector(settings=settings)
    report = await detector.process_emails(emails)

    save_subscriptions(output_path, report.subscriptions)
    print(
        f"Detected {len(report.subscriptions)} unique subscriptions from {report.processed} emails "
        f"({report.skipped} skipped); results saved to {output_path}"
    )
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Subscription Detector CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    logger.info("subscription_detector_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "detect":
            return asyncio.run(_cmd_detect(parsed))
    except Exception as exc:  # noqa: BLE001
        logger.exception("fatal_error", error=str(exc))
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
