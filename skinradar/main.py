"""
Skin Radar — Application Entrypoint

Configures structlog, runs one scrape, and maps a discovery failure to a
non-zero exit code.

Run via:
    python -m skinradar.main
    python -m skinradar.main --output-dir public/data --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import structlog

from skinradar.config import settings
from skinradar.errors import DiscoveryError
from skinradar.pipeline.runner import run


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    # Configure stdlib logging first (for third-party libraries)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape weapon skin prices under the AZN limit and write JSON snapshots.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=settings.OUTPUT_DIR,
        help=f"Directory for snapshot files (default: {settings.OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL}).",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """
    Run one scrape.

    Returns:
        Process exit code: 0 on success, 1 when discovery failed.
    """
    args = parse_args(argv)
    _configure_logging(log_level=args.log_level)
    logger = structlog.get_logger(__name__)

    logger.info("skin_radar_startup", base_url=settings.BASE_URL, output_dir=args.output_dir)

    try:
        report = await run(output_dir=args.output_dir)
    except DiscoveryError as e:
        logger.error("run_failed", error=str(e), error_type=type(e).__name__)
        print(str(e), file=sys.stderr)
        return 1

    print(
        f"Saved {report.snapshot.count} items under {settings.PRICE_LIMIT_AZN} AZN "
        f"across {report.snapshot.weapons_count} guns to {args.output_dir}"
    )
    return 0


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        structlog.get_logger(__name__).info("skin_radar_interrupted_by_user")
        sys.exit(130)


if __name__ == "__main__":
    cli()
