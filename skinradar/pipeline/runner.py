"""
Skin Radar — Run Orchestrator

One run = discover categories -> resolve the FX rate -> aggregate each
category in turn -> fold -> write snapshots.

Categories are processed strictly one at a time with a pacing delay between
them, because the marketplace rate-limits aggressively parallel clients. A
category that cannot be fetched is skipped; only a discovery failure aborts
the run.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import httpx
import structlog
from pydantic import BaseModel, ConfigDict

from skinradar.config import settings
from skinradar.engine.aggregator import aggregate_all, aggregate_category
from skinradar.errors import FetchError
from skinradar.models.fx import FxRate
from skinradar.models.snapshot import CategoryResult, Snapshot
from skinradar.output.writer import write_snapshots
from skinradar.pipeline.discovery import discover_categories
from skinradar.pipeline.fetcher import ListingFetcher, RetryPolicy, Sleep
from skinradar.utils.forex import resolve_rate

logger = structlog.get_logger(__name__)


class RunReport(BaseModel):
    """What a run produced. `skipped` lists slugs whose fetch failed."""

    model_config = ConfigDict(frozen=True)

    snapshot: Snapshot
    results: tuple[CategoryResult, ...] = ()
    skipped: tuple[str, ...] = ()
    written: tuple[Path, ...] = ()


async def collect_categories(
    fetcher: ListingFetcher,
    slugs: list[str],
    fx: FxRate,
    price_limit: Decimal,
    pacing_seconds: float,
    sleep: Sleep = asyncio.sleep,
) -> tuple[list[CategoryResult], list[str]]:
    """
    Aggregate each slug sequentially.

    Returns:
        (results in slug order, slugs skipped because of a FetchError)
    """
    results: list[CategoryResult] = []
    skipped: list[str] = []

    for slug in slugs:
        try:
            results.append(await aggregate_category(fetcher, slug, fx, price_limit))
        except FetchError as e:
            skipped.append(slug)
            logger.warning(
                "category_skipped",
                slug=slug,
                error=str(e),
                status_code=e.status_code,
                attempts=e.attempts,
                source="runner",
            )

        await sleep(pacing_seconds)

    return results, skipped


async def run(
    sleep: Sleep = asyncio.sleep,
    output_dir: Path | str | None = None,
    client: httpx.AsyncClient | None = None,
) -> RunReport:
    """
    Execute one full scrape and write the snapshot files.

    Args:
        sleep: Awaitable sleep used for pacing and retry backoff.
        output_dir: Where to write; defaults to settings.OUTPUT_DIR.
        client: Pre-built HTTP client (tests). A new one is opened otherwise.

    Raises:
        DiscoveryError: the discovery page could not be fetched.
    """
    if client is None:
        async with httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            follow_redirects=True,
        ) as own_client:
            return await _run(sleep, output_dir, own_client)
    return await _run(sleep, output_dir, client)


async def _run(
    sleep: Sleep,
    output_dir: Path | str | None,
    client: httpx.AsyncClient,
) -> RunReport:
    slugs = await discover_categories(client)
    fx = await resolve_rate(client)

    logger.info(
        "run_started",
        categories=len(slugs),
        fx_rate=str(fx.rate),
        fx_provider=fx.provider,
        source="runner",
    )

    fetcher = ListingFetcher(client, RetryPolicy.from_settings(sleep=sleep))
    scraped_at = datetime.now(timezone.utc)

    results, skipped = await collect_categories(
        fetcher,
        slugs,
        fx,
        settings.PRICE_LIMIT_AZN,
        settings.CATEGORY_PACING_SECONDS,
        sleep=sleep,
    )

    snapshot = aggregate_all(
        results,
        fx=fx,
        price_limit=settings.PRICE_LIMIT_AZN,
        scraped_at=scraped_at,
        source=settings.discovery_url,
    )
    written = write_snapshots(
        snapshot,
        results,
        output_dir=output_dir if output_dir is not None else settings.OUTPUT_DIR,
        legacy_slug=settings.LEGACY_CATEGORY_SLUG,
    )

    logger.info(
        "run_complete",
        items=snapshot.count,
        limit_azn=str(settings.PRICE_LIMIT_AZN),
        weapons=snapshot.weapons_count,
        skipped=skipped,
        fx_fallback=fx.is_fallback,
        source="runner",
    )
    return RunReport(
        snapshot=snapshot,
        results=tuple(results),
        skipped=tuple(skipped),
        written=tuple(written),
    )
