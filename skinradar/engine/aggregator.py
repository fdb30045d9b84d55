"""
Skin Radar — Category Aggregator

aggregate_category() runs fetch -> extract -> normalize -> filter -> sort for
one weapon. aggregate_all() folds the per-category results into a Snapshot
without any I/O, so the merge and sort can be tested on their own.

Ordering is cheapest-first everywhere; the USD price breaks ties between
items whose AZN prices round to the same cent.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

import structlog

from skinradar.config import settings
from skinradar.engine.normalizer import normalize_item
from skinradar.models.fx import FxRate
from skinradar.models.item import NormalizedItem
from skinradar.models.snapshot import CategoryResult, CategorySummary, Snapshot
from skinradar.pipeline.fetcher import ListingFetcher
from skinradar.scraper.jsonld import extract_structured_data, find_item_list

logger = structlog.get_logger(__name__)

_SKINS_SUFFIX_RE = re.compile(r"\s+skins?$", re.IGNORECASE)


def _list_name(item_list: dict[str, Any], slug: str) -> str:
    """ItemList name with a trailing 'Skins' dropped, e.g. 'AK-47 Skins' -> 'AK-47'. Falls back to the slug."""
    return _SKINS_SUFFIX_RE.sub("", str(item_list.get("name") or slug)).strip()


def build_category_result(
    html: str,
    slug: str,
    fx: FxRate,
    price_limit: Decimal,
    source_url: str,
) -> CategoryResult:
    """Build a CategoryResult from an already fetched category page."""
    item_list = find_item_list(extract_structured_data(html))
    elements = item_list.get("itemListElement") if item_list else None

    if not isinstance(elements, list) or not elements:
        logger.info("category_no_item_list", slug=slug, source="aggregator")
        return CategoryResult(source_url=source_url, weapon_slug=slug, weapon=slug.upper())

    items: list[NormalizedItem] = []
    dropped = 0
    for entry in elements:
        raw = entry.get("item") if isinstance(entry, dict) else None
        item = normalize_item(raw, fx.rate, slug)
        if item is None:
            dropped += 1
            continue
        if item.low_price_azn <= price_limit:
            items.append(item)

    items.sort(key=lambda i: i.price_key)
    weapon = items[0].weapon if items else _list_name(item_list, slug)

    logger.info(
        "category_aggregated",
        slug=slug,
        weapon=weapon,
        listed=len(elements),
        unpriced=dropped,
        kept=len(items),
        source="aggregator",
    )
    return CategoryResult(
        source_url=source_url,
        weapon_slug=slug,
        weapon=weapon,
        items=tuple(items),
    )


async def aggregate_category(
    fetcher: ListingFetcher,
    slug: str,
    fx: FxRate,
    price_limit: Decimal | None = None,
) -> CategoryResult:
    """
    Fetch and aggregate one weapon category.

    A page with no ItemList is a valid empty category, not an error.

    Raises:
        FetchError: the page could not be fetched after retries.
    """
    limit = price_limit if price_limit is not None else settings.PRICE_LIMIT_AZN
    html = await fetcher.fetch_category_page(slug)
    return build_category_result(html, slug, fx, limit, settings.category_url(slug))


def aggregate_all(
    results: Iterable[CategoryResult],
    fx: FxRate,
    price_limit: Decimal,
    scraped_at: datetime,
    source: str,
) -> Snapshot:
    """
    Fold category results into the aggregate Snapshot.

    Summaries keep category order; items are merged and sorted by
    (weapon name ignoring case, AZN price, USD price).
    """
    results = list(results)
    summaries = tuple(
        CategorySummary(weapon=r.weapon, weapon_slug=r.weapon_slug, count=r.count)
        for r in results
    )
    items = sorted(
        (item for r in results for item in r.items),
        key=lambda i: i.snapshot_key,
    )
    return Snapshot(
        source=source,
        fx=fx,
        scraped_at=scraped_at,
        categories=summaries,
        price_limit=price_limit,
        items=tuple(items),
    )
