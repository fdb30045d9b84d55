"""
Skin Radar — Snapshot Writer

Serializes a run into the JSON files the display surface reads:

- all-guns-under-{limit}-azn.json          aggregate snapshot
- weapons/{slug}-under-{limit}-azn.json    one per aggregated category
- scar20-under-{limit}-azn.json            legacy path, mirrors scar-20

Files are UTF-8, indented by 2 spaces, and end with a newline. Key order is
fixed so identical inputs produce identical bytes.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable

import structlog

from skinradar.config import TARGET_CURRENCY, settings
from skinradar.models.base import iso_timestamp, json_number
from skinradar.models.fx import FxRate
from skinradar.models.item import NormalizedItem
from skinradar.models.snapshot import CategoryResult, Snapshot

logger = structlog.get_logger(__name__)

WEAPONS_SUBDIR = "weapons"


def _limit_label(price_limit: Decimal) -> str:
    return str(json_number(price_limit))


def aggregate_filename(price_limit: Decimal) -> str:
    return f"all-guns-under-{_limit_label(price_limit)}-azn.json"


def category_filename(slug: str, price_limit: Decimal) -> str:
    return f"{slug}-under-{_limit_label(price_limit)}-azn.json"


def legacy_filename(slug: str, price_limit: Decimal) -> str:
    """'scar-20' -> 'scar20-under-20-azn.json'."""
    return f"{slug.replace('-', '')}-under-{_limit_label(price_limit)}-azn.json"


def _items(items: Iterable[NormalizedItem]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def snapshot_document(snapshot: Snapshot) -> dict[str, Any]:
    """The aggregate file body."""
    return {
        "source": snapshot.source,
        "currencyTarget": TARGET_CURRENCY,
        "fx": snapshot.fx.to_block(),
        "scrapedAt": iso_timestamp(snapshot.scraped_at),
        "weaponsCount": snapshot.weapons_count,
        "weapons": [c.model_dump(mode="json", by_alias=True) for c in snapshot.categories],
        "count": snapshot.count,
        "limitAzn": json_number(snapshot.price_limit),
        "items": _items(snapshot.items),
    }


def category_document(
    result: CategoryResult,
    fx: FxRate,
    scraped_at: datetime,
    price_limit: Decimal,
) -> dict[str, Any]:
    """A per-category file body."""
    return {
        "source": result.source_url,
        "weapon": result.weapon,
        "weaponSlug": result.weapon_slug,
        "currencyTarget": TARGET_CURRENCY,
        "fx": fx.to_block(),
        "scrapedAt": iso_timestamp(scraped_at),
        "count": result.count,
        "limitAzn": json_number(price_limit),
        "items": _items(result.items),
    }


def dump_document(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def _write(path: Path, document: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_document(document), encoding="utf-8")
    logger.info("snapshot_written", path=str(path), count=document["count"], source="writer")
    return path


def write_snapshots(
    snapshot: Snapshot,
    results: Iterable[CategoryResult],
    output_dir: Path | str | None = None,
    legacy_slug: str | None = None,
) -> list[Path]:
    """
    Write per-category files, the aggregate file, and the legacy file.

    The legacy file is only written when its category was aggregated.

    Returns:
        Paths written, in write order.
    """
    root = Path(output_dir if output_dir is not None else settings.OUTPUT_DIR)
    legacy = legacy_slug if legacy_slug is not None else settings.LEGACY_CATEGORY_SLUG
    limit = snapshot.price_limit
    written: list[Path] = []
    legacy_result: CategoryResult | None = None

    for result in results:
        path = root / WEAPONS_SUBDIR / category_filename(result.weapon_slug, limit)
        written.append(
            _write(path, category_document(result, snapshot.fx, snapshot.scraped_at, limit))
        )
        if result.weapon_slug == legacy:
            legacy_result = result

    written.append(_write(root / aggregate_filename(limit), snapshot_document(snapshot)))

    if legacy_result is not None:
        written.append(
            _write(
                root / legacy_filename(legacy, limit),
                category_document(legacy_result, snapshot.fx, snapshot.scraped_at, limit),
            )
        )

    return written
