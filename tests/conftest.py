"""
Skin Radar — Shared pytest Fixtures

Provides:
- HTML builders for discovery and category pages
- Raw JSON-LD product builders
- Fixed FX rates
- A recording sleep so retry and pacing delays never actually wait
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from skinradar.models.fx import FallbackRate, ResolvedRate


# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------


def build_product(
    name: str,
    low_price: Any,
    high_price: Any = None,
    offer_count: Any = None,
    currency: str | None = "USD",
    image: Any = None,
    url: str | None = None,
) -> dict[str, Any]:
    offers: dict[str, Any] = {"@type": "AggregateOffer", "lowPrice": low_price}
    if high_price is not None:
        offers["highPrice"] = high_price
    if offer_count is not None:
        offers["offerCount"] = offer_count
    if currency is not None:
        offers["priceCurrency"] = currency

    product: dict[str, Any] = {"@type": "Product", "name": name, "offers": offers}
    if image is not None:
        product["image"] = image
    if url is not None:
        product["url"] = url
    return product


def build_category_html(
    products: list[dict[str, Any]],
    list_name: str = "AK-47 Skins",
    extra_blocks: list[str] | None = None,
) -> str:
    item_list = {
        "@context": "https://schema.org",
        "@type": "ItemList",
        "name": list_name,
        "itemListElement": [
            {"@type": "ListItem", "position": i + 1, "item": p}
            for i, p in enumerate(products)
        ],
    }
    blocks = list(extra_blocks or [])
    blocks.append(json.dumps(item_list))
    scripts = "\n".join(
        f'<script type="application/ld+json">{block}</script>' for block in blocks
    )
    return f"<html><head>{scripts}</head><body><h1>{list_name}</h1></body></html>"


def build_discovery_html(slugs: list[str]) -> str:
    links = "\n".join(f'<a href="/weapons/{slug}">{slug}</a>' for slug in slugs)
    return f"<html><body><nav>{links}</nav></body></html>"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def product() -> Callable[..., dict[str, Any]]:
    return build_product


@pytest.fixture
def category_html() -> Callable[..., str]:
    return build_category_html


@pytest.fixture
def discovery_html() -> Callable[..., str]:
    return build_discovery_html


@pytest.fixture
def fallback_fx() -> FallbackRate:
    """The static 1.7 rate, as used when the FX service is down."""
    return FallbackRate(rate=Decimal("1.7"), reason="test")


@pytest.fixture
def live_fx() -> ResolvedRate:
    return ResolvedRate(
        rate=Decimal("1.7"),
        provider="frankfurter.app",
        fetched_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def scraped_at() -> datetime:
    return datetime(2026, 10, 19, 12, 30, 15, 123000, tzinfo=timezone.utc)
