"""
Tests for category aggregation and the cross-category fold
(skinradar/engine/aggregator.py).

Covers:
- Filter to the AZN ceiling and cheapest-first ordering
- USD tie-break for equal rounded AZN prices
- Category naming fallbacks
- Pages with no ItemList yield empty results, not errors
- aggregate_all ordering and count invariants
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from skinradar.config import settings
from skinradar.engine.aggregator import aggregate_all, aggregate_category, build_category_result
from skinradar.errors import FetchError
from skinradar.models.snapshot import CategoryResult

LIMIT = Decimal("20")
AK_URL = "https://csgoskins.gg/weapons/ak-47"


def _prices(result: CategoryResult) -> list[tuple[Decimal, Decimal]]:
    return [(i.low_price_azn, i.low_price_usd) for i in result.items]


class TestBuildCategoryResult:
    def test_filters_and_sorts_cheapest_first(self, product, category_html, fallback_fx) -> None:
        html = category_html([
            product("AK-47 | Redline", 8.5),
            product("AK-47 | Fire Serpent", 400),
            product("AK-47 | Safari Mesh", 0.05),
            product("AK-47 | Unlisted", 0),
            product("AK-47 | Elite Build", 2.1),
        ])
        result = build_category_result(html, "ak-47", fallback_fx, LIMIT, AK_URL)

        assert [i.skin_name for i in result.items] == ["Safari Mesh", "Elite Build", "Redline"]
        assert result.count == 3
        assert result.weapon == "AK-47"
        assert result.source_url == AK_URL
        assert all(i.low_price_azn <= LIMIT for i in result.items)
        assert _prices(result) == sorted(_prices(result))

    def test_usd_breaks_ties_on_equal_azn(self, product, category_html, fallback_fx) -> None:
        # 1.002 × 1.7 = 1.7034 -> 1.70, same as 1.00 × 1.7
        html = category_html([
            product("MP9 | Bulldozer", "1.002"),
            product("MP9 | Sand Dashed", "1.00"),
        ])
        result = build_category_result(html, "mp9", fallback_fx, LIMIT, "u")

        assert [i.low_price_azn for i in result.items] == [Decimal("1.70"), Decimal("1.70")]
        assert [i.skin_name for i in result.items] == ["Sand Dashed", "Bulldozer"]

    def test_limit_is_inclusive(self, product, category_html, fallback_fx) -> None:
        fx = fallback_fx.model_copy(update={"rate": Decimal("2")})
        html = category_html([
            product("AWP | Exactly", "10.00"),
            product("AWP | Just Over", "10.01"),
        ])
        result = build_category_result(html, "awp", fx, LIMIT, "u")

        assert [i.skin_name for i in result.items] == ["Exactly"]
        assert result.items[0].low_price_azn == Decimal("20.00")

    def test_no_jsonld_block_is_empty_category(self, fallback_fx) -> None:
        html = "<html><body><p>No listings right now</p></body></html>"
        result = build_category_result(html, "negev", fallback_fx, LIMIT, "u")

        assert result.count == 0
        assert result.items == ()
        assert result.weapon == "NEGEV"

    def test_item_list_with_no_elements(self, category_html, fallback_fx) -> None:
        result = build_category_result(category_html([], list_name="Negev Skins"), "negev", fallback_fx, LIMIT, "u")

        assert result.count == 0
        assert result.weapon == "NEGEV"

    def test_all_filtered_uses_item_list_name(self, product, category_html, fallback_fx) -> None:
        html = category_html([product("AWP | Dragon Lore", 10000)], list_name="AWP Skins")
        result = build_category_result(html, "awp", fallback_fx, LIMIT, "u")

        assert result.count == 0
        assert result.weapon == "AWP"

    def test_unnamed_item_list_falls_back_to_slug(self, fallback_fx) -> None:
        html = (
            '<script type="application/ld+json">'
            '{"@type": "ItemList", "itemListElement": '
            '[{"item": {"name": "SSG 08 | Dragonfire", "offers": {"lowPrice": 40}}}]}'
            "</script>"
        )
        result = build_category_result(html, "ssg-08", fallback_fx, LIMIT, "u")

        assert result.count == 0
        assert result.weapon == "ssg-08"

    def test_singular_skin_suffix_stripped(self, product, category_html, fallback_fx) -> None:
        html = category_html([product("Zeus x27 | Olympus", 50)], list_name="Zeus x27 skin")
        result = build_category_result(html, "zeus-x27", fallback_fx, LIMIT, "u")
        assert result.weapon == "Zeus x27"

    def test_malformed_block_does_not_hide_item_list(self, product, category_html, fallback_fx) -> None:
        html = category_html([product("P90 | Sand Spray", 0.03)], list_name="P90 Skins", extra_blocks=["{not json"])
        result = build_category_result(html, "p90", fallback_fx, LIMIT, "u")
        assert result.count == 1

    def test_malformed_list_entries_are_skipped(self, product, fallback_fx) -> None:
        html = (
            '<script type="application/ld+json">'
            '{"@type": "ItemList", "name": "P90 Skins", "itemListElement": '
            '[null, "x", {"position": 1}, {"item": {"name": "P90 | Ash Wood", "offers": {"lowPrice": 0.1}}}]}'
            "</script>"
        )
        result = build_category_result(html, "p90", fallback_fx, LIMIT, "u")
        assert [i.skin_name for i in result.items] == ["Ash Wood"]


class TestAggregateCategory:
    @pytest.mark.asyncio
    async def test_fetches_and_builds(self, product, category_html, fallback_fx) -> None:
        fetcher = MagicMock()
        fetcher.fetch_category_page = AsyncMock(
            return_value=category_html([product("AK-47 | Redline", 8.5, offer_count=12)])
        )

        result = await aggregate_category(fetcher, "ak-47", fallback_fx)

        fetcher.fetch_category_page.assert_awaited_once_with("ak-47")
        assert result.source_url == settings.category_url("ak-47")
        assert result.weapon_slug == "ak-47"
        assert result.items[0].low_price_azn == Decimal("14.45")

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, fallback_fx) -> None:
        fetcher = MagicMock()
        fetcher.fetch_category_page = AsyncMock(side_effect=FetchError("ak-47", status_code=429, attempts=4))

        with pytest.raises(FetchError):
            await aggregate_category(fetcher, "ak-47", fallback_fx)


class TestAggregateAll:
    def _results(self, product, category_html, fx) -> list[CategoryResult]:
        ak = build_category_result(
            category_html([product("AK-47 | Redline", 8.5), product("AK-47 | Safari Mesh", 0.05)]),
            "ak-47", fx, LIMIT, AK_URL,
        )
        awp = build_category_result(
            category_html([product("AWP | Safari Mesh", 0.04), product("AWP | Atheris", 3)], list_name="AWP Skins"),
            "awp", fx, LIMIT, "https://csgoskins.gg/weapons/awp",
        )
        empty = build_category_result("<html></html>", "negev", fx, LIMIT, "https://csgoskins.gg/weapons/negev")
        return [awp, ak, empty]

    def test_items_sorted_by_weapon_then_price(self, product, category_html, fallback_fx, scraped_at) -> None:
        results = self._results(product, category_html, fallback_fx)
        snapshot = aggregate_all(results, fallback_fx, LIMIT, scraped_at, settings.discovery_url)

        assert [(i.weapon, i.skin_name) for i in snapshot.items] == [
            ("AK-47", "Safari Mesh"),
            ("AK-47", "Redline"),
            ("AWP", "Safari Mesh"),
            ("AWP", "Atheris"),
        ]
        keys = [i.snapshot_key for i in snapshot.items]
        assert keys == sorted(keys)

    def test_count_invariants(self, product, category_html, fallback_fx, scraped_at) -> None:
        results = self._results(product, category_html, fallback_fx)
        snapshot = aggregate_all(results, fallback_fx, LIMIT, scraped_at, settings.discovery_url)

        assert snapshot.weapons_count == len(snapshot.categories) == 3
        assert snapshot.count == len(snapshot.items) == sum(c.count for c in snapshot.categories) == 4

    def test_summaries_keep_category_order(self, product, category_html, fallback_fx, scraped_at) -> None:
        results = self._results(product, category_html, fallback_fx)
        snapshot = aggregate_all(results, fallback_fx, LIMIT, scraped_at, settings.discovery_url)

        assert [(c.weapon_slug, c.count) for c in snapshot.categories] == [("awp", 2), ("ak-47", 2), ("negev", 0)]

    def test_empty_run(self, fallback_fx, scraped_at) -> None:
        snapshot = aggregate_all([], fallback_fx, LIMIT, scraped_at, settings.discovery_url)
        assert snapshot.count == 0
        assert snapshot.weapons_count == 0

    def test_weapon_order_ignores_case(self, product, category_html, fallback_fx, scraped_at) -> None:
        pages = [
            ("scar-20", "SCAR-20 | Sand Mesh", "SCAR-20 Skins"),
            ("ssg-08", "SSG 08 | Sand Dune", "SSG 08 Skins"),
            ("sawed-off", "Sawed-Off | Forest DDPAT", "Sawed-Off Skins"),
        ]
        results = [
            build_category_result(category_html([product(name, 0.03)], list_name=list_name), slug, fallback_fx, LIMIT, "u")
            for slug, name, list_name in pages
        ]
        snapshot = aggregate_all(results, fallback_fx, LIMIT, scraped_at, settings.discovery_url)

        assert [i.weapon for i in snapshot.items] == ["Sawed-Off", "SCAR-20", "SSG 08"]
