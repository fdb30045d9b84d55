"""
Skin Radar — Category Result & Snapshot Models
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from skinradar.models.base import RecordModel
from skinradar.models.fx import FxRate
from skinradar.models.item import NormalizedItem


class CategoryResult(RecordModel):
    """Filtered, cheapest-first listings for one weapon category."""

    source_url: str
    weapon_slug: str
    weapon: str
    items: tuple[NormalizedItem, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)


class CategorySummary(RecordModel):
    weapon: str
    weapon_slug: str
    count: int


class Snapshot(RecordModel):
    """
    Aggregate result of one run.

    Invariant: count == len(items) == sum(c.count for c in categories).
    """

    source: str
    fx: FxRate
    scraped_at: datetime
    categories: tuple[CategorySummary, ...] = ()
    price_limit: Decimal
    items: tuple[NormalizedItem, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def weapons_count(self) -> int:
        return len(self.categories)
