"""
Skin Radar — Normalized Item Model

One priced skin listing after normalization. Built only by
engine.normalizer.normalize_item, which guarantees low_price_usd > 0.
"""

from __future__ import annotations

from pydantic import Field

from skinradar.models.base import Money, RecordModel


class NormalizedItem(RecordModel):
    """A single skin listing, priced in both USD and AZN."""

    weapon: str = Field(..., description="Weapon display name, e.g. 'AK-47'")
    weapon_slug: str
    full_name: str
    skin_name: str
    item_url: str | None = None
    image_url: str | None = None
    low_price_usd: Money = Field(..., gt=0)
    high_price_usd: Money | None = None
    low_price_azn: Money
    offer_count: int | None = None
    source_currency: str = "USD"

    @property
    def price_key(self) -> tuple:
        """Cheapest-first ordering within a category."""
        return (self.low_price_azn, self.low_price_usd)

    @property
    def snapshot_key(self) -> tuple:
        """Ordering across categories: weapon name case-insensitively, then price."""
        return (self.weapon.casefold(), self.weapon, self.low_price_azn, self.low_price_usd)
