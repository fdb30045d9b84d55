"""
Skin Radar — FX Rate Model

The conversion rate is a tagged value: either a ResolvedRate fetched from the
rate service, or a FallbackRate carrying the reason the live rate was not
used. Both share the FxRate shape that ends up in every snapshot.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from skinradar.config import BASE_CURRENCY, TARGET_CURRENCY
from skinradar.models.base import Money, RecordModel, Timestamp

FALLBACK_PROVIDER = "fallback"


class FxRate(RecordModel):
    """USD -> AZN conversion rate shared read-only by a whole run."""

    rate: Money = Field(..., gt=0)
    provider: str
    fetched_at: Timestamp | None = None

    @property
    def is_fallback(self) -> bool:
        return self.provider == FALLBACK_PROVIDER

    def to_block(self) -> dict:
        """The `fx` block written into every snapshot file."""
        return {
            "base": BASE_CURRENCY,
            "target": TARGET_CURRENCY,
            **self.model_dump(mode="json", by_alias=True, include={"rate", "provider", "fetched_at"}),
        }


class ResolvedRate(FxRate):
    """Rate returned by the live FX service."""

    fetched_at: Timestamp


class FallbackRate(FxRate):
    """Static rate used when the live FX service could not be used."""

    provider: Literal["fallback"] = FALLBACK_PROVIDER
    fetched_at: None = None
    reason: str = ""
