"""
Models package — export all Skin Radar records.
"""

from skinradar.models.fx import FallbackRate, FxRate, ResolvedRate
from skinradar.models.item import NormalizedItem
from skinradar.models.snapshot import CategoryResult, CategorySummary, Snapshot

__all__ = [
    "CategoryResult",
    "CategorySummary",
    "FallbackRate",
    "FxRate",
    "NormalizedItem",
    "ResolvedRate",
    "Snapshot",
]
