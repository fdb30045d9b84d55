"""Skin Radar — weapon skin price snapshots under an AZN price ceiling."""

__version__ = "0.1.0"
