"""Skin Radar — Scraper Layer"""

from skinradar.scraper.jsonld import extract_structured_data, find_item_list

__all__ = ["extract_structured_data", "find_item_list"]
