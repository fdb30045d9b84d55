"""
Skin Radar — Linked-Data Extractor

Category pages embed their price table as JSON-LD. A page may carry several
blocks; broken ones are skipped so one bad block never costs the whole page.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from bs4 import BeautifulSoup

logger = structlog.get_logger(__name__)

ITEM_LIST_TYPE = "ItemList"


def extract_structured_data(html: str) -> list[Any]:
    """
    Parse every <script type="application/ld+json"> block in the page.

    Returns the successfully parsed JSON values in document order. Empty and
    malformed blocks are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    objects: list[Any] = []

    for index, script in enumerate(soup.find_all("script", type="application/ld+json")):
        raw = (script.string or script.get_text() or "").strip()
        if not raw:
            continue
        try:
            objects.append(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.debug(
                "jsonld_block_invalid",
                block_index=index,
                error=str(e),
                source="jsonld",
            )

    return objects


def _candidates(obj: Any) -> list[Any]:
    """A block can be a single node, a list of nodes, or an @graph wrapper."""
    if isinstance(obj, list):
        return obj
    if isinstance(obj, dict) and isinstance(obj.get("@graph"), list):
        return [obj, *obj["@graph"]]
    return [obj]


def find_item_list(objects: list[Any]) -> dict[str, Any] | None:
    """Return the first node whose @type is ItemList, or None."""
    for obj in objects:
        for node in _candidates(obj):
            if isinstance(node, dict) and node.get("@type") == ITEM_LIST_TYPE:
                return node
    return None
