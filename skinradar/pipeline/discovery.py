"""
Skin Radar — Weapon Category Discovery

Scans the marketplace root for /weapons/<slug> links and intersects them
with KNOWN_WEAPON_SLUGS. The allow-list is authoritative: discovery can only
narrow it, and when discovery finds nothing usable the full allow-list is
scraped instead.
"""

from __future__ import annotations

import re

import httpx
import structlog

from skinradar.config import (
    EXCLUDED_WEAPON_PATTERNS,
    EXCLUDED_WEAPON_SLUGS,
    KNOWN_WEAPON_SLUGS,
    settings,
)
from skinradar.errors import DiscoveryError

logger = structlog.get_logger(__name__)

_WEAPON_PATH_RE = re.compile(r"/weapons/([a-z0-9-]+)")


def is_weapon_slug(slug: str) -> bool:
    """False for empty, excluded, or knife/glove/wrap-type slugs."""
    if not slug or slug in EXCLUDED_WEAPON_SLUGS:
        return False
    lowered = slug.lower()
    return not any(pattern in lowered for pattern in EXCLUDED_WEAPON_PATTERNS)


def extract_weapon_slugs(html: str) -> list[str]:
    """
    Pull candidate weapon slugs out of a page, allow-list applied.

    Returns the sorted intersection with KNOWN_WEAPON_SLUGS; may be empty.
    """
    found = {
        match.group(1).strip()
        for match in _WEAPON_PATH_RE.finditer(html)
    }
    return sorted(slug for slug in found if is_weapon_slug(slug) and slug in KNOWN_WEAPON_SLUGS)


async def discover_categories(client: httpx.AsyncClient) -> list[str]:
    """
    Determine which weapon categories to scrape this run.

    Raises:
        DiscoveryError: the discovery page is unreachable or returns a
            non-success status.
    """
    url = settings.discovery_url

    try:
        response = await client.get(url, headers={"User-Agent": settings.USER_AGENT})
    except httpx.HTTPError as e:
        raise DiscoveryError(f"Could not fetch discovery page: {e}") from e

    if not response.is_success:
        raise DiscoveryError(
            f"Could not fetch discovery page: {response.status_code}",
            status_code=response.status_code,
        )

    slugs = extract_weapon_slugs(response.text)

    if not slugs:
        logger.warning(
            "discovery_fallback_to_allow_list",
            url=url,
            allow_list_size=len(KNOWN_WEAPON_SLUGS),
            source="discovery",
        )
        return sorted(KNOWN_WEAPON_SLUGS)

    logger.info("discovery_complete", url=url, count=len(slugs), source="discovery")
    return slugs
