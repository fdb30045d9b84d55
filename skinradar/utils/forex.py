"""
Skin Radar — USD/AZN Currency Conversion

One conversion rate is resolved per run and shared by every category.
resolve_rate() never raises: any problem with the live rate service turns
into a FallbackRate that records why the live rate was not used.

All money values use Decimal. AZN prices are quantized to 2 decimal places
with ROUND_HALF_UP so the display surface always shows consistent cents.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

import httpx
import structlog

from skinradar.config import TARGET_CURRENCY, settings
from skinradar.models.fx import FallbackRate, FxRate, ResolvedRate

logger = structlog.get_logger(__name__)

_TWO_DP = Decimal("0.01")


def convert_usd_to_azn(amount_usd: Decimal, rate: Decimal) -> Decimal:
    """
    Convert a USD amount to AZN, rounded to cents.

    Examples:
        >>> convert_usd_to_azn(Decimal("8.5"), Decimal("1.7"))
        Decimal('14.45')
    """
    if rate <= Decimal("0"):
        raise ValueError(f"rate must be positive, got {rate}")

    return (amount_usd * rate).quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def _parse_rate(data: Any) -> Decimal | None:
    """Pull rates.AZN out of the FX payload; None unless finite and > 0."""
    try:
        raw = data["rates"][TARGET_CURRENCY]
    except (KeyError, TypeError):
        return None

    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None

    try:
        rate = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None

    if not rate.is_finite() or rate <= Decimal("0"):
        return None
    return rate


def _fallback(reason: str) -> FallbackRate:
    logger.warning(
        "forex_api_failed_using_fallback",
        reason=reason,
        fallback_rate=str(settings.FALLBACK_USD_TO_AZN),
        source="forex",
    )
    return FallbackRate(rate=settings.FALLBACK_USD_TO_AZN, reason=reason)


async def resolve_rate(client: httpx.AsyncClient | None = None) -> FxRate:
    """
    Return the current USD/AZN rate for this run.

    Makes a single request to settings.FX_API_URL. Falls back to
    settings.FALLBACK_USD_TO_AZN on a transport error, a non-2xx status, an
    unparseable body, or a missing or non-positive rate.

    Args:
        client: Shared HTTP client. A short-lived one is opened if omitted.
    """
    headers = {"User-Agent": settings.USER_AGENT}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as own_client:
                response = await own_client.get(settings.FX_API_URL, headers=headers)
        else:
            response = await client.get(settings.FX_API_URL, headers=headers)
    except httpx.HTTPError as e:
        return _fallback(f"request error: {e}")

    if not response.is_success:
        return _fallback(f"FX request failed: {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        return _fallback(f"invalid JSON: {e}")

    rate = _parse_rate(data)
    if rate is None:
        return _fallback(f"Invalid {TARGET_CURRENCY} rate from FX source")

    resolved = ResolvedRate(
        rate=rate,
        provider=settings.FX_PROVIDER,
        fetched_at=datetime.now(timezone.utc),
    )
    logger.info(
        "forex_rate_resolved",
        rate=str(rate),
        provider=resolved.provider,
        source="forex",
    )
    return resolved
