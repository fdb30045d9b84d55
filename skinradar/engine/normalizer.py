"""
Skin Radar — Item Normalizer

Turns one raw JSON-LD product into a NormalizedItem, or None when the entry
has no usable price. Validation happens here, at the boundary: nothing
downstream ever sees a partially populated record.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from skinradar.models.item import NormalizedItem
from skinradar.utils.forex import convert_usd_to_azn

NAME_SEPARATOR = "|"
DEFAULT_SOURCE_CURRENCY = "USD"


def parse_number(value: Any) -> Decimal | None:
    """
    Parse a JSON-LD numeric field.

    Accepts ints, floats and numeric strings. Returns None for missing,
    boolean, non-numeric, NaN and infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str, Decimal)):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _parse_count(value: Any) -> int | None:
    number = parse_number(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def split_name(full_name: str, slug: str) -> tuple[str, str]:
    """
    Split 'AK-47 | Redline' into ('AK-47', 'Redline').

    Falls back to slug.upper() for the weapon and the full name for the skin.
    """
    parts = [part.strip() for part in full_name.split(NAME_SEPARATOR)]
    weapon = parts[0] if parts and parts[0] else slug.upper()
    skin = parts[1] if len(parts) > 1 and parts[1] else full_name
    return weapon, skin


def _image_url(image: Any) -> str | None:
    if isinstance(image, list):
        image = image[0] if image else None
    return image if isinstance(image, str) and image else None


def normalize_item(
    raw: Any,
    rate: Decimal,
    slug: str,
) -> NormalizedItem | None:
    """
    Normalize one ItemList product entry.

    Args:
        raw: The `item` object of an itemListElement entry.
        rate: USD -> AZN rate for this run.
        slug: Category slug the entry was listed under.

    Returns:
        NormalizedItem, or None when the low price is missing, non-numeric,
        not positive, or too large to convert.
    """
    if not isinstance(raw, Mapping):
        return None

    offers = raw.get("offers")
    if not isinstance(offers, Mapping):
        offers = {}

    low_price_usd = parse_number(offers.get("lowPrice"))
    if low_price_usd is None or low_price_usd <= 0:
        return None

    try:
        low_price_azn = convert_usd_to_azn(low_price_usd, rate)
    except InvalidOperation:
        # Product too large to round to cents in the decimal context
        return None

    name = raw.get("name")
    full_name = str(name).strip() if name is not None else ""
    weapon, skin_name = split_name(full_name, slug)

    url = raw.get("url")
    currency = offers.get("priceCurrency")

    return NormalizedItem(
        weapon=weapon,
        weapon_slug=slug,
        full_name=full_name,
        skin_name=skin_name,
        item_url=url if isinstance(url, str) and url else None,
        image_url=_image_url(raw.get("image")),
        low_price_usd=low_price_usd,
        high_price_usd=parse_number(offers.get("highPrice")),
        low_price_azn=low_price_azn,
        offer_count=_parse_count(offers.get("offerCount")),
        source_currency=currency if isinstance(currency, str) and currency else DEFAULT_SOURCE_CURRENCY,
    )
