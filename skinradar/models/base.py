"""
Pydantic base model and shared field types for Skin Radar records.

All records are frozen and serialize with camelCase keys, which is the
shape the display surface reads.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def json_number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number: 20 stays 20, 14.45 stays 14.45."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def iso_timestamp(value: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


Money = Annotated[Decimal, PlainSerializer(json_number, when_used="json")]
Timestamp = Annotated[datetime, PlainSerializer(iso_timestamp, when_used="json")]


class RecordModel(BaseModel):
    """Base class for all Skin Radar records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
