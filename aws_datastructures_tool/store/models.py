"""
Type models for data-structure store operations.
"""

import base64
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from boto3.dynamodb.types import Binary

from .constants import (
    ATTR_PK,
    ATTR_SCORE,
    ATTR_SK,
    ATTR_VALUE,
    ATTR_VALUE_TYPE,
    DEFAULT_INDEX_NAME,
    DEFAULT_TABLE_NAME,
)
from .core.geo_cells import haversine_meters
from .exceptions import UnsupportedValueError


class ValueType(Enum):
    """Tags of the stored value union."""

    STRING = "S"
    INTEGER = "I"
    FLOAT = "F"
    BYTES = "B"


@dataclass(frozen=True)
class Value:
    """A stored value: exactly one of str, int, float or bytes."""

    type: ValueType
    data: str | int | float | bytes

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """
        Wrap a Python object.

        Args:
            obj: str, int, float, bytes (or an existing Value)

        Returns:
            Tagged value

        Raises:
            UnsupportedValueError: For any other type, bools, and non-finite floats
        """
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, bool):
            raise UnsupportedValueError("Unsupported value type: bool")
        if isinstance(obj, str):
            return cls(ValueType.STRING, obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls(ValueType.BYTES, bytes(obj))
        if isinstance(obj, int):
            return cls(ValueType.INTEGER, obj)
        if isinstance(obj, float):
            if not math.isfinite(obj):
                raise UnsupportedValueError(f"Unsupported float value: {obj!r}")
            return cls(ValueType.FLOAT, obj)
        raise UnsupportedValueError(f"Unsupported value type: {type(obj).__name__}")

    @classmethod
    def from_attribute(cls, raw: Any, tag: str | None = None) -> "Value":
        """
        Rebuild a value from its DynamoDB attribute.

        Args:
            raw: Attribute as returned by the boto3 resource layer
            tag: Stored ValueType tag; inferred from the attribute when missing

        Returns:
            Tagged value
        """
        if isinstance(raw, Binary):
            raw = raw.value
        if tag is not None:
            value_type = ValueType(tag)
        elif isinstance(raw, str):
            value_type = ValueType.STRING
        elif isinstance(raw, (bytes, bytearray)):
            value_type = ValueType.BYTES
        elif isinstance(raw, Decimal) and raw == raw.to_integral_value():
            value_type = ValueType.INTEGER
        else:
            value_type = ValueType.FLOAT

        if value_type is ValueType.INTEGER:
            return cls(value_type, int(raw))
        if value_type is ValueType.FLOAT:
            return cls(value_type, float(raw))
        if value_type is ValueType.BYTES:
            return cls(value_type, bytes(raw))
        return cls(value_type, str(raw))

    @classmethod
    def from_payload(cls, value_type: ValueType, payload: bytes) -> "Value":
        """Inverse of ``payload()``."""
        if value_type is ValueType.BYTES:
            return cls(value_type, payload)
        text = payload.decode("utf-8")
        if value_type is ValueType.INTEGER:
            return cls(value_type, int(text))
        if value_type is ValueType.FLOAT:
            return cls(value_type, float(text))
        return cls(value_type, text)

    def to_attribute(self) -> str | Decimal | bytes:
        """Representation accepted by the boto3 resource layer."""
        if self.type is ValueType.INTEGER:
            return Decimal(self.data)  # type: ignore[arg-type]
        if self.type is ValueType.FLOAT:
            return Decimal(repr(self.data))
        return self.data  # type: ignore[return-value]

    def payload(self) -> bytes:
        """Canonical byte form, reversible together with the type tag."""
        if self.type is ValueType.BYTES:
            return self.data  # type: ignore[return-value]
        if self.type is ValueType.FLOAT:
            return repr(self.data).encode("utf-8")
        return str(self.data).encode("utf-8")

    def to_json(self) -> str | int | float:
        """JSON-friendly form; bytes are base64 encoded."""
        if self.type is ValueType.BYTES:
            return base64.b64encode(self.data).decode("ascii")  # type: ignore[arg-type]
        return self.data  # type: ignore[return-value]

    def __str__(self) -> str:
        return str(self.to_json())


@dataclass
class StoreSettings:
    """Table layout and read behaviour of a store."""

    table_name: str = DEFAULT_TABLE_NAME
    index_name: str = DEFAULT_INDEX_NAME
    partition_key: str = ATTR_PK
    sort_key: str = ATTR_SK
    score_attribute: str = ATTR_SCORE
    consistent_read: bool = True
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None


@dataclass
class Item:
    """The universal storage unit: one member of one collection."""

    partition_key: str
    sort_key: str
    score: Decimal | None = None
    value: Value | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any], settings: StoreSettings) -> "Item":
        value = None
        if ATTR_VALUE in raw:
            value = Value.from_attribute(raw[ATTR_VALUE], raw.get(ATTR_VALUE_TYPE))
        return cls(
            partition_key=raw[settings.partition_key],
            sort_key=raw[settings.sort_key],
            score=raw.get(settings.score_attribute),
            value=value,
        )


class ListSide(Enum):
    """End of a list."""

    LEFT = "left"
    RIGHT = "right"


class ZAddFlag(Enum):
    """Preconditions for ZADD."""

    IF_NOT_EXISTS = "NX"
    IF_ALREADY_EXISTS = "XX"


class Aggregation(Enum):
    """Score combination for ZUNION/ZINTER."""

    SUM = "SUM"
    MIN = "MIN"
    MAX = "MAX"


class GeoUnit(Enum):
    """Distance units, valued in meters."""

    METERS = 1.0
    KILOMETERS = 1000.0
    MILES = 1609.34
    FEET = 0.3048

    @classmethod
    def parse(cls, name: str) -> "GeoUnit":
        """Parse the short Redis unit names (m, km, mi, ft)."""
        aliases = {"m": cls.METERS, "km": cls.KILOMETERS, "mi": cls.MILES, "ft": cls.FEET}
        try:
            return aliases[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown unit '{name}', expected one of m, km, mi, ft")

    def to_meters(self, distance: float) -> float:
        return distance * self.value

    def from_meters(self, distance: float) -> float:
        return distance / self.value


@dataclass(frozen=True)
class Location:
    """A point on the earth's surface in degrees."""

    lat: float
    lon: float

    def distance_to(self, other: "Location", unit: GeoUnit = GeoUnit.METERS) -> float:
        """Great-circle distance to another location."""
        return unit.from_meters(haversine_meters(self.lat, self.lon, other.lat, other.lon))
