"""Tests for value tagging, units and logging setup."""

import logging
from decimal import Decimal

import pytest
from boto3.dynamodb.types import Binary

from aws_datastructures_tool.store.logging_config import setup_logging
from aws_datastructures_tool.store.models import GeoUnit, Location, Value, ValueType


@pytest.mark.parametrize(
    "raw, tag, expected",
    [
        ("text", "S", Value(ValueType.STRING, "text")),
        (Decimal("7"), "I", Value(ValueType.INTEGER, 7)),
        (Decimal("7"), "F", Value(ValueType.FLOAT, 7.0)),
        (Decimal("0.5"), None, Value(ValueType.FLOAT, 0.5)),
        (Decimal("12"), None, Value(ValueType.INTEGER, 12)),
        (Binary(b"\x01"), None, Value(ValueType.BYTES, b"\x01")),
    ],
)
def test_value_from_attribute(raw, tag, expected):
    assert Value.from_attribute(raw, tag) == expected


def test_attribute_forms():
    assert Value.of(3).to_attribute() == Decimal(3)
    assert Value.of(0.1).to_attribute() == Decimal("0.1")
    assert Value.of(b"ab").to_json() == "YWI="


@pytest.mark.parametrize(
    "name, unit", [("m", GeoUnit.METERS), ("KM", GeoUnit.KILOMETERS), ("mi", GeoUnit.MILES), ("ft", GeoUnit.FEET)]
)
def test_unit_parse(name, unit):
    assert GeoUnit.parse(name) is unit


def test_unit_parse_rejects_unknown():
    with pytest.raises(ValueError):
        GeoUnit.parse("parsec")


def test_unit_conversion():
    assert GeoUnit.KILOMETERS.to_meters(2) == 2000.0
    assert GeoUnit.KILOMETERS.from_meters(1500) == 1.5


def test_location_distance_in_units():
    amsterdam, utrecht = Location(52.3676, 4.9041), Location(52.0907, 5.1214)
    meters = amsterdam.distance_to(utrecht)
    assert 34_000 < meters < 36_000
    assert amsterdam.distance_to(utrecht, GeoUnit.KILOMETERS) == pytest.approx(meters / 1000)


@pytest.mark.parametrize(
    "verbosity, level, library_level",
    [
        (0, logging.WARNING, logging.WARNING),
        (1, logging.INFO, logging.WARNING),
        (2, logging.DEBUG, logging.WARNING),
        (3, logging.DEBUG, logging.DEBUG),
    ],
)
def test_setup_logging(verbosity, level, library_level):
    setup_logging(verbosity)
    assert logging.getLogger().level == level
    assert logging.getLogger("botocore").level == library_level
