"""Tests for geospatial operations."""

import random

import pytest

from aws_datastructures_tool.store.core import geo_cells
from aws_datastructures_tool.store.core.geo_operations import (
    geoadd,
    geodist,
    geohash,
    geopos,
    georadius,
    georadiusbymember,
)
from aws_datastructures_tool.store.core.sorted_set_operations import zcard, zrange
from aws_datastructures_tool.store.models import GeoUnit, Location

PALERMO = Location(38.115556, 13.361389)
CATANIA = Location(37.502669, 15.087269)


@pytest.fixture
def sicily(client):
    geoadd(client, "sicily", {"Palermo": PALERMO, "Catania": CATANIA})
    return client


def test_geoadd_reports_new_members(sicily):
    assert geoadd(sicily, "sicily", {"Catania": CATANIA, "Agrigento": Location(37.311, 13.5765)}) == [
        "Agrigento"
    ]
    assert zcard(sicily, "sicily") == 3


def test_geoadd_rejects_invalid_locations(client):
    with pytest.raises(ValueError):
        geoadd(client, "bad", {"ok": PALERMO, "nowhere": Location(95.0, 0.0)})
    assert zcard(client, "bad") == 0


def test_geo_sets_are_sorted_sets(sicily):
    members = zrange(sicily, "sicily", 0, -1)
    assert set(members) == {"Palermo", "Catania"}
    assert all(0 <= score < 2**52 for score in members.values())


def test_geopos(sicily):
    positions = geopos(sicily, "sicily", "Palermo", "Nowhere")

    assert positions["Palermo"].lat == pytest.approx(PALERMO.lat, abs=1e-5)
    assert positions["Palermo"].lon == pytest.approx(PALERMO.lon, abs=1e-5)
    assert positions["Nowhere"] is None


def test_geodist(sicily):
    assert geodist(sicily, "sicily", "Palermo", "Catania") == pytest.approx(166274.15, abs=1.0)
    assert geodist(sicily, "sicily", "Palermo", "Catania", GeoUnit.KILOMETERS) == pytest.approx(
        166.274, abs=0.01
    )
    assert geodist(sicily, "sicily", "Palermo", "Nowhere") is None


def test_geohash(sicily):
    hashes = geohash(sicily, "sicily", "Palermo", "Nowhere")
    assert hashes["Palermo"].startswith("sqc8b49rn")
    assert hashes["Nowhere"] is None


def test_georadius(sicily):
    center = Location(37.0, 15.0)
    assert set(georadius(sicily, "sicily", center, 200, GeoUnit.KILOMETERS)) == {"Palermo", "Catania"}
    assert set(georadius(sicily, "sicily", center, 100, GeoUnit.KILOMETERS)) == {"Catania"}
    assert georadius(sicily, "sicily", center, 10, GeoUnit.KILOMETERS) == {}
    assert len(georadius(sicily, "sicily", center, 200, GeoUnit.KILOMETERS, count=1)) == 1


def test_georadiusbymember(sicily):
    assert set(georadiusbymember(sicily, "sicily", "Palermo", 100, GeoUnit.KILOMETERS)) == {"Palermo"}
    assert set(georadiusbymember(sicily, "sicily", "Palermo", 200, GeoUnit.KILOMETERS)) == {
        "Palermo",
        "Catania",
    }
    assert georadiusbymember(sicily, "sicily", "Nowhere", 200, GeoUnit.KILOMETERS) == {}


def _stored(location: Location) -> Location:
    return Location(*geo_cells.decode(geo_cells.encode(location.lat, location.lon)))


@pytest.mark.parametrize(
    "center, spread, radius_m",
    [
        (Location(52.3676, 4.9041), 0.5, 25_000),
        (Location(0.0, 179.99), 0.3, 15_000),
        (Location(-0.01, -179.995), 0.2, 8_000),
    ],
)
def test_georadius_matches_brute_force(client, center, spread, radius_m):
    rng = random.Random(radius_m)
    points = {}
    for i in range(60):
        lon = center.lon + rng.uniform(-spread, spread)
        lon = (lon + 540.0) % 360.0 - 180.0
        points[f"p{i}"] = Location(center.lat + rng.uniform(-spread, spread), lon)
    geoadd(client, "points", points)

    expected = {
        name for name, location in points.items() if center.distance_to(_stored(location)) <= radius_m
    }
    assert expected
    assert set(georadius(client, "points", center, radius_m)) == expected
