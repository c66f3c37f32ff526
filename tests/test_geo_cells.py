"""Tests for geographic cell ids and radius coverings."""

import math
import random

import pytest

from aws_datastructures_tool.store.core import geo_cells
from aws_datastructures_tool.store.constants import EARTH_RADIUS_METERS

# Half the size of a maximum-resolution cell, in degrees
LAT_TOLERANCE = 180.0 / 2**27 + 1e-12
LON_TOLERANCE = 360.0 / 2**27 + 1e-12


def destination(lat: float, lon: float, bearing: float, distance_m: float) -> tuple[float, float]:
    """Point reached from (lat, lon) after ``distance_m`` along ``bearing`` (radians)."""
    phi1, lambda1 = math.radians(lat), math.radians(lon)
    delta = distance_m / EARTH_RADIUS_METERS
    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(bearing)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(bearing) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    lon2 = (math.degrees(lambda2) + 540.0) % 360.0 - 180.0
    return max(min(math.degrees(phi2), 90.0), -90.0), lon2


def in_ranges(cell_id: int, ranges: list[tuple[int, int]]) -> bool:
    return any(low <= cell_id <= high for low, high in ranges)


@pytest.mark.parametrize(
    "lat, lon",
    [(0.0, 0.0), (38.115556, 13.361389), (-33.8688, 151.2093), (90.0, 180.0), (-90.0, -180.0)],
)
def test_encode_decode_stays_within_one_cell(lat, lon):
    cell_id = geo_cells.encode(lat, lon)
    assert 0 <= cell_id < 2**52

    decoded_lat, decoded_lon = geo_cells.decode(cell_id)
    assert abs(decoded_lat - lat) <= LAT_TOLERANCE
    assert abs(decoded_lon - lon) <= LON_TOLERANCE


def test_decode_is_stable():
    cell_id = geo_cells.encode(52.3676, 4.9041)
    assert geo_cells.encode(*geo_cells.decode(cell_id)) == cell_id


@pytest.mark.parametrize("lat, lon", [(90.1, 0.0), (-91.0, 0.0), (0.0, 180.5), (0.0, -181.0)])
def test_encode_rejects_invalid_coordinates(lat, lon):
    with pytest.raises(ValueError):
        geo_cells.encode(lat, lon)


def test_geohash_matches_standard_encoding():
    palermo = geo_cells.geohash(geo_cells.encode(38.115556, 13.361389))
    assert len(palermo) == 11
    assert palermo.startswith("sqc8b49rn")
    assert geo_cells.geohash(geo_cells.encode(37.502669, 15.087269)).startswith("sqdtr74hy")


def test_haversine():
    distance = geo_cells.haversine_meters(38.115556, 13.361389, 37.502669, 15.087269)
    assert distance == pytest.approx(166274.15, abs=1.0)
    assert geo_cells.haversine_meters(10.0, 20.0, 10.0, 20.0) == 0.0


def test_merge_ranges():
    assert geo_cells.merge_ranges([(5, 9), (0, 4), (20, 30), (25, 26)]) == [(0, 9), (20, 30)]


def test_bounding_box_splits_at_antimeridian():
    boxes = geo_cells.bounding_boxes(0.0, 179.99, 10_000)
    assert len(boxes) == 2
    assert any(box[3] == 180.0 for box in boxes)
    assert any(box[2] == -180.0 for box in boxes)


def test_bounding_box_over_pole_spans_all_longitudes():
    (box,) = geo_cells.bounding_boxes(89.99, 10.0, 5_000)
    assert box[1] == 90.0
    assert (box[2], box[3]) == (-180.0, 180.0)


def test_small_radius_gives_few_ranges():
    assert 1 <= len(geo_cells.covering(52.3676, 4.9041, 500)) <= 4


@pytest.mark.parametrize(
    "lat, lon, radius_m",
    [
        (52.3676, 4.9041, 1_000),
        (52.3676, 4.9041, 250_000),
        (0.0, 0.0, 5_000),
        (0.0, 179.99, 20_000),
        (-45.0, -179.999, 100_000),
        (89.95, 30.0, 20_000),
        (-89.999, 0.0, 1_000),
        (10.0, 10.0, 0.0),
    ],
)
def test_covering_contains_every_point_within_radius(lat, lon, radius_m):
    ranges = geo_cells.covering(lat, lon, radius_m)
    rng = random.Random(f"{lat},{lon},{radius_m}")

    assert in_ranges(geo_cells.encode(lat, lon), ranges)
    for _ in range(300):
        distance = radius_m * 0.999 * math.sqrt(rng.random())
        point = destination(lat, lon, rng.uniform(0, 2 * math.pi), distance)
        assert in_ranges(geo_cells.encode(*point), ranges), point


def test_covering_rejects_invalid_radius():
    with pytest.raises(ValueError):
        geo_cells.covering(0.0, 0.0, -1)
    with pytest.raises(ValueError):
        geo_cells.covering(0.0, 0.0, float("nan"))
