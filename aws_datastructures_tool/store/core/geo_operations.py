"""
Geospatial operations.

A geo set is a sorted set whose scores are cell ids (see ``geo_cells``), so
every sorted set command also works on it. Positions read back are cell
centers: exact to well under a meter.

Radius search scans the score index once per range of the circle's cell
covering and drops every candidate farther than the radius. The covering
contains the whole circle, so nothing inside the radius is missed; results
are in scan order, not by distance, and ``count`` stops the search early.
"""

import logging
from typing import Any

from ..models import GeoUnit, Location
from ..utils import validate_key
from . import geo_cells
from .client import DynamoDBClient
from .range_caps import RangeCap
from .range_scan import Axis, scan
from .sorted_set_operations import zadd, zscore

logger = logging.getLogger(__name__)


def _location(cell_id: Any) -> Location:
    lat, lon = geo_cells.decode(int(cell_id))
    return Location(lat, lon)


def geoadd(client: DynamoDBClient, key: str, members: dict[str, Location]) -> list[str]:
    """
    Add or move members.

    Args:
        client: DynamoDB client
        key: Geo set key
        members: Member to location mapping

    Returns:
        Members that were not in the set before

    Raises:
        ValueError: If a location is out of range (nothing is written)
        KVStoreError: For DynamoDB errors
    """
    cells = {member: geo_cells.encode(location.lat, location.lon) for member, location in members.items()}
    return zadd(client, key, cells)


def geopos(client: DynamoDBClient, key: str, *members: str) -> dict[str, Location | None]:
    """Stored position of each member, None for missing members."""
    positions: dict[str, Location | None] = {}
    for member in members:
        cell_id = zscore(client, key, member)
        positions[member] = None if cell_id is None else _location(cell_id)
    return positions


def geodist(
    client: DynamoDBClient, key: str, member1: str, member2: str, unit: GeoUnit = GeoUnit.METERS
) -> float | None:
    """
    Distance between two members.

    Returns:
        Distance in ``unit``, or None if either member is missing
    """
    positions = geopos(client, key, member1, member2)
    first, second = positions[member1], positions[member2]
    if first is None or second is None:
        return None
    return first.distance_to(second, unit)


def geohash(client: DynamoDBClient, key: str, *members: str) -> dict[str, str | None]:
    """Standard geohash string of each member, None for missing members."""
    hashes: dict[str, str | None] = {}
    for member in members:
        cell_id = zscore(client, key, member)
        hashes[member] = None if cell_id is None else geo_cells.geohash(int(cell_id))
    return hashes


def georadius(
    client: DynamoDBClient,
    key: str,
    center: Location,
    radius: float,
    unit: GeoUnit = GeoUnit.METERS,
    count: int = 0,
) -> dict[str, Location]:
    """
    Members within a radius of a point.

    Args:
        client: DynamoDB client
        key: Geo set key
        center: Center of the search
        radius: Radius in ``unit``
        unit: Distance unit
        count: Stop after this many matches, <= 0 for no limit

    Returns:
        Member to position mapping, in scan order

    Raises:
        ValueError: If the center or radius is invalid
    """
    validate_key(key)
    radius_m = unit.to_meters(radius)
    ranges = geo_cells.covering(center.lat, center.lon, radius_m)
    logger.debug("georadius %s: %d cell ranges for %.1f m", key, len(ranges), radius_m)

    found: dict[str, Location] = {}
    for low, high in ranges:
        for item in scan(client, key, RangeCap.score(low), RangeCap.score(high), axis=Axis.SCORE):
            location = _location(item.score)
            if center.distance_to(location) > radius_m:
                continue
            found[item.sort_key] = location
            if 0 < count <= len(found):
                return found
    return found


def georadiusbymember(
    client: DynamoDBClient,
    key: str,
    member: str,
    radius: float,
    unit: GeoUnit = GeoUnit.METERS,
    count: int = 0,
) -> dict[str, Location]:
    """
    Members within a radius of another member (the member itself included).

    Returns:
        Member to position mapping; empty when the member is missing
    """
    center = geopos(client, key, member)[member]
    if center is None:
        return {}
    return georadius(client, key, center, radius, unit, count)
