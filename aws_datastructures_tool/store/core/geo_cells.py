"""
Geographic cell identifiers and radius coverings.

A location is quantized to a 2^26 x 2^26 grid over the full latitude and
longitude ranges and the two grid numbers are bit-interleaved (longitude bit
first) into a 52-bit integer. Interleaving makes every cell of a coarser
step a contiguous range of maximum-resolution ids, so a circle can be
searched as a handful of numeric range scans. 52 bits stay exact both in a
DynamoDB number and in a double.

The top bits of an id are the leading bits of the standard base32 geohash of
the same point.
"""

import math

from ..constants import EARTH_RADIUS_METERS, GEO_STEP_MAX, GEOHASH_LENGTH

LAT_MIN, LAT_MAX = -90.0, 90.0
LON_MIN, LON_MAX = -180.0, 180.0

_GEOHASH_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"

# Widening of the bounding box, in degrees, against rounding at its edges
_BOX_MARGIN = 1e-9

Box = tuple[float, float, float, float]


def _spread(v: int) -> int:
    """Move bit i of a 32-bit integer to bit 2i."""
    v &= 0xFFFFFFFF
    v = (v | (v << 16)) & 0x0000FFFF0000FFFF
    v = (v | (v << 8)) & 0x00FF00FF00FF00FF
    v = (v | (v << 4)) & 0x0F0F0F0F0F0F0F0F
    v = (v | (v << 2)) & 0x3333333333333333
    v = (v | (v << 1)) & 0x5555555555555555
    return v


def _squash(v: int) -> int:
    """Inverse of ``_spread``."""
    v &= 0x5555555555555555
    v = (v | (v >> 1)) & 0x3333333333333333
    v = (v | (v >> 2)) & 0x0F0F0F0F0F0F0F0F
    v = (v | (v >> 4)) & 0x00FF00FF00FF00FF
    v = (v | (v >> 8)) & 0x0000FFFF0000FFFF
    v = (v | (v >> 16)) & 0x00000000FFFFFFFF
    return v


def _interleave(lon_cell: int, lat_cell: int) -> int:
    return (_spread(lon_cell) << 1) | _spread(lat_cell)


def _grid(value: float, low: float, high: float, step: int) -> int:
    cells = 1 << step
    cell = int((value - low) / (high - low) * cells)
    return min(max(cell, 0), cells - 1)


def encode(lat: float, lon: float) -> int:
    """
    Cell id of a location at maximum resolution.

    Args:
        lat: Latitude in degrees, -90..90
        lon: Longitude in degrees, -180..180

    Returns:
        52-bit cell id

    Raises:
        ValueError: If the coordinates are out of range
    """
    if not (LAT_MIN <= lat <= LAT_MAX and LON_MIN <= lon <= LON_MAX):
        raise ValueError(f"Invalid coordinates lat={lat} lon={lon}")
    return _interleave(
        _grid(lon, LON_MIN, LON_MAX, GEO_STEP_MAX), _grid(lat, LAT_MIN, LAT_MAX, GEO_STEP_MAX)
    )


def decode(cell_id: int) -> tuple[float, float]:
    """
    Center of a maximum-resolution cell.

    Args:
        cell_id: 52-bit cell id

    Returns:
        Tuple of (lat, lon)
    """
    lon_cell = _squash(cell_id >> 1)
    lat_cell = _squash(cell_id)
    cells = 1 << GEO_STEP_MAX
    lat = LAT_MIN + (lat_cell + 0.5) * (LAT_MAX - LAT_MIN) / cells
    lon = LON_MIN + (lon_cell + 0.5) * (LON_MAX - LON_MIN) / cells
    return lat, lon


def geohash(cell_id: int) -> str:
    """Standard 11 character base32 geohash of a cell id (trailing bits zero)."""
    bits = GEOHASH_LENGTH * 5
    value = cell_id << (bits - 2 * GEO_STEP_MAX)
    return "".join(
        _GEOHASH_ALPHABET[(value >> (bits - 5 * (i + 1))) & 0x1F] for i in range(GEOHASH_LENGTH)
    )


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    lat1, lon1, lat2, lon2 = map(math.radians, (lat1, lon1, lat2, lon2))
    a = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_boxes(lat: float, lon: float, radius_m: float) -> list[Box]:
    """
    Latitude/longitude boxes that contain a spherical cap.

    The longitude half-width of a cap of angular radius d around latitude
    phi is asin(sin d / cos phi). When the cap reaches a pole every longitude
    is included. A box crossing the antimeridian is split in two.

    Args:
        lat: Center latitude in degrees
        lon: Center longitude in degrees
        radius_m: Radius in meters (>= 0)

    Returns:
        List of (lat_min, lat_max, lon_min, lon_max) boxes
    """
    angle = min(radius_m / EARTH_RADIUS_METERS, math.pi)
    dlat = math.degrees(angle) + _BOX_MARGIN
    lat_min, lat_max = lat - dlat, lat + dlat

    if lat_max >= LAT_MAX or lat_min <= LAT_MIN:
        return [(max(lat_min, LAT_MIN), min(lat_max, LAT_MAX), LON_MIN, LON_MAX)]

    ratio = math.sin(angle) / math.cos(math.radians(lat))
    if ratio >= 1.0:
        return [(lat_min, lat_max, LON_MIN, LON_MAX)]

    dlon = math.degrees(math.asin(ratio)) + _BOX_MARGIN
    lon_min, lon_max = lon - dlon, lon + dlon
    if lon_max - lon_min >= LON_MAX - LON_MIN:
        return [(lat_min, lat_max, LON_MIN, LON_MAX)]
    if lon_min < LON_MIN:
        return [(lat_min, lat_max, lon_min + 360.0, LON_MAX), (lat_min, lat_max, LON_MIN, lon_max)]
    if lon_max > LON_MAX:
        return [(lat_min, lat_max, lon_min, LON_MAX), (lat_min, lat_max, LON_MIN, lon_max - 360.0)]
    return [(lat_min, lat_max, lon_min, lon_max)]


def covering_step(box: Box) -> int:
    """Finest step whose cells are at least as large as the box on both axes."""
    lat_min, lat_max, lon_min, lon_max = box
    step = GEO_STEP_MAX
    while step > 0 and (
        (LAT_MAX - LAT_MIN) / (1 << step) < lat_max - lat_min
        or (LON_MAX - LON_MIN) / (1 << step) < lon_max - lon_min
    ):
        step -= 1
    return step


def _box_ranges(box: Box) -> list[tuple[int, int]]:
    lat_min, lat_max, lon_min, lon_max = box
    step = covering_step(box)
    shift = 2 * (GEO_STEP_MAX - step)
    ranges = []
    for lon_cell in range(
        _grid(lon_min, LON_MIN, LON_MAX, step), _grid(lon_max, LON_MIN, LON_MAX, step) + 1
    ):
        for lat_cell in range(
            _grid(lat_min, LAT_MIN, LAT_MAX, step), _grid(lat_max, LAT_MIN, LAT_MAX, step) + 1
        ):
            prefix = _interleave(lon_cell, lat_cell)
            ranges.append((prefix << shift, ((prefix + 1) << shift) - 1))
    return ranges


def merge_ranges(ranges: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Sort inclusive id ranges and merge the ones that touch or overlap."""
    merged: list[tuple[int, int]] = []
    for low, high in sorted(ranges):
        if merged and low <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], high))
        else:
            merged.append((low, high))
    return merged


def covering(lat: float, lon: float, radius_m: float) -> list[tuple[int, int]]:
    """
    Cell id ranges that together contain every location within a radius.

    Each bounding box is covered by the cells of its covering step that it
    intersects; every cell becomes the contiguous range of maximum-resolution
    ids it contains.

    Args:
        lat: Center latitude in degrees
        lon: Center longitude in degrees
        radius_m: Radius in meters

    Returns:
        Sorted, merged list of inclusive (min_id, max_id) ranges

    Raises:
        ValueError: If the center is invalid or the radius negative
    """
    encode(lat, lon)
    if radius_m < 0 or math.isnan(radius_m):
        raise ValueError(f"Invalid radius {radius_m}")

    ranges = []
    for box in bounding_boxes(lat, lon, radius_m):
        ranges.extend(_box_ranges(box))
    return merge_ranges(ranges)
