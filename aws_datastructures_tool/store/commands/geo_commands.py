"""
Geospatial commands.
"""

from typing import Any

import click

from ..core import geo_operations
from ..models import GeoUnit, Location
from .common import run_command, store_options

_unit_option = click.option(
    "--unit",
    type=click.Choice(["m", "km", "mi", "ft"]),
    default="m",
    help="Distance unit (default: m)",
)


def _parse_locations(triples: tuple[str, ...]) -> dict[str, Location]:
    """Parse 'LON LAT MEMBER [LON LAT MEMBER ...]' (Redis argument order)."""
    if not triples or len(triples) % 3:
        raise ValueError("Expected LONGITUDE LATITUDE MEMBER triples")
    return {
        member: Location(lat=float(lat), lon=float(lon))
        for lon, lat, member in zip(triples[::3], triples[1::3], triples[2::3])
    }


def _render_positions(result: dict[str, Any]) -> str:
    return "\n".join(
        f"{member} (nil)" if pos is None else f"{member} {pos['lon']} {pos['lat']}"
        for member, pos in result["members"].items()
    )


@click.command("geoadd")
@click.argument("key")
@click.argument("triples", nargs=-1, required=True)
@store_options
@click.pass_context
def geoadd_command(ctx: click.Context, key: str, triples: tuple[str, ...], **options: Any) -> None:
    """Add members at positions, given as LONGITUDE LATITUDE MEMBER.

    \b
    Examples:
        aws-datastructures-tool store geoadd cities 4.9041 52.3676 amsterdam 5.1214 52.0907 utrecht

    \b
    Output Format:
        {"key": "cities", "added": ["amsterdam", "utrecht"]}
    """
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "added": geo_operations.geoadd(client, key, _parse_locations(triples))},
        render=lambda r: f"Added {len(r['added'])} members",
        hint="Longitudes are -180..180 and latitudes -90..90",
    )


@click.command("geopos")
@click.argument("key")
@click.argument("members", nargs=-1, required=True)
@store_options
@click.pass_context
def geopos_command(ctx: click.Context, key: str, members: tuple[str, ...], **options: Any) -> None:
    """Positions of members."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "members": geo_operations.geopos(client, key, *members)},
        render=_render_positions,
    )


@click.command("geodist")
@click.argument("key")
@click.argument("member1")
@click.argument("member2")
@_unit_option
@store_options
@click.pass_context
def geodist_command(
    ctx: click.Context, key: str, member1: str, member2: str, unit: str, **options: Any
) -> None:
    """Distance between two members (null if either is missing)."""
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "unit": unit,
            "distance": geo_operations.geodist(client, key, member1, member2, GeoUnit.parse(unit)),
        },
        render=lambda r: "(nil)" if r["distance"] is None else f"{r['distance']:.4f} {unit}",
    )


@click.command("geohash")
@click.argument("key")
@click.argument("members", nargs=-1, required=True)
@store_options
@click.pass_context
def geohash_command(ctx: click.Context, key: str, members: tuple[str, ...], **options: Any) -> None:
    """Standard 11 character geohash strings of members."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "hashes": geo_operations.geohash(client, key, *members)},
        render=lambda r: "\n".join(f"{m} {h or '(nil)'}" for m, h in r["hashes"].items()),
    )


@click.command("georadius")
@click.argument("key")
@click.argument("radius", type=float)
@click.option("--lon", type=float, help="Longitude of the center")
@click.option("--lat", type=float, help="Latitude of the center")
@click.option("--member", help="Use this member's position as the center")
@click.option("--count", type=int, default=0, help="Stop after this many matches (0 for all)")
@_unit_option
@store_options
@click.pass_context
def georadius_command(
    ctx: click.Context,
    key: str,
    radius: float,
    lon: float | None,
    lat: float | None,
    member: str | None,
    count: int,
    unit: str,
    **options: Any,
) -> None:
    """Members within RADIUS of a point or of another member.

    Results come in scan order, not sorted by distance; --count stops the
    search early and does not pick the closest matches.

    \b
    Examples:
        aws-datastructures-tool store georadius cities 50 --lon 4.9 --lat 52.37 --unit km
        aws-datastructures-tool store georadius cities 50 --member amsterdam --unit km
    """

    def action(client: Any) -> dict[str, Any]:
        geo_unit = GeoUnit.parse(unit)
        if member is not None:
            found = geo_operations.georadiusbymember(client, key, member, radius, geo_unit, count)
        elif lon is not None and lat is not None:
            found = geo_operations.georadius(client, key, Location(lat, lon), radius, geo_unit, count)
        else:
            raise ValueError("Provide either --member or both --lon and --lat")
        return {"key": key, "members": found}

    run_command(ctx, options, action, render=_render_positions)
