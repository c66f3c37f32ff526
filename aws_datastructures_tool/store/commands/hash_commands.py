"""
Hash commands.
"""

from typing import Any

import click

from ..core import hash_operations
from .common import lines, parse_value, run_command, store_options, value_type_option


def _parse_fields(pairs: tuple[str, ...], value_type: str) -> dict[str, Any]:
    """Parse 'FIELD VALUE [FIELD VALUE ...]'."""
    if not pairs or len(pairs) % 2:
        raise ValueError("Expected FIELD VALUE pairs")
    return {field: parse_value(raw, value_type) for field, raw in zip(pairs[::2], pairs[1::2])}


@click.command("hset")
@click.argument("key")
@click.argument("pairs", nargs=-1, required=True)
@click.option("--atomic", is_flag=True, help="Write all fields in one transaction (max 100)")
@value_type_option
@store_options
@click.pass_context
def hset_command(
    ctx: click.Context, key: str, pairs: tuple[str, ...], atomic: bool, value_type: str, **options: Any
) -> None:
    """Set hash fields.

    Without --atomic every field is its own write and the output lists the
    fields that were created. With --atomic the fields are written together
    (HMSET) and nothing is reported per field.

    \b
    Examples:
        aws-datastructures-tool store hset user:1 name alice city Amsterdam
        aws-datastructures-tool store hset user:1 age 42 --type int
        aws-datastructures-tool store hset user:1 name bob city Utrecht --atomic

    \b
    Output Format:
        {"hash": "user:1", "created": ["name", "city"]}
    """

    def action(client: Any) -> dict[str, Any]:
        fields = _parse_fields(pairs, value_type)
        if atomic:
            hash_operations.hmset(client, key, fields)
            return {"hash": key, "fields": list(fields)}
        return {"hash": key, "created": hash_operations.hset(client, key, fields)}

    run_command(
        ctx,
        options,
        action,
        render=lambda r: "OK" if "fields" in r else f"Created {len(r['created'])} fields",
        hint="Provide FIELD VALUE pairs of the given --type",
    )


@click.command("hsetnx")
@click.argument("key")
@click.argument("field")
@click.argument("value")
@value_type_option
@store_options
@click.pass_context
def hsetnx_command(
    ctx: click.Context, key: str, field: str, value: str, value_type: str, **options: Any
) -> None:
    """Set a field only if it does not exist yet."""
    run_command(
        ctx,
        options,
        lambda client: {
            "hash": key,
            "field": field,
            "set": hash_operations.hsetnx(client, key, field, parse_value(value, value_type)),
        },
        render=lambda r: "OK" if r["set"] else f"Field '{field}' already exists",
    )


@click.command("hget")
@click.argument("key")
@click.argument("fields", nargs=-1, required=True)
@store_options
@click.pass_context
def hget_command(ctx: click.Context, key: str, fields: tuple[str, ...], **options: Any) -> None:
    """Values of one or more fields (HGET, or HMGET for several)."""

    def action(client: Any) -> dict[str, Any]:
        if len(fields) == 1:
            return {"hash": key, "values": {fields[0]: hash_operations.hget(client, key, fields[0])}}
        return {"hash": key, "values": hash_operations.hmget(client, key, *fields)}

    run_command(ctx, options, action, render=lambda r: lines(r["values"]))


@click.command("hdel")
@click.argument("key")
@click.argument("fields", nargs=-1, required=True)
@store_options
@click.pass_context
def hdel_command(ctx: click.Context, key: str, fields: tuple[str, ...], **options: Any) -> None:
    """Delete fields."""
    run_command(
        ctx,
        options,
        lambda client: {"hash": key, "deleted": hash_operations.hdel(client, key, *fields)},
        render=lambda r: f"Deleted {len(r['deleted'])} fields",
    )


@click.command("hexists")
@click.argument("key")
@click.argument("field")
@store_options
@click.pass_context
def hexists_command(ctx: click.Context, key: str, field: str, **options: Any) -> None:
    """Check whether a field exists."""
    run_command(
        ctx,
        options,
        lambda client: {"hash": key, "field": field, "exists": hash_operations.hexists(client, key, field)},
        render=lambda r: "yes" if r["exists"] else "no",
    )


@click.command("hgetall")
@click.argument("key")
@click.option("--keys-only", is_flag=True, help="Field names only (HKEYS)")
@click.option("--values-only", is_flag=True, help="Values only (HVALS)")
@store_options
@click.pass_context
def hgetall_command(
    ctx: click.Context, key: str, keys_only: bool, values_only: bool, **options: Any
) -> None:
    """All fields and values of a hash."""

    def action(client: Any) -> dict[str, Any]:
        if keys_only:
            return {"hash": key, "fields": hash_operations.hkeys(client, key)}
        if values_only:
            return {"hash": key, "values": hash_operations.hvals(client, key)}
        return {"hash": key, "fields": hash_operations.hgetall(client, key)}

    run_command(
        ctx, options, action, render=lambda r: lines(r["fields"] if "fields" in r else r["values"])
    )


@click.command("hlen")
@click.argument("key")
@store_options
@click.pass_context
def hlen_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Number of fields."""
    run_command(
        ctx,
        options,
        lambda client: {"hash": key, "length": hash_operations.hlen(client, key)},
        render=lambda r: str(r["length"]),
    )


@click.command("hincrby")
@click.argument("key")
@click.argument("field")
@click.argument("increment")
@click.option("--float", "as_float", is_flag=True, help="Floating point increment (HINCRBYFLOAT)")
@store_options
@click.pass_context
def hincrby_command(
    ctx: click.Context, key: str, field: str, increment: str, as_float: bool, **options: Any
) -> None:
    """Atomically add INCREMENT to a numeric field."""

    def action(client: Any) -> dict[str, Any]:
        if as_float:
            value = hash_operations.hincrbyfloat(client, key, field, float(increment))
        else:
            value = hash_operations.hincrby(client, key, field, int(increment))
        return {"hash": key, "field": field, "value": value}

    run_command(ctx, options, action, render=lambda r: str(r["value"]), hint="Provide a numeric increment")
