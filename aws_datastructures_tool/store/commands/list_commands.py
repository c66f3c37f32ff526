"""
List commands.
"""

from typing import Any

import click

from ..core import list_operations
from .common import lines, parse_value, run_command, store_options, value_type_option


def _push_command(name: str, push: Any, summary: str) -> click.Command:
    @click.command(name, help=summary)
    @click.argument("key")
    @click.argument("values", nargs=-1, required=True)
    @value_type_option
    @store_options
    @click.pass_context
    def command(ctx: click.Context, key: str, values: tuple[str, ...], value_type: str, **options: Any) -> None:
        run_command(
            ctx,
            options,
            lambda client: {
                "list": key,
                "length": push(client, key, *[parse_value(v, value_type) for v in values]),
            },
            render=lambda r: f"List '{key}' has {r['length']} elements",
            hint="Provide a list key and at least one value of the given --type",
        )

    return command


lpush_command = _push_command(
    "lpush",
    list_operations.lpush,
    """Prepend values to a list.

    Values are pushed one at a time, so the last value ends up first.

    \b
    Examples:
        aws-datastructures-tool store lpush tasks deploy test build
        aws-datastructures-tool store lpush scores 10 20 --type int

    \b
    Output Format:
        {"list": "tasks", "length": 3}
    """,
)
rpush_command = _push_command(
    "rpush",
    list_operations.rpush,
    """Append values to a list.

    \b
    Examples:
        aws-datastructures-tool store rpush tasks build test deploy

    \b
    Output Format:
        {"list": "tasks", "length": 3}
    """,
)
lpushx_command = _push_command(
    "lpushx", list_operations.lpushx, "Prepend values only if the list exists (length 0 otherwise)."
)
rpushx_command = _push_command(
    "rpushx", list_operations.rpushx, "Append values only if the list exists (length 0 otherwise)."
)


@click.command("lpop")
@click.argument("key")
@store_options
@click.pass_context
def lpop_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Remove and return the first element of a list.

    \b
    Output Format:
        {"list": "tasks", "value": "build"}   (value is null when empty)
    """
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "value": list_operations.lpop(client, key)},
        render=lambda r: "(empty)" if r["value"] is None else str(r["value"]),
    )


@click.command("rpop")
@click.argument("key")
@store_options
@click.pass_context
def rpop_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Remove and return the last element of a list."""
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "value": list_operations.rpop(client, key)},
        render=lambda r: "(empty)" if r["value"] is None else str(r["value"]),
    )


@click.command("llen")
@click.argument("key")
@store_options
@click.pass_context
def llen_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Number of elements in a list."""
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "length": list_operations.llen(client, key)},
        render=lambda r: str(r["length"]),
    )


@click.command("lrange")
@click.argument("key")
@click.argument("start", type=int, default=0)
@click.argument("stop", type=int, default=-1)
@store_options
@click.pass_context
def lrange_command(ctx: click.Context, key: str, start: int, stop: int, **options: Any) -> None:
    """Elements between two positions, inclusive.

    Negative positions count from the end; -1 is the last element.

    \b
    Examples:
        # Whole list
        aws-datastructures-tool store lrange tasks

    \b
        # First three elements, as text
        aws-datastructures-tool store lrange tasks 0 2 --text

    \b
        # Last element
        aws-datastructures-tool store lrange tasks -- -1 -1
    """
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "values": list_operations.lrange(client, key, start, stop)},
        render=lambda r: lines(r["values"]),
    )


@click.command("lindex")
@click.argument("key")
@click.argument("index", type=int)
@store_options
@click.pass_context
def lindex_command(ctx: click.Context, key: str, index: int, **options: Any) -> None:
    """Element at a position (null when out of range)."""
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "index": index, "value": list_operations.lindex(client, key, index)},
        render=lambda r: "(nil)" if r["value"] is None else str(r["value"]),
    )


@click.command("lset")
@click.argument("key")
@click.argument("index", type=int)
@click.argument("value")
@value_type_option
@store_options
@click.pass_context
def lset_command(
    ctx: click.Context, key: str, index: int, value: str, value_type: str, **options: Any
) -> None:
    """Replace the element at a position.

    Not atomic: the old element is removed before the new one is written.
    """
    run_command(
        ctx,
        options,
        lambda client: {
            "list": key,
            "index": index,
            "replaced": list_operations.lset(client, key, index, parse_value(value, value_type)),
        },
        render=lambda r: "OK" if r["replaced"] else "Index out of range",
    )


@click.command("lrem")
@click.argument("key")
@click.argument("count", type=int)
@click.argument("value")
@value_type_option
@store_options
@click.pass_context
def lrem_command(
    ctx: click.Context, key: str, count: int, value: str, value_type: str, **options: Any
) -> None:
    """Remove elements equal to VALUE.

    COUNT > 0 removes that many from the head, COUNT < 0 from the tail and
    COUNT = 0 removes all of them.
    """

    def action(client: Any) -> dict[str, Any]:
        length, matched = list_operations.lrem(client, key, count, parse_value(value, value_type))
        return {"list": key, "length": length, "matched": matched}

    run_command(
        ctx,
        options,
        action,
        render=lambda r: f"List '{key}' has {r['length']} elements" if r["matched"] else "No match",
    )


@click.command("ltrim")
@click.argument("key")
@click.argument("start", type=int)
@click.argument("stop", type=int)
@store_options
@click.pass_context
def ltrim_command(ctx: click.Context, key: str, start: int, stop: int, **options: Any) -> None:
    """Keep only the elements between two positions."""
    run_command(
        ctx,
        options,
        lambda client: {"list": key, "length": list_operations.ltrim(client, key, start, stop)},
        render=lambda r: f"List '{key}' has {r['length']} elements",
    )


@click.command("rpoplpush")
@click.argument("source")
@click.argument("destination")
@store_options
@click.pass_context
def rpoplpush_command(ctx: click.Context, source: str, destination: str, **options: Any) -> None:
    """Move the last element of SOURCE to the front of DESTINATION."""
    run_command(
        ctx,
        options,
        lambda client: {
            "source": source,
            "destination": destination,
            "value": list_operations.rpoplpush(client, source, destination),
        },
        render=lambda r: "(empty)" if r["value"] is None else str(r["value"]),
    )
