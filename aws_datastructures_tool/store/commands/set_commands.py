"""
Set commands.
"""

from typing import Any

import click

from ..core import set_operations
from .common import lines, run_command, store_options


@click.command("sadd")
@click.argument("key")
@click.argument("members", nargs=-1, required=True)
@store_options
@click.pass_context
def sadd_command(ctx: click.Context, key: str, members: tuple[str, ...], **options: Any) -> None:
    """Add members to a set.

    Adding a member that is already there has no visible effect.

    \b
    Examples:
        aws-datastructures-tool store sadd tags python aws

    \b
    Output Format:
        {"set": "tags", "added": ["python", "aws"]}
    """
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "added": set_operations.sadd(client, key, *members)},
        render=lambda r: f"Added {len(r['added'])} members to '{key}'",
    )


@click.command("srem")
@click.argument("key")
@click.argument("members", nargs=-1, required=True)
@store_options
@click.pass_context
def srem_command(ctx: click.Context, key: str, members: tuple[str, ...], **options: Any) -> None:
    """Remove members from a set."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "removed": set_operations.srem(client, key, *members)},
        render=lambda r: f"Removed {len(r['removed'])} members from '{key}'",
    )


@click.command("smembers")
@click.argument("key")
@store_options
@click.pass_context
def smembers_command(ctx: click.Context, key: str, **options: Any) -> None:
    """All members of a set."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "members": set_operations.smembers(client, key)},
        render=lambda r: lines(r["members"]),
    )


@click.command("sismember")
@click.argument("key")
@click.argument("member")
@store_options
@click.pass_context
def sismember_command(ctx: click.Context, key: str, member: str, **options: Any) -> None:
    """Check whether MEMBER is in a set."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "member": member, "is_member": set_operations.sismember(client, key, member)},
        render=lambda r: "yes" if r["is_member"] else "no",
    )


@click.command("scard")
@click.argument("key")
@store_options
@click.pass_context
def scard_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Number of members in a set."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "size": set_operations.scard(client, key)},
        render=lambda r: str(r["size"]),
    )


@click.command("smove")
@click.argument("source")
@click.argument("destination")
@click.argument("member")
@store_options
@click.pass_context
def smove_command(ctx: click.Context, source: str, destination: str, member: str, **options: Any) -> None:
    """Atomically move MEMBER from SOURCE to DESTINATION."""
    run_command(
        ctx,
        options,
        lambda client: {
            "source": source,
            "destination": destination,
            "member": member,
            "moved": set_operations.smove(client, source, destination, member),
        },
        render=lambda r: "Moved" if r["moved"] else f"'{member}' is not in '{source}'",
    )


@click.command("spop")
@click.argument("key")
@click.option("--count", type=int, default=1, help="Number of members to pop")
@store_options
@click.pass_context
def spop_command(ctx: click.Context, key: str, count: int, **options: Any) -> None:
    """Remove and return random members."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "members": set_operations.spop(client, key, count)},
        render=lambda r: lines(r["members"]),
    )


@click.command("srandmember")
@click.argument("key")
@click.option("--count", type=int, default=1, help="Number of members to pick")
@store_options
@click.pass_context
def srandmember_command(ctx: click.Context, key: str, count: int, **options: Any) -> None:
    """Random members, without removing them."""
    run_command(
        ctx,
        options,
        lambda client: {"set": key, "members": set_operations.srandmember(client, key, count)},
        render=lambda r: lines(r["members"]),
    )


def _algebra_command(name: str, compute: Any, store: Any, summary: str) -> click.Command:
    @click.command(name, help=summary)
    @click.argument("keys", nargs=-1, required=True)
    @click.option("--store", "destination", help="Add the result to this set instead of printing it")
    @store_options
    @click.pass_context
    def command(ctx: click.Context, keys: tuple[str, ...], destination: str | None, **options: Any) -> None:
        def action(client: Any) -> dict[str, Any]:
            if destination:
                return {"destination": destination, "size": store(client, destination, *keys)}
            return {"keys": list(keys), "members": compute(client, *keys)}

        run_command(
            ctx,
            options,
            action,
            render=lambda r: f"Stored {r['size']} members" if "size" in r else lines(r["members"]),
        )

    return command


sunion_command = _algebra_command(
    "sunion", set_operations.sunion, set_operations.sunionstore, "Members of any of the sets."
)
sinter_command = _algebra_command(
    "sinter",
    set_operations.sinter,
    set_operations.sinterstore,
    """Members present in every set.

    \b
    Examples:
        aws-datastructures-tool store sinter tags:alice tags:bob
        aws-datastructures-tool store sinter tags:alice tags:bob --store tags:common
    """,
)
sdiff_command = _algebra_command(
    "sdiff",
    set_operations.sdiff,
    set_operations.sdiffstore,
    "Members of the first set that are in none of the others.",
)
