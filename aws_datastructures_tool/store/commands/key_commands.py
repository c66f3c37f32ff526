"""
Whole-key commands.
"""

from typing import Any

import click

from ..core import key_operations
from .common import run_command, store_options


@click.command("del")
@click.argument("key")
@store_options
@click.pass_context
def del_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Delete a collection of any type.

    Every member is deleted with its own request; the command is not atomic.

    \b
    Examples:
        aws-datastructures-tool store del tasks

    \b
    Output Format:
        {"key": "tasks", "deleted": 3}
    """
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "deleted": len(key_operations.delete(client, key))},
        render=lambda r: f"Deleted {r['deleted']} members of '{key}'",
    )


@click.command("exists")
@click.argument("key")
@store_options
@click.pass_context
def exists_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Check whether a collection has any members."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "exists": key_operations.exists(client, key)},
        render=lambda r: "yes" if r["exists"] else "no",
    )
