"""
Sorted set commands.
"""

from typing import Any

import click

from ..core import sorted_set_operations as zset
from ..core.range_caps import RangeCap
from ..models import Aggregation, ZAddFlag
from .common import lines, parse_score_cap, run_command, store_options

_pagination = [
    click.option("--offset", type=int, default=0, help="Matches to skip"),
    click.option("--count", type=int, default=0, help="Maximum matches (0 for all)"),
]


def _paginated(func: Any) -> Any:
    for option in reversed(_pagination):
        func = option(func)
    return func


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, float]:
    """Parse 'SCORE MEMBER [SCORE MEMBER ...]'."""
    if not pairs or len(pairs) % 2:
        raise ValueError("Expected SCORE MEMBER pairs")
    return {member: float(score) for score, member in zip(pairs[::2], pairs[1::2])}


def _parse_weights(weights: tuple[str, ...]) -> dict[str, float] | None:
    parsed = {}
    for weight in weights:
        key, sep, value = weight.rpartition("=")
        if not sep or not key:
            raise ValueError(f"Invalid weight '{weight}', expected KEY=WEIGHT")
        parsed[key] = float(value)
    return parsed or None


def _scores(result: dict[str, Any], field: str = "members") -> str:
    return lines(result[field])


@click.command("zadd")
@click.argument("key")
@click.argument("pairs", nargs=-1, required=True)
@click.option("--nx", "flag", flag_value=ZAddFlag.IF_NOT_EXISTS.value, help="Only add new members")
@click.option("--xx", "flag", flag_value=ZAddFlag.IF_ALREADY_EXISTS.value, help="Only update existing members")
@store_options
@click.pass_context
def zadd_command(ctx: click.Context, key: str, pairs: tuple[str, ...], flag: str | None, **options: Any) -> None:
    """Add members with scores, or update their scores.

    \b
    Examples:
        aws-datastructures-tool store zadd leaderboard 100 alice 85 bob
        aws-datastructures-tool store zadd leaderboard 90 carol --nx

    \b
    Output Format:
        {"key": "leaderboard", "added": ["alice", "bob"]}
    """
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "added": zset.zadd(client, key, _parse_pairs(pairs), ZAddFlag(flag) if flag else None),
        },
        render=lambda r: f"Added {len(r['added'])} members",
        hint="Provide SCORE MEMBER pairs with numeric scores",
    )


@click.command("zscore")
@click.argument("key")
@click.argument("member")
@store_options
@click.pass_context
def zscore_command(ctx: click.Context, key: str, member: str, **options: Any) -> None:
    """Score of a member (null when missing)."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "member": member, "score": zset.zscore(client, key, member)},
        render=lambda r: "(nil)" if r["score"] is None else str(r["score"]),
    )


@click.command("zcard")
@click.argument("key")
@store_options
@click.pass_context
def zcard_command(ctx: click.Context, key: str, **options: Any) -> None:
    """Number of members."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "count": zset.zcard(client, key)},
        render=lambda r: str(r["count"]),
    )


@click.command("zcount")
@click.argument("key")
@click.argument("min_score")
@click.argument("max_score")
@store_options
@click.pass_context
def zcount_command(ctx: click.Context, key: str, min_score: str, max_score: str, **options: Any) -> None:
    """Number of members with a score between MIN and MAX ('(' for exclusive, -inf/+inf)."""
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "count": zset.zcount(client, key, parse_score_cap(min_score), parse_score_cap(max_score)),
        },
        render=lambda r: str(r["count"]),
    )


@click.command("zlexcount")
@click.argument("key")
@click.argument("min_member")
@click.argument("max_member")
@store_options
@click.pass_context
def zlexcount_command(ctx: click.Context, key: str, min_member: str, max_member: str, **options: Any) -> None:
    """Number of members between two names ('[a', '(a', '-', '+')."""
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "count": zset.zlexcount(
                client, key, RangeCap.parse_lex(min_member), RangeCap.parse_lex(max_member)
            ),
        },
        render=lambda r: str(r["count"]),
    )


@click.command("zincrby")
@click.argument("key")
@click.argument("increment", type=float)
@click.argument("member")
@store_options
@click.pass_context
def zincrby_command(ctx: click.Context, key: str, increment: float, member: str, **options: Any) -> None:
    """Add INCREMENT to the score of MEMBER."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "member": member, "score": zset.zincrby(client, key, member, increment)},
        render=lambda r: str(r["score"]),
    )


@click.command("zrem")
@click.argument("key")
@click.argument("members", nargs=-1, required=True)
@store_options
@click.pass_context
def zrem_command(ctx: click.Context, key: str, members: tuple[str, ...], **options: Any) -> None:
    """Remove members."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "removed": zset.zrem(client, key, *members)},
        render=lambda r: f"Removed {len(r['removed'])} members",
    )


@click.command("zrange")
@click.argument("key")
@click.argument("start", type=int, default=0)
@click.argument("stop", type=int, default=-1)
@click.option("--rev", is_flag=True, help="Highest score first")
@store_options
@click.pass_context
def zrange_command(ctx: click.Context, key: str, start: int, stop: int, rev: bool, **options: Any) -> None:
    """Members between two ranks with their scores.

    \b
    Examples:
        # Whole set, lowest score first
        aws-datastructures-tool store zrange leaderboard

    \b
        # Top three
        aws-datastructures-tool store zrange leaderboard 0 2 --rev --text
    """
    ranged = zset.zrevrange if rev else zset.zrange
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "members": ranged(client, key, start, stop)},
        render=_scores,
    )


@click.command("zrangebyscore")
@click.argument("key")
@click.argument("min_score", default="-inf")
@click.argument("max_score", default="+inf")
@_paginated
@click.option("--rev", is_flag=True, help="Highest score first")
@store_options
@click.pass_context
def zrangebyscore_command(
    ctx: click.Context,
    key: str,
    min_score: str,
    max_score: str,
    offset: int,
    count: int,
    rev: bool,
    **options: Any,
) -> None:
    """Members with a score between MIN and MAX."""

    def action(client: Any) -> dict[str, Any]:
        lower, upper = parse_score_cap(min_score), parse_score_cap(max_score)
        if rev:
            members = zset.zrevrangebyscore(client, key, upper, lower, offset, count)
        else:
            members = zset.zrangebyscore(client, key, lower, upper, offset, count)
        return {"key": key, "members": members}

    run_command(ctx, options, action, render=_scores)


@click.command("zrangebylex")
@click.argument("key")
@click.argument("min_member", default="-")
@click.argument("max_member", default="+")
@_paginated
@click.option("--rev", is_flag=True, help="Reverse name order")
@store_options
@click.pass_context
def zrangebylex_command(
    ctx: click.Context,
    key: str,
    min_member: str,
    max_member: str,
    offset: int,
    count: int,
    rev: bool,
    **options: Any,
) -> None:
    """Members between two names ('[a', '(a', '-', '+')."""

    def action(client: Any) -> dict[str, Any]:
        lower, upper = RangeCap.parse_lex(min_member), RangeCap.parse_lex(max_member)
        if rev:
            members = zset.zrevrangebylex(client, key, upper, lower, offset, count)
        else:
            members = zset.zrangebylex(client, key, lower, upper, offset, count)
        return {"key": key, "members": members}

    run_command(ctx, options, action, render=_scores)


@click.command("zrank")
@click.argument("key")
@click.argument("member")
@click.option("--rev", is_flag=True, help="Rank by highest score first")
@store_options
@click.pass_context
def zrank_command(ctx: click.Context, key: str, member: str, rev: bool, **options: Any) -> None:
    """Rank of a member (null when missing)."""
    ranker = zset.zrevrank if rev else zset.zrank
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "member": member, "rank": ranker(client, key, member)},
        render=lambda r: "(nil)" if r["rank"] is None else str(r["rank"]),
    )


@click.command("zpop")
@click.argument("key")
@click.option("--count", type=int, default=1, help="Number of members to pop")
@click.option("--max", "highest", is_flag=True, help="Pop the highest scores instead of the lowest")
@store_options
@click.pass_context
def zpop_command(ctx: click.Context, key: str, count: int, highest: bool, **options: Any) -> None:
    """Remove and return the members with the lowest (or highest) scores."""
    pop = zset.zpopmax if highest else zset.zpopmin
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "members": pop(client, key, count)},
        render=_scores,
    )


@click.command("zremrangebyrank")
@click.argument("key")
@click.argument("start", type=int)
@click.argument("stop", type=int)
@store_options
@click.pass_context
def zremrangebyrank_command(ctx: click.Context, key: str, start: int, stop: int, **options: Any) -> None:
    """Remove the members between two ranks."""
    run_command(
        ctx,
        options,
        lambda client: {"key": key, "removed": zset.zremrangebyrank(client, key, start, stop)},
        render=lambda r: f"Removed {len(r['removed'])} members",
    )


@click.command("zremrangebyscore")
@click.argument("key")
@click.argument("min_score")
@click.argument("max_score")
@store_options
@click.pass_context
def zremrangebyscore_command(ctx: click.Context, key: str, min_score: str, max_score: str, **options: Any) -> None:
    """Remove the members with a score between MIN and MAX."""
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "removed": zset.zremrangebyscore(
                client, key, parse_score_cap(min_score), parse_score_cap(max_score)
            ),
        },
        render=lambda r: f"Removed {len(r['removed'])} members",
    )


@click.command("zremrangebylex")
@click.argument("key")
@click.argument("min_member")
@click.argument("max_member")
@store_options
@click.pass_context
def zremrangebylex_command(ctx: click.Context, key: str, min_member: str, max_member: str, **options: Any) -> None:
    """Remove the members between two names."""
    run_command(
        ctx,
        options,
        lambda client: {
            "key": key,
            "removed": zset.zremrangebylex(
                client, key, RangeCap.parse_lex(min_member), RangeCap.parse_lex(max_member)
            ),
        },
        render=lambda r: f"Removed {len(r['removed'])} members",
    )


def _combine_command(name: str, combine: Any, combine_store: Any, summary: str) -> click.Command:
    @click.command(name, help=summary)
    @click.argument("keys", nargs=-1, required=True)
    @click.option(
        "--aggregate",
        type=click.Choice([a.value for a in Aggregation], case_sensitive=False),
        default=Aggregation.SUM.value,
        help="How scores of the same member are combined",
    )
    @click.option("--weight", "weights", multiple=True, help="KEY=WEIGHT multiplier (repeatable)")
    @click.option("--store", "destination", help="Also merge the result into this key")
    @store_options
    @click.pass_context
    def command(
        ctx: click.Context,
        keys: tuple[str, ...],
        aggregate: str,
        weights: tuple[str, ...],
        destination: str | None,
        **options: Any,
    ) -> None:
        def action(client: Any) -> dict[str, Any]:
            aggregation = Aggregation(aggregate.upper())
            parsed = _parse_weights(weights)
            if destination:
                members = combine_store(client, destination, list(keys), aggregation, parsed)
            else:
                members = combine(client, list(keys), aggregation, parsed)
            return {"keys": list(keys), "destination": destination, "members": members}

        run_command(ctx, options, action, render=_scores, hint="Weights are given as KEY=NUMBER")

    return command


zunion_command = _combine_command(
    "zunion",
    zset.zunion,
    zset.zunionstore,
    """Union of sorted sets.

    \b
    Examples:
        aws-datastructures-tool store zunion week1 week2 --aggregate max
        aws-datastructures-tool store zunion week1 week2 --weight week2=2 --store total
    """,
)
zinter_command = _combine_command(
    "zinter", zset.zinter, zset.zinterstore, "Intersection of sorted sets."
)
