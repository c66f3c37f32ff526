"""
Sorted set operations.

A sorted set is one partition: the sort key is the member name and the score
attribute holds the score. Lexicographic commands scan the table itself,
score commands scan the score index. Results keep scan order in an
insertion-ordered ``dict`` of member to score.
"""

import logging
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Any

from ..exceptions import ConditionFailedError, KVStoreError, PartialOperationError, UnsupportedValueError
from ..models import Aggregation, Item, Value, ValueType, ZAddFlag
from ..utils import validate_key
from .client import DynamoDBClient
from .expressions import ExpressionBuilder
from .key_operations import delete_members
from .range_caps import UNBOUNDED, RangeCap
from .range_scan import Axis, count_items, resolve_range, scan

logger = logging.getLogger(__name__)

_AGGREGATORS: dict[Aggregation, Callable[[float, float], float]] = {
    Aggregation.SUM: lambda a, b: a + b,
    Aggregation.MIN: min,
    Aggregation.MAX: max,
}


def _score_attribute(score: Any) -> Decimal:
    value = Value.of(score)
    if value.type not in (ValueType.INTEGER, ValueType.FLOAT):
        raise UnsupportedValueError(f"Score must be a number, got {type(score).__name__}")
    return value.to_attribute()  # type: ignore[return-value]


def _scores(items: Iterable[Item]) -> dict[str, float]:
    return {item.sort_key: float(item.score) for item in items}  # type: ignore[arg-type]


def zadd(
    client: DynamoDBClient,
    key: str,
    members: dict[str, int | float],
    flag: ZAddFlag | None = None,
) -> list[str]:
    """
    Add members or update their scores.

    Each member is one conditional update. A member whose precondition fails
    is skipped, not reported as an error.

    Args:
        client: DynamoDB client
        key: Sorted set key
        members: Member to score mapping
        flag: IF_NOT_EXISTS to only add, IF_ALREADY_EXISTS to only update

    Returns:
        Members that did not exist before

    Raises:
        UnsupportedValueError: If a score is not a finite number
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    scores = {member: _score_attribute(score) for member, score in members.items()}
    added = []

    for member, score in scores.items():
        builder = ExpressionBuilder().set(client.settings.score_attribute, score)
        if flag is ZAddFlag.IF_NOT_EXISTS:
            builder.not_exists(client.settings.partition_key)
        elif flag is ZAddFlag.IF_ALREADY_EXISTS:
            builder.exists(client.settings.partition_key)

        try:
            response = client.update_item(
                client.key(key, member), builder.update(), return_values="ALL_OLD"
            )
        except ConditionFailedError:
            logger.debug("zadd %s: precondition %s skipped member %s", key, flag, member)
            continue

        if not response.get("Attributes"):
            added.append(member)

    return added


def zscore(client: DynamoDBClient, key: str, member: str) -> float | None:
    """Score of a member, or None when it is not in the set."""
    validate_key(key)
    score_attribute = client.settings.score_attribute
    item = client.get_item(client.key(key, member), projection=[score_attribute])
    if not item or score_attribute not in item:
        return None
    return float(item[score_attribute])


def zcard(client: DynamoDBClient, key: str) -> int:
    """Number of members."""
    validate_key(key)
    return count_items(client, key, axis=Axis.SORT_KEY)


def zcount(
    client: DynamoDBClient, key: str, lower: RangeCap = UNBOUNDED, upper: RangeCap = UNBOUNDED
) -> int:
    """Number of members with a score between two caps."""
    validate_key(key)
    return count_items(client, key, lower, upper, axis=Axis.SCORE)


def zlexcount(
    client: DynamoDBClient, key: str, lower: RangeCap = UNBOUNDED, upper: RangeCap = UNBOUNDED
) -> int:
    """Number of members whose name lies between two lexicographic caps."""
    validate_key(key)
    return count_items(client, key, lower, upper, axis=Axis.SORT_KEY)


def zincrby(client: DynamoDBClient, key: str, member: str, increment: int | float) -> float:
    """
    Atomically add to a member's score, creating the member at 0 first.

    Args:
        client: DynamoDB client
        key: Sorted set key
        member: Member name
        increment: Amount to add (may be negative)

    Returns:
        New score
    """
    validate_key(key)
    score_attribute = client.settings.score_attribute
    builder = ExpressionBuilder().add(score_attribute, _score_attribute(increment))
    response = client.update_item(client.key(key, member), builder.update(), return_values="ALL_NEW")
    return float(response["Attributes"][score_attribute])


def zrem(client: DynamoDBClient, key: str, *members: str) -> list[str]:
    """
    Remove members.

    Returns:
        Members that existed and were removed
    """
    validate_key(key)
    return delete_members(client, key, members, "ZREM")


def _range_by_rank(client: DynamoDBClient, key: str, start: int, stop: int, forward: bool) -> dict[str, float]:
    bounds = resolve_range(zcard(client, key), start, stop)
    if bounds is None:
        return {}
    first, last = bounds
    items = scan(client, key, offset=first, count=last - first + 1, forward=forward, axis=Axis.SCORE)
    return _scores(items)


def zrange(client: DynamoDBClient, key: str, start: int, stop: int) -> dict[str, float]:
    """
    Members between two ranks, lowest score first.

    Negative ranks count from the highest score (-1 is the last member).

    Args:
        client: DynamoDB client
        key: Sorted set key
        start: First rank
        stop: Last rank, inclusive

    Returns:
        Member to score mapping in rank order
    """
    validate_key(key)
    return _range_by_rank(client, key, start, stop, forward=True)


def zrevrange(client: DynamoDBClient, key: str, start: int, stop: int) -> dict[str, float]:
    """Members between two ranks, highest score first."""
    validate_key(key)
    return _range_by_rank(client, key, start, stop, forward=False)


def zrangebyscore(
    client: DynamoDBClient,
    key: str,
    lower: RangeCap = UNBOUNDED,
    upper: RangeCap = UNBOUNDED,
    offset: int = 0,
    count: int = 0,
) -> dict[str, float]:
    """
    Members with a score between two caps, lowest first.

    Args:
        client: DynamoDB client
        key: Sorted set key
        lower: Minimum score cap
        upper: Maximum score cap
        offset: Matches to skip
        count: Maximum matches to return, 0 for all

    Returns:
        Member to score mapping in score order
    """
    validate_key(key)
    items = scan(client, key, lower, upper, offset, count, forward=True, axis=Axis.SCORE)
    return _scores(items)


def zrevrangebyscore(
    client: DynamoDBClient,
    key: str,
    upper: RangeCap = UNBOUNDED,
    lower: RangeCap = UNBOUNDED,
    offset: int = 0,
    count: int = 0,
) -> dict[str, float]:
    """Members with a score between two caps, highest first. Caps are given max first."""
    validate_key(key)
    items = scan(client, key, lower, upper, offset, count, forward=False, axis=Axis.SCORE)
    return _scores(items)


def zrangebylex(
    client: DynamoDBClient,
    key: str,
    lower: RangeCap = UNBOUNDED,
    upper: RangeCap = UNBOUNDED,
    offset: int = 0,
    count: int = 0,
) -> dict[str, float]:
    """Members whose name lies between two lexicographic caps, in name order."""
    validate_key(key)
    items = scan(client, key, lower, upper, offset, count, forward=True, axis=Axis.SORT_KEY)
    return _scores(items)


def zrevrangebylex(
    client: DynamoDBClient,
    key: str,
    upper: RangeCap = UNBOUNDED,
    lower: RangeCap = UNBOUNDED,
    offset: int = 0,
    count: int = 0,
) -> dict[str, float]:
    """Members between two lexicographic caps in reverse name order. Caps are given max first."""
    validate_key(key)
    items = scan(client, key, lower, upper, offset, count, forward=False, axis=Axis.SORT_KEY)
    return _scores(items)


def zrank(client: DynamoDBClient, key: str, member: str) -> int | None:
    """
    Rank of a member, lowest score first.

    The rank is the number of members with a strictly lower score, counted
    without reading them. Members sharing a score share a rank.

    Returns:
        Zero-based rank, or None when the member is missing
    """
    score = zscore(client, key, member)
    if score is None:
        return None
    return count_items(client, key, upper=RangeCap.score(score, exclusive=True), axis=Axis.SCORE)


def zrevrank(client: DynamoDBClient, key: str, member: str) -> int | None:
    """Rank of a member, highest score first (members with a strictly higher score)."""
    score = zscore(client, key, member)
    if score is None:
        return None
    return count_items(client, key, lower=RangeCap.score(score, exclusive=True), axis=Axis.SCORE)


def _pop(client: DynamoDBClient, key: str, count: int, forward: bool) -> dict[str, float]:
    validate_key(key)
    if count <= 0:
        return {}
    candidates = _scores(scan(client, key, count=count, forward=forward, axis=Axis.SCORE))
    removed = delete_members(client, key, list(candidates), "ZPOPMIN" if forward else "ZPOPMAX")
    return {member: candidates[member] for member in removed}


def zpopmin(client: DynamoDBClient, key: str, count: int = 1) -> dict[str, float]:
    """
    Remove and return the members with the lowest scores.

    Members removed concurrently by someone else between the read and the
    delete are left out of the result.
    """
    return _pop(client, key, count, forward=True)


def zpopmax(client: DynamoDBClient, key: str, count: int = 1) -> dict[str, float]:
    """Remove and return the members with the highest scores."""
    return _pop(client, key, count, forward=False)


def zremrangebyrank(client: DynamoDBClient, key: str, start: int, stop: int) -> list[str]:
    """Remove the members between two ranks. Returns the removed members."""
    return zrem(client, key, *zrange(client, key, start, stop))


def zremrangebyscore(
    client: DynamoDBClient, key: str, lower: RangeCap = UNBOUNDED, upper: RangeCap = UNBOUNDED
) -> list[str]:
    """Remove the members with a score between two caps. Returns the removed members."""
    return zrem(client, key, *zrangebyscore(client, key, lower, upper))


def zremrangebylex(
    client: DynamoDBClient, key: str, lower: RangeCap = UNBOUNDED, upper: RangeCap = UNBOUNDED
) -> list[str]:
    """Remove the members between two lexicographic caps. Returns the removed members."""
    return zrem(client, key, *zrangebylex(client, key, lower, upper))


def _aggregator(aggregate: Aggregation | Callable[[float, float], float]) -> Callable[[float, float], float]:
    if isinstance(aggregate, Aggregation):
        return _AGGREGATORS[aggregate]
    return aggregate


def _weighted(client: DynamoDBClient, key: str, weights: dict[str, float] | None) -> dict[str, float]:
    weight = (weights or {}).get(key, 1.0)
    return {member: score * weight for member, score in zrangebyscore(client, key).items()}


def zunion(
    client: DynamoDBClient,
    keys: list[str],
    aggregate: Aggregation | Callable[[float, float], float] = Aggregation.SUM,
    weights: dict[str, float] | None = None,
) -> dict[str, float]:
    """
    Union of sorted sets, computed in memory.

    Every source is read in full. A member's score is its score in each
    source multiplied by that source's weight (default 1), combined across
    sources with the aggregation.

    Args:
        client: DynamoDB client
        keys: Source keys
        aggregate: SUM, MIN, MAX or a two-argument function
        weights: Source key to weight mapping (optional)

    Returns:
        Member to score mapping
    """
    for key in keys:
        validate_key(key)
    combine = _aggregator(aggregate)
    result: dict[str, float] = {}

    for key in keys:
        for member, score in _weighted(client, key, weights).items():
            result[member] = combine(result[member], score) if member in result else score

    return result


def zinter(
    client: DynamoDBClient,
    keys: list[str],
    aggregate: Aggregation | Callable[[float, float], float] = Aggregation.SUM,
    weights: dict[str, float] | None = None,
) -> dict[str, float]:
    """
    Intersection of sorted sets, computed in memory.

    Scores are weighted and combined as in ``zunion``; only members present
    in every source survive.
    """
    for key in keys:
        validate_key(key)
    if not keys:
        return {}
    combine = _aggregator(aggregate)
    result = _weighted(client, keys[0], weights)

    for key in keys[1:]:
        current = _weighted(client, key, weights)
        result = {
            member: combine(score, current[member])
            for member, score in result.items()
            if member in current
        }
        if not result:
            break

    return result


def _store(client: DynamoDBClient, destination: str, result: dict[str, float]) -> None:
    stored = 0
    for member, score in result.items():
        try:
            zadd(client, destination, {member: score})
        except KVStoreError as e:
            if not stored:
                raise
            raise PartialOperationError(
                f"Stored {stored} of {len(result)} members into '{destination}'", stored
            ) from e
        stored += 1
    logger.debug("stored %d members into %s", stored, destination)


def zunionstore(
    client: DynamoDBClient,
    destination: str,
    keys: list[str],
    aggregate: Aggregation | Callable[[float, float], float] = Aggregation.SUM,
    weights: dict[str, float] | None = None,
) -> dict[str, float]:
    """
    Compute ``zunion`` and merge the result into the destination with ZADD.

    Not atomic, and existing destination members outside the result are kept.

    Returns:
        The computed union
    """
    validate_key(destination)
    result = zunion(client, keys, aggregate, weights)
    _store(client, destination, result)
    return result


def zinterstore(
    client: DynamoDBClient,
    destination: str,
    keys: list[str],
    aggregate: Aggregation | Callable[[float, float], float] = Aggregation.SUM,
    weights: dict[str, float] | None = None,
) -> dict[str, float]:
    """Compute ``zinter`` and merge the result into the destination with ZADD."""
    validate_key(destination)
    result = zinter(client, keys, aggregate, weights)
    _store(client, destination, result)
    return result
