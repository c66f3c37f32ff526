"""
Generic paginated range scan over one partition.

Every range-style command (LRANGE, ZRANGEBYSCORE, HGETALL, GEORADIUS, ...) is
a scan of a single partition ordered either by the sort key (lexicographic,
the table itself) or by the score attribute (numeric, the local secondary
index). The engine follows DynamoDB's continuation cursor, skips ``offset``
matches and stops after ``count`` matches.

The engine only understands non-negative offsets. Callers resolve Redis style
negative indices against the collection length first (``resolve_range``).
"""

import logging
from collections.abc import Iterator
from enum import Enum

from ..models import Item
from .client import DynamoDBClient
from .expressions import ExpressionBuilder
from .range_caps import UNBOUNDED, RangeCap, empty_range, excludes

logger = logging.getLogger(__name__)


class Axis(Enum):
    """Ordering axis of a scan."""

    SORT_KEY = "sort_key"
    SCORE = "score"


def _attribute(client: DynamoDBClient, axis: Axis) -> str:
    if axis is Axis.SCORE:
        return client.settings.score_attribute
    return client.settings.sort_key


def _key_condition(
    client: DynamoDBClient,
    key: str,
    lower: RangeCap,
    upper: RangeCap,
    axis: Axis,
    prefix: str | None,
) -> dict:
    builder = ExpressionBuilder().equals(client.settings.partition_key, key)
    if prefix is not None:
        if axis is not Axis.SORT_KEY:
            raise ValueError("Prefix scans are only possible on the sort key axis")
        builder.begins_with(client.settings.sort_key, prefix)
    else:
        builder.range(_attribute(client, axis), lower, upper)
    return builder.key_condition()


def scan(
    client: DynamoDBClient,
    key: str,
    lower: RangeCap = UNBOUNDED,
    upper: RangeCap = UNBOUNDED,
    offset: int = 0,
    count: int = 0,
    forward: bool = True,
    axis: Axis = Axis.SCORE,
    prefix: str | None = None,
) -> Iterator[Item]:
    """
    Lazily scan a partition between two caps.

    Each page requests ``count + offset - seen`` items, which is exactly what
    is still needed once a finite count is known. Scans on the score axis go
    through the local secondary index, which projects keys only, so their
    items carry no value attribute.

    Args:
        client: DynamoDB client
        key: Partition key (the collection key)
        lower: Lower cap (inclusive unless exclusive)
        upper: Upper cap (inclusive unless exclusive)
        offset: Number of leading matches to skip (>= 0)
        count: Maximum number of matches to yield, <= 0 for all
        forward: Ascending order when True
        axis: Order by sort key or by score
        prefix: Sort-key prefix instead of caps (sort key axis only)

    Yields:
        Items in scan order

    Raises:
        ValueError: If offset is negative
        KVStoreError: For DynamoDB errors
    """
    if offset < 0:
        raise ValueError("Scan offset cannot be negative")
    if empty_range(lower, upper):
        return

    expression = _key_condition(client, key, lower, upper, axis, prefix)
    attribute = _attribute(client, axis)
    seen = 0
    returned = 0
    cursor = None

    while True:
        limit = count + offset - seen if count > 0 else None
        response = client.query_page(
            expression,
            use_index=axis is Axis.SCORE,
            forward=forward,
            limit=limit,
            cursor=cursor,
        )
        items = response.get("Items", [])
        cursor = response.get("LastEvaluatedKey")
        logger.debug(
            "scan %s axis=%s limit=%s got=%d more=%s", key, axis.value, limit, len(items), bool(cursor)
        )

        for raw in items:
            if excludes(lower, upper, raw[attribute]):
                continue
            if seen >= offset:
                yield Item.from_raw(raw, client.settings)
                returned += 1
                if 0 < count <= returned:
                    return
            seen += 1

        if not cursor:
            return


def count_items(
    client: DynamoDBClient,
    key: str,
    lower: RangeCap = UNBOUNDED,
    upper: RangeCap = UNBOUNDED,
    axis: Axis = Axis.SCORE,
    prefix: str | None = None,
) -> int:
    """
    Count the items of a partition between two caps without reading them.

    Exclusive ends of a two-sided range are handled by subtracting
    equality counts, since a key condition holds only one comparison.

    Args:
        client: DynamoDB client
        key: Partition key
        lower: Lower cap
        upper: Upper cap
        axis: Count on the sort key or on the score
        prefix: Sort-key prefix instead of caps (sort key axis only)

    Returns:
        Number of matching items
    """
    if empty_range(lower, upper):
        return 0

    total = _count_pages(client, _key_condition(client, key, lower, upper, axis, prefix), axis)

    if prefix is None and lower.present() and upper.present():
        for cap in (lower, upper):
            if cap.exclusive:
                point = RangeCap(cap.bound)
                condition = _key_condition(client, key, point, point, axis, None)
                total -= _count_pages(client, condition, axis)
    return total


def _count_pages(client: DynamoDBClient, expression: dict, axis: Axis) -> int:
    total = 0
    cursor = None
    while True:
        response = client.query_page(
            expression, use_index=axis is Axis.SCORE, cursor=cursor, select="COUNT"
        )
        total += response.get("Count", 0)
        cursor = response.get("LastEvaluatedKey")
        if not cursor:
            return total


def resolve_range(length: int, start: int, stop: int) -> tuple[int, int] | None:
    """
    Resolve Redis style inclusive indices against a collection length.

    Negative indices count from the end; the result is clipped to
    ``[0, length - 1]``.

    Args:
        length: Current number of elements
        start: First index (may be negative)
        stop: Last index, inclusive (may be negative)

    Returns:
        Tuple of non-negative (start, stop), or None when the range is empty
    """
    if start < 0:
        start = length + start
    if stop < 0:
        stop = length + stop
    start = max(start, 0)
    stop = min(stop, length - 1)
    if start > stop or start >= length:
        return None
    return start, stop
