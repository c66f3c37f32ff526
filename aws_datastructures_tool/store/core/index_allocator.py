"""
Monotonic index allocator for lists.

Each list owns a hash-shaped counter item in the reserved namespace with two
numeric fields, ``index_left`` and ``index_right``. Allocating an index is a
single atomic ADD on one of them, so under any number of concurrent callers
the values handed out on the left are strictly decreasing (-1, -2, ...) and
the values handed out on the right strictly increasing (1, 2, ...). Popped
indices are never reused: the counter item is never deleted.
"""

import logging
from typing import Any

from ..constants import LIST_INDEX_LEFT, LIST_INDEX_RIGHT
from ..keys import counter_key
from ..models import ListSide
from .client import DynamoDBClient
from .expressions import ExpressionBuilder

logger = logging.getLogger(__name__)


def _allocate(client: DynamoDBClient, list_key: str, field: str, delta: int) -> int:
    pk = counter_key(list_key)
    builder = ExpressionBuilder().add(field, delta)

    response = client.update_item(
        key=client.key(pk, pk),
        expression=builder.update(),
        return_values="UPDATED_NEW",
    )

    index = int(response["Attributes"][field])
    logger.debug("allocated %s index %d for list %s", field, index, list_key)
    return index


def allocate_left(client: DynamoDBClient, list_key: str) -> int:
    """
    Atomically issue the next index on the left end of a list.

    Args:
        client: DynamoDB client
        list_key: User-visible list key

    Returns:
        New index, strictly lower than every index issued before on this side

    Raises:
        KVStoreError: For DynamoDB errors
    """
    return _allocate(client, list_key, LIST_INDEX_LEFT, -1)


def allocate_right(client: DynamoDBClient, list_key: str) -> int:
    """
    Atomically issue the next index on the right end of a list.

    Args:
        client: DynamoDB client
        list_key: User-visible list key

    Returns:
        New index, strictly higher than every index issued before on this side

    Raises:
        KVStoreError: For DynamoDB errors
    """
    return _allocate(client, list_key, LIST_INDEX_RIGHT, 1)


def allocate(client: DynamoDBClient, list_key: str, side: ListSide) -> int:
    """Issue an index on the given side."""
    if side is ListSide.LEFT:
        return allocate_left(client, list_key)
    return allocate_right(client, list_key)


def peek(client: DynamoDBClient, list_key: str) -> dict[str, Any]:
    """
    Read the counters of a list without changing them.

    Args:
        client: DynamoDB client
        list_key: User-visible list key

    Returns:
        Dictionary with the left and right counters (0 when never allocated)
    """
    pk = counter_key(list_key)
    item = client.get_item(client.key(pk, pk)) or {}
    return {
        "list": list_key,
        LIST_INDEX_LEFT: int(item.get(LIST_INDEX_LEFT, 0)),
        LIST_INDEX_RIGHT: int(item.get(LIST_INDEX_RIGHT, 0)),
    }
