"""
List operations.

A list is one partition. Every element is an item whose score is an index
issued by the monotonic allocator (negative for left pushes, positive for
right pushes) and whose sort key encodes ``(value, index)``, so equal values
pushed at different times stay distinct items. List order is score order,
read through the score index; positions are offsets into that order.
"""

import logging
from decimal import Decimal
from typing import Any

from ..constants import ATTR_VALUE, ATTR_VALUE_TYPE
from ..exceptions import ConditionFailedError, KVStoreError, PartialOperationError
from ..keys import decode_list_sort_key, encode_list_sort_key, list_member_prefix
from ..models import ListSide, Value
from ..utils import validate_key
from .client import DynamoDBClient
from .expressions import ExpressionBuilder
from .index_allocator import allocate
from .key_operations import delete_members
from .range_scan import Axis, count_items, resolve_range, scan

logger = logging.getLogger(__name__)


def _element_item(client: DynamoDBClient, key: str, value: Value, index: int) -> dict[str, Any]:
    settings = client.settings
    return {
        settings.partition_key: key,
        settings.sort_key: encode_list_sort_key(value, index),
        settings.score_attribute: Decimal(index),
        ATTR_VALUE: value.to_attribute(),
        ATTR_VALUE_TYPE: value.type.value,
    }


def _write_element(client: DynamoDBClient, key: str, value: Value, index: int) -> bool:
    """Create an element item, refusing to overwrite. False on collision."""
    condition = ExpressionBuilder().not_exists(client.settings.partition_key).condition()
    try:
        client.put_item(_element_item(client, key, value, index), condition)
    except ConditionFailedError:
        logger.warning("list %s: element key at index %d already exists, skipped", key, index)
        return False
    return True


def _push(client: DynamoDBClient, key: str, side: ListSide, values: list[Value]) -> int:
    if not values:
        raise ValueError("At least one value is required")

    length = llen(client, key)
    pushed = 0

    for value in values:
        try:
            index = allocate(client, key, side)
            if _write_element(client, key, value, index):
                pushed += 1
        except KVStoreError as e:
            if not pushed:
                raise
            raise PartialOperationError(
                f"Pushed {pushed} of {len(values)} values onto '{key}'", pushed
            ) from e

    return length + pushed


def _pop(client: DynamoDBClient, key: str, side: ListSide) -> Value | None:
    items = list(scan(client, key, count=1, forward=side is ListSide.LEFT, axis=Axis.SCORE))
    if not items:
        return None

    sort_key = items[0].sort_key
    response = client.delete_item(client.key(key, sort_key), return_values="ALL_OLD")
    if not response.get("Attributes"):
        # Someone else removed the element between the scan and the delete
        return None

    value, _ = decode_list_sort_key(sort_key)
    return value


def lpush(client: DynamoDBClient, key: str, *values: Any) -> int:
    """
    Prepend values to a list, one at a time (the last value ends up first).

    Each value costs one atomic index allocation and one conditional put.

    Args:
        client: DynamoDB client
        key: List key
        *values: str, int, float or bytes values

    Returns:
        New length of the list

    Raises:
        UnsupportedValueError: If a value has an unsupported type (nothing is written)
        PartialOperationError: If a write failed after some values were pushed
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    return _push(client, key, ListSide.LEFT, [Value.of(v) for v in values])


def rpush(client: DynamoDBClient, key: str, *values: Any) -> int:
    """
    Append values to a list.

    Args:
        client: DynamoDB client
        key: List key
        *values: str, int, float or bytes values

    Returns:
        New length of the list

    Raises:
        UnsupportedValueError: If a value has an unsupported type (nothing is written)
        PartialOperationError: If a write failed after some values were pushed
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    return _push(client, key, ListSide.RIGHT, [Value.of(v) for v in values])


def lpushx(client: DynamoDBClient, key: str, *values: Any) -> int:
    """Prepend values only when the list already exists. Returns 0 otherwise."""
    validate_key(key)
    encoded = [Value.of(v) for v in values]
    if llen(client, key) == 0:
        return 0
    return _push(client, key, ListSide.LEFT, encoded)


def rpushx(client: DynamoDBClient, key: str, *values: Any) -> int:
    """Append values only when the list already exists. Returns 0 otherwise."""
    validate_key(key)
    encoded = [Value.of(v) for v in values]
    if llen(client, key) == 0:
        return 0
    return _push(client, key, ListSide.RIGHT, encoded)


def lpop(client: DynamoDBClient, key: str) -> Any:
    """
    Remove and return the first element.

    Args:
        client: DynamoDB client
        key: List key

    Returns:
        The element, or None if the list is empty
    """
    validate_key(key)
    value = _pop(client, key, ListSide.LEFT)
    return None if value is None else value.data


def rpop(client: DynamoDBClient, key: str) -> Any:
    """
    Remove and return the last element.

    Args:
        client: DynamoDB client
        key: List key

    Returns:
        The element, or None if the list is empty
    """
    validate_key(key)
    value = _pop(client, key, ListSide.RIGHT)
    return None if value is None else value.data


def llen(client: DynamoDBClient, key: str) -> int:
    """Number of elements in the list (0 when missing)."""
    validate_key(key)
    return count_items(client, key, axis=Axis.SORT_KEY)


def lrange(client: DynamoDBClient, key: str, start: int, stop: int) -> list[Any]:
    """
    Elements between two inclusive positions.

    Negative positions count from the end (-1 is the last element). Positions
    outside the list are clipped; an empty or inverted range gives [].

    Args:
        client: DynamoDB client
        key: List key
        start: First position
        stop: Last position, inclusive

    Returns:
        Elements in list order
    """
    validate_key(key)
    bounds = resolve_range(llen(client, key), start, stop)
    if bounds is None:
        return []

    first, last = bounds
    items = scan(client, key, offset=first, count=last - first + 1, axis=Axis.SCORE)
    return [decode_list_sort_key(item.sort_key)[0].data for item in items]


def lindex(client: DynamoDBClient, key: str, index: int) -> Any:
    """Element at a position, or None when out of range."""
    elements = lrange(client, key, index, index)
    return elements[0] if elements else None


def lset(client: DynamoDBClient, key: str, index: int, value: Any) -> bool:
    """
    Replace the element at a position.

    The old item is deleted and a new one is written at the same score with
    the new value's sort key. The two writes are not atomic.

    Args:
        client: DynamoDB client
        key: List key
        index: Position (negative counts from the end)
        value: New value

    Returns:
        True if replaced, False if the index is out of range

    Raises:
        PartialOperationError: If the old element was deleted but the new one not written
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    new_value = Value.of(value)
    bounds = resolve_range(llen(client, key), index, index)
    if bounds is None:
        return False

    items = list(scan(client, key, offset=bounds[0], count=1, axis=Axis.SCORE))
    if not items:
        return False

    old = items[0]
    client.delete_item(client.key(key, old.sort_key))
    try:
        written = _write_element(client, key, new_value, int(old.score))  # type: ignore[arg-type]
    except KVStoreError as e:
        raise PartialOperationError(
            f"LSET removed position {index} of '{key}' but could not write the new value", 1
        ) from e
    if not written:
        raise PartialOperationError(
            f"LSET removed position {index} of '{key}' but the new element key was taken", 1
        )
    return True


def lrem(client: DynamoDBClient, key: str, count: int, value: Any) -> tuple[int, bool]:
    """
    Remove elements equal to a value.

    Matches are found by their sort-key prefix and ordered by their numeric
    index: head to tail for ``count > 0``, tail to head for ``count < 0``.
    ``count == 0`` removes every match.

    Args:
        client: DynamoDB client
        key: List key
        count: Number of matches to remove and direction
        value: Value to remove

    Returns:
        Tuple of (new length, whether anything matched)

    Raises:
        PartialOperationError: If a delete failed after others succeeded
    """
    validate_key(key)
    target = Value.of(value)
    matches = list(scan(client, key, axis=Axis.SORT_KEY, prefix=list_member_prefix(target)))
    if not matches:
        return llen(client, key), False

    ordered = sorted(matches, key=lambda item: int(item.score), reverse=count < 0)  # type: ignore[arg-type]
    if count != 0:
        ordered = ordered[: abs(count)]

    delete_members(client, key, [item.sort_key for item in ordered], "LREM")
    return llen(client, key), True


def ltrim(client: DynamoDBClient, key: str, start: int, stop: int) -> int:
    """
    Keep only the elements between two inclusive positions.

    An empty resolved range empties the list.

    Args:
        client: DynamoDB client
        key: List key
        start: First position to keep
        stop: Last position to keep, inclusive

    Returns:
        New length of the list

    Raises:
        PartialOperationError: If a delete failed after others succeeded
    """
    validate_key(key)
    length = llen(client, key)
    if length == 0:
        return 0

    bounds = resolve_range(length, start, stop)
    if bounds is None:
        doomed = list(scan(client, key, axis=Axis.SCORE))
    else:
        first, last = bounds
        doomed = list(scan(client, key, offset=last + 1, axis=Axis.SCORE)) if last + 1 < length else []
        if first > 0:
            doomed += list(scan(client, key, count=first, axis=Axis.SCORE))

    delete_members(client, key, [item.sort_key for item in doomed], "LTRIM")
    return llen(client, key)


def rpoplpush(client: DynamoDBClient, source: str, destination: str) -> Any:
    """
    Move the last element of one list to the front of another.

    Not atomic: a pop followed by a push.

    Args:
        client: DynamoDB client
        source: Source list key
        destination: Destination list key (may equal source)

    Returns:
        The moved element, or None if the source is empty

    Raises:
        PartialOperationError: If the element was popped but could not be pushed
    """
    validate_key(source)
    validate_key(destination)
    value = _pop(client, source, ListSide.RIGHT)
    if value is None:
        return None

    try:
        _push(client, destination, ListSide.LEFT, [value])
    except KVStoreError as e:
        raise PartialOperationError(
            f"RPOPLPUSH popped from '{source}' but could not push onto '{destination}'", 1
        ) from e
    return value.data
