"""
Set operations.

A set is one partition: the sort key is the member and the score attribute
holds a random 63-bit number. The random score carries no order; it gives
SADD a single unconditional write and SRANDMEMBER a uniform pivot to scan
from. Set algebra is computed in memory over full scans.
"""

import logging
import random
from collections.abc import Iterable
from decimal import Decimal

from ..exceptions import ConditionFailedError, KVStoreError, PartialOperationError
from ..utils import validate_key
from .client import DynamoDBClient
from .expressions import ExpressionBuilder
from .key_operations import delete_members
from .range_caps import RangeCap
from .range_scan import Axis, count_items, scan

logger = logging.getLogger(__name__)

_SCORE_BITS = 63


def _member_item(client: DynamoDBClient, key: str, member: str) -> dict:
    item = client.key(key, member)
    item[client.settings.score_attribute] = Decimal(random.getrandbits(_SCORE_BITS))
    return item


def sadd(client: DynamoDBClient, key: str, *members: str) -> list[str]:
    """
    Add members to a set.

    Each member is one put. Adding an existing member only rerolls its
    random score.

    Args:
        client: DynamoDB client
        key: Set key
        *members: Members to add

    Returns:
        Members that were not in the set before

    Raises:
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    added = []
    for member in members:
        response = client.put_item(_member_item(client, key, member), return_values="ALL_OLD")
        if not response.get("Attributes"):
            added.append(member)
    return added


def srem(client: DynamoDBClient, key: str, *members: str) -> list[str]:
    """
    Remove members from a set.

    Returns:
        Members that were in the set and were removed
    """
    validate_key(key)
    return delete_members(client, key, members, "SREM")


def smembers(client: DynamoDBClient, key: str) -> list[str]:
    """All members, in sort-key order."""
    validate_key(key)
    return [item.sort_key for item in scan(client, key, axis=Axis.SORT_KEY)]


def sismember(client: DynamoDBClient, key: str, member: str) -> bool:
    """Check whether a member is in a set."""
    validate_key(key)
    return client.get_item(client.key(key, member), projection=[client.settings.sort_key]) is not None


def scard(client: DynamoDBClient, key: str) -> int:
    """Number of members."""
    validate_key(key)
    return count_items(client, key, axis=Axis.SORT_KEY)


def smove(client: DynamoDBClient, source: str, destination: str, member: str) -> bool:
    """
    Move a member between sets atomically.

    The delete from the source (conditioned on the member being there) and the
    put into the destination run in one transaction.

    Args:
        client: DynamoDB client
        source: Source set key
        destination: Destination set key
        member: Member to move

    Returns:
        True if moved, False if the member was not in the source

    Raises:
        TransactionConflictError: If a concurrent transaction interfered
        KVStoreError: For DynamoDB errors
    """
    validate_key(source)
    validate_key(destination)
    condition = ExpressionBuilder().exists(client.settings.partition_key).condition()

    try:
        client.transact_write(
            [
                {"Delete": {"Key": client.key(source, member), **condition}},
                {"Put": {"Item": _member_item(client, destination, member)}},
            ]
        )
    except ConditionFailedError:
        return False
    return True


def srandmember(client: DynamoDBClient, key: str, count: int = 1) -> list[str]:
    """
    Pick distinct random members.

    A random pivot is drawn on the score axis; members are read upwards from
    it and, if that runs out, from the bottom of the axis up to the pivot.
    A negative count is treated as its absolute value.

    Args:
        client: DynamoDB client
        key: Set key
        count: Number of members wanted

    Returns:
        Up to ``abs(count)`` distinct members
    """
    validate_key(key)
    count = abs(count)
    if count == 0:
        return []

    pivot = random.getrandbits(_SCORE_BITS)
    members = [
        item.sort_key
        for item in scan(client, key, lower=RangeCap.score(pivot), count=count, axis=Axis.SCORE)
    ]
    if len(members) < count:
        upper = RangeCap.score(pivot, exclusive=True)
        members += [
            item.sort_key
            for item in scan(client, key, upper=upper, count=count - len(members), axis=Axis.SCORE)
        ]
    return members


def spop(client: DynamoDBClient, key: str, count: int = 1) -> list[str]:
    """
    Remove and return random members.

    Members removed by someone else between the pick and the delete are left
    out of the result.
    """
    return delete_members(client, key, srandmember(client, key, count), "SPOP")


def _members(client: DynamoDBClient, key: str) -> set[str]:
    return set(smembers(client, key))


def sunion(client: DynamoDBClient, *keys: str) -> set[str]:
    """Members of any of the sets."""
    result: set[str] = set()
    for key in keys:
        result |= _members(client, key)
    return result


def sinter(client: DynamoDBClient, key: str, *others: str) -> set[str]:
    """Members of the first set that are in every other set."""
    result = _members(client, key)
    for other in others:
        if not result:
            break
        result &= _members(client, other)
    return result


def sdiff(client: DynamoDBClient, key: str, *others: str) -> set[str]:
    """Members of the first set that are in none of the others."""
    result = _members(client, key)
    for other in others:
        if not result:
            break
        result -= _members(client, other)
    return result


def _store(client: DynamoDBClient, destination: str, members: Iterable[str]) -> int:
    members = sorted(members)
    stored = 0
    for member in members:
        try:
            sadd(client, destination, member)
        except KVStoreError as e:
            if not stored:
                raise
            raise PartialOperationError(
                f"Stored {stored} of {len(members)} members into '{destination}'", stored
            ) from e
        stored += 1
    logger.debug("stored %d members into %s", stored, destination)
    return len(members)


def sunionstore(client: DynamoDBClient, destination: str, *keys: str) -> int:
    """
    Add the union of the sets to the destination. Not atomic.

    Returns:
        Number of members in the computed union
    """
    validate_key(destination)
    return _store(client, destination, sunion(client, *keys))


def sinterstore(client: DynamoDBClient, destination: str, key: str, *others: str) -> int:
    """Add the intersection of the sets to the destination. Not atomic."""
    validate_key(destination)
    return _store(client, destination, sinter(client, key, *others))


def sdiffstore(client: DynamoDBClient, destination: str, key: str, *others: str) -> int:
    """Add the difference of the sets to the destination. Not atomic."""
    validate_key(destination)
    return _store(client, destination, sdiff(client, key, *others))
