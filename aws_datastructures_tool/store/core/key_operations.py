"""
Whole-key operations: DEL and EXISTS, plus the member deletion loop that
every multi-delete command shares.
"""

import logging
from collections.abc import Iterable

from ..exceptions import KVStoreError, PartialOperationError
from ..utils import validate_key
from .client import DynamoDBClient
from .range_scan import Axis, scan

logger = logging.getLogger(__name__)


def delete_members(
    client: DynamoDBClient, key: str, sort_keys: Iterable[str], operation: str = "DEL"
) -> list[str]:
    """
    Delete members of one collection, one request each.

    Args:
        client: DynamoDB client
        key: Collection key
        sort_keys: Sort keys of the members to delete
        operation: Command name used in logs and errors

    Returns:
        Sort keys that existed and were deleted, in request order

    Raises:
        PartialOperationError: If a delete failed after earlier ones succeeded
        KVStoreError: If the first delete failed
    """
    deleted: list[str] = []
    attempted = 0
    for sort_key in sort_keys:
        try:
            response = client.delete_item(client.key(key, sort_key), return_values="ALL_OLD")
        except KVStoreError as e:
            if not attempted:
                raise
            logger.warning("%s on %s stopped after %d deletes", operation, key, attempted)
            raise PartialOperationError(
                f"{operation} on '{key}' failed after {attempted} deletes removing {len(deleted)} members",
                attempted,
            ) from e
        attempted += 1
        if response.get("Attributes"):
            deleted.append(sort_key)

    logger.debug("%s deleted %d members of %s", operation, len(deleted), key)
    return deleted


def delete(client: DynamoDBClient, key: str) -> list[str]:
    """
    Delete every member of a collection (DEL).

    The sort keys are enumerated first, then deleted one by one. A list's
    index counters live outside the collection and survive, so indices are
    never reissued after a DEL.

    Args:
        client: DynamoDB client
        key: Collection key

    Returns:
        Sort keys that were deleted

    Raises:
        PartialOperationError: If some members were deleted before a failure
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    sort_keys = [item.sort_key for item in scan(client, key, axis=Axis.SORT_KEY)]
    return delete_members(client, key, sort_keys, "DEL")


def exists(client: DynamoDBClient, key: str) -> bool:
    """
    Check whether a collection has at least one member (EXISTS).

    Args:
        client: DynamoDB client
        key: Collection key

    Returns:
        True if any item carries the key
    """
    validate_key(key)
    return any(True for _ in scan(client, key, count=1, axis=Axis.SORT_KEY))
