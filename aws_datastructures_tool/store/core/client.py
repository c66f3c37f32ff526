"""
DynamoDB client wrapper with error handling.

The wrapper exposes the handful of primitives the collection encoders are
built from: point get/put/update/delete (optionally conditional), one page of
a Query against the table or the score index, and multi-item transactions.
Every botocore failure is translated into the ``KVStoreError`` taxonomy here
and nowhere else.
"""

import copy
import dataclasses
import logging
from typing import Any, NoReturn

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import DEFAULT_INDEX_NAME, DEFAULT_TABLE_NAME, MAX_TRANSACTION_ITEMS
from ..exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    ConditionFailedError,
    KVStoreError,
    TableNotFoundError,
    TransactionConflictError,
    TransportError,
)
from ..models import StoreSettings

logger = logging.getLogger(__name__)

_THROTTLING_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}
_CONFLICT_CODES = {"TransactionConflictException", "TransactionInProgressException"}


class DynamoDBClient:
    """DynamoDB client wrapper with error handling."""

    def __init__(
        self,
        table_name: str = DEFAULT_TABLE_NAME,
        region: str | None = None,
        profile: str | None = None,
        index_name: str = DEFAULT_INDEX_NAME,
        endpoint_url: str | None = None,
        consistent_read: bool = True,
        settings: StoreSettings | None = None,
    ):
        """
        Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            index_name: Name of the local secondary index over the score attribute
            endpoint_url: Custom endpoint, e.g. DynamoDB Local (optional)
            consistent_read: Use strongly consistent reads
            settings: Complete settings; overrides the individual arguments
        """
        if settings is None:
            settings = StoreSettings(
                table_name=table_name,
                index_name=index_name,
                consistent_read=consistent_read,
                region=region,
                profile=profile,
                endpoint_url=endpoint_url,
            )
        self.settings = settings
        session = boto3.Session(profile_name=settings.profile, region_name=settings.region)
        self.dynamodb = session.resource("dynamodb", endpoint_url=settings.endpoint_url)
        self.table = self.dynamodb.Table(settings.table_name)
        self.table_name = settings.table_name

    def eventually_consistent(self) -> "DynamoDBClient":
        """Copy of this client that issues eventually consistent reads."""
        return self._with_consistency(False)

    def strongly_consistent(self) -> "DynamoDBClient":
        """Copy of this client that issues strongly consistent reads."""
        return self._with_consistency(True)

    def _with_consistency(self, consistent: bool) -> "DynamoDBClient":
        other = copy.copy(self)
        other.settings = dataclasses.replace(self.settings, consistent_read=consistent)
        return other

    def key(self, partition_key: str, sort_key: str) -> dict[str, Any]:
        """Primary key dictionary of an item."""
        return {self.settings.partition_key: partition_key, self.settings.sort_key: sort_key}

    def get_item(
        self, key: dict[str, Any], projection: list[str] | None = None
    ) -> dict[str, Any] | None:
        """
        Get item by key.

        Args:
            key: Key to retrieve
            projection: Attribute names to fetch (optional, all by default)

        Returns:
            Item if found, None otherwise

        Raises:
            KVStoreError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Key": key, "ConsistentRead": self.settings.consistent_read}
        if projection:
            kwargs["ProjectionExpression"] = ", ".join(f"#p{i}" for i in range(len(projection)))
            kwargs["ExpressionAttributeNames"] = {f"#p{i}": a for i, a in enumerate(projection)}
        try:
            response = self.table.get_item(**kwargs)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)
        return response.get("Item")

    def put_item(
        self,
        item: dict[str, Any],
        expression: dict[str, Any] | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any]:
        """
        Put item with optional condition.

        Args:
            item: Item to put
            expression: Condition arguments from an ExpressionBuilder (optional)
            return_values: 'ALL_OLD' to receive the replaced item (optional)

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Item": item, **(expression or {})}
        if return_values:
            kwargs["ReturnValues"] = return_values
        try:
            return self.table.put_item(**kwargs)  # type: ignore[no-any-return]
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)

    def update_item(
        self,
        key: dict[str, Any],
        expression: dict[str, Any],
        return_values: str | None = None,
    ) -> dict[str, Any]:
        """
        Update item, creating it when missing.

        Args:
            key: Key to update
            expression: Update (and condition) arguments from an ExpressionBuilder
            return_values: 'ALL_OLD', 'ALL_NEW', ... (optional)

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Key": key, **expression}
        if return_values:
            kwargs["ReturnValues"] = return_values
        try:
            return self.table.update_item(**kwargs)  # type: ignore[no-any-return]
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)

    def delete_item(
        self,
        key: dict[str, Any],
        expression: dict[str, Any] | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any]:
        """
        Delete item with optional condition.

        Args:
            key: Key to delete
            expression: Condition arguments from an ExpressionBuilder (optional)
            return_values: 'ALL_OLD' to receive the deleted item (optional)

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            KVStoreError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Key": key, **(expression or {})}
        if return_values:
            kwargs["ReturnValues"] = return_values
        try:
            return self.table.delete_item(**kwargs)  # type: ignore[no-any-return]
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)

    def query_page(
        self,
        expression: dict[str, Any],
        use_index: bool = False,
        forward: bool = True,
        limit: int | None = None,
        cursor: dict[str, Any] | None = None,
        select: str | None = None,
    ) -> dict[str, Any]:
        """
        Fetch one page of a Query.

        Args:
            expression: Key condition arguments from an ExpressionBuilder
            use_index: Query the score index instead of the table
            forward: Ascending order when True
            limit: Server-side page limit (optional)
            cursor: LastEvaluatedKey of the previous page (optional)
            select: 'COUNT' for count-only pages (optional)

        Returns:
            Raw response with Items, Count and LastEvaluatedKey

        Raises:
            KVStoreError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {
            **expression,
            "ConsistentRead": self.settings.consistent_read,
            "ScanIndexForward": forward,
        }
        if use_index:
            kwargs["IndexName"] = self.settings.index_name
        if limit:
            kwargs["Limit"] = limit
        if cursor:
            kwargs["ExclusiveStartKey"] = cursor
        if select:
            kwargs["Select"] = select
        try:
            return self.table.query(**kwargs)  # type: ignore[no-any-return]
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)

    def transact_write(self, entries: list[dict[str, Any]]) -> None:
        """
        Execute Put/Update/Delete/ConditionCheck entries atomically.

        Each entry is ``{action: params}`` without a TableName; the table of
        this client is filled in.

        Args:
            entries: Transaction entries

        Raises:
            ConditionFailedError: If any entry's condition fails
            TransactionConflictError: If a concurrent transaction interfered
            KVStoreError: For other DynamoDB errors
        """
        if not entries:
            return
        if len(entries) > MAX_TRANSACTION_ITEMS:
            raise KVStoreError(f"Transaction cannot exceed {MAX_TRANSACTION_ITEMS} operations")

        transact_items = []
        for entry in entries:
            ((action, params),) = entry.items()
            transact_items.append({action: {"TableName": self.table_name, **params}})

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)

    def transact_get(
        self, keys: list[dict[str, Any]], projection: list[str] | None = None
    ) -> list[dict[str, Any] | None]:
        """
        Read several items as one consistent snapshot.

        Args:
            keys: Keys to read
            projection: Attribute names to fetch (optional)

        Returns:
            Items in key order, None where missing

        Raises:
            KVStoreError: For DynamoDB errors
        """
        if not keys:
            return []
        if len(keys) > MAX_TRANSACTION_ITEMS:
            raise KVStoreError(f"Transaction cannot exceed {MAX_TRANSACTION_ITEMS} operations")

        extra: dict[str, Any] = {}
        if projection:
            extra["ProjectionExpression"] = ", ".join(f"#p{i}" for i in range(len(projection)))
            extra["ExpressionAttributeNames"] = {f"#p{i}": a for i, a in enumerate(projection)}
        transact_items = [{"Get": {"TableName": self.table_name, "Key": k, **extra}} for k in keys]

        try:
            response = self.dynamodb.meta.client.transact_get_items(TransactItems=transact_items)
        except (ClientError, BotoCoreError) as e:
            self._handle_error(e)
        return [r.get("Item") or None for r in response.get("Responses", [])]

    def _handle_error(self, error: ClientError | BotoCoreError) -> NoReturn:
        """
        Convert boto3 errors to store exceptions.

        Args:
            error: ClientError or BotoCoreError from boto3

        Raises:
            ConditionFailedError: If a condition check failed
            TransactionConflictError: If a transaction collided with another one
            TableNotFoundError: If table not found
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied
            TransportError: For other errors
        """
        if isinstance(error, BotoCoreError):
            raise TransportError(f"DynamoDB transport error: {error}") from error

        code = error.response["Error"]["Code"]

        if code == "ConditionalCheckFailedException":
            raise ConditionFailedError(f"Condition failed: {error}") from error
        elif code == "TransactionCanceledException":
            reasons = [r.get("Code") for r in error.response.get("CancellationReasons", [])]
            if "ConditionalCheckFailed" in reasons:
                raise ConditionFailedError(f"Transaction condition failed: {error}") from error
            raise TransactionConflictError(f"Transaction cancelled: {error}") from error
        elif code in _CONFLICT_CODES:
            raise TransactionConflictError(f"Transaction conflict: {error}") from error
        elif code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{self.table_name}' not found") from error
        elif code in _THROTTLING_CODES:
            raise AWSThrottlingError("DynamoDB throttling - retry with backoff") from error
        elif code == "AccessDeniedException":
            raise AWSPermissionError("AWS permission denied") from error
        else:
            logger.debug("Unclassified DynamoDB error code %s", code)
            raise TransportError(f"DynamoDB error: {error}") from error
