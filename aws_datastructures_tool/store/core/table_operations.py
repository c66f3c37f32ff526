"""
Table management operations.

Every collection lives in one table: a string partition key (the collection
key), a string sort key (the member) and a local secondary index over the
numeric score attribute. The index projects keys only; readers that need
values go to the table.
"""

import logging
from typing import Any, Literal

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import TableAlreadyExistsError, TableNotFoundError, TransportError
from ..models import StoreSettings

logger = logging.getLogger(__name__)


def _dynamodb(settings: StoreSettings) -> Any:
    session = boto3.Session(profile_name=settings.profile, region_name=settings.region)
    return session.client("dynamodb", endpoint_url=settings.endpoint_url)


def create_table(
    settings: StoreSettings,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
    wait: bool = True,
) -> dict[str, Any]:
    """
    Create the DynamoDB table and its score index.

    Args:
        settings: Table name, index name, attribute names and connection
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)
        wait: Block until the table is active

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
        TransportError: For other DynamoDB errors
    """
    dynamodb = _dynamodb(settings)
    extra: dict[str, Any] = {}
    if billing_mode == "PROVISIONED":
        extra["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    try:
        response = dynamodb.create_table(
            TableName=settings.table_name,
            KeySchema=[
                {"AttributeName": settings.partition_key, "KeyType": "HASH"},
                {"AttributeName": settings.sort_key, "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": settings.partition_key, "AttributeType": "S"},
                {"AttributeName": settings.sort_key, "AttributeType": "S"},
                {"AttributeName": settings.score_attribute, "AttributeType": "N"},
            ],
            LocalSecondaryIndexes=[
                {
                    "IndexName": settings.index_name,
                    "KeySchema": [
                        {"AttributeName": settings.partition_key, "KeyType": "HASH"},
                        {"AttributeName": settings.score_attribute, "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "KEYS_ONLY"},
                }
            ],
            BillingMode=billing_mode,
            Tags=[{"Key": "ManagedBy", "Value": "aws-datastructures-tool"}],
            **extra,
        )
        if wait:
            dynamodb.get_waiter("table_exists").wait(TableName=settings.table_name)
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{settings.table_name}' already exists") from e
        raise TransportError(f"Could not create table '{settings.table_name}': {e}") from e
    except BotoCoreError as e:
        raise TransportError(f"Could not create table '{settings.table_name}': {e}") from e

    logger.info("created table %s with index %s", settings.table_name, settings.index_name)
    return response["TableDescription"]  # type: ignore[no-any-return]


def drop_table(settings: StoreSettings) -> dict[str, Any]:
    """
    Drop the DynamoDB table.

    Args:
        settings: Table name and connection

    Returns:
        Table description

    Raises:
        TableNotFoundError: If table does not exist
    """
    dynamodb = _dynamodb(settings)

    try:
        response = dynamodb.delete_table(TableName=settings.table_name)
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{settings.table_name}' not found") from e
        raise TransportError(f"Could not drop table '{settings.table_name}': {e}") from e

    logger.info("dropped table %s", settings.table_name)
    return response["TableDescription"]  # type: ignore[no-any-return]


def check_table_exists(settings: StoreSettings) -> bool:
    """
    Check if table exists.

    Args:
        settings: Table name and connection

    Returns:
        True if table exists, False otherwise
    """
    dynamodb = _dynamodb(settings)

    try:
        dynamodb.describe_table(TableName=settings.table_name)
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise TransportError(f"Could not describe table '{settings.table_name}': {e}") from e
