"""
Hash operations.

A hash is one partition: the sort key is the field name and the item carries
the tagged value. Hash items have no score, so they stay out of the score
index; enumeration scans the table on the sort-key axis.
"""

from typing import Any

from ..constants import ATTR_VALUE, ATTR_VALUE_TYPE
from ..exceptions import ConditionFailedError
from ..models import Value, ValueType
from ..utils import validate_key
from .client import DynamoDBClient
from .expressions import ExpressionBuilder
from .key_operations import delete_members
from .range_scan import Axis, count_items, scan


def _set_value(value: Value) -> ExpressionBuilder:
    return ExpressionBuilder().set(ATTR_VALUE, value.to_attribute()).set(ATTR_VALUE_TYPE, value.type.value)


def _decode(item: dict[str, Any] | None) -> Any:
    if not item or ATTR_VALUE not in item:
        return None
    return Value.from_attribute(item[ATTR_VALUE], item.get(ATTR_VALUE_TYPE)).data


def hset(client: DynamoDBClient, key: str, fields: dict[str, Any]) -> list[str]:
    """
    Set hash fields, one update per field.

    Args:
        client: DynamoDB client
        key: Hash key
        fields: Field to value mapping

    Returns:
        Fields that did not exist before

    Raises:
        UnsupportedValueError: If a value has an unsupported type (nothing is written)
        KVStoreError: For DynamoDB errors
    """
    validate_key(key)
    values = {field: Value.of(value) for field, value in fields.items()}
    created = []
    for field, value in values.items():
        response = client.update_item(
            client.key(key, field), _set_value(value).update(), return_values="ALL_OLD"
        )
        if not response.get("Attributes"):
            created.append(field)
    return created


def hsetnx(client: DynamoDBClient, key: str, field: str, value: Any) -> bool:
    """Set a field only if it does not exist. Returns True if it was set."""
    validate_key(key)
    builder = _set_value(Value.of(value)).not_exists(client.settings.partition_key)
    try:
        client.update_item(client.key(key, field), builder.update())
    except ConditionFailedError:
        return False
    return True


def hget(client: DynamoDBClient, key: str, field: str) -> Any:
    """Value of a field, or None when missing."""
    validate_key(key)
    return _decode(client.get_item(client.key(key, field), projection=[ATTR_VALUE, ATTR_VALUE_TYPE]))


def hmset(client: DynamoDBClient, key: str, fields: dict[str, Any]) -> None:
    """
    Set several fields in one transaction.

    Args:
        client: DynamoDB client
        key: Hash key
        fields: Field to value mapping (at most 100 fields)

    Raises:
        KVStoreError: If the transaction is too large or DynamoDB rejects it
    """
    validate_key(key)
    entries = [
        {"Update": {"Key": client.key(key, field), **_set_value(Value.of(value)).update()}}
        for field, value in fields.items()
    ]
    client.transact_write(entries)


def hmget(client: DynamoDBClient, key: str, *fields: str) -> dict[str, Any]:
    """
    Read several fields as one consistent snapshot.

    Returns:
        Field to value mapping in request order, None for missing fields
    """
    validate_key(key)
    items = client.transact_get(
        [client.key(key, field) for field in fields], projection=[ATTR_VALUE, ATTR_VALUE_TYPE]
    )
    return {field: _decode(item) for field, item in zip(fields, items)}


def hdel(client: DynamoDBClient, key: str, *fields: str) -> list[str]:
    """Delete fields. Returns the fields that existed."""
    validate_key(key)
    return delete_members(client, key, fields, "HDEL")


def hexists(client: DynamoDBClient, key: str, field: str) -> bool:
    """Check whether a field exists."""
    validate_key(key)
    return client.get_item(client.key(key, field), projection=[client.settings.sort_key]) is not None


def hgetall(client: DynamoDBClient, key: str) -> dict[str, Any]:
    """All fields and values, in field order."""
    validate_key(key)
    return {
        item.sort_key: item.value.data if item.value else None
        for item in scan(client, key, axis=Axis.SORT_KEY)
    }


def hkeys(client: DynamoDBClient, key: str) -> list[str]:
    """All field names, in order."""
    validate_key(key)
    return [item.sort_key for item in scan(client, key, axis=Axis.SORT_KEY)]


def hvals(client: DynamoDBClient, key: str) -> list[Any]:
    """All values, in field order."""
    return list(hgetall(client, key).values())


def hlen(client: DynamoDBClient, key: str) -> int:
    """Number of fields."""
    validate_key(key)
    return count_items(client, key, axis=Axis.SORT_KEY)


def _increment(
    client: DynamoDBClient, key: str, field: str, delta: Value, accepts: tuple[ValueType, ...]
) -> Any:
    """Add delta to a field whose stored type is one of accepts. The field takes the delta's type."""
    builder = (
        ExpressionBuilder()
        .add(ATTR_VALUE, delta.to_attribute())
        .set(ATTR_VALUE_TYPE, delta.type.value)
        .absent_or_one_of(ATTR_VALUE_TYPE, *(value_type.value for value_type in accepts))
    )
    try:
        response = client.update_item(client.key(key, field), builder.update(), return_values="ALL_NEW")
    except ConditionFailedError as e:
        kind = "an integer" if delta.type is ValueType.INTEGER else "a number"
        raise ValueError(f"hash value of field '{field}' in '{key}' is not {kind}") from e
    return _decode(response.get("Attributes"))


def hincrby(client: DynamoDBClient, key: str, field: str, delta: int) -> int:
    """
    Atomically add an integer to a field, creating it at 0 first.

    Args:
        client: DynamoDB client
        key: Hash key
        field: Field name
        delta: Integer increment

    Returns:
        Value after the increment

    Raises:
        ValueError: If the increment or the stored value is not an integer
    """
    validate_key(key)
    value = Value.of(delta)
    if value.type is not ValueType.INTEGER:
        raise ValueError(f"HINCRBY needs an integer increment, got {delta!r}")
    return _increment(client, key, field, value, (ValueType.INTEGER,))


def hincrbyfloat(client: DynamoDBClient, key: str, field: str, delta: float) -> float:
    """Atomically add a float to a field, creating it at 0 first. Returns the new value."""
    validate_key(key)
    value = Value(ValueType.FLOAT, float(Value.of(delta).data))
    return _increment(client, key, field, value, (ValueType.INTEGER, ValueType.FLOAT))
