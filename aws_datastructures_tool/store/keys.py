"""
Key encodings shared by the collection encoders.

Two schemes live here:

* The reserved namespace. Auxiliary items (the per-list index counters) are
  stored under partition keys that start with ``RESERVED_NAMESPACE``.
  ``utils.validate_key`` rejects every user key with that prefix, so an
  auxiliary item can never alias a user collection.
* The list member sort key. A list element is stored under
  ``"<version>|<type tag>|<base64 payload>|<index>"``. The payload identifies the
  value, the index makes pushes of equal values distinct items. Base64 never
  produces the separator, so the encoding is reversible and two different
  ``(value, index)`` pairs never share a sort key.
"""

import base64
import binascii

from .constants import LIST_SK_SEPARATOR, LIST_SK_VERSION, RESERVED_NAMESPACE
from .models import Value, ValueType


def is_reserved(key: str) -> bool:
    """True when the key lies inside the internal namespace."""
    return key.startswith(RESERVED_NAMESPACE)


def counter_key(list_key: str) -> str:
    """
    Partition key of the index counters of a list.

    Args:
        list_key: User-visible list key

    Returns:
        Key inside the reserved namespace (e.g. '_ds/list/mylist')
    """
    return f"{RESERVED_NAMESPACE}list/{list_key}"


def list_member_prefix(value: Value) -> str:
    """Sort-key prefix shared by every element holding ``value``."""
    payload = base64.b64encode(value.payload()).decode("ascii")
    return LIST_SK_SEPARATOR.join((LIST_SK_VERSION, value.type.value, payload)) + LIST_SK_SEPARATOR


def encode_list_sort_key(value: Value, index: int) -> str:
    """
    Encode a list element sort key.

    Args:
        value: Element value
        index: Position index issued by the allocator

    Returns:
        Sort key, e.g. '1|S|b25l|-3'
    """
    return f"{list_member_prefix(value)}{index}"


def decode_list_sort_key(sort_key: str) -> tuple[Value, int]:
    """
    Decode a list element sort key.

    Args:
        sort_key: Sort key produced by ``encode_list_sort_key``

    Returns:
        Tuple of (value, index)

    Raises:
        ValueError: If the sort key is not a list element key of a known version
    """
    parts = sort_key.split(LIST_SK_SEPARATOR)
    if len(parts) != 4 or parts[0] != LIST_SK_VERSION:
        raise ValueError(f"Not a list element sort key: {sort_key!r}")
    _, tag, payload, index = parts
    try:
        raw = base64.b64decode(payload, validate=True)
        return Value.from_payload(ValueType(tag), raw), int(index)
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Corrupt list element sort key {sort_key!r}: {e}")
