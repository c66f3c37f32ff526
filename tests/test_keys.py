"""Tests for key encodings, value tagging and key validation."""

import pytest

from aws_datastructures_tool.store.exceptions import ReservedKeyError, UnsupportedValueError
from aws_datastructures_tool.store.keys import (
    counter_key,
    decode_list_sort_key,
    encode_list_sort_key,
    is_reserved,
    list_member_prefix,
)
from aws_datastructures_tool.store.models import Value, ValueType
from aws_datastructures_tool.store.utils import validate_key


@pytest.mark.parametrize(
    "data, value_type",
    [
        ("hello", ValueType.STRING),
        ("", ValueType.STRING),
        ("a|b|c", ValueType.STRING),
        (42, ValueType.INTEGER),
        (-7, ValueType.INTEGER),
        (2**62, ValueType.INTEGER),
        (3.25, ValueType.FLOAT),
        (-0.1, ValueType.FLOAT),
        (b"\x00\xff|", ValueType.BYTES),
    ],
)
def test_list_sort_key_decodes_to_same_value_and_index(data, value_type):
    value = Value.of(data)
    assert value.type is value_type

    decoded, index = decode_list_sort_key(encode_list_sort_key(value, -12))

    assert decoded == value
    assert index == -12


def test_list_sort_key_format():
    assert encode_list_sort_key(Value.of("one"), 3) == "1|S|b25l|3"


def test_equal_values_at_different_indices_are_distinct_keys():
    value = Value.of("x")
    assert encode_list_sort_key(value, 1) != encode_list_sort_key(value, 11)
    assert encode_list_sort_key(value, 1).startswith(list_member_prefix(value))
    assert encode_list_sort_key(value, 11).startswith(list_member_prefix(value))


def test_member_prefix_separates_types():
    assert list_member_prefix(Value.of("1")) != list_member_prefix(Value.of(1))
    # the trailing separator stops "ab" from matching elements holding "abc"
    assert not encode_list_sort_key(Value.of("abc"), 1).startswith(list_member_prefix(Value.of("ab")))


@pytest.mark.parametrize("sort_key", ["", "name", "2|S|b25l|1", "1|S|b25l", "1|X|b25l|1", "1|S|!!|1"])
def test_decode_rejects_foreign_sort_keys(sort_key):
    with pytest.raises(ValueError):
        decode_list_sort_key(sort_key)


@pytest.mark.parametrize("obj", [True, None, float("nan"), float("inf"), [1], {"a": 1}])
def test_unsupported_values_are_rejected(obj):
    with pytest.raises(UnsupportedValueError):
        Value.of(obj)


def test_counter_key_is_reserved():
    assert counter_key("mylist") == "_ds/list/mylist"
    assert is_reserved(counter_key("mylist"))
    assert not is_reserved("mylist")


def test_validate_key():
    assert validate_key("orders:2024")
    with pytest.raises(ValueError):
        validate_key("")
    with pytest.raises(ValueError):
        validate_key("k" * 2000)
    with pytest.raises(ReservedKeyError):
        validate_key("_ds/list/mylist")
