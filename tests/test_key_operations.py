"""Tests for DEL and EXISTS across collection types."""

import pytest

from aws_datastructures_tool.store.core.hash_operations import hset
from aws_datastructures_tool.store.core.index_allocator import peek
from aws_datastructures_tool.store.core.key_operations import delete, delete_members, exists
from aws_datastructures_tool.store.core.list_operations import llen, rpush
from aws_datastructures_tool.store.core.set_operations import sadd, scard
from aws_datastructures_tool.store.core.sorted_set_operations import zadd, zcard
from aws_datastructures_tool.store.exceptions import PartialOperationError, ReservedKeyError


def test_exists(client):
    assert exists(client, "h") is False
    hset(client, "h", {"f": 1})
    assert exists(client, "h") is True


def test_delete_each_collection_type(client):
    rpush(client, "l", "a", "b")
    sadd(client, "s", "a", "b", "c")
    zadd(client, "z", {"a": 1})
    hset(client, "h", {"f": 1, "g": 2})

    assert sorted(delete(client, "s")) == ["a", "b", "c"]
    assert len(delete(client, "l")) == 2
    assert delete(client, "z") == ["a"]
    assert delete(client, "h") == ["f", "g"]

    assert scard(client, "s") == 0
    assert llen(client, "l") == 0
    assert zcard(client, "z") == 0
    assert not exists(client, "h")


def test_delete_missing_key(client):
    assert delete(client, "missing") == []


def test_delete_keeps_list_counters(client):
    rpush(client, "l", "a", "b", "c")
    delete(client, "l")
    assert peek(client, "l")["index_right"] == 3


def test_delete_members_skips_missing(client):
    sadd(client, "s", "a", "b")
    assert delete_members(client, "s", ["zz", "b"]) == ["b"]


def test_delete_members_counts_requests_for_partial_failure(client, fail_after):
    sadd(client, "s", "a")
    fail_after("delete_item", 1)

    with pytest.raises(PartialOperationError) as excinfo:
        delete_members(client, "s", ["missing", "a"])

    assert excinfo.value.completed == 1
    assert scard(client, "s") == 1


def test_reserved_keys_cannot_be_deleted(client):
    with pytest.raises(ReservedKeyError):
        delete(client, "_ds/list/l")
