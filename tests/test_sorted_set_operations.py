"""Tests for sorted set operations."""

import pytest

from aws_datastructures_tool.store.core.range_caps import RangeCap
from aws_datastructures_tool.store.core.sorted_set_operations import (
    zadd,
    zcard,
    zcount,
    zincrby,
    zinter,
    zinterstore,
    zlexcount,
    zpopmax,
    zpopmin,
    zrange,
    zrangebylex,
    zrangebyscore,
    zrank,
    zrem,
    zremrangebylex,
    zremrangebyrank,
    zremrangebyscore,
    zrevrange,
    zrevrangebylex,
    zrevrangebyscore,
    zrevrank,
    zscore,
    zunion,
    zunionstore,
)
from aws_datastructures_tool.store.exceptions import PartialOperationError, TransportError, UnsupportedValueError
from aws_datastructures_tool.store.models import Aggregation, ZAddFlag


@pytest.fixture
def board(client):
    """Sorted set 'board' with alice 10, bob 20, carol 30, dave 40."""
    zadd(client, "board", {"alice": 10, "bob": 20, "carol": 30, "dave": 40})
    return client


def test_zadd_orders_by_score(client):
    assert zadd(client, "z", {"y": 2, "x": 1}) == ["y", "x"]
    assert list(zrange(client, "z", 0, -1)) == ["x", "y"]


def test_zadd_reports_only_new_members(client):
    zadd(client, "z", {"a": 1})
    assert zadd(client, "z", {"a": 5, "b": 2}) == ["b"]
    assert zscore(client, "z", "a") == 5.0


def test_zadd_flags(client):
    zadd(client, "z", {"a": 1})

    assert zadd(client, "z", {"a": 9, "b": 2}, ZAddFlag.IF_NOT_EXISTS) == ["b"]
    assert zscore(client, "z", "a") == 1.0

    assert zadd(client, "z", {"a": 7, "c": 3}, ZAddFlag.IF_ALREADY_EXISTS) == []
    assert zscore(client, "z", "a") == 7.0
    assert zscore(client, "z", "c") is None


def test_zadd_rejects_non_numeric_scores(client):
    with pytest.raises(UnsupportedValueError):
        zadd(client, "z", {"a": "high"})
    assert zcard(client, "z") == 0


def test_zscore_and_zcard(board):
    assert zscore(board, "board", "carol") == 30.0
    assert zscore(board, "board", "nobody") is None
    assert zcard(board, "board") == 4
    assert zcard(board, "empty") == 0


def test_zincrby(board):
    assert zincrby(board, "board", "alice", 5) == 15.0
    assert zincrby(board, "board", "alice", -0.5) == 14.5
    assert zincrby(board, "board", "erin", 3) == 3.0


def test_zrange_and_zrevrange(board):
    assert zrange(board, "board", 1, 2) == {"bob": 20.0, "carol": 30.0}
    assert list(zrange(board, "board", -2, -1)) == ["carol", "dave"]
    assert list(zrevrange(board, "board", 0, 1)) == ["dave", "carol"]
    assert zrange(board, "board", 10, 20) == {}


def test_zrangebyscore(board):
    assert list(zrangebyscore(board, "board", RangeCap.score(15), RangeCap.score(30))) == [
        "bob",
        "carol",
    ]
    exclusive = RangeCap.score(20, exclusive=True)
    assert list(zrangebyscore(board, "board", exclusive)) == ["carol", "dave"]
    assert list(zrangebyscore(board, "board", offset=1, count=2)) == ["bob", "carol"]


def test_zrevrangebyscore_takes_max_first(board):
    result = zrevrangebyscore(board, "board", RangeCap.score(30), RangeCap.score(10))
    assert list(result) == ["carol", "bob", "alice"]


def test_lex_ranges(board):
    assert list(zrangebylex(board, "board", RangeCap.parse_lex("[b"), RangeCap.parse_lex("(d"))) == [
        "bob",
        "carol",
    ]
    assert list(zrevrangebylex(board, "board", RangeCap.parse_lex("+"), RangeCap.parse_lex("[c"))) == [
        "dave",
        "carol",
    ]
    assert zlexcount(board, "board", RangeCap.parse_lex("(alice"), RangeCap.parse_lex("+")) == 3


def test_zcount(board):
    assert zcount(board, "board") == 4
    assert zcount(board, "board", RangeCap.score(20), RangeCap.score(30)) == 2
    assert zcount(board, "board", RangeCap.score(20, exclusive=True), RangeCap.score(40, exclusive=True)) == 1


def test_ranks(board):
    assert zrank(board, "board", "alice") == 0
    assert zrank(board, "board", "carol") == 2
    assert zrevrank(board, "board", "alice") == 3
    assert zrank(board, "board", "nobody") is None


def test_zrem(board):
    assert zrem(board, "board", "bob", "nobody") == ["bob"]
    assert zcard(board, "board") == 3


def test_pops(board):
    assert zpopmin(board, "board") == {"alice": 10.0}
    assert zpopmax(board, "board", 2) == {"dave": 40.0, "carol": 30.0}
    assert zpopmin(board, "board", 0) == {}
    assert list(zrange(board, "board", 0, -1)) == ["bob"]


def test_remove_ranges(board):
    assert zremrangebyrank(board, "board", 0, 0) == ["alice"]
    assert zremrangebyscore(board, "board", RangeCap.score(35)) == ["dave"]
    assert zremrangebylex(board, "board", RangeCap.parse_lex("[c"), RangeCap.parse_lex("+")) == ["carol"]
    assert list(zrange(board, "board", 0, -1)) == ["bob"]


@pytest.fixture
def teams(client):
    zadd(client, "red", {"a": 1, "b": 2})
    zadd(client, "blue", {"b": 10, "c": 20})
    return client


def test_zunion(teams):
    assert zunion(teams, ["red", "blue"]) == {"a": 1.0, "b": 12.0, "c": 20.0}
    assert zunion(teams, ["red", "blue"], Aggregation.MAX) == {"a": 1.0, "b": 10.0, "c": 20.0}


def test_zunion_with_weights(teams):
    result = zunion(teams, ["red", "blue"], weights={"red": 2, "blue": 0.5})
    assert result == {"a": 2.0, "b": 9.0, "c": 10.0}


def test_zinter(teams):
    assert zinter(teams, ["red", "blue"]) == {"b": 12.0}
    assert zinter(teams, ["red", "blue"], Aggregation.MIN) == {"b": 2.0}
    assert zinter(teams, ["red", "blue"], lambda x, y: x * y) == {"b": 20.0}
    assert zinter(teams, ["red", "missing"]) == {}


def test_store_variants_merge_into_destination(teams):
    zadd(teams, "out", {"old": 99})

    assert zunionstore(teams, "out", ["red", "blue"]) == {"a": 1.0, "b": 12.0, "c": 20.0}
    assert zcard(teams, "out") == 4

    assert zinterstore(teams, "both", ["red", "blue"]) == {"b": 12.0}
    assert zrange(teams, "both", 0, -1) == {"b": 12.0}


def test_repeated_zadd_keeps_membership(client):
    for score in (3, 1, 2):
        zadd(client, "z", {"m": score})
    assert zcard(client, "z") == 1
    assert zscore(client, "z", "m") == 2.0


@pytest.mark.parametrize("store", [zunionstore, zinterstore])
def test_store_variants_report_partial_failure(client, fail_after, store):
    zadd(client, "x", {"a": 1, "b": 2, "c": 3})
    fail_after("update_item", 1)

    with pytest.raises(PartialOperationError) as excinfo:
        store(client, "dest", ["x", "x"])

    assert excinfo.value.completed == 1
    assert isinstance(excinfo.value.__cause__, TransportError)
    assert zcard(client, "dest") == 1


def test_store_failing_on_first_write_is_not_partial(client, fail_after):
    zadd(client, "x", {"a": 1, "b": 2})
    fail_after("update_item", 0)

    with pytest.raises(TransportError) as excinfo:
        zunionstore(client, "dest", ["x"])
    assert not isinstance(excinfo.value, PartialOperationError)
