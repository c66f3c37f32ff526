"""Tests for the paginated range scan engine."""

from decimal import Decimal

import pytest

from aws_datastructures_tool.store.core.range_caps import RangeCap
from aws_datastructures_tool.store.core.range_scan import Axis, count_items, resolve_range, scan


@pytest.fixture
def ranked(client):
    """Partition 'ranked' with members m00..m09 scored 0..9."""
    for i in range(10):
        client.put_item({"pk": "ranked", "sk": f"m{i:02d}", "skN": Decimal(i), "val": i})
    return client


@pytest.fixture
def small_pages(ranked, monkeypatch):
    """Force pages of at most three items so scans must follow the cursor."""
    original = ranked.query_page
    calls = []

    def query_page(expression, limit=None, **kwargs):
        calls.append(limit)
        return original(expression, limit=min(limit or 3, 3), **kwargs)

    monkeypatch.setattr(ranked, "query_page", query_page)
    ranked.page_calls = calls
    return ranked


def _members(items):
    return [item.sort_key for item in items]


def test_score_scan_in_both_directions(ranked):
    assert _members(scan(ranked, "ranked")) == [f"m{i:02d}" for i in range(10)]
    assert _members(scan(ranked, "ranked", forward=False))[:2] == ["m09", "m08"]


def test_score_axis_items_carry_scores(ranked):
    item = next(scan(ranked, "ranked"))
    assert item.score == Decimal(0)
    assert item.sort_key == "m00"


def test_sort_key_axis_items_carry_values(ranked):
    item = next(scan(ranked, "ranked", axis=Axis.SORT_KEY))
    assert item.value.data == 0


def test_offset_and_count_across_pages(small_pages):
    items = list(scan(small_pages, "ranked", offset=4, count=4))
    assert _members(items) == ["m04", "m05", "m06", "m07"]
    assert len(small_pages.page_calls) > 1


def test_page_limit_shrinks_to_what_is_still_needed(ranked, monkeypatch):
    original = ranked.query_page
    limits = []

    def query_page(expression, limit=None, **kwargs):
        limits.append(limit)
        return original(expression, limit=limit, **kwargs)

    monkeypatch.setattr(ranked, "query_page", query_page)

    list(scan(ranked, "ranked", offset=2, count=3))
    assert limits == [5]


def test_exclusive_caps(small_pages):
    lower = RangeCap.score(2, exclusive=True)
    upper = RangeCap.score(5, exclusive=True)
    assert _members(scan(small_pages, "ranked", lower, upper)) == ["m03", "m04"]
    assert count_items(small_pages, "ranked", lower, upper) == 2


def test_one_sided_caps(ranked):
    assert count_items(ranked, "ranked", RangeCap.score(7)) == 3
    assert count_items(ranked, "ranked", upper=RangeCap.score(7, exclusive=True)) == 7


def test_lex_range_on_sort_key(ranked):
    items = scan(ranked, "ranked", RangeCap.lex("m03"), RangeCap.lex("m05"), axis=Axis.SORT_KEY)
    assert _members(items) == ["m03", "m04", "m05"]


def test_prefix_scan(ranked):
    ranked.put_item({"pk": "ranked", "sk": "other", "skN": Decimal(100)})
    assert len(list(scan(ranked, "ranked", axis=Axis.SORT_KEY, prefix="m0"))) == 10
    assert count_items(ranked, "ranked", axis=Axis.SORT_KEY) == 11


def test_prefix_requires_sort_key_axis(ranked):
    with pytest.raises(ValueError):
        list(scan(ranked, "ranked", prefix="m"))


def test_empty_range_does_not_query(ranked, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("query issued")

    monkeypatch.setattr(ranked, "query_page", fail)
    assert list(scan(ranked, "ranked", RangeCap.score(5), RangeCap.score(1))) == []
    assert count_items(ranked, "ranked", RangeCap.score(5), RangeCap.score(1)) == 0


def test_negative_offset_is_rejected(ranked):
    with pytest.raises(ValueError):
        list(scan(ranked, "ranked", offset=-1))


@pytest.mark.parametrize(
    "length, start, stop, expected",
    [
        (5, 0, -1, (0, 4)),
        (5, -2, -1, (3, 4)),
        (5, 1, 100, (1, 4)),
        (5, -100, 1, (0, 1)),
        (5, 3, 1, None),
        (5, 5, 10, None),
        (0, 0, -1, None),
    ],
)
def test_resolve_range(length, start, stop, expected):
    assert resolve_range(length, start, stop) == expected
