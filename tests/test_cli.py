"""End-to-end tests of the command line interface."""

import json

import pytest
from click.testing import CliRunner

from aws_datastructures_tool.cli import main

TABLE_NAME = "test-datastructures"


@pytest.fixture
def run(dynamodb, monkeypatch):
    """Invoke ``store <args>`` against the mocked table."""
    monkeypatch.setenv("DSTORE_TABLE", TABLE_NAME)
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(main, ["store", *args])

    return invoke


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_list_commands(run):
    assert _json(run("rpush", "ring", "one", "two", "three", "four")) == {"list": "ring", "length": 4}
    assert _json(run("rpoplpush", "ring", "ring"))["value"] == "four"
    assert _json(run("lrange", "ring"))["values"] == ["four", "one", "two", "three"]
    assert _json(run("llen", "ring"))["length"] == 4


def test_typed_values(run):
    run("rpush", "nums", "1", "2", "--type", "int")
    assert _json(run("lrange", "nums"))["values"] == [1, 2]

    result = run("rpush", "nums", "x", "--type", "int")
    assert result.exit_code == 2


def test_text_output(run):
    run("rpush", "tasks", "build", "test")
    result = run("lrange", "tasks", "--text")
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["build", "test"]


def test_sorted_set_commands(run):
    assert _json(run("zadd", "board", "1", "x", "2", "y"))["added"] == ["x", "y"]
    assert _json(run("zrange", "board")) == {"key": "board", "members": {"x": 1.0, "y": 2.0}}
    assert list(_json(run("zrange", "board", "--rev"))["members"]) == ["y", "x"]
    assert _json(run("zrangebyscore", "board", "(1", "+inf"))["members"] == {"y": 2.0}


def test_zadd_needs_pairs(run):
    assert run("zadd", "board", "1").exit_code == 2


def test_set_commands(run):
    assert _json(run("sadd", "tags", "a"))["added"] == ["a"]
    assert _json(run("sadd", "tags", "a", "b"))["added"] == ["b"]
    assert _json(run("smembers", "tags"))["members"] == ["a", "b"]


def test_hash_commands(run):
    run("hset", "user", "name", "Ada", "lang", "python")
    assert _json(run("hgetall", "user"))["fields"] == {"lang": "python", "name": "Ada"}


def test_geo_commands(run):
    run("geoadd", "sicily", "13.361389", "38.115556", "Palermo", "15.087269", "37.502669", "Catania")
    found = _json(run("georadius", "sicily", "100", "--lon", "15", "--lat", "37", "--unit", "km"))
    assert list(found["members"]) == ["Catania"]


def test_key_commands(run):
    run("sadd", "tags", "a", "b")
    assert _json(run("del", "tags")) == {"key": "tags", "deleted": 2}
    assert _json(run("exists", "tags")) == {"key": "tags", "exists": False}


def test_reserved_key_is_a_usage_error(run):
    assert run("rpush", "_ds/list/x", "a").exit_code == 2


def test_missing_table_is_a_store_error(run):
    assert run("llen", "l", "--table", "no-such-table").exit_code == 3


def test_table_lifecycle(run):
    created = _json(run("create-table", "--table", "second-table"))
    assert created["table"] == "second-table"
    assert created["status"] == "ACTIVE"

    assert run("create-table", "--table", "second-table").exit_code == 1
    assert run("drop-table", "--table", "second-table").exit_code == 2
    assert run("drop-table", "--table", "second-table", "--approve").exit_code == 0
    assert run("drop-table", "--table", "second-table", "--approve").exit_code == 1


def test_invalid_table_name(run):
    assert run("llen", "l", "--table", "x").exit_code == 2
