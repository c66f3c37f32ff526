"""Tests for table provisioning."""

from dataclasses import replace

import pytest

from aws_datastructures_tool.store.core.table_operations import check_table_exists, create_table, drop_table
from aws_datastructures_tool.store.exceptions import TableAlreadyExistsError, TableNotFoundError


def test_check_table_exists(settings, dynamodb):
    assert check_table_exists(settings) is True
    assert check_table_exists(replace(settings, table_name="no-such-table")) is False


def test_create_twice_raises(settings, dynamodb):
    with pytest.raises(TableAlreadyExistsError):
        create_table(settings)


def test_table_has_score_index(settings, dynamodb):
    description = drop_table(settings)
    assert description["TableName"] == settings.table_name

    created = create_table(settings)
    indexes = created["LocalSecondaryIndexes"]
    assert [index["IndexName"] for index in indexes] == [settings.index_name]
    assert indexes[0]["Projection"]["ProjectionType"] == "KEYS_ONLY"


def test_drop_missing_table(settings, dynamodb):
    drop_table(settings)
    assert check_table_exists(settings) is False
    with pytest.raises(TableNotFoundError):
        drop_table(settings)
