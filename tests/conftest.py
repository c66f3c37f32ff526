"""Shared fixtures: an in-process DynamoDB with the store table provisioned."""

import pytest
from moto import mock_aws

from aws_datastructures_tool.store.core.client import DynamoDBClient
from aws_datastructures_tool.store.core.table_operations import create_table
from aws_datastructures_tool.store.exceptions import TransportError
from aws_datastructures_tool.store.models import StoreSettings

TABLE_NAME = "test-datastructures"
REGION = "us-east-1"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    for name in ("AWS_PROFILE", "AWS_REGION", "DSTORE_TABLE", "DSTORE_INDEX", "DSTORE_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(aws_credentials):
    return StoreSettings(table_name=TABLE_NAME, region=REGION)


@pytest.fixture
def dynamodb(settings):
    """Mocked AWS with the table created through ``create_table``."""
    with mock_aws():
        create_table(settings)
        yield


@pytest.fixture
def client(settings, dynamodb):
    return DynamoDBClient(settings=settings)


@pytest.fixture
def fail_after(client, monkeypatch):
    """Make a client method raise TransportError once it has succeeded ``successes`` times."""

    def install(method, successes):
        original = getattr(client, method)
        calls = {"n": 0}

        def flaky(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] > successes:
                raise TransportError("connection reset")
            return original(*args, **kwargs)

        monkeypatch.setattr(client, method, flaky)

    return install
