"""
Test configuration and fixtures for the DynamoDB learning library.

Provides a moto-backed DynamoDB for integration tests and sample records.
"""

import pytest
from moto import mock_aws

from dynamodb_learning import DynamoDBBase, DynamoDBConfig, User

USERS_TABLE = "Users"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so no test can reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("DYNAMODB_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("DYNAMODB_DEBUG_LOGGING", raising=False)


@pytest.fixture
def dynamodb_config(aws_credentials):
    """DynamoDB configuration for testing."""
    return DynamoDBConfig(
        region_name="us-east-1",
        endpoint_url=None,
        profile_name=None,
        enable_debug_logging=False
    )


@pytest.fixture
def mock_dynamodb(aws_credentials):
    """In-process DynamoDB provided by moto."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_base(dynamodb_config, mock_dynamodb):
    """Facade talking to the moto DynamoDB."""
    base = DynamoDBBase(dynamodb_config)
    yield base
    base.close()


@pytest.fixture
def users_table(dynamodb_base):
    """Users table created from the User model."""
    dynamodb_base.create_table_for_model(User, USERS_TABLE)
    return USERS_TABLE


@pytest.fixture
def sample_user():
    """Fully populated user record."""
    return User(
        user_id="user123",
        first_name="John",
        last_name="Doe",
        age=30,
        address="123 Main St"
    )


@pytest.fixture
def sample_users():
    """Five distinct user records."""
    return [
        User(
            user_id=f"user-{i:03d}",
            first_name=f"First{i}",
            last_name=f"Last{i}",
            age=20 + i,
            address=f"{i} Elm Street"
        )
        for i in range(5)
    ]
