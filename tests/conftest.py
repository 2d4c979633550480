"""
Pytest configuration and shared fixtures for healthlog tests.

This module contains pytest configuration, shared fixtures, and test utilities
that are used across multiple test modules. It sets up mock AWS services,
backing stores, sample activities, and a loguru capture sink.

Fixtures:
    mock_dynamodb_table: Mocked DynamoDB settings table
    settings_store: In-memory settings store
    activity_store: Persistent ActivityStore over the in-memory settings store
    sample_activities: Collection of test activity objects across two days
    log_messages: Captured loguru messages
"""

import os
from datetime import date, datetime
from typing import List

import boto3
import pytest
from loguru import logger
from moto import mock_aws

from healthlog.models.activity import Activity, ActivityType
from healthlog.services.activity_store import ActivityStore
from healthlog.services.settings_store import InMemorySettingsStore, SettingsStore
from healthlog.errors import SettingsStoreError


# Test configuration constants
TEST_TABLE_NAME = "test-healthlog-settings"
TEST_KEY = "userActivities"
TEST_SELECTED_DATE = date(2024, 3, 10)


@pytest.fixture
def aws_credentials():
    """
    Fixture to set up AWS credentials for testing.

    Sets environment variables for AWS credentials that are used by moto
    for mocking AWS services. These are fake credentials for testing only.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_dynamodb_table(aws_credentials):
    """
    Fixture that creates a mocked DynamoDB settings table.

    Uses moto to create an in-memory table keyed by ``key`` so the DynamoDB
    settings store can be tested without real AWS resources.

    Returns:
        boto3.resource.Table: Mocked DynamoDB table resource
    """
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")

        table = dynamodb.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[{"AttributeName": "key", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "key", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )

        table.wait_until_exists()
        yield table


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def activity_store(settings_store) -> ActivityStore:
    """
    Fixture that provides a persistent ActivityStore for testing.

    The store writes to the in-memory settings store and starts with the
    selected date set to 2024-03-10.
    """
    return ActivityStore(
        backing_store=settings_store,
        key=TEST_KEY,
        selected_date=TEST_SELECTED_DATE,
    )


@pytest.fixture
def sample_activities() -> List[Activity]:
    """
    Fixture that provides a collection of sample activities for testing.

    Three activities fall on 2024-03-10 and two on 2024-03-11, interleaved
    so that insertion order differs from chronological order.
    """
    return [
        create_test_activity(
            name="Morning Run",
            activity_type=ActivityType.CARDIO,
            difficulty=65,
            location_name="Central Park",
            latitude=40.7812,
            longitude=-73.9665,
            timestamp=datetime(2024, 3, 10, 8, 0),
        ),
        create_test_activity(
            name="Deadlifts",
            activity_type=ActivityType.STRENGTH,
            difficulty=85,
            location_name="Gym",
            timestamp=datetime(2024, 3, 11, 18, 0),
        ),
        create_test_activity(
            name="Yoga Session",
            activity_type=ActivityType.FLEXIBILITY,
            difficulty=35,
            location_name="Home",
            timestamp=datetime(2024, 3, 10, 7, 0),
        ),
        create_test_activity(
            name="Meditation",
            activity_type=ActivityType.MINDFULNESS,
            difficulty=10,
            timestamp=datetime(2024, 3, 10, 22, 30),
        ),
        create_test_activity(
            name="Pickup Basketball",
            activity_type=ActivityType.SPORTS,
            difficulty=70,
            location_name="Central Park",
            timestamp=datetime(2024, 3, 11, 12, 0),
        ),
    ]


@pytest.fixture
def log_messages():
    """Capture loguru output for assertions about logged failures."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


class FailingSettingsStore(SettingsStore):
    """Settings store whose operations fail, optionally only on some calls."""

    def __init__(self, fail_get: bool = False, fail_set: bool = True, fail_remove: bool = False):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.fail_remove = fail_remove
        self.values = {}

    def get(self, key):
        if self.fail_get:
            raise SettingsStoreError("disk unavailable")
        return self.values.get(key)

    def set(self, key, value):
        if self.fail_set:
            raise SettingsStoreError("disk full")
        self.values[key] = value

    def remove(self, key):
        if self.fail_remove:
            raise SettingsStoreError("read-only")
        self.values.pop(key, None)


# Pytest configuration
def pytest_configure(config):
    """
    Pytest configuration function.

    Registers custom markers for organizing test execution.
    """
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "aws: mark test as requiring mocked AWS services")


# Test utilities
def assert_selection_coherent(store: ActivityStore):
    """Assert the cached selected-date view equals a fresh query."""
    assert store.activities_for_selected_date == store.query(store.selected_date)


def create_test_activity(**kwargs) -> Activity:
    """
    Utility function to create test activities with default values.

    Args:
        **kwargs: Activity field overrides

    Returns:
        Activity: Test activity object
    """
    defaults = {
        "name": "Test activity",
        "activity_type": ActivityType.CARDIO,
        "description": "",
        "difficulty": 50,
        "timestamp": datetime(2024, 3, 10, 9, 0),
    }

    defaults.update(kwargs)
    return Activity(**defaults)
