"""
DynamoDB settings store for the healthlog application.

This service keeps the key-value settings surface in a DynamoDB table so the
activity log can be stored off-device. Each settings key is one item; the
serialized activity collection lives in the item's binary ``value`` attribute.

Classes:
    DynamoDBSettingsStore: SettingsStore implementation backed by DynamoDB
"""

import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import SettingsStoreError
from .settings_store import SettingsStore


class DynamoDBSettingsStore(SettingsStore):
    """
    Settings store backed by a DynamoDB table.

    The table uses ``key`` (string) as its hash key. Values are written as
    binary attributes, overwriting the previous item on every ``set``.

    Attributes:
        table_name: Name of the DynamoDB table
        dynamodb: Boto3 DynamoDB resource
        table: DynamoDB table resource

    Example:
        >>> store = DynamoDBSettingsStore("healthlog-settings")
        >>> store.set("userActivities", b"[]")
        >>> store.get("userActivities")
        b'[]'
    """

    def __init__(self, table_name: Optional[str] = None, region_name: Optional[str] = None):
        """
        Initialize the DynamoDB settings store.

        Args:
            table_name: Optional table name override, uses env var if not provided
            region_name: Optional AWS region, uses the boto3 default if not provided

        Raises:
            ValueError: If table name is not provided and not in environment,
                or the table does not exist
            NoCredentialsError: If AWS credentials are not configured
        """
        self.table_name = table_name or os.getenv("HEALTHLOG_DYNAMODB_TABLE")

        if not self.table_name:
            raise ValueError(
                "Table name must be provided either as parameter or "
                "HEALTHLOG_DYNAMODB_TABLE environment variable"
            )

        try:
            self.dynamodb = boto3.resource("dynamodb", region_name=region_name)
            self.table = self.dynamodb.Table(self.table_name)

            # Verify table exists by getting its description
            self.table.load()

        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ValueError(f"DynamoDB table '{self.table_name}' not found")
            raise

    def get(self, key: str) -> Optional[bytes]:
        try:
            response = self.table.get_item(Key={"key": key}, ConsistentRead=True)
        except (ClientError, BotoCoreError) as e:
            raise SettingsStoreError(f"Error reading '{key}' from {self.table_name}: {e}") from e

        item = response.get("Item")
        if item is None:
            return None

        value = item.get("value")
        if value is None:
            return None

        # boto3 wraps binary attributes in boto3.dynamodb.types.Binary
        return bytes(getattr(value, "value", value))

    def set(self, key: str, value: bytes) -> None:
        try:
            response = self.table.put_item(Item={"key": key, "value": bytes(value)})
        except (ClientError, BotoCoreError) as e:
            raise SettingsStoreError(f"Error writing '{key}' to {self.table_name}: {e}") from e

        status = response["ResponseMetadata"]["HTTPStatusCode"]
        if status != 200:
            raise SettingsStoreError(
                f"Writing '{key}' to {self.table_name} returned HTTP {status}"
            )

    def remove(self, key: str) -> None:
        try:
            self.table.delete_item(Key={"key": key})
        except (ClientError, BotoCoreError) as e:
            raise SettingsStoreError(f"Error removing '{key}' from {self.table_name}: {e}") from e
