"""
Service layer for the healthlog application.

This module contains the activity store and the collaborators around it:
durable key-value settings stores, summary statistics, calendar grid support
and reverse geocoding.

Classes:
    ActivityStore: Authoritative activity collection with date filtering
    StoreChange: Published store properties reported to subscribers
    SettingsStore: Abstract key-value backing store
    InMemorySettingsStore: Non-durable settings store
    JsonFileSettingsStore: Settings store kept in a local JSON file
    DynamoDBSettingsStore: Settings store kept in a DynamoDB table
    GeocodingService: Coordinate to place-name resolution
    MonthCursor: Calendar month navigation
"""

from .activity_store import DEFAULT_ACTIVITIES_KEY, ActivityStore, StoreChange
from .calendar_service import MonthCursor, month_activity_counts, month_grid
from .dynamodb_service import DynamoDBSettingsStore
from .geocoding_service import GeocodingService
from .settings_store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore
from .summary_service import ActivitySummary, summarize, summarize_day, summarize_store

__all__ = [
    "DEFAULT_ACTIVITIES_KEY",
    "ActivityStore",
    "StoreChange",
    "SettingsStore",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "DynamoDBSettingsStore",
    "GeocodingService",
    "MonthCursor",
    "month_grid",
    "month_activity_counts",
    "ActivitySummary",
    "summarize",
    "summarize_store",
    "summarize_day",
]
