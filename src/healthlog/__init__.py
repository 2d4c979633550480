"""
healthlog: personal activity logging with date filtering and local persistence.

This package keeps a log of exercise, mood and task activities. An
ActivityStore owns the collection, filters it by calendar day for list and
calendar views, and writes the whole collection to a key-value settings store
after every change.

Modules:
    models: Data models and validation using Pydantic
    services: Activity store, backing stores, summaries, calendar, geocoding
    config: Settings and logging configuration
    cli: Command-line entry point

Version: 0.1.0
"""

__version__ = "0.1.0"

from .models import Activity, ActivityForm, ActivityType
from .services import ActivityStore, JsonFileSettingsStore, StoreChange

__all__ = [
    "Activity",
    "ActivityForm",
    "ActivityType",
    "ActivityStore",
    "JsonFileSettingsStore",
    "StoreChange",
]
