"""
Data models for the healthlog application.

This module contains Pydantic models for data validation and serialization
used throughout the application for handling activities, locations and the
logging form.

Classes:
    Activity: Model representing one logged activity
    ActivityType: Enum for the different types of activities
    DifficultyBand: Low/moderate/high grouping of difficulty scores
    ActivityForm: Validated input from the logging form
    Coordinate: Latitude/longitude pair
    Placemark: Reverse-geocoded address components
"""

from .activity import (
    UNKNOWN_LOCATION,
    Activity,
    ActivityType,
    DifficultyBand,
    difficulty_band,
    difficulty_from_position,
    dump_activities,
    load_activities,
)
from .forms import ActivityForm
from .location import Coordinate, Placemark, format_place_name

__all__ = [
    "UNKNOWN_LOCATION",
    "Activity",
    "ActivityType",
    "DifficultyBand",
    "ActivityForm",
    "Coordinate",
    "Placemark",
    "difficulty_band",
    "difficulty_from_position",
    "dump_activities",
    "load_activities",
    "format_place_name",
]
