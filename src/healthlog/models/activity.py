"""
Activity data model for the healthlog application.

This module defines the core Activity record and related enums used to
represent logged activities throughout the system. Activities are created by
the logging form, held by the ActivityStore and written as one JSON array to
the durable backing store.

Classes:
    ActivityType: Enum defining the categories of activities that can be logged
    DifficultyBand: Coarse low/moderate/high grouping of difficulty scores
    Activity: Pydantic model for a single logged activity

Functions:
    difficulty_band: Classify a 0-100 score into a DifficultyBand
    difficulty_from_position: Convert a vertical drag position into a score
    dump_activities: Serialize a whole collection to bytes
    load_activities: Deserialize a whole collection from bytes
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ActivityDecodeError, ActivityEncodeError

UNKNOWN_LOCATION = "Unknown Location"

MIN_DIFFICULTY = 0
MAX_DIFFICULTY = 100


class ActivityType(str, Enum):
    """
    Enumeration of supported activity types.

    The enum values double as the display labels and the tags written to
    durable storage, so renaming a value is a storage format change.
    """

    CARDIO = "Cardio"
    STRENGTH = "Strength Training"
    FLEXIBILITY = "Flexibility"
    MINDFULNESS = "Mindfulness"
    SPORTS = "Sports"
    OTHER = "Other"


class DifficultyBand(str, Enum):
    """Coarse grouping of difficulty scores used by list rows and summaries."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


def _new_activity_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Activity(BaseModel):
    """
    Pydantic model representing one logged activity.

    Records are frozen: an edited version is produced with ``model_copy`` and
    handed to ``ActivityStore.update``, which replaces the stored record
    wholesale by id. The store itself performs no validation beyond what this
    model enforces at construction time.

    Attributes:
        id: Unique identifier (UUID string), generated at creation
        name: Short name of the activity, may be empty
        activity_type: Category of the activity (ActivityType enum)
        description: Free-form description, may be empty
        difficulty: Integer difficulty score between 0 and 100
        location_name: Human-readable place, "Unknown Location" if not known
        latitude: Latitude of the place, 0.0 if not known
        longitude: Longitude of the place, 0.0 if not known
        timestamp: When the activity occurred (defaults to creation time)
        photo_reference: Optional opaque handle to an attached photo
        file_reference: Optional opaque handle to an attached file

    Example:
        >>> activity = Activity(
        ...     name="Morning Run",
        ...     activity_type=ActivityType.CARDIO,
        ...     description="5 mile run through the park",
        ...     difficulty=65,
        ...     location_name="Central Park",
        ... )
        >>> activity.difficulty_band
        <DifficultyBand.MODERATE: 'moderate'>
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_activity_id, description="Unique activity identifier")
    name: str = Field(default="", description="Activity name")
    activity_type: ActivityType = Field(
        ...,
        validation_alias=AliasChoices("type", "activity_type"),
        serialization_alias="type",
        description="Type of activity",
    )
    description: str = Field(default="", description="Activity description")
    difficulty: int = Field(
        ..., ge=MIN_DIFFICULTY, le=MAX_DIFFICULTY, description="Difficulty score (0-100)"
    )
    location_name: str = Field(
        default=UNKNOWN_LOCATION,
        validation_alias=AliasChoices("locationName", "location_name"),
        serialization_alias="locationName",
        description="Place name",
    )
    # Non-finite values cannot be written as JSON numbers
    latitude: float = Field(default=0.0, allow_inf_nan=False, description="Latitude in degrees")
    longitude: float = Field(default=0.0, allow_inf_nan=False, description="Longitude in degrees")
    timestamp: datetime = Field(default_factory=_utc_now, description="Activity timestamp")
    photo_reference: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("photoReference", "photo_reference"),
        serialization_alias="photoReference",
        description="Attached photo handle",
    )
    file_reference: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fileReference", "file_reference"),
        serialization_alias="fileReference",
        description="Attached file handle",
    )

    @property
    def difficulty_band(self) -> DifficultyBand:
        return difficulty_band(self.difficulty)

    @property
    def has_location(self) -> bool:
        """True when the record carries a real place rather than the sentinel."""
        return bool(self.location_name) and self.location_name != UNKNOWN_LOCATION


def difficulty_band(score: int) -> DifficultyBand:
    """
    Classify a difficulty score.

    Scores below 30 are low, scores below 70 are moderate and everything
    else is high.

    Args:
        score: Difficulty score on the 0-100 scale

    Returns:
        The DifficultyBand for the score
    """
    if score < 30:
        return DifficultyBand.LOW
    if score < 70:
        return DifficultyBand.MODERATE
    return DifficultyBand.HIGH


def difficulty_from_position(position: float, height: float) -> int:
    """
    Convert a vertical touch position into a difficulty score.

    The top of the surface maps to 100 and the bottom to 0; positions
    outside the surface are clamped.

    Args:
        position: Distance of the touch from the top edge
        height: Total height of the touch surface

    Returns:
        Difficulty score between 0 and 100
    """
    if height <= 0:
        return MIN_DIFFICULTY

    score = int((1 - (position / height)) * MAX_DIFFICULTY)
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, score))


_ACTIVITY_LIST = TypeAdapter(List[Activity])


def dump_activities(activities: Sequence[Activity]) -> bytes:
    """
    Serialize a whole activity collection as a JSON array.

    Keys follow the stored layout (`type`, `locationName`, ...), timestamps
    are written as ISO-8601 strings and activity types as their display tags.

    Raises:
        ActivityEncodeError: If the collection cannot be serialized
    """
    try:
        return _ACTIVITY_LIST.dump_json(list(activities), by_alias=True)
    except (ValueError, TypeError) as e:
        raise ActivityEncodeError(f"Could not encode {len(activities)} activities: {e}") from e


def load_activities(data: bytes) -> List[Activity]:
    """
    Deserialize a whole activity collection.

    Decoding is all-or-nothing: one malformed record rejects the payload.

    Args:
        data: Bytes previously produced by dump_activities

    Returns:
        The activities in stored order

    Raises:
        ActivityDecodeError: If the payload is not a valid activity array
    """
    try:
        return _ACTIVITY_LIST.validate_json(data)
    except ValidationError as e:
        raise ActivityDecodeError(
            f"Stored activities are unreadable ({e.error_count()} errors)"
        ) from e
    except (ValueError, UnicodeDecodeError) as e:
        raise ActivityDecodeError(f"Stored activities are unreadable: {e}") from e
