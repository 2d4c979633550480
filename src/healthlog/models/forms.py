"""
Logging form model for the healthlog application.

The form is the validation boundary: it rejects incomplete input before an
Activity is ever built, so the ActivityStore can accept any well-typed record.

Classes:
    ActivityForm: Pydantic model for the "log activity" form
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .activity import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    UNKNOWN_LOCATION,
    Activity,
    ActivityType,
)
from .location import Coordinate


class ActivityForm(BaseModel):
    """
    Pydantic model for the data entered on the activity logging form.

    Attributes:
        name: Activity name, required and non-blank
        activity_type: Selected activity category
        description: Optional free-form description
        difficulty: Score captured by the difficulty gesture
        custom_location: Coordinate picked on the map, if any
        custom_location_name: Place name for the picked coordinate
        timestamp: Optional explicit time, defaults to now on the record

    Example:
        >>> form = ActivityForm(name="Yoga Session", difficulty=35)
        >>> activity = form.to_activity()
        >>> activity.location_name
        'Unknown Location'
    """

    name: str = Field(..., description="Activity name")
    activity_type: ActivityType = Field(default=ActivityType.CARDIO)
    description: str = Field(default="")
    difficulty: int = Field(default=MIN_DIFFICULTY, ge=MIN_DIFFICULTY, le=MAX_DIFFICULTY)
    custom_location: Optional[Coordinate] = None
    custom_location_name: str = Field(default="")
    timestamp: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Require a non-blank activity name.

        Raises:
            ValueError: If the name is empty or whitespace only
        """
        if not v.strip():
            raise ValueError("Please provide an activity name.")
        return v

    def to_activity(
        self,
        current_location: Optional[Coordinate] = None,
        current_location_name: Optional[str] = None,
    ) -> Activity:
        """
        Build the Activity record for this form.

        Location precedence is the custom location picked on the map, then
        the current device location, then the "Unknown Location" sentinel at
        0/0.

        Args:
            current_location: Last known device coordinate, if any
            current_location_name: Reverse-geocoded name for that coordinate

        Returns:
            A new Activity with a freshly generated id
        """
        if self.custom_location is not None:
            coordinate = self.custom_location
            location_name = self.custom_location_name or UNKNOWN_LOCATION
        elif current_location is not None:
            coordinate = current_location
            location_name = current_location_name or UNKNOWN_LOCATION
        else:
            coordinate = Coordinate()
            location_name = UNKNOWN_LOCATION

        fields = {
            "name": self.name,
            "activity_type": self.activity_type,
            "description": self.description,
            "difficulty": self.difficulty,
            "location_name": location_name,
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
        }
        if self.timestamp is not None:
            fields["timestamp"] = self.timestamp

        return Activity(**fields)
