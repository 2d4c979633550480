"""
Location value types for the healthlog application.

Classes:
    Coordinate: Latitude/longitude pair
    Placemark: Address components returned by reverse geocoding

Functions:
    format_place_name: Build a display name from a Placemark
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .activity import UNKNOWN_LOCATION


class Coordinate(BaseModel):
    """A latitude/longitude pair. Not validated against real-world bounds."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(default=0.0, allow_inf_nan=False)
    longitude: float = Field(default=0.0, allow_inf_nan=False)


class Placemark(BaseModel):
    """Address components for a coordinate; every component is optional."""

    name: Optional[str] = None
    thoroughfare: Optional[str] = None
    locality: Optional[str] = None


def format_place_name(placemark: Optional[Placemark]) -> str:
    """
    Join the present placemark components into a display name.

    Components are used in name, thoroughfare, locality order and separated
    by ", ". When nothing is available the "Unknown Location" sentinel is
    returned.
    """
    if placemark is None:
        return UNKNOWN_LOCATION

    parts = [
        part
        for part in (placemark.name, placemark.thoroughfare, placemark.locality)
        if part
    ]
    return ", ".join(parts) if parts else UNKNOWN_LOCATION
