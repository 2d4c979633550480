"""
Exception hierarchy for the healthlog package.

The activity store never lets these reach its callers; they exist so that
collaborators (backing stores, the codec, the geocoder) can report failures
precisely and the store can log them with context.
"""


class HealthLogError(Exception):
    """Base class for all healthlog errors."""


class SettingsStoreError(HealthLogError):
    """A durable backing store could not read, write or remove a key."""


class ActivityDecodeError(HealthLogError):
    """A serialized activity collection could not be decoded."""


class ActivityEncodeError(HealthLogError):
    """An activity collection could not be serialized."""


class GeocodingError(HealthLogError):
    """A coordinate could not be resolved to a place name."""
