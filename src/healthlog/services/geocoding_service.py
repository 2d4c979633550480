"""
Reverse geocoding service for the healthlog application.

Resolves a coordinate to a human-readable place name through the Amazon
Location Service. Lookups can run synchronously or as fire-and-forget
background requests whose result is handed to a callback; neither path ever
touches the ActivityStore.

Classes:
    GeocodingService: Coordinate to place-name resolution
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..errors import GeocodingError
from ..models.activity import UNKNOWN_LOCATION
from ..models.location import Coordinate, Placemark, format_place_name

PlaceNameCallback = Callable[[str], None]
Dispatcher = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class GeocodingService:
    """
    Service for resolving coordinates to place names.

    Attributes:
        place_index: Amazon Location place index used for lookups
        location_client: Boto3 Amazon Location client

    Example:
        >>> geocoder = GeocodingService(place_index="healthlog-places")
        >>> geocoder.reverse_geocode(Coordinate(latitude=40.7812, longitude=-73.9665))
        'Central Park, New York'
    """

    def __init__(
        self,
        place_index: Optional[str] = None,
        location_client: Any = None,
        region_name: Optional[str] = None,
        dispatch: Optional[Dispatcher] = None,
    ):
        """
        Initialize the geocoding service.

        Args:
            place_index: Place index name, uses env var if not provided
            location_client: Optional preconfigured boto3 "location" client
            region_name: Optional AWS region for a client created here
            dispatch: Runs completion callbacks, e.g. on the UI thread;
                callbacks run on the worker thread if not provided

        Raises:
            ValueError: If no place index is configured
        """
        self.place_index = place_index or os.getenv("HEALTHLOG_PLACE_INDEX")

        if not self.place_index:
            raise ValueError(
                "Place index must be provided either as parameter or "
                "HEALTHLOG_PLACE_INDEX environment variable"
            )

        self.location_client = location_client or boto3.client("location", region_name=region_name)
        self.dispatch = dispatch or _call_now
        self._executor: Optional[ThreadPoolExecutor] = None

    def lookup_placemark(self, coordinate: Coordinate) -> Optional[Placemark]:
        """
        Look up the address components for a coordinate.

        Returns:
            The first matching Placemark, or None if nothing was found

        Raises:
            GeocodingError: If the lookup request fails
        """
        try:
            response = self.location_client.search_place_index_for_position(
                IndexName=self.place_index,
                Position=[coordinate.longitude, coordinate.latitude],
                MaxResults=1,
            )
        except (ClientError, BotoCoreError) as e:
            raise GeocodingError(
                f"Reverse geocoding ({coordinate.latitude}, {coordinate.longitude}) failed: {e}"
            ) from e

        results = response.get("Results", [])
        if not results:
            return None

        return self._placemark_from_place(results[0].get("Place", {}))

    def reverse_geocode(self, coordinate: Coordinate) -> str:
        """
        Resolve a coordinate to a display name.

        Raises:
            GeocodingError: If the lookup request fails
        """
        return format_place_name(self.lookup_placemark(coordinate))

    def request(self, coordinate: Coordinate, callback: PlaceNameCallback) -> Future:
        """
        Resolve a coordinate in the background.

        The callback receives the place name through ``dispatch`` once the
        lookup finishes, or "Unknown Location" if it failed.

        Returns:
            Future for the background lookup
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="geocoder")

        return self._executor.submit(self._resolve_and_deliver, coordinate, callback)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def _resolve_and_deliver(self, coordinate: Coordinate, callback: PlaceNameCallback) -> str:
        try:
            place_name = self.reverse_geocode(coordinate)
        except GeocodingError as e:
            logger.warning(f"Geocoding error: {e}")
            place_name = UNKNOWN_LOCATION

        def deliver() -> None:
            try:
                callback(place_name)
            except Exception:
                logger.exception("Geocoding callback failed")

        self.dispatch(deliver)
        return place_name

    @staticmethod
    def _placemark_from_place(place: Dict[str, Any]) -> Placemark:
        label = place.get("Label") or ""
        name = label.split(",")[0].strip() or None
        street = place.get("Street")

        return Placemark(
            name=name,
            thoroughfare=street if street != name else None,
            locality=place.get("Municipality"),
        )
