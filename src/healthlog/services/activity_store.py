"""
Activity store for the healthlog application.

The ActivityStore is the single owner of the activity collection. It mediates
every mutation, keeps a cached view of the activities on the selected calendar
day, notifies subscribers when its published state changes and writes the
whole collection to a durable settings store after each mutation.

Persistence is best-effort: encode, decode and backend failures are logged
and never raised to callers.

Classes:
    StoreChange: Names of the published properties that can change
    ActivityStore: Authoritative in-memory activity collection
"""

from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Callable, List, Optional, Union

from loguru import logger

from ..errors import HealthLogError
from ..models.activity import Activity, dump_activities, load_activities
from .settings_store import InMemorySettingsStore, SettingsStore

DEFAULT_ACTIVITIES_KEY = "userActivities"

DateLike = Union[date, datetime]


class StoreChange(str, Enum):
    """Published ActivityStore properties, passed to subscribers on change."""

    ACTIVITIES = "activities"
    SELECTED_ACTIVITIES = "activities_for_selected_date"
    SELECTED_DATE = "selected_date"


Listener = Callable[[StoreChange], None]


class ActivityStore:
    """
    Authoritative in-memory activity collection with durable snapshots.

    The collection keeps insertion order and never holds two records with the
    same id. ``activities_for_selected_date`` always equals
    ``query(selected_date)``.

    Attributes:
        backing_store: Key-value store receiving whole-collection snapshots
        key: Settings key the collection is stored under
        tz: Time zone used for calendar-day comparisons
        persistent: False for preview/test stores that never touch storage

    Example:
        >>> store = ActivityStore(JsonFileSettingsStore("settings.json"))
        >>> store.add(Activity(name="Morning Run", activity_type=ActivityType.CARDIO,
        ...                    difficulty=65))
        >>> store.count_activity(date.today())
        1
    """

    def __init__(
        self,
        backing_store: Optional[SettingsStore] = None,
        key: str = DEFAULT_ACTIVITIES_KEY,
        tz: tzinfo = timezone.utc,
        persistent: bool = True,
        selected_date: Optional[DateLike] = None,
    ):
        """
        Initialize the store and load any saved collection.

        Args:
            backing_store: Durable settings store, in-memory if not provided
            key: Settings key holding the serialized collection
            tz: Time zone for calendar-day equality
            persistent: Whether to load from and write to the backing store
            selected_date: Initial selected date, today in ``tz`` if omitted
        """
        self.backing_store = backing_store if backing_store is not None else InMemorySettingsStore()
        self.key = key
        self.tz = tz
        self.persistent = persistent

        self._activities: List[Activity] = []
        self._selected: List[Activity] = []
        self._selected_date = (
            self.calendar_day(selected_date)
            if selected_date is not None
            else datetime.now(tz).date()
        )
        self._listeners: List[Listener] = []

        if self.persistent:
            self._load()

    # Published state

    @property
    def activities(self) -> List[Activity]:
        return list(self._activities)

    @property
    def activities_for_selected_date(self) -> List[Activity]:
        return list(self._selected)

    @property
    def selected_date(self) -> date:
        return self._selected_date

    def __len__(self) -> int:
        return len(self._activities)

    def get(self, activity_id: str) -> Optional[Activity]:
        """Return the activity with the given id, or None."""
        index = self._index_of(activity_id)
        return self._activities[index] if index is not None else None

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for published state changes.

        The listener is called with one StoreChange per property that
        changed, after the change has been applied.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *changes: StoreChange) -> None:
        for change in changes:
            for listener in list(self._listeners):
                try:
                    listener(change)
                except Exception:
                    logger.exception(f"Activity store listener failed handling {change.value}")

    # Calendar helpers

    def calendar_day(self, value: DateLike) -> date:
        """
        Return the calendar day of a date or timestamp in the store time zone.

        Aware timestamps are converted to ``tz`` first; naive timestamps are
        taken to already be in ``tz``.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(self.tz)
            return value.date()
        return value

    def is_on_day(self, activity: Activity, day: DateLike) -> bool:
        return self.calendar_day(activity.timestamp) == self.calendar_day(day)

    # Queries

    def query(self, day: DateLike) -> List[Activity]:
        """
        Return the activities on the calendar day of ``day``.

        Does not change the selected date. Results keep insertion order.
        """
        target = self.calendar_day(day)
        return [a for a in self._activities if self.calendar_day(a.timestamp) == target]

    def has_activity(self, day: DateLike) -> bool:
        target = self.calendar_day(day)
        return any(self.calendar_day(a.timestamp) == target for a in self._activities)

    def count_activity(self, day: DateLike) -> int:
        return len(self.query(day))

    # Mutations

    def add(self, activity: Activity) -> None:
        """
        Append an activity to the collection.

        An activity whose id is already present is ignored.
        """
        if self._index_of(activity.id) is not None:
            logger.warning(f"Ignoring activity {activity.id}: id already exists")
            return

        self._activities.append(activity)
        changes = [StoreChange.ACTIVITIES]

        if self.is_on_day(activity, self._selected_date):
            self._selected.append(activity)
            changes.append(StoreChange.SELECTED_ACTIVITIES)

        self._flush()
        self._notify(*changes)

    def update(self, activity: Activity) -> None:
        """
        Replace the stored activity that has the same id.

        The record keeps its position in the collection. The selected-date
        view follows the new timestamp. Updating an unknown id is a no-op.
        """
        index = self._index_of(activity.id)
        if index is None:
            logger.debug(f"Ignoring update for unknown activity {activity.id}")
            return

        self._activities[index] = activity
        changes = [StoreChange.ACTIVITIES]

        selected_index = self._selected_index_of(activity.id)
        on_day = self.is_on_day(activity, self._selected_date)

        if selected_index is not None and on_day:
            self._selected[selected_index] = activity
            changes.append(StoreChange.SELECTED_ACTIVITIES)
        elif selected_index is not None:
            del self._selected[selected_index]
            changes.append(StoreChange.SELECTED_ACTIVITIES)
        elif on_day:
            # Rebuild so the record lands at its collection position
            self._selected = self.query(self._selected_date)
            changes.append(StoreChange.SELECTED_ACTIVITIES)

        self._flush()
        self._notify(*changes)

    def delete(self, activity_id: str) -> None:
        """Remove the activity with the given id. Unknown ids are a no-op."""
        index = self._index_of(activity_id)
        if index is None:
            logger.debug(f"Ignoring delete for unknown activity {activity_id}")
            return

        del self._activities[index]
        changes = [StoreChange.ACTIVITIES]

        selected_index = self._selected_index_of(activity_id)
        if selected_index is not None:
            del self._selected[selected_index]
            changes.append(StoreChange.SELECTED_ACTIVITIES)

        self._flush()
        self._notify(*changes)

    def set_selected_date(self, day: DateLike) -> None:
        """Select a calendar day and recompute the selected-date view."""
        new_date = self.calendar_day(day)
        changes = []

        if new_date != self._selected_date:
            self._selected_date = new_date
            changes.append(StoreChange.SELECTED_DATE)

        selected = self.query(new_date)
        if selected != self._selected:
            changes.append(StoreChange.SELECTED_ACTIVITIES)
        self._selected = selected

        self._notify(*changes)

    def clear_all(self) -> None:
        """Remove every activity and delete the stored key. Irreversible."""
        changes = []
        if self._activities:
            changes.append(StoreChange.ACTIVITIES)
        if self._selected:
            changes.append(StoreChange.SELECTED_ACTIVITIES)

        self._activities = []
        self._selected = []

        if self.persistent:
            try:
                self.backing_store.remove(self.key)
            except HealthLogError as e:
                logger.error(f"Failed to remove saved activities: {e}")
            except Exception:
                logger.exception("Unexpected error removing saved activities")

        self._notify(*changes)

    # Persistence

    def _flush(self) -> None:
        if not self.persistent:
            return

        try:
            self.backing_store.set(self.key, dump_activities(self._activities))
        except HealthLogError as e:
            logger.error(f"Failed to save {len(self._activities)} activities: {e}")
        except Exception:
            logger.exception("Unexpected error saving activities")

    def _load(self) -> None:
        try:
            data = self.backing_store.get(self.key)
        except HealthLogError as e:
            logger.error(f"Failed to read saved activities: {e}")
            return
        except Exception:
            logger.exception("Unexpected error reading saved activities")
            return

        if data is None:
            logger.debug(f"No saved activities under '{self.key}'")
            return

        try:
            loaded = load_activities(data)
        except HealthLogError as e:
            logger.warning(f"Failed to load activities, starting empty: {e}")
            return

        seen = set()
        for activity in loaded:
            if activity.id in seen:
                logger.warning(f"Dropping saved activity with duplicate id {activity.id}")
                continue
            seen.add(activity.id)
            self._activities.append(activity)

        self._selected = self.query(self._selected_date)
        logger.info(f"Loaded {len(self._activities)} activities from '{self.key}'")

    def _index_of(self, activity_id: str) -> Optional[int]:
        for index, activity in enumerate(self._activities):
            if activity.id == activity_id:
                return index
        return None

    def _selected_index_of(self, activity_id: str) -> Optional[int]:
        for index, activity in enumerate(self._selected):
            if activity.id == activity_id:
                return index
        return None
