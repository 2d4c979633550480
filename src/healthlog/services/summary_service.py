"""
Summary statistics for the healthlog application.

Computes the aggregate figures shown on summary cards (counts, averages,
per-type and per-day breakdowns) from a sequence of activities, plus short
human-readable insights derived from those figures.

Functions:
    summarize: Aggregate statistics for a sequence of activities
    summarize_store: Statistics for an entire ActivityStore
    summarize_day: Statistics for one calendar day of an ActivityStore
    generate_insights: Readable observations about a summary
"""

from datetime import date, timezone, tzinfo
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..models.activity import Activity, DifficultyBand, difficulty_band
from .activity_store import ActivityStore, DateLike


class ActivitySummary(BaseModel):
    """
    Aggregate statistics for a set of activities.

    Attributes:
        total_activities: Number of activities summarized
        by_type: Count per activity type tag
        average_difficulty: Mean difficulty score, 0 when there are no activities
        by_difficulty_band: Count per difficulty band
        activities_with_location: Activities carrying a real place name
        unique_locations: Distinct place names in first-seen order
        daily_counts: Count per calendar day, keyed YYYY-MM-DD
        most_active_day: Day with the highest count (earliest on ties)
        insights: Readable observations about the figures
    """

    total_activities: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    average_difficulty: float = 0.0
    by_difficulty_band: Dict[str, int] = Field(default_factory=dict)
    activities_with_location: int = 0
    unique_locations: List[str] = Field(default_factory=list)
    daily_counts: Dict[str, int] = Field(default_factory=dict)
    most_active_day: Optional[str] = None
    insights: List[str] = Field(default_factory=list)


def summarize(activities: Sequence[Activity], tz: tzinfo = timezone.utc) -> ActivitySummary:
    """
    Calculate statistics for a sequence of activities.

    Args:
        activities: Activities to summarize
        tz: Time zone used to assign timestamps to calendar days

    Returns:
        ActivitySummary for the activities
    """
    summary = ActivitySummary(
        total_activities=len(activities),
        by_difficulty_band={band.value: 0 for band in DifficultyBand},
    )

    if not activities:
        summary.insights = generate_insights(summary)
        return summary

    total_difficulty = 0
    for activity in activities:
        type_tag = activity.activity_type.value
        summary.by_type[type_tag] = summary.by_type.get(type_tag, 0) + 1

        total_difficulty += activity.difficulty
        summary.by_difficulty_band[difficulty_band(activity.difficulty).value] += 1

        if activity.has_location:
            summary.activities_with_location += 1
            if activity.location_name not in summary.unique_locations:
                summary.unique_locations.append(activity.location_name)

        timestamp = activity.timestamp
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(tz)
        day_key = timestamp.strftime("%Y-%m-%d")
        summary.daily_counts[day_key] = summary.daily_counts.get(day_key, 0) + 1

    summary.average_difficulty = total_difficulty / len(activities)

    # sorted() keeps the earliest day on ties
    summary.most_active_day = max(
        sorted(summary.daily_counts), key=lambda day: summary.daily_counts[day]
    )
    summary.insights = generate_insights(summary)

    return summary


def summarize_store(store: ActivityStore) -> ActivitySummary:
    return summarize(store.activities, tz=store.tz)


def summarize_day(store: ActivityStore, day: DateLike) -> ActivitySummary:
    return summarize(store.query(day), tz=store.tz)


def generate_insights(summary: ActivitySummary) -> List[str]:
    """
    Generate insights from activity statistics.

    Args:
        summary: Statistics to describe

    Returns:
        List of insight strings
    """
    insights = []

    if summary.total_activities == 0:
        insights.append("No activities recorded yet.")
        return insights

    if summary.by_type:
        most_common_type = max(summary.by_type, key=summary.by_type.get)
        most_common_count = summary.by_type[most_common_type]
        most_common_pct = (most_common_count / summary.total_activities) * 100

        insights.append(
            f"Your most logged activity type is {most_common_type} "
            f"({most_common_count} activities, {most_common_pct:.1f}%)"
        )

        if most_common_pct > 70 and len(summary.by_type) > 1:
            insights.append("Consider mixing in other activity types for better balance.")

    band = difficulty_band(round(summary.average_difficulty))
    insights.append(
        f"Average difficulty: {summary.average_difficulty:.0f} ({band.value})"
    )

    if len(summary.unique_locations) > 5:
        insights.append(
            f"You're quite mobile! Active in {len(summary.unique_locations)} different locations."
        )
    elif len(summary.unique_locations) == 1:
        insights.append("You tend to do activities in the same location.")

    return insights


def days_with_activity(store: ActivityStore) -> List[date]:
    """Return the distinct calendar days that have activities, oldest first."""
    return sorted({store.calendar_day(a.timestamp) for a in store.activities})
