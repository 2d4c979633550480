"""Command-line interface for the healthlog activity log."""

import argparse
import math
import sys
from datetime import date, datetime
from typing import List, Optional

from pydantic import ValidationError

from .config import Settings, build_activity_store, configure_logging
from .models import ActivityForm, ActivityType, Coordinate
from .services.activity_store import ActivityStore
from .services.calendar_service import WEEKDAY_LABELS, MonthCursor, month_activity_counts, month_grid
from .services.summary_service import summarize_store


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid timestamp '{value}', expected ISO-8601")


def _parse_degrees(value: str) -> float:
    try:
        degrees = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected a number")
    if not math.isfinite(degrees):
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected a finite number")
    return degrees


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthlog",
        description="Log exercise, mood and task activities and browse them by day",
        epilog="For more information on a specific command, run: healthlog <command> --help",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands", metavar="<command>")

    add_parser = subparsers.add_parser("add", help="Log a new activity")
    add_parser.add_argument("name", help="Activity name")
    add_parser.add_argument(
        "--type",
        dest="activity_type",
        choices=[t.value for t in ActivityType],
        default=ActivityType.CARDIO.value,
        help="Activity type (default: Cardio)",
    )
    add_parser.add_argument("--description", default="", help="Free-form description")
    add_parser.add_argument("--difficulty", type=int, default=0, help="Difficulty score 0-100")
    add_parser.add_argument("--location", default="", help="Place name")
    add_parser.add_argument("--lat", type=_parse_degrees, help="Latitude of the place")
    add_parser.add_argument("--lon", type=_parse_degrees, help="Longitude of the place")
    add_parser.add_argument("--at", type=_parse_timestamp, help="When it happened (ISO-8601)")

    list_parser = subparsers.add_parser("list", help="List activities for a day")
    list_parser.add_argument("--date", type=_parse_date, help="Day to list (default: today)")

    delete_parser = subparsers.add_parser("delete", help="Delete an activity by id")
    delete_parser.add_argument("id", help="Activity id")

    subparsers.add_parser("clear", help="Delete every activity")
    subparsers.add_parser("summary", help="Show summary statistics")

    calendar_parser = subparsers.add_parser("calendar", help="Show a month with activity counts")
    calendar_parser.add_argument("--year", type=int, help="Year (default: current)")
    calendar_parser.add_argument("--month", type=int, choices=range(1, 13), help="Month (default: current)")

    return parser


def cmd_add(store: ActivityStore, args: argparse.Namespace) -> int:
    custom_location = None
    if args.lat is not None and args.lon is not None:
        custom_location = Coordinate(latitude=args.lat, longitude=args.lon)

    try:
        form = ActivityForm(
            name=args.name,
            activity_type=ActivityType(args.activity_type),
            description=args.description,
            difficulty=args.difficulty,
            custom_location=custom_location,
            custom_location_name=args.location,
            timestamp=args.at,
        )
    except ValidationError as e:
        for error in e.errors():
            print(f"Missing information: {error['msg']}", file=sys.stderr)
        return 2

    activity = form.to_activity()
    if custom_location is None and args.location:
        activity = activity.model_copy(update={"location_name": args.location})

    store.add(activity)
    print(f"Logged {activity.name} ({activity.id})")
    return 0


def cmd_list(store: ActivityStore, args: argparse.Namespace) -> int:
    if args.date is not None:
        store.set_selected_date(args.date)

    activities = store.activities_for_selected_date
    print(store.selected_date.strftime("%B %d, %Y"))

    if not activities:
        print("No activities for this date")
        return 0

    for activity in activities:
        print(
            f"  {activity.id}  {activity.name or '(unnamed)'}  [{activity.activity_type.value}]  "
            f"difficulty {activity.difficulty} ({activity.difficulty_band.value})  "
            f"@ {activity.location_name}"
        )
        if activity.description:
            print(f"      {activity.description}")
    return 0


def cmd_delete(store: ActivityStore, args: argparse.Namespace) -> int:
    if store.get(args.id) is None:
        print(f"No activity with id {args.id}", file=sys.stderr)
        return 1

    store.delete(args.id)
    print(f"Deleted {args.id}")
    return 0


def cmd_clear(store: ActivityStore, args: argparse.Namespace) -> int:
    count = len(store)
    store.clear_all()
    print(f"Cleared {count} activities")
    return 0


def cmd_summary(store: ActivityStore, args: argparse.Namespace) -> int:
    summary = summarize_store(store)

    print(f"Total activities: {summary.total_activities}")
    for type_tag, count in sorted(summary.by_type.items()):
        print(f"  {type_tag}: {count}")
    print(f"Average difficulty: {summary.average_difficulty:.1f}")
    if summary.most_active_day:
        print(f"Most active day: {summary.most_active_day}")
    for insight in summary.insights:
        print(f"- {insight}")
    return 0


def cmd_calendar(store: ActivityStore, args: argparse.Namespace) -> int:
    cursor = MonthCursor.for_date(store.selected_date)
    cursor = MonthCursor(args.year or cursor.year, args.month or cursor.month)
    counts = month_activity_counts(store, cursor.year, cursor.month)

    print(cursor.title)
    print(" ".join(f"{label:>4}" for label in WEEKDAY_LABELS))

    cells = month_grid(cursor.year, cursor.month)
    for start in range(0, len(cells), 7):
        row = []
        for day in cells[start:start + 7]:
            if day == 0:
                row.append("    ")
            elif day in counts:
                row.append(f"{day:>3}*")
            else:
                row.append(f"{day:>4}")
        print(" ".join(row))
    return 0


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "delete": cmd_delete,
    "clear": cmd_clear,
    "summary": cmd_summary,
    "calendar": cmd_calendar,
}


def main(argv: Optional[List[str]] = None, store: Optional[ActivityStore] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "add" and (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    if not args.command:
        parser.print_help()
        return 1

    if store is None:
        settings = Settings()
        configure_logging(settings.log_level)
        store = build_activity_store(settings)

    return COMMANDS[args.command](store, args)


if __name__ == "__main__":
    sys.exit(main())
