"""
Unit tests for the command-line interface and configuration.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from healthlog.cli import main
from healthlog.config import Settings, build_activity_store, build_backing_store
from healthlog.models.activity import UNKNOWN_LOCATION, ActivityType
from healthlog.services.activity_store import ActivityStore
from healthlog.services.settings_store import InMemorySettingsStore, JsonFileSettingsStore

from tests.conftest import create_test_activity


@pytest.fixture
def cli_store():
    return ActivityStore(InMemorySettingsStore(), selected_date=date(2024, 3, 10))


class TestCli:
    """Test cases for CLI commands."""

    def test_add_then_list(self, cli_store, capsys):
        code = main(
            [
                "add", "Morning Run",
                "--type", "Cardio",
                "--difficulty", "65",
                "--description", "5 mile run",
                "--location", "Central Park",
                "--lat", "40.78", "--lon", "-73.96",
                "--at", "2024-03-10T08:00:00",
            ],
            store=cli_store,
        )

        assert code == 0
        activity = cli_store.activities[0]
        assert activity.name == "Morning Run"
        assert activity.activity_type is ActivityType.CARDIO
        assert activity.location_name == "Central Park"
        assert (activity.latitude, activity.longitude) == (40.78, -73.96)

        capsys.readouterr()
        assert main(["list", "--date", "2024-03-10"], store=cli_store) == 0
        out = capsys.readouterr().out
        assert "March 10, 2024" in out
        assert "Morning Run" in out
        assert "difficulty 65 (moderate)" in out

    def test_add_location_name_without_coordinates(self, cli_store):
        main(["add", "Yoga", "--location", "Home", "--at", "2024-03-10T07:00:00"], store=cli_store)

        activity = cli_store.activities[0]
        assert activity.location_name == "Home"
        assert (activity.latitude, activity.longitude) == (0.0, 0.0)

    @pytest.mark.parametrize("coordinate", [["--lat", "1.0"], ["--lon", "2.0"]])
    def test_add_rejects_half_a_coordinate(self, cli_store, capsys, coordinate):
        with pytest.raises(SystemExit) as exc_info:
            main(["add", "Run", *coordinate], store=cli_store)

        assert exc_info.value.code == 2
        assert cli_store.activities == []
        assert "--lat and --lon must be given together" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["inf", "nan", "north"])
    def test_add_rejects_non_finite_coordinate(self, cli_store, value):
        with pytest.raises(SystemExit):
            main(["add", "Run", "--lat", value, "--lon", "2.0"], store=cli_store)

        assert cli_store.activities == []

    def test_add_rejects_blank_name(self, cli_store, capsys):
        code = main(["add", "   "], store=cli_store)

        assert code == 2
        assert cli_store.activities == []
        assert "activity name" in capsys.readouterr().err

    def test_list_empty_day(self, cli_store, capsys):
        main(["list", "--date", "2024-03-12"], store=cli_store)

        assert "No activities for this date" in capsys.readouterr().out

    def test_delete(self, cli_store, capsys):
        activity = create_test_activity()
        cli_store.add(activity)

        assert main(["delete", activity.id], store=cli_store) == 0
        assert cli_store.activities == []
        assert main(["delete", activity.id], store=cli_store) == 1

    def test_clear(self, cli_store, capsys):
        cli_store.add(create_test_activity())
        cli_store.add(create_test_activity())

        assert main(["clear"], store=cli_store) == 0
        assert len(cli_store) == 0
        assert "Cleared 2 activities" in capsys.readouterr().out

    def test_summary(self, cli_store, sample_activities, capsys):
        for activity in sample_activities:
            cli_store.add(activity)

        assert main(["summary"], store=cli_store) == 0
        out = capsys.readouterr().out
        assert "Total activities: 5" in out
        assert "Most active day: 2024-03-10" in out

    def test_calendar_marks_days_with_activity(self, cli_store, sample_activities, capsys):
        for activity in sample_activities:
            cli_store.add(activity)

        assert main(["calendar", "--year", "2024", "--month", "3"], store=cli_store) == 0
        out = capsys.readouterr().out
        assert "March 2024" in out
        assert " 10*" in out
        assert " 11*" in out
        assert " 12*" not in out

    def test_no_command_prints_help(self, cli_store, capsys):
        assert main([], store=cli_store) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestSettings:
    """Test cases for configuration."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = Settings()

        assert settings.storage_backend == "file"
        assert settings.storage_key == "userActivities"
        assert settings.timezone == "UTC"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HEALTHLOG_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("HEALTHLOG_TIMEZONE", "Europe/Berlin")

        settings = Settings()

        assert settings.storage_backend == "memory"
        assert str(settings.tz) == "Europe/Berlin"
        assert isinstance(build_backing_store(settings), InMemorySettingsStore)

    def test_unknown_timezone_rejected(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HEALTHLOG_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ValidationError):
            Settings()

    def test_file_backend_round_trip(self, tmp_path):
        settings = Settings(storage_backend="file", settings_path=tmp_path / "settings.json")
        assert isinstance(build_backing_store(settings), JsonFileSettingsStore)

        store = build_activity_store(settings)
        activity = create_test_activity(location_name=UNKNOWN_LOCATION)
        store.add(activity)

        assert build_activity_store(settings).activities == [activity]
