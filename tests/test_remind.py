#!/usr/bin/env python3
"""Tests for the remind CLI helpers and commands."""

import argparse
from datetime import date, datetime

import pytest

from upkeep import DocumentStore, Reminder, ReminderStatus
from upkeep.store import reminders_path, services_path, vehicles_path
from remind import (
    format_date,
    format_days,
    format_distance,
    main,
    make_reminder_table,
    parse_day,
    parse_switch,
    truncate,
)

UID = "tester"


def run(tmp_path, *args):
    return main(["--data-dir", str(tmp_path), "--user", UID, *args])


def doc_ids(tmp_path, collection):
    store = DocumentStore(tmp_path / "store.yaml")
    return [doc.id for doc in store.query(collection)]


class TestFormatting:
    """Tests for formatting helpers."""

    def test_format_distance(self):
        assert format_distance(85000) == "85,000 km"
        assert format_distance(85000, "mi") == "85,000 mi"
        assert format_distance(None) == "-"

    def test_format_date(self):
        assert format_date(date(2024, 6, 1)) == "2024-06-01"
        assert format_date(datetime(2024, 6, 1, 9, 30)) == "2024-06-01"
        assert format_date(None) == "-"

    def test_format_days(self):
        assert format_days(3) == "in 3d"
        assert format_days(0) == "today"
        assert format_days(-2) == "2d overdue"

    def test_truncate(self):
        assert truncate("short") == "short"
        assert truncate("a" * 40, 10) == "aaaaaaa..."
        assert truncate(None) == "-"

    def test_parse_day(self):
        assert parse_day("2024-05-01") == date(2024, 5, 1)
        with pytest.raises(argparse.ArgumentTypeError):
            parse_day("05/01/2024")

    def test_parse_switch(self):
        assert parse_switch("on") is True
        assert parse_switch("OFF") is False
        with pytest.raises(argparse.ArgumentTypeError):
            parse_switch("maybe")


class TestMakeReminderTable:
    """Tests for make_reminder_table."""

    def test_pending_row(self):
        now = datetime(2024, 5, 20, 12, 0)
        reminder = Reminder(
            "Engine Oil",
            datetime(2024, 5, 27, 12, 0),
            vehicle_name="Audi A5",
            due_distance=85000,
            id="r1",
        )
        [row] = make_reminder_table([reminder], now)
        assert row == ["r1", "Engine Oil", "Audi A5", "2024-05-27", "85,000 km", "in 7d"]

    def test_done_row_shows_completion(self):
        reminder = Reminder(
            "Car Wash",
            datetime(2024, 5, 1),
            status=ReminderStatus.DONE,
            completed_at=datetime(2024, 5, 3, 8, 0),
            id="r2",
        )
        [row] = make_reminder_table([reminder], datetime(2024, 5, 20))
        assert row[-1] == "2024-05-03"
        assert row[2] == "-"


class TestReminderCommands:
    """Tests for reminder commands through main()."""

    def test_empty_reminders(self, tmp_path, capsys):
        assert run(tmp_path, "reminders") == 0
        assert "No reminders yet." in capsys.readouterr().out

    def test_reminder_lifecycle(self, tmp_path, capsys):
        assert run(tmp_path, "add", "Car Wash", "--days", "3", "--vehicle", "Audi A5") == 0
        assert "Reminder added: Car Wash" in capsys.readouterr().out
        [reminder_id] = doc_ids(tmp_path, reminders_path(UID))

        assert run(tmp_path, "reminders") == 0
        out = capsys.readouterr().out
        assert "Upcoming (1)" in out
        assert "Car Wash" in out

        assert run(tmp_path, "snooze", reminder_id, "7") == 0
        assert "Snoozed 7 days: Car Wash" in capsys.readouterr().out

        assert run(tmp_path, "done", reminder_id) == 0
        assert "Marked done: Car Wash" in capsys.readouterr().out

        assert run(tmp_path, "history") == 0
        out = capsys.readouterr().out
        assert "Completed reminders: 1" in out
        assert "Reminder completed." in out

        assert run(tmp_path, "undo", reminder_id) == 0
        assert "Reverted to pending: Car Wash" in capsys.readouterr().out

        assert run(tmp_path, "delete", reminder_id) == 0
        assert "Reminder deleted: Car Wash" in capsys.readouterr().out
        assert doc_ids(tmp_path, reminders_path(UID)) == []

    def test_unknown_reminder_is_error(self, tmp_path, capsys):
        assert run(tmp_path, "done", "missing") == 1
        assert "Error: Reminder 'missing' not found" in capsys.readouterr().out

    def test_blank_title_is_error(self, tmp_path, capsys):
        assert run(tmp_path, "add", "  ") == 1
        assert "Error: Enter a title" in capsys.readouterr().out

    def test_snooze_requires_positive_days(self, tmp_path, capsys):
        run(tmp_path, "add", "Car Wash")
        [reminder_id] = doc_ids(tmp_path, reminders_path(UID))
        assert run(tmp_path, "snooze", reminder_id, "0") == 1

    def test_notify_delivers_due(self, tmp_path, capsys):
        run(tmp_path, "add", "Car Wash", "--days", "-1")
        run(tmp_path, "add", "Engine Oil", "--days", "30")
        capsys.readouterr()

        assert run(tmp_path, "notify", "--list") == 0
        out = capsys.readouterr().out
        assert "Car Wash" in out
        assert "Engine Oil" in out

        assert run(tmp_path, "notify") == 0
        out = capsys.readouterr().out
        assert "Car Wash: Due" in out
        assert "Engine Oil" not in out

        assert run(tmp_path, "notify") == 0
        assert "Nothing due." in capsys.readouterr().out


class TestVehicleCommands:
    """Tests for vehicle and service commands through main()."""

    def register(self, tmp_path):
        assert run(tmp_path, "register", "Audi", "A5", "KA-01-1234", "2019", "42000", "Petrol") == 0
        [vehicle_id] = doc_ids(tmp_path, vehicles_path(UID))
        return vehicle_id

    def test_register_and_list(self, tmp_path, capsys):
        self.register(tmp_path)
        assert "Vehicle registered: Audi A5" in capsys.readouterr().out
        assert run(tmp_path, "vehicles") == 0
        out = capsys.readouterr().out
        assert "Audi A5" in out
        assert "KA-01-1234" in out

    def test_no_vehicles(self, tmp_path, capsys):
        assert run(tmp_path, "vehicles") == 0
        assert "No vehicles registered." in capsys.readouterr().out

    def test_catalog(self, tmp_path, capsys):
        assert run(tmp_path, "catalog") == 0
        out = capsys.readouterr().out
        assert "Battery Replacement" in out
        assert "2 years" in out
        assert "10,000 km" in out

    def test_service_dry_run(self, tmp_path, capsys):
        vehicle_id = self.register(tmp_path)
        capsys.readouterr()
        assert run(
            tmp_path, "service", vehicle_id, "Engine Oil",
            "--date", "2024-05-01", "--odometer", "75000", "--monthly", "1000", "--dry-run",
        ) == 0
        out = capsys.readouterr().out
        assert "Next due:  85,000 km / 2025-03-01" in out
        assert "(dry run - no changes made)" in out
        assert doc_ids(tmp_path, services_path(UID, vehicle_id)) == []

    def test_service_flow(self, tmp_path, capsys):
        vehicle_id = self.register(tmp_path)
        assert run(
            tmp_path, "service", vehicle_id, "Engine Oil",
            "--date", "2024-05-01", "--odometer", "75000",
        ) == 0
        assert "Service & reminder saved" in capsys.readouterr().out
        [service_id] = doc_ids(tmp_path, services_path(UID, vehicle_id))
        assert len(doc_ids(tmp_path, reminders_path(UID))) == 1

        assert run(tmp_path, "services", vehicle_id) == 0
        out = capsys.readouterr().out
        assert "Engine Oil" in out
        assert "85,000 km" in out

        assert run(tmp_path, "service-done", vehicle_id, service_id) == 0
        assert "Marked as done: Engine Oil" in capsys.readouterr().out

        assert run(tmp_path, "history", "--vehicle", vehicle_id) == 0
        out = capsys.readouterr().out
        assert "Service history: 1" in out
        assert "2024-05-01" in out

    def test_battery_service(self, tmp_path, capsys):
        vehicle_id = self.register(tmp_path)
        capsys.readouterr()
        assert run(
            tmp_path, "service", vehicle_id, "Battery Replacement", "--date", "2024-01-15",
        ) == 0
        out = capsys.readouterr().out
        assert "Next due:  - / 2026-01-15" in out
        assert "Odometer" not in out

    def test_distance_service_needs_odometer(self, tmp_path, capsys):
        vehicle_id = self.register(tmp_path)
        capsys.readouterr()
        assert run(tmp_path, "service", vehicle_id, "Engine Oil", "--date", "2024-05-01") == 1
        assert "odometer_at_service is required" in capsys.readouterr().out

    def test_service_unknown_vehicle(self, tmp_path, capsys):
        assert run(tmp_path, "service", "missing", "Engine Oil", "--odometer", "1") == 1
        assert "Vehicle 'missing' not found" in capsys.readouterr().out


class TestSettingsCommand:
    """Tests for the settings command."""

    def test_defaults(self, tmp_path, capsys):
        assert run(tmp_path, "settings") == 0
        out = capsys.readouterr().out
        assert "Push notifications:  on" in out
        assert "Distance unit:       km" in out

    def test_change_unit_and_push(self, tmp_path, capsys):
        assert run(tmp_path, "settings", "--unit", "mi", "--push", "off") == 0
        out = capsys.readouterr().out
        assert "Push notifications:  off" in out
        assert "Distance unit:       mi" in out
