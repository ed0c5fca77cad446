#!/usr/bin/env python3
"""Tests for Vehicle, ScheduledService and HistoryEntry classes."""

from datetime import date, datetime

from upkeep import HistoryEntry, ScheduledService, Vehicle
from upkeep.history_entry import REMINDER_ENTRY


class TestVehicle:
    """Tests for Vehicle."""

    def test_name_joins_manufacturer_and_model(self):
        vehicle = Vehicle("Audi", "A5", "KA-01-1234", 2019, 42000, "Petrol")
        assert vehicle.name == "Audi A5"

    def test_name_skips_blank_parts(self):
        vehicle = Vehicle("", "A5", "KA-01-1234", 2019, 42000, "Petrol")
        assert vehicle.name == "A5"

    def test_id_defaults_to_none(self):
        vehicle = Vehicle("Audi", "A5", "KA-01-1234", 2019, 42000, "Petrol")
        assert vehicle.id is None
        assert vehicle.created_at is None


class TestScheduledService:
    """Tests for ScheduledService.is_due."""

    def make(self, due_date):
        return ScheduledService("Engine Oil", date(2024, 1, 1), due_date)

    def test_due_when_before_today(self):
        assert self.make(date(2024, 5, 19)).is_due(date(2024, 5, 20))

    def test_not_due_on_due_date(self):
        assert not self.make(date(2024, 5, 20)).is_due(date(2024, 5, 20))

    def test_not_due_in_future(self):
        assert not self.make(date(2024, 6, 1)).is_due(date(2024, 5, 20))


class TestHistoryEntry:
    """Tests for HistoryEntry defaults."""

    def test_defaults_to_reminder_entry(self):
        entry = HistoryEntry("Engine Oil", datetime(2024, 5, 20))
        assert entry.entry_type == REMINDER_ENTRY
        assert entry.due_distance is None
        assert entry.id is None
