#!/usr/bin/env python3
"""Tests for the outbox-backed NotificationScheduler."""

from datetime import datetime

import pytest

from upkeep import NotificationScheduler, NotificationSchedulingError


@pytest.fixture
def outbox(tmp_path):
    scheduler = NotificationScheduler(tmp_path / "notifications.yaml")
    scheduler.init()
    return scheduler


class TestInit:
    """Tests for permission handling."""

    def test_disabled_until_init(self, tmp_path):
        scheduler = NotificationScheduler(tmp_path / "n.yaml")
        assert scheduler.enabled is False
        assert scheduler.schedule_one_shot("t", "b", datetime(2024, 6, 1)) is None

    def test_permission_denied(self, tmp_path):
        scheduler = NotificationScheduler(tmp_path / "n.yaml", permitted=False)
        assert scheduler.init() is False
        assert scheduler.schedule_one_shot("t", "b", datetime(2024, 6, 1)) is None
        assert scheduler.pending() == []

    def test_init_is_repeatable(self, outbox):
        assert outbox.init() is True
        assert outbox.init() is True


class TestSchedule:
    """Tests for scheduling and cancelling."""

    def test_schedule_returns_id(self, outbox):
        notification_id = outbox.schedule_one_shot(
            "Engine Oil service",
            "Due on Jun 01, 2024",
            datetime(2024, 6, 1),
            data={"vehicleId": "v1"},
        )
        assert notification_id
        [pending] = outbox.pending()
        assert pending.id == notification_id
        assert pending.title == "Engine Oil service"
        assert pending.fire_date == datetime(2024, 6, 1)
        assert pending.data == {"vehicleId": "v1"}

    def test_pending_sorted_by_fire_date(self, outbox):
        outbox.schedule_one_shot("late", "", datetime(2024, 9, 1))
        outbox.schedule_one_shot("early", "", datetime(2024, 6, 1))
        assert [n.title for n in outbox.pending()] == ["early", "late"]

    def test_cancel_removes(self, outbox):
        notification_id = outbox.schedule_one_shot("t", "b", datetime(2024, 6, 1))
        outbox.cancel_notification(notification_id)
        assert outbox.pending() == []

    def test_cancel_unknown_or_none_is_noop(self, outbox):
        outbox.schedule_one_shot("t", "b", datetime(2024, 6, 1))
        outbox.cancel_notification(None)
        outbox.cancel_notification("missing")
        assert len(outbox.pending()) == 1

    def test_cancel_all(self, outbox):
        outbox.schedule_one_shot("a", "", datetime(2024, 6, 1))
        outbox.schedule_one_shot("b", "", datetime(2024, 6, 2))
        outbox.cancel_all_scheduled()
        assert outbox.pending() == []


class TestPopDue:
    """Tests for delivering due notifications."""

    def test_pops_only_due(self, outbox):
        outbox.schedule_one_shot("past", "", datetime(2024, 5, 1))
        outbox.schedule_one_shot("now", "", datetime(2024, 5, 20, 12, 0))
        outbox.schedule_one_shot("future", "", datetime(2024, 6, 1))

        delivered = outbox.pop_due(datetime(2024, 5, 20, 12, 0))
        assert [n.title for n in delivered] == ["past", "now"]
        assert [n.title for n in outbox.pending()] == ["future"]

    def test_nothing_due(self, outbox):
        outbox.schedule_one_shot("future", "", datetime(2024, 6, 1))
        assert outbox.pop_due(datetime(2024, 5, 20)) == []


class TestErrors:
    """Tests for outbox failures."""

    def test_corrupt_outbox_raises(self, tmp_path):
        path = tmp_path / "n.yaml"
        path.write_text("{unclosed: [")
        scheduler = NotificationScheduler(path)
        scheduler.init()
        with pytest.raises(NotificationSchedulingError):
            scheduler.schedule_one_shot("t", "b", datetime(2024, 6, 1))
