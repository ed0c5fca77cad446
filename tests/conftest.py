"""Shared fixtures: a recording scheduler, a fixed clock, and file-backed stores."""

from datetime import datetime

import pytest

from upkeep import (
    DocumentStore,
    NotificationSchedulingError,
    PersistenceError,
    ReminderManager,
)

NOW = datetime(2024, 5, 20, 12, 0)


class RecordingScheduler:
    """In-memory stand-in for NotificationScheduler that records every call."""

    def __init__(self, permitted=True, fail_schedule=False, fail_cancel=False):
        self.permitted = permitted
        self.enabled = False
        self.fail_schedule = fail_schedule
        self.fail_cancel = fail_cancel
        self.live = {}
        self.cancelled = []
        self.init_calls = 0
        self._counter = 0

    def init(self):
        self.init_calls += 1
        self.enabled = self.permitted
        return self.enabled

    def schedule_one_shot(self, title, body, fire_date, data=None):
        if self.fail_schedule:
            raise NotificationSchedulingError("scheduler unavailable")
        self._counter += 1
        notification_id = f"n{self._counter}"
        self.live[notification_id] = {
            "title": title,
            "body": body,
            "fire_date": fire_date,
            "data": data,
        }
        return notification_id

    def cancel_notification(self, notification_id):
        if self.fail_cancel:
            raise NotificationSchedulingError("scheduler unavailable")
        if notification_id is None:
            return
        self.cancelled.append(notification_id)
        self.live.pop(notification_id, None)


class FailingStore(DocumentStore):
    """DocumentStore whose writes fail once armed.

    fail_writes fails every create and update; fail_paths fails only those
    whose path contains one of the given fragments.
    """

    def __init__(self, filename):
        super().__init__(filename)
        self.fail_writes = False
        self.fail_paths = ()

    def _check(self, path):
        if self.fail_writes or any(fragment in path for fragment in self.fail_paths):
            raise PersistenceError("store offline")

    def create(self, collection_path, fields):
        self._check(collection_path)
        return super().create(collection_path, fields)

    def update(self, document_path, partial_fields):
        self._check(document_path)
        return super().update(document_path, partial_fields)


@pytest.fixture
def store(tmp_path):
    return DocumentStore(tmp_path / "store.yaml")


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def manager(store, scheduler):
    mgr = ReminderManager(store, scheduler, "tester", clock=lambda: NOW)
    mgr.init_notifications()
    return mgr


@pytest.fixture
def failing_store(tmp_path):
    return FailingStore(tmp_path / "store.yaml")


@pytest.fixture
def failing_manager(failing_store, scheduler):
    mgr = ReminderManager(failing_store, scheduler, "tester", clock=lambda: NOW)
    mgr.init_notifications()
    return mgr
