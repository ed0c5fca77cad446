"""Reminder status and derived classification."""

from enum import Enum


class ReminderStatus(Enum):
    """Persisted reminder state."""

    PENDING = "pending"
    DONE = "done"


class Category(Enum):
    """Derived reminder views. Lower value = more urgent."""

    OVERDUE = 1
    UPCOMING = 2
    COMPLETED = 3
