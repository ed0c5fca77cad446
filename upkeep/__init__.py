"""
Vehicle maintenance reminders.

This package provides:
- ServiceRecord / NextDue: a performed service and when it is next due
- compute_next_due: the due date / due distance calculator
- ReminderManager: create, snooze, complete, undo and delete reminders
- Garage: vehicles, the services recorded against them, and their history
- DocumentStore / NotificationScheduler: YAML-backed persistence and alerts
"""

from .errors import (
    UpkeepError,
    InvalidInputError,
    PersistenceError,
    NotificationSchedulingError,
    NotFoundError,
)
from .status import ReminderStatus, Category
from .service_record import ServiceRecord
from .next_due import NextDue
from .reminder import Reminder
from .history_entry import HistoryEntry
from .vehicle import Vehicle, FUEL_TYPES
from .scheduled_service import ScheduledService
from .calculations import (
    compute_next_due,
    calc_due_distance,
    calc_due_date,
    check_distance,
    round_months,
    classify,
    days_until,
)
from .store import Document, DocumentStore
from .notifications import Notification, NotificationScheduler
from .preferences import Preferences, load_preferences, update_preference
from .manager import ReminderManager, ReminderOverview
from .garage import Garage

__all__ = [
    "UpkeepError",
    "InvalidInputError",
    "PersistenceError",
    "NotificationSchedulingError",
    "NotFoundError",
    "ReminderStatus",
    "Category",
    "ServiceRecord",
    "NextDue",
    "Reminder",
    "HistoryEntry",
    "Vehicle",
    "FUEL_TYPES",
    "ScheduledService",
    "compute_next_due",
    "calc_due_distance",
    "calc_due_date",
    "check_distance",
    "round_months",
    "classify",
    "days_until",
    "Document",
    "DocumentStore",
    "Notification",
    "NotificationScheduler",
    "Preferences",
    "load_preferences",
    "update_preference",
    "ReminderManager",
    "ReminderOverview",
    "Garage",
]
