"""Reminder lifecycle: keeps persisted reminders and scheduled alerts in sync."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, List, Optional

from .calculations import check_distance, classify
from .documents import (
    history_entry_from_document,
    history_entry_to_fields,
    reminder_from_document,
    reminder_to_fields,
)
from .errors import (
    InvalidInputError,
    NotFoundError,
    NotificationSchedulingError,
    PersistenceError,
)
from .history_entry import HistoryEntry, REMINDER_ENTRY
from .next_due import NextDue
from .notifications import NotificationScheduler
from .preferences import load_preferences
from .reminder import Reminder
from .scheduled_service import BATTERY_KIND
from .service_record import ServiceRecord
from .status import Category, ReminderStatus
from .store import Document, DocumentStore, history_path, reminders_path

logger = logging.getLogger(__name__)


def format_day(d: date) -> str:
    """Format a date for notification text, e.g. 'Jun 08, 2024'."""
    return d.strftime("%b %d, %Y")


def format_distance(distance: Optional[float], unit: str = "km") -> str:
    return f"{distance:,.0f} {unit}" if distance is not None else "-"


def start_of_day(d: date) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime.combine(d, time.min)


@dataclass
class ReminderOverview:
    """Read-only projection of a user's reminders, split by category."""

    upcoming: List[Reminder] = field(default_factory=list)
    overdue: List[Reminder] = field(default_factory=list)
    completed: List[Reminder] = field(default_factory=list)

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "upcoming": len(self.upcoming),
            "overdue": len(self.overdue),
            "completed": len(self.completed),
        }


class ReminderManager:
    """
    Owns the reminder state machine (pending <-> done, plus deletion).

    The reminder document is the source of truth. Scheduled alerts are a
    best-effort side channel: scheduling failures are logged and never
    block the persistence change. An existing alert is always cancelled
    before a replacement is scheduled.
    """

    def __init__(
        self,
        store: DocumentStore,
        scheduler: NotificationScheduler,
        uid: str,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.uid = uid
        self.clock = clock or datetime.now
        self.notifications_enabled = False
        self.distance_unit = "km"

    def init_notifications(self) -> bool:
        """Ask for notification permission and apply the user's push setting."""
        permitted = self.scheduler.init()
        prefs = load_preferences(self.store, self.uid)
        self.distance_unit = prefs.distance_unit
        self.notifications_enabled = permitted and prefs.push_on
        return self.notifications_enabled

    # -------------------------------------------------------------------------
    # Alert side channel
    # -------------------------------------------------------------------------

    def _schedule(
        self,
        title: str,
        body: str,
        fire_date: datetime,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        if not self.notifications_enabled:
            return None
        try:
            return self.scheduler.schedule_one_shot(
                title=title, body=body, fire_date=fire_date, data=data
            )
        except NotificationSchedulingError as e:
            logger.warning("Failed to schedule notification %r: %s", title, e)
            return None

    def _cancel(self, notification_id: Optional[str]) -> bool:
        """Cancel an alert. Returns False if the scheduler reported a failure."""
        if notification_id is None:
            return True
        try:
            self.scheduler.cancel_notification(notification_id)
        except NotificationSchedulingError as e:
            logger.warning("Failed to cancel notification %s: %s", notification_id, e)
            return False
        return True

    def _reminder_body(self, reminder: Reminder, due_at: datetime) -> str:
        body = f"Due {format_day(due_at)}"
        if reminder.vehicle_name:
            body += f" - {reminder.vehicle_name}"
        return body

    def _path(self, reminder_id: str) -> str:
        return f"{reminders_path(self.uid)}/{reminder_id}"

    def _insert(self, reminder: Reminder) -> Reminder:
        try:
            reminder.id = self.store.create(
                reminders_path(self.uid), reminder_to_fields(reminder)
            )
        except PersistenceError:
            self._cancel(reminder.scheduled_notification_id)
            raise
        logger.info("Created reminder %s (%s) due %s", reminder.id, reminder.title, reminder.due_at)
        return reminder

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def create(
        self,
        record: ServiceRecord,
        due: NextDue,
        vehicle_id: Optional[str] = None,
        vehicle_name: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Reminder:
        """Create a pending reminder for a recorded service and schedule its alert."""
        due_at = start_of_day(due.due_date)
        if record.is_time_based:
            alert_title = "Battery replacement"
            body = (
                f"Battery replacement due on {format_day(due_at)}. "
                "Remember to check voltage regularly."
            )
        else:
            alert_title = f"{record.service_name} service"
            body = f"Due on {format_day(due_at)}"
            if due.due_distance is not None:
                body += f" at {format_distance(due.due_distance, self.distance_unit)}"

        reminder = Reminder(
            title=record.service_name,
            due_at=due_at,
            vehicle_id=vehicle_id,
            vehicle_name=vehicle_name,
            due_distance=due.due_distance,
            created_at=self.clock(),
            kind=BATTERY_KIND if record.is_time_based else None,
        )
        reminder.scheduled_notification_id = self._schedule(
            alert_title, body, due_at, data
        )
        return self._insert(reminder)

    def quick_add(
        self,
        title: str,
        due_in_days: int = 7,
        vehicle_name: Optional[str] = None,
        due_distance: Optional[float] = None,
    ) -> Reminder:
        """Add a reminder directly, due a number of days from now."""
        title = (title or "").strip()
        if not title:
            raise InvalidInputError("Enter a title")
        if isinstance(due_in_days, bool) or not isinstance(due_in_days, int):
            raise InvalidInputError(f"due_in_days must be a whole number, got {due_in_days!r}")
        due_distance = check_distance("due_distance", due_distance)

        due_at = self.clock() + timedelta(days=max(0, due_in_days))
        reminder = Reminder(
            title=title,
            due_at=due_at,
            vehicle_name=(vehicle_name or "").strip() or None,
            due_distance=due_distance,
            created_at=self.clock(),
        )
        reminder.scheduled_notification_id = self._schedule(
            title, self._reminder_body(reminder, due_at), due_at
        )
        return self._insert(reminder)

    def snooze(self, reminder: Reminder, days: int) -> Reminder:
        """Push the due date back by `days` and move the alert with it."""
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise InvalidInputError(f"Snooze days must be a positive whole number, got {days!r}")
        if reminder.is_done:
            raise InvalidInputError(f"Reminder {reminder.id} is already completed")

        new_due = reminder.due_at + timedelta(days=days)
        new_id = None
        if self._cancel(reminder.scheduled_notification_id):
            new_id = self._schedule(
                reminder.title, self._reminder_body(reminder, new_due), new_due
            )
        try:
            self.store.update(
                self._path(reminder.id), {"dueAt": new_due, "scheduledId": new_id}
            )
        except PersistenceError:
            self._cancel(new_id)
            raise

        reminder.due_at = new_due
        reminder.scheduled_notification_id = new_id
        logger.info("Snoozed reminder %s by %d days to %s", reminder.id, days, new_due)
        return reminder

    def complete(self, reminder: Reminder) -> HistoryEntry:
        """
        Mark a reminder done and append one history entry for it.

        The history entry is written first. If the status update then fails
        the entry is removed again, so a reminder is never done without
        exactly one entry and a failed completion can be retried.
        """
        if reminder.is_done:
            raise InvalidInputError(f"Reminder {reminder.id} is already completed")

        now = self.clock()
        note = "Reminder completed."
        if reminder.due_distance:
            note += f" At {format_distance(reminder.due_distance, self.distance_unit)}."
        entry = HistoryEntry(
            name=reminder.title,
            completed_at=now,
            entry_type=REMINDER_ENTRY,
            vehicle_id=reminder.vehicle_id,
            vehicle_name=reminder.vehicle_name,
            due_distance=reminder.due_distance,
            note=note,
            origin_id=reminder.id,
        )
        entry.id = self.store.create(
            history_path(self.uid), history_entry_to_fields(entry)
        )
        try:
            self.store.update(
                self._path(reminder.id),
                {
                    "status": ReminderStatus.DONE.value,
                    "completedAt": now,
                    "scheduledId": None,
                },
            )
        except PersistenceError:
            self.store.delete(f"{history_path(self.uid)}/{entry.id}")
            raise

        notification_id = reminder.scheduled_notification_id
        if not self._cancel(notification_id):
            logger.warning(
                "Notification %s for completed reminder %s is no longer tracked",
                notification_id,
                reminder.id,
            )
        reminder.status = ReminderStatus.DONE
        reminder.completed_at = now
        reminder.scheduled_notification_id = None
        logger.info("Completed reminder %s (%s)", reminder.id, reminder.title)
        return entry

    def undo(self, reminder: Reminder) -> Reminder:
        """Revert a completed reminder to pending and re-arm its alert."""
        if not reminder.is_done:
            raise InvalidInputError(f"Reminder {reminder.id} is not completed")

        new_id = self._schedule(
            reminder.title,
            self._reminder_body(reminder, reminder.due_at),
            reminder.due_at,
        )
        try:
            self.store.update(
                self._path(reminder.id),
                {
                    "status": ReminderStatus.PENDING.value,
                    "completedAt": None,
                    "scheduledId": new_id,
                },
            )
        except PersistenceError:
            self._cancel(new_id)
            raise

        reminder.status = ReminderStatus.PENDING
        reminder.completed_at = None
        reminder.scheduled_notification_id = new_id
        logger.info("Reverted reminder %s to pending", reminder.id)
        return reminder

    def delete(self, reminder: Reminder) -> None:
        """Cancel the alert (if any) and remove the reminder."""
        self._cancel(reminder.scheduled_notification_id)
        self.store.delete(self._path(reminder.id))
        logger.info("Deleted reminder %s", reminder.id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, reminder_id: str) -> Optional[Reminder]:
        fields = self.store.get(self._path(reminder_id))
        if fields is None:
            return None
        return reminder_from_document(Document(id=reminder_id, fields=fields))

    def require(self, reminder_id: str) -> Reminder:
        reminder = self.get(reminder_id)
        if reminder is None:
            raise NotFoundError(f"Reminder '{reminder_id}' not found")
        return reminder

    def list(self) -> List[Reminder]:
        """All reminders, soonest due first."""
        docs = self.store.query(reminders_path(self.uid), order_by="dueAt")
        return [reminder_from_document(doc) for doc in docs]

    def overview(self, now: Optional[datetime] = None) -> ReminderOverview:
        now = now or self.clock()
        result = ReminderOverview()
        buckets = {
            Category.UPCOMING: result.upcoming,
            Category.OVERDUE: result.overdue,
            Category.COMPLETED: result.completed,
        }
        for reminder in self.list():
            buckets[classify(reminder, now)].append(reminder)
        return result

    def history(self) -> List[HistoryEntry]:
        """User-level history, newest first."""
        docs = self.store.query(
            history_path(self.uid), order_by="completedAt", descending=True
        )
        return [history_entry_from_document(doc) for doc in docs]
