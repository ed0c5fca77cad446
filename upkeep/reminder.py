"""Reminder class for pending and completed maintenance obligations."""

from datetime import datetime
from typing import Optional

from .status import ReminderStatus


class Reminder:
    """A persisted future maintenance obligation."""

    def __init__(
            self,
            title: str,
            due_at: datetime,
            status: ReminderStatus = ReminderStatus.PENDING,
            vehicle_id: Optional[str] = None,
            vehicle_name: Optional[str] = None,
            due_distance: Optional[float] = None,
            scheduled_notification_id: Optional[str] = None,
            created_at: Optional[datetime] = None,
            completed_at: Optional[datetime] = None,
            kind: Optional[str] = None,
            id: Optional[str] = None,
    ):
        self.id = id
        self.title = title
        self.due_at = due_at
        self.status = status
        self.vehicle_id = vehicle_id
        self.vehicle_name = vehicle_name
        self.due_distance = due_distance
        self.scheduled_notification_id = scheduled_notification_id
        self.created_at = created_at
        self.completed_at = completed_at
        self.kind = kind

    @property
    def is_pending(self) -> bool:
        return self.status == ReminderStatus.PENDING

    @property
    def is_done(self) -> bool:
        return self.status == ReminderStatus.DONE

    def __repr__(self) -> str:
        return (
            f"Reminder(id={self.id!r}, title={self.title!r}, "
            f"due_at={self.due_at!r}, status={self.status.value})"
        )
