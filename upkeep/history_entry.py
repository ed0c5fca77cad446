"""HistoryEntry class for completed maintenance records."""
from datetime import date, datetime
from typing import Optional

REMINDER_ENTRY = "reminder"
SERVICE_ENTRY = "service"


class HistoryEntry:
    """A record of maintenance performed. Never modified once written."""

    def __init__(
            self,
            name: str,
            completed_at: datetime,
            entry_type: str = REMINDER_ENTRY,
            vehicle_id: Optional[str] = None,
            vehicle_name: Optional[str] = None,
            due_distance: Optional[float] = None,
            note: Optional[str] = None,
            origin_id: Optional[str] = None,
            last_service_date: Optional[date] = None,
            odometer_at_service: Optional[float] = None,
            interval_distance: Optional[float] = None,
            id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.completed_at = completed_at
        self.entry_type = entry_type
        self.vehicle_id = vehicle_id
        self.vehicle_name = vehicle_name
        self.due_distance = due_distance
        self.note = note
        self.origin_id = origin_id
        self.last_service_date = last_service_date
        self.odometer_at_service = odometer_at_service
        self.interval_distance = interval_distance
