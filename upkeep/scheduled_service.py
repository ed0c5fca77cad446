"""ScheduledService class for services recorded against a vehicle."""

from datetime import date, datetime
from typing import Optional

BATTERY_KIND = "battery"
DISTANCE_KIND = "distance"


class ScheduledService:
    """A recorded service with its next due point, awaiting completion."""

    def __init__(
        self,
        name: str,
        last_date: date,
        due_date: date,
        kind: str = DISTANCE_KIND,
        odometer_at_service: Optional[float] = None,
        interval_distance: Optional[float] = None,
        average_monthly_distance: Optional[float] = None,
        due_distance: Optional[float] = None,
        status: str = "scheduled",
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.kind = kind
        self.last_date = last_date
        self.odometer_at_service = odometer_at_service
        self.interval_distance = interval_distance
        self.average_monthly_distance = average_monthly_distance
        self.due_distance = due_distance
        self.due_date = due_date
        self.status = status
        self.created_at = created_at

    def is_due(self, today: date) -> bool:
        """Due once the due date is strictly before today."""
        return self.due_date < today
