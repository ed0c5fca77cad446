"""Helper functions for due date and due distance calculations."""

import math
import numbers
from datetime import date, datetime
from typing import Optional, TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from .errors import InvalidInputError
from .next_due import NextDue
from .status import Category, ReminderStatus

if TYPE_CHECKING:
    from .reminder import Reminder
    from .service_record import ServiceRecord

# Battery-style services are replaced on a fixed calendar policy.
TIME_BASED_INTERVAL_YEARS = 2
MIN_INTERVAL_MONTHS = 1


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not math.isnan(value)


def _require_positive(field: str, value) -> float:
    if value is None:
        raise InvalidInputError(f"{field} is required for distance-based services")
    if not _is_number(value):
        raise InvalidInputError(f"{field} must be a number, got {value!r}")
    if value <= 0:
        raise InvalidInputError(f"{field} must be greater than zero, got {value}")
    return value


def check_distance(field: str, value) -> Optional[float]:
    """Accept None or a non-negative number, otherwise InvalidInputError."""
    if value is None:
        return None
    if not _is_number(value):
        raise InvalidInputError(f"{field} must be a number, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative, got {value}")
    return value


def round_months(months: float) -> int:
    """Round to the nearest whole month (halves up), never below one."""
    return max(MIN_INTERVAL_MONTHS, int(math.floor(months + 0.5)))


def calc_due_distance(odometer_at_service: float, interval_distance: float) -> float:
    """Next due distance: odometer at last service + interval."""
    return odometer_at_service + interval_distance


def calc_due_date(
    last_date: date,
    interval_distance: float,
    average_monthly_distance: Optional[float],
) -> date:
    """
    Project a distance interval onto the calendar.

    - With a usage rate: last_date + round(interval / rate) months (min 1)
    - Without one (None or 0): last_date, distance is the only signal
    """
    if not average_monthly_distance:
        return last_date
    months = interval_distance / average_monthly_distance
    return last_date + relativedelta(months=round_months(months))


def compute_next_due(record: "ServiceRecord") -> NextDue:
    """
    Calculate when a service is next due.

    Time-based records are due a fixed number of years after the last
    service and carry no distance. Distance-based records require a
    positive odometer reading and interval.

    Raises:
        InvalidInputError: missing, non-numeric or non-positive fields on a
            distance-based record
    """
    if record.is_time_based:
        due_date = record.last_service_date + relativedelta(
            years=TIME_BASED_INTERVAL_YEARS
        )
        return NextDue(due_date=due_date)

    odometer = _require_positive("odometer_at_service", record.odometer_at_service)
    interval = _require_positive("interval_distance", record.interval_distance)

    monthly = record.average_monthly_distance
    if monthly is not None:
        if not _is_number(monthly):
            raise InvalidInputError(
                f"average_monthly_distance must be a number, got {monthly!r}"
            )
        if monthly < 0:
            raise InvalidInputError(
                f"average_monthly_distance cannot be negative, got {monthly}"
            )

    return NextDue(
        due_date=calc_due_date(record.last_service_date, interval, monthly),
        due_distance=calc_due_distance(odometer, interval),
    )


def classify(reminder: "Reminder", now: datetime) -> Category:
    """Derive the overdue/upcoming/completed view of a reminder."""
    if reminder.status == ReminderStatus.DONE:
        return Category.COMPLETED
    if reminder.due_at < now:
        return Category.OVERDUE
    return Category.UPCOMING


def days_until(due_at: datetime, now: datetime) -> int:
    """Whole days until due, rounded up; negative when overdue."""
    seconds = (due_at - now).total_seconds()
    return math.ceil(seconds / 86400)
