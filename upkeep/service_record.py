"""ServiceRecord: the input describing when a service was last performed."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .catalog import is_time_based


@dataclass(frozen=True)
class ServiceRecord:
    """A completed maintenance action, used to compute when it is next due."""

    service_name: str
    last_service_date: date
    is_time_based: bool = False
    odometer_at_service: Optional[float] = None
    interval_distance: Optional[float] = None
    average_monthly_distance: Optional[float] = None

    @classmethod
    def for_service(
        cls,
        service_name: str,
        last_service_date: date,
        odometer_at_service: Optional[float] = None,
        interval_distance: Optional[float] = None,
        average_monthly_distance: Optional[float] = None,
    ) -> "ServiceRecord":
        """
        Build a record, deciding time- vs distance-based from the catalog.

        Time-based services never carry distance fields.
        """
        if is_time_based(service_name):
            return cls(service_name, last_service_date, is_time_based=True)
        return cls(
            service_name,
            last_service_date,
            is_time_based=False,
            odometer_at_service=odometer_at_service,
            interval_distance=interval_distance,
            average_monthly_distance=average_monthly_distance,
        )
