"""NextDue dataclass for calculated due information."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class NextDue:
    """When a service is next due, by calendar and optionally by distance."""

    due_date: date
    due_distance: Optional[float] = None

    @property
    def is_distance_tracked(self) -> bool:
        return self.due_distance is not None
