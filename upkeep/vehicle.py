"""Vehicle class for registered vehicles."""

from datetime import datetime
from typing import Optional

FUEL_TYPES = ("Petrol", "Diesel", "Hybrid", "Electric")


class Vehicle:
    """Vehicle identification and current odometer reading."""

    def __init__(
        self,
        manufacturer: str,
        model: str,
        reg_no: str,
        year: int,
        current_mileage: float,
        fuel_type: str,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.manufacturer = manufacturer
        self.model = model
        self.reg_no = reg_no
        self.year = year
        self.current_mileage = current_mileage
        self.fuel_type = fuel_type
        self.created_at = created_at

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return " ".join(p for p in (self.manufacturer, self.model) if p)
