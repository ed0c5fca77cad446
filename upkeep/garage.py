"""Vehicles, the services recorded against them, and their history."""

import logging
from datetime import date
from typing import List, Optional, Tuple

from .calculations import compute_next_due
from .documents import (
    history_entry_from_document,
    history_entry_to_fields,
    service_from_document,
    service_to_fields,
    vehicle_from_document,
    vehicle_to_fields,
)
from .errors import InvalidInputError, NotFoundError, PersistenceError
from .history_entry import HistoryEntry, SERVICE_ENTRY
from .manager import ReminderManager
from .reminder import Reminder
from .scheduled_service import BATTERY_KIND, DISTANCE_KIND, ScheduledService
from .service_record import ServiceRecord
from .store import (
    Document,
    history_path,
    services_path,
    vehicle_path,
    vehicles_path,
)
from .vehicle import FUEL_TYPES, Vehicle

logger = logging.getLogger(__name__)


class Garage:
    """A user's vehicles and the maintenance recorded for them."""

    def __init__(self, manager: ReminderManager):
        self.manager = manager
        self.store = manager.store
        self.uid = manager.uid

    # Vehicles

    def register_vehicle(
        self,
        manufacturer: str,
        model: str,
        reg_no: str,
        year,
        current_mileage,
        fuel_type: str,
    ) -> Vehicle:
        """Register a vehicle. Every field is required."""
        values = {
            "manufacturer": manufacturer,
            "model": model,
            "reg_no": reg_no,
            "year": year,
            "current_mileage": current_mileage,
            "fuel_type": fuel_type,
        }
        missing = [
            name for name, value in values.items()
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise InvalidInputError(f"Fill all fields (missing: {', '.join(missing)})")

        try:
            year = int(year)
            current_mileage = float(current_mileage)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Year and mileage must be numbers: {e}") from e
        if current_mileage < 0:
            raise InvalidInputError("Mileage cannot be negative")
        if fuel_type not in FUEL_TYPES:
            raise InvalidInputError(
                f"Fuel type must be one of {', '.join(FUEL_TYPES)}"
            )

        vehicle = Vehicle(
            manufacturer=manufacturer.strip(),
            model=model.strip(),
            reg_no=reg_no.strip(),
            year=year,
            current_mileage=current_mileage,
            fuel_type=fuel_type,
            created_at=self.manager.clock(),
        )
        vehicle.id = self.store.create(vehicles_path(self.uid), vehicle_to_fields(vehicle))
        logger.info("Registered vehicle %s (%s)", vehicle.id, vehicle.name)
        return vehicle

    def vehicles(self) -> List[Vehicle]:
        """All vehicles, most recently registered first."""
        docs = self.store.query(
            vehicles_path(self.uid), order_by="createdAt", descending=True
        )
        return [vehicle_from_document(doc) for doc in docs]

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        fields = self.store.get(vehicle_path(self.uid, vehicle_id))
        if fields is None:
            return None
        return vehicle_from_document(Document(id=vehicle_id, fields=fields))

    def require_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError(f"Vehicle '{vehicle_id}' not found")
        return vehicle

    # Services

    def record_service(
        self, vehicle_id: str, record: ServiceRecord
    ) -> Tuple[ScheduledService, Reminder]:
        """
        Save a performed service under a vehicle and create its reminder.

        The scheduled service is written first so the reminder's alert can
        reference it. If the reminder cannot be saved the service is
        removed again.
        """
        vehicle = self.require_vehicle(vehicle_id)
        due = compute_next_due(record)

        service = ScheduledService(
            name=record.service_name,
            kind=BATTERY_KIND if record.is_time_based else DISTANCE_KIND,
            last_date=record.last_service_date,
            odometer_at_service=record.odometer_at_service,
            interval_distance=record.interval_distance,
            average_monthly_distance=record.average_monthly_distance or None,
            due_distance=due.due_distance,
            due_date=due.due_date,
            created_at=self.manager.clock(),
        )
        service.id = self.store.create(
            services_path(self.uid, vehicle_id), service_to_fields(service)
        )

        try:
            reminder = self.manager.create(
                record,
                due,
                vehicle_id=vehicle_id,
                vehicle_name=vehicle.name or None,
                data={
                    "vehicleId": vehicle_id,
                    "serviceId": service.id,
                    "type": "batteryReminder" if record.is_time_based else "serviceReminder",
                },
            )
        except PersistenceError:
            self.store.delete(f"{services_path(self.uid, vehicle_id)}/{service.id}")
            raise
        return service, reminder

    def services(self, vehicle_id: str) -> List[ScheduledService]:
        """Scheduled services for a vehicle, soonest due first."""
        docs = self.store.query(services_path(self.uid, vehicle_id), order_by="dueDate")
        return [service_from_document(doc) for doc in docs]

    def get_service(self, vehicle_id: str, service_id: str) -> ScheduledService:
        path = f"{services_path(self.uid, vehicle_id)}/{service_id}"
        fields = self.store.get(path)
        if fields is None:
            raise NotFoundError(f"Service '{service_id}' not found")
        return service_from_document(Document(id=service_id, fields=fields))

    @staticmethod
    def split_services(
        services: List[ScheduledService], today: date
    ) -> Tuple[List[ScheduledService], List[ScheduledService]]:
        """Split services into (due, coming)."""
        due = [s for s in services if s.due_date is not None and s.is_due(today)]
        coming = [s for s in services if s not in due]
        return due, coming

    def complete_service(self, vehicle_id: str, service: ScheduledService) -> HistoryEntry:
        """
        Move a scheduled service into the vehicle's history.

        The history entry is written before the service is removed, so a
        failed delete leaves the service in place for another attempt.
        """
        vehicle = self.get_vehicle(vehicle_id)
        entry = HistoryEntry(
            name=service.name,
            completed_at=self.manager.clock(),
            entry_type=SERVICE_ENTRY,
            vehicle_id=vehicle_id,
            vehicle_name=vehicle.name if vehicle else None,
            due_distance=service.due_distance,
            origin_id=service.id,
            last_service_date=service.last_date or service.due_date,
            odometer_at_service=service.odometer_at_service,
            interval_distance=service.interval_distance,
        )
        entry.id = self.store.create(
            history_path(self.uid, vehicle_id), history_entry_to_fields(entry)
        )
        self.store.delete(f"{services_path(self.uid, vehicle_id)}/{service.id}")
        logger.info("Completed service %s on vehicle %s", service.name, vehicle_id)
        return entry

    # History

    def history(self, vehicle_id: Optional[str] = None) -> List[HistoryEntry]:
        """Service history for one vehicle or all of them, newest first."""
        if vehicle_id is not None:
            vehicle_ids = [vehicle_id]
        else:
            vehicle_ids = [v.id for v in self.vehicles()]

        entries = []
        for vid in vehicle_ids:
            docs = self.store.query(history_path(self.uid, vid))
            entries.extend(history_entry_from_document(doc) for doc in docs)
        return sorted(
            entries,
            key=lambda e: (e.last_service_date or date.min, e.completed_at),
            reverse=True,
        )
