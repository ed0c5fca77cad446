"""Conversion between domain objects and stored document fields (camelCase)."""

from typing import Any, Dict

from .history_entry import HistoryEntry, REMINDER_ENTRY
from .reminder import Reminder
from .scheduled_service import ScheduledService, DISTANCE_KIND
from .status import ReminderStatus
from .store import Document
from .vehicle import Vehicle


def reminder_to_fields(reminder: Reminder) -> Dict[str, Any]:
    """Serialize a Reminder to its document fields."""
    return {
        "title": reminder.title,
        "vehicleId": reminder.vehicle_id,
        "vehicleName": reminder.vehicle_name,
        "dueAt": reminder.due_at,
        "dueDistance": reminder.due_distance,
        "status": reminder.status.value,
        "scheduledId": reminder.scheduled_notification_id,
        "createdAt": reminder.created_at,
        "completedAt": reminder.completed_at,
        "kind": reminder.kind,
    }


def reminder_from_document(doc: Document) -> Reminder:
    f = doc.fields
    return Reminder(
        id=doc.id,
        title=f["title"],
        due_at=f["dueAt"],
        status=ReminderStatus(f.get("status", ReminderStatus.PENDING.value)),
        vehicle_id=f.get("vehicleId"),
        vehicle_name=f.get("vehicleName"),
        due_distance=f.get("dueDistance"),
        scheduled_notification_id=f.get("scheduledId"),
        created_at=f.get("createdAt"),
        completed_at=f.get("completedAt"),
        kind=f.get("kind"),
    )


def history_entry_to_fields(entry: HistoryEntry) -> Dict[str, Any]:
    """Serialize a HistoryEntry, omitting None values for cleaner YAML."""
    d: Dict[str, Any] = {
        "name": entry.name,
        "completedAt": entry.completed_at,
        "type": entry.entry_type,
    }
    if entry.vehicle_id is not None:
        d["vehicleId"] = entry.vehicle_id
    if entry.vehicle_name is not None:
        d["vehicleName"] = entry.vehicle_name
    if entry.due_distance is not None:
        d["dueDistance"] = entry.due_distance
    if entry.note is not None:
        d["note"] = entry.note
    if entry.origin_id is not None:
        d["originId"] = entry.origin_id
    if entry.last_service_date is not None:
        d["lastDate"] = entry.last_service_date
    if entry.odometer_at_service is not None:
        d["odometerAtService"] = entry.odometer_at_service
    if entry.interval_distance is not None:
        d["intervalDistance"] = entry.interval_distance
    return d


def history_entry_from_document(doc: Document) -> HistoryEntry:
    f = doc.fields
    return HistoryEntry(
        id=doc.id,
        name=f["name"],
        completed_at=f.get("completedAt"),
        entry_type=f.get("type", REMINDER_ENTRY),
        vehicle_id=f.get("vehicleId"),
        vehicle_name=f.get("vehicleName"),
        due_distance=f.get("dueDistance"),
        note=f.get("note"),
        origin_id=f.get("originId"),
        last_service_date=f.get("lastDate"),
        odometer_at_service=f.get("odometerAtService"),
        interval_distance=f.get("intervalDistance"),
    )


def vehicle_to_fields(vehicle: Vehicle) -> Dict[str, Any]:
    return {
        "manufacturer": vehicle.manufacturer,
        "model": vehicle.model,
        "regNo": vehicle.reg_no,
        "year": vehicle.year,
        "currentMileage": vehicle.current_mileage,
        "fuelType": vehicle.fuel_type,
        "createdAt": vehicle.created_at,
    }


def vehicle_from_document(doc: Document) -> Vehicle:
    f = doc.fields
    return Vehicle(
        id=doc.id,
        manufacturer=f.get("manufacturer", ""),
        model=f.get("model", ""),
        reg_no=f.get("regNo", ""),
        year=f.get("year"),
        current_mileage=f.get("currentMileage"),
        fuel_type=f.get("fuelType"),
        created_at=f.get("createdAt"),
    )


def service_to_fields(service: ScheduledService) -> Dict[str, Any]:
    return {
        "name": service.name,
        "kind": service.kind,
        "lastDate": service.last_date,
        "odometerAtService": service.odometer_at_service,
        "intervalDistance": service.interval_distance,
        "avgMonthlyDistance": service.average_monthly_distance,
        "dueDistance": service.due_distance,
        "dueDate": service.due_date,
        "status": service.status,
        "createdAt": service.created_at,
    }


def service_from_document(doc: Document) -> ScheduledService:
    f = doc.fields
    return ScheduledService(
        id=doc.id,
        name=f["name"],
        kind=f.get("kind", DISTANCE_KIND),
        last_date=f.get("lastDate"),
        odometer_at_service=f.get("odometerAtService"),
        interval_distance=f.get("intervalDistance"),
        average_monthly_distance=f.get("avgMonthlyDistance"),
        due_distance=f.get("dueDistance"),
        due_date=f.get("dueDate"),
        status=f.get("status", "scheduled"),
        created_at=f.get("createdAt"),
    )
