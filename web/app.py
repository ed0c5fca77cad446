"""Flask JSON API for vehicle maintenance reminders."""

from datetime import date, datetime
from pathlib import Path

from flask import Blueprint, Flask, current_app, jsonify, request

from upkeep import (
    DocumentStore,
    Garage,
    HistoryEntry,
    InvalidInputError,
    NotFoundError,
    NotificationScheduler,
    PersistenceError,
    Reminder,
    ReminderManager,
    ScheduledService,
    ServiceRecord,
    UpkeepError,
    Vehicle,
    classify,
    days_until,
    load_preferences,
    update_preference,
)
from upkeep.config import Config

bp = Blueprint("upkeep", __name__)


def get_manager() -> ReminderManager:
    return current_app.config["MANAGER"]


def get_garage() -> Garage:
    return current_app.config["GARAGE"]


def isoformat(value):
    """ISO string for dates/datetimes, None passes through."""
    return value.isoformat() if value is not None else None


def reminder_json(reminder: Reminder, now: datetime) -> dict:
    data = {
        "id": reminder.id,
        "title": reminder.title,
        "vehicleId": reminder.vehicle_id,
        "vehicleName": reminder.vehicle_name,
        "dueAt": isoformat(reminder.due_at),
        "dueDistance": reminder.due_distance,
        "status": reminder.status.value,
        "scheduledId": reminder.scheduled_notification_id,
        "createdAt": isoformat(reminder.created_at),
        "completedAt": isoformat(reminder.completed_at),
        "category": classify(reminder, now).name.lower(),
    }
    if reminder.is_pending:
        data["daysUntil"] = days_until(reminder.due_at, now)
    return data


def history_json(entry: HistoryEntry) -> dict:
    return {
        "id": entry.id,
        "name": entry.name,
        "type": entry.entry_type,
        "completedAt": isoformat(entry.completed_at),
        "vehicleId": entry.vehicle_id,
        "vehicleName": entry.vehicle_name,
        "dueDistance": entry.due_distance,
        "note": entry.note,
        "lastDate": isoformat(entry.last_service_date),
        "odometerAtService": entry.odometer_at_service,
        "intervalDistance": entry.interval_distance,
    }


def vehicle_json(vehicle: Vehicle) -> dict:
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "manufacturer": vehicle.manufacturer,
        "model": vehicle.model,
        "regNo": vehicle.reg_no,
        "year": vehicle.year,
        "currentMileage": vehicle.current_mileage,
        "fuelType": vehicle.fuel_type,
    }


def service_json(service: ScheduledService) -> dict:
    return {
        "id": service.id,
        "name": service.name,
        "kind": service.kind,
        "lastDate": isoformat(service.last_date),
        "odometerAtService": service.odometer_at_service,
        "intervalDistance": service.interval_distance,
        "avgMonthlyDistance": service.average_monthly_distance,
        "dueDistance": service.due_distance,
        "dueDate": isoformat(service.due_date),
    }


def request_json() -> dict:
    return request.get_json(silent=True) or {}


def parse_iso_date(value, field: str) -> date:
    if not value:
        raise InvalidInputError(f"{field} is required")
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be YYYY-MM-DD, got {value!r}")


# =============================================================================
# Error handlers
# =============================================================================


@bp.app_errorhandler(InvalidInputError)
def handle_invalid_input(e):
    return jsonify({"error": str(e)}), 400


@bp.app_errorhandler(NotFoundError)
def handle_not_found(e):
    return jsonify({"error": str(e)}), 404


@bp.app_errorhandler(PersistenceError)
def handle_persistence_error(e):
    current_app.logger.error("Persistence failure: %s", e)
    return jsonify({"error": str(e)}), 500


@bp.app_errorhandler(UpkeepError)
def handle_upkeep_error(e):
    current_app.logger.error("Request failed: %s", e)
    return jsonify({"error": str(e)}), 500


# =============================================================================
# Reminders
# =============================================================================


@bp.route("/reminders")
def list_reminders():
    """Reminders split into upcoming, overdue and completed."""
    manager = get_manager()
    now = manager.clock()
    overview = manager.overview(now)
    return jsonify({
        "notifications": manager.notifications_enabled,
        "counts": overview.counts,
        "upcoming": [reminder_json(r, now) for r in overview.upcoming],
        "overdue": [reminder_json(r, now) for r in overview.overdue],
        "completed": [reminder_json(r, now) for r in overview.completed],
    })


@bp.route("/reminders", methods=["POST"])
def add_reminder():
    """Quick-add a reminder due in N days."""
    body = request_json()
    manager = get_manager()
    reminder = manager.quick_add(
        body.get("title", ""),
        due_in_days=body.get("days", 7),
        vehicle_name=body.get("vehicleName"),
        due_distance=body.get("dueDistance"),
    )
    return jsonify(reminder_json(reminder, manager.clock())), 201


@bp.route("/reminders/<reminder_id>")
def get_reminder(reminder_id: str):
    manager = get_manager()
    return jsonify(reminder_json(manager.require(reminder_id), manager.clock()))


@bp.route("/reminders/<reminder_id>/snooze", methods=["POST"])
def snooze_reminder(reminder_id: str):
    """Snooze by an explicit number of days."""
    body = request_json()
    if "days" not in body:
        raise InvalidInputError("days is required")
    manager = get_manager()
    reminder = manager.snooze(manager.require(reminder_id), body["days"])
    return jsonify(reminder_json(reminder, manager.clock()))


@bp.route("/reminders/<reminder_id>/done", methods=["POST"])
def complete_reminder(reminder_id: str):
    manager = get_manager()
    reminder = manager.require(reminder_id)
    entry = manager.complete(reminder)
    return jsonify({
        "reminder": reminder_json(reminder, manager.clock()),
        "history": history_json(entry),
    })


@bp.route("/reminders/<reminder_id>/undo", methods=["POST"])
def undo_reminder(reminder_id: str):
    manager = get_manager()
    reminder = manager.undo(manager.require(reminder_id))
    return jsonify(reminder_json(reminder, manager.clock()))


@bp.route("/reminders/<reminder_id>", methods=["DELETE"])
def delete_reminder(reminder_id: str):
    manager = get_manager()
    manager.delete(manager.require(reminder_id))
    return jsonify({"deleted": reminder_id})


# =============================================================================
# Vehicles and services
# =============================================================================


@bp.route("/vehicles")
def list_vehicles():
    return jsonify([vehicle_json(v) for v in get_garage().vehicles()])


@bp.route("/vehicles", methods=["POST"])
def register_vehicle():
    body = request_json()
    vehicle = get_garage().register_vehicle(
        body.get("manufacturer"),
        body.get("model"),
        body.get("regNo"),
        body.get("year"),
        body.get("currentMileage"),
        body.get("fuelType"),
    )
    return jsonify(vehicle_json(vehicle)), 201


@bp.route("/vehicles/<vehicle_id>/services")
def list_services(vehicle_id: str):
    """Scheduled services for a vehicle, split into due and coming."""
    garage = get_garage()
    garage.require_vehicle(vehicle_id)
    today = get_manager().clock().date()
    due, coming = garage.split_services(garage.services(vehicle_id), today)
    return jsonify({
        "due": [service_json(s) for s in due],
        "coming": [service_json(s) for s in coming],
    })


@bp.route("/vehicles/<vehicle_id>/services", methods=["POST"])
def record_service(vehicle_id: str):
    """Record a performed service; creates the scheduled service and its reminder."""
    body = request_json()
    name = (body.get("name") or "").strip()
    if not name:
        raise InvalidInputError("name is required")
    record = ServiceRecord.for_service(
        name,
        parse_iso_date(body.get("lastDate"), "lastDate"),
        odometer_at_service=body.get("odometerAtService"),
        interval_distance=body.get("intervalDistance"),
        average_monthly_distance=body.get("avgMonthlyDistance"),
    )
    manager = get_manager()
    service, reminder = get_garage().record_service(vehicle_id, record)
    return jsonify({
        "service": service_json(service),
        "reminder": reminder_json(reminder, manager.clock()),
    }), 201


@bp.route("/vehicles/<vehicle_id>/services/<service_id>/done", methods=["POST"])
def complete_service(vehicle_id: str, service_id: str):
    garage = get_garage()
    entry = garage.complete_service(vehicle_id, garage.get_service(vehicle_id, service_id))
    return jsonify(history_json(entry))


# =============================================================================
# History, settings, notifications
# =============================================================================


@bp.route("/history")
def history():
    """Completed reminders, or service history with ?services=true / ?vehicle=<id>."""
    vehicle_id = request.args.get("vehicle") or None
    services = request.args.get("services", "").lower() == "true"
    if vehicle_id or services:
        entries = get_garage().history(vehicle_id)
    else:
        entries = get_manager().history()
    return jsonify([history_json(e) for e in entries])


@bp.route("/settings")
def get_settings():
    manager = get_manager()
    return jsonify(load_preferences(manager.store, manager.uid).to_fields())


@bp.route("/settings", methods=["PATCH"])
def patch_settings():
    manager = get_manager()
    body = request_json()
    prefs = load_preferences(manager.store, manager.uid)
    for key, value in body.items():
        prefs = update_preference(manager.store, manager.uid, key, value)
    manager.init_notifications()
    return jsonify(prefs.to_fields())


@bp.route("/notifications/init", methods=["POST"])
def init_notifications():
    """Re-ask for notification permission."""
    return jsonify({"enabled": get_manager().init_notifications()})


def create_app(data_dir=None, uid=None, clock=None, permitted=None) -> Flask:
    """Build the app around a data directory's store and notification outbox."""
    app = Flask(__name__)
    app.secret_key = Config.SECRET_KEY

    data_dir = Path(data_dir or Config.DATA_DIR)
    if permitted is None:
        permitted = Config.NOTIFICATIONS_PERMITTED
    store = DocumentStore(Config.store_path(data_dir))
    scheduler = NotificationScheduler(Config.outbox_path(data_dir), permitted=permitted)
    manager = ReminderManager(store, scheduler, uid or Config.USER_ID, clock=clock)
    manager.init_notifications()

    app.config["MANAGER"] = manager
    app.config["GARAGE"] = Garage(manager)
    app.register_blueprint(bp)
    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)
