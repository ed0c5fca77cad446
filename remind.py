#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance reminders.

Commands:
  reminders    - Show overdue, upcoming and completed reminders
  add          - Quick-add a reminder due in N days
  snooze       - Push a reminder back by N days
  done         - Mark a reminder completed
  undo         - Revert a completed reminder to pending
  delete       - Delete a reminder
  register     - Register a vehicle
  vehicles     - List registered vehicles
  catalog      - List known services and recommended intervals
  service      - Record a performed service and schedule its reminder
  services     - Show scheduled services for a vehicle
  service-done - Move a scheduled service into the vehicle's history
  history      - View completed reminders or service history
  notify       - Deliver notifications that are due
  settings     - View or change notification and unit settings
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from upkeep import (
    FUEL_TYPES,
    Garage,
    HistoryEntry,
    InvalidInputError,
    NotificationScheduler,
    DocumentStore,
    Reminder,
    ReminderManager,
    ScheduledService,
    ServiceRecord,
    UpkeepError,
    compute_next_due,
    days_until,
    load_preferences,
    update_preference,
)
from upkeep.catalog import all_services, default_interval, is_time_based
from upkeep.config import Config
from upkeep.manager import format_distance

logger = logging.getLogger(__name__)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_date(value) -> str:
    """Format a date or datetime as YYYY-MM-DD."""
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_days(days: int) -> str:
    """Format days until due (e.g., 'in 3d', 'today', '2d overdue')."""
    if days > 0:
        return f"in {days}d"
    if days == 0:
        return "today"
    return f"{abs(days)}d overdue"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_day(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)")


def parse_switch(value: str) -> bool:
    """argparse type for on/off settings."""
    lowered = value.lower()
    if lowered in ("on", "true", "yes"):
        return True
    if lowered in ("off", "false", "no"):
        return False
    raise argparse.ArgumentTypeError(f"expected on or off, got '{value}'")


# =============================================================================
# Table builders
# =============================================================================


def make_reminder_table(
    reminders: List[Reminder], now: datetime, unit: str = "km"
) -> List[List[str]]:
    """Convert reminders to table rows."""
    rows = []
    for r in reminders:
        when = format_date(r.completed_at) if r.is_done else format_days(days_until(r.due_at, now))
        rows.append(
            [
                r.id,
                r.title,
                r.vehicle_name or "-",
                format_date(r.due_at),
                format_distance(r.due_distance, unit),
                when,
            ]
        )
    return rows


def make_service_table(services: List[ScheduledService], unit: str = "km") -> List[List[str]]:
    """Convert scheduled services to table rows."""
    rows = []
    for svc in services:
        rows.append(
            [
                svc.id,
                svc.name,
                format_date(svc.last_date),
                format_distance(svc.odometer_at_service, unit),
                format_distance(svc.due_distance, unit),
                format_date(svc.due_date),
            ]
        )
    return rows


def make_history_table(entries: List[HistoryEntry], unit: str = "km") -> List[List[str]]:
    """Convert history entries to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                format_date(entry.completed_at),
                entry.name,
                entry.vehicle_name or "-",
                format_date(entry.last_service_date),
                format_distance(entry.odometer_at_service or entry.due_distance, unit),
                truncate(entry.note),
            ]
        )
    return rows


REMINDER_HEADERS = ["ID", "Title", "Vehicle", "Due (date)", "Due (dist)", "When"]
SERVICE_HEADERS = ["ID", "Service", "Last Done", "Odometer", "Due (dist)", "Due (date)"]
HISTORY_HEADERS = ["Completed", "Service", "Vehicle", "Last Done", "Distance", "Notes"]


# =============================================================================
# Reminder commands
# =============================================================================


def cmd_reminders(args, manager: ReminderManager, garage: Garage):
    """Show overdue, upcoming and completed reminders."""
    now = manager.clock()
    overview = manager.overview(now)
    unit = manager.distance_unit

    print(f"Notifications: {'ON' if manager.notifications_enabled else 'OFF'}")
    counts = overview.counts
    print(
        f"Upcoming ({counts['upcoming']})  "
        f"Overdue ({counts['overdue']})  "
        f"Completed ({counts['completed']})"
    )
    print()

    sections = [("OVERDUE", overview.overdue), ("UPCOMING", overview.upcoming)]
    if not args.pending_only:
        sections.append(("COMPLETED", overview.completed))

    shown = False
    for label, reminders in sections:
        if not reminders:
            continue
        shown = True
        print(f"{label}:")
        print(
            tabulate(
                make_reminder_table(reminders, now, unit),
                headers=REMINDER_HEADERS,
                tablefmt="simple",
            )
        )
        print()

    if not shown:
        print("No reminders yet.")
    return 0


def cmd_add(args, manager: ReminderManager, garage: Garage):
    """Quick-add a reminder."""
    reminder = manager.quick_add(
        args.title,
        due_in_days=args.days,
        vehicle_name=args.vehicle,
        due_distance=args.distance,
    )
    print(f"Reminder added: {reminder.title} (id {reminder.id}), due {format_date(reminder.due_at)}")
    return 0


def cmd_snooze(args, manager: ReminderManager, garage: Garage):
    """Snooze a reminder by an explicit number of days."""
    reminder = manager.require(args.reminder_id)
    manager.snooze(reminder, args.days)
    plural = "" if args.days == 1 else "s"
    print(f"Snoozed {args.days} day{plural}: {reminder.title} now due {format_date(reminder.due_at)}")
    return 0


def cmd_done(args, manager: ReminderManager, garage: Garage):
    """Mark a reminder done."""
    reminder = manager.require(args.reminder_id)
    manager.complete(reminder)
    print(f"Marked done: {reminder.title}")
    return 0


def cmd_undo(args, manager: ReminderManager, garage: Garage):
    """Revert a completed reminder."""
    reminder = manager.require(args.reminder_id)
    manager.undo(reminder)
    print(f"Reverted to pending: {reminder.title}, due {format_date(reminder.due_at)}")
    return 0


def cmd_delete(args, manager: ReminderManager, garage: Garage):
    """Delete a reminder."""
    reminder = manager.require(args.reminder_id)
    manager.delete(reminder)
    print(f"Reminder deleted: {reminder.title}")
    return 0


# =============================================================================
# Vehicle and service commands
# =============================================================================


def cmd_register(args, manager: ReminderManager, garage: Garage):
    """Register a vehicle."""
    vehicle = garage.register_vehicle(
        args.manufacturer,
        args.model,
        args.reg_no,
        args.year,
        args.mileage,
        args.fuel,
    )
    print(f"Vehicle registered: {vehicle.name} (id {vehicle.id})")
    return 0


def cmd_vehicles(args, manager: ReminderManager, garage: Garage):
    """List registered vehicles."""
    vehicles = garage.vehicles()
    if not vehicles:
        print("No vehicles registered.")
        return 0

    unit = manager.distance_unit
    rows = [
        [v.id, v.name, v.year, v.reg_no, format_distance(v.current_mileage, unit), v.fuel_type]
        for v in vehicles
    ]
    headers = ["ID", "Vehicle", "Year", "Reg No", "Odometer", "Fuel"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_catalog(args, manager: ReminderManager, garage: Garage):
    """List known services."""
    rows = []
    for info in all_services():
        if info.time_based:
            interval = "2 years"
        elif info.default_interval:
            interval = format_distance(info.default_interval, manager.distance_unit)
        else:
            interval = "-"
        rows.append([info.name, interval, info.subtitle])
    print(tabulate(rows, headers=["Service", "Default Interval", "Notes"], tablefmt="simple"))
    return 0


def cmd_service(args, manager: ReminderManager, garage: Garage):
    """Record a performed service and schedule its reminder."""
    vehicle = garage.require_vehicle(args.vehicle_id)
    interval = args.interval
    if interval is None:
        interval = default_interval(args.name)

    record = ServiceRecord.for_service(
        args.name,
        args.date or manager.clock().date(),
        odometer_at_service=args.odometer,
        interval_distance=interval,
        average_monthly_distance=args.monthly,
    )
    due = compute_next_due(record)
    unit = manager.distance_unit

    # Show what will be added
    print(f"Recording service for {vehicle.name}:")
    print(f"  Service:   {record.service_name}")
    print(f"  Last done: {format_date(record.last_service_date)}")
    if not record.is_time_based:
        print(f"  Odometer:  {format_distance(record.odometer_at_service, unit)}")
        print(f"  Interval:  {format_distance(record.interval_distance, unit)}")
    print(f"  Next due:  {format_distance(due.due_distance, unit)} / {format_date(due.due_date)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    service, reminder = garage.record_service(vehicle.id, record)
    print(f"Service & reminder saved (service {service.id}, reminder {reminder.id}).")
    return 0


def cmd_services(args, manager: ReminderManager, garage: Garage):
    """Show scheduled services for a vehicle, split into due and coming."""
    vehicle = garage.require_vehicle(args.vehicle_id)
    due, coming = garage.split_services(garage.services(vehicle.id), manager.clock().date())
    unit = manager.distance_unit

    print(f"Vehicle: {vehicle.name} {vehicle.year}")
    print()
    if due:
        print("DUE:")
        print(tabulate(make_service_table(due, unit), headers=SERVICE_HEADERS, tablefmt="simple"))
        print()
    if coming:
        print("COMING UP:")
        print(tabulate(make_service_table(coming, unit), headers=SERVICE_HEADERS, tablefmt="simple"))
        print()
    if not due and not coming:
        print("No scheduled services.")
    return 0


def cmd_service_done(args, manager: ReminderManager, garage: Garage):
    """Move a scheduled service into history."""
    service = garage.get_service(args.vehicle_id, args.service_id)
    garage.complete_service(args.vehicle_id, service)
    print(f"Marked as done: {service.name}")
    return 0


def cmd_history(args, manager: ReminderManager, garage: Garage):
    """View completed reminders, or per-vehicle service history."""
    if args.services or args.vehicle:
        if args.vehicle:
            garage.require_vehicle(args.vehicle)
        entries = garage.history(args.vehicle)
        label = "Service history"
    else:
        entries = manager.history()
        label = "Completed reminders"

    print(f"{label}: {len(entries)}")
    print()
    if not entries:
        print("No history entries found.")
        return 0

    print(
        tabulate(
            make_history_table(entries, manager.distance_unit),
            headers=HISTORY_HEADERS,
            tablefmt="simple",
        )
    )
    return 0


# =============================================================================
# Notifications and settings
# =============================================================================


def cmd_notify(args, manager: ReminderManager, garage: Garage):
    """Deliver due notifications, or list the pending ones."""
    scheduler = manager.scheduler
    if args.list:
        pending = scheduler.pending()
        if not pending:
            print("No notifications scheduled.")
            return 0
        rows = [[n.id[:8], format_date(n.fire_date), n.title, truncate(n.body, 50)] for n in pending]
        print(tabulate(rows, headers=["ID", "Fires", "Title", "Body"], tablefmt="simple"))
        return 0

    delivered = scheduler.pop_due(manager.clock())
    for n in delivered:
        print(f"[{format_date(n.fire_date)}] {n.title}: {n.body}")
    if not delivered:
        print("Nothing due.")
    return 0


def cmd_settings(args, manager: ReminderManager, garage: Garage):
    """View or change settings."""
    changes = [
        ("push_on", args.push),
        ("email_on", args.email),
        ("distance_unit", args.unit),
    ]
    prefs = load_preferences(manager.store, manager.uid)
    for key, value in changes:
        if value is not None:
            prefs = update_preference(manager.store, manager.uid, key, value)

    print(f"Push notifications:  {'on' if prefs.push_on else 'off'}")
    print(f"Email notifications: {'on' if prefs.email_on else 'off'}")
    print(f"Distance unit:       {prefs.distance_unit}")
    return 0


# =============================================================================
# Main
# =============================================================================


COMMANDS = {
    "reminders": cmd_reminders,
    "add": cmd_add,
    "snooze": cmd_snooze,
    "done": cmd_done,
    "undo": cmd_undo,
    "delete": cmd_delete,
    "register": cmd_register,
    "vehicles": cmd_vehicles,
    "catalog": cmd_catalog,
    "service": cmd_service,
    "services": cmd_services,
    "service-done": cmd_service_done,
    "history": cmd_history,
    "notify": cmd_notify,
    "settings": cmd_settings,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s register Audi A5 KA-01-1234 2019 42000 Petrol
  %(prog)s service <vehicle-id> "Engine Oil" --date 2024-05-01 \\
      --odometer 75000 --monthly 1000
  %(prog)s service <vehicle-id> "Battery Replacement" --date 2024-01-15
  %(prog)s reminders
  %(prog)s snooze <reminder-id> 7
  %(prog)s done <reminder-id>
  %(prog)s add "Car Wash" --days 3
  %(prog)s notify
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Config.DATA_DIR,
        help=f"Directory holding the store and notification outbox (default: {Config.DATA_DIR})",
    )
    parser.add_argument(
        "--user",
        default=Config.USER_ID,
        help=f"User namespace (default: {Config.USER_ID})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Reminders
    reminders_parser = subparsers.add_parser(
        "reminders", help="Show overdue, upcoming and completed reminders"
    )
    reminders_parser.add_argument(
        "--pending-only",
        action="store_true",
        help="Hide completed reminders",
    )

    add_parser = subparsers.add_parser("add", help="Quick-add a reminder")
    add_parser.add_argument("title", type=str, help="Reminder title (e.g., 'Engine Oil')")
    add_parser.add_argument(
        "--days", type=int, default=7, help="Due in this many days (default: 7)"
    )
    add_parser.add_argument("--vehicle", type=str, help="Vehicle name (e.g., 'Audi A5')")
    add_parser.add_argument("--distance", type=float, help="Due at this odometer reading")

    snooze_parser = subparsers.add_parser("snooze", help="Push a reminder back")
    snooze_parser.add_argument("reminder_id", type=str)
    snooze_parser.add_argument(
        "days",
        type=int,
        help="Days to push the due date back (7 is typical for upcoming, 3 for overdue)",
    )

    for name, help_text in (
        ("done", "Mark a reminder completed"),
        ("undo", "Revert a completed reminder to pending"),
        ("delete", "Delete a reminder"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("reminder_id", type=str)

    # Vehicles
    register_parser = subparsers.add_parser("register", help="Register a vehicle")
    register_parser.add_argument("manufacturer", type=str)
    register_parser.add_argument("model", type=str)
    register_parser.add_argument("reg_no", type=str, help="Registration number")
    register_parser.add_argument("year", type=int)
    register_parser.add_argument("mileage", type=float, help="Current odometer reading")
    register_parser.add_argument("fuel", choices=FUEL_TYPES)

    subparsers.add_parser("vehicles", help="List registered vehicles")
    subparsers.add_parser("catalog", help="List known services")

    # Services
    service_parser = subparsers.add_parser(
        "service", help="Record a performed service and schedule its reminder"
    )
    service_parser.add_argument("vehicle_id", type=str)
    service_parser.add_argument("name", type=str, help="Service name (e.g., 'Engine Oil')")
    service_parser.add_argument(
        "--date", type=parse_day, help="Date of service in YYYY-MM-DD format (default: today)"
    )
    service_parser.add_argument("--odometer", type=float, help="Odometer at service")
    service_parser.add_argument(
        "--interval", type=float, help="Distance between services (default: catalog value)"
    )
    service_parser.add_argument(
        "--monthly", type=float, help="Average distance driven per month"
    )
    service_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the computed due point without saving",
    )

    services_parser = subparsers.add_parser("services", help="Show scheduled services")
    services_parser.add_argument("vehicle_id", type=str)

    service_done_parser = subparsers.add_parser(
        "service-done", help="Move a scheduled service into history"
    )
    service_done_parser.add_argument("vehicle_id", type=str)
    service_done_parser.add_argument("service_id", type=str)

    history_parser = subparsers.add_parser("history", help="View history")
    history_parser.add_argument(
        "--services",
        action="store_true",
        help="Show per-vehicle service history instead of completed reminders",
    )
    history_parser.add_argument("--vehicle", type=str, help="Limit service history to a vehicle")

    # Notifications and settings
    notify_parser = subparsers.add_parser("notify", help="Deliver due notifications")
    notify_parser.add_argument(
        "--list", action="store_true", help="List scheduled notifications instead"
    )

    settings_parser = subparsers.add_parser("settings", help="View or change settings")
    settings_parser.add_argument("--push", type=parse_switch, help="on or off")
    settings_parser.add_argument("--email", type=parse_switch, help="on or off")
    settings_parser.add_argument("--unit", choices=["km", "mi"])

    return parser


def build_manager(data_dir: Path, uid: str) -> ReminderManager:
    """Wire the store and scheduler for a data directory."""
    store = DocumentStore(Config.store_path(data_dir))
    scheduler = NotificationScheduler(
        Config.outbox_path(data_dir), permitted=Config.NOTIFICATIONS_PERMITTED
    )
    manager = ReminderManager(store, scheduler, uid)
    manager.init_notifications()
    return manager


def main(argv: Optional[List[str]] = None):
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        stream=sys.stderr,
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        manager = build_manager(args.data_dir, args.user)
        garage = Garage(manager)
        return COMMANDS[args.command](args, manager, garage)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return 1
    except UpkeepError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
