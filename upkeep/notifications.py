"""Local one-shot notification scheduler backed by a YAML outbox file."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import NotificationSchedulingError

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A single future-fired alert."""

    id: str
    title: str
    body: str
    fire_date: datetime
    data: Dict[str, Any] = field(default_factory=dict)


class NotificationScheduler:
    """
    Schedules one-shot alerts by writing them to an outbox file.

    Alerts are delivered by calling pop_due(), which removes and returns
    every alert whose fire date has passed. `permitted` stands in for the
    operating system's notification permission.
    """

    def __init__(self, filename: Union[str, Path], permitted: bool = True):
        self.filename = Path(filename)
        self.permitted = permitted
        self.enabled = False

    def init(self) -> bool:
        """Request permission. Safe to call any number of times."""
        self.enabled = self.permitted
        logger.info("Notifications %s", "enabled" if self.enabled else "disabled")
        return self.enabled

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.filename.exists():
            return {}
        try:
            with open(self.filename, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise NotificationSchedulingError(
                f"Failed to read {self.filename}: {e}"
            ) from e
        return data or {}

    def _save(self, data: Dict[str, Dict[str, Any]]) -> None:
        try:
            self.filename.parent.mkdir(parents=True, exist_ok=True)
            with open(self.filename, "w") as fp:
                yaml.safe_dump(
                    data,
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
        except (OSError, yaml.YAMLError) as e:
            raise NotificationSchedulingError(
                f"Failed to write {self.filename}: {e}"
            ) from e

    def schedule_one_shot(
        self,
        title: str,
        body: str,
        fire_date: datetime,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """Schedule an alert. Returns its id, or None when notifications are off."""
        if not self.enabled:
            return None
        notification_id = uuid.uuid4().hex
        outbox = self._load()
        outbox[notification_id] = {
            "title": title,
            "body": body,
            "fireDate": fire_date,
            "data": dict(data or {}),
        }
        self._save(outbox)
        logger.debug("Scheduled notification %s at %s", notification_id, fire_date)
        return notification_id

    def cancel_notification(self, notification_id: Optional[str]) -> None:
        """Cancel a scheduled alert. No-op for None or an unknown id."""
        if notification_id is None:
            return
        outbox = self._load()
        if outbox.pop(notification_id, None) is None:
            return
        self._save(outbox)
        logger.debug("Cancelled notification %s", notification_id)

    def cancel_all_scheduled(self) -> None:
        if self._load():
            self._save({})

    def pending(self) -> List[Notification]:
        """All scheduled alerts, soonest first."""
        notifications = [
            Notification(
                id=notification_id,
                title=fields["title"],
                body=fields["body"],
                fire_date=fields["fireDate"],
                data=fields.get("data") or {},
            )
            for notification_id, fields in self._load().items()
        ]
        return sorted(notifications, key=lambda n: n.fire_date)

    def pop_due(self, now: datetime) -> List[Notification]:
        """Remove and return every alert whose fire date is at or before now."""
        due = [n for n in self.pending() if n.fire_date <= now]
        if due:
            outbox = self._load()
            for n in due:
                outbox.pop(n.id, None)
            self._save(outbox)
        return due
