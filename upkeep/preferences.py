"""Per-user settings document."""

from dataclasses import dataclass, asdict
from typing import Any

from .errors import InvalidInputError
from .store import DocumentStore, settings_path

DISTANCE_UNITS = ("km", "mi")

# Stored key -> attribute name
_FIELDS = {
    "pushOn": "push_on",
    "emailOn": "email_on",
    "distanceUnit": "distance_unit",
}


@dataclass
class Preferences:
    """Notification and display settings for a user."""

    push_on: bool = True
    email_on: bool = False
    distance_unit: str = "km"

    def to_fields(self) -> dict:
        values = asdict(self)
        return {key: values[attr] for key, attr in _FIELDS.items()}


def load_preferences(store: DocumentStore, uid: str) -> Preferences:
    """Read a user's settings, writing the defaults when none exist yet."""
    fields = store.get(settings_path(uid))
    if fields is None:
        prefs = Preferences()
        store.set(settings_path(uid), prefs.to_fields())
        return prefs
    defaults = Preferences()
    return Preferences(
        push_on=fields.get("pushOn", defaults.push_on),
        email_on=fields.get("emailOn", defaults.email_on),
        distance_unit=fields.get("distanceUnit", defaults.distance_unit),
    )


def update_preference(
    store: DocumentStore, uid: str, key: str, value: Any
) -> Preferences:
    """Change one setting. Key may be the stored or the attribute name."""
    attr = _FIELDS.get(key, key)
    if attr not in _FIELDS.values():
        raise InvalidInputError(f"Unknown setting: {key}")
    if attr == "distance_unit":
        if value not in DISTANCE_UNITS:
            raise InvalidInputError(
                f"distance_unit must be one of {', '.join(DISTANCE_UNITS)}"
            )
    elif not isinstance(value, bool):
        raise InvalidInputError(f"{attr} must be true or false")

    prefs = load_preferences(store, uid)
    setattr(prefs, attr, value)
    store.update(settings_path(uid), prefs.to_fields())
    return prefs
