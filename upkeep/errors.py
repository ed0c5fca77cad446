"""Error types raised by the reminder core."""


class UpkeepError(Exception):
    """Base class for all upkeep errors."""


class InvalidInputError(UpkeepError, ValueError):
    """Malformed calculation input or an invalid lifecycle transition."""


class PersistenceError(UpkeepError):
    """A document store read or write failed."""


class NotificationSchedulingError(UpkeepError):
    """Scheduling or cancelling a local notification failed."""


class NotFoundError(UpkeepError, LookupError):
    """A reminder, vehicle or service does not exist."""
