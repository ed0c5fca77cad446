"""Configuration management from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration loaded from environment variables."""

    # Storage
    DATA_DIR: Path = Path(os.getenv("UPKEEP_DATA_DIR", "./data"))
    STORE_FILENAME: str = "store.yaml"
    OUTBOX_FILENAME: str = "notifications.yaml"

    # Single local user namespace
    USER_ID: str = os.getenv("UPKEEP_USER", "local")

    # Stand-in for the OS notification permission
    NOTIFICATIONS_PERMITTED: bool = _env_flag("UPKEEP_NOTIFICATIONS", "true")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Web
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-prod")

    @classmethod
    def store_path(cls, data_dir: Path = None) -> Path:
        return Path(data_dir or cls.DATA_DIR) / cls.STORE_FILENAME

    @classmethod
    def outbox_path(cls, data_dir: Path = None) -> Path:
        return Path(data_dir or cls.DATA_DIR) / cls.OUTBOX_FILENAME
