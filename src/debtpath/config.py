"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, rejecting garbage early."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}.") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "debtpath"
    LOG_FILENAME = "debtpath.log"
    LOG_MAX_BYTES = 10 * 1024 * 1024
    LOG_BACKUP_COUNT = 5

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("DEBTPATH_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.MIN_PAYMENT_PERCENT = _env_float("DEBTPATH_MIN_PAYMENT_PERCENT", 2.0)
        self.MIN_PAYMENT_FLOOR = _env_float("DEBTPATH_MIN_PAYMENT_FLOOR", 25.0)
        if self.MIN_PAYMENT_PERCENT < 0 or self.MIN_PAYMENT_FLOOR < 0:
            raise ValueError("Minimum payment settings must not be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("DEBTPATH_DATA_DIR", "instance")
        return Path(data_root).expanduser().resolve()


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite."""

    DEBUG = False
    TESTING = True
