"""Shared utility functions for the BrewBooks project."""

import logging
import secrets
from datetime import UTC, date, datetime
from pathlib import Path

import colorlog


ROOT_LOGGER = "brewbooks"


def get_logger(name: str) -> logging.Logger:
    """Get a project logger; output goes through the colorized handler on the ``brewbooks`` root logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    logger.propagate = False
    return logging.getLogger(name)


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def utcnow() -> datetime:
    """Get the current UTC time."""
    return datetime.now(UTC)


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return utcnow().isoformat()


def to_utc_iso(value: datetime | None) -> str | None:
    """Format a timestamp as ISO8601 UTC with millisecond precision and a ``Z`` suffix.

    SQLite hands back naive datetimes; those were written as UTC and are tagged as such.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today() -> date:
    """Get the server's local calendar date."""
    return date.today()  # noqa: DTZ011


def generate_reference(prefix: str) -> str:
    """Build a reference number like ``TXN1731830400123``: prefix, unix timestamp, three random digits."""
    return f"{prefix}{int(utcnow().timestamp())}{secrets.randbelow(900) + 100}"
