"""Audit logging of booking state transitions."""
from __future__ import annotations

import logging
from pathlib import Path

from .config import get_settings

log = logging.getLogger(__name__)


def _build_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"audit.{name}")
    if logger.handlers:
        return logger

    settings = get_settings()
    logger.setLevel(settings.log_level)
    if not settings.audit_log_enabled:
        logger.addHandler(logging.NullHandler())
        return logger

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / f"{name}.log")
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def audit_transition(event: str, booking_id: int, actor_id: int, **fields: object) -> None:
    """
    Record one booking transition (``created``, ``approved``, ``rejected``).

    Called after the transition is committed, so an unwritable audit file
    is reported as a warning and never fails the operation.
    """
    try:
        logger = _build_logger("bookings")
    except OSError:
        log.warning("Audit log unavailable; %s of booking %s not recorded", event, booking_id, exc_info=True)
        return
    extra = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    logger.info(
        "%s | booking=%s | actor=%s%s",
        event,
        booking_id,
        actor_id,
        f" | {extra}" if extra else "",
    )
