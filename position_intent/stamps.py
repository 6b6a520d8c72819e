"""Identifier and clock sources stamped onto finalized intents."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4


def new_intent_id() -> UUID:
    """Return a fresh random (version 4) intent identifier."""
    return uuid4()


def utc_now() -> datetime:
    """Return the current wall-clock time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC.

    Naive datetimes are interpreted as UTC; aware ones are converted.
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
