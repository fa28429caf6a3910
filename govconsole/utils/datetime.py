"""Helpers for working with the ISO-8601 instants stored in documents."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Render ``value`` as an ISO instant with millisecond precision and ``Z`` suffix.

    Naive values are assumed to already be expressed in UTC.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Return the current instant as an ISO string."""

    return isoformat_utc(utc_now())


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO instant into an aware datetime.

    Returns ``None`` for missing or unparseable values so callers can decide how
    to order them.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.endswith(("Z", "z")):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
