"""Shared timestamp helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone


def domain_utc_now() -> datetime:
    """Return the current timezone-aware UTC time.

    Returns:
        datetime: Current UTC timestamp.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return datetime.now(timezone.utc)


def domain_serialize_timestamp(value: datetime | None) -> str | None:
    """Render a timestamp as ISO-8601 UTC with millisecond precision and `Z` suffix.

    Naive values are treated as UTC.

    Args:
        value: Timestamp to render.

    Returns:
        str | None: Rendered timestamp such as `2026-01-31T09:15:00.000Z`, or None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered_value = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered_value.replace("+00:00", "Z")
