"""UTC-focused helpers for run metadata."""

from __future__ import annotations

from datetime import datetime, timezone

from charging_snapshot.common.errors import ClockError


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def epoch_seconds() -> int:
    """Whole seconds since the Unix epoch, read from the wall clock."""
    try:
        seconds = int(datetime.now(tz=timezone.utc).timestamp())
    except (OverflowError, OSError, ValueError) as exc:
        raise ClockError(f"Failed to get system time: {exc}") from exc
    if seconds < 0:
        raise ClockError(f"System time is before the Unix epoch: {seconds}")
    return seconds
