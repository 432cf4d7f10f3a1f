"""UTC time helpers producing the wire timestamp format."""

from __future__ import annotations

from datetime import UTC, datetime

# Lower bound for "latest updatedAt" comparisons; same shape as isoformat_z output.
EPOCH_ISO = "1970-01-01T00:00:00.000Z"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def isoformat_z(moment: datetime) -> str:
    """Format as zero-padded ISO-8601 with millisecond precision and a ``Z`` suffix.

    Every timestamp persisted by the sync subsystem uses this form, which keeps
    plain string comparison equivalent to chronological comparison.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
