"""ISO-8601 timestamps as stored in documents and returned in responses"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time, millisecond precision, ``Z`` suffix"""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
