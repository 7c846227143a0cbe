"""UTC datetime helpers for storage and artifact naming."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def epoch_millis() -> int:
    """Milliseconds since the Unix epoch, used to name audio artifacts."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)
