import re
from datetime import datetime

_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")

MINUTES_PER_DAY = 24 * 60


class MalformedTimeError(ValueError):
    """A wall-clock value that is not a valid "HH:MM" time of day."""


def to_minutes(time: str) -> int:
    """Parse "HH:MM" into minutes since local midnight."""
    match = _TIME_RE.fullmatch(time) if isinstance(time, str) else None
    if not match:
        raise MalformedTimeError(f"Invalid time of day {time!r}, expected HH:MM (00:00-23:59)")
    return int(match.group(1)) * 60 + int(match.group(2))


def to_time_string(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise MalformedTimeError(f"Minute offset {minutes} is outside a single day")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def to_wall_clock(dt: datetime) -> datetime:
    """Drop tzinfo: scheduling times are naive local wall-clock values."""
    if dt.tzinfo is not None:
        return dt.replace(tzinfo=None)
    return dt
