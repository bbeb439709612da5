"""
Conversions between minute-of-day integers and human-facing time strings.

A day is modelled as 1440 minutes quantised to 5-minute slots. Every raw
pointer or angle value is snapped before it enters the model, so all
downstream arithmetic happens on multiples of five.
"""

import math
import re
from typing import List

import pendulum

from .exceptions import FormatError

MINUTES_PER_DAY = 24 * 60
SNAP_MINUTES = 5
SLOTS_PER_DAY = MINUTES_PER_DAY // SNAP_MINUTES

_CLOCK_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def snap(minutes: float) -> int:
    """
    Round to the nearest 5-minute mark and wrap into the day.

    Halves round up (7.5 -> 10), negative input wraps forward
    (-5 -> 1435) and 1440 wraps to 0.

    Raises:
        FormatError: If ``minutes`` is NaN or infinite
    """
    if not math.isfinite(minutes):
        raise FormatError(f"Cannot snap non-finite minute value {minutes!r}")
    snapped = int(math.floor(minutes / SNAP_MINUTES + 0.5)) * SNAP_MINUTES
    return snapped % MINUTES_PER_DAY


def to_clock_string(minutes: float) -> str:
    """Format a minute-of-day as a zero-padded 24-hour "HH:MM" string."""
    total = snap(minutes)
    hours, mins = divmod(total, 60)
    return f"{hours:02d}:{mins:02d}"


def from_clock_string(value: str) -> int:
    """
    Decode an "HH:MM" string into minutes since midnight.

    Args:
        value: 24-hour clock string, e.g. "07:15" or "7:15"

    Returns:
        Minute-of-day in [0, 1440)

    Raises:
        FormatError: If the string is not a valid 24-hour clock time
    """
    if not isinstance(value, str):
        raise FormatError(f"Clock time must be a string, got {type(value).__name__}")

    match = _CLOCK_PATTERN.fullmatch(value)
    if not match:
        raise FormatError(f"Invalid clock time '{value}', expected HH:MM")

    hours, mins = int(match.group(1)), int(match.group(2))
    if hours > 23 or mins > 59:
        raise FormatError(f"Clock time '{value}' is out of range")

    return hours * 60 + mins


def to_12_hour(minutes: int) -> str:
    """Format a minute-of-day as "H:MM AM/PM" (midnight is 12:00 AM)."""
    hours24, mins = divmod(int(minutes) % MINUTES_PER_DAY, 60)
    period = "PM" if hours24 >= 12 else "AM"
    hours12 = hours24 % 12 or 12
    return f"{hours12}:{mins:02d} {period}"


def hour_to_12_hour(hour: int) -> str:
    """Format an hour 0-23 as "H AM/PM" (0 -> "12 AM", 12 -> "12 PM")."""
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12} {period}"


def duration(interval) -> int:
    """
    Length of an interval in minutes, wrapping through midnight when
    ``end < start``. A zero-length interval yields 0.
    """
    if interval.end >= interval.start:
        return interval.end - interval.start
    return (MINUTES_PER_DAY - interval.start) + interval.end


def format_duration(minutes: int) -> str:
    """
    Human readable duration.

    Examples: "1 minute", "45 minutes", "2 hours", "2.5 hours", "1h 15m"
    """
    if minutes < 60:
        return f"{minutes} minute{'' if minutes == 1 else 's'}"

    hours, mins = divmod(minutes, 60)

    if mins == 0:
        return f"{hours} hour{'' if hours == 1 else 's'}"

    if mins == 30:
        return f"{hours}.5 hours"

    return f"{hours}h {mins}m"


def generate_time_slots() -> List[str]:
    """Return the 288 slot labels of the day: "00:00", "00:05", ... "23:55"."""
    return [to_clock_string(m) for m in range(0, MINUTES_PER_DAY, SNAP_MINUTES)]


def current_time_rounded() -> str:
    """Current local wall-clock time snapped to the 5-minute grid."""
    now = pendulum.now()
    return to_clock_string(now.hour * 60 + now.minute)
