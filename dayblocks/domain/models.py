"""
Domain models for minute-of-day intervals and labeled time blocks.
"""

import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .time_codec import MINUTES_PER_DAY, duration, format_duration, hour_to_12_hour, to_clock_string


@dataclass(frozen=True)
class TimeInterval:
    """
    Half-open interval ``[start, end)`` on the 24-hour circle.

    Invariant: both ends are minutes of the day in [0, 1440). When
    ``end < start`` the interval wraps through midnight; ``start == end``
    is a degenerate, zero-length interval.
    """
    start: int
    end: int

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Interval {name} must be an int, got {value!r}")
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"Interval {name} {value} is outside the day [0, 1440)")

    @property
    def wraps(self) -> bool:
        """True if the interval crosses midnight."""
        return self.end < self.start

    def duration_minutes(self) -> int:
        """Return the wraparound-aware duration in minutes."""
        return duration(self)

    @property
    def start_time(self) -> str:
        return to_clock_string(self.start)

    @property
    def end_time(self) -> str:
        return to_clock_string(self.end)

    def __str__(self) -> str:
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class TimeBlock:
    """
    A labeled, colored interval of a schedule.

    ``order`` is an insertion hint for consumers; the interval algebra
    ignores it.
    """
    id: str
    interval: TimeInterval
    label: str
    color: str
    order: int = 0

    def __post_init__(self):
        if not self.label or not self.label.strip():
            raise ValueError("Time block label must not be empty")

    @classmethod
    def create(cls, interval: TimeInterval, label: str, color: str, order: int = 0) -> "TimeBlock":
        """Build a block with a freshly generated id."""
        return cls(id=str(uuid.uuid4()), interval=interval, label=label, color=color, order=order)

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    def duration_minutes(self) -> int:
        return self.interval.duration_minutes()

    def to_export_record(self) -> Dict[str, str]:
        """Shape expected by the export collaborator."""
        return {
            "label": self.label,
            "startTime": self.interval.start_time,
            "endTime": self.interval.end_time,
            "color": self.color,
        }

    def __str__(self) -> str:
        return f"{self.label} ({self.interval})"


@dataclass(frozen=True)
class SlotRange:
    """
    Inclusive run of slot indices ``first..last``.

    A single-slot run has ``first == last``; a run with ``last < first``
    wraps from the final slot back to slot 0.
    """
    first: int
    last: int

    def slot_count(self, total_slots: int) -> int:
        """Number of slots covered, wrapping when ``last < first``."""
        if self.last >= self.first:
            return self.last - self.first + 1
        return total_slots - self.first + self.last + 1

    def to_interval(self, slot_minutes: int) -> TimeInterval:
        """Half-open minute interval covering the run."""
        start = self.first * slot_minutes
        end = ((self.last + 1) * slot_minutes) % MINUTES_PER_DAY
        return TimeInterval(start=start, end=end)


@dataclass(frozen=True)
class MergedRange:
    """
    Display projection of every slot sharing one (label, color) identity.

    Derived data: recomputed from the block collection whenever needed.
    ``slot_minutes`` is None for a dense array whose slot count does not
    divide the day; such a range only knows its slot indices.
    """
    label: str
    color: str
    slot_ranges: Tuple[SlotRange, ...]
    slot_minutes: Optional[int] = 5
    total_slots: int = MINUTES_PER_DAY // 5

    def _minutes_per_slot(self) -> int:
        if self.slot_minutes is None:
            raise ValueError(
                f"{self.total_slots} slots do not divide the day evenly, "
                f"ranges have no minute length"
            )
        return self.slot_minutes

    @property
    def ranges(self) -> Tuple[TimeInterval, ...]:
        """The merged ranges as half-open minute intervals."""
        slot_minutes = self._minutes_per_slot()
        return tuple(r.to_interval(slot_minutes) for r in self.slot_ranges)

    def total_minutes(self) -> int:
        """Minutes covered across all ranges (a full-day range counts 1440)."""
        return sum(r.slot_count(self.total_slots) for r in self.slot_ranges) * self._minutes_per_slot()

    def to_export_records(self) -> List[Dict[str, str]]:
        """One export record per range."""
        return [
            {
                "label": self.label,
                "startTime": interval.start_time,
                "endTime": interval.end_time,
                "color": self.color,
            }
            for interval in self.ranges
        ]

    def range_descriptions(self) -> List[str]:
        """
        Human readable spans, one per range.

        Hourly slots are named by their first and last hour, inclusive
        ("11 PM - 6 AM (8 hours)"); finer slots use clock times.
        """
        slot_minutes = self._minutes_per_slot()
        descriptions = []
        for slot_range in self.slot_ranges:
            minutes = slot_range.slot_count(self.total_slots) * slot_minutes
            if slot_minutes == 60:
                span = f"{hour_to_12_hour(slot_range.first)} - {hour_to_12_hour(slot_range.last)}"
            else:
                span = str(slot_range.to_interval(slot_minutes))
            descriptions.append(f"{span} ({format_duration(minutes)})")
        return descriptions

    def legend_lines(self) -> List[str]:
        """Legend entries such as "Sleep: 11 PM - 6 AM (8 hours)"."""
        return [f"{self.label}: {description}" for description in self.range_descriptions()]
