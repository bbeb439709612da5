"""
Geometry that maps renderer coordinates onto minutes of the day.

The linear timeline runs top to bottom, midnight at the top edge. The dial
puts midnight at 12 o'clock and runs clockwise, so 6 AM is at 3 o'clock.
Either projection can be handed to ``DragSession`` as ``project_to_minute``.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from .interval_algebra import expand_to_segments
from .models import TimeInterval
from .time_codec import MINUTES_PER_DAY, snap

DEGREES_PER_DAY = 360.0


def minute_to_angle(minutes: float) -> float:
    """Angle in degrees, 0 at the top of the dial."""
    return minutes / MINUTES_PER_DAY * DEGREES_PER_DAY


def angle_to_minute(angle: float) -> int:
    """Snapped minute-of-day for an angle in degrees (any range)."""
    normalized = angle % DEGREES_PER_DAY
    return snap(normalized / DEGREES_PER_DAY * MINUTES_PER_DAY)


def minute_to_offset_percent(minutes: float) -> float:
    """Vertical position of a minute on the timeline, 0-100."""
    return minutes / MINUTES_PER_DAY * 100


@dataclass(frozen=True)
class LinearProjection:
    """
    Vertical timeline of ``height`` pixels whose top edge sits at ``top``.

    With the default height one pixel is one minute.
    """
    top: float = 0.0
    height: float = float(MINUTES_PER_DAY)

    def __post_init__(self):
        if self.height <= 0:
            raise ValueError(f"Timeline height must be positive, got {self.height}")

    def __call__(self, pixel_y: float) -> int:
        return self.pixel_to_minute(pixel_y)

    def pixel_to_minute(self, pixel_y: float) -> int:
        """Clamp into the day, then snap. The last reachable minute is 23:59."""
        percentage = (pixel_y - self.top) / self.height
        minutes = max(0.0, min(MINUTES_PER_DAY - 1.0, percentage * MINUTES_PER_DAY))
        return snap(minutes)

    def minute_to_pixel(self, minutes: float) -> float:
        return self.top + minutes / MINUTES_PER_DAY * self.height

    def block_spans(self, interval: TimeInterval) -> List[Tuple[float, float]]:
        """
        ``(top, height)`` pixel spans needed to draw an interval.

        A block that crosses midnight is drawn as two spans: one down to the
        bottom edge and one from the top edge.
        """
        scale = self.height / MINUTES_PER_DAY
        return [
            (self.minute_to_pixel(start), (end - start) * scale)
            for start, end in expand_to_segments(interval)
        ]


@dataclass(frozen=True)
class DialProjection:
    """Circular dial centred on ``(center_x, center_y)`` in pixel space."""
    center_x: float
    center_y: float

    @classmethod
    def for_size(cls, size: float) -> "DialProjection":
        return cls(center_x=size / 2, center_y=size / 2)

    def __call__(self, point: Tuple[float, float]) -> int:
        x, y = point
        return angle_to_minute(self.point_to_angle(x, y))

    def point_to_angle(self, x: float, y: float) -> float:
        """Degrees clockwise from 12 o'clock (screen y grows downward)."""
        return math.degrees(math.atan2(y - self.center_y, x - self.center_x)) + 90

    def minute_to_point(self, minutes: float, radius: float) -> Tuple[float, float]:
        """Point on a circle of ``radius`` at the given minute, for arc paths."""
        radians = math.radians(minute_to_angle(minutes) - 90)
        return (
            self.center_x + radius * math.cos(radians),
            self.center_y + radius * math.sin(radians),
        )

    def large_arc_flag(self, interval: TimeInterval) -> int:
        """SVG large-arc flag: 1 when the interval spans more than half the dial."""
        return 1 if minute_to_angle(interval.duration_minutes()) > 180 else 0
