"""
Wraparound-aware operations on minute-of-day intervals.

Every operation here decomposes intervals into non-wrapping segments first,
so the usual half-open overlap test can be applied on a straight line.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import OverlapError, ZeroOrNegativeDurationError
from .models import TimeBlock, TimeInterval
from .time_codec import MINUTES_PER_DAY, duration

logger = logging.getLogger(__name__)

Segment = Tuple[int, int]


def expand_to_segments(interval: TimeInterval) -> List[Segment]:
    """
    Split an interval into non-wrapping ``(start, end)`` pairs.

    Example:
    22:00 - 02:00 -> [(1320, 1440), (0, 120)]
    """
    if interval.end > interval.start:
        return [(interval.start, interval.end)]

    segments = [(interval.start, MINUTES_PER_DAY), (0, interval.end)]
    return [(start, end) for start, end in segments if start != end]


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Check if two intervals share any minute. Touching endpoints do not overlap."""
    return any(
        start1 < end2 and start2 < end1
        for start1, end1 in expand_to_segments(a)
        for start2, end2 in expand_to_segments(b)
    )


class ValidationFailure(str, Enum):
    ZERO_OR_NEGATIVE_DURATION = "zero_or_negative_duration"
    OVERLAP = "overlap"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a candidate interval.

    On overlap, ``conflicting_block`` is the first conflicting block in the
    order the collection was scanned, not necessarily the nearest one.
    """
    valid: bool
    failure: Optional[ValidationFailure] = None
    conflicting_block: Optional[TimeBlock] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.valid

    def raise_for_error(self) -> None:
        """Raise the matching BlockValidationError if the result is invalid."""
        if self.failure is ValidationFailure.ZERO_OR_NEGATIVE_DURATION:
            raise ZeroOrNegativeDurationError(self.message)
        if self.failure is ValidationFailure.OVERLAP:
            raise OverlapError(self.message, conflicting_block=self.conflicting_block)


def validate(
    candidate: TimeInterval,
    existing: Iterable[TimeBlock],
    exclude_id: Optional[str] = None,
) -> ValidationResult:
    """
    Check that a candidate interval may become a block of the schedule.

    Args:
        candidate: Interval the user wants to create or move a block to
        existing: Blocks of the schedule, scanned in the given order
        exclude_id: Id of the block being edited, skipped during the scan

    Returns:
        ValidationResult, reporting the first conflicting block on overlap
    """
    if duration(candidate) <= 0:
        logger.debug("Rejected %s: zero length", candidate)
        return ValidationResult(
            valid=False,
            failure=ValidationFailure.ZERO_OR_NEGATIVE_DURATION,
            message="End time must be after start time",
        )

    for block in existing:
        if exclude_id is not None and block.id == exclude_id:
            continue

        if overlaps(candidate, block.interval):
            logger.debug("Rejected %s: overlaps block %s", candidate, block.id)
            return ValidationResult(
                valid=False,
                failure=ValidationFailure.OVERLAP,
                conflicting_block=block,
                message=(
                    f'Overlaps with "{block.label}" '
                    f"({block.interval.start_time} - {block.interval.end_time})"
                ),
            )

    return ValidationResult(valid=True)


def sort_blocks(blocks: Iterable[TimeBlock]) -> List[TimeBlock]:
    """Return blocks ordered by start minute (stable for equal starts)."""
    return sorted(blocks, key=lambda block: block.interval.start)


def block_percentage(block: TimeBlock) -> float:
    """Share of the day covered by a block, 0-100, for chart rendering."""
    return duration(block.interval) / MINUTES_PER_DAY * 100


def find_conflicts(blocks: Sequence[TimeBlock]) -> List[Tuple[TimeBlock, TimeBlock]]:
    """
    List every overlapping pair in a collection.

    The no-overlap invariant is only enforced at insertion time, so a
    collection loaded from elsewhere may violate it.
    """
    conflicts: List[Tuple[TimeBlock, TimeBlock]] = []
    for i, first in enumerate(blocks):
        for second in blocks[i + 1:]:
            if overlaps(first.interval, second.interval):
                conflicts.append((first, second))
    return conflicts
