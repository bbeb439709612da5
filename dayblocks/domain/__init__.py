"""
Domain layer - time arithmetic, interval rules and drag handling, free of I/O.
"""

from .drag import Activated, Cancelled, Committed, Discarded, DragSession, Idle, Pressed
from .interval_algebra import ValidationResult, expand_to_segments, overlaps, validate
from .merge_engine import compute_merged_ranges, merge_blocks, merge_slots
from .models import MergedRange, SlotRange, TimeBlock, TimeInterval

__all__ = [
    "Activated",
    "Cancelled",
    "Committed",
    "Discarded",
    "DragSession",
    "Idle",
    "Pressed",
    "ValidationResult",
    "expand_to_segments",
    "overlaps",
    "validate",
    "compute_merged_ranges",
    "merge_blocks",
    "merge_slots",
    "MergedRange",
    "SlotRange",
    "TimeBlock",
    "TimeInterval",
]
