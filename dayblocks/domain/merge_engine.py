"""
Collapse labeled slots into the minimal set of display ranges.

Both renderers feed this engine: the clock face historically worked on a
dense per-slot array, the timeline on the sparse block collection. Sparse
input is materialized into 5-minute slots first, so a single algorithm
serves both.

Algorithm:
1. Walk the slots in time order and group consecutive slots that share a
   (label, color) identity into raw runs
2. Combine all runs of one identity into a slot membership set and regroup
   it into contiguous ranges
3. Splice the last range onto the first when the identity crosses midnight
   (first range starts at slot 0, last range ends on the final slot)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .interval_algebra import expand_to_segments
from .models import MergedRange, SlotRange, TimeBlock
from .time_codec import MINUTES_PER_DAY, SLOTS_PER_DAY, SNAP_MINUTES

logger = logging.getLogger(__name__)

Identity = Tuple[str, str]
SlotEntry = Union[None, str, TimeBlock, Identity]


@dataclass(frozen=True)
class RawRun:
    """A contiguous run of slots found by the first grouping pass (inclusive)."""
    label: str
    color: str
    first: int
    last: int

    @property
    def identity(self) -> Identity:
        return (self.label, self.color)


def _identity_of(entry: SlotEntry) -> Optional[Identity]:
    """(label, color) of a slot entry, or None for an unlabeled slot."""
    if entry is None:
        return None
    if isinstance(entry, TimeBlock):
        label, color = entry.label, entry.color
    elif isinstance(entry, str):
        label, color = entry, ""
    else:
        label, color = entry
    if not label:
        return None
    return (label, color)


def materialize_slots(blocks: Iterable[TimeBlock]) -> List[Optional[TimeBlock]]:
    """
    Expand a block collection into one entry per 5-minute slot of the day.

    Block edges sit on the 5-minute grid, so the expansion is exact. If the
    collection overlaps, later blocks win.
    """
    slots: List[Optional[TimeBlock]] = [None] * SLOTS_PER_DAY

    for block in blocks:
        for seg_start, seg_end in expand_to_segments(block.interval):
            first = -(-seg_start // SNAP_MINUTES)
            last = -(-seg_end // SNAP_MINUTES)
            for index in range(first, last):
                if slots[index] is not None:
                    logger.debug("Slot %d claimed by %s and %s", index, slots[index].id, block.id)
                slots[index] = block

    return slots


def group_contiguous_runs(slots: Sequence[SlotEntry]) -> List[RawRun]:
    """
    First pass: group adjacent slots with the same identity.

    Runs are discovered in linear order, so an identity that crosses
    midnight comes out as two runs (one at the end, one at the start).
    """
    runs: List[RawRun] = []

    for index, entry in enumerate(slots):
        identity = _identity_of(entry)
        if identity is None:
            continue

        if runs and runs[-1].identity == identity and runs[-1].last == index - 1:
            last = runs[-1]
            runs[-1] = RawRun(label=last.label, color=last.color, first=last.first, last=index)
        else:
            runs.append(RawRun(label=identity[0], color=identity[1], first=index, last=index))

    return runs


def _regroup(indices: List[int]) -> List[SlotRange]:
    """Turn sorted slot indices into inclusive contiguous ranges."""
    ranges: List[SlotRange] = []
    for index in indices:
        if ranges and ranges[-1].last == index - 1:
            ranges[-1] = SlotRange(first=ranges[-1].first, last=index)
        else:
            ranges.append(SlotRange(first=index, last=index))
    return ranges


def _splice_midnight(ranges: List[SlotRange], total_slots: int) -> List[SlotRange]:
    """
    Join the last range onto the first when they meet across midnight.

    The linear regroup cannot see that slot ``total_slots - 1`` and slot 0
    are neighbours, so the fix-up happens after the fact.
    """
    if len(ranges) < 2:
        return ranges

    head, tail = ranges[0], ranges[-1]
    if head.first == 0 and tail.last == total_slots - 1:
        return ranges[1:-1] + [SlotRange(first=tail.first, last=head.last)]

    return ranges


def combine_runs(runs: Iterable[RawRun], total_slots: int) -> Dict[Identity, List[SlotRange]]:
    """
    Second pass: merge all runs of each identity into minimal ranges.

    Identities keep the order of their first run.
    """
    membership: Dict[Identity, Set[int]] = {}
    for run in runs:
        membership.setdefault(run.identity, set()).update(range(run.first, run.last + 1))

    combined: Dict[Identity, List[SlotRange]] = {}
    for identity, indices in membership.items():
        combined[identity] = _splice_midnight(_regroup(sorted(indices)), total_slots)

    return combined


def merge_slots(slots: Sequence[SlotEntry]) -> List[MergedRange]:
    """
    Merge a dense per-slot array covering the whole day.

    Args:
        slots: One entry per slot; ``None``, a label, a TimeBlock or a
            (label, color) pair. Unlabeled entries are skipped.

    Returns:
        One MergedRange per (label, color) identity. When the slot count
        does not divide the day, the ranges carry slot indices only and
        have no minute length.
    """
    if not slots:
        return []

    total_slots = len(slots)
    slot_minutes = None if MINUTES_PER_DAY % total_slots else MINUTES_PER_DAY // total_slots

    runs = group_contiguous_runs(slots)
    combined = combine_runs(runs, total_slots)

    return [
        MergedRange(
            label=label,
            color=color,
            slot_ranges=tuple(ranges),
            slot_minutes=slot_minutes,
            total_slots=total_slots,
        )
        for (label, color), ranges in combined.items()
    ]


def merge_blocks(blocks: Iterable[TimeBlock]) -> List[MergedRange]:
    """Merge a sparse block collection on the 5-minute grid."""
    return merge_slots(materialize_slots(blocks))


def compute_merged_ranges(source: Sequence[SlotEntry]) -> List[MergedRange]:
    """
    Merge either a block collection or a dense slot array.

    A sequence made only of TimeBlocks is treated as a sparse collection;
    anything containing ``None`` or (label, color) pairs is a dense array.
    """
    entries = list(source)
    if all(isinstance(entry, TimeBlock) for entry in entries):
        return merge_blocks(entries)
    return merge_slots(entries)


def export_records(merged: Iterable[MergedRange]) -> List[Dict[str, str]]:
    """Flatten merged ranges into ``{label, startTime, endTime, color}`` records."""
    records: List[Dict[str, str]] = []
    for item in merged:
        records.extend(item.to_export_records())
    return records
