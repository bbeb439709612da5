"""
Application service that edits a single schedule's block collection.

The editor is the only writer of the collection: every insertion or move
goes through ``validate`` first, which keeps the no-overlap invariant. It is
not thread-safe; callers sharing an editor must serialize access.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..domain.drag import Committed, DragOutcome, DragSession
from ..domain.exceptions import BlockNotFoundError, BlockValidationError
from ..domain.interval_algebra import ValidationResult, sort_blocks, validate
from ..domain.merge_engine import export_records, merge_blocks
from ..domain.models import MergedRange, TimeBlock, TimeInterval
from ..domain.time_codec import SNAP_MINUTES

logger = logging.getLogger(__name__)


class ScheduleEditor:
    """
    Validates and applies edits to a schedule.

    Blocks are kept sorted by start time, the way both renderers list them.
    """

    def __init__(
        self,
        blocks: Iterable[TimeBlock] = (),
        palette: Sequence[str] = (),
        activation_threshold: int = SNAP_MINUTES,
    ) -> None:
        self._blocks: List[TimeBlock] = sort_blocks(blocks)
        self._palette = [color.lower() for color in palette]
        self._activation_threshold = activation_threshold

    @property
    def blocks(self) -> List[TimeBlock]:
        """Sorted copy of the collection."""
        return list(self._blocks)

    def get_block(self, block_id: str) -> TimeBlock:
        for block in self._blocks:
            if block.id == block_id:
                return block
        raise BlockNotFoundError(f"No block with id '{block_id}'")

    def check(self, interval: TimeInterval, exclude_id: Optional[str] = None) -> ValidationResult:
        """Validate without changing anything."""
        return validate(interval, self._blocks, exclude_id=exclude_id)

    def add_block(self, interval: TimeInterval, label: str, color: Optional[str] = None) -> TimeBlock:
        """
        Create a block after validating it against the schedule.

        Raises:
            ZeroOrNegativeDurationError: If the interval is empty
            OverlapError: If the interval conflicts with an existing block
            BlockValidationError: If label or color are unusable
        """
        label = self._clean_label(label)
        color = self._resolve_color(color)

        self.check(interval).raise_for_error()

        block = TimeBlock.create(interval=interval, label=label, color=color, order=len(self._blocks))
        self._blocks = sort_blocks([*self._blocks, block])
        logger.info("Added block %s", block)
        return block

    def update_block(self, block_id: str, label: Optional[str] = None, color: Optional[str] = None) -> TimeBlock:
        """Change the label and/or color of an existing block."""
        block = self.get_block(block_id)
        changes: Dict[str, Any] = {}
        if label is not None:
            changes["label"] = self._clean_label(label)
        if color is not None:
            changes["color"] = self._resolve_color(color)

        updated = dataclasses.replace(block, **changes)
        self._replace(updated)
        logger.info("Updated block %s", updated)
        return updated

    def reschedule_block(self, block_id: str, interval: TimeInterval) -> TimeBlock:
        """Move or resize a block; the block never conflicts with itself."""
        block = self.get_block(block_id)
        self.check(interval, exclude_id=block_id).raise_for_error()

        updated = dataclasses.replace(block, interval=interval)
        self._replace(updated)
        logger.info("Rescheduled block %s", updated)
        return updated

    def remove_block(self, block_id: str) -> TimeBlock:
        block = self.get_block(block_id)
        self._blocks = [b for b in self._blocks if b.id != block_id]
        logger.info("Removed block %s", block)
        return block

    def merged_ranges(self) -> List[MergedRange]:
        """Legend view of the schedule, recomputed from the current blocks."""
        return merge_blocks(self._blocks)

    def export_records(self, merged: bool = False) -> List[Dict[str, str]]:
        """``{label, startTime, endTime, color}`` records for the export collaborator."""
        if merged:
            return export_records(self.merged_ranges())
        return [block.to_export_record() for block in self._blocks]

    def new_drag_session(self, project_to_minute: Callable[[Any], float]) -> DragSession:
        return DragSession(
            project_to_minute=project_to_minute,
            activation_threshold=self._activation_threshold,
        )

    def finish_drag(self, session: DragSession, exclude_id: Optional[str] = None) -> Optional[DragOutcome]:
        """Release the pointer on ``session``, validating against this schedule."""
        return session.on_pointer_up(existing=self._blocks, exclude_id=exclude_id)

    def commit_drag(self, outcome: Optional[DragOutcome], label: str, color: Optional[str] = None) -> Optional[TimeBlock]:
        """
        Store the interval of a committed drag.

        Discarded or cancelled drags produce nothing. The interval is
        validated again since the schedule may have changed while the
        user was labeling it.
        """
        if not isinstance(outcome, Committed):
            return None
        return self.add_block(outcome.interval, label=label, color=color)

    def _replace(self, updated: TimeBlock) -> None:
        self._blocks = sort_blocks(updated if b.id == updated.id else b for b in self._blocks)

    @staticmethod
    def _clean_label(label: str) -> str:
        cleaned = (label or "").strip()
        if not cleaned:
            raise BlockValidationError("Label must not be empty")
        return cleaned

    def _resolve_color(self, color: Optional[str]) -> str:
        if color is None:
            if not self._palette:
                raise BlockValidationError("No color given and the palette is empty")
            return self._palette[0]

        color = color.lower()
        if self._palette and color not in self._palette:
            raise BlockValidationError(
                f"Color {color} is not in the palette ({', '.join(self._palette)})"
            )
        return color
