"""
Tests for the ScheduleEditor service layer.
"""

import pytest

from dayblocks.config import DEFAULT_PALETTE
from dayblocks.domain.drag import Committed, Discarded, DiscardReason
from dayblocks.domain.exceptions import (
    BlockNotFoundError,
    BlockValidationError,
    OverlapError,
    ZeroOrNegativeDurationError,
)
from dayblocks.domain.models import TimeBlock, TimeInterval
from dayblocks.domain.projection import LinearProjection
from dayblocks.services.schedule_editor import ScheduleEditor


def _build_editor(*blocks: TimeBlock) -> ScheduleEditor:
    return ScheduleEditor(blocks=blocks, palette=DEFAULT_PALETTE)


class TestAddBlock:
    """Tests for creating blocks."""

    def test_add_to_empty_schedule(self):
        editor = _build_editor()

        block = editor.add_block(TimeInterval(600, 660), label=" Work ", color="#60A5FA")

        assert block.label == "Work"
        assert block.color == "#60a5fa"
        assert block.order == 0
        assert editor.blocks == [block]

    def test_default_color_is_first_palette_entry(self):
        block = _build_editor().add_block(TimeInterval(600, 660), label="Work")
        assert block.color == DEFAULT_PALETTE[0]

    def test_blocks_stay_sorted(self):
        editor = _build_editor()
        editor.add_block(TimeInterval(900, 960), label="Late")
        editor.add_block(TimeInterval(60, 120), label="Early")

        assert [b.label for b in editor.blocks] == ["Early", "Late"]
        assert [b.order for b in editor.blocks] == [1, 0]

    def test_overlap_raises(self):
        editor = _build_editor()
        sleep = editor.add_block(TimeInterval(1380, 420), label="Sleep")

        with pytest.raises(OverlapError) as excinfo:
            editor.add_block(TimeInterval(0, 30), label="Snack")

        assert excinfo.value.conflicting_block == sleep
        assert "Sleep" in str(excinfo.value)
        assert len(editor.blocks) == 1

    def test_zero_length_raises(self):
        with pytest.raises(ZeroOrNegativeDurationError):
            _build_editor().add_block(TimeInterval(600, 600), label="Nothing")

    def test_unknown_color_raises(self):
        with pytest.raises(BlockValidationError, match="palette"):
            _build_editor().add_block(TimeInterval(600, 660), label="Work", color="#000000")

    def test_empty_label_raises(self):
        with pytest.raises(BlockValidationError, match="Label"):
            _build_editor().add_block(TimeInterval(600, 660), label="   ")


class TestEditBlocks:
    """Tests for changing and removing blocks."""

    def test_update_label_and_color(self):
        editor = _build_editor()
        block = editor.add_block(TimeInterval(600, 660), label="Work")

        updated = editor.update_block(block.id, label="Deep work", color=DEFAULT_PALETTE[2])

        assert updated.id == block.id
        assert updated.interval == block.interval
        assert editor.get_block(block.id).label == "Deep work"
        assert editor.get_block(block.id).color == DEFAULT_PALETTE[2]

    def test_reschedule_ignores_itself(self):
        editor = _build_editor()
        block = editor.add_block(TimeInterval(600, 660), label="Work")

        moved = editor.reschedule_block(block.id, TimeInterval(630, 690))

        assert moved.interval == TimeInterval(630, 690)

    def test_reschedule_into_other_block_raises(self):
        editor = _build_editor()
        work = editor.add_block(TimeInterval(600, 660), label="Work")
        editor.add_block(TimeInterval(700, 760), label="Gym")

        with pytest.raises(OverlapError):
            editor.reschedule_block(work.id, TimeInterval(650, 710))

        assert editor.get_block(work.id).interval == TimeInterval(600, 660)

    def test_remove(self):
        editor = _build_editor()
        block = editor.add_block(TimeInterval(600, 660), label="Work")

        assert editor.remove_block(block.id) == block
        assert editor.blocks == []

    def test_unknown_id(self):
        with pytest.raises(BlockNotFoundError):
            _build_editor().remove_block("missing")


class TestDerivedViews:
    """Tests for legend and export views."""

    def test_merged_ranges_and_export(self):
        editor = _build_editor()
        editor.add_block(TimeInterval(0, 420), label="Sleep")
        editor.add_block(TimeInterval(1380, 0), label="Sleep")
        editor.add_block(TimeInterval(540, 1020), label="Work", color=DEFAULT_PALETTE[1])

        merged = editor.merged_ranges()

        assert [m.label for m in merged] == ["Sleep", "Work"]
        assert merged[0].ranges == (TimeInterval(1380, 420),)

        assert editor.export_records(merged=True) == [
            {"label": "Sleep", "startTime": "23:00", "endTime": "07:00", "color": DEFAULT_PALETTE[0]},
            {"label": "Work", "startTime": "09:00", "endTime": "17:00", "color": DEFAULT_PALETTE[1]},
        ]
        assert len(editor.export_records()) == 3

    def test_merged_ranges_keep_half_hour_blocks(self):
        editor = _build_editor()
        editor.add_block(TimeInterval(570, 600), label="Coffee")
        editor.add_block(TimeInterval(600, 630), label="Coffee")

        merged = editor.merged_ranges()

        assert merged[0].ranges == (TimeInterval(570, 630),)
        assert editor.export_records(merged=True)[0]["startTime"] == "09:30"


class TestDragIntegration:
    """Tests for committing drags through the editor."""

    def test_drag_on_timeline_creates_block(self):
        editor = _build_editor()
        session = editor.new_drag_session(LinearProjection())

        session.on_pointer_down(540)
        session.on_pointer_move(570)
        session.on_pointer_move(600)
        outcome = editor.finish_drag(session)

        assert isinstance(outcome, Committed)
        block = editor.commit_drag(outcome, label="Breakfast")
        assert block.interval == TimeInterval(540, 600)

    def test_conflicting_drag_is_discarded(self):
        editor = _build_editor()
        editor.add_block(TimeInterval(560, 620), label="Run")
        session = editor.new_drag_session(LinearProjection())

        session.on_pointer_down(540)
        session.on_pointer_move(600)
        outcome = editor.finish_drag(session)

        assert isinstance(outcome, Discarded)
        assert outcome.reason is DiscardReason.REJECTED
        assert editor.commit_drag(outcome, label="Breakfast") is None
        assert len(editor.blocks) == 1

    def test_threshold_comes_from_editor(self):
        editor = ScheduleEditor(palette=DEFAULT_PALETTE, activation_threshold=30)
        session = editor.new_drag_session(float)

        session.on_pointer_down(600)
        session.on_pointer_move(620)
        outcome = editor.finish_drag(session)

        assert outcome.reason is DiscardReason.NOT_ACTIVATED
