"""
Tests for the YAML schedule document adapter.
"""

import logging
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from dayblocks.adapters.schedule_file import ScheduleFile, TimeBlockRecord
from dayblocks.domain.exceptions import ScheduleFileError
from dayblocks.domain.models import TimeBlock, TimeInterval


class TestTimeBlockRecord:
    """Tests for the persisted block shape."""

    def test_decode_from_aliases(self):
        record = TimeBlockRecord(
            **{"id": "b1", "startTime": "23:00", "endTime": "07:00", "label": " Sleep ", "color": "#60a5fa", "order": 1}
        )
        block = record.to_block()

        assert block == TimeBlock(
            id="b1", interval=TimeInterval(1380, 420), label="Sleep", color="#60a5fa", order=1
        )

    def test_encode_uses_clock_strings(self):
        block = TimeBlock(id="b1", interval=TimeInterval(540, 600), label="Work", color="#f87171", order=0)

        assert TimeBlockRecord.from_block(block).model_dump(by_alias=True) == {
            "id": "b1",
            "startTime": "09:00",
            "endTime": "10:00",
            "label": "Work",
            "color": "#f87171",
            "order": 0,
        }

    @pytest.mark.parametrize("start", ["9am", "24:00", "09:07"])
    def test_rejects_bad_times(self, start):
        with pytest.raises(ValidationError):
            TimeBlockRecord(id="b1", startTime=start, endTime="10:00", label="Work", color="#f87171")

    def test_rejects_empty_label(self):
        with pytest.raises(ValidationError):
            TimeBlockRecord(id="b1", startTime="09:00", endTime="10:00", label="  ", color="#f87171")


class TestScheduleFile:
    """Tests for reading and writing schedule documents."""

    def test_missing_file_is_empty_schedule(self, tmp_path: Path):
        name, blocks = ScheduleFile(tmp_path / "schedule.yaml").load()

        assert name == "My Schedule"
        assert blocks == []

    def test_save_and_load(self, tmp_path: Path):
        path = tmp_path / "nested" / "schedule.yaml"
        blocks = [
            TimeBlock(id="a", interval=TimeInterval(1380, 420), label="Sleep", color="#60a5fa", order=0),
            TimeBlock(id="b", interval=TimeInterval(540, 1020), label="Work", color="#f87171", order=1),
        ]

        store = ScheduleFile(path)
        store.save("Weekday", blocks)

        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["name"] == "Weekday"
        assert raw["timeBlocks"][0]["startTime"] == "23:00"

        name, loaded = store.load()
        assert name == "Weekday"
        assert loaded == blocks

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "schedule.yaml"
        path.write_text("timeBlocks: [", encoding="utf-8")

        with pytest.raises(ScheduleFileError, match="Invalid YAML"):
            ScheduleFile(path).load()

    def test_invalid_document(self, tmp_path: Path):
        path = tmp_path / "schedule.yaml"
        path.write_text("timeBlocks:\n  - id: x\n    startTime: '25:00'\n", encoding="utf-8")

        with pytest.raises(ScheduleFileError, match="Invalid schedule"):
            ScheduleFile(path).load()

    def test_root_must_be_mapping(self, tmp_path: Path):
        path = tmp_path / "schedule.yaml"
        path.write_text("- 1\n", encoding="utf-8")

        with pytest.raises(ScheduleFileError):
            ScheduleFile(path).load()

    def test_overlapping_document_loads_with_warning(self, tmp_path: Path, caplog):
        path = tmp_path / "schedule.yaml"
        ScheduleFile(path).save(
            "Broken",
            [
                TimeBlock(id="a", interval=TimeInterval(0, 120), label="A", color="#f87171"),
                TimeBlock(id="b", interval=TimeInterval(60, 180), label="B", color="#f87171"),
            ],
        )

        with caplog.at_level(logging.WARNING, logger="dayblocks.adapters.schedule_file"):
            _, blocks = ScheduleFile(path).load()

        assert len(blocks) == 2
        assert "overlaps" in caplog.text
