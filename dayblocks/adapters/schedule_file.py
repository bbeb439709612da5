"""
YAML schedule document holding time blocks in their persisted shape.

The durable representation of a block uses clock strings:
``{id, startTime: "HH:MM", endTime: "HH:MM", label, color, order}``.
Minutes of the day only exist at runtime.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.exceptions import ScheduleFileError
from ..domain.interval_algebra import find_conflicts
from ..domain.models import TimeBlock, TimeInterval
from ..domain.time_codec import SNAP_MINUTES, from_clock_string

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_NAME = "My Schedule"


class TimeBlockRecord(BaseModel):
    """Persisted form of a TimeBlock."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    label: str
    color: str
    order: int = 0

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Times must decode and sit on the 5-minute grid."""
        minutes = from_clock_string(value)
        if minutes % SNAP_MINUTES:
            raise ValueError(f"Time {value} is not on the {SNAP_MINUTES}-minute grid")
        return value

    @field_validator("label")
    @classmethod
    def validate_label(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("label must not be empty")
        return value

    @classmethod
    def from_block(cls, block: TimeBlock) -> "TimeBlockRecord":
        return cls(
            id=block.id,
            start_time=block.interval.start_time,
            end_time=block.interval.end_time,
            label=block.label,
            color=block.color,
            order=block.order,
        )

    def to_block(self) -> TimeBlock:
        interval = TimeInterval(
            start=from_clock_string(self.start_time),
            end=from_clock_string(self.end_time),
        )
        return TimeBlock(
            id=self.id,
            interval=interval,
            label=self.label,
            color=self.color,
            order=self.order,
        )


class ScheduleDocument(BaseModel):
    """A named schedule as stored on disk."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = DEFAULT_SCHEDULE_NAME
    time_blocks: List[TimeBlockRecord] = Field(default_factory=list, alias="timeBlocks")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ScheduleFile:
    """
    Reads and writes a single schedule document.

    A missing file reads as an empty schedule so the first ``add`` creates it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Tuple[str, List[TimeBlock]]:
        """
        Load the schedule name and its blocks.

        Raises:
            ScheduleFileError: If the file is not valid YAML or not a schedule
        """
        if not self.path.exists():
            logger.info("Schedule file %s does not exist, starting empty", self.path)
            return DEFAULT_SCHEDULE_NAME, []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ScheduleFileError(f"Invalid YAML in {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleFileError("Schedule file must contain a mapping at the root level.")

        try:
            document = ScheduleDocument(**data)
        except ValidationError as exc:
            raise ScheduleFileError(f"Invalid schedule in {self.path}: {exc}") from exc

        blocks = [record.to_block() for record in document.time_blocks]

        for first, second in find_conflicts(blocks):
            logger.warning("Schedule %s: %s overlaps %s", self.path, first, second)

        return document.name, blocks

    def save(self, name: str, blocks: Sequence[TimeBlock]) -> None:
        """Write the schedule, replacing any previous content."""
        document = ScheduleDocument(
            name=name,
            time_blocks=[TimeBlockRecord.from_block(block) for block in blocks],
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(document.to_dict(), f, sort_keys=False, allow_unicode=True)
        logger.debug("Saved %d blocks to %s", len(blocks), self.path)
