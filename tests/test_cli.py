"""
Tests for the command line interface.
"""

import json

import pytest
import yaml
from typer.testing import CliRunner

from dayblocks import __version__
from dayblocks.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"log_level": "ERROR"}), encoding="utf-8")
    return path


@pytest.fixture
def schedule_path(tmp_path):
    return tmp_path / "schedule.yaml"


def invoke(config_path, schedule_path, *args):
    return runner.invoke(app, [*args, "--config", str(config_path), "--file", str(schedule_path)])


def stored_blocks(schedule_path):
    data = yaml.safe_load(schedule_path.read_text(encoding="utf-8"))
    return data["timeBlocks"]


class TestEditingCommands:
    """Tests for add, remove and relabel."""

    def test_add_creates_schedule_file(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "add", "23:00", "07:00", "Sleep")

        assert result.exit_code == 0
        assert "Added" in result.stdout
        assert "8 hours" in result.stdout

        blocks = stored_blocks(schedule_path)
        assert len(blocks) == 1
        assert blocks[0]["startTime"] == "23:00"
        assert blocks[0]["endTime"] == "07:00"
        assert blocks[0]["label"] == "Sleep"

    def test_add_overlap_fails(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "23:00", "07:00", "Sleep")

        result = invoke(config_path, schedule_path, "add", "06:00", "08:00", "Run")

        assert result.exit_code == 1
        assert "Overlaps" in result.stdout
        assert len(stored_blocks(schedule_path)) == 1

    def test_add_bad_time_fails(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "add", "25:00", "26:00", "Nope")

        assert result.exit_code == 1
        assert "Error" in result.stdout
        assert not schedule_path.exists()

    def test_remove(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:00", "12:00", "Work")
        block_id = stored_blocks(schedule_path)[0]["id"]

        result = invoke(config_path, schedule_path, "remove", block_id)

        assert result.exit_code == 0
        assert stored_blocks(schedule_path) == []

    def test_remove_unknown_id(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "remove", "missing")

        assert result.exit_code == 1
        assert "missing" in result.stdout

    def test_relabel(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:00", "12:00", "Work")
        block_id = stored_blocks(schedule_path)[0]["id"]

        result = invoke(config_path, schedule_path, "relabel", block_id, "--label", "Focus", "--color", "#34D399")

        assert result.exit_code == 0
        stored = stored_blocks(schedule_path)[0]
        assert stored["label"] == "Focus"
        assert stored["color"] == "#34d399"

    def test_relabel_without_changes(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "relabel", "anything")
        assert result.exit_code == 1


class TestReadingCommands:
    """Tests for show, check and legend."""

    def test_show_empty(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "show")

        assert result.exit_code == 0
        assert "empty" in result.stdout

    def test_show_lists_blocks(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:00", "12:00", "Work")

        result = invoke(config_path, schedule_path, "show")

        assert result.exit_code == 0
        assert "Work" in result.stdout
        assert "09:00" in result.stdout

    def test_check_free_and_taken(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:00", "12:00", "Work")

        free = invoke(config_path, schedule_path, "check", "12:00", "13:00")
        taken = invoke(config_path, schedule_path, "check", "11:00", "13:00")

        assert free.exit_code == 0
        assert "is free" in free.stdout
        assert taken.exit_code == 1
        assert "Work" in taken.stdout

    def test_check_zero_length(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "check", "10:00", "10:00")

        assert result.exit_code == 1
        assert "End time must be after start time" in result.stdout

    def test_legend_json_merges_across_midnight(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "23:00", "00:00", "Sleep")
        invoke(config_path, schedule_path, "add", "00:00", "07:00", "Sleep")
        invoke(config_path, schedule_path, "add", "09:00", "17:00", "Work", "--color", "#60a5fa")

        result = invoke(config_path, schedule_path, "legend", "--json")

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert records == [
            {"label": "Sleep", "startTime": "23:00", "endTime": "07:00", "color": "#f87171"},
            {"label": "Work", "startTime": "09:00", "endTime": "17:00", "color": "#60a5fa"},
        ]

    def test_legend_table(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:00", "17:00", "Work")

        result = invoke(config_path, schedule_path, "legend")

        assert result.exit_code == 0
        assert "Work" in result.stdout

    def test_legend_plain_lines(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "09:30", "10:00", "Coffee")

        result = invoke(config_path, schedule_path, "legend", "--plain")

        assert result.exit_code == 0
        assert "Coffee: 09:30 - 10:00 (30 minutes)" in result.stdout


class TestDragCommand:
    """Tests for replaying drags."""

    def test_small_steps_commit_snapped_interval(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "drag", "600", "602", "604", "606")

        assert result.exit_code == 0
        assert "10:00 - 10:05" in result.stdout
        assert not schedule_path.exists()

    def test_below_threshold(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "drag", "600", "602")

        assert result.exit_code == 0
        assert "No block" in result.stdout

    def test_dial_drag_across_midnight_saved(self, config_path, schedule_path):
        result = invoke(
            config_path, schedule_path,
            "drag", "345", "350", "355", "5", "15", "30", "45", "60", "75", "90", "105",
            "--mode", "dial", "--save", "--label", "Sleep",
        )

        assert result.exit_code == 0
        stored = stored_blocks(schedule_path)[0]
        assert stored["startTime"] == "23:00"
        assert stored["endTime"] == "07:00"

    def test_rejected_drag(self, config_path, schedule_path):
        invoke(config_path, schedule_path, "add", "10:00", "11:00", "Work")

        result = invoke(config_path, schedule_path, "drag", "570", "600", "630")

        assert result.exit_code == 1
        assert "Discarded" in result.stdout

    def test_save_requires_label(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "drag", "600", "660", "--save")
        assert result.exit_code == 1

    def test_point_mode_uses_dial_geometry(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "drag", "360", "60", "660", "360", "--mode", "point")

        assert result.exit_code == 0
        assert "00:00 - 06:00" in result.stdout

    def test_point_mode_needs_pairs(self, config_path, schedule_path):
        result = invoke(config_path, schedule_path, "drag", "360", "60", "660", "--mode", "point")
        assert result.exit_code == 1


class TestVersionCommand:
    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout
