"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_editor import ScheduleEditor

__all__ = ["ScheduleEditor"]
