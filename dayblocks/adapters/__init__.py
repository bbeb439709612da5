"""
Adapters for reading and writing schedules outside the domain layer.
"""

from .schedule_file import ScheduleDocument, ScheduleFile, TimeBlockRecord

__all__ = ["ScheduleDocument", "ScheduleFile", "TimeBlockRecord"]
