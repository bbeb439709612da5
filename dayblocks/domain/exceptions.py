"""
Domain-specific exception hierarchy for the dayblocks application.
"""


class DayblocksError(Exception):
    """Base class for all application-level errors."""


class FormatError(DayblocksError, ValueError):
    """Raised when a clock string or raw minute value cannot be decoded."""


class BlockValidationError(DayblocksError):
    """Raised when a candidate interval cannot become a time block."""


class ZeroOrNegativeDurationError(BlockValidationError):
    """Raised when a candidate interval has no positive length."""


class OverlapError(BlockValidationError):
    """Raised when a candidate interval conflicts with an existing block."""

    def __init__(self, message: str, conflicting_block=None):
        super().__init__(message)
        self.conflicting_block = conflicting_block


class BlockNotFoundError(DayblocksError, KeyError):
    """Raised when a block id is not part of the schedule."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class ScheduleFileError(DayblocksError):
    """Raised when a schedule document cannot be read or parsed."""
