"""
Press-drag-release state machine turning pointer input into intervals.

States are explicit value types so that impossible combinations (for
example "activated without an anchor") cannot be represented:

    Idle --down--> Pressed --move past threshold--> Activated
    Pressed --up--> Idle (tap, nothing committed)
    Activated --up--> Committed | Discarded
    any --cancel--> Idle

The caller supplies ``project_to_minute`` to turn raw renderer input
(a pixel offset, a point on the dial, ...) into a minute of the day.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Union

from .interval_algebra import ValidationResult, validate
from .models import TimeBlock, TimeInterval
from .time_codec import MINUTES_PER_DAY, SNAP_MINUTES, snap

logger = logging.getLogger(__name__)

HALF_DAY = MINUTES_PER_DAY // 2
DEFAULT_ACTIVATION_THRESHOLD = SNAP_MINUTES


@dataclass(frozen=True)
class Idle:
    """No pointer is down."""


@dataclass(frozen=True)
class Pressed:
    """Pointer is down but has not moved far enough to count as a drag."""
    anchor: int
    accumulated: float
    last_raw: float


@dataclass(frozen=True)
class Activated:
    """Deliberate drag in progress; the preview is visible."""
    anchor: int
    accumulated: float
    last_raw: float


DragState = Union[Idle, Pressed, Activated]


class DiscardReason(str, Enum):
    NOT_ACTIVATED = "not_activated"
    BELOW_THRESHOLD = "below_threshold"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Committed:
    """A drag that produced a valid candidate interval."""
    interval: TimeInterval
    accumulated: float


@dataclass(frozen=True)
class Discarded:
    """A drag that ended without a candidate; ``validation`` is set when rejected."""
    reason: DiscardReason
    candidate: Optional[TimeInterval] = None
    validation: Optional[ValidationResult] = None

    @property
    def message(self) -> str:
        return self.validation.message if self.validation else ""


@dataclass(frozen=True)
class Cancelled:
    """The gesture was aborted by the platform; not an error."""


DragOutcome = Union[Committed, Discarded, Cancelled]


def circular_delta(previous: float, current: float) -> float:
    """
    Signed movement between two minute readings along the shortest way
    around the dial, so 1435 -> 5 is +10 rather than -1430.
    """
    diff = current - previous
    if diff > HALF_DAY:
        diff -= MINUTES_PER_DAY
    if diff < -HALF_DAY:
        diff += MINUTES_PER_DAY
    return diff


def _identity(raw: Any) -> float:
    return float(raw)


class DragSession:
    """
    One drag interaction on one rendering surface.

    The session is reusable: after a pointer-up or cancel it returns to
    ``Idle`` and accepts the next pointer-down.
    """

    def __init__(
        self,
        project_to_minute: Callable[[Any], float] = _identity,
        activation_threshold: float = DEFAULT_ACTIVATION_THRESHOLD,
    ):
        if activation_threshold <= 0:
            raise ValueError("activation_threshold must be greater than zero")
        self.project_to_minute = project_to_minute
        self.activation_threshold = activation_threshold
        self.state: DragState = Idle()

    @property
    def is_active(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def suppress_scroll(self) -> bool:
        """True once the gesture is a deliberate drag; touch UIs stop native scrolling."""
        return isinstance(self.state, Activated)

    def on_pointer_down(self, raw: Any) -> DragState:
        """Start a session anchored at the projected position."""
        if self.is_active:
            logger.debug("Pointer down during %s, cancelling previous drag", type(self.state).__name__)
            self.on_pointer_cancel()

        minute = self.project_to_minute(raw)
        self.state = Pressed(anchor=snap(minute), accumulated=0, last_raw=minute)
        logger.debug("Drag pressed at minute %d", self.state.anchor)
        return self.state

    def on_pointer_move(self, raw: Any) -> DragState:
        """Accumulate movement; activate once it passes the threshold."""
        state = self.state
        if isinstance(state, Idle):
            return state

        minute = self.project_to_minute(raw)
        diff = circular_delta(state.last_raw, minute)
        accumulated = max(0.0, min(float(MINUTES_PER_DAY), state.accumulated + diff))

        if isinstance(state, Pressed) and accumulated < self.activation_threshold:
            self.state = Pressed(anchor=state.anchor, accumulated=accumulated, last_raw=minute)
        else:
            if isinstance(state, Pressed):
                logger.debug("Drag activated after %.1f minutes", accumulated)
            self.state = Activated(anchor=state.anchor, accumulated=accumulated, last_raw=minute)

        return self.state

    def on_pointer_up(
        self,
        existing: Iterable[TimeBlock] = (),
        exclude_id: Optional[str] = None,
    ) -> Optional[DragOutcome]:
        """
        Finish the gesture.

        Args:
            existing: Blocks the candidate is validated against
            exclude_id: Block being edited, ignored during validation

        Returns:
            Committed or Discarded, or None when no session was in progress
        """
        state = self.state
        self.state = Idle()

        if isinstance(state, Idle):
            return None

        if isinstance(state, Pressed):
            return Discarded(reason=DiscardReason.NOT_ACTIVATED)

        if state.accumulated < self.activation_threshold:
            return Discarded(reason=DiscardReason.BELOW_THRESHOLD)

        candidate = TimeInterval(start=state.anchor, end=snap(state.anchor + state.accumulated))
        result = validate(candidate, existing, exclude_id=exclude_id)
        if not result.valid:
            logger.debug("Drag candidate %s rejected: %s", candidate, result.message)
            return Discarded(reason=DiscardReason.REJECTED, candidate=candidate, validation=result)

        logger.debug("Drag committed %s", candidate)
        return Committed(interval=candidate, accumulated=state.accumulated)

    def on_pointer_cancel(self) -> Cancelled:
        """Abort whatever is in progress."""
        self.state = Idle()
        return Cancelled()

    def preview(self) -> Optional[TimeInterval]:
        """Interval to draw while an activated drag is in progress."""
        state = self.state
        if not isinstance(state, Activated) or state.accumulated < self.activation_threshold:
            return None
        end = snap(state.anchor + state.accumulated)
        return TimeInterval(start=state.anchor, end=end)
