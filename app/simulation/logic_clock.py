"""
simulation/logic_clock.py

Sequential (clocked) state updates with no Qt dependencies.

Propagation runs every step, but parts that sample a control line only
change state on a clock edge. Edges fall on multiples of the tick
interval ("beats"), so a caller stepping at any frame rate ticks once
per beat. The clock never reads the time itself; callers pass ``now``.
"""

import logging
import math
from typing import Callable, Iterable, Optional

from models.part import Part, PartCategory
from models.socket import SocketRole

from .constants import BUTTON_HOLD, TICK_INTERVAL

logger = logging.getLogger(__name__)


def interval_elapsed(last_tick: Optional[float], now: float, interval: float = TICK_INTERVAL) -> bool:
    """
    Check whether a clock edge lies between ``last_tick`` and ``now``.

    Args:
        last_tick: Time of the previous tick, or None if there was none.
        now: Current monotonic time.
        interval: Beat length.

    Returns:
        True if ``now`` falls in a later beat than ``last_tick``.
    """
    if last_tick is None:
        return True
    return math.floor(now / interval) > math.floor(last_tick / interval)


# ----------------------------------------------------------------------
# Tick behaviour per category
# ----------------------------------------------------------------------


def _follow_control(part: Part, now: float) -> None:
    control = part.get_socket(SocketRole.CONTROL)
    part.energized = control.is_powered if control is not None else False


def _invert_control(part: Part, now: float) -> None:
    control = part.get_socket(SocketRole.CONTROL)
    part.energized = not control.is_powered if control is not None else True


def _release_button(part: Part, now: float) -> None:
    # A pressed button rebuilt from saved data has no deadline; release it.
    if part.energized and (part.deadline is None or now > part.deadline):
        part.energized = False
        part.deadline = None


TICK_RULES: dict[PartCategory, Callable[[Part, float], None]] = {
    PartCategory.CONTROLLED_SWITCH: _follow_control,
    PartCategory.INVERTER: _invert_control,
    PartCategory.TIMED_BUTTON: _release_button,
}


class LogicClock:
    """
    Gates sequential updates to a fixed cadence.

    Also applies manual interactions, since those are the other way a
    part's ``energized`` state changes.
    """

    def __init__(self, interval: float = TICK_INTERVAL, button_hold: float = BUTTON_HOLD):
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval!r}")
        if button_hold < 0:
            raise ValueError(f"Button hold must not be negative, got {button_hold!r}")
        self.interval = interval
        self.button_hold = button_hold
        self.last_tick: Optional[float] = None
        self.tick_count = 0

    def is_due(self, now: float) -> bool:
        """Return whether a clock edge has elapsed since the last tick."""
        return interval_elapsed(self.last_tick, now, self.interval)

    def tick(self, parts: Iterable[Part], now: float) -> None:
        """
        Apply one sequential update to every part.

        Control sockets are sampled as left by the previous propagation
        pass, so call this before the next ``evaluate()``.
        """
        for part in parts:
            rule = TICK_RULES.get(part.category)
            if rule is not None:
                rule(part, now)
        self.last_tick = now
        self.tick_count += 1
        logger.debug("Logic tick %d at %.3f", self.tick_count, now)

    def advance(self, parts: Iterable[Part], now: float) -> bool:
        """
        Tick if a clock edge has elapsed.

        Returns:
            True if a tick was applied.
        """
        if not self.is_due(now):
            return False
        self.tick(parts, now)
        return True

    def reset(self) -> None:
        """Forget the previous tick so the next step ticks immediately."""
        self.last_tick = None
        self.tick_count = 0

    def interact(self, part: Part, now: float) -> bool:
        """
        Apply a user interaction to ``part``.

        Toggle switches flip; timed buttons turn on until ``now`` plus the
        hold duration. Other categories ignore the interaction.

        Returns:
            True if the part's state changed.
        """
        if part.category is PartCategory.TOGGLE_SWITCH:
            part.energized = not part.energized
            return True
        if part.category is PartCategory.TIMED_BUTTON:
            part.energized = True
            part.deadline = now + self.button_hold
            return True
        return False
