"""
Part - Pure Python data model for circuit parts.

This module contains no Qt dependencies. Positions are plain (x, y)
tuples and rotation is stored in radians.

Part categories use their canonical names as identifiers:
'Source', 'ToggleSwitch', 'TimedButton', 'ControlledSwitch', 'Inverter',
'Indicator', 'Joint'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .socket import Socket, SocketRole


class PartCategory(str, Enum):
    """Behaviour variant of a part."""

    SOURCE = "Source"
    TOGGLE_SWITCH = "ToggleSwitch"
    TIMED_BUTTON = "TimedButton"
    CONTROLLED_SWITCH = "ControlledSwitch"
    INVERTER = "Inverter"
    INDICATOR = "Indicator"
    JOINT = "Joint"


# Socket roles per category, in socket order. Fixed for the part's lifetime.
SOCKET_LAYOUT = {
    PartCategory.SOURCE: (SocketRole.OUTPUT,),
    PartCategory.TOGGLE_SWITCH: (SocketRole.INPUT, SocketRole.OUTPUT),
    PartCategory.TIMED_BUTTON: (SocketRole.INPUT, SocketRole.OUTPUT),
    PartCategory.CONTROLLED_SWITCH: (SocketRole.INPUT, SocketRole.OUTPUT, SocketRole.CONTROL),
    PartCategory.INVERTER: (SocketRole.INPUT, SocketRole.OUTPUT, SocketRole.CONTROL),
    PartCategory.INDICATOR: (SocketRole.INPUT,),
    PartCategory.JOINT: (SocketRole.PASS_THROUGH,),
}

# Categories that carry an on/off state, with the state a new part starts in.
# An inverter with no control input conducts.
INITIAL_ENERGIZED = {
    PartCategory.TOGGLE_SWITCH: False,
    PartCategory.TIMED_BUTTON: False,
    PartCategory.CONTROLLED_SWITCH: False,
    PartCategory.INVERTER: True,
}

# Id prefixes (PWR1, SW1, BTN1, ...)
PART_SYMBOLS = {
    PartCategory.SOURCE: "PWR",
    PartCategory.TOGGLE_SWITCH: "SW",
    PartCategory.TIMED_BUTTON: "BTN",
    PartCategory.CONTROLLED_SWITCH: "CS",
    PartCategory.INVERTER: "INV",
    PartCategory.INDICATOR: "LT",
    PartCategory.JOINT: "J",
}


@dataclass(eq=False)
class Part:
    """
    Pure Python data class representing a circuit part.

    Sockets are created from ``SOCKET_LAYOUT`` at construction and never
    resized. ``energized`` is None for categories without on/off state;
    ``deadline`` is only used by timed buttons.
    """

    part_id: str
    category: PartCategory
    position: tuple[float, float] = (0.0, 0.0)
    rotation: float = 0.0
    energized: Optional[bool] = None
    deadline: Optional[float] = None
    sockets: list[Socket] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        self.category = PartCategory(self.category)
        self.sockets = [Socket(self, role) for role in SOCKET_LAYOUT[self.category]]
        if self.has_state:
            if self.energized is None:
                self.energized = INITIAL_ENERGIZED[self.category]
        else:
            self.energized = None

    @property
    def has_state(self) -> bool:
        """Whether this category carries an on/off state."""
        return self.category in INITIAL_ENERGIZED

    @property
    def is_joint(self) -> bool:
        return self.category is PartCategory.JOINT

    @property
    def is_source(self) -> bool:
        return self.category is PartCategory.SOURCE

    @property
    def is_lit(self) -> bool:
        """For indicators: whether the input socket received power this pass."""
        if self.category is not PartCategory.INDICATOR:
            return False
        return self.sockets[0].is_powered

    def get_socket(self, role: SocketRole) -> Optional[Socket]:
        """Return the socket with ``role``, or None if this part has none."""
        for socket in self.sockets:
            if socket.role is role:
                return socket
        return None

    def wire_count(self) -> int:
        """Total number of wire registrations over all sockets."""
        return sum(socket.wire_count() for socket in self.sockets)

    def neighbors(self) -> Iterator[tuple[Socket, "Part"]]:
        """
        Yield (other_socket, other_part) for every wire end on this part.

        A part wired to itself yields itself.
        """
        for socket in self.sockets:
            for wire in socket.wires:
                other = wire.other_end(socket)
                if other is not None:
                    yield other, other.part

    def reset_power(self) -> None:
        for socket in self.sockets:
            socket.is_powered = False

    def get_symbol(self) -> str:
        return PART_SYMBOLS[self.category]

    def __repr__(self) -> str:
        state = "" if self.energized is None else f", energized={self.energized}"
        return f"Part({self.part_id}, {self.category.value}{state})"
