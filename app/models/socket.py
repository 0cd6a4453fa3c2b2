"""
Socket - Typed connection point owned by a Part.

This module contains no Qt dependencies. A socket is the endpoint of a
wire; its role only decides which way power may flow through the owning
part, never where the socket is drawn.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .part import Part
    from .wire import Wire


class SocketRole(str, Enum):
    """Role of a socket on its part."""

    INPUT = "Input"
    OUTPUT = "Output"
    CONTROL = "Control"
    PASS_THROUGH = "PassThrough"


@dataclass(eq=False)
class Socket:
    """
    Connection point on a part.

    Sockets compare by identity. ``wires`` may hold any number of wires
    (fan-out), and ``is_powered`` is rewritten on every propagation pass.
    """

    part: "Part"
    role: SocketRole
    is_powered: bool = False
    wires: list["Wire"] = field(default_factory=list)

    def connect(self, wire: "Wire") -> None:
        """Register a wire on this socket."""
        self.wires.append(wire)

    def disconnect(self, wire: "Wire") -> bool:
        """
        Remove the first reference to ``wire``.

        Returns:
            True if a reference was removed.
        """
        for index, existing in enumerate(self.wires):
            if existing is wire:
                del self.wires[index]
                return True
        return False

    def other_end(self, wire: "Wire") -> Optional["Socket"]:
        """Return the socket at the opposite end of ``wire``, or None."""
        return wire.other_end(self)

    def wire_count(self) -> int:
        return len(self.wires)

    def __repr__(self) -> str:
        state = "on" if self.is_powered else "off"
        return f"Socket({self.part.part_id}.{self.role.value}, {state}, wires={len(self.wires)})"
