"""
CircuitModel - Central data store for circuit state.

This module contains no Qt dependencies. It owns the part and wire lists
and keeps the graph invariants across structural edits:

- every wire is registered on both of its endpoint sockets;
- no wire outlives the part that owns one of its sockets;
- a joint left with no wires is removed straight away.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .part import PART_SYMBOLS, Part, PartCategory
from .serialization import InvalidTopologyError, deserialize, serialize
from .socket import Socket
from .wire import Wire

logger = logging.getLogger(__name__)


@dataclass
class CircuitModel:
    """
    Central data store holding all circuit state.

    Parts and wires are kept in creation order. Part ids are generated from
    a per-symbol counter (PWR1, SW1, J1, ...).
    """

    parts: list[Part] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    part_counter: dict[str, int] = field(default_factory=dict)

    # --- Lookup ---

    def get_part(self, part_id: str) -> Optional[Part]:
        for part in self.parts:
            if part.part_id == part_id:
                return part
        return None

    def has_part(self, part: Part) -> bool:
        return any(existing is part for existing in self.parts)

    def has_wire(self, wire: Wire) -> bool:
        return any(existing is wire for existing in self.wires)

    def owns_socket(self, socket: Socket) -> bool:
        """Check that ``socket`` belongs to a part of this model."""
        return self.has_part(socket.part) and any(s is socket for s in socket.part.sockets)

    def wires_of(self, part: Part) -> list[Wire]:
        """Wires touching any socket of ``part``, in model order."""
        return [wire for wire in self.wires if wire.connects_part(part)]

    # --- Part operations ---

    def new_part_id(self, category: PartCategory) -> str:
        """Generate an unused id for a part of ``category``."""
        symbol = PART_SYMBOLS[category]
        taken = {part.part_id for part in self.parts}
        count = self.part_counter.get(symbol, 0)
        while True:
            count += 1
            candidate = f"{symbol}{count}"
            if candidate not in taken:
                break
        self.part_counter[symbol] = count
        return candidate

    def create_part(self, category: PartCategory, position: tuple[float, float] = (0.0, 0.0)) -> Part:
        """Create a part with a fresh id and add it to the circuit."""
        part = Part(self.new_part_id(category), category, position)
        self.parts.append(part)
        return part

    def add_part(self, part: Part) -> None:
        """
        Add an existing part (used by undo and loading).

        Raises:
            InvalidTopologyError: If a part with the same id is present.
        """
        if self.get_part(part.part_id) is not None:
            raise InvalidTopologyError(f"Duplicate part id '{part.part_id}'.")
        self.parts.append(part)

    def remove_part(self, part: Part) -> tuple[list[Wire], list[Part]]:
        """
        Remove a part, every wire touching it, and any joint orphaned by that.

        Returns:
            (removed_wires, removed_joints). The removed part itself is not
            in removed_joints. Both lists are empty if the part is unknown.
        """
        if not self.has_part(part):
            return [], []

        removed_wires = self.wires_of(part)
        neighbors = []
        for wire in removed_wires:
            for socket in wire.endpoints():
                if socket.part is not part and not any(n is socket.part for n in neighbors):
                    neighbors.append(socket.part)
            self._unlink_wire(wire)

        self.parts = [existing for existing in self.parts if existing is not part]

        removed_joints = [joint for joint in neighbors if self.cleanup_orphaned_joint(joint)]
        return removed_wires, removed_joints

    def cleanup_orphaned_joint(self, part: Part) -> bool:
        """
        Remove ``part`` if it is a joint in this model with no wires.

        Returns:
            True if the joint was removed.
        """
        if not part.is_joint or not self.has_part(part):
            return False
        if part.wire_count() > 0:
            return False
        self.parts = [existing for existing in self.parts if existing is not part]
        logger.debug("Removed orphaned joint %s", part.part_id)
        return True

    # --- Wire operations ---

    def connect_wire(self, socket_a: Socket, socket_b: Socket) -> Wire:
        """
        Create a wire between two sockets and register it on both.

        Raises:
            InvalidTopologyError: If either socket is not part of this circuit.
        """
        for socket in (socket_a, socket_b):
            if not self.owns_socket(socket):
                raise InvalidTopologyError(
                    f"Socket {socket.role.value} of '{socket.part.part_id}' is not in this circuit."
                )
        wire = Wire(socket_a, socket_b)
        wire.attach()
        self.wires.append(wire)
        return wire

    def add_wire(self, wire: Wire) -> None:
        """Add an existing, unregistered wire (used by undo)."""
        if not (self.owns_socket(wire.a) and self.owns_socket(wire.b)):
            raise InvalidTopologyError(f"{wire!r} references a socket outside this circuit.")
        wire.attach()
        self.wires.append(wire)

    def disconnect_wire(self, wire: Wire) -> list[Part]:
        """
        Remove a wire and clean up joints it leaves without wires.

        Returns:
            The joints removed as a consequence (empty if the wire is unknown).
        """
        if not self.has_wire(wire):
            return []
        self._unlink_wire(wire)
        removed = []
        for socket in wire.endpoints():
            if self.cleanup_orphaned_joint(socket.part):
                removed.append(socket.part)
        return removed

    def reattach_wire(self, wire: Wire, old_socket: Socket, new_socket: Socket) -> None:
        """Move one end of ``wire`` from ``old_socket`` to ``new_socket``."""
        wire.detach()
        if wire.a is old_socket:
            wire.a = new_socket
        if wire.b is old_socket:
            wire.b = new_socket
        wire.attach()

    def adopt(self, parts: list[Part], wires: list[Wire]) -> None:
        """
        Take over parts and already-attached wires built elsewhere.

        Raises:
            InvalidTopologyError: If a part id clashes with an existing one.
        """
        taken = {part.part_id for part in self.parts}
        for part in parts:
            if part.part_id in taken:
                raise InvalidTopologyError(f"Duplicate part id '{part.part_id}'.")
            taken.add(part.part_id)
        self.parts.extend(parts)
        self.wires.extend(wires)

    def _unlink_wire(self, wire: Wire) -> None:
        wire.detach()
        self.wires = [existing for existing in self.wires if existing is not wire]

    # --- Circuit operations ---

    def clear(self) -> None:
        """Clear all circuit data."""
        for wire in self.wires:
            wire.detach()
        self.parts.clear()
        self.wires.clear()
        self.part_counter.clear()

    def replace_with(self, other: "CircuitModel") -> None:
        """Take over another model's contents, keeping this object's identity."""
        self.parts = other.parts
        self.wires = other.wires
        self.part_counter = other.part_counter

    # --- Serialization ---

    def to_dict(self, compact: bool = False):
        """Serialize circuit (readable dict, or compact list)."""
        return serialize(self.parts, self.wires, compact=compact)

    @classmethod
    def from_dict(cls, data) -> "CircuitModel":
        """
        Deserialize a circuit.

        Raises:
            InvalidTopologyError: If the data is malformed.
        """
        model = cls()
        # Compact data has no ids; the counter keeps generated ones unique.
        make_id = model.new_part_id if isinstance(data, list) else None
        model.parts, model.wires = deserialize(data, make_id=make_id)
        return model

    def __repr__(self) -> str:
        return f"CircuitModel(parts={len(self.parts)}, wires={len(self.wires)})"
