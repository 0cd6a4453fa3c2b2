"""
CircuitController - Orchestrates part and wire edits.

This module contains no Qt dependencies. It manages the CircuitModel
and notifies views of changes through an observer pattern.
"""

import logging
import math
import time
from typing import Any, Callable, Optional

from models.circuit import CircuitModel
from models.part import Part, PartCategory
from models.serialization import InvalidTopologyError, deserialize, serialize
from models.socket import Socket, SocketRole
from models.wire import Wire
from simulation.connectivity import ConnectivityAnalyzer, DragFollowPolicy
from simulation.constants import DUPLICATE_OFFSET
from simulation.logic_clock import LogicClock

logger = logging.getLogger(__name__)

QUARTER_TURN = math.pi / 2


class CircuitController:
    """
    Controller for circuit part and wire operations.

    Manages the CircuitModel and notifies registered observers when
    the model changes. Views register callbacks to stay in sync.

    Observer events:
        part_added (Part) - A part was added
        part_removed (Part) - A part was removed (directly or as an orphaned joint)
        part_moved (Part) - A part was moved
        part_rotated (Part) - A part was rotated
        part_interacted (Part) - A part's energized state was changed by the user
        wire_added (Wire) - A wire was added
        wire_removed (Wire) - A wire was removed
        wire_reattached (Wire) - One end of a wire moved to another socket
        circuit_cleared (None) - The entire circuit was cleared
        model_loaded (None) - Circuit rebuilt from serialized data
        circuit_stepped (StepResult) - A simulation step finished
    """

    def __init__(
        self,
        model: Optional[CircuitModel] = None,
        logic_clock: Optional[LogicClock] = None,
        clock: Callable[[], float] = time.monotonic,
        drag_policy: DragFollowPolicy = DragFollowPolicy.DISTANCE_RATIO,
    ):
        self.model = model or CircuitModel()
        self.logic_clock = logic_clock or LogicClock()
        self.clock = clock
        self.analyzer = ConnectivityAnalyzer(drag_policy)
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for model change events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str, data: Any) -> None:
        """Notify all observers of a model change."""
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError, ValueError) as e:
                logger.error("Error notifying observer: %s", e)

    def _notify_removed(self, wires: list[Wire], joints: list[Part]) -> None:
        for wire in wires:
            self._notify('wire_removed', wire)
        for joint in joints:
            self._notify('part_removed', joint)

    # --- Part operations ---

    def create_part(self, category, position: tuple[float, float] = (0.0, 0.0)) -> Part:
        """
        Create and add a new part to the circuit.

        Generates a unique ID using the part counter (PWR1, SW1, J1, etc.).

        Returns:
            The newly created Part.
        """
        part = self.model.create_part(PartCategory(category), position)
        logger.info("Created %s at %s", part.part_id, position)
        self._notify('part_added', part)
        return part

    def restore_part(self, part: Part) -> None:
        """Put a previously removed part back, without wires (used by undo)."""
        if self.model.has_part(part):
            return
        self.model.add_part(part)
        self._notify('part_added', part)

    def delete_part(self, part: Part) -> tuple[list[Wire], list[Part]]:
        """
        Remove a part, every wire touching it, and joints left without wires.

        Returns:
            (removed_wires, removed_joints) as reported by the model.
        """
        if not self.model.has_part(part):
            logger.debug("delete_part: %r is not in the circuit", part)
            return [], []
        removed_wires, removed_joints = self.model.remove_part(part)
        logger.info(
            "Deleted %s (%d wires, %d orphaned joints)",
            part.part_id, len(removed_wires), len(removed_joints),
        )
        for wire in removed_wires:
            self._notify('wire_removed', wire)
        self._notify('part_removed', part)
        for joint in removed_joints:
            self._notify('part_removed', joint)
        return removed_wires, removed_joints

    def move_part(self, part: Part, position: tuple[float, float]) -> None:
        """Move a part to a new position."""
        if not self.model.has_part(part):
            logger.debug("move_part: %r is not in the circuit", part)
            return
        part.position = position
        self._notify('part_moved', part)

    def rotate_part(self, part: Part, clockwise: bool = True) -> None:
        """Rotate a part a quarter turn (rotation is in radians)."""
        if not self.model.has_part(part):
            logger.debug("rotate_part: %r is not in the circuit", part)
            return
        delta = QUARTER_TURN if clockwise else -QUARTER_TURN
        part.rotation = (part.rotation + delta) % (2 * math.pi)
        self._notify('part_rotated', part)

    def interact(self, part: Part, now: Optional[float] = None) -> bool:
        """
        Apply a user interaction (toggle / press) to a part.

        Args:
            part: The part clicked.
            now: Interaction time; defaults to the controller's clock.

        Returns:
            True if the part's state changed.
        """
        if not self.model.has_part(part):
            logger.debug("interact: %r is not in the circuit", part)
            return False
        if now is None:
            now = self.clock()
        changed = self.logic_clock.interact(part, now)
        if changed:
            self._notify('part_interacted', part)
        return changed

    def set_part_state(self, part: Part, energized: Optional[bool], deadline: Optional[float] = None) -> None:
        """Overwrite a part's sequential state (used by undo)."""
        part.energized = energized
        part.deadline = deadline
        self._notify('part_interacted', part)

    # --- Wire operations ---

    def connect_wire(self, socket_a: Socket, socket_b: Socket) -> Wire:
        """
        Create a wire between two sockets.

        Raises:
            InvalidTopologyError: If either socket is not in the circuit.

        Returns:
            The newly created Wire.
        """
        wire = self.model.connect_wire(socket_a, socket_b)
        logger.info("Connected %r", wire)
        self._notify('wire_added', wire)
        return wire

    def restore_wire(self, wire: Wire) -> None:
        """Re-register a previously removed wire (used by undo)."""
        if self.model.has_wire(wire):
            return
        self.model.add_wire(wire)
        self._notify('wire_added', wire)

    def disconnect_wire(self, wire: Wire) -> list[Part]:
        """
        Remove a wire, and any joint it leaves without wires.

        Returns:
            The joints removed as a consequence.
        """
        if not self.model.has_wire(wire):
            logger.debug("disconnect_wire: %r is not in the circuit", wire)
            return []
        removed_joints = self.model.disconnect_wire(wire)
        logger.info("Disconnected %r", wire)
        self._notify_removed([wire], removed_joints)
        return removed_joints

    def detach_to_joint(self, socket: Socket, position: tuple[float, float]) -> Optional[Part]:
        """
        Pull every wire off ``socket`` onto a new joint at ``position``.

        Returns:
            The new joint, or None if the socket had no wires.
        """
        if not self.model.owns_socket(socket):
            raise InvalidTopologyError(
                f"Socket {socket.role.value} of '{socket.part.part_id}' is not in this circuit."
            )
        if not socket.wires:
            return None

        joint = self.create_part(PartCategory.JOINT, position)
        target = joint.get_socket(SocketRole.PASS_THROUGH)
        for wire in list(socket.wires):
            self.model.reattach_wire(wire, socket, target)
            self._notify('wire_reattached', wire)
        return joint

    def merge_joint_into(self, joint: Part, target_socket: Socket) -> None:
        """
        Move every wire of ``joint`` onto ``target_socket`` and drop the joint.

        Wires that collapse onto themselves or duplicate an existing wire
        are consolidated away afterwards.
        """
        if not joint.is_joint or not self.model.has_part(joint):
            logger.debug("merge_joint_into: %r is not a joint in the circuit", joint)
            return
        if target_socket.part is joint:
            return
        if not self.model.owns_socket(target_socket):
            raise InvalidTopologyError(
                f"Socket {target_socket.role.value} of '{target_socket.part.part_id}' is not in this circuit."
            )

        source = joint.get_socket(SocketRole.PASS_THROUGH)
        for wire in list(source.wires):
            self.model.reattach_wire(wire, source, target_socket)
            self._notify('wire_reattached', wire)
        self.delete_part(joint)
        self.consolidate_wires()

    def consolidate_wires(self) -> int:
        """
        Remove wires from a socket to itself and duplicates (the older wire is kept).

        Returns:
            The number of wires removed.
        """
        redundant = []
        kept: list[Wire] = []
        for wire in self.model.wires:
            if wire.is_self_loop() or any(wire.same_endpoints(other) for other in kept):
                redundant.append(wire)
            else:
                kept.append(wire)

        for wire in redundant:
            self.disconnect_wire(wire)
        if redundant:
            logger.info("Consolidated %d redundant wires", len(redundant))
        return len(redundant)

    # --- Selection operations ---

    def drag_weights(self, part: Part) -> dict[Part, float]:
        """Follow weights for the joints hanging off a dragged part."""
        return self.analyzer.weights_for_drag_from(part)

    def enclosed_joints(self, selected: list[Part]) -> set[Part]:
        """Unselected joints that travel with a group move of ``selected``."""
        return self.analyzer.enclosed_joints(self.model.parts, selected)

    def duplicate_parts(self, selected: list[Part], offset: float = DUPLICATE_OFFSET) -> list[Part]:
        """
        Copy the selection, its enclosed joints, and its internal wires.

        The copy goes through the compact serialized form, gets fresh ids,
        and is shifted by ``offset`` on both axes.

        Returns:
            The new parts, in the order they were serialized.
        """
        chosen = {part for part in selected if self.model.has_part(part)}
        if not chosen:
            return []
        chosen |= self.enclosed_joints(list(chosen))

        group = [part for part in self.model.parts if part in chosen]
        internal = [wire for wire in self.model.wires if wire.a.part in chosen and wire.b.part in chosen]

        data = serialize(group, internal, compact=True)
        parts, wires = deserialize(data, make_id=self.model.new_part_id)
        for part in parts:
            x, y = part.position
            part.position = (x + offset, y + offset)

        self.model.adopt(parts, wires)
        logger.info("Duplicated %d parts and %d wires", len(parts), len(wires))
        for part in parts:
            self._notify('part_added', part)
        for wire in wires:
            self._notify('wire_added', wire)
        return parts

    # --- Circuit operations ---

    def clear_circuit(self) -> None:
        """Clear the entire circuit."""
        self.model.clear()
        self.logic_clock.reset()
        self._notify('circuit_cleared', None)

    def load_circuit(self, data) -> None:
        """
        Replace the circuit with one rebuilt from serialized data.

        The new graph is built in full before the current one is touched,
        so a failed load leaves the circuit unchanged. The logic clock keeps
        its beat: loaded sockets start unpowered, and ticking before the
        first propagation pass would discard the loaded states.

        Raises:
            InvalidTopologyError: If the data is malformed.
        """
        loaded = CircuitModel.from_dict(data)
        self.model.replace_with(loaded)
        logger.info("Loaded circuit: %r", self.model)
        self._notify('model_loaded', None)

    def export_circuit(self, compact: bool = False):
        """Serialize the current circuit."""
        return self.model.to_dict(compact=compact)
