"""
Command Pattern Implementation for Undo/Redo.

Each command keeps references to the parts and wires it touched, so redo
puts back the same objects rather than equivalent copies. Later commands
that point at those objects stay valid across undo/redo.
Commands are executed through the CircuitController to maintain consistency.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models.part import Part, PartCategory
from models.socket import Socket
from models.wire import Wire


class Command(ABC):
    """Base class for undoable commands."""

    @abstractmethod
    def execute(self) -> None:
        """Execute the command (perform the action)."""

    @abstractmethod
    def undo(self) -> None:
        """Undo the command (reverse the action)."""

    def get_description(self) -> str:
        """Return a human-readable description of this command."""
        return self.__class__.__name__


def _restore(controller, joints: list[Part], wires: list[Wire]) -> None:
    for joint in joints:
        controller.restore_part(joint)
    for wire in wires:
        controller.restore_wire(wire)


class CreatePartCommand(Command):
    """Command to add a part to the circuit."""

    def __init__(self, controller, category, position: tuple[float, float] = (0.0, 0.0)):
        self.controller = controller
        self.category = PartCategory(category)
        self.position = position
        self.part: Optional[Part] = None

    def execute(self) -> None:
        if self.part is None:
            self.part = self.controller.create_part(self.category, self.position)
        else:
            self.controller.restore_part(self.part)

    def undo(self) -> None:
        if self.part is not None:
            self.controller.delete_part(self.part)

    def get_description(self) -> str:
        return f"Add {self.category.value}"


class DeletePartCommand(Command):
    """Command to delete a part along with its wires and orphaned joints."""

    def __init__(self, controller, part: Part):
        self.controller = controller
        self.part = part
        self.removed_wires: list[Wire] = []
        self.removed_joints: list[Part] = []

    def execute(self) -> None:
        self.removed_wires, self.removed_joints = self.controller.delete_part(self.part)

    def undo(self) -> None:
        self.controller.restore_part(self.part)
        _restore(self.controller, self.removed_joints, self.removed_wires)

    def get_description(self) -> str:
        return f"Delete {self.part.part_id}"


class ConnectWireCommand(Command):
    """Command to wire two sockets together."""

    def __init__(self, controller, socket_a: Socket, socket_b: Socket):
        self.controller = controller
        self.socket_a = socket_a
        self.socket_b = socket_b
        self.wire: Optional[Wire] = None
        self.removed_joints: list[Part] = []

    def execute(self) -> None:
        if self.wire is None:
            self.wire = self.controller.connect_wire(self.socket_a, self.socket_b)
        else:
            _restore(self.controller, self.removed_joints, [self.wire])

    def undo(self) -> None:
        if self.wire is not None:
            # A joint whose only wire was this one disappears with it
            self.removed_joints = self.controller.disconnect_wire(self.wire)

    def get_description(self) -> str:
        return f"Connect {self.socket_a.part.part_id} to {self.socket_b.part.part_id}"


class DisconnectWireCommand(Command):
    """Command to remove a wire."""

    def __init__(self, controller, wire: Wire):
        self.controller = controller
        self.wire = wire
        self.removed_joints: list[Part] = []

    def execute(self) -> None:
        self.removed_joints = self.controller.disconnect_wire(self.wire)

    def undo(self) -> None:
        _restore(self.controller, self.removed_joints, [self.wire])

    def get_description(self) -> str:
        return f"Disconnect {self.wire.a.part.part_id} from {self.wire.b.part.part_id}"


class InteractCommand(Command):
    """Command to toggle a switch or press a button."""

    def __init__(self, controller, part: Part, now: Optional[float] = None):
        self.controller = controller
        self.part = part
        self.now = now
        self.old_state: Optional[tuple[Optional[bool], Optional[float]]] = None
        self.new_state: Optional[tuple[Optional[bool], Optional[float]]] = None

    def execute(self) -> None:
        if self.new_state is not None:
            self.controller.set_part_state(self.part, *self.new_state)
            return
        self.old_state = (self.part.energized, self.part.deadline)
        self.controller.interact(self.part, self.now)
        self.new_state = (self.part.energized, self.part.deadline)

    def undo(self) -> None:
        if self.old_state is not None:
            self.controller.set_part_state(self.part, *self.old_state)

    def get_description(self) -> str:
        return f"Interact with {self.part.part_id}"


class MovePartCommand(Command):
    """Command to move a part to a new position."""

    def __init__(
        self,
        controller,
        part: Part,
        new_position: tuple[float, float],
        old_position: Optional[tuple[float, float]] = None,
    ):
        self.controller = controller
        self.part = part
        self.new_position = new_position
        self.old_position = old_position

    def execute(self) -> None:
        if self.old_position is None:
            self.old_position = self.part.position
        self.controller.move_part(self.part, self.new_position)

    def undo(self) -> None:
        if self.old_position is not None:
            self.controller.move_part(self.part, self.old_position)

    def get_description(self) -> str:
        return f"Move {self.part.part_id}"


class RotatePartCommand(Command):
    """Command to rotate a part by 90 degrees."""

    def __init__(self, controller, part: Part, clockwise: bool = True):
        self.controller = controller
        self.part = part
        self.clockwise = clockwise

    def execute(self) -> None:
        self.controller.rotate_part(self.part, self.clockwise)

    def undo(self) -> None:
        self.controller.rotate_part(self.part, not self.clockwise)

    def get_description(self) -> str:
        return f"Rotate {self.part.part_id}"


class CompoundCommand(Command):
    """Command that groups multiple commands into a single undo step."""

    def __init__(self, commands: list[Command], description: str = "Multiple actions"):
        self.commands = commands
        self.description = description

    def execute(self) -> None:
        for command in self.commands:
            command.execute()

    def undo(self) -> None:
        for command in reversed(self.commands):
            command.undo()

    def get_description(self) -> str:
        return self.description
