"""
simulation/power_propagation.py

Combinational power propagation with no Qt dependencies.

One call to ``evaluate()`` recomputes ``is_powered`` for every socket:
all sockets are cleared, then power floods outward from every source's
output socket along wires and through parts whose conduction rule allows
it. A socket that is already powered is never expanded again, which makes
closed loops terminate and the result independent of visiting order.
"""

import logging
from typing import Callable, Iterable, Optional

from models.part import Part, PartCategory
from models.socket import Socket, SocketRole

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Conduction rules: (part, entry socket) -> sockets power continues to
# ----------------------------------------------------------------------


def _never(part: Part, socket: Socket) -> tuple[Socket, ...]:
    return ()


def _switched(part: Part, socket: Socket) -> tuple[Socket, ...]:
    """Input <-> Output while the part is energized."""
    if not part.energized:
        return ()
    if socket.role is SocketRole.INPUT:
        target = part.get_socket(SocketRole.OUTPUT)
    elif socket.role is SocketRole.OUTPUT:
        target = part.get_socket(SocketRole.INPUT)
    else:
        return ()
    return (target,) if target is not None else ()


# A joint's single socket already fans out over its wires, so there is
# nothing further to pass through the part itself.
CONDUCTION_RULES: dict[PartCategory, Callable[[Part, Socket], tuple[Socket, ...]]] = {
    PartCategory.SOURCE: _never,
    PartCategory.TOGGLE_SWITCH: _switched,
    PartCategory.TIMED_BUTTON: _switched,
    PartCategory.CONTROLLED_SWITCH: _switched,
    PartCategory.INVERTER: _switched,
    PartCategory.INDICATOR: _never,
    PartCategory.JOINT: _never,
}


class PowerPropagationEngine:
    """
    Flood-fill power from sources through the circuit graph.

    Uses an explicit stack, so graph size is not limited by recursion
    depth. Part state (``energized``) is read, never written.
    """

    def __init__(self):
        self.last_visit_count = 0

    def onward_sockets(self, socket: Socket) -> tuple[Socket, ...]:
        """
        Sockets that power entering ``socket`` continues to inside its part.

        Control sockets are dead ends for every category.
        """
        if socket.role is SocketRole.CONTROL:
            return ()
        part = socket.part
        return CONDUCTION_RULES[part.category](part, socket)

    @staticmethod
    def reset(parts: Iterable[Part]) -> None:
        """Clear ``is_powered`` on every socket of every part."""
        for part in parts:
            part.reset_power()

    def propagate(self, socket: Socket, live: Optional[set[Socket]] = None) -> int:
        """
        Power ``socket`` and everything reachable from it.

        Args:
            socket: Where power enters.
            live: If given, sockets outside this set are never entered
                (stale wire ends left behind by a removed part).

        Returns:
            Number of sockets newly powered by this call.
        """
        visited = 0
        stack = [socket]
        while stack:
            current = stack.pop()
            if current.is_powered:
                continue
            if live is not None and current not in live:
                continue
            current.is_powered = True
            visited += 1

            for wire in current.wires:
                other = wire.other_end(current)
                if other is not None and not other.is_powered:
                    stack.append(other)

            for onward in self.onward_sockets(current):
                if not onward.is_powered:
                    stack.append(onward)
        return visited

    def evaluate(self, parts: list[Part]) -> set[Socket]:
        """
        Run one full propagation pass.

        Returns:
            The set of powered sockets.
        """
        self.reset(parts)
        live = {socket for part in parts for socket in part.sockets}

        visited = 0
        for part in parts:
            if part.category is not PartCategory.SOURCE:
                continue
            output = part.get_socket(SocketRole.OUTPUT)
            if output is not None:
                visited += self.propagate(output, live)

        self.last_visit_count = visited
        logger.debug("Propagation pass: %d of %d sockets powered", visited, len(live))
        return {socket for socket in live if socket.is_powered}
