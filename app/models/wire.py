"""
Wire - Undirected edge between two sockets.

This module contains no Qt dependencies. A wire is registered on both of
its endpoint sockets by ``attach()`` and unregistered by ``detach()``;
the socket wire lists are never edited directly by callers.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .socket import Socket

if TYPE_CHECKING:
    from .part import Part


@dataclass(eq=False)
class Wire:
    """
    Unordered pair of sockets.

    A wire may start and end on the same socket (a self-loop); the
    simulation treats that as a normal, harmless cycle.
    """

    a: Socket
    b: Socket

    def attach(self) -> None:
        """Register this wire on both endpoints."""
        self.a.connect(self)
        self.b.connect(self)

    def detach(self) -> None:
        """Unregister this wire from both endpoints."""
        self.a.disconnect(self)
        self.b.disconnect(self)

    def other_end(self, socket: Socket) -> Optional[Socket]:
        """
        Get the socket at the opposite end.

        Returns:
            The other endpoint, or None if ``socket`` is not an endpoint.
        """
        if socket is self.a:
            return self.b
        if socket is self.b:
            return self.a
        return None

    def endpoints(self) -> tuple[Socket, Socket]:
        return (self.a, self.b)

    def connects_part(self, part: "Part") -> bool:
        """Check if this wire touches any socket of ``part``."""
        return self.a.part is part or self.b.part is part

    def connects_socket(self, socket: Socket) -> bool:
        return self.a is socket or self.b is socket

    def is_self_loop(self) -> bool:
        """True when both ends are the same socket."""
        return self.a is self.b

    def same_endpoints(self, other: "Wire") -> bool:
        """Check if ``other`` joins the same two sockets, in either direction."""
        return (self.a is other.a and self.b is other.b) or (self.a is other.b and self.b is other.a)

    def __repr__(self) -> str:
        return (
            f"Wire({self.a.part.part_id}.{self.a.role.value} <-> "
            f"{self.b.part.part_id}.{self.b.role.value})"
        )
