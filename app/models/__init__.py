"""
Pure Python data models for the circuit simulator.

This package contains Qt-free data classes that represent the circuit
graph: parts, their sockets, and the wires between them.
All models use only Python standard library types (no PyQt6 dependencies).
"""

from .circuit import CircuitModel
from .part import (
    INITIAL_ENERGIZED,
    PART_SYMBOLS,
    SOCKET_LAYOUT,
    Part,
    PartCategory,
)
from .serialization import InvalidTopologyError, validate_circuit_data
from .socket import Socket, SocketRole
from .wire import Wire

__all__ = [
    "CircuitModel",
    "Part",
    "PartCategory",
    "SOCKET_LAYOUT",
    "INITIAL_ENERGIZED",
    "PART_SYMBOLS",
    "Socket",
    "SocketRole",
    "Wire",
    "InvalidTopologyError",
    "validate_circuit_data",
]
