"""
Circuit serialization - converts between circuit graphs and plain data.

This module contains no Qt dependencies and does no file I/O. It is the
reconstruction boundary: everything coming from outside is validated here
and rejected with InvalidTopologyError before any part or wire is built
into a live model.

Two formats are supported:

Readable (for files)::

    {"version": "1.0",
     "parts": [{"id": "SW1", "type": "ToggleSwitch", "x": 0, "y": 0,
                "rotation": 0.0, "isOn": false}, ...],
     "wires": [{"startPartId": "PWR1", "startSocket": "Output",
                "endPartId": "SW1", "endSocket": "Input"}, ...]}

Compact (for sharing)::

    [3, [[typeNum, x, y, rot, state?], ...],
        [[startIndex, socketNum, endIndex, socketNum], ...]]

Older save files used different category and socket names ('POWER',
'WALL_SWITCH', 'left', 'right', ...); those are accepted on load.
"""

import logging
import math
from typing import Callable, Iterable, Optional

from .part import PART_SYMBOLS, Part, PartCategory
from .socket import Socket, SocketRole
from .wire import Wire

logger = logging.getLogger(__name__)

READABLE_VERSION = "1.0"
COMPACT_VERSION = 3

# Compact type numbers (index = number)
CATEGORY_CODES = [
    PartCategory.SOURCE,
    PartCategory.TOGGLE_SWITCH,
    PartCategory.TIMED_BUTTON,
    PartCategory.CONTROLLED_SWITCH,
    PartCategory.INVERTER,
    PartCategory.INDICATOR,
    PartCategory.JOINT,
]

# Compact socket numbers (index = number)
SOCKET_CODES = ["left", "right", "bottom", "control", "center"]

# Mapping from older serialized names to categories
# Used for backwards compatibility when loading saved circuits
_LEGACY_CATEGORY_NAMES = {
    "POWER": PartCategory.SOURCE,
    "WALL_SWITCH": PartCategory.TOGGLE_SWITCH,
    "BUTTON": PartCategory.TIMED_BUTTON,
    "AUTO_SWITCH": PartCategory.CONTROLLED_SWITCH,
    "INVERTER": PartCategory.INVERTER,
    "COLOR_LIGHT": PartCategory.INDICATOR,
    "JOINT": PartCategory.JOINT,
}

_LEGACY_SOCKET_NAMES = {
    "left": SocketRole.INPUT,
    "right": SocketRole.OUTPUT,
    "bottom": SocketRole.INPUT,
    "control": SocketRole.CONTROL,
    "center": SocketRole.PASS_THROUGH,
}

_ROLE_TO_CODE = {
    SocketRole.INPUT: 0,
    SocketRole.OUTPUT: 1,
    SocketRole.CONTROL: 3,
    SocketRole.PASS_THROUGH: 4,
}


class InvalidTopologyError(ValueError):
    """Raised when external circuit data does not describe a valid graph."""


# ----------------------------------------------------------------------
# Name resolution
# ----------------------------------------------------------------------


def parse_category(name) -> PartCategory:
    """
    Resolve a category name (canonical or legacy).

    Raises:
        InvalidTopologyError: If the name is not a known category.
    """
    if isinstance(name, PartCategory):
        return name
    if isinstance(name, str):
        if name in _LEGACY_CATEGORY_NAMES:
            return _LEGACY_CATEGORY_NAMES[name]
        try:
            return PartCategory(name)
        except ValueError:
            pass
    raise InvalidTopologyError(f"Unknown part category {name!r}.")


def parse_socket_role(name) -> SocketRole:
    """
    Resolve a socket role name (canonical or legacy).

    Raises:
        InvalidTopologyError: If the name is not a known role.
    """
    if isinstance(name, SocketRole):
        return name
    if isinstance(name, str):
        if name in _LEGACY_SOCKET_NAMES:
            return _LEGACY_SOCKET_NAMES[name]
        try:
            return SocketRole(name)
        except ValueError:
            pass
    raise InvalidTopologyError(f"Unknown socket role {name!r}.")


def resolve_socket(part: Part, name) -> Socket:
    """
    Find the socket called ``name`` on ``part``.

    Raises:
        InvalidTopologyError: If the role is unknown or the part has no such socket.
    """
    role = parse_socket_role(name)
    socket = part.get_socket(role)
    if socket is None:
        raise InvalidTopologyError(
            f"Part '{part.part_id}' ({part.category.value}) has no {role.value} socket."
        )
    return socket


def socket_code(socket: Socket) -> int:
    """Compact number for a socket ('bottom' for an indicator's input)."""
    if socket.part.category is PartCategory.INDICATOR:
        return SOCKET_CODES.index("bottom")
    return _ROLE_TO_CODE[socket.role]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


# ----------------------------------------------------------------------
# Serialize
# ----------------------------------------------------------------------


def serialize(parts: list[Part], wires: Iterable[Wire], compact: bool = False):
    """
    Serialize parts and wires.

    Wires whose endpoints are not both in ``parts`` are skipped.

    Args:
        parts: Parts to write, in order (their index is their compact id).
        wires: Wires to write.
        compact: True for the array format, False for the readable format.
    """
    index_of = {id(part): index for index, part in enumerate(parts)}
    kept = [w for w in wires if id(w.a.part) in index_of and id(w.b.part) in index_of]

    if compact:
        parts_data = []
        for part in parts:
            entry = [
                CATEGORY_CODES.index(part.category),
                round(part.position[0]),
                round(part.position[1]),
                round(part.rotation, 2),
            ]
            if part.has_state:
                entry.append(1 if part.energized else 0)
            parts_data.append(entry)
        wires_data = [
            [index_of[id(w.a.part)], socket_code(w.a), index_of[id(w.b.part)], socket_code(w.b)]
            for w in kept
        ]
        return [COMPACT_VERSION, parts_data, wires_data]

    parts_data = []
    for part in parts:
        entry = {
            "id": part.part_id,
            "type": part.category.value,
            "x": part.position[0],
            "y": part.position[1],
            "rotation": part.rotation,
        }
        if part.has_state:
            entry["isOn"] = bool(part.energized)
        parts_data.append(entry)
    wires_data = [
        {
            "startPartId": w.a.part.part_id,
            "startSocket": w.a.role.value,
            "endPartId": w.b.part.part_id,
            "endSocket": w.b.role.value,
        }
        for w in kept
    ]
    return {"version": READABLE_VERSION, "parts": parts_data, "wires": wires_data}


# ----------------------------------------------------------------------
# Deserialize
# ----------------------------------------------------------------------


def is_compact(data) -> bool:
    return isinstance(data, list) and len(data) > 0 and data[0] == COMPACT_VERSION


def validate_circuit_data(data) -> None:
    """
    Validate the structure of serialized circuit data.

    Checks shape only (lists, required fields, numeric positions); name
    and reference checks happen while the graph is built.

    Raises:
        InvalidTopologyError: With a descriptive message if anything is wrong.
    """
    if is_compact(data):
        if len(data) != 3 or not isinstance(data[1], list) or not isinstance(data[2], list):
            raise InvalidTopologyError("Compact data must be [version, parts, wires].")
        for i, entry in enumerate(data[1]):
            if not isinstance(entry, list) or len(entry) not in (4, 5):
                raise InvalidTopologyError(f"Part #{i + 1} must be [type, x, y, rotation, state?].")
            if not all(_is_number(v) for v in entry[1:4]):
                raise InvalidTopologyError(f"Part #{i + 1} position values must be numeric.")
        for i, entry in enumerate(data[2]):
            if not isinstance(entry, list) or len(entry) != 4:
                raise InvalidTopologyError(f"Wire #{i + 1} must be [start, socket, end, socket].")
        return

    if not isinstance(data, dict):
        raise InvalidTopologyError("Data does not contain a valid circuit object.")
    if "parts" not in data or not isinstance(data["parts"], list):
        raise InvalidTopologyError("Missing or invalid 'parts' list.")
    if "wires" not in data or not isinstance(data["wires"], list):
        raise InvalidTopologyError("Missing or invalid 'wires' list.")

    for i, part in enumerate(data["parts"]):
        if not isinstance(part, dict):
            raise InvalidTopologyError(f"Part #{i + 1} is not an object.")
        for key in ("id", "type"):
            if key not in part:
                raise InvalidTopologyError(f"Part #{i + 1} is missing required field '{key}'.")
        for key in ("x", "y", "rotation"):
            if key in part and not _is_number(part[key]):
                raise InvalidTopologyError(f"Part '{part['id']}' field '{key}' must be numeric.")
        if "isOn" in part and not isinstance(part["isOn"], bool):
            raise InvalidTopologyError(f"Part '{part['id']}' field 'isOn' must be a boolean.")

    for i, wire in enumerate(data["wires"]):
        if not isinstance(wire, dict):
            raise InvalidTopologyError(f"Wire #{i + 1} is not an object.")
        for key in ("startPartId", "startSocket", "endPartId", "endSocket"):
            if key not in wire:
                raise InvalidTopologyError(f"Wire #{i + 1} is missing required field '{key}'.")


def _default_id_factory() -> Callable[[PartCategory], str]:
    counters: dict[str, int] = {}

    def make_id(category: PartCategory) -> str:
        symbol = PART_SYMBOLS[category]
        counters[symbol] = counters.get(symbol, 0) + 1
        return f"{symbol}{counters[symbol]}"

    return make_id


def _connect(a: Socket, b: Socket) -> Wire:
    wire = Wire(a, b)
    wire.attach()
    return wire


def deserialize(
    data, make_id: Optional[Callable[[PartCategory], str]] = None
) -> tuple[list[Part], list[Wire]]:
    """
    Build fresh parts and wires from serialized data.

    Nothing outside the returned objects is touched, so a failure leaves
    any existing model as it was.

    Args:
        data: Readable dict or compact list.
        make_id: Id generator for new parts. Compact data always uses it
            (a per-call counter when omitted); readable data keeps its
            stored ids unless one is given.

    Returns:
        (parts, wires) with every wire registered on its sockets.

    Raises:
        InvalidTopologyError: If the data is malformed or references an
            unknown category, part, or socket.
    """
    validate_circuit_data(data)

    if is_compact(data):
        make_id = make_id or _default_id_factory()
        parts: list[Part] = []
        for i, entry in enumerate(data[1]):
            code = entry[0]
            if not isinstance(code, int) or isinstance(code, bool) or not 0 <= code < len(CATEGORY_CODES):
                raise InvalidTopologyError(f"Part #{i + 1} has unknown type number {code!r}.")
            category = CATEGORY_CODES[code]
            part = Part(make_id(category), category, (float(entry[1]), float(entry[2])), float(entry[3]))
            if len(entry) == 5 and part.has_state:
                part.energized = entry[4] == 1
            parts.append(part)

        wires: list[Wire] = []
        for i, entry in enumerate(data[2]):
            start_index, start_code, end_index, end_code = entry
            for index in (start_index, end_index):
                if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(parts):
                    raise InvalidTopologyError(f"Wire #{i + 1} references unknown part index {index!r}.")
            for code in (start_code, end_code):
                if not isinstance(code, int) or isinstance(code, bool) or not 0 <= code < len(SOCKET_CODES):
                    raise InvalidTopologyError(f"Wire #{i + 1} has unknown socket number {code!r}.")
            start = resolve_socket(parts[start_index], SOCKET_CODES[start_code])
            end = resolve_socket(parts[end_index], SOCKET_CODES[end_code])
            wires.append(_connect(start, end))

        logger.debug("Restored compact circuit: %d parts, %d wires", len(parts), len(wires))
        return parts, wires

    parts = []
    by_id: dict[str, Part] = {}
    for part_data in data["parts"]:
        stored_id = str(part_data["id"])
        if stored_id in by_id:
            raise InvalidTopologyError(f"Duplicate part id '{stored_id}'.")
        category = parse_category(part_data["type"])
        part_id = make_id(category) if make_id else stored_id
        part = Part(
            part_id,
            category,
            (float(part_data.get("x", 0.0)), float(part_data.get("y", 0.0))),
            float(part_data.get("rotation", 0.0)),
        )
        if "isOn" in part_data and part.has_state:
            part.energized = part_data["isOn"]
        by_id[stored_id] = part
        parts.append(part)

    wires = []
    for i, wire_data in enumerate(data["wires"]):
        ends = []
        for id_key, socket_key in (("startPartId", "startSocket"), ("endPartId", "endSocket")):
            part = by_id.get(str(wire_data[id_key]))
            if part is None:
                raise InvalidTopologyError(
                    f"Wire #{i + 1} references unknown part '{wire_data[id_key]}'."
                )
            ends.append(resolve_socket(part, wire_data[socket_key]))
        wires.append(_connect(ends[0], ends[1]))

    logger.debug("Restored circuit: %d parts, %d wires", len(parts), len(wires))
    return parts, wires
