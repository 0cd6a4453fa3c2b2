"""
Shared test fixtures for the logic-circuit simulator test suite.

All fixtures build pure-Python model objects (no Qt dependencies).
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, GUI, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from controllers.circuit_controller import CircuitController
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel
from models.part import PartCategory
from models.socket import SocketRole

IN = SocketRole.INPUT
OUT = SocketRole.OUTPUT
CTRL = SocketRole.CONTROL
PASS = SocketRole.PASS_THROUGH


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


def wire(model, part_a, role_a, part_b, role_b):
    """Helper to connect two parts by socket role."""
    return model.connect_wire(part_a.get_socket(role_a), part_b.get_socket(role_b))


@pytest.fixture
def model():
    return CircuitModel()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def controller(fake_clock):
    return CircuitController(clock=fake_clock)


@pytest.fixture
def simulation(controller):
    return SimulationController(circuit_ctrl=controller)


@pytest.fixture
def source_switch_lamp(model):
    """
    PWR1 -- SW1 -- LT1

    Returns (model, source, switch, lamp). The switch starts off.
    """
    source = model.create_part(PartCategory.SOURCE, (0.0, 0.0))
    switch = model.create_part(PartCategory.TOGGLE_SWITCH, (100.0, 0.0))
    lamp = model.create_part(PartCategory.INDICATOR, (200.0, 0.0))
    wire(model, source, OUT, switch, IN)
    wire(model, switch, OUT, lamp, IN)
    return model, source, switch, lamp


@pytest.fixture
def inverter_chain(model):
    """
    PWR1 -- SW1 -- J1 -- INV1.Control
                   PWR1 -- INV1.Input, INV1.Output -- LT1

    Returns (model, source, switch, inverter, lamp).
    """
    source = model.create_part(PartCategory.SOURCE, (0.0, 0.0))
    switch = model.create_part(PartCategory.TOGGLE_SWITCH, (100.0, 0.0))
    joint = model.create_part(PartCategory.JOINT, (150.0, 50.0))
    inverter = model.create_part(PartCategory.INVERTER, (200.0, 0.0))
    lamp = model.create_part(PartCategory.INDICATOR, (300.0, 0.0))
    wire(model, source, OUT, switch, IN)
    wire(model, switch, OUT, joint, PASS)
    wire(model, joint, PASS, inverter, CTRL)
    wire(model, source, OUT, inverter, IN)
    wire(model, inverter, OUT, lamp, IN)
    return model, source, switch, inverter, lamp
