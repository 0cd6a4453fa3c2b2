"""
Controllers for the logic-circuit simulator.

This package contains Qt-free controller classes that orchestrate
operations between models and views using an observer pattern.
"""

from .circuit_controller import CircuitController
from .simulation_controller import SimulationController, StepResult
from .undo_manager import UndoManager

__all__ = [
    "CircuitController",
    "SimulationController",
    "StepResult",
    "UndoManager",
]
