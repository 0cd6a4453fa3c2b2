"""
SimulationController - Runs one simulation step at a time.

This module contains no Qt dependencies. Each step advances the logic
clock (if a beat has elapsed) and then re-propagates power through the
whole circuit. Something outside calls ``step()`` repeatedly; see
GUI.step_driver for the Qt timer that does so.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from models.circuit import CircuitModel
from models.socket import Socket
from simulation.logic_clock import LogicClock
from simulation.power_propagation import PowerPropagationEngine

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Result of one simulation step."""

    time: float
    ticked: bool = False
    powered: set[Socket] = field(default_factory=set)

    @property
    def powered_count(self) -> int:
        return len(self.powered)


class SimulationController:
    """
    Controller for the per-step simulation.

    Order within a step: tick, then propagate. Clocked parts sample their
    control sockets as the previous pass left them, and the new pass then
    reflects the states the tick produced.
    """

    def __init__(
        self,
        model: Optional[CircuitModel] = None,
        circuit_ctrl=None,
        engine: Optional[PowerPropagationEngine] = None,
        logic_clock: Optional[LogicClock] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        if model is None and circuit_ctrl is not None:
            model = circuit_ctrl.model
        self.model = model or CircuitModel()
        self.circuit_ctrl = circuit_ctrl  # For observer notifications
        self.engine = engine or PowerPropagationEngine()

        # Share the circuit controller's clock so interactions and ticks
        # agree on what time it is.
        if logic_clock is None and circuit_ctrl is not None:
            logic_clock = circuit_ctrl.logic_clock
        self.logic_clock = logic_clock or LogicClock()
        if clock is None:
            clock = circuit_ctrl.clock if circuit_ctrl is not None else time.monotonic
        self.clock = clock

        self.step_count = 0
        self.last_result: Optional[StepResult] = None

    def step(self, now: Optional[float] = None) -> StepResult:
        """
        Advance the simulation by one step.

        Args:
            now: Step time; defaults to the controller's clock.

        Returns:
            StepResult with the powered sockets after this step.
        """
        if now is None:
            now = self.clock()
        parts = self.model.parts

        ticked = self.logic_clock.advance(parts, now)
        powered = self.engine.evaluate(parts)

        self.step_count += 1
        result = StepResult(time=now, ticked=ticked, powered=powered)
        self.last_result = result
        if ticked:
            logger.debug("Step %d ticked; %d sockets powered", self.step_count, len(powered))

        if self.circuit_ctrl is not None:
            self.circuit_ctrl._notify('circuit_stepped', result)
        return result

    def evaluate(self) -> set[Socket]:
        """Re-propagate power without touching sequential state."""
        return self.engine.evaluate(self.model.parts)

    def reset(self) -> None:
        """Restart the logic clock so the next step ticks immediately."""
        self.logic_clock.reset()
        self.step_count = 0
        self.last_result = None
