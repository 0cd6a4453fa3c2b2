"""
StepDriver - Calls SimulationController.step() at frame cadence.

The simulation itself never schedules anything; this is the Qt side that
keeps it running while a window is open. A single QTimer is created on
first start and reused afterwards.
"""

import logging

from PyQt6.QtCore import QTimer

from simulation.constants import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)


class StepDriver:
    """Repeating timer that advances a SimulationController."""

    def __init__(self, simulation_ctrl, interval_ms: int = FRAME_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError(f"Step interval must be positive, got {interval_ms!r}")
        self.simulation_ctrl = simulation_ctrl
        self.interval_ms = interval_ms
        self._timer = None

    def start(self) -> None:
        """Start stepping (restarts the interval if already running)."""
        if self._timer is None:
            self._timer = QTimer()
            self._timer.setSingleShot(False)
            self._timer.timeout.connect(self._on_timeout)
        self._timer.start(self.interval_ms)
        logger.debug("Step driver started at %d ms", self.interval_ms)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            logger.debug("Step driver stopped")

    def is_running(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def set_interval(self, interval_ms: int) -> None:
        """Change the cadence; applied immediately when running."""
        if interval_ms <= 0:
            raise ValueError(f"Step interval must be positive, got {interval_ms!r}")
        self.interval_ms = interval_ms
        if self._timer is not None:
            self._timer.setInterval(interval_ms)

    def _on_timeout(self) -> None:
        try:
            self.simulation_ctrl.step()
        except (TypeError, AttributeError, RuntimeError, ValueError) as e:
            # A failing step must not leave a timer firing into it forever
            logger.error("Simulation step failed, stopping: %s", e)
            self.stop()
