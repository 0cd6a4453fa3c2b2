"""Tests for the Qt step driver.

The driver should create one QTimer on first start and reuse it, and
each timeout should advance the simulation by exactly one step.
"""

from unittest.mock import MagicMock, patch

import pytest
from GUI.step_driver import StepDriver
from simulation.constants import FRAME_INTERVAL_MS


class TestTimerLifecycle:
    @patch("GUI.step_driver.QTimer")
    def test_timer_created_on_first_start(self, MockQTimer):
        mock_timer = MagicMock()
        MockQTimer.return_value = mock_timer
        driver = StepDriver(MagicMock())

        driver.start()

        MockQTimer.assert_called_once()
        mock_timer.timeout.connect.assert_called_once_with(driver._on_timeout)
        mock_timer.start.assert_called_once_with(FRAME_INTERVAL_MS)

    @patch("GUI.step_driver.QTimer")
    def test_timer_reused_on_restart(self, MockQTimer):
        mock_timer = MagicMock()
        MockQTimer.return_value = mock_timer
        driver = StepDriver(MagicMock(), interval_ms=33)

        driver.start()
        driver.stop()
        driver.start()

        MockQTimer.assert_called_once()
        assert mock_timer.start.call_count == 2
        mock_timer.stop.assert_called_once()

    @patch("GUI.step_driver.QTimer")
    def test_stop_before_start_is_safe(self, MockQTimer):
        driver = StepDriver(MagicMock())
        driver.stop()
        assert not driver.is_running()
        MockQTimer.assert_not_called()

    @patch("GUI.step_driver.QTimer")
    def test_is_running_reflects_timer(self, MockQTimer):
        mock_timer = MagicMock()
        mock_timer.isActive.return_value = True
        MockQTimer.return_value = mock_timer
        driver = StepDriver(MagicMock())
        driver.start()
        assert driver.is_running()

    @patch("GUI.step_driver.QTimer")
    def test_set_interval_updates_running_timer(self, MockQTimer):
        mock_timer = MagicMock()
        MockQTimer.return_value = mock_timer
        driver = StepDriver(MagicMock())
        driver.start()
        driver.set_interval(100)
        mock_timer.setInterval.assert_called_once_with(100)

    def test_rejects_bad_interval(self):
        with pytest.raises(ValueError):
            StepDriver(MagicMock(), interval_ms=0)


class TestTimeout:
    def test_timeout_steps_simulation(self):
        simulation = MagicMock()
        driver = StepDriver(simulation)
        driver._on_timeout()
        simulation.step.assert_called_once_with()

    @patch("GUI.step_driver.QTimer")
    def test_failing_step_stops_timer(self, MockQTimer):
        mock_timer = MagicMock()
        MockQTimer.return_value = mock_timer
        simulation = MagicMock()
        simulation.step.side_effect = RuntimeError("boom")
        driver = StepDriver(simulation)
        driver.start()

        driver._on_timeout()

        mock_timer.stop.assert_called_once()
