"""
Qt front-end pieces for the logic-circuit simulator.

Only the step driver lives here; everything it drives is Qt-free.
"""

from .step_driver import StepDriver

__all__ = [
    'StepDriver',
]
