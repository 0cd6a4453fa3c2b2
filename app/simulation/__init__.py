from .connectivity import ConnectivityAnalyzer, DragFollowPolicy
from .logic_clock import LogicClock, interval_elapsed
from .power_propagation import PowerPropagationEngine

__all__ = [
    'ConnectivityAnalyzer',
    'DragFollowPolicy',
    'LogicClock',
    'PowerPropagationEngine',
    'interval_elapsed',
]
