"""Chart page: coordinator, reconciler and the page widget"""

from .coordinator import Debouncer, ParameterStreamCoordinator
from .reconciler import ChartReconciler

__all__ = [
    'ChartReconciler',
    'Debouncer',
    'ParameterStreamCoordinator',
]
