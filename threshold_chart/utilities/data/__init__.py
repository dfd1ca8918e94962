"""Series data model"""

from .models import (ChartState, CoordinatorState, Dataset, ErrorState,
                     Parameters, Series, SeriesId)

__all__ = [
    'ChartState',
    'CoordinatorState',
    'Dataset',
    'ErrorState',
    'Parameters',
    'Series',
    'SeriesId',
]
