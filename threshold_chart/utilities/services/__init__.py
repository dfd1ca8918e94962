"""Threshold Chart Services"""

from .series_client import FetchError, ParseError, SeriesClient, series_client
from .series_cache import SeriesCache
from .threshold_classifier import classify, point_colors

__all__ = [
    'FetchError',
    'ParseError',
    'SeriesClient',
    'series_client',
    'SeriesCache',
    'classify',
    'point_colors',
]
