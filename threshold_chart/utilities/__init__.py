"""
Threshold Chart Utilities Package

Logging, configuration, data model and data services.
"""

from .logger import tc_logger, log_exception, log_performance

__all__ = ['tc_logger', 'log_exception', 'log_performance']
