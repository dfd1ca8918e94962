"""
Threshold Chart Logging System

Component-tagged logging for the fetch, cache and chart update pipeline.
"""

import logging
import os
import sys
import time
from datetime import datetime
from functools import wraps
from pathlib import Path


class ThresholdChartLogger:
    """Logging wrapper that tags every message with the component it came from"""

    def __init__(self, log_level=logging.INFO, log_dir=None, name="ThresholdChart"):
        self.name = name
        self.log_dir = Path(log_dir or os.getenv('THRESHOLD_CHART_LOG_DIR', 'logs'))
        self.setup_logging(log_level)

    def setup_logging(self, log_level):
        """Setup console and file handlers"""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers = []
        self.logger.propagate = False

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-14s | %(message)s',
            datefmt='%H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%H:%M:%S'
        )

        self.log_file = self.log_dir / f"threshold_chart_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(self.log_file)
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)

        self.console_handler = logging.StreamHandler(sys.stdout)
        self.console_handler.setFormatter(console_formatter)
        self.console_handler.setLevel(log_level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(self.console_handler)

    def info(self, message, component="SYSTEM"):
        self.logger.info(f"[{component}] {message}")

    def debug(self, message, component="DEBUG"):
        self.logger.debug(f"[{component}] {message}")

    def warning(self, message, component="WARNING"):
        self.logger.warning(f"[{component}] {message}")

    def error(self, message, component="ERROR"):
        self.logger.error(f"[{component}] {message}")

    def api_operation(self, operation, details=""):
        self.info(f"[API] {operation} {details}", "API")

    def cache_operation(self, operation, details=""):
        self.debug(f"[CACHE] {operation} {details}", "CACHE")

    def performance_metric(self, metric, value, unit=""):
        self.debug(f"[PERF] {metric}: {value} {unit}", "PERFORMANCE")

    def data_processing(self, operation, count=None, time_taken=None):
        msg = f"[DATA] {operation}"
        if count is not None:
            msg += f" | Records: {count:,}"
        if time_taken is not None:
            msg += f" | Time: {time_taken:.2f}s"
        self.info(msg, "DATA")

    def ui_operation(self, operation, details=""):
        self.info(f"[UI] {operation} {details}", "UI")

    def step(self, step_number, total_steps, description):
        progress = f"({step_number}/{total_steps})"
        self.info(f"[STEP] {progress}: {description}", "PROCESS")


tc_logger = ThresholdChartLogger()


def log_exception(func):
    """Decorator to log exceptions"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            tc_logger.error(f"{type(e).__name__} in {func.__name__}: {str(e)}", "EXCEPTION")
            raise
    return wrapper


def log_performance(func):
    """Decorator to log function performance"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        tc_logger.debug(f"Starting {func.__name__}", "PERFORMANCE")
        try:
            result = func(*args, **kwargs)
            execution_time = time.time() - start_time
            tc_logger.performance_metric(f"{func.__name__} execution", f"{execution_time:.3f}", "seconds")
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            tc_logger.error(f"{func.__name__} failed after {execution_time:.2f}s: {str(e)}", "PERFORMANCE")
            raise
    return wrapper
