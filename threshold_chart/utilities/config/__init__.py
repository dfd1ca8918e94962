"""
Threshold Chart Configuration Module

Endpoint and chart settings, overridable through the environment or a .env file.
"""

from .api_config import APIConfig, ChartConfig, api_config, chart_config

__all__ = ['APIConfig', 'ChartConfig', 'api_config', 'chart_config']
