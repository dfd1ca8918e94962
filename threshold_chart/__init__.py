"""Threshold Chart - stock and population series with an adjustable threshold line"""

__version__ = '1.0.0'
