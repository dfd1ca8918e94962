"""Chart page widgets"""

from .chart_widget import SeriesChartWidget
from .notice_banner import NoticeBanner

__all__ = [
    'SeriesChartWidget',
    'NoticeBanner',
]
