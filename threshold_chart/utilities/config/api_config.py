"""
Threshold Chart API and chart configuration (self-contained)
"""

import os
from typing import Dict, Optional
from pathlib import Path


class APIConfig:
    """Endpoint configuration for the stock and population series"""

    def __init__(self):
        self.load_environment()

    def load_environment(self):
        """Load environment variables from .env file if it exists"""
        env_path = Path('.env')
        if env_path.exists():
            with open(env_path, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        os.environ.setdefault(key.strip(), value.strip())

    @property
    def stock_api_url(self) -> str:
        return os.getenv('STOCK_API_URL', 'https://www.alphavantage.co/query')

    @property
    def stock_function(self) -> str:
        return os.getenv('STOCK_FUNCTION', 'TIME_SERIES_INTRADAY')

    @property
    def stock_symbol(self) -> str:
        return os.getenv('STOCK_SYMBOL', 'MSFT')

    @property
    def stock_interval(self) -> str:
        return os.getenv('STOCK_INTERVAL', '5min')

    @property
    def alpha_vantage_api_key(self) -> Optional[str]:
        return os.getenv('ALPHA_VANTAGE_API_KEY', 'demo')

    @property
    def population_api_url(self) -> str:
        return os.getenv('POPULATION_API_URL', 'http://api.population.io:80/1.0/population')

    @property
    def population_country(self) -> str:
        return os.getenv('POPULATION_COUNTRY', 'Brazil')

    @property
    def population_age(self) -> int:
        return int(os.getenv('POPULATION_AGE', '18'))

    @property
    def request_timeout(self) -> float:
        return float(os.getenv('REQUEST_TIMEOUT', '30'))

    def validate_keys(self) -> Dict[str, bool]:
        return {
            'alpha_vantage': bool(os.getenv('ALPHA_VANTAGE_API_KEY')),
        }

    def get_stock_config(self) -> Dict[str, str]:
        return {
            'base_url': self.stock_api_url,
            'function': self.stock_function,
            'symbol': self.stock_symbol,
            'interval': self.stock_interval,
            'apikey': self.alpha_vantage_api_key,
            'result_key': f"Time Series ({self.stock_interval})",
            'data_field': '4. close',
        }

    def get_population_config(self) -> Dict[str, object]:
        return {
            'base_url': self.population_api_url.rstrip('/'),
            'country': self.population_country,
            'age': self.population_age,
            'label_field': 'year',
            'data_field': 'total',
        }


class ChartConfig:
    """UI tunables for the chart page"""

    @property
    def default_threshold(self) -> float:
        return float(os.getenv('DEFAULT_THRESHOLD', '108'))

    @property
    def default_max_points(self) -> int:
        return int(os.getenv('DEFAULT_MAX_POINTS', '10'))

    @property
    def debounce_ms(self) -> int:
        return int(os.getenv('DEBOUNCE_MS', '300'))

    @property
    def notice_duration_ms(self) -> int:
        return int(os.getenv('NOTICE_DURATION_MS', '2500'))

    @property
    def exceeded_color(self) -> str:
        return os.getenv('THRESHOLD_EXCEEDED_COLOR', 'red')

    @property
    def within_color(self) -> str:
        return os.getenv('THRESHOLD_WITHIN_COLOR', 'green')


api_config = APIConfig()
chart_config = ChartConfig()
