"""Stock quote and population API client"""

import math

import requests
from typing import Any, Dict, Optional

from threshold_chart.utilities.config.api_config import api_config
from threshold_chart.utilities.data.models import Series, SeriesId
from threshold_chart.utilities.logger import tc_logger, log_exception, log_performance


class FetchError(Exception):
    """Network or transport failure while fetching a series"""


class ParseError(FetchError):
    """Response arrived but does not have the expected shape"""


# Keys the quote API uses instead of the time series when it refuses a request
STOCK_NOTICE_KEYS = ('Error Message', 'Note', 'Information')


class SeriesClient:
    def __init__(self, config=None, session: Optional[requests.Session] = None):
        self.config = config or api_config
        self.session = session or requests.Session()

    @property
    def population_country(self) -> str:
        return self.config.population_country

    def _make_request(self, url: str, params: Dict[str, Any] = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.config.request_timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Network error: {str(e)}")
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON response: {str(e)}")

    @log_exception
    @log_performance
    def fetch(self, series_id: SeriesId) -> Series:
        if series_id is SeriesId.STOCK:
            return self.fetch_stock_series()
        if series_id is SeriesId.POPULATION:
            return self.fetch_population_series()
        raise FetchError(f"Unsupported series: {series_id}")

    def fetch_stock_series(self) -> Series:
        stock = self.config.get_stock_config()
        params = {
            'function': stock['function'],
            'symbol': stock['symbol'],
            'interval': stock['interval'],
            'apikey': stock['apikey'],
        }
        tc_logger.api_operation("Stock quotes request", f"{stock['symbol']} @ {stock['interval']}")
        payload = self._make_request(stock['base_url'], params)
        series = parse_stock_payload(payload, stock['result_key'], stock['data_field'])
        tc_logger.data_processing(f"Parsed {stock['symbol']} quotes", len(series))
        return series

    def fetch_population_series(self) -> Series:
        population = self.config.get_population_config()
        url = f"{population['base_url']}/{population['country']}/{population['age']}/"
        tc_logger.api_operation("Population request", f"{population['country']} age {population['age']}")
        payload = self._make_request(url)
        series = parse_population_payload(payload, population['label_field'], population['data_field'])
        tc_logger.data_processing(f"Parsed {population['country']} population", len(series))
        return series


def _to_number(raw, where: str) -> float:
    if isinstance(raw, bool):
        raise ParseError(f"Non-numeric value at {where}: {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ParseError(f"Non-numeric value at {where}: {raw!r}")
    if not math.isfinite(value):
        raise ParseError(f"Non-finite value at {where}: {raw!r}")
    return value


def parse_stock_payload(payload: Any, result_key: str, data_field: str) -> Series:
    """Timestamp-keyed quotes -> chronological Series of one numeric field"""
    if not isinstance(payload, dict):
        raise ParseError(f"Expected an object, got {type(payload).__name__}")
    if result_key not in payload:
        notice = next((payload[key] for key in STOCK_NOTICE_KEYS if key in payload), None)
        detail = f": {notice}" if notice else ""
        raise ParseError(f"Missing '{result_key}' in stock response{detail}")

    quotes = payload[result_key]
    if not isinstance(quotes, dict):
        raise ParseError(f"'{result_key}' is not an object")

    labels = sorted(quotes)
    values = []
    for timestamp in labels:
        record = quotes[timestamp]
        if not isinstance(record, dict) or data_field not in record:
            raise ParseError(f"Missing '{data_field}' for {timestamp}")
        values.append(_to_number(record[data_field], timestamp))
    return Series(labels, values)


def parse_population_payload(payload: Any, label_field: str, data_field: str) -> Series:
    """List of yearly records -> Series of (label_field, data_field)"""
    if not isinstance(payload, list):
        raise ParseError(f"Expected a list of records, got {type(payload).__name__}")

    labels = []
    values = []
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ParseError(f"Record {index} is not an object")
        if label_field not in record:
            raise ParseError(f"Record {index} is missing '{label_field}'")
        if data_field not in record:
            raise ParseError(f"Record {index} is missing '{data_field}'")
        labels.append(str(record[label_field]))
        values.append(_to_number(record[data_field], f"record {index}"))
    return Series(labels, values)


series_client = SeriesClient()
