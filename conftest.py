import os
import tempfile
import threading
from collections import Counter

import pytest

# Must be set before the logger module and Qt are imported
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
os.environ.setdefault('THRESHOLD_CHART_LOG_DIR', os.path.join(tempfile.gettempdir(), 'threshold_chart_test_logs'))

from threshold_chart.utilities.data.models import Series, SeriesId  # noqa: E402


class FakeFetcher:
    """Fetcher double that counts calls and can hold a fetch in flight.

    `outcomes` maps a SeriesId to a Series, an exception, or a list of those
    consumed one per call.
    """

    def __init__(self, outcomes, population_country='Brazil'):
        self.outcomes = {key: list(value) if isinstance(value, list) else value
                         for key, value in outcomes.items()}
        self.population_country = population_country
        self.calls = Counter()
        self.gates = {}
        self._lock = threading.Lock()

    def hold(self, series_id):
        gate = threading.Event()
        self.gates[series_id] = gate
        return gate

    def fetch(self, series_id):
        with self._lock:
            self.calls[series_id] += 1
            outcome = self.outcomes[series_id]
            if isinstance(outcome, list):
                outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        gate = self.gates.get(series_id)
        if gate is not None:
            gate.wait(5)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class StubResponse:
    def __init__(self, payload=None, error=None, invalid_json=False):
        self.payload = payload
        self.error = error
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.error is not None:
            raise self.error

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class StubSession:
    """Stands in for requests.Session; records every GET"""

    def __init__(self, response=None, raises=None):
        self.response = response
        self.raises = raises
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({'url': url, 'params': params, 'timeout': timeout})
        if self.raises is not None:
            raise self.raises
        return self.response


@pytest.fixture
def stock_series():
    return Series(['t1', 't2', 't3'], [100.0, 110.0, 90.0])


@pytest.fixture
def population_series():
    return Series(['2015', '2016', '2017', '2018'], [3400000.0, 3350000.0, 3310000.0, 3290000.0])


@pytest.fixture
def make_fetcher(stock_series, population_series):
    def factory(**overrides):
        outcomes = {SeriesId.STOCK: stock_series, SeriesId.POPULATION: population_series}
        outcomes.update({SeriesId(key): value for key, value in overrides.items()})
        fetcher = FakeFetcher(outcomes)
        return fetcher
    return factory


@pytest.fixture
def make_session():
    return StubSession


@pytest.fixture
def make_response():
    return StubResponse
