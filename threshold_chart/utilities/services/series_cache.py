"""
Session cache for fetched series.

One entry per SeriesId for the life of the session. Fetches run on a thread
pool; their completions are marshalled back to the thread that owns the cache
through a queued signal, so the cache itself is only ever touched from there.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal, pyqtSlot

from threshold_chart.utilities.data.models import Series, SeriesId
from threshold_chart.utilities.logger import tc_logger


class SeriesCache(QObject):
    """At most one stored Series and one in-flight fetch per SeriesId"""

    fetch_completed = pyqtSignal(object, object)  # SeriesId, worker Future

    MAX_WORKERS = 2

    def __init__(self, fetcher, parent=None, max_workers: int = None):
        super().__init__(parent)
        self.fetcher = fetcher
        self._series: Dict[SeriesId, Series] = {}
        self._in_flight: Dict[SeriesId, Future] = {}
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or self.MAX_WORKERS,
            thread_name_prefix='series-fetch'
        )
        self._closed = False
        self.fetch_completed.connect(self._resolve, Qt.ConnectionType.QueuedConnection)

    def get(self, series_id: SeriesId) -> Future:
        """Future resolving to the Series for `series_id`.

        Cached data resolves immediately. Concurrent callers for an uncached id
        share one fetch and see the same result or the same failure.
        """
        if series_id in self._series:
            tc_logger.cache_operation("Hit", series_id.value)
            future = Future()
            future.set_result(self._series[series_id])
            return future

        if series_id in self._in_flight:
            tc_logger.cache_operation("Joining in-flight fetch", series_id.value)
            return self._in_flight[series_id]

        if self._closed:
            raise RuntimeError("SeriesCache is shut down")

        tc_logger.cache_operation("Miss", series_id.value)
        future = Future()
        self._in_flight[series_id] = future
        worker = self._executor.submit(self.fetcher.fetch, series_id)
        worker.add_done_callback(lambda done, sid=series_id: self.fetch_completed.emit(sid, done))
        return future

    @pyqtSlot(object, object)
    def _resolve(self, series_id: SeriesId, worker: Future):
        future = self._in_flight.pop(series_id, None)
        if self._closed or future is None:
            return

        error = worker.exception()
        if error is not None:
            # Failures are not stored so the next get() fetches again
            tc_logger.cache_operation("Fetch failed, not cached", f"{series_id.value}: {type(error).__name__}")
            future.set_exception(error)
            return

        series = worker.result()
        self._series[series_id] = series
        tc_logger.cache_operation("Stored", f"{series_id.value} ({len(series)} points)")
        future.set_result(series)

    def peek(self, series_id: SeriesId) -> Optional[Series]:
        return self._series.get(series_id)

    def is_loading(self, series_id: SeriesId) -> bool:
        return series_id in self._in_flight

    def clear(self):
        self._series.clear()

    def shutdown(self):
        """Stop accepting work; requests already issued finish and are dropped."""
        if self._closed:
            return
        self._closed = True
        pending = list(self._in_flight.values())
        self._in_flight.clear()
        for future in pending:
            future.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.clear()
        tc_logger.cache_operation("Shut down", f"{len(pending)} pending request(s) dropped")
