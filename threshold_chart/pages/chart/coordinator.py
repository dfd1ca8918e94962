"""
Parameter stream coordination for the chart page.

Three user-driven streams (series selection, threshold, point count) feed a
small state machine: IDLE -> LOADING -> READY / ERROR. Threshold and point
count are debounced; series changes are applied immediately. Every load is
tagged with a generation number and a completion is only applied if it is
still the latest load and the coordinator has not been torn down.
"""

from concurrent.futures import Future
from typing import Callable, List, Optional, Tuple

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from threshold_chart.utilities.config.api_config import chart_config
from threshold_chart.utilities.data.models import (ChartState, CoordinatorState, ErrorState,
                                                   Parameters, SeriesId)
from threshold_chart.utilities.logger import tc_logger
from threshold_chart.utilities.services.series_client import ParseError
from threshold_chart.pages.chart.reconciler import ChartReconciler


class Debouncer(QObject):
    """Delivers only the latest pushed value once `interval_ms` passes without a new push"""

    def __init__(self, interval_ms: int, callback: Callable, parent=None):
        super().__init__(parent)
        self._callback = callback
        self._pending = None
        self._has_pending = False

        self.timer = QTimer(self)
        self.timer.setSingleShot(True)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._flush)

    def push(self, value):
        self._pending = value
        self._has_pending = True
        self.timer.start()

    def cancel(self):
        self.timer.stop()
        self._pending = None
        self._has_pending = False

    def is_pending(self) -> bool:
        return self._has_pending

    def _flush(self):
        if not self._has_pending:
            return
        value = self._pending
        self._pending = None
        self._has_pending = False
        self._callback(value)


class ParameterStreamCoordinator(QObject):
    """Turns parameter changes into chart builds and patches"""

    state_changed = pyqtSignal(object)
    chart_changed = pyqtSignal(object)
    inputs_enabled_changed = pyqtSignal(bool)
    notice_requested = pyqtSignal(str, int)
    threshold_step_changed = pyqtSignal(float)
    loading_changed = pyqtSignal(bool)

    ERROR_MESSAGE = 'Unable to parse data from the server. Please check the server.'

    def __init__(self, cache, reconciler: ChartReconciler, parameters: Optional[Parameters] = None,
                 debounce_ms: int = None, notice_duration_ms: int = None, parent=None):
        super().__init__(parent)
        self.cache = cache
        self.reconciler = reconciler
        self.parameters = parameters or Parameters(
            series_id=SeriesId.STOCK,
            threshold=chart_config.default_threshold,
            max_points=chart_config.default_max_points,
        )
        self.notice_duration_ms = notice_duration_ms if notice_duration_ms is not None else chart_config.notice_duration_ms
        debounce_ms = debounce_ms if debounce_ms is not None else chart_config.debounce_ms

        self.state = CoordinatorState.IDLE
        self.error: Optional[ErrorState] = None
        self.chart_state: Optional[ChartState] = None

        self._generation = 0
        self._closed = False
        self._connections: List[Tuple[object, Callable]] = []

        self._threshold_debouncer = Debouncer(debounce_ms, self._apply_threshold, self)
        self._max_points_debouncer = Debouncer(debounce_ms, self._apply_max_points, self)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def inputs_enabled(self) -> bool:
        return self.error is None

    def subscribe(self, series_signal=None, threshold_signal=None, max_points_signal=None):
        """Connect the three parameter streams; teardown() disconnects them"""
        for signal, slot in ((series_signal, self.on_series_changed),
                             (threshold_signal, self.on_threshold_changed),
                             (max_points_signal, self.on_max_points_changed)):
            if signal is None:
                continue
            signal.connect(slot)
            self._connections.append((signal, slot))

    def start(self):
        if self._closed or self.state is not CoordinatorState.IDLE:
            return
        tc_logger.step(1, 2, f"Initial load of {self.parameters.series_id.value} series")
        self._load(self.parameters.series_id)

    # Stream handlers

    def on_series_changed(self, series_id):
        if self._closed:
            return
        series_id = SeriesId(series_id)
        tc_logger.ui_operation("Series changed", series_id.value)
        self.parameters.series_id = series_id
        if self.error is not None:
            self.error = None
            self.inputs_enabled_changed.emit(True)
        self._load(series_id)

    def on_threshold_changed(self, value):
        if self._closed:
            return
        self._threshold_debouncer.push(value)

    def on_max_points_changed(self, value):
        if self._closed:
            return
        self._max_points_debouncer.push(value)

    def _apply_threshold(self, value):
        if self._closed or self.error is not None:
            return
        self.parameters.threshold = float(value)
        tc_logger.ui_operation("Threshold applied", f"{self.parameters.threshold}")
        self._refresh()

    def _apply_max_points(self, value):
        if self._closed or self.error is not None:
            return
        if value is None or int(value) < 1:
            tc_logger.debug(f"Ignoring point count {value!r}", "COORDINATOR")
            return
        self.parameters.max_points = int(value)
        tc_logger.ui_operation("Point count applied", f"{self.parameters.max_points}")
        self._refresh()

    # Loading

    def _load(self, series_id: SeriesId):
        self._generation += 1
        generation = self._generation
        self._set_state(CoordinatorState.LOADING)
        self.loading_changed.emit(True)
        self.threshold_step_changed.emit(series_id.threshold_step)
        try:
            future = self.cache.get(series_id)
        except Exception as e:
            self._fail(series_id, e)
            return
        future.add_done_callback(lambda done: self._on_loaded(generation, series_id, done))

    def _on_loaded(self, generation: int, series_id: SeriesId, future: Future):
        if self._closed or generation != self._generation:
            tc_logger.debug(f"Discarding stale {series_id.value} load (generation {generation})", "COORDINATOR")
            return
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            self._fail(series_id, error)
            return

        series = future.result()
        self.chart_state = self.reconciler.reconcile(self.chart_state, series, self.parameters)
        self.loading_changed.emit(False)
        self._set_state(CoordinatorState.READY)
        self.chart_changed.emit(self.chart_state)

    def _fail(self, series_id: SeriesId, error: BaseException):
        kind = 'Parse' if isinstance(error, ParseError) else 'Fetch'
        tc_logger.error(f"{kind} failure for {series_id.value} ({type(error).__name__}): {error}", "COORDINATOR")
        self.error = ErrorState(self.ERROR_MESSAGE)
        self.loading_changed.emit(False)
        self._set_state(CoordinatorState.ERROR)
        self.inputs_enabled_changed.emit(False)
        self.notice_requested.emit(f"Error parsing {series_id.display_name} data", self.notice_duration_ms)

    def _refresh(self):
        # While loading, the completed load picks up the latest parameters
        if self.state is not CoordinatorState.READY or self.chart_state is None:
            return
        series = self.cache.peek(self.parameters.series_id)
        if series is None:
            return
        self.chart_state = self.reconciler.patch(self.chart_state, series, self.parameters)
        self.chart_changed.emit(self.chart_state)

    def _set_state(self, state: CoordinatorState):
        if state is not self.state:
            tc_logger.debug(f"{self.state.value} -> {state.value}", "COORDINATOR")
        self.state = state
        self.state_changed.emit(state)

    def teardown(self):
        """Unsubscribe every stream; nothing is applied afterwards"""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._threshold_debouncer.cancel()
        self._max_points_debouncer.cancel()
        for signal, slot in self._connections:
            try:
                signal.disconnect(slot)
            except (TypeError, RuntimeError) as e:
                tc_logger.debug(f"Stream already disconnected: {e}", "COORDINATOR")
        self._connections.clear()
        tc_logger.info("Coordinator torn down", "COORDINATOR")
