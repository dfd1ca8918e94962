"""
Threshold Chart page

Sidebar inputs (series, threshold, point count) feed the parameter stream
coordinator; its outputs drive the chart widget, the loading bar and the
notice banner.
"""

from PyQt6.QtWidgets import (QComboBox, QDoubleSpinBox, QFrame, QHBoxLayout, QLabel,
                             QMainWindow, QProgressBar, QSpinBox, QVBoxLayout, QWidget)
from PyQt6.QtCore import QTimer, pyqtSignal

from threshold_chart.utilities.config.api_config import chart_config
from threshold_chart.utilities.data.models import CoordinatorState, Parameters, SeriesId
from threshold_chart.utilities.logger import tc_logger
from threshold_chart.utilities.services.series_cache import SeriesCache
from threshold_chart.utilities.services.series_client import series_client
from threshold_chart.pages.chart.coordinator import ParameterStreamCoordinator
from threshold_chart.pages.chart.reconciler import ChartReconciler
from threshold_chart.pages.chart.widgets.chart_widget import SeriesChartWidget
from threshold_chart.pages.chart.widgets.notice_banner import NoticeBanner


SERIES_CHOICES = [
    (SeriesId.STOCK, "Stock Price"),
    (SeriesId.POPULATION, "Population"),
]


class ChartPageWidget(QMainWindow):
    """Chart page hosting the inputs, the chart and the notice banner"""

    series_selected = pyqtSignal(object)

    def __init__(self, client=None, cache=None, debounce_ms=None, parent=None):
        super().__init__(parent)
        self.client = client or series_client
        self.cache = cache or SeriesCache(self.client, parent=self)
        self._cleaned_up = False

        parameters = Parameters(
            series_id=SERIES_CHOICES[0][0],
            threshold=chart_config.default_threshold,
            max_points=chart_config.default_max_points,
        )
        self.coordinator = ParameterStreamCoordinator(
            self.cache,
            ChartReconciler(self.client.population_country),
            parameters=parameters,
            debounce_ms=debounce_ms,
            parent=self,
        )

        self.init_ui()
        self.setup_styling()
        self.connect_coordinator()

        # Start once the event loop is running so the first paint is not blocked
        QTimer.singleShot(0, self.coordinator.start)

    def init_ui(self):
        self.setWindowTitle("Threshold Chart")
        self.setGeometry(100, 100, 1200, 760)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout()
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        central_widget.setLayout(main_layout)

        self.create_sidebar(main_layout)
        self.create_main_content(main_layout)

    def create_sidebar(self, parent_layout):
        sidebar = QFrame()
        sidebar.setFixedWidth(260)
        sidebar.setObjectName("sidebar")

        sidebar_layout = QVBoxLayout()
        sidebar_layout.setContentsMargins(20, 20, 20, 20)
        sidebar_layout.setSpacing(24)
        sidebar.setLayout(sidebar_layout)

        self.series_input = QComboBox()
        for series_id, title in SERIES_CHOICES:
            self.series_input.addItem(title, series_id)
        self.series_input.currentIndexChanged.connect(self.on_series_index_changed)
        sidebar_layout.addWidget(self.create_section("CHART TYPE", self.series_input))

        self.threshold_input = QDoubleSpinBox()
        self.threshold_input.setRange(-1e12, 1e12)
        self.threshold_input.setDecimals(2)
        self.threshold_input.setSingleStep(self.coordinator.parameters.series_id.threshold_step)
        self.threshold_input.setValue(self.coordinator.parameters.threshold)
        sidebar_layout.addWidget(self.create_section("THRESHOLD", self.threshold_input))

        self.points_input = QSpinBox()
        self.points_input.setRange(0, 1000000)
        self.points_input.setValue(self.coordinator.parameters.max_points)
        sidebar_layout.addWidget(self.create_section("DATA POINTS", self.points_input))

        sidebar_layout.addStretch()
        parent_layout.addWidget(sidebar)

    def create_section(self, title: str, field: QWidget) -> QFrame:
        section = QFrame()
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        section.setLayout(layout)

        label = QLabel(title)
        label.setObjectName("sectionTitle")
        layout.addWidget(label)
        layout.addWidget(field)
        return section

    def create_main_content(self, parent_layout):
        main_content = QFrame()
        main_content.setObjectName("mainContent")

        content_layout = QVBoxLayout()
        content_layout.setContentsMargins(20, 20, 20, 20)
        content_layout.setSpacing(10)
        main_content.setLayout(content_layout)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 0)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setFixedHeight(4)
        self.progress_bar.hide()
        content_layout.addWidget(self.progress_bar)

        self.error_label = QLabel("")
        self.error_label.setObjectName("errorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        content_layout.addWidget(self.error_label)

        self.chart_widget = SeriesChartWidget()
        content_layout.addWidget(self.chart_widget, stretch=1)

        self.notice_banner = NoticeBanner()
        content_layout.addWidget(self.notice_banner)

        parent_layout.addWidget(main_content)

    def setup_styling(self):
        self.setStyleSheet(
            """
            QMainWindow { background-color: #fafafa; }
            #sidebar { background-color: #ffffff; border-right: 1px solid #e0e0e0; }
            #sectionTitle { font-size: 11px; letter-spacing: 1px; color: #757575; margin-bottom: 6px; font-weight: 600; }
            QComboBox, QSpinBox, QDoubleSpinBox { padding: 8px; font-size: 13px; border: 1px solid #e0e0e0; border-radius: 4px; }
            QSpinBox:disabled, QDoubleSpinBox:disabled { color: #bdbdbd; background-color: #f5f5f5; }
            #errorLabel { color: #c62828; font-size: 13px; }
            #noticeBanner { background-color: #323232; color: #ffffff; padding: 12px; border-radius: 4px; font-size: 13px; }
            QProgressBar { border: none; background-color: #c5cae9; }
            QProgressBar::chunk { background-color: #3F51B5; }
            """
        )

    def connect_coordinator(self):
        self.coordinator.subscribe(
            series_signal=self.series_selected,
            threshold_signal=self.threshold_input.valueChanged,
            max_points_signal=self.points_input.valueChanged,
        )
        self.coordinator.chart_changed.connect(self.chart_widget.render_chart)
        self.coordinator.notice_requested.connect(self.notice_banner.show_notice)
        self.coordinator.inputs_enabled_changed.connect(self.set_inputs_enabled)
        self.coordinator.threshold_step_changed.connect(self.threshold_input.setSingleStep)
        self.coordinator.loading_changed.connect(self.progress_bar.setVisible)
        self.coordinator.state_changed.connect(self.on_state_changed)

    def on_series_index_changed(self, index: int):
        series_id = self.series_input.itemData(index)
        if series_id is not None:
            self.series_selected.emit(series_id)

    def set_inputs_enabled(self, enabled: bool):
        self.threshold_input.setEnabled(enabled)
        self.points_input.setEnabled(enabled)

    def on_state_changed(self, state: CoordinatorState):
        error = self.coordinator.error
        if state is CoordinatorState.ERROR and error is not None:
            self.error_label.setText(error.message)
            self.error_label.show()
        else:
            self.error_label.clear()
            self.error_label.hide()

    def cleanup(self):
        """Tear down streams and drop any fetch still in flight"""
        if self._cleaned_up:
            return
        self._cleaned_up = True
        tc_logger.ui_operation("Cleaning up chart page", "Unsubscribing parameter streams")
        self.coordinator.teardown()
        self.cache.shutdown()
        self.notice_banner.dismiss()
        self.chart_widget.cleanup()

    def closeEvent(self, event):
        self.cleanup()
        super().closeEvent(event)
