"""
Series chart widget

Draws a ChartState with pyqtgraph: the primary series as a line with per-point
colored symbols and the threshold as a dashed line. Plot items are created on
the first render and updated with setData afterwards.
"""

from typing import Dict, Optional

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import Qt

from threshold_chart.utilities.data.models import ChartState, Dataset
from threshold_chart.utilities.logger import tc_logger


MAX_X_TICKS = 12


class SeriesChartWidget(pg.PlotWidget):
    """Rendering collaborator for the chart page"""

    def __init__(self, parent=None):
        super().__init__(parent=parent, background='#ffffff')
        self.chart_state: Optional[ChartState] = None
        self.plot_items: Dict[str, pg.PlotDataItem] = {}
        self.legend = None
        self.render_count = 0
        self.setup_chart_style()

    def setup_chart_style(self):
        plot = self.getPlotItem()
        plot.showGrid(x=True, y=True, alpha=0.15)
        plot.getViewBox().setMouseEnabled(x=True, y=False)
        for axis in ('left', 'bottom'):
            plot.getAxis(axis).setPen(pg.mkPen(color='#878787'))
            plot.getAxis(axis).setTextPen(pg.mkPen(color='#444444'))

    def render_chart(self, chart_state: ChartState):
        self.chart_state = chart_state
        x_values = np.arange(len(chart_state.labels), dtype=np.float64)

        if not self.plot_items:
            self._create_items(chart_state)

        self._update_item('primary', chart_state.primary, x_values)
        self._update_item('threshold', chart_state.threshold, x_values)
        self._update_x_ticks(chart_state.labels)

        if chart_state.options.get('legend', {}).get('display', True):
            self._sync_legend(chart_state)
        elif self.legend is not None:
            self.legend.hide()

        self.getPlotItem().enableAutoRange()
        self.render_count += 1
        tc_logger.debug(f"Rendered {len(x_values)} points", "CHART")

    def _create_items(self, chart_state: ChartState):
        self.legend = self.getPlotItem().addLegend(offset=(10, 10))

        primary_style = chart_state.primary.style
        primary = pg.PlotDataItem(
            pen=pg.mkPen(color=primary_style.get('border_color', '#3F51B5'), width=2),
            symbol='o',
            symbolSize=8,
            name=chart_state.primary.label,
        )

        threshold_style = chart_state.threshold.style
        threshold_pen = pg.mkPen(color=threshold_style.get('border_color', '#878787'), width=2)
        dash = threshold_style.get('border_dash')
        if dash:
            threshold_pen.setStyle(Qt.PenStyle.CustomDashLine)
            threshold_pen.setDashPattern([float(part) / 2 for part in dash])
        threshold = pg.PlotDataItem(pen=threshold_pen, name=chart_state.threshold.label)

        for key, item in (('primary', primary), ('threshold', threshold)):
            item.curve.setBrush(None)
            item.curve.setFillLevel(None)
            self.addItem(item)
            item.visibleChanged.connect(self._on_visibility_toggled)
            self.plot_items[key] = item

    def _update_item(self, key: str, dataset: Dataset, x_values):
        item = self.plot_items[key]
        y_values = np.asarray(dataset.data, dtype=np.float64)
        kwargs = {}
        if key == 'primary':
            colors = dataset.point_colors or []
            kwargs['symbolBrush'] = [pg.mkBrush(color) for color in colors]
            kwargs['symbolPen'] = [pg.mkPen(color) for color in colors]
        elif dataset.style.get('point_radius', 0) > 0:
            kwargs['symbol'] = 'o'
            kwargs['symbolSize'] = dataset.style['point_radius'] * 2
        item.setData(x=x_values, y=y_values, **kwargs)

        hidden = bool(dataset.style.get('hidden', False))
        if item.isVisible() == hidden:
            item.setVisible(not hidden)

    def _update_x_ticks(self, labels):
        if not labels:
            self.getAxis('bottom').setTicks([[]])
            return
        stride = max(1, int(np.ceil(len(labels) / MAX_X_TICKS)))
        ticks = [(index, label) for index, label in enumerate(labels) if index % stride == 0]
        self.getAxis('bottom').setTicks([ticks])

    def _sync_legend(self, chart_state: ChartState):
        self.legend.show()
        for key, dataset in (('primary', chart_state.primary), ('threshold', chart_state.threshold)):
            item = self.plot_items[key]
            if item.name() == dataset.label:
                continue
            self.legend.removeItem(item)
            item.opts['name'] = dataset.label
            self.legend.addItem(item, dataset.label)

    def _on_visibility_toggled(self):
        # Legend clicks hide/show the line; remember it on the dataset style
        if self.chart_state is None:
            return
        sender = self.sender()
        key = next((key for key, item in self.plot_items.items() if item is sender), None)
        if key is None:
            return
        dataset = getattr(self.chart_state, key)
        dataset.style['hidden'] = not sender.isVisible()
        tc_logger.ui_operation("Dataset visibility toggled", f"{key} hidden={dataset.style['hidden']}")

    def cleanup(self):
        """Cleanup resources"""
        for item in self.plot_items.values():
            try:
                item.visibleChanged.disconnect(self._on_visibility_toggled)
            except (TypeError, RuntimeError) as e:
                tc_logger.debug(f"Visibility signal already disconnected: {e}", "CHART")
            if item.scene():
                self.removeItem(item)
        self.plot_items.clear()
        if self.legend is not None and self.legend.scene():
            self.legend.scene().removeItem(self.legend)
        self.legend = None
        self.chart_state = None

    def close(self):
        # PlotWidget.close() drops the plot item, so release ours first
        if self.getPlotItem() is not None:
            self.cleanup()
        return super().close()
