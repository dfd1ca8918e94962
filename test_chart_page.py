"""Chart page wiring and the pyqtgraph rendering collaborator"""

import pytest

from threshold_chart.pages.chart.page import ChartPageWidget
from threshold_chart.pages.chart.reconciler import ChartReconciler
from threshold_chart.pages.chart.widgets.chart_widget import SeriesChartWidget
from threshold_chart.pages.chart.widgets.notice_banner import NoticeBanner
from threshold_chart.utilities.data.models import CoordinatorState, Parameters, Series, SeriesId
from threshold_chart.utilities.services.series_client import ParseError, series_client


@pytest.fixture
def make_page(qtbot):
    def factory(fetcher):
        page = ChartPageWidget(client=fetcher, debounce_ms=20)
        qtbot.addWidget(page)
        return page
    return factory


def plotted_y(widget, key):
    _, y_values = widget.plot_items[key].getData()
    return [] if y_values is None else list(y_values)


def test_page_loads_default_series(qtbot, make_page, make_fetcher, monkeypatch):
    monkeypatch.setenv('DEFAULT_THRESHOLD', '105')
    page = make_page(make_fetcher())

    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.READY)

    assert page.chart_widget.render_count == 1
    assert plotted_y(page.chart_widget, 'primary') == [100.0, 110.0, 90.0]
    assert plotted_y(page.chart_widget, 'threshold') == [105.0, 105.0, 105.0]
    assert page.threshold_input.isEnabled()
    assert page.threshold_input.singleStep() == pytest.approx(0.1)
    assert page.progress_bar.isHidden()


def test_point_count_input_truncates_chart(qtbot, make_page, make_fetcher):
    fetcher = make_fetcher()
    page = make_page(fetcher)
    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.READY)
    primary_item = page.chart_widget.plot_items['primary']

    page.points_input.setValue(2)
    qtbot.waitUntil(lambda: plotted_y(page.chart_widget, 'primary') == [100.0, 110.0])

    assert page.chart_widget.plot_items['primary'] is primary_item
    assert plotted_y(page.chart_widget, 'threshold') == [108.0, 108.0]
    assert fetcher.calls[SeriesId.STOCK] == 1


def test_error_disables_inputs_and_shows_notice(qtbot, make_page, make_fetcher):
    fetcher = make_fetcher(stock=ParseError("Missing 'Time Series (5min)' in stock response"))
    page = make_page(fetcher)
    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.ERROR)

    assert not page.threshold_input.isEnabled()
    assert not page.points_input.isEnabled()
    assert not page.notice_banner.isHidden()
    assert page.notice_banner.text() == 'Error parsing stock data'
    assert page.error_label.text() == 'Unable to parse data from the server. Please check the server.'

    page.series_input.setCurrentIndex(1)
    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.READY)

    assert page.threshold_input.isEnabled()
    assert page.points_input.isEnabled()
    assert page.error_label.isHidden()
    assert page.threshold_input.singleStep() == pytest.approx(10e3)


def test_cleanup_tears_down_coordinator(qtbot, make_page, make_fetcher):
    page = make_page(make_fetcher())
    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.READY)

    page.cleanup()

    assert page.coordinator.closed
    page.threshold_input.setValue(1.0)
    qtbot.wait(100)
    assert page.coordinator.parameters.threshold != 1.0


def test_widget_reuses_items_and_keeps_legend_toggle(qtbot, stock_series):
    widget = SeriesChartWidget()
    qtbot.addWidget(widget)
    reconciler = ChartReconciler('Brazil')
    parameters = Parameters(SeriesId.STOCK, 105, 10)

    state = reconciler.build(stock_series, parameters)
    widget.render_chart(state)
    primary_item = widget.plot_items['primary']

    # A legend click hides the line; the renderer records it on the dataset
    primary_item.setVisible(False)
    assert state.primary.style['hidden'] is True

    parameters.max_points = 2
    widget.render_chart(reconciler.patch(state, stock_series, parameters))

    assert widget.plot_items['primary'] is primary_item
    assert not primary_item.isVisible()
    assert plotted_y(widget, 'primary') == [100.0, 110.0]
    assert widget.render_count == 2


def test_widget_renders_empty_chart(qtbot):
    widget = SeriesChartWidget()
    qtbot.addWidget(widget)
    widget.render_chart(ChartReconciler('Brazil').build(Series(), Parameters(SeriesId.STOCK, 1, 10)))

    assert widget.render_count == 1
    assert set(widget.plot_items) == {'primary', 'threshold'}


def test_notice_banner_hides_after_duration(qtbot):
    banner = NoticeBanner()
    qtbot.addWidget(banner)

    banner.show_notice('Error parsing population data', 50)
    assert not banner.isHidden()
    assert banner.text() == 'Error parsing population data'

    qtbot.waitUntil(banner.isHidden, timeout=1000)
    assert banner.text() == ''


def test_destroyed_page_leaves_later_charts_working(qtbot, make_fetcher, stock_series):
    page = ChartPageWidget(client=make_fetcher(), debounce_ms=20)
    page.show()
    qtbot.waitUntil(lambda: page.coordinator.state is CoordinatorState.READY)

    page.close()
    page.deleteLater()
    qtbot.wait(50)

    widget = SeriesChartWidget()
    qtbot.addWidget(widget)
    state = ChartReconciler('Brazil').build(stock_series, Parameters(SeriesId.STOCK, 105, 10))
    widget.render_chart(state)
    widget.plot_items['threshold'].setVisible(False)

    assert state.threshold.style['hidden'] is True
    assert plotted_y(widget, 'primary') == [100.0, 110.0, 90.0]


def test_widget_cleanup_stops_tracking_visibility(qtbot, stock_series):
    widget = SeriesChartWidget()
    qtbot.addWidget(widget)
    state = ChartReconciler('Brazil').build(stock_series, Parameters(SeriesId.STOCK, 105, 10))
    widget.render_chart(state)
    primary_item = widget.plot_items['primary']

    widget.cleanup()
    primary_item.setVisible(False)

    assert widget.plot_items == {}
    assert 'hidden' not in state.primary.style


def test_page_defaults_to_shared_client(qtbot):
    page = ChartPageWidget()
    qtbot.addWidget(page)
    page.cleanup()

    assert page.client is series_client
    assert page.coordinator.closed
