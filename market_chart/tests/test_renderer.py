# market_chart/tests/test_renderer.py
"""
Module: PyQtGraph Renderer Tests
Purpose: Colour parsing, the date axis and building a PriceChartView from
         controller output (offscreen Qt platform)
"""

import os

import pytest

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
pg = pytest.importorskip('pyqtgraph')
pytest.importorskip('PyQt6')

from market_chart.dashboard.components.chart import (ChartConfiguration,  # noqa: E402
                                                     ChartPanelController, draw_crosshair)
from market_chart.dashboard.components.chart.renderer import (CandlestickItem,  # noqa: E402
                                                              IndexDateAxisItem,
                                                              PriceChartView, to_qcolor)


@pytest.fixture(scope='module')
def qapp():
    return pg.mkQApp()


class TestColors:
    """Test colour string parsing"""

    def test_hex(self, qapp):
        color = to_qcolor('#26a69a')
        assert (color.red(), color.green(), color.blue()) == (0x26, 0xa6, 0x9a)

    def test_rgba(self, qapp):
        color = to_qcolor('rgba(255, 0, 0, 0.5)')
        assert color.red() == 255
        assert color.alphaF() == pytest.approx(0.5, abs=0.01)

    def test_rgb_is_opaque(self, qapp):
        assert to_qcolor('rgb(0, 128, 0)').alphaF() == pytest.approx(1.0)


class TestDateAxis:
    """Test index-based date ticks"""

    def test_tick_strings(self, qapp):
        axis = IndexDateAxisItem(orientation='bottom')
        axis.set_labels(['a', 'b', 'c'])
        assert axis.tickStrings([0, 2, 7], 1, 1) == ['a', 'c', '']

    def test_tick_values_limited(self, qapp):
        axis = IndexDateAxisItem(orientation='bottom')
        axis.set_labels([str(i) for i in range(100)], max_ticks=10)
        (step, values), = axis.tickValues(-0.5, 99.5, 800)
        assert step == 10
        assert len(values) == 10
        assert values[0] == 0


class TestPriceChartView:
    """Test drawing controller output"""

    @pytest.fixture
    def chart(self, qapp, sample_bars):
        controller = ChartPanelController(['AAPL'], ChartConfiguration(show_sma=True,
                                                                       show_bollinger_bands=True))
        controller.set_symbol_bars('AAPL', sample_bars)
        return controller

    def test_set_chart_data(self, chart):
        view = PriceChartView()
        view.set_chart_data(chart.chart_data(), chart.chart_options())

        assert view.chart_data is chart.chart_data()
        assert any(isinstance(item, CandlestickItem) for _, item in view._items)
        assert view.date_axis.labels == chart.chart_data().labels

    def test_hover_sets_active_point(self, chart):
        view = PriceChartView()
        view.set_chart_data(chart.chart_data(), chart.chart_options())
        seen = []
        view.hovered.connect(seen.append)

        view.set_active_index(5)
        assert view.active_point.index == 5
        assert view.active_point.y_value == pytest.approx(chart.bars_for('AAPL')[5].close)

        view.set_active_index(None)
        assert seen[-1] is None

    def test_clear_chart(self, chart):
        view = PriceChartView()
        view.set_chart_data(chart.chart_data(), chart.chart_options())
        view.clear_chart()

        assert view.chart_data is None
        assert view._items == []

    def test_crosshair_layer_above_volume(self, qapp):
        view = PriceChartView()
        assert draw_crosshair in view.overlay.hooks
        assert draw_crosshair not in view.underlay.hooks
        assert view.overlay.zValue() > view.volume_view.zValue()
