# market_chart/tests/test_candlestick.py
"""
Module: Candlestick Chart Type Tests
Purpose: Parsing, pixel mapping, drawing on a recording canvas and the
         chart-type registry
"""

import pytest

from market_chart.dashboard.components.chart import (CANDLESTICK_DEFAULTS, CandlestickController,
                                                     CandlestickElement, LinearScale, LogScale,
                                                     get_chart_type, register_chart_type,
                                                     registered_chart_types)
from market_chart.data.models import CandlestickPoint
from market_chart.exceptions import ChartTypeError


@pytest.fixture
def scales():
    # 10 px per bar, price 0..100 mapped onto rows 200..0
    return LinearScale(0, 10, 0, 100), LinearScale(0, 100, 200, 0)


class TestParsing:
    """Test raw point parsing"""

    def test_short_keys(self):
        parsed = CandlestickController.parse([{'o': 10, 'c': 12, 'h': 13, 'l': 9}])
        candle = parsed[0]
        assert (candle.x, candle.o, candle.h, candle.l, candle.c) == (0, 10, 13, 9, 12)
        assert candle.is_complete and candle.is_up

    def test_objects_and_long_keys(self):
        parsed = CandlestickController.parse([
            CandlestickPoint(0, 5, 6, 4, 4.5),
            {'open': 1, 'high': 2, 'low': 0.5, 'close': 1.5},
        ])
        assert not parsed[0].is_up
        assert parsed[1].x == 1
        assert parsed[1].c == 1.5

    def test_missing_field(self):
        candle = CandlestickController.parse([{'o': 10, 'h': 13, 'l': 9}])[0]
        assert candle.c is None
        assert not candle.is_complete


class TestDrawing:
    """Test element drawing through the Canvas protocol"""

    def test_up_candle_uses_up_palette(self, canvas, scales):
        controller = CandlestickController([{'o': 10, 'c': 12, 'h': 13, 'l': 9}])
        controller.update_elements(*scales)
        assert controller.draw(canvas) == 1

        stroke = canvas.of('set_stroke')[0]
        fill = canvas.of('set_fill')[0]
        assert stroke[0] == CANDLESTICK_DEFAULTS['border_color_up']
        assert fill[0] == CANDLESTICK_DEFAULTS['background_color_up']

    def test_down_candle_uses_down_palette(self, canvas, scales):
        controller = CandlestickController([{'o': 12, 'c': 10, 'h': 13, 'l': 9}])
        controller.update_elements(*scales)
        controller.draw(canvas)

        assert canvas.of('set_stroke')[0][0] == CANDLESTICK_DEFAULTS['border_color_down']
        assert canvas.of('set_fill')[0][0] == CANDLESTICK_DEFAULTS['background_color_down']

    def test_wick_and_body_geometry(self, canvas, scales):
        controller = CandlestickController([{'o': 10, 'c': 12, 'h': 13, 'l': 9}],
                                           {'candle_width': 6})
        controller.update_elements(*scales)
        controller.draw(canvas)

        assert canvas.of('draw_line') == [(0.0, 174.0, 0.0, 182.0)]
        x, y, width, height = canvas.of('draw_rect')[0]
        assert width == 6
        assert x == -3
        assert y == pytest.approx(176.0)
        assert height == pytest.approx(4.0)

    def test_incomplete_candle_is_skipped(self, canvas, scales):
        controller = CandlestickController([
            {'o': 10, 'c': 12, 'h': 13, 'l': 9},
            {'o': 10, 'h': 13, 'l': 9},
            {'o': 12, 'c': 11, 'h': 13, 'l': 10},
        ])
        controller.update_elements(*scales)

        assert controller.draw(canvas) == 2
        assert len(canvas.of('draw_rect')) == 2

    def test_body_width_clamped_to_slot(self, canvas):
        # 5 px per bar: body may use at most 80% of the slot
        x_scale = LinearScale(0, 20, 0, 100)
        y_scale = LinearScale(0, 100, 200, 0)
        controller = CandlestickController([{'o': 1, 'c': 2, 'h': 3, 'l': 0}] * 3,
                                           {'candle_width': 8})
        elements = controller.update_elements(x_scale, y_scale)
        assert elements[0].width == pytest.approx(4.0)

    def test_log_scale_mapping(self, canvas):
        x_scale = LinearScale(0, 10, 0, 100)
        y_scale = LogScale(1, 1000, 300, 0)
        controller = CandlestickController([{'o': 10, 'c': 100, 'h': 1000, 'l': 1}])
        element = controller.update_elements(x_scale, y_scale)[0]

        assert element.h == pytest.approx(0.0)
        assert element.l == pytest.approx(300.0)
        assert element.o == pytest.approx(200.0)
        assert element.c == pytest.approx(100.0)

    def test_element_without_coordinates(self, canvas):
        element = CandlestickElement(0, None, 1, 0, 1, True, 4, dict(CANDLESTICK_DEFAULTS))
        assert element.draw(canvas) is False
        assert canvas.calls == []

    def test_data_bounds(self):
        controller = CandlestickController([
            {'o': 10, 'c': 12, 'h': 13, 'l': 9},
            {'o': 12, 'c': 15, 'h': 16, 'l': 11},
        ])
        assert controller.data_bounds() == (0.0, 1.0, 9.0, 16.0)
        assert CandlestickController([]).data_bounds() is None


class TestScales:
    """Test the scale abstraction"""

    def test_linear_round_trip(self):
        scale = LinearScale(50, 150, 400, 0)
        assert scale.pixel_for(100) == 200
        assert scale.value_for(200) == 100

    def test_empty_domain(self):
        with pytest.raises(ValueError):
            LinearScale(1, 1, 0, 10)

    def test_log_rejects_non_positive_domain(self):
        with pytest.raises(ValueError):
            LogScale(0, 10, 0, 10)


class TestRegistry:
    """Test chart-type registration"""

    def test_built_in_types(self):
        assert {'area', 'bar', 'candlestick', 'line'} <= set(registered_chart_types())

    def test_candlestick_spec(self):
        spec = get_chart_type('candlestick')
        assert spec.controller is CandlestickController
        assert spec.element is CandlestickElement

    def test_unknown_type(self):
        with pytest.raises(ChartTypeError) as info:
            get_chart_type('renko')
        assert 'renko' in str(info.value)

    def test_register_custom_type(self):
        def factory(dataset, options):
            return ['item']

        register_chart_type('test-scatter', factory)
        assert get_chart_type('test-scatter').factory(None, {}) == ['item']
