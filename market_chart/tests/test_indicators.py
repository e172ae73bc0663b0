# market_chart/tests/test_indicators.py
"""
Module: Indicator Engine Tests
Purpose: Warm-up alignment, recurrence properties and the worked examples
         for SMA, EMA, RSI, MACD, Bollinger Bands, ATR, VWAP and Ichimoku
"""

import numpy as np
import pandas as pd
import pytest

from market_chart.calculations.indicators import (atr, bar_arrays, bollinger_bands, closes,
                                                  ema, ichimoku_cloud, macd, rsi, sma,
                                                  true_range, typical_price, vwap)
from market_chart.exceptions import ConfigurationError
from market_chart.tests.conftest import make_bars


def random_closes(n, seed=7):
    rng = np.random.default_rng(seed)
    return list(100 + np.cumsum(rng.normal(0, 1, n)))


class TestInputs:
    """Test the accepted bar representations"""

    def test_short_key_mappings(self):
        bars = [{'o': 1, 'h': 3, 'l': 0.5, 'c': 2, 'v': 10}]
        arrays = bar_arrays(bars)
        assert arrays['open'][0] == 1
        assert arrays['close'][0] == 2
        assert arrays['volume'][0] == 10

    def test_missing_values_become_nan(self):
        assert np.isnan(closes([{'close': None}]))[0]

    def test_dataframe_input(self):
        frame = pd.DataFrame({'close': [1.0, 2.0, 3.0]})
        np.testing.assert_allclose(sma(frame, 3), [np.nan, np.nan, 2.0])

    @pytest.mark.parametrize("period", [0, -3, 2.5])
    def test_invalid_period_rejected(self, period):
        with pytest.raises(ConfigurationError):
            sma(make_bars([1, 2, 3]), period)


class TestSMA:
    """Test simple moving average"""

    def test_worked_example(self):
        result = sma(make_bars([10, 12, 11, 13, 14]), 3)
        assert np.isnan(result[0]) and np.isnan(result[1])
        np.testing.assert_allclose(np.round(result[2:], 3), [11.0, 12.0, 12.667])

    def test_alignment_and_window_mean(self):
        prices = random_closes(60)
        period = 9
        result = sma(make_bars(prices), period)

        assert len(result) == len(prices)
        assert np.isnan(result[:period - 1]).all()
        for i in range(period - 1, len(prices)):
            assert result[i] == pytest.approx(np.mean(prices[i - period + 1:i + 1]))

    def test_fewer_bars_than_period(self):
        result = sma(make_bars([1, 2]), 5)
        assert len(result) == 2
        assert np.isnan(result).all()

    def test_empty_input(self):
        assert len(sma([], 3)) == 0


class TestEMA:
    """Test exponential moving average"""

    def test_seed_equals_sma(self):
        bars = make_bars(random_closes(40))
        period = 10
        assert ema(bars, period)[period - 1] == pytest.approx(sma(bars, period)[period - 1])

    def test_recurrence(self):
        prices = random_closes(50)
        period = 12
        k = 2 / (period + 1)
        result = ema(make_bars(prices), period)

        assert np.isnan(result[:period - 1]).all()
        for i in range(period, len(prices)):
            assert result[i] == pytest.approx(prices[i] * k + result[i - 1] * (1 - k))


class TestRSI:
    """Test relative strength index"""

    def test_monotonic_rise_reaches_100(self):
        result = rsi(make_bars([100 + i for i in range(30)]), 14)
        assert np.isnan(result[:14]).all()
        assert (result[14:] == 100).all()

    def test_bounds(self):
        result = rsi(make_bars(random_closes(200, seed=3)), 14)
        defined = result[~np.isnan(result)]
        assert len(defined) == 200 - 14
        assert ((defined >= 0) & (defined <= 100)).all()

    def test_monotonic_fall_reaches_0(self):
        result = rsi(make_bars([100 - i for i in range(20)]), 5)
        assert (result[5:] == 0).all()

    def test_not_enough_bars(self):
        assert np.isnan(rsi(make_bars([1, 2, 3]), 14)).all()

    def test_calls_do_not_share_state(self):
        first_symbol = make_bars(random_closes(60, seed=11))
        second_symbol = make_bars([50 - 0.5 * i for i in range(40)])

        second_alone = rsi(second_symbol, 14)
        first = rsi(first_symbol, 14)
        second = rsi(second_symbol, 14)
        first_again = rsi(first_symbol, 14)

        np.testing.assert_array_equal(first_again, first)
        np.testing.assert_array_equal(second, second_alone)
        assert (second[14:] == 0).all()


class TestMACD:
    """Test MACD line, signal and histogram"""

    def test_histogram_is_difference(self):
        result = macd(make_bars(random_closes(120)))
        both = ~np.isnan(result.macd) & ~np.isnan(result.signal)
        assert both.any()
        np.testing.assert_array_equal(result.histogram[both],
                                      result.macd[both] - result.signal[both])

    def test_warm_up(self):
        result = macd(make_bars(random_closes(60)), 12, 26, 9)
        assert np.isnan(result.macd[:25]).all()
        assert not np.isnan(result.macd[25])
        assert np.isnan(result.signal[:33]).all()
        assert result.signal[33] == pytest.approx(np.mean(result.macd[25:34]))

    def test_short_series(self):
        result = macd(make_bars(random_closes(20)))
        assert np.isnan(result.macd).all()
        assert np.isnan(result.signal).all()


class TestBollingerBands:
    """Test Bollinger Bands"""

    def test_constant_prices_collapse(self):
        bands = bollinger_bands(make_bars([100] * 10), 5, 2)
        for series in (bands.upper, bands.middle, bands.lower):
            assert np.isnan(series[:4]).all()
            assert (series[4:] == 100).all()

    @pytest.mark.parametrize("price", [0.1, 0.3, 1.7, 123.456])
    def test_fractional_constant_prices_collapse(self, price):
        bands = bollinger_bands(make_bars([price] * 25, spread=0), 20, 2)
        for i in range(19, 25):
            assert bands.upper[i] == bands.middle[i] == bands.lower[i] == price

    def test_band_ordering(self):
        bands = bollinger_bands(make_bars(random_closes(80)), 20, 2)
        defined = ~np.isnan(bands.middle)
        assert (bands.upper[defined] >= bands.middle[defined]).all()
        assert (bands.middle[defined] >= bands.lower[defined]).all()

    def test_population_deviation(self):
        prices = [1, 2, 3, 4, 5]
        bands = bollinger_bands(make_bars(prices), 5, 1)
        assert bands.upper[4] - bands.middle[4] == pytest.approx(np.std(prices))


class TestATR:
    """Test true range and average true range"""

    def test_true_range_uses_previous_close(self):
        bars = [
            {'open': 10, 'high': 11, 'low': 9, 'close': 10},
            {'open': 14, 'high': 15, 'low': 13, 'close': 14},
        ]
        np.testing.assert_allclose(true_range(bars), [2.0, 5.0])

    def test_seed_and_smoothing(self):
        bars = make_bars(random_closes(30))
        tr = true_range(bars)
        result = atr(bars, 14)

        assert np.isnan(result[:14]).all()
        assert result[14] == pytest.approx(tr[:14].mean())
        assert result[15] == pytest.approx((result[14] * 13 + tr[15]) / 14)


class TestVWAP:
    """Test volume weighted average price"""

    def test_cumulative_average(self):
        bars = [
            {'high': 11, 'low': 9, 'close': 10, 'volume': 100},
            {'high': 13, 'low': 11, 'close': 12, 'volume': 300},
        ]
        typical = typical_price(bars)
        np.testing.assert_allclose(typical, [10.0, 12.0])
        np.testing.assert_allclose(vwap(bars), [10.0, (10 * 100 + 12 * 300) / 400])

    def test_zero_volume_prefix_is_undefined(self):
        bars = [
            {'high': 11, 'low': 9, 'close': 10, 'volume': 0},
            {'high': 11, 'low': 9, 'close': 10, 'volume': 50},
        ]
        result = vwap(bars)
        assert np.isnan(result[0])
        assert result[1] == pytest.approx(10.0)


class TestIchimoku:
    """Test Ichimoku cloud lines"""

    def test_midpoints(self):
        bars = make_bars(random_closes(80))
        cloud = ichimoku_cloud(bars)
        arrays = bar_arrays(bars)

        assert np.isnan(cloud.conversion_line[:8]).all()
        expected = (arrays['high'][:9].max() + arrays['low'][:9].min()) / 2
        assert cloud.conversion_line[8] == pytest.approx(expected)
        assert np.isnan(cloud.leading_span_b[:51]).all()
        assert cloud.leading_span_a[30] == pytest.approx(
            (cloud.conversion_line[30] + cloud.base_line[30]) / 2)
        np.testing.assert_array_equal(cloud.lagging_span, arrays['close'])
        assert cloud.displacement == 26
