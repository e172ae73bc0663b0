# market_chart/calculations/indicators/volatility.py
"""
Volatility indicators: Bollinger Bands and Average True Range.
"""

import logging
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .base import BarsLike, bar_arrays, closes, undefined, validate_period

logger = logging.getLogger(__name__)


@dataclass
class BollingerBands:
    """Upper, middle and lower bands aligned to the input bars"""
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


def bollinger_bands(bars: BarsLike, period: int = 20, std_dev: float = 2) -> BollingerBands:
    """
    Bollinger Bands around the simple moving average.

    The deviation is the population standard deviation (divisor = period)
    of the same trailing window, taken around the window mean. A window of
    identical closes collapses all three bands onto the same value.

    Args:
        bars: Bars sorted ascending by timestamp
        period: Window length
        std_dev: Band width in standard deviations

    Returns:
        BollingerBands with three series of len(bars); indices < period - 1 are NaN
    """
    period = validate_period(period)
    prices = closes(bars)
    n = len(prices)

    upper, middle, lower = undefined(n), undefined(n), undefined(n)
    if n < period:
        return BollingerBands(upper=upper, middle=middle, lower=lower)

    windows = sliding_window_view(prices, period)
    mean = windows.mean(axis=1)
    deviation = np.sqrt(((windows - mean[:, None]) ** 2).sum(axis=1) / period)

    # Flat windows: the mean can be off by an ulp, so pin the bands to the close
    flat = np.ptp(windows, axis=1) == 0
    mean[flat] = windows[flat, 0]
    deviation[flat] = 0.0

    middle[period - 1:] = mean
    upper[period - 1:] = mean + std_dev * deviation
    lower[period - 1:] = mean - std_dev * deviation

    return BollingerBands(upper=upper, middle=middle, lower=lower)


def true_range(bars: BarsLike) -> np.ndarray:
    """
    True range per bar: max(high - low, |high - prev_close|, |low - prev_close|).
    The first bar has no previous close and uses high - low.
    """
    arrays = bar_arrays(bars)
    high, low, close = arrays['high'], arrays['low'], arrays['close']

    tr = high - low
    if len(tr) > 1:
        prev_close = close[:-1]
        tr[1:] = np.maximum.reduce([
            high[1:] - low[1:],
            np.abs(high[1:] - prev_close),
            np.abs(low[1:] - prev_close),
        ])
    return tr


def atr(bars: BarsLike, period: int = 14) -> np.ndarray:
    """
    Average True Range with Wilder smoothing.

    Seeded at index `period` with the mean of the first `period` true ranges;
    afterwards atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period.

    Args:
        bars: Bars sorted ascending by timestamp
        period: Smoothing length

    Returns:
        ndarray of len(bars); indices < period are NaN
    """
    period = validate_period(period)
    tr = true_range(bars)
    n = len(tr)
    result = undefined(n)
    if n <= period:
        return result

    result[period] = tr[:period].mean()
    for i in range(period + 1, n):
        result[i] = (result[i - 1] * (period - 1) + tr[i]) / period

    return result
