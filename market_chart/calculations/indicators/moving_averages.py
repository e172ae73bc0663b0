# market_chart/calculations/indicators/moving_averages.py
"""
Simple and exponential moving averages of close prices.

Both return a series aligned to the input bars, with NaN over the warm-up
period (indices below period - 1).
"""

import logging

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .base import BarsLike, closes, undefined, validate_period

logger = logging.getLogger(__name__)


def sma_values(values: np.ndarray, period: int) -> np.ndarray:
    """Trailing arithmetic mean over an arbitrary float array"""
    period = validate_period(period)
    result = undefined(len(values))
    if len(values) < period:
        return result

    result[period - 1:] = sliding_window_view(values, period).mean(axis=1)
    return result


def ema_values(values: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential moving average over an arbitrary float array.

    The value at period - 1 is seeded with the simple mean of the first
    period values; afterwards ema[i] = (x[i] - ema[i-1]) * k + ema[i-1].
    """
    period = validate_period(period)
    n = len(values)
    result = undefined(n)
    if n < period:
        return result

    k = 2.0 / (period + 1)
    result[period - 1] = values[:period].mean()
    for i in range(period, n):
        prev = result[i - 1]
        result[i] = (values[i] - prev) * k + prev

    return result


def sma(bars: BarsLike, period: int) -> np.ndarray:
    """
    Simple Moving Average of closes.

    Args:
        bars: Bars sorted ascending by timestamp
        period: Window length

    Returns:
        ndarray of len(bars); entries [0, period-2] are NaN
    """
    return sma_values(closes(bars), period)


def ema(bars: BarsLike, period: int) -> np.ndarray:
    """
    Exponential Moving Average of closes, multiplier 2 / (period + 1).

    Args:
        bars: Bars sorted ascending by timestamp
        period: Window length

    Returns:
        ndarray of len(bars); entries [0, period-2] are NaN
    """
    return ema_values(closes(bars), period)
