# market_chart/calculations/indicators/momentum.py
"""
Momentum oscillators: RSI and MACD.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .base import BarsLike, closes, undefined, validate_period
from .moving_averages import ema_values

logger = logging.getLogger(__name__)


@dataclass
class MACDResult:
    """MACD line, signal line and histogram, each aligned to the input bars"""
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


def rsi(bars: BarsLike, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index with Wilder smoothing.

    The first average gain/loss is the simple mean of the first `period`
    close-to-close differences and lands at index `period`. After that:
        avg = (prev_avg * (period - 1) + current) / period
    RSI is 100 whenever the average loss is exactly zero.

    Args:
        bars: Bars sorted ascending by timestamp
        period: Smoothing length

    Returns:
        ndarray of len(bars) with values in [0, 100]; indices < period are NaN
    """
    period = validate_period(period)
    prices = closes(bars)
    n = len(prices)
    result = undefined(n)
    if n <= period:
        return result

    diffs = np.diff(prices)
    # clip keeps NaN so bad closes contaminate instead of reading as 0
    gains = np.clip(diffs, 0, None)
    losses = np.clip(-diffs, 0, None)

    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period + 1, n):
        avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def macd(bars: BarsLike, fast: int = 12, slow: int = 26, signal: int = 9) -> MACDResult:
    """
    Moving Average Convergence Divergence.

    The MACD line is EMA(fast) - EMA(slow) wherever both are defined. The
    signal line is an EMA of the MACD line seeded with the mean of its first
    `signal` defined values, placed at the index of the last of those.

    Args:
        bars: Bars sorted ascending by timestamp
        fast: Fast EMA period
        slow: Slow EMA period
        signal: Signal EMA period

    Returns:
        MACDResult with three series of len(bars)
    """
    signal = validate_period(signal, 'signal')
    prices = closes(bars)

    # NaN in either EMA propagates into the difference
    macd_line = ema_values(prices, validate_period(fast, 'fast')) - \
        ema_values(prices, validate_period(slow, 'slow'))

    signal_line = undefined(len(prices))
    defined = np.flatnonzero(~np.isnan(macd_line))
    if len(defined) >= signal:
        seed_index = defined[signal - 1]
        signal_line[seed_index] = macd_line[defined[:signal]].mean()

        k = 2.0 / (signal + 1)
        for i in range(seed_index + 1, len(prices)):
            prev = signal_line[i - 1]
            signal_line[i] = (macd_line[i] - prev) * k + prev

    return MACDResult(
        macd=macd_line,
        signal=signal_line,
        histogram=macd_line - signal_line
    )
