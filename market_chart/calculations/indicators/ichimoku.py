# market_chart/calculations/indicators/ichimoku.py
"""
Ichimoku Cloud.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from .base import BarsLike, bar_arrays, validate_period


@dataclass
class IchimokuCloud:
    """
    Ichimoku lines aligned to the input bars.

    `displacement` is returned for plotting only; leading spans are not
    shifted forward and the lagging span is the raw close series.
    """
    conversion_line: np.ndarray
    base_line: np.ndarray
    leading_span_a: np.ndarray
    leading_span_b: np.ndarray
    lagging_span: np.ndarray
    displacement: int


def _midpoint(high: pd.Series, low: pd.Series, window: int) -> np.ndarray:
    """(rolling max high + rolling min low) / 2, NaN until the window is full"""
    upper = high.rolling(window, min_periods=window).max()
    lower = low.rolling(window, min_periods=window).min()
    return ((upper + lower) / 2).to_numpy(dtype=float)


def ichimoku_cloud(bars: BarsLike, conversion: int = 9, base: int = 26,
                   span_b: int = 52, displacement: int = 26) -> IchimokuCloud:
    """
    Calculate the Ichimoku Cloud lines.

    Args:
        bars: Bars sorted ascending by timestamp
        conversion: Tenkan-sen window
        base: Kijun-sen window
        span_b: Senkou span B window
        displacement: Forward plotting offset for the leading spans

    Returns:
        IchimokuCloud with five series of len(bars)
    """
    arrays = bar_arrays(bars)
    high = pd.Series(arrays['high'])
    low = pd.Series(arrays['low'])

    conversion_line = _midpoint(high, low, validate_period(conversion, 'conversion'))
    base_line = _midpoint(high, low, validate_period(base, 'base'))

    return IchimokuCloud(
        conversion_line=conversion_line,
        base_line=base_line,
        leading_span_a=(conversion_line + base_line) / 2,
        leading_span_b=_midpoint(high, low, validate_period(span_b, 'span_b')),
        lagging_span=arrays['close'].copy(),
        displacement=int(displacement)
    )
