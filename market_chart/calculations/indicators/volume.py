# market_chart/calculations/indicators/volume.py
"""
Volume-weighted indicators.
"""

from typing import Dict

import numpy as np

from .base import BarsLike, bar_arrays


def _typical(arrays: Dict[str, np.ndarray]) -> np.ndarray:
    return (arrays['high'] + arrays['low'] + arrays['close']) / 3.0


def typical_price(bars: BarsLike) -> np.ndarray:
    """(high + low + close) / 3 per bar"""
    return _typical(bar_arrays(bars))


def vwap(bars: BarsLike) -> np.ndarray:
    """
    Cumulative Volume Weighted Average Price.

    Accumulates typical price * volume from the first supplied bar, so the
    caller passes exactly the accumulation window (e.g. one session).
    Entries are NaN while the cumulative volume is still zero.

    Args:
        bars: Bars sorted ascending by timestamp

    Returns:
        ndarray of len(bars)
    """
    arrays = bar_arrays(bars)
    volume = arrays['volume']
    cumulative_pv = np.cumsum(_typical(arrays) * volume)
    cumulative_volume = np.cumsum(volume)

    result = np.full(len(volume), np.nan)
    np.divide(cumulative_pv, cumulative_volume, out=result, where=cumulative_volume != 0)
    return result
