# market_chart/calculations/indicators/base.py
"""
Shared helpers for indicator calculations.
Converts bar sequences into aligned float arrays; NaN marks a missing value.
"""

from collections.abc import Mapping
from typing import Dict, Sequence, Union

import numpy as np
import pandas as pd

from ...exceptions import ConfigurationError

OHLCV_FIELDS = ('open', 'high', 'low', 'close', 'volume')

BarsLike = Union[Sequence, pd.DataFrame]


def _field(bar, name: str) -> float:
    # Mappings may use long keys or the short REST keys (o/h/l/c/v)
    if isinstance(bar, Mapping):
        value = bar.get(name, bar.get(name[0]))
    else:
        value = getattr(bar, name, None)
    if value is None:
        return np.nan
    return float(value)


def bar_arrays(bars: BarsLike) -> Dict[str, np.ndarray]:
    """
    Split a bar sequence into one float64 array per OHLCV field.

    Args:
        bars: Bar objects, mappings with long or short keys, or a DataFrame
              with open/high/low/close/volume columns

    Returns:
        Dict of field name -> ndarray with len(bars) entries
    """
    if isinstance(bars, pd.DataFrame):
        return {
            name: bars[name].to_numpy(dtype=float) if name in bars.columns
            else np.full(len(bars), np.nan)
            for name in OHLCV_FIELDS
        }

    return {
        name: np.array([_field(bar, name) for bar in bars], dtype=float)
        for name in OHLCV_FIELDS
    }


def closes(bars: BarsLike) -> np.ndarray:
    """Close prices as a float64 array"""
    if isinstance(bars, pd.DataFrame):
        return bars['close'].to_numpy(dtype=float)
    return np.array([_field(bar, 'close') for bar in bars], dtype=float)


def undefined(n: int) -> np.ndarray:
    """An all-NaN series of length n"""
    return np.full(n, np.nan)


def validate_period(period: int, name: str = 'period') -> int:
    """Window lengths must be positive integers"""
    if int(period) != period or period < 1:
        raise ConfigurationError(f"{name} must be a positive integer", option=name, value=period)
    return int(period)
