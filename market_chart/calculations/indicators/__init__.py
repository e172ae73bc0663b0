"""
Indicator engine.

Pure functions from a sorted bar sequence to NaN-padded numpy series of the
same length. Nothing here raises for well-formed input.
"""

from .base import bar_arrays, closes
from .moving_averages import sma, ema
from .momentum import rsi, macd, MACDResult
from .volatility import bollinger_bands, atr, true_range, BollingerBands
from .volume import vwap, typical_price
from .ichimoku import ichimoku_cloud, IchimokuCloud

__all__ = [
    'bar_arrays',
    'closes',
    'sma',
    'ema',
    'rsi',
    'macd',
    'MACDResult',
    'bollinger_bands',
    'BollingerBands',
    'atr',
    'true_range',
    'vwap',
    'typical_price',
    'ichimoku_cloud',
    'IchimokuCloud'
]
