# market_chart/data/models.py
"""
Data models for bars and renderer-ready chart structures
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
import pytz


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def parse_timestamp(value: Any) -> datetime:
    """
    Normalise a bar timestamp to a datetime.

    Accepts datetimes, ISO strings and epoch numbers. Epoch values above 1e11
    are milliseconds, otherwise seconds; both are interpreted as UTC. Naive
    datetimes and ISO strings without an offset are taken as UTC, so every
    parsed timestamp is timezone-aware.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000.0 if abs(value) > 1e11 else float(value)
        return datetime.fromtimestamp(seconds, tz=pytz.utc)
    if isinstance(value, str):
        value = pd.Timestamp(value).to_pydatetime()
    if not isinstance(value, datetime):
        raise ValueError(f"Unsupported timestamp: {value!r}")
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


@dataclass(frozen=True)
class Bar:
    """One OHLCV sample for a fixed interval"""
    timestamp: datetime
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]
    volume: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bar':
        """
        Build a bar from either long keys (timestamp/open/...) or the short
        keys returned by the bars endpoint (t/o/h/l/c/v).
        Missing price fields become None.
        """
        def pick(long_key: str, short_key: str):
            return data[long_key] if long_key in data else data.get(short_key)

        return cls(
            timestamp=parse_timestamp(pick('timestamp', 't')),
            open=_to_float(pick('open', 'o')),
            high=_to_float(pick('high', 'h')),
            low=_to_float(pick('low', 'l')),
            close=_to_float(pick('close', 'c')),
            volume=float(pick('volume', 'v') or 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'open': self.open,
            'high': self.high,
            'low': self.low,
            'close': self.close,
            'volume': self.volume
        }

    @property
    def is_complete(self) -> bool:
        """True when all four prices are present and finite"""
        prices = (self.open, self.high, self.low, self.close)
        return all(p is not None and math.isfinite(p) for p in prices)


@dataclass(frozen=True)
class CandlestickPoint:
    """Render-ready candle; index is the bar position used as the x value"""
    index: int
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    close: Optional[float]


@dataclass
class FormattedChartData:
    """Output of the data transformer, one entry per bar in timestamp order"""
    display_labels: List[str] = field(default_factory=list)
    candlestick_points: List[CandlestickPoint] = field(default_factory=list)
    volumes: List[float] = field(default_factory=list)
    close_prices: List[Optional[float]] = field(default_factory=list)
    timestamps: List[datetime] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candlestick_points)


@dataclass
class PriceSummary:
    """Header figures for a symbol panel"""
    current: float
    open: float
    high: float
    low: float
    change: float
    change_percent: float
    volume: float


@dataclass(frozen=True)
class Timeframe:
    """Selectable bar interval and how many bars to request for it"""
    value: str
    label: str
    api_value: str
    limit: int
    refresh_ms: int


TIMEFRAMES = (
    Timeframe('1Min', '1M', '1Min', 120, 30_000),
    Timeframe('5Min', '5M', '5Min', 120, 60_000),
    Timeframe('15Min', '15M', '15Min', 100, 60_000),
    Timeframe('1Hour', '1H', '1Hour', 72, 300_000),
    Timeframe('1Day', '1D', '1Day', 30, 900_000),
    Timeframe('1Week', '1W', '1Week', 52, 900_000),
    Timeframe('1Month', '1Mo', '1Month', 24, 900_000),
)

DEFAULT_TIMEFRAME = '15Min'


def get_timeframe(value: str) -> Timeframe:
    """Look up a timeframe by value, falling back to the 15 minute default"""
    for timeframe in TIMEFRAMES:
        if timeframe.value == value:
            return timeframe
    return next(tf for tf in TIMEFRAMES if tf.value == DEFAULT_TIMEFRAME)
