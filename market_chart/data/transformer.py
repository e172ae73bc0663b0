# market_chart/data/transformer.py
"""
Data Transformer - converts bars into renderer-ready structures.

Every function here is pure: it receives the full bar list and returns a
fresh result. Bars are re-sorted by timestamp before anything is derived,
which is a no-op for already sorted input.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .models import Bar, CandlestickPoint, FormattedChartData, PriceSummary
from ..calculations.indicators import closes

logger = logging.getLogger(__name__)


def to_bars(raw: Iterable) -> List[Bar]:
    """Accept Bar objects or raw mappings (long or t/o/h/l/c/v keys)"""
    return [item if isinstance(item, Bar) else Bar.from_dict(item)
            for item in raw
            if isinstance(item, (Bar, Mapping))]


def sort_bars(bars: Iterable[Bar]) -> List[Bar]:
    """Stable ascending sort by timestamp"""
    return sorted(bars, key=lambda bar: bar.timestamp)


def is_intraday(ts: datetime) -> bool:
    """A non-midnight time of day marks intraday data"""
    return not (ts.hour == 0 and ts.minute == 0)


def format_display_label(ts: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Axis label for one bar.

    Intraday timestamps render as time of day ("09:30 AM"), midnight
    timestamps as month and day ("Jan 5"). Aware timestamps are converted
    to `tz` first when one is given.
    """
    if tz is not None and ts.tzinfo is not None:
        ts = ts.astimezone(tz)

    if is_intraday(ts):
        return ts.strftime('%I:%M %p')
    return f"{ts.strftime('%b')} {ts.day}"


def format_bars(bars: Sequence[Bar], tz: Optional[tzinfo] = None) -> FormattedChartData:
    """
    Convert bars into display labels, indexed candle points, volumes and closes.

    Args:
        bars: Bars in any order
        tz: Optional display timezone for aware timestamps

    Returns:
        FormattedChartData aligned to the sorted bars
    """
    ordered = sort_bars(bars)
    formatted = FormattedChartData()

    for index, bar in enumerate(ordered):
        formatted.timestamps.append(bar.timestamp)
        formatted.display_labels.append(format_display_label(bar.timestamp, tz))
        formatted.candlestick_points.append(CandlestickPoint(
            index=index,
            open=bar.open,
            high=bar.high,
            low=bar.low,
            close=bar.close
        ))
        formatted.volumes.append(bar.volume)
        formatted.close_prices.append(bar.close)

    logger.debug(f"Formatted {len(formatted)} bars")
    return formatted


def volume_colors(bars: Sequence[Bar], up_color: str, down_color: str) -> List[str]:
    """
    Colour each volume bar by price direction.

    The first bar and any bar whose close is at or above the previous
    close are "up"; everything else is "down".
    """
    prices = closes(bars)
    colors = []
    for i, price in enumerate(prices):
        if i == 0 or price >= prices[i - 1]:
            colors.append(up_color)
        else:
            colors.append(down_color)
    return colors


def price_direction_color(bars: Sequence[Bar], up_color: str, down_color: str) -> str:
    """Up colour when the last close is at or above the first close"""
    prices = closes(bars)
    if len(prices) == 0 or prices[-1] >= prices[0]:
        return up_color
    return down_color


def summarize_prices(bars: Sequence[Bar]) -> Optional[PriceSummary]:
    """
    Panel header figures for a bar list.

    Change is measured from the first close to the last close; high and low
    are the extremes over every bar. Returns None for an empty list.
    """
    ordered = sort_bars(bars)
    if not ordered:
        return None

    first, last = ordered[0], ordered[-1]
    highs = np.array([b.high for b in ordered if b.high is not None], dtype=float)
    lows = np.array([b.low for b in ordered if b.low is not None], dtype=float)

    prices = closes(ordered)
    defined = prices[np.isfinite(prices)]
    if defined.size:
        start, current = float(defined[0]), float(defined[-1])
        change = current - start
        change_percent = (change / start) * 100 if start else 0.0
    else:
        current = change = change_percent = float('nan')

    return PriceSummary(
        current=current,
        open=first.open,
        high=float(np.nanmax(highs)) if highs.size else float('nan'),
        low=float(np.nanmin(lows)) if lows.size else float('nan'),
        change=change,
        change_percent=change_percent,
        volume=last.volume
    )
