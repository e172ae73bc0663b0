# market_chart/dashboard/components/chart/datasets.py
"""
Datasets, paint order and the series builders the panel assembles.

Primary price series come from one of three pure builders selected by
ChartType; overlays (SMA/EMA/VWAP/Bollinger/comparison) and volume are
built from the sorted bars. Every dataset carries a PaintOrder and the
renderer sorts on it before drawing.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ....calculations.indicators import bollinger_bands, closes, ema, sma, vwap
from ....data.models import Bar, FormattedChartData
from ....data.transformer import price_direction_color, volume_colors
from ....styles.themes import ChartTheme, with_alpha


class ChartType(str, Enum):
    CANDLESTICK = 'candlestick'
    LINE = 'line'
    AREA = 'area'


class PaintOrder(IntEnum):
    """Lower values are painted first (underneath)"""
    PRICE = 0
    OVERLAY = 1
    BAND = 2
    VOLUME = 3


@dataclass
class Dataset:
    """One named, typed series plus its rendering attributes"""
    label: str
    type: str
    data: Any
    order: PaintOrder
    axis: str = 'y'
    color: str = '#9ca3af'
    fill_color: Optional[str] = None
    line_style: str = 'solid'
    width: float = 1.5
    point_colors: Optional[List[str]] = None
    fill_to: Optional[str] = None
    key: str = ''

    def value_at(self, index: int) -> Optional[float]:
        """Plotted y value at a bar index (close for candles)"""
        if index < 0 or index >= len(self.data):
            return None
        item = self.data[index]
        if hasattr(item, 'close'):
            return item.close
        return float(item)


@dataclass
class ChartData:
    """Shared x labels plus datasets already sorted by paint order"""
    labels: List[str] = field(default_factory=list)
    datasets: Tuple[Dataset, ...] = ()
    symbol: Optional[str] = None

    def find(self, key: str) -> Optional[Dataset]:
        return next((ds for ds in self.datasets if ds.key == key), None)

    @property
    def primary(self) -> Optional[Dataset]:
        return next((ds for ds in self.datasets if ds.order == PaintOrder.PRICE), None)


def sort_by_paint_order(datasets: Sequence[Dataset]) -> List[Dataset]:
    """Stable sort: equal priorities keep their insertion order"""
    return sorted(datasets, key=lambda ds: int(ds.order))


# ---------------------------------------------------------- primary series

def _price_label(symbol: str) -> str:
    return f"{symbol} Price" if symbol else "Price"


def _direction_color(formatted: FormattedChartData, theme: ChartTheme) -> str:
    return price_direction_color(formatted.candlestick_points, theme.up, theme.down)


def build_candlestick_series(formatted: FormattedChartData, theme: ChartTheme,
                             symbol: str = '') -> Dataset:
    return Dataset(
        label=_price_label(symbol),
        type=ChartType.CANDLESTICK.value,
        data=list(formatted.candlestick_points),
        order=PaintOrder.PRICE,
        color=theme.up,
        fill_color=with_alpha(theme.up, 0.1),
        width=1,
        key='price'
    )


def build_line_series(formatted: FormattedChartData, theme: ChartTheme,
                      symbol: str = '') -> Dataset:
    return Dataset(
        label=_price_label(symbol),
        type=ChartType.LINE.value,
        data=np.array([np.nan if p is None else p for p in formatted.close_prices], dtype=float),
        order=PaintOrder.PRICE,
        color=_direction_color(formatted, theme),
        width=2,
        key='price'
    )


def build_area_series(formatted: FormattedChartData, theme: ChartTheme,
                      symbol: str = '') -> Dataset:
    color = _direction_color(formatted, theme)
    return Dataset(
        label=_price_label(symbol),
        type=ChartType.AREA.value,
        data=np.array([np.nan if p is None else p for p in formatted.close_prices], dtype=float),
        order=PaintOrder.PRICE,
        color=color,
        fill_color=with_alpha(color, 0.2),
        width=2,
        key='price'
    )


PRIMARY_BUILDERS: Dict[ChartType, Callable[..., Dataset]] = {
    ChartType.CANDLESTICK: build_candlestick_series,
    ChartType.LINE: build_line_series,
    ChartType.AREA: build_area_series,
}


def build_primary_series(chart_type, formatted: FormattedChartData, theme: ChartTheme,
                         symbol: str = '') -> Dataset:
    return PRIMARY_BUILDERS[ChartType(chart_type)](formatted, theme, symbol)


# ---------------------------------------------------------------- overlays

def sma_overlay(bars: Sequence[Bar], period: int, theme: ChartTheme) -> Dataset:
    return Dataset(
        label=f"SMA ({period})",
        type='line',
        data=sma(bars, period),
        order=PaintOrder.OVERLAY,
        color=theme.blue.base,
        key=f"sma:{period}"
    )


def ema_overlay(bars: Sequence[Bar], period: int, theme: ChartTheme) -> Dataset:
    return Dataset(
        label=f"EMA ({period})",
        type='line',
        data=ema(bars, period),
        order=PaintOrder.OVERLAY,
        color=theme.purple.base,
        key=f"ema:{period}"
    )


def vwap_overlay(bars: Sequence[Bar], theme: ChartTheme) -> Dataset:
    return Dataset(
        label="VWAP",
        type='line',
        data=vwap(bars),
        order=PaintOrder.OVERLAY,
        color=theme.gray.light,
        line_style='dot',
        key='vwap'
    )


def bollinger_overlays(bars: Sequence[Bar], period: int, std_dev: float,
                       theme: ChartTheme) -> List[Dataset]:
    """Upper and lower bands (filled between) plus a dashed middle band"""
    bands = bollinger_bands(bars, period, std_dev)
    color = theme.amber.base
    suffix = f"({period}, {std_dev:g})"

    return [
        Dataset(
            label=f"BB Upper {suffix}",
            type='line',
            data=bands.upper,
            order=PaintOrder.BAND,
            color=color,
            width=1,
            fill_color=theme.amber.gradient_start,
            fill_to='bb:lower',
            key='bb:upper'
        ),
        Dataset(
            label=f"BB Middle {suffix}",
            type='line',
            data=bands.middle,
            order=PaintOrder.BAND,
            color=color,
            width=1,
            line_style='dash',
            key='bb:middle'
        ),
        Dataset(
            label=f"BB Lower {suffix}",
            type='line',
            data=bands.lower,
            order=PaintOrder.BAND,
            color=color,
            width=1,
            key='bb:lower'
        ),
    ]


def volume_dataset(bars: Sequence[Bar], theme: ChartTheme) -> Dataset:
    return Dataset(
        label="Volume",
        type='bar',
        data=np.array([bar.volume for bar in bars], dtype=float),
        order=PaintOrder.VOLUME,
        axis='y1',
        color=theme.gray.medium,
        point_colors=volume_colors(bars, with_alpha(theme.up, 0.5), with_alpha(theme.down, 0.5)),
        key='volume'
    )


COMPARISON_COLORS = ('blue', 'purple', 'amber', 'green', 'red')


def comparison_overlay(symbol: str, bars: Sequence[Bar], length: int,
                       reference_close: float, theme: ChartTheme,
                       slot: int = 0) -> Dataset:
    """
    Close prices of another symbol rebased onto the primary's first close.

    The last `length` bars are aligned to the right edge of the primary
    series; missing leading positions are NaN.
    """
    prices = closes(bars)[-length:] if length else closes(bars)[:0]
    data = np.full(length, np.nan)
    if len(prices):
        data[length - len(prices):] = prices

    finite = data[np.isfinite(data)]
    if len(finite) and finite[0] != 0 and np.isfinite(reference_close):
        data = data * (reference_close / finite[0])

    ramp = getattr(theme, COMPARISON_COLORS[slot % len(COMPARISON_COLORS)])
    return Dataset(
        label=f"{symbol} (rebased)",
        type='line',
        data=data,
        order=PaintOrder.OVERLAY,
        color=ramp.light or ramp.base,
        line_style='dash',
        key=f"compare:{symbol}"
    )
