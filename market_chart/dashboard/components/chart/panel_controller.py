# market_chart/dashboard/components/chart/panel_controller.py
"""
Panel Controller.

Owns one ChartConfiguration and the bars of the symbols shown in a panel,
and derives the sorted dataset list from them. The derivation is memoised
on (bars, symbols, config). Overlays are cached separately from the
primary price series, so switching chart type rebuilds only the primary
series.

Qt-free: the ChartPanel widget drives this object and renders its output.
"""

import logging
from dataclasses import astuple, dataclass, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .datasets import (ChartData, ChartType, Dataset, bollinger_overlays,
                       build_primary_series, comparison_overlay, ema_overlay,
                       sma_overlay, sort_by_paint_order, volume_dataset, vwap_overlay)
from .options import build_chart_options, get_preset
from ....data.models import Bar, FormattedChartData, PriceSummary
from ....data.transformer import format_bars, sort_bars, summarize_prices, to_bars
from ....exceptions import ConfigurationError
from ....styles.themes import get_theme

logger = logging.getLogger(__name__)


class PanelState(str, Enum):
    EMPTY = 'empty'
    RENDERED = 'rendered'


@dataclass
class ChartConfiguration:
    """Visible configuration of one symbol panel"""
    show_volume: bool = True
    show_sma: bool = False
    sma_period: int = 20
    show_ema: bool = False
    ema_period: int = 9
    show_bollinger_bands: bool = False
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0
    show_vwap: bool = False
    chart_type: str = ChartType.CANDLESTICK.value
    zoom_enabled: bool = True
    show_grid_lines: bool = True
    theme: str = 'dark'
    preset: str = 'standard'

    def snapshot(self) -> tuple:
        return astuple(self)


TOGGLE_OPTIONS = ('show_volume', 'show_sma', 'show_ema', 'show_bollinger_bands',
                  'show_vwap', 'zoom_enabled', 'show_grid_lines')
PERIOD_OPTIONS = ('sma_period', 'ema_period', 'bollinger_period')

# Option names as used by host pages
OPTION_ALIASES = {
    'showVolume': 'show_volume',
    'showSMA': 'show_sma',
    'smaPeriod': 'sma_period',
    'showEMA': 'show_ema',
    'emaPeriod': 'ema_period',
    'showBollingerBands': 'show_bollinger_bands',
    'bollingerPeriod': 'bollinger_period',
    'bollingerStdDev': 'bollinger_std_dev',
    'showVWAP': 'show_vwap',
    'chartType': 'chart_type',
    'zoomEnabled': 'zoom_enabled',
    'showGridLines': 'show_grid_lines',
}

_FIELD_NAMES = tuple(f.name for f in fields(ChartConfiguration))


def _option_name(name: str) -> str:
    name = OPTION_ALIASES.get(name, name)
    if name not in _FIELD_NAMES:
        raise ConfigurationError(f"Unknown chart option '{name}'", option=name)
    return name


class ChartPanelController:
    """
    [CLASS SUMMARY]
    Purpose: State machine over one ChartConfiguration and its symbol bars
    Responsibilities:
        - Hold bars per symbol and the panel configuration
        - Derive the paint-ordered dataset list (memoised)
        - Forward zoom operations to the attached ZoomController
        - Discard stale asynchronous fetch results
    Usage:
        controller = ChartPanelController(['AAPL'])
        controller.set_symbol_bars('AAPL', bars)
        chart = controller.chart_data()
    """

    def __init__(self, symbols: Sequence[str] = (), config: Optional[ChartConfiguration] = None,
                 zoom=None, display_tz=None, zoom_step: float = 1.1,
                 candle_width: Optional[float] = None):
        self.symbols: Tuple[str, ...] = tuple(symbols)
        self.config = config or ChartConfiguration()
        self.display_tz = display_tz
        self.zoom_step = zoom_step
        self.candle_width = candle_width

        self._bars: Dict[str, List[Bar]] = {}
        self._bars_version = 0
        self._request_token = 0

        self._chart_cache: Optional[Tuple[tuple, ChartData]] = None
        self._overlay_cache: Optional[Tuple[tuple, List[Dataset]]] = None
        self._primary_cache: Optional[Tuple[tuple, Dataset]] = None
        self._formatted_cache: Optional[Tuple[tuple, FormattedChartData]] = None

        # Recompute counters, inspected by tests and debug logging
        self.stats = {'chart_builds': 0, 'overlay_builds': 0, 'primary_builds': 0}

        self.zoom = None
        if zoom is not None:
            self.attach_zoom(zoom)

    # ------------------------------------------------------------------ bars

    def set_symbols(self, symbols: Iterable[str]):
        self.symbols = tuple(symbols)

    def set_bars(self, bars_by_symbol: Mapping[str, Iterable]):
        """Replace all bars; symbols not yet known are appended in mapping order"""
        self._bars = {symbol: sort_bars(to_bars(bars)) for symbol, bars in bars_by_symbol.items()}
        self.symbols = self.symbols + tuple(s for s in bars_by_symbol if s not in self.symbols)
        self._bars_version += 1
        logger.debug(f"Bars replaced for {list(bars_by_symbol)} (version {self._bars_version})")

    def set_symbol_bars(self, symbol: str, bars: Iterable):
        self._bars[symbol] = sort_bars(to_bars(bars))
        if symbol not in self.symbols:
            self.symbols = self.symbols + (symbol,)
        self._bars_version += 1
        logger.debug(f"{symbol}: {len(self._bars[symbol])} bars (version {self._bars_version})")

    def bars_for(self, symbol: str) -> List[Bar]:
        return list(self._bars.get(symbol, ()))

    def clear(self):
        self._bars = {}
        self._bars_version += 1

    @property
    def primary_symbol(self) -> Optional[str]:
        """First requested symbol that has bars"""
        return next((s for s in self.symbols if self._bars.get(s)), None)

    @property
    def state(self) -> PanelState:
        return PanelState.RENDERED if self.primary_symbol else PanelState.EMPTY

    # --------------------------------------------------------- configuration

    def toggle(self, option: str) -> bool:
        """Flip a boolean option; returns the new value"""
        name = _option_name(option)
        if name not in TOGGLE_OPTIONS:
            raise ConfigurationError(f"'{name}' is not a toggle", option=name)
        value = not getattr(self.config, name)
        if name == 'zoom_enabled':
            self.set_zoom_enabled(value)
        else:
            setattr(self.config, name, value)
        return value

    def set_period(self, option: str, value: int):
        name = _option_name(option)
        if name not in PERIOD_OPTIONS:
            raise ConfigurationError(f"'{name}' is not a period option", option=name)
        try:
            period = int(value)
        except (TypeError, ValueError, OverflowError):
            raise ConfigurationError("Period must be an integer >= 1", option=name, value=value) from None
        if isinstance(value, bool) or period != value or period < 1:
            raise ConfigurationError("Period must be an integer >= 1", option=name, value=value)
        setattr(self.config, name, period)

    def set_chart_type(self, kind):
        try:
            self.config.chart_type = ChartType(kind).value
        except ValueError:
            raise ConfigurationError(f"Unknown chart type '{kind}'",
                                     option='chart_type', value=kind) from None

    def set_zoom_enabled(self, flag: bool):
        self.config.zoom_enabled = bool(flag)
        if self.zoom is not None:
            self.zoom.enabled = self.config.zoom_enabled

    def set_option(self, option: str, value: Any):
        """Generic setter with the same validation as the dedicated ones"""
        name = _option_name(option)
        if name in PERIOD_OPTIONS:
            self.set_period(name, value)
        elif name == 'chart_type':
            self.set_chart_type(value)
        elif name == 'zoom_enabled':
            self.set_zoom_enabled(value)
        elif name == 'theme':
            self.config.theme = get_theme(value).name
        elif name == 'preset':
            self.config.preset = get_preset(value).name
        elif name == 'bollinger_std_dev':
            if float(value) <= 0:
                raise ConfigurationError("Standard deviation multiplier must be > 0",
                                         option=name, value=value)
            self.config.bollinger_std_dev = float(value)
        else:
            setattr(self.config, name, bool(value))

    # -------------------------------------------------------------- datasets

    def chart_data(self) -> Optional[ChartData]:
        """
        Paint-ordered datasets for the current bars and configuration.

        Returns None in the empty state; no indicator is computed then.
        """
        symbol = self.primary_symbol
        if symbol is None:
            return None

        key = (self._bars_version, self.symbols, self.config.snapshot())
        if self._chart_cache is not None and self._chart_cache[0] == key:
            return self._chart_cache[1]

        theme = get_theme(self.config.theme)
        formatted = self._formatted(symbol)
        primary = self._primary_series(symbol, formatted, theme)
        overlays = self._overlays(symbol, theme)

        chart = ChartData(
            labels=list(formatted.display_labels),
            datasets=tuple(sort_by_paint_order([primary, *overlays])),
            symbol=symbol
        )
        self._chart_cache = (key, chart)
        self.stats['chart_builds'] += 1
        return chart

    def _formatted(self, symbol: str) -> FormattedChartData:
        key = (self._bars_version, symbol)
        if self._formatted_cache is None or self._formatted_cache[0] != key:
            self._formatted_cache = (key, format_bars(self._bars[symbol], self.display_tz))
        return self._formatted_cache[1]

    def _primary_series(self, symbol: str, formatted: FormattedChartData, theme) -> Dataset:
        key = (self._bars_version, symbol, self.config.chart_type, theme.name)
        if self._primary_cache is None or self._primary_cache[0] != key:
            dataset = build_primary_series(self.config.chart_type, formatted, theme, symbol)
            self._primary_cache = (key, dataset)
            self.stats['primary_builds'] += 1
        return self._primary_cache[1]

    def _overlay_key(self, symbol: str, theme) -> tuple:
        c = self.config
        return (self._bars_version, self.symbols, symbol, theme.name,
                c.show_volume, c.show_sma, c.sma_period, c.show_ema, c.ema_period,
                c.show_bollinger_bands, c.bollinger_period, c.bollinger_std_dev, c.show_vwap)

    def _overlays(self, symbol: str, theme) -> List[Dataset]:
        key = self._overlay_key(symbol, theme)
        if self._overlay_cache is not None and self._overlay_cache[0] == key:
            return self._overlay_cache[1]

        c = self.config
        bars = self._bars[symbol]
        overlays: List[Dataset] = []

        if c.show_sma:
            overlays.append(sma_overlay(bars, c.sma_period, theme))
        if c.show_ema:
            overlays.append(ema_overlay(bars, c.ema_period, theme))
        if c.show_vwap:
            overlays.append(vwap_overlay(bars, theme))
        if c.show_bollinger_bands:
            overlays.extend(bollinger_overlays(bars, c.bollinger_period, c.bollinger_std_dev, theme))
        if c.show_volume:
            overlays.append(volume_dataset(bars, theme))

        reference = bars[0].close if bars[0].close is not None else float('nan')
        others = [s for s in self.symbols if s != symbol and self._bars.get(s)]
        for slot, other in enumerate(others):
            overlays.append(comparison_overlay(other, self._bars[other], len(bars),
                                               reference, theme, slot))

        self._overlay_cache = (key, overlays)
        self.stats['overlay_builds'] += 1
        logger.debug(f"{symbol}: built {len(overlays)} overlay datasets")
        return overlays

    def summary(self) -> Optional[PriceSummary]:
        symbol = self.primary_symbol
        return summarize_prices(self._bars[symbol]) if symbol else None

    def chart_options(self) -> Dict[str, Any]:
        c = self.config
        return build_chart_options(
            show_volume=c.show_volume,
            theme=c.theme,
            preset=c.preset,
            show_grid_lines=c.show_grid_lines,
            zoom_enabled=c.zoom_enabled,
            zoom_step=self.zoom_step,
            candle_width=self.candle_width
        )

    # ------------------------------------------------------------------ zoom

    def attach_zoom(self, zoom):
        self.zoom = zoom
        zoom.enabled = self.config.zoom_enabled

    def zoom_in(self) -> bool:
        return self.zoom.zoom_in() if self.zoom is not None else False

    def zoom_out(self) -> bool:
        return self.zoom.zoom_out() if self.zoom is not None else False

    def reset_zoom(self):
        if self.zoom is not None:
            self.zoom.reset_zoom()

    # -------------------------------------------------------- async requests

    def begin_request(self) -> int:
        """Start a fetch; only results carrying the newest token are accepted"""
        self._request_token += 1
        return self._request_token

    def accept_result(self, token: int, symbol: str, bars: Iterable) -> bool:
        if token != self._request_token:
            logger.debug(f"Discarding stale result for {symbol} (token {token} < {self._request_token})")
            return False
        self.set_symbol_bars(symbol, bars)
        return True
