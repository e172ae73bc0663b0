# market_chart/dashboard/components/chart/__init__.py
"""
Chart engine: datasets, options, chart-type registry, plugins and the
panel controller. The pyqtgraph renderer lives in .renderer and is only
imported when a chart is actually drawn.
"""

from .canvas import Canvas
from .scales import LinearScale, LogScale, Scale
from .registry import ChartTypeSpec, get_chart_type, register_chart_type, registered_chart_types
from .candlestick import (CANDLESTICK_DEFAULTS, CandlestickController, CandlestickElement,
                          ParsedCandle)
from .options import (PRESETS, VOLUME_HEADROOM, ChartPreset, build_chart_options,
                      build_enhanced_chart_options, format_ohlc_tooltip, format_price_tag,
                      format_price_tick, format_tooltip_label, format_volume,
                      format_volume_tick, get_preset)
from .datasets import (ChartData, ChartType, Dataset, PaintOrder, bollinger_overlays,
                       build_area_series, build_candlestick_series, build_line_series,
                       build_primary_series, comparison_overlay, ema_overlay, sma_overlay,
                       sort_by_paint_order, volume_dataset, vwap_overlay)
from .plugins import (OVERLAY_HOOKS, UNDERLAY_HOOKS, ActivePoint, ChartArea, DrawContext,
                      ZoomController, draw_crosshair, draw_price_axis_panel, draw_price_tag,
                      run_pipeline, tooltip_lines)
from .panel_controller import ChartConfiguration, ChartPanelController, PanelState

__all__ = [
    'Canvas',
    'Scale',
    'LinearScale',
    'LogScale',
    'ChartTypeSpec',
    'get_chart_type',
    'register_chart_type',
    'registered_chart_types',
    'CANDLESTICK_DEFAULTS',
    'CandlestickController',
    'CandlestickElement',
    'ParsedCandle',
    'PRESETS',
    'VOLUME_HEADROOM',
    'ChartPreset',
    'build_chart_options',
    'build_enhanced_chart_options',
    'format_ohlc_tooltip',
    'format_price_tag',
    'format_price_tick',
    'format_tooltip_label',
    'format_volume',
    'format_volume_tick',
    'get_preset',
    'ChartData',
    'ChartType',
    'Dataset',
    'PaintOrder',
    'bollinger_overlays',
    'build_area_series',
    'build_candlestick_series',
    'build_line_series',
    'build_primary_series',
    'comparison_overlay',
    'ema_overlay',
    'sma_overlay',
    'sort_by_paint_order',
    'volume_dataset',
    'vwap_overlay',
    'OVERLAY_HOOKS',
    'UNDERLAY_HOOKS',
    'ActivePoint',
    'ChartArea',
    'DrawContext',
    'ZoomController',
    'draw_crosshair',
    'draw_price_axis_panel',
    'draw_price_tag',
    'run_pipeline',
    'tooltip_lines',
    'ChartConfiguration',
    'ChartPanelController',
    'PanelState'
]
