# market_chart/dashboard/components/chart/options.py
"""
Chart Configuration Builder.

Assembles axis, legend, tooltip, interaction-plugin and theme settings into
one nested options dict consumed by the renderer. The 'standard' and
'enhanced' (TradingView-like density) presets produce the same key
structure and differ only in spacing, sizing and density constants.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .candlestick import CANDLESTICK_DEFAULTS
from ....exceptions import ConfigurationError
from ....styles.themes import ChartTheme, get_theme, with_alpha

FONT_FAMILY = "Inter, sans-serif"

# Volume bars use the lower part of the plot: axis max = max volume * headroom
VOLUME_HEADROOM = 2.5


@dataclass(frozen=True)
class ChartPreset:
    """Spacing/sizing/density constants; one instance per preset"""
    name: str
    padding: tuple  # top, right, bottom, left
    grid_alpha: float
    grid_tick_length: int
    tick_font_size: int
    x_max_ticks: int
    y_tick_count: int
    y_tick_padding: int
    volume_tick_count: int
    legend_font_size: int
    legend_box_width: int
    tooltip_title_size: int
    tooltip_body_size: int
    tooltip_padding: int
    tooltip_box_padding: int
    crosshair_alpha: float
    crosshair_dash: tuple
    price_axis_width: int


STANDARD_PRESET = ChartPreset(
    name='standard',
    padding=(10, 10, 0, 10),
    grid_alpha=0.05,
    grid_tick_length=8,
    tick_font_size=11,
    x_max_ticks=10,
    y_tick_count=5,
    y_tick_padding=3,
    volume_tick_count=3,
    legend_font_size=12,
    legend_box_width=10,
    tooltip_title_size=14,
    tooltip_body_size=12,
    tooltip_padding=12,
    tooltip_box_padding=6,
    crosshair_alpha=0.6,
    crosshair_dash=(5, 5),
    price_axis_width=60,
)

ENHANCED_PRESET = ChartPreset(
    name='enhanced',
    padding=(20, 30, 10, 10),
    grid_alpha=0.03,
    grid_tick_length=10,
    tick_font_size=10,
    x_max_ticks=12,
    y_tick_count=8,
    y_tick_padding=10,
    volume_tick_count=3,
    legend_font_size=11,
    legend_box_width=6,
    tooltip_title_size=12,
    tooltip_body_size=11,
    tooltip_padding=10,
    tooltip_box_padding=4,
    crosshair_alpha=0.4,
    crosshair_dash=(3, 3),
    price_axis_width=70,
)

PRESETS = {
    STANDARD_PRESET.name: STANDARD_PRESET,
    ENHANCED_PRESET.name: ENHANCED_PRESET,
}


def get_preset(name: str) -> ChartPreset:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown preset '{name}' (available: {', '.join(PRESETS)})",
            option='preset', value=name
        ) from None


# ---------------------------------------------------------------- formatters

def format_price_tick(value: float) -> str:
    """Price axis tick: $X.XX"""
    return f"${float(value):.2f}"


def format_volume_tick(value: float) -> str:
    """Volume axis tick with K/M abbreviations"""
    value = float(value)
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return f"{value:g}"


def format_volume(value: float) -> str:
    """Full volume with thousands separators"""
    value = float(value)
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_tooltip_label(dataset, value: float) -> Optional[str]:
    """
    Tooltip line for one dataset value.

    Volume-axis series use thousands separators, price-axis series use
    currency. Undefined (NaN/None) samples produce no line.
    """
    if value is None or not math.isfinite(value):
        return None

    label = getattr(dataset, 'label', '') or ''
    if getattr(dataset, 'axis', 'y') == 'y1':
        return f"{label}: {format_volume(value)}"
    return f"{label}: ${value:.2f}"


def format_ohlc_tooltip(point) -> List[str]:
    """O/H/L/C tooltip lines for a candlestick point"""
    lines = []
    for prefix, name in (('O', 'open'), ('H', 'high'), ('L', 'low'), ('C', 'close')):
        value = getattr(point, name, None)
        if value is not None and math.isfinite(value):
            lines.append(f"{prefix}: ${value:.2f}")
    return lines


def format_price_tag(value: float) -> str:
    """Price-axis tag text; small magnitudes get more decimals"""
    magnitude = abs(value)
    if magnitude < 0.1:
        return f"{value:.4f}"
    if magnitude < 1:
        return f"{value:.3f}"
    return f"{value:.2f}"


# ------------------------------------------------------------------ builders

def _font(size: int, weight: Optional[int] = None) -> Dict[str, Any]:
    font = {'family': FONT_FAMILY, 'size': size}
    if weight is not None:
        font['weight'] = weight
    return font


def _x_scale(preset: ChartPreset, theme: ChartTheme, grid_color: str,
             show_grid_lines: bool) -> Dict[str, Any]:
    return {
        'grid': {
            'display': show_grid_lines,
            'color': grid_color,
            'tick_length': preset.grid_tick_length,
        },
        'ticks': {
            'color': theme.tick_text,
            'font': _font(preset.tick_font_size),
            'max_rotation': 0,
            'auto_skip': True,
            'max_ticks_limit': preset.x_max_ticks,
        },
        'border': {'display': False},
    }


def _y_scale(preset: ChartPreset, theme: ChartTheme, grid_color: str,
             show_grid_lines: bool) -> Dict[str, Any]:
    return {
        'position': 'right',
        'grid': {
            'display': show_grid_lines,
            'color': grid_color,
            'tick_length': preset.grid_tick_length,
        },
        'ticks': {
            'color': theme.tick_text,
            'font': _font(preset.tick_font_size),
            'count': preset.y_tick_count,
            'padding': preset.y_tick_padding,
            'formatter': format_price_tick,
        },
        'border': {'display': False},
    }


def _volume_scale(preset: ChartPreset, theme: ChartTheme) -> Dict[str, Any]:
    return {
        'position': 'left',
        'grid': {
            'display': False,
            'draw_on_chart_area': False,
        },
        'ticks': {
            'color': theme.tick_text,
            'font': _font(preset.tick_font_size),
            'count': preset.volume_tick_count,
            'padding': preset.y_tick_padding,
            'formatter': format_volume_tick,
        },
        'border': {'display': False},
        'headroom': VOLUME_HEADROOM,
    }


def build_chart_options(show_volume: bool = True, theme='dark', preset='standard',
                        show_grid_lines: bool = True, zoom_enabled: bool = True,
                        zoom_step: float = 1.1,
                        candle_width: Optional[float] = None) -> Dict[str, Any]:
    """
    Build the renderer options for one chart.

    Args:
        show_volume: Include the left-hand volume axis (scales.y1)
        theme: Theme name or ChartTheme
        preset: 'standard' or 'enhanced' (or a ChartPreset)
        show_grid_lines: Draw the x/y grid
        zoom_enabled: Allow wheel/pinch zoom and drag pan
        zoom_step: Factor applied by one zoom_in() call
        candle_width: Candle body width in pixels

    Returns:
        Nested dict: layout, interaction, scales, plugins, candlestick, animation
    """
    theme = get_theme(theme) if isinstance(theme, str) else theme
    preset = get_preset(preset) if isinstance(preset, str) else preset
    grid_color = f"rgba(255, 255, 255, {preset.grid_alpha:g})"
    top, right, bottom, left = preset.padding

    scales = {
        'x': _x_scale(preset, theme, grid_color, show_grid_lines),
        'y': _y_scale(preset, theme, grid_color, show_grid_lines),
    }
    if show_volume:
        scales['y1'] = _volume_scale(preset, theme)

    candlestick = {
        **CANDLESTICK_DEFAULTS,
        'border_color_up': theme.up,
        'border_color_down': theme.down,
        'background_color_up': with_alpha(theme.up, 0.1),
        'background_color_down': with_alpha(theme.down, 0.1),
    }
    if candle_width is not None:
        candlestick['candle_width'] = candle_width

    return {
        'preset': preset.name,
        'theme': theme.name,
        'background': theme.background,
        'layout': {
            'padding': {'top': top, 'right': right, 'bottom': bottom, 'left': left},
        },
        'interaction': {
            'mode': 'index',
            'intersect': False,
        },
        'scales': scales,
        'plugins': {
            'legend': {
                'position': 'top',
                'align': 'start',
                'labels': {
                    'color': theme.legend_text,
                    'font': _font(preset.legend_font_size),
                    'use_point_style': True,
                    'box_width': preset.legend_box_width,
                    'padding': 15,
                },
            },
            'tooltip': {
                'mode': 'index',
                'intersect': False,
                'background_color': theme.tooltip_background,
                'title_font': _font(preset.tooltip_title_size, weight=600),
                'body_font': _font(preset.tooltip_body_size),
                'padding': preset.tooltip_padding,
                'box_padding': preset.tooltip_box_padding,
                'border_color': theme.tooltip_border,
                'border_width': 1,
                'label_formatter': format_tooltip_label,
            },
            'crosshair': {
                'line': {
                    'color': f"rgba(107, 114, 128, {preset.crosshair_alpha:g})",
                    'width': 1,
                    'dash_pattern': list(preset.crosshair_dash),
                },
                'sync': {'enabled': True},
            },
            'price_axis': {
                'background_color': theme.price_axis_background,
                'width': preset.price_axis_width,
                'tag': {
                    'background_color': theme.price_tag_background,
                    'border_color': theme.price_tag_border,
                    'text_color': theme.price_tag_text,
                    'width': 55,
                    'height': 20,
                    'font_size': 12,
                    'compact_width': 45,
                    'compact_height': 16,
                    'compact_font_size': 10,
                    'compact_below': 300,
                    'formatter': format_price_tag,
                },
            },
            'zoom': {
                'enabled': zoom_enabled,
                'pan': {'enabled': zoom_enabled, 'mode': 'x'},
                'zoom': {
                    'wheel': {'enabled': zoom_enabled},
                    'pinch': {'enabled': zoom_enabled},
                    'mode': 'x',
                    'step': zoom_step,
                },
            },
        },
        'candlestick': candlestick,
        'animation': False,
    }


def build_enhanced_chart_options(show_volume: bool = True, theme='tradingview',
                                 **kwargs) -> Dict[str, Any]:
    """Dense TradingView-style options; same shape as the standard preset"""
    return build_chart_options(show_volume=show_volume, theme=theme, preset='enhanced', **kwargs)
