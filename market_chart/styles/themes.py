# market_chart/styles/themes.py
"""
Chart colour palettes.

`dark` is the default panel palette; `tradingview` is the denser
TradingView-like palette used with the enhanced preset.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class ColorRamp:
    """A base colour plus the gradient used for area fills"""
    base: str
    gradient_start: str
    gradient_end: str
    light: Optional[str] = None
    dark: Optional[str] = None


@dataclass(frozen=True)
class GrayScale:
    light: str
    medium: str
    dark: str


@dataclass(frozen=True)
class ChartTheme:
    """Every colour the chart surface and its plugins draw with"""
    name: str
    green: ColorRamp
    red: ColorRamp
    blue: ColorRamp
    amber: ColorRamp
    purple: ColorRamp
    gray: GrayScale

    background: str = "#111827"
    tick_text: str = "#9ca3af"
    legend_text: str = "#e5e7eb"
    tooltip_background: str = "rgba(17, 24, 39, 0.95)"
    tooltip_border: str = "rgba(107, 114, 128, 0.3)"
    price_axis_background: str = "#111827"
    price_tag_background: str = "rgba(0, 0, 0, 0.7)"
    price_tag_border: str = "rgba(255, 255, 255, 0.25)"
    price_tag_text: str = "#ffffff"

    @property
    def up(self) -> str:
        return self.green.base

    @property
    def down(self) -> str:
        return self.red.base


DARK_THEME = ChartTheme(
    name='dark',
    green=ColorRamp('#22c55e', 'rgba(34, 197, 94, 0.2)', 'rgba(34, 197, 94, 0)'),
    red=ColorRamp('#ef4444', 'rgba(239, 68, 68, 0.2)', 'rgba(239, 68, 68, 0)'),
    blue=ColorRamp('#3b82f6', 'rgba(59, 130, 246, 0.2)', 'rgba(59, 130, 246, 0)'),
    amber=ColorRamp('#f59e0b', 'rgba(245, 158, 11, 0.2)', 'rgba(245, 158, 11, 0)'),
    purple=ColorRamp('#a855f7', 'rgba(168, 85, 247, 0.2)', 'rgba(168, 85, 247, 0)'),
    gray=GrayScale(light='#9ca3af', medium='#6b7280', dark='#374151'),
)

TRADINGVIEW_THEME = ChartTheme(
    name='tradingview',
    green=ColorRamp('#26a69a', 'rgba(38, 166, 154, 0.2)', 'rgba(38, 166, 154, 0)',
                    light='#4db6ac', dark='#00897b'),
    red=ColorRamp('#ef5350', 'rgba(239, 83, 80, 0.2)', 'rgba(239, 83, 80, 0)',
                  light='#e57373', dark='#e53935'),
    blue=ColorRamp('#42a5f5', 'rgba(66, 165, 245, 0.2)', 'rgba(66, 165, 245, 0)',
                   light='#64b5f6', dark='#1e88e5'),
    amber=ColorRamp('#ffb74d', 'rgba(255, 183, 77, 0.2)', 'rgba(255, 183, 77, 0)',
                    light='#ffcc80', dark='#ffa726'),
    purple=ColorRamp('#ab47bc', 'rgba(171, 71, 188, 0.2)', 'rgba(171, 71, 188, 0)',
                     light='#ba68c8', dark='#8e24aa'),
    gray=GrayScale(light='#9ca3af', medium='#6b7280', dark='#374151'),
    background='#131722',
    price_axis_background='#131722',
)

THEMES: Dict[str, ChartTheme] = {
    DARK_THEME.name: DARK_THEME,
    TRADINGVIEW_THEME.name: TRADINGVIEW_THEME,
}


def get_theme(name: str) -> ChartTheme:
    """Look up a palette by name; raises ConfigurationError for unknown names"""
    try:
        return THEMES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown theme '{name}' (available: {', '.join(THEMES)})",
            option='theme', value=name
        ) from None


def with_alpha(color: str, alpha: float) -> str:
    """
    Translucent rgba() version of a '#rrggbb' colour.
    rgba() input has its alpha replaced.
    """
    if color.startswith('#') and len(color) == 7:
        r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    elif color.startswith('rgba(') or color.startswith('rgb('):
        parts = color[color.index('(') + 1:color.rindex(')')].split(',')
        r, g, b = (int(float(p)) for p in parts[:3])
    else:
        raise ValueError(f"Unsupported colour: {color}")
    return f"rgba({r}, {g}, {b}, {alpha:g})"
