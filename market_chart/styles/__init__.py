"""
Market Chart Styles Package
"""

from .base_styles import BaseStyles
from .chart import ChartStyles
from .themes import (ChartTheme, ColorRamp, GrayScale, THEMES, DARK_THEME,
                     TRADINGVIEW_THEME, get_theme, with_alpha)

__all__ = [
    'BaseStyles',
    'ChartStyles',
    'ChartTheme',
    'ColorRamp',
    'GrayScale',
    'THEMES',
    'DARK_THEME',
    'TRADINGVIEW_THEME',
    'get_theme',
    'with_alpha'
]
