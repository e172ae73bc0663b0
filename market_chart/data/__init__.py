# market_chart/data/__init__.py
"""
Bar models, the data transformer and the REST bar-fetch collaborator
"""
from .models import (Bar, CandlestickPoint, FormattedChartData, PriceSummary,
                     Timeframe, TIMEFRAMES, DEFAULT_TIMEFRAME, get_timeframe)
from .transformer import (format_bars, format_display_label, is_intraday,
                          volume_colors, price_direction_color, summarize_prices,
                          sort_bars, to_bars)
from .rest_client import RESTBarFetcher, fetch_bars_safely

__all__ = [
    'Bar',
    'CandlestickPoint',
    'FormattedChartData',
    'PriceSummary',
    'Timeframe',
    'TIMEFRAMES',
    'DEFAULT_TIMEFRAME',
    'get_timeframe',
    'format_bars',
    'format_display_label',
    'is_intraday',
    'volume_colors',
    'price_direction_color',
    'summarize_prices',
    'sort_bars',
    'to_bars',
    'RESTBarFetcher',
    'fetch_bars_safely'
]
