# market_chart/tests/test_data.py
"""
Module: Data Layer Tests
Purpose: Bar parsing, the data transformer and the timeframe table
"""

from datetime import datetime, timedelta

import pytest
import pytz

from market_chart.data import (Bar, TIMEFRAMES, format_bars, format_display_label,
                               get_timeframe, is_intraday, price_direction_color,
                               sort_bars, summarize_prices, to_bars, volume_colors)
from market_chart.data.models import parse_timestamp
from market_chart.tests.conftest import make_bars


class TestBarModel:
    """Test Bar construction from REST payload rows"""

    def test_short_keys_epoch_millis(self):
        bar = Bar.from_dict({'t': 1704205800000, 'o': 1, 'h': 2, 'l': 0.5, 'c': 1.5, 'v': 100})
        assert bar.timestamp == datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)
        assert (bar.open, bar.high, bar.low, bar.close, bar.volume) == (1, 2, 0.5, 1.5, 100)

    def test_epoch_seconds(self):
        assert parse_timestamp(1704205800) == datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)

    def test_iso_string(self):
        ts = parse_timestamp('2024-01-02T14:30:00+00:00')
        assert ts.hour == 14 and ts.minute == 30

    def test_naive_iso_string_is_utc(self):
        assert parse_timestamp('2024-01-02T14:30:00') == datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)

    def test_naive_datetime_is_utc(self):
        ts = parse_timestamp(datetime(2024, 1, 2, 14, 30))
        assert ts.tzinfo is not None
        assert ts == datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)

    def test_mixed_iso_and_epoch_rows_sort(self):
        bars = to_bars([
            {'t': 1704206700000, 'o': 2, 'h': 3, 'l': 1, 'c': 2.5},
            {'timestamp': '2024-01-02T14:30:00', 'open': 1, 'high': 2,
             'low': 0.5, 'close': 1.5},
        ])
        assert [bar.close for bar in sort_bars(bars)] == [1.5, 2.5]

    def test_naive_iso_label_uses_display_timezone(self):
        bars = to_bars([{'timestamp': '2024-01-02T14:30:00', 'open': 1, 'high': 2,
                         'low': 0.5, 'close': 1.5}])
        formatted = format_bars(bars, pytz.timezone('America/New_York'))
        assert formatted.display_labels == ['09:30 AM']

    def test_missing_price_is_none(self):
        bar = Bar.from_dict({'timestamp': '2024-01-02', 'open': 1, 'high': 2, 'low': 0.5})
        assert bar.close is None
        assert not bar.is_complete

    def test_round_trip_dict(self):
        bar = make_bars([10])[0]
        assert Bar.from_dict(bar.to_dict()) == bar

    def test_unsupported_timestamp(self):
        with pytest.raises(ValueError):
            parse_timestamp(None)


class TestTransformer:
    """Test bar formatting for the chart"""

    def test_sorts_before_formatting(self):
        bars = make_bars([10, 11, 12])
        formatted = format_bars(list(reversed(bars)))

        assert formatted.close_prices == [10, 11, 12]
        assert [p.index for p in formatted.candlestick_points] == [0, 1, 2]
        assert len(formatted) == 3

    def test_sort_is_idempotent(self):
        bars = make_bars([3, 1, 2])
        assert sort_bars(sort_bars(bars)) == sort_bars(bars)

    def test_intraday_labels(self):
        ts = datetime(2024, 1, 2, 9, 30)
        assert is_intraday(ts)
        assert format_display_label(ts) == '09:30 AM'

    def test_daily_labels(self):
        ts = datetime(2024, 1, 5)
        assert not is_intraday(ts)
        assert format_display_label(ts) == 'Jan 5'

    def test_display_timezone(self):
        ts = datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)
        eastern = pytz.timezone('America/New_York')
        assert format_display_label(ts, eastern) == '09:30 AM'

    def test_volume_colors(self):
        bars = make_bars([10, 11, 11, 9, 12])
        assert volume_colors(bars, 'up', 'down') == ['up', 'up', 'up', 'down', 'up']

    def test_direction_color(self):
        assert price_direction_color(make_bars([10, 9, 12]), 'up', 'down') == 'up'
        assert price_direction_color(make_bars([10, 11, 9]), 'up', 'down') == 'down'

    def test_to_bars_accepts_mappings(self):
        bars = to_bars([{'t': 1704205800000, 'o': 1, 'h': 2, 'l': 0.5, 'c': 1.5, 'v': 1},
                        make_bars([5])[0]])
        assert len(bars) == 2
        assert all(isinstance(b, Bar) for b in bars)


class TestSummary:
    """Test panel header figures"""

    def test_summary_values(self):
        bars = make_bars([10, 12, 11, 15], spread=0.5)
        summary = summarize_prices(bars)

        assert summary.current == 15
        assert summary.change == pytest.approx(5)
        assert summary.change_percent == pytest.approx(50)
        assert summary.high == pytest.approx(15.5)
        assert summary.low == pytest.approx(9.5)

    def test_empty(self):
        assert summarize_prices([]) is None


class TestTimeframes:
    """Test the timeframe table"""

    def test_lookup(self):
        assert get_timeframe('1Hour').limit == 72
        assert get_timeframe('1Min').refresh_ms == 30_000

    def test_unknown_falls_back_to_default(self):
        assert get_timeframe('3Min').value == '15Min'

    def test_values_are_unique(self):
        values = [tf.value for tf in TIMEFRAMES]
        assert len(values) == len(set(values))
