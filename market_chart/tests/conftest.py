# market_chart/tests/conftest.py
"""
Shared fixtures: bar builders and a canvas that records draw calls
"""

from datetime import datetime, timedelta

import pytest
import pytz

from market_chart.data.models import Bar

START = datetime(2024, 1, 2, 14, 30, tzinfo=pytz.utc)


def make_bars(closes, start=START, step=timedelta(minutes=15), volume=1000.0, spread=1.0):
    """Bars whose open is the previous close; high/low straddle the body"""
    bars = []
    previous = closes[0] if closes else 0.0
    for i, close in enumerate(closes):
        open_ = previous
        bars.append(Bar(
            timestamp=start + step * i,
            open=float(open_),
            high=float(max(open_, close) + spread),
            low=float(min(open_, close) - spread),
            close=float(close),
            volume=float(volume)
        ))
        previous = close
    return bars


class RecordingCanvas:
    """Canvas that logs every call as a (name, args) tuple"""

    def __init__(self):
        self.calls = []
        self.depth = 0

    def names(self):
        return [name for name, _ in self.calls]

    def of(self, name):
        return [args for call, args in self.calls if call == name]

    def save(self):
        self.depth += 1
        self.calls.append(('save', ()))

    def restore(self):
        self.depth -= 1
        self.calls.append(('restore', ()))

    def set_stroke(self, color, width=1.0, dash=None):
        self.calls.append(('set_stroke', (color, width, dash)))

    def set_fill(self, color):
        self.calls.append(('set_fill', (color,)))

    def draw_line(self, x1, y1, x2, y2):
        self.calls.append(('draw_line', (x1, y1, x2, y2)))

    def draw_rect(self, x, y, width, height):
        self.calls.append(('draw_rect', (x, y, width, height)))

    def fill_rect(self, x, y, width, height, color):
        self.calls.append(('fill_rect', (x, y, width, height, color)))

    def draw_text(self, x, y, text, color, size=11):
        self.calls.append(('draw_text', (x, y, text, color, size)))


@pytest.fixture
def bar_factory():
    return make_bars


@pytest.fixture
def sample_bars():
    """Thirty intraday bars with a gentle uptrend and some pullbacks"""
    closes = [100 + i * 0.5 + (1.5 if i % 4 == 0 else 0) for i in range(30)]
    return make_bars(closes)


@pytest.fixture
def canvas():
    return RecordingCanvas()
