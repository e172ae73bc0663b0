# market_chart/dashboard/components/chart/candlestick.py
"""
Candlestick chart type: controller + element.

The controller parses raw OHLC points into typed candles positioned by
sequence index and maps them to pixels through the active x/y scales. The
element draws one candle (wick + body) on a Canvas. Importing this module
registers the 'candlestick' chart type.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .canvas import Canvas
from .registry import register_chart_type
from .scales import Scale
from ....styles.themes import with_alpha

logger = logging.getLogger(__name__)

CANDLESTICK_DEFAULTS: Dict[str, Any] = {
    'candle_width': 8,
    'border_width': 1,
    'border_color_up': '#22c55e',
    'border_color_down': '#ef4444',
    'background_color_up': 'rgba(34, 197, 94, 0.1)',
    'background_color_down': 'rgba(239, 68, 68, 0.1)',
    # Share of the per-bar pixel slot a body may occupy when zoomed out
    'max_slot_fraction': 0.8,
}

_SHORT_KEYS = ('o', 'h', 'l', 'c')
_LONG_KEYS = ('open', 'high', 'low', 'close')


def _number(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ParsedCandle:
    """One candle in domain units; x is the sequence position"""
    x: int
    o: Optional[float]
    h: Optional[float]
    l: Optional[float]
    c: Optional[float]

    @property
    def is_complete(self) -> bool:
        return all(v is not None and math.isfinite(v) for v in (self.o, self.h, self.l, self.c))

    @property
    def is_up(self) -> bool:
        return self.c >= self.o


class CandlestickElement:
    """One candle in device pixels, ready to draw"""

    def __init__(self, x: float, o: float, h: float, l: float, c: float,
                 is_up: bool, width: float, options: Dict[str, Any]):
        self.x = x
        self.o = o
        self.h = h
        self.l = l
        self.c = c
        self.is_up = is_up
        self.width = width
        self.options = options

    @property
    def drawable(self) -> bool:
        values = (self.x, self.o, self.h, self.l, self.c)
        return all(v is not None and math.isfinite(v) for v in values)

    @property
    def border_color(self) -> str:
        key = 'border_color_up' if self.is_up else 'border_color_down'
        return self.options[key]

    @property
    def fill_color(self) -> str:
        key = 'background_color_up' if self.is_up else 'background_color_down'
        return self.options.get(key) or with_alpha(self.border_color, 0.1)

    def draw(self, canvas: Canvas) -> bool:
        """
        Draw the wick from high to low and the open/close body.

        Returns False (drawing nothing) when any coordinate is missing.
        """
        if not self.drawable:
            return False

        canvas.set_stroke(self.border_color, self.options['border_width'])
        canvas.set_fill(self.fill_color)

        canvas.draw_line(self.x, self.h, self.x, self.l)

        top = min(self.o, self.c)
        height = abs(self.c - self.o)
        canvas.draw_rect(self.x - self.width / 2, top, self.width, height)
        return True


class CandlestickController:
    """
    Parses candle data and maps it to CandlestickElements.

    Usage:
        controller = CandlestickController(points, {'candle_width': 8})
        controller.update_elements(x_scale, y_scale)
        controller.draw(canvas)
    """

    def __init__(self, data: Sequence = (), options: Optional[Dict[str, Any]] = None):
        self.options = {**CANDLESTICK_DEFAULTS, **(options or {})}
        self.parsed: List[ParsedCandle] = self.parse(data)
        self.elements: List[CandlestickElement] = []

    def set_data(self, data: Sequence):
        self.parsed = self.parse(data)
        self.elements = []

    @staticmethod
    def parse(raw: Sequence) -> List[ParsedCandle]:
        """
        Turn raw points into ParsedCandles positioned by sequence index.

        Accepts {o,h,l,c} mappings, long-key mappings and objects with
        open/high/low/close attributes. Missing fields become None.
        """
        parsed = []
        for i, item in enumerate(raw):
            if isinstance(item, Mapping):
                keys = _SHORT_KEYS if any(k in item for k in _SHORT_KEYS) else _LONG_KEYS
                values = [_number(item.get(k)) for k in keys]
            else:
                values = [_number(getattr(item, k, None)) for k in _LONG_KEYS]
            parsed.append(ParsedCandle(i, *values))
        return parsed

    def _body_width(self, x_scale: Scale) -> float:
        width = float(self.options['candle_width'])
        if len(self.parsed) > 1:
            slot = abs(x_scale.pixel_for(1) - x_scale.pixel_for(0))
            width = min(width, slot * self.options['max_slot_fraction'])
        return max(width, 1.0)

    def update_elements(self, x_scale: Scale, y_scale: Scale) -> List[CandlestickElement]:
        """Map every parsed candle to pixel coordinates"""
        width = self._body_width(x_scale)

        def px(value):
            return None if value is None else y_scale.pixel_for(value)

        self.elements = [
            CandlestickElement(
                x=x_scale.pixel_for(candle.x),
                o=px(candle.o),
                h=px(candle.h),
                l=px(candle.l),
                c=px(candle.c),
                is_up=candle.is_complete and candle.is_up,
                width=width,
                options=self.options
            )
            for candle in self.parsed
        ]
        return self.elements

    def draw(self, canvas: Canvas) -> int:
        """Draw all mapped elements; returns how many candles were drawn"""
        drawn = 0
        for element in self.elements:
            if element.draw(canvas):
                drawn += 1

        skipped = len(self.elements) - drawn
        if skipped:
            logger.debug(f"Skipped {skipped} incomplete candles")
        return drawn

    def data_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """(x_min, x_max, low_min, high_max) over complete candles"""
        complete = [c for c in self.parsed if c.is_complete]
        if not complete:
            return None
        return (
            float(complete[0].x),
            float(complete[-1].x),
            min(c.l for c in complete),
            max(c.h for c in complete),
        )


def _candlestick_items(dataset, options):
    from .renderer import CandlestickItem
    return [CandlestickItem(dataset.data, options.get('candlestick'))]


register_chart_type(
    'candlestick',
    _candlestick_items,
    controller=CandlestickController,
    element=CandlestickElement
)
