# market_chart/dashboard/components/chart/canvas.py
"""
Drawing surface used by chart elements and overlay hooks.

Elements and hooks draw in device pixels through this small protocol; the
pyqtgraph renderer wraps a QPainter in QtCanvas to satisfy it.
"""

from typing import Optional, Protocol, Sequence


class Canvas(Protocol):

    def save(self) -> None:
        ...

    def restore(self) -> None:
        ...

    def set_stroke(self, color: str, width: float = 1.0,
                   dash: Optional[Sequence[float]] = None) -> None:
        """Pen for subsequent lines and rectangle outlines"""
        ...

    def set_fill(self, color: Optional[str]) -> None:
        """Brush for subsequent rectangles; None disables filling"""
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        ...

    def draw_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Filled and outlined with the current fill and stroke"""
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        """Filled with `color`, no outline"""
        ...

    def draw_text(self, x: float, y: float, text: str, color: str,
                  size: float = 11) -> None:
        """Text centred on (x, y)"""
        ...
