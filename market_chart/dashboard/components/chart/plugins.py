# market_chart/dashboard/components/chart/plugins.py
"""
Interaction plugins.

Post-draw hooks are plain functions hook(canvas, ctx, options) run in a
fixed order after every redraw; they read a shared, read-only DrawContext
and never mutate chart state. ZoomController forwards horizontal-only
zoom/pan requests to the rendering library's view box.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .canvas import Canvas
from .scales import Scale
from .options import format_ohlc_tooltip, format_price_tag, format_tooltip_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivePoint:
    """The hovered bar: index, domain x/y and the x label"""
    index: int
    x_value: float
    y_value: float
    label: str = ''


@dataclass(frozen=True)
class ChartArea:
    """Pixel rectangle; top < bottom in device coordinates"""
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class DrawContext:
    active_point: Optional[ActivePoint]
    chart_area: ChartArea
    x_scale: Scale
    y_scale: Scale
    price_axis_area: Optional[ChartArea] = None


Hook = Callable[[Canvas, DrawContext, Dict[str, Any]], None]


def _active_pixels(ctx: DrawContext) -> Optional[Tuple[float, float]]:
    point = ctx.active_point
    if point is None or point.y_value is None or not math.isfinite(point.y_value):
        return None
    x = ctx.x_scale.pixel_for(point.x_value)
    y = ctx.y_scale.pixel_for(point.y_value)
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def draw_crosshair(canvas: Canvas, ctx: DrawContext, options: Dict[str, Any]) -> None:
    """
    Dashed vertical line through the active x spanning the chart height and
    dashed horizontal line through the active y spanning the chart width.
    No-op without an active point.
    """
    pixels = _active_pixels(ctx)
    if pixels is None:
        return

    line = options['plugins']['crosshair']['line']
    area = ctx.chart_area
    x, y = pixels

    canvas.set_stroke(line['color'], line['width'], line.get('dash_pattern'))
    canvas.draw_line(x, area.top, x, area.bottom)
    canvas.draw_line(area.left, y, area.right, y)


def draw_price_axis_panel(canvas: Canvas, ctx: DrawContext, options: Dict[str, Any]) -> None:
    """Opaque band behind the right-hand price-axis label column"""
    area = ctx.price_axis_area
    if area is None or area.width <= 0:
        return
    color = options['plugins']['price_axis']['background_color']
    canvas.fill_rect(area.left, area.top, area.width, area.height, color)


def draw_price_tag(canvas: Canvas, ctx: DrawContext, options: Dict[str, Any]) -> None:
    """Boxed price label on the price axis at the active point's y"""
    pixels = _active_pixels(ctx)
    if pixels is None:
        return

    tag = options['plugins']['price_axis']['tag']
    compact = ctx.chart_area.height < tag['compact_below']
    width = tag['compact_width'] if compact else tag['width']
    height = tag['compact_height'] if compact else tag['height']
    font_size = tag['compact_font_size'] if compact else tag['font_size']
    formatter = tag.get('formatter', format_price_tag)

    left = ctx.chart_area.right
    _, y = pixels

    canvas.set_fill(tag['background_color'])
    canvas.set_stroke(tag['border_color'], 1)
    canvas.draw_rect(left, y - height / 2, width, height)
    canvas.draw_text(left + width / 2, y, formatter(ctx.active_point.y_value),
                     tag['text_color'], font_size)


UNDERLAY_HOOKS: Tuple[Hook, ...] = (draw_price_axis_panel,)
OVERLAY_HOOKS: Tuple[Hook, ...] = (draw_crosshair, draw_price_tag)


def run_pipeline(canvas: Canvas, ctx: DrawContext, hooks: Sequence[Hook],
                 options: Dict[str, Any]) -> None:
    """Invoke hooks in order, each inside its own save/restore"""
    for hook in hooks:
        canvas.save()
        try:
            hook(canvas, ctx, options)
        except Exception as e:
            logger.error(f"Plugin hook {getattr(hook, '__name__', hook)} failed: {e}",
                         exc_info=True)
        finally:
            canvas.restore()


def tooltip_lines(chart_data, index: int, options: Dict[str, Any]) -> List[str]:
    """
    Index-mode tooltip: the x label, then one line per dataset at `index`.
    Candles contribute O/H/L/C lines; undefined samples are left out.
    """
    if chart_data is None or not 0 <= index < len(chart_data.labels):
        return []

    formatter = options['plugins']['tooltip'].get('label_formatter', format_tooltip_label)
    lines = [chart_data.labels[index]]
    for dataset in chart_data.datasets:
        if dataset.type == 'candlestick':
            if index < len(dataset.data):
                lines.extend(format_ohlc_tooltip(dataset.data[index]))
            continue
        line = formatter(dataset, dataset.value_at(index))
        if line:
            lines.append(line)
    return lines


class ZoomController:
    """
    Horizontal-only zoom for a pyqtgraph ViewBox (or anything exposing
    scaleBy / setXRange / viewRange / setMouseEnabled / enableAutoRange).

    zoom_in() narrows the visible time window by `step`, zoom_out() widens
    it by the same factor, reset_zoom() restores the full bar domain.
    """

    def __init__(self, view_box, step: float = 1.1):
        if step <= 1:
            raise ValueError("Zoom step must be greater than 1")
        self.view_box = view_box
        self.step = step
        self.domain: Optional[Tuple[float, float]] = None
        self._enabled = True

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, flag: bool):
        self._enabled = bool(flag)
        self.view_box.setMouseEnabled(x=self._enabled, y=False)

    def set_domain(self, x_min: float, x_max: float):
        """Full x extent restored by reset_zoom()"""
        self.domain = (x_min, x_max)

    def zoom_by(self, factor: float, center: Optional[float] = None) -> bool:
        """
        Scale the visible x window; factor > 1 zooms in.
        Returns False when zoom is disabled.
        """
        if not self._enabled or factor <= 0:
            return False

        center_point = None
        if center is not None:
            (_, _), (y_min, y_max) = self.view_box.viewRange()
            center_point = (center, (y_min + y_max) / 2)

        self.view_box.scaleBy(x=1.0 / factor, center=center_point)
        return True

    def zoom_in(self) -> bool:
        return self.zoom_by(self.step)

    def zoom_out(self) -> bool:
        return self.zoom_by(1.0 / self.step)

    def reset_zoom(self):
        if self.domain is None:
            self.view_box.enableAutoRange()
            return
        x_min, x_max = self.domain
        self.view_box.setXRange(x_min, x_max, padding=0)
        self.view_box.enableAutoRange(axis='y')
