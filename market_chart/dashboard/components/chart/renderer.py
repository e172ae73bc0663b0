# market_chart/dashboard/components/chart/renderer.py
"""
PyQtGraph rendering surface.

PriceChartView draws a ChartData (datasets already sorted by paint order)
on one PlotItem: price series on the main view box with a right-hand price
axis, volume bars on a passive view box linked to the left axis, and two
plugin layers (underlay/overlay) that run the post-draw hooks against the
current hover point. Zoom is horizontal only.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen

from .candlestick import CandlestickController
from .datasets import ChartData, PaintOrder
from .options import build_chart_options, format_price_tick, format_volume_tick
from .plugins import (OVERLAY_HOOKS, UNDERLAY_HOOKS, ActivePoint, ChartArea, DrawContext,
                      ZoomController, run_pipeline, tooltip_lines)
from .registry import get_chart_type

logger = logging.getLogger(__name__)

# Configure PyQtGraph
pg.setConfigOptions(antialias=True)

UNDERLAY_Z = -0.5
VOLUME_VIEW_Z = 0.1
OVERLAY_Z = 10
TOOLTIP_Z = 20

WHEEL_ZOOM_BASE = 1.06

_RGBA = re.compile(r'rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)')

_PEN_STYLES = {
    'solid': Qt.PenStyle.SolidLine,
    'dash': Qt.PenStyle.DashLine,
    'dot': Qt.PenStyle.DotLine,
}


def to_qcolor(color) -> QColor:
    """QColor from '#rrggbb', a named colour or an rgb()/rgba() string"""
    if isinstance(color, QColor):
        return color
    match = _RGBA.fullmatch(color.strip())
    if match:
        r, g, b, a = match.groups()
        qcolor = QColor(int(float(r)), int(float(g)), int(float(b)))
        qcolor.setAlphaF(float(a) if a is not None else 1.0)
        return qcolor
    return QColor(color)


class QtCanvas:
    """Canvas implementation over a QPainter working in device pixels"""

    def __init__(self, painter):
        self.painter = painter

    def save(self):
        self.painter.save()

    def restore(self):
        self.painter.restore()

    def set_stroke(self, color, width=1.0, dash=None):
        pen = QPen(to_qcolor(color))
        pen.setWidthF(float(width))
        pen.setCosmetic(True)
        if dash:
            # Qt dash patterns are in units of the pen width
            unit = max(float(width), 1.0)
            pen.setDashPattern([d / unit for d in dash])
        self.painter.setPen(pen)

    def set_fill(self, color):
        self.painter.setBrush(QBrush(to_qcolor(color)) if color else QBrush())

    def draw_line(self, x1, y1, x2, y2):
        self.painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

    def draw_rect(self, x, y, width, height):
        self.painter.drawRect(QRectF(x, y, width, height))

    def fill_rect(self, x, y, width, height, color):
        self.painter.fillRect(QRectF(x, y, width, height), to_qcolor(color))

    def draw_text(self, x, y, text, color, size=11):
        font = QFont(self.painter.font())
        font.setPixelSize(max(int(size), 1))
        self.painter.setFont(font)
        self.painter.setPen(to_qcolor(color))
        box = QRectF(x - 100, y - size, 200, size * 2)
        self.painter.drawText(box, Qt.AlignmentFlag.AlignCenter, text)


class TransformScale:
    """Scale over a painter's data-to-device transform (one axis)"""

    def __init__(self, transform, axis: str):
        self.transform = transform
        self.axis = axis

    def _point(self, value: float) -> QPointF:
        return QPointF(value, 0.0) if self.axis == 'x' else QPointF(0.0, value)

    def _pick(self, point: QPointF) -> float:
        return point.x() if self.axis == 'x' else point.y()

    def pixel_for(self, value: float) -> float:
        return self._pick(self.transform.map(self._point(value)))

    def value_for(self, pixel: float) -> float:
        inverse, invertible = self.transform.inverted()
        if not invertible:
            return math.nan
        return self._pick(inverse.map(self._point(pixel)))


class ViewScale:
    """Scale from view-box data coordinates to another item's coordinates"""

    def __init__(self, view_box, item, axis: str):
        self.view_box = view_box
        self.item = item
        self.axis = axis

    def _point(self, value: float) -> QPointF:
        return QPointF(value, 0.0) if self.axis == 'x' else QPointF(0.0, value)

    def _pick(self, point: QPointF) -> float:
        return point.x() if self.axis == 'x' else point.y()

    def pixel_for(self, value: float) -> float:
        scene = self.view_box.mapViewToScene(self._point(value))
        return self._pick(self.item.mapFromScene(scene))

    def value_for(self, pixel: float) -> float:
        scene = self.item.mapToScene(self._point(pixel))
        return self._pick(self.view_box.mapSceneToView(scene))


class CandlestickItem(pg.GraphicsObject):
    """Candlestick series drawn in device pixels by CandlestickController"""

    def __init__(self, points: Sequence, options: Optional[Dict[str, Any]] = None):
        pg.GraphicsObject.__init__(self)
        self.controller = CandlestickController(points, options)
        # Read by LegendItem's sample swatch
        self.opts = {
            'pen': pg.mkPen(to_qcolor(self.controller.options['border_color_up'])),
            'antialias': True,
        }

    def set_data(self, points: Sequence):
        self.prepareGeometryChange()
        self.controller.set_data(points)
        self.update()

    def paint(self, p, *args):
        transform = p.transform()
        p.save()
        p.resetTransform()
        try:
            self.controller.update_elements(TransformScale(transform, 'x'),
                                            TransformScale(transform, 'y'))
            self.controller.draw(QtCanvas(p))
        finally:
            p.restore()

    def boundingRect(self):
        bounds = self.controller.data_bounds()
        if bounds is None:
            return QRectF()
        x_min, x_max, low, high = bounds
        return QRectF(x_min - 0.5, low, (x_max - x_min) + 1.0, high - low)


# ------------------------------------------------------- native item builders

def _index(length: int) -> np.ndarray:
    return np.arange(length, dtype=float)


def _series_pen(dataset):
    return pg.mkPen(to_qcolor(dataset.color), width=dataset.width,
                    style=_PEN_STYLES.get(dataset.line_style, Qt.PenStyle.SolidLine))


def build_line_items(dataset, options) -> List:
    y = np.asarray(dataset.data, dtype=float)
    item = pg.PlotDataItem(_index(len(y)), y, pen=_series_pen(dataset), connect='finite')
    return [item]


def build_area_items(dataset, options) -> List:
    y = np.asarray(dataset.data, dtype=float)
    finite = y[np.isfinite(y)]
    fill_level = float(finite.min()) if len(finite) else 0.0
    item = pg.PlotDataItem(
        _index(len(y)), y,
        pen=_series_pen(dataset),
        connect='finite',
        fillLevel=fill_level,
        brush=pg.mkBrush(to_qcolor(dataset.fill_color or dataset.color))
    )
    return [item]


def build_bar_items(dataset, options) -> List:
    heights = np.nan_to_num(np.asarray(dataset.data, dtype=float), nan=0.0)
    colors = dataset.point_colors or [dataset.color] * len(heights)
    item = pg.BarGraphItem(
        x=_index(len(heights)),
        height=heights,
        width=0.6,
        brushes=[pg.mkBrush(to_qcolor(c)) for c in colors],
        pen=pg.mkPen(None)
    )
    return [item]


def build_band_fill(upper, lower) -> Optional[pg.FillBetweenItem]:
    """Fill between two band datasets over the range where both are defined"""
    upper_y = np.asarray(upper.data, dtype=float)
    lower_y = np.asarray(lower.data, dtype=float)
    mask = np.isfinite(upper_y) & np.isfinite(lower_y)
    if mask.sum() < 2:
        return None

    x = _index(len(upper_y))[mask]
    fill = pg.FillBetweenItem(
        pg.PlotCurveItem(x, upper_y[mask]),
        pg.PlotCurveItem(x, lower_y[mask]),
        brush=pg.mkBrush(to_qcolor(upper.fill_color or upper.color))
    )
    return fill


# ----------------------------------------------------------------- view boxes

class TimeScaleViewBox(pg.ViewBox):
    """
    Price view box: wheel, pinch and drag act on the time axis only and the
    price axis keeps auto-ranging over the visible bars.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setMouseEnabled(x=True, y=False)
        self.setAutoVisible(y=True)
        self.setMenuEnabled(False)
        self.grabGesture(Qt.GestureType.PinchGesture)

    @property
    def zoom_enabled(self) -> bool:
        return bool(self.state['mouseEnabled'][0])

    def scaleBy(self, s=None, center=None, x=None, y=None):
        super().scaleBy(s=s, center=center, x=x, y=y)
        self.enableAutoRange(y=True)

    def translateBy(self, t=None, x=None, y=None):
        super().translateBy(t=t, x=x, y=y)
        self.enableAutoRange(y=True)

    def wheelEvent(self, ev, axis=None):
        if not self.zoom_enabled:
            ev.ignore()
            return
        scale = WHEEL_ZOOM_BASE ** (ev.delta() / 120.0)
        center = self.mapToView(ev.pos())
        self.scaleBy(x=1.0 / scale, center=center)
        self.sigRangeChangedManually.emit([True, False])
        ev.accept()

    def event(self, ev):
        if ev.type() == QEvent.Type.Gesture:
            pinch = ev.gesture(Qt.GestureType.PinchGesture)
            if pinch is not None and self.zoom_enabled and pinch.scaleFactor() > 0:
                self.scaleBy(x=1.0 / pinch.scaleFactor())
                ev.accept()
                return True
        return super().event(ev)


class VolumeViewBox(pg.ViewBox):
    """Volume view box; never takes mouse input, the price view drives x"""

    def __init__(self):
        super().__init__(enableMenu=False)
        self.setMouseEnabled(x=False, y=False)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

    def wheelEvent(self, ev, axis=None):
        ev.ignore()

    def mouseDragEvent(self, ev, axis=None):
        ev.ignore()


# ---------------------------------------------------------------------- axes

class IndexDateAxisItem(pg.AxisItem):
    """Bottom axis over bar indices; ticks show the bars' display labels"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.labels: List[str] = []
        self.max_ticks = 10

    def set_labels(self, labels: Sequence[str], max_ticks: int = 10):
        self.labels = list(labels)
        self.max_ticks = max(int(max_ticks), 1)
        self.picture = None
        self.update()

    def tickValues(self, minVal, maxVal, size):
        if not self.labels:
            return super().tickValues(minVal, maxVal, size)
        first = max(0, math.ceil(minVal))
        last = min(len(self.labels) - 1, math.floor(maxVal))
        if last < first:
            return []
        step = max(1, math.ceil((last - first + 1) / self.max_ticks))
        return [(step, list(range(first, last + 1, step)))]

    def tickStrings(self, values, scale, spacing):
        strings = []
        for value in values:
            index = int(round(value))
            strings.append(self.labels[index] if 0 <= index < len(self.labels) else '')
        return strings


class FormattedAxisItem(pg.AxisItem):

    def __init__(self, orientation, formatter=None, **kwargs):
        super().__init__(orientation, **kwargs)
        self.formatter = formatter

    def tickStrings(self, values, scale, spacing):
        if self.formatter is None:
            return super().tickStrings(values, scale, spacing)
        return [self.formatter(v) for v in values]


# ------------------------------------------------------------- plugin layers

class OverlayLayer(pg.GraphicsObject):
    """Transparent layer over the plot that runs a tuple of draw hooks"""

    def __init__(self, view: 'PriceChartView', hooks, z: float):
        pg.GraphicsObject.__init__(self)
        self.view = view
        self.hooks = hooks
        self.setZValue(z)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setAcceptHoverEvents(False)

    def refresh(self):
        self.prepareGeometryChange()
        self.update()

    def boundingRect(self):
        parent = self.parentItem()
        return QRectF(parent.boundingRect()) if parent is not None else QRectF()

    def shape(self):
        return QPainterPath()

    def paint(self, p, *args):
        ctx = self.view.draw_context(self)
        if ctx is None:
            return
        run_pipeline(QtCanvas(p), ctx, self.hooks, self.view.options)


# ---------------------------------------------------------------------- view

class PriceChartView(pg.GraphicsLayoutWidget):
    """Price/volume chart for one ChartData plus its options dict"""

    # Emitted with the hovered ActivePoint, or None when the cursor leaves
    hovered = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)

        self.chart_data: Optional[ChartData] = None
        self.options: Dict[str, Any] = build_chart_options()
        self.active_point: Optional[ActivePoint] = None
        self._items = []

        self.view_box = TimeScaleViewBox()
        self.date_axis = IndexDateAxisItem(orientation='bottom')
        self.price_axis = FormattedAxisItem('right', format_price_tick)
        self.volume_axis = FormattedAxisItem('left', format_volume_tick)

        self.plot = self.addPlot(
            row=0, col=0,
            viewBox=self.view_box,
            axisItems={'bottom': self.date_axis, 'right': self.price_axis, 'left': self.volume_axis}
        )
        self.plot.showAxis('right')
        self.plot.hideButtons()

        self.volume_view = VolumeViewBox()
        self.volume_view.setParentItem(self.plot)
        self.volume_view.setZValue(VOLUME_VIEW_Z)
        self.volume_view.setXLink(self.view_box)
        self.volume_axis.linkToView(self.volume_view)

        self.underlay = OverlayLayer(self, UNDERLAY_HOOKS, UNDERLAY_Z)
        self.underlay.setParentItem(self.plot)
        self.overlay = OverlayLayer(self, OVERLAY_HOOKS, OVERLAY_Z)
        self.overlay.setParentItem(self.plot)

        self.legend = self.plot.addLegend(offset=(10, 10))

        self.tooltip = pg.TextItem(anchor=(0, 1))
        self.tooltip.setZValue(TOOLTIP_Z)
        self.tooltip.hide()
        self.plot.addItem(self.tooltip, ignoreBounds=True)

        self.zoom = ZoomController(self.view_box)

        self.view_box.sigResized.connect(self._sync_volume_geometry)
        self.view_box.sigRangeChanged.connect(self._refresh_layers)
        self.scene().sigMouseMoved.connect(self._on_mouse_moved)

        self.apply_options(self.options)

    # ------------------------------------------------------------ options

    def apply_options(self, options: Dict[str, Any]):
        """Apply theme, layout, axis, legend and zoom settings"""
        self.options = options
        scales = options['scales']
        plugins = options['plugins']

        self.setBackground(to_qcolor(options['background']))
        padding = options['layout']['padding']
        self.ci.setContentsMargins(padding['left'], padding['top'],
                                   padding['right'], padding['bottom'])

        for axis, key in ((self.date_axis, 'x'), (self.price_axis, 'y')):
            ticks = scales[key]['ticks']
            color = to_qcolor(ticks['color'])
            font = QFont()
            font.setPixelSize(ticks['font']['size'])
            axis.setPen(color)
            axis.setTextPen(color)
            axis.setStyle(tickFont=font, tickTextOffset=ticks.get('padding', 5))

        grid = scales['y']['grid']
        alpha = to_qcolor(grid['color']).alphaF() if grid['display'] else None
        self.plot.showGrid(x=grid['display'], y=grid['display'], alpha=alpha or 0.0)

        self.price_axis.setWidth(plugins['price_axis']['width'])

        if 'y1' in scales:
            ticks = scales['y1']['ticks']
            color = to_qcolor(ticks['color'])
            self.volume_axis.setPen(color)
            self.volume_axis.setTextPen(color)
            self.plot.showAxis('left')
            self.volume_view.show()
        else:
            self.plot.hideAxis('left')
            self.volume_view.hide()

        labels = plugins['legend']['labels']
        self.legend.setLabelTextColor(to_qcolor(labels['color']))
        self.legend.setLabelTextSize(f"{labels['font']['size']}pt")

        self.tooltip.fill = pg.mkBrush(to_qcolor(plugins['tooltip']['background_color']))
        self.tooltip.border = pg.mkPen(to_qcolor(plugins['tooltip']['border_color']))
        self.tooltip.setColor(to_qcolor(options['scales']['x']['ticks']['color']))

        zoom = plugins['zoom']
        self.zoom.enabled = zoom['enabled']
        self.zoom.step = zoom['zoom']['step']

        self._refresh_layers()

    # --------------------------------------------------------------- data

    def clear_chart(self):
        for target, item in self._items:
            target.removeItem(item)
        self._items = []
        self.legend.clear()
        self.chart_data = None
        self.date_axis.set_labels([])
        self.set_active_index(None)

    def set_chart_data(self, chart_data: Optional[ChartData],
                       options: Optional[Dict[str, Any]] = None):
        """
        Replace every drawn item with the datasets of `chart_data`.

        The visible time window survives a redraw over the same number of
        bars (indicator or chart-type changes); new bar sets reset the zoom.
        """
        previous_range = None
        if (self.chart_data is not None and chart_data is not None
                and len(self.chart_data.labels) == len(chart_data.labels)):
            previous_range = self.view_box.viewRange()[0]

        self.clear_chart()
        if options is not None:
            self.apply_options(options)
        if chart_data is None or not chart_data.labels:
            return

        self.chart_data = chart_data
        by_key = {ds.key: ds for ds in chart_data.datasets}

        for dataset in chart_data.datasets:
            target = self.volume_view if dataset.axis == 'y1' else self.view_box
            if dataset.axis == 'y1' and 'y1' not in self.options['scales']:
                continue

            items = get_chart_type(dataset.type).factory(dataset, self.options)
            for item in items:
                item.setZValue(int(dataset.order))
                self._add(target, item)
            if items:
                self.legend.addItem(items[0], dataset.label)

            if dataset.fill_to and dataset.fill_to in by_key:
                fill = build_band_fill(dataset, by_key[dataset.fill_to])
                if fill is not None:
                    fill.setZValue(int(PaintOrder.BAND) - 0.5)
                    self._add(target, fill)

        volume = chart_data.find('volume')
        if volume is not None:
            peak = float(np.nanmax(volume.data)) if len(volume.data) else 0.0
            headroom = self.options['scales'].get('y1', {}).get('headroom', 1.0)
            self.volume_view.setYRange(0, (peak if peak > 0 else 1.0) * headroom, padding=0)

        self.date_axis.set_labels(chart_data.labels,
                                  self.options['scales']['x']['ticks']['max_ticks_limit'])
        self.zoom.set_domain(-0.5, len(chart_data.labels) - 0.5)
        if previous_range is None:
            self.zoom.reset_zoom()
        else:
            self.view_box.setXRange(*previous_range, padding=0)
            self.view_box.enableAutoRange(y=True)
        logger.debug(f"Rendered {len(chart_data.datasets)} datasets for {chart_data.symbol}")

    def _add(self, target, item):
        target.addItem(item)
        self._items.append((target, item))

    # --------------------------------------------------------------- zoom

    def zoom_in(self) -> bool:
        return self.zoom.zoom_in()

    def zoom_out(self) -> bool:
        return self.zoom.zoom_out()

    def reset_zoom(self):
        self.zoom.reset_zoom()

    def viewportEvent(self, ev):
        if (ev.type() == QEvent.Type.NativeGesture
                and ev.gestureType() == Qt.NativeGestureType.ZoomNativeGesture):
            self.zoom.zoom_by(1.0 + ev.value())
            return True
        return super().viewportEvent(ev)

    # -------------------------------------------------------------- hover

    def _on_mouse_moved(self, pos):
        if self.chart_data is None:
            return
        if not self.view_box.sceneBoundingRect().contains(pos):
            if self.active_point is not None:
                self.set_active_index(None)
            return

        x = self.view_box.mapSceneToView(pos).x()
        index = min(max(int(round(x)), 0), len(self.chart_data.labels) - 1)
        if self.active_point is None or self.active_point.index != index:
            self.set_active_index(index)

    def set_active_index(self, index: Optional[int]):
        """Move the hover point to bar `index` (None clears it)"""
        if index is None or self.chart_data is None:
            self.active_point = None
            self.tooltip.hide()
        else:
            primary = self.chart_data.primary
            value = primary.value_at(index) if primary is not None else None
            y = math.nan if value is None else float(value)
            self.active_point = ActivePoint(index, float(index), y, self.chart_data.labels[index])

            lines = tooltip_lines(self.chart_data, index, self.options)
            if lines and math.isfinite(y):
                self.tooltip.setText('\n'.join(lines))
                self.tooltip.setPos(index, y)
                self.tooltip.show()
            else:
                self.tooltip.hide()

        self._refresh_layers()
        self.hovered.emit(self.active_point)

    # ------------------------------------------------------------- layers

    def draw_context(self, layer) -> Optional[DrawContext]:
        """Geometry and scales for a plugin layer, in the layer's coordinates"""
        if self.chart_data is None:
            return None

        rect = layer.mapRectFromParent(self.view_box.geometry())
        if rect.width() <= 0 or rect.height() <= 0:
            return None

        price_axis_area = None
        if self.price_axis.isVisible():
            axis_rect = layer.mapRectFromParent(self.price_axis.geometry())
            price_axis_area = ChartArea(axis_rect.left(), axis_rect.top(),
                                        axis_rect.right(), axis_rect.bottom())

        return DrawContext(
            active_point=self.active_point,
            chart_area=ChartArea(rect.left(), rect.top(), rect.right(), rect.bottom()),
            x_scale=ViewScale(self.view_box, layer, 'x'),
            y_scale=ViewScale(self.view_box, layer, 'y'),
            price_axis_area=price_axis_area
        )

    def _sync_volume_geometry(self, *args):
        self.volume_view.setGeometry(self.view_box.geometry())
        self.volume_view.linkedViewChanged(self.view_box, self.volume_view.XAxis)
        self._refresh_layers()

    def _refresh_layers(self, *args):
        self.underlay.refresh()
        self.overlay.refresh()
