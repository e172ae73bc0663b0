# market_chart/dashboard/components/chart_panel.py
"""
Chart Panel - one symbol panel: header, controls and the price chart.

Bars are fetched in a background thread through any get_bars(symbol,
timeframe, limit) callable; the panel's ChartPanelController turns them
into datasets and the PriceChartView draws them.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from PyQt6.QtCore import QThread, QTimer, Qt, pyqtSignal, pyqtSlot
from PyQt6.QtWidgets import (QCheckBox, QComboBox, QHBoxLayout, QLabel, QPushButton,
                             QSpinBox, QStackedWidget, QVBoxLayout, QWidget)

from .chart.datasets import ChartType
from .chart.options import format_volume
from .chart.panel_controller import ChartPanelController, PanelState
from .chart.renderer import PriceChartView
from ...config import get_config
from ...data.models import TIMEFRAMES, Bar, get_timeframe
from ...data.rest_client import fetch_bars_safely
from ...exceptions import ConfigurationError
from ...styles import ChartStyles

logger = logging.getLogger(__name__)


class BarFetchWorker(QThread):
    """Background thread fetching bars for each requested symbol"""
    bars_ready = pyqtSignal(int, str, list)

    def __init__(self, fetcher: Callable, token: int, symbols: Sequence[str],
                 timeframe: str, limit: int):
        super().__init__()
        self.fetcher = fetcher
        self.token = token
        self.symbols = list(symbols)
        self.timeframe = timeframe
        self.limit = limit

    def run(self):
        for symbol in self.symbols:
            bars = fetch_bars_safely(self.fetcher, symbol, self.timeframe, self.limit)
            self.bars_ready.emit(self.token, symbol, bars)


class ChartPanel(QWidget):
    """Symbol panel with indicator toggles, zoom controls and auto-refresh"""

    # Signals
    timeframe_changed = pyqtSignal(str)
    chart_type_changed = pyqtSignal(str)
    indicator_toggled = pyqtSignal(str, bool)

    INDICATOR_TOGGLES = (
        ('show_volume', 'Volume', None),
        ('show_sma', 'SMA', ChartStyles.SMA_COLOR),
        ('show_ema', 'EMA', ChartStyles.EMA_COLOR),
        ('show_bollinger_bands', 'BB', ChartStyles.BOLLINGER_COLOR),
        ('show_vwap', 'VWAP', ChartStyles.VWAP_COLOR),
        ('show_grid_lines', 'Grid', None),
        ('zoom_enabled', 'Zoom', None),
    )

    PERIOD_CONTROLS = (
        ('sma_period', 'SMA'),
        ('ema_period', 'EMA'),
        ('bollinger_period', 'BB'),
    )

    def __init__(self, symbols: Optional[Sequence[str]] = None, fetcher: Optional[Callable] = None,
                 config=None, parent=None):
        super().__init__(parent)

        self.config = config or get_config()
        self.fetcher = fetcher
        self.timeframe = get_timeframe(self.config.default_timeframe)
        self.controller = ChartPanelController(
            symbols or [],
            config=self.config.default_chart_configuration(),
            display_tz=self.config.display_timezone,
            zoom_step=self.config.zoom_step,
            candle_width=self.config.candle_width
        )
        self._workers: List[BarFetchWorker] = []

        self.init_ui()
        self.apply_styles()
        self.controller.attach_zoom(self.chart_view.zoom)

        self.refresh_timer = QTimer(self)
        self.refresh_timer.timeout.connect(self.load_data)

        self.refresh_chart()

    def init_ui(self):
        """Initialize the UI"""
        self.setObjectName("chart_panel")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        layout.addWidget(self.create_header())
        layout.addWidget(self.create_controls())

        self.placeholder = QLabel(ChartStyles.PLACEHOLDER_TEXT)
        self.placeholder.setObjectName("chart_placeholder")
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.chart_view = PriceChartView()

        self.stack = QStackedWidget()
        self.stack.addWidget(self.placeholder)
        self.stack.addWidget(self.chart_view)
        layout.addWidget(self.stack, 1)

    def create_header(self):
        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(10, 5, 10, 5)

        self.symbol_label = QLabel("--")
        self.symbol_label.setObjectName("chart_symbol")
        self.price_label = QLabel("")
        self.price_label.setObjectName("chart_price")
        self.change_label = QLabel("")
        self.change_label.setObjectName("chart_change_up")
        self.stats_label = QLabel("")
        self.stats_label.setObjectName("chart_stats")
        self.updated_label = QLabel("")
        self.updated_label.setObjectName("chart_updated")

        header_layout.addWidget(self.symbol_label)
        header_layout.addWidget(self.price_label)
        header_layout.addWidget(self.change_label)
        header_layout.addSpacing(20)
        header_layout.addWidget(self.stats_label)
        header_layout.addStretch()
        header_layout.addWidget(self.updated_label)
        return header

    def create_controls(self):
        """Create control widgets"""
        controls_widget = QWidget()
        controls_widget.setObjectName("chart_controls")
        controls_layout = QHBoxLayout(controls_widget)
        controls_layout.setContentsMargins(10, 5, 10, 5)

        # Timeframe selector
        self.timeframe_combo = QComboBox()
        self.timeframe_combo.setObjectName("timeframe_selector")
        for timeframe in TIMEFRAMES:
            self.timeframe_combo.addItem(timeframe.label, timeframe.value)
        self.timeframe_combo.setCurrentIndex(self.timeframe_combo.findData(self.timeframe.value))
        self.timeframe_combo.currentIndexChanged.connect(self.on_timeframe_changed)
        controls_layout.addWidget(QLabel("Timeframe:"))
        controls_layout.addWidget(self.timeframe_combo)

        # Chart type selector
        self.chart_type_combo = QComboBox()
        self.chart_type_combo.setObjectName("chart_type_selector")
        for chart_type in ChartType:
            self.chart_type_combo.addItem(chart_type.value.title(), chart_type.value)
        self.chart_type_combo.setCurrentIndex(
            self.chart_type_combo.findData(self.controller.config.chart_type))
        self.chart_type_combo.currentIndexChanged.connect(self.on_chart_type_changed)
        controls_layout.addWidget(self.chart_type_combo)

        controls_layout.addSpacing(20)

        # Indicator toggles
        self.indicator_checkboxes: Dict[str, QCheckBox] = {}
        for option, label, color in self.INDICATOR_TOGGLES:
            check = QCheckBox(label)
            check.setObjectName("indicator_toggle")
            check.setChecked(getattr(self.controller.config, option))
            if color:
                check.setStyleSheet(f"color: {color};")
            check.toggled.connect(lambda checked, name=option: self.toggle_option(name, checked))
            self.indicator_checkboxes[option] = check
            controls_layout.addWidget(check)

        controls_layout.addSpacing(10)

        # Indicator periods
        self.period_spinboxes: Dict[str, QSpinBox] = {}
        for option, label in self.PERIOD_CONTROLS:
            spin = QSpinBox()
            spin.setRange(1, 500)
            spin.setValue(getattr(self.controller.config, option))
            spin.setToolTip(f"{label} period")
            spin.valueChanged.connect(lambda value, name=option: self.on_period_changed(name, value))
            self.period_spinboxes[option] = spin
            controls_layout.addWidget(QLabel(f"{label}:"))
            controls_layout.addWidget(spin)

        controls_layout.addStretch()

        # Auto refresh
        self.auto_refresh_check = QCheckBox("Auto")
        self.auto_refresh_check.setObjectName("indicator_toggle")
        self.auto_refresh_check.toggled.connect(self.set_auto_refresh)
        controls_layout.addWidget(self.auto_refresh_check)

        # Zoom controls
        self.zoom_in_btn = QPushButton("+")
        self.zoom_in_btn.setObjectName("chart_button")
        self.zoom_in_btn.setFixedSize(30, 30)
        self.zoom_in_btn.clicked.connect(self.zoom_in)

        self.zoom_out_btn = QPushButton("-")
        self.zoom_out_btn.setObjectName("chart_button")
        self.zoom_out_btn.setFixedSize(30, 30)
        self.zoom_out_btn.clicked.connect(self.zoom_out)

        self.reset_zoom_btn = QPushButton("Reset")
        self.reset_zoom_btn.setObjectName("chart_button")
        self.reset_zoom_btn.clicked.connect(self.reset_zoom)

        controls_layout.addWidget(self.zoom_in_btn)
        controls_layout.addWidget(self.zoom_out_btn)
        controls_layout.addWidget(self.reset_zoom_btn)

        return controls_widget

    def apply_styles(self):
        """Apply styles to the widget"""
        self.setStyleSheet(ChartStyles.get_stylesheet())

    # ------------------------------------------------------------------ data

    def set_symbols(self, symbols: Sequence[str]):
        """Show a new symbol list; the first symbol with bars is the primary"""
        self.controller.set_symbols(symbols)
        self.controller.clear()
        self.refresh_chart()
        self.load_data()

    def set_bars(self, bars_by_symbol: Mapping[str, Sequence]):
        """Hand bars to the panel directly instead of fetching them"""
        self.controller.set_bars(bars_by_symbol)
        self.refresh_chart()

    def load_data(self):
        """Fetch bars for every symbol at the current timeframe"""
        if self.fetcher is None or not self.controller.symbols:
            return

        token = self.controller.begin_request()
        if self.controller.state == PanelState.EMPTY:
            self.placeholder.setText(ChartStyles.LOADING_TEXT)

        worker = BarFetchWorker(self.fetcher, token, self.controller.symbols,
                                self.timeframe.api_value, self.timeframe.limit)
        worker.bars_ready.connect(self.on_bars_ready)
        worker.finished.connect(self._prune_workers)
        self._workers.append(worker)
        worker.start()
        logger.info(f"Fetching {self.timeframe.value} bars for {', '.join(self.controller.symbols)}")

    @pyqtSlot(int, str, list)
    def on_bars_ready(self, token: int, symbol: str, bars: List[Bar]):
        if self.controller.accept_result(token, symbol, bars):
            self.refresh_chart()

    def _prune_workers(self):
        self._workers = [w for w in self._workers if w.isRunning()]
        if not self._workers and self.controller.state == PanelState.EMPTY:
            self.placeholder.setText(ChartStyles.PLACEHOLDER_TEXT)

    # --------------------------------------------------------------- display

    def refresh_chart(self):
        """Redraw from the controller's current datasets"""
        try:
            chart_data = self.controller.chart_data()
            if chart_data is None:
                self.chart_view.clear_chart()
                self.stack.setCurrentWidget(self.placeholder)
                self.update_header()
                return

            self.chart_view.set_chart_data(chart_data, self.controller.chart_options())
            self.stack.setCurrentWidget(self.chart_view)
            self.update_header()

        except Exception as e:
            logger.error(f"Error rendering chart: {e}", exc_info=True)

    def update_header(self):
        summary = self.controller.summary()
        self.symbol_label.setText(self.controller.primary_symbol or "--")

        if summary is None:
            self.price_label.setText("")
            self.change_label.setText("")
            self.stats_label.setText("")
            return

        self.price_label.setText(f"${summary.current:.2f}")
        self.change_label.setText(f"{summary.change:+.2f} ({summary.change_percent:+.2f}%)")
        self.change_label.setObjectName(
            "chart_change_up" if summary.change >= 0 else "chart_change_down")
        # Object name changes need a re-polish to pick up the new rule
        self.change_label.style().unpolish(self.change_label)
        self.change_label.style().polish(self.change_label)

        self.stats_label.setText(
            f"H: ${summary.high:.2f}  L: ${summary.low:.2f}  Vol: {format_volume(summary.volume)}"
        )
        self.updated_label.setText(f"Updated {datetime.now().strftime('%H:%M:%S')}")

    # -------------------------------------------------------------- controls

    def on_timeframe_changed(self, index: int):
        self.timeframe = get_timeframe(self.timeframe_combo.itemData(index))
        logger.info(f"Timeframe changed to {self.timeframe.value}")
        self.timeframe_changed.emit(self.timeframe.value)

        if self.refresh_timer.isActive():
            self.refresh_timer.start(self.timeframe.refresh_ms)
        self.load_data()

    def on_chart_type_changed(self, index: int):
        chart_type = self.chart_type_combo.itemData(index)
        self.controller.set_chart_type(chart_type)
        self.chart_type_changed.emit(chart_type)
        self.refresh_chart()

    def toggle_option(self, option: str, checked: bool):
        self.controller.set_option(option, checked)
        self.indicator_toggled.emit(option, checked)
        self.refresh_chart()

    def on_period_changed(self, option: str, value: int):
        try:
            self.controller.set_period(option, value)
        except ConfigurationError as e:
            logger.warning(f"Ignoring period change: {e}")
            return
        self.refresh_chart()

    def set_auto_refresh(self, enabled: bool):
        if enabled:
            self.refresh_timer.start(self.timeframe.refresh_ms)
        else:
            self.refresh_timer.stop()

    def zoom_in(self):
        self.controller.zoom_in()

    def zoom_out(self):
        self.controller.zoom_out()

    def reset_zoom(self):
        self.controller.reset_zoom()

    def closeEvent(self, event):
        self.refresh_timer.stop()
        for worker in self._workers:
            worker.wait(2000)
        super().closeEvent(event)
