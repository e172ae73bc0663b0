"""
Styles for the chart panel
"""

from .base_styles import BaseStyles


class ChartStyles:

    # Panel header
    PRICE_UP = BaseStyles.POSITIVE
    PRICE_DOWN = BaseStyles.NEGATIVE

    # Empty state
    PLACEHOLDER_TEXT = "No chart data available"
    LOADING_TEXT = "Loading chart data..."

    # Indicator toggle colours
    SMA_COLOR = "#3b82f6"
    EMA_COLOR = "#a855f7"
    BOLLINGER_COLOR = "#f59e0b"
    VWAP_COLOR = "#9ca3af"

    @staticmethod
    def get_stylesheet():
        return BaseStyles.get_base_stylesheet() + f"""
        /* Chart container */
        QWidget#chart_panel {{
            background-color: {BaseStyles.BACKGROUND_PRIMARY};
            border: 1px solid {BaseStyles.BORDER_COLOR};
            border-radius: {BaseStyles.BORDER_RADIUS_MD};
        }}

        /* Header */
        QLabel#chart_symbol {{
            font-size: {BaseStyles.FONT_SIZE_LARGE};
            font-weight: bold;
            color: #2dd4bf;
        }}

        QLabel#chart_price {{
            font-size: {BaseStyles.FONT_SIZE_XLARGE};
            font-weight: bold;
        }}

        QLabel#chart_change_up {{
            color: {ChartStyles.PRICE_UP};
        }}

        QLabel#chart_change_down {{
            color: {ChartStyles.PRICE_DOWN};
        }}

        QLabel#chart_stats, QLabel#chart_updated {{
            color: {BaseStyles.TEXT_MUTED};
            font-size: {BaseStyles.FONT_SIZE_SMALL};
        }}

        /* Chart controls */
        QWidget#chart_controls {{
            background-color: {BaseStyles.BACKGROUND_SECONDARY};
            border-bottom: 1px solid {BaseStyles.BORDER_COLOR};
        }}

        QPushButton#chart_button {{
            padding: 4px 8px;
            margin: 0 2px;
            font-size: {BaseStyles.FONT_SIZE_SMALL};
        }}

        QCheckBox#indicator_toggle {{
            padding: 4px;
            margin: 0 4px;
        }}

        /* Empty state */
        QLabel#chart_placeholder {{
            color: {BaseStyles.TEXT_MUTED};
            font-size: 18px;
            background-color: rgba(0, 0, 0, 0.2);
            border: 1px solid {BaseStyles.BORDER_COLOR};
            border-radius: {BaseStyles.BORDER_RADIUS_MD};
        }}
        """
