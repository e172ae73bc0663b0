# market_chart/styles/base_styles.py
"""
Base styles for the panel widgets hosting a chart
"""


class BaseStyles:
    # Panel palette (gray-900 family to sit behind the chart)
    BACKGROUND_PRIMARY = "#111827"
    BACKGROUND_SECONDARY = "#1f2937"
    BACKGROUND_TERTIARY = "#273244"

    BORDER_COLOR = "#374151"
    BORDER_LIGHT = "#4b5563"

    TEXT_PRIMARY = "#f9fafb"
    TEXT_SECONDARY = "#e5e7eb"
    TEXT_MUTED = "#9ca3af"

    ACCENT_PRIMARY = "#0d9488"
    ACCENT_HOVER = "#14b8a6"
    ACCENT_PRESSED = "#0f766e"

    POSITIVE = "#22c55e"
    NEGATIVE = "#ef4444"

    FONT_FAMILY = "Inter, Arial, sans-serif"
    FONT_SIZE_SMALL = "11px"
    FONT_SIZE_NORMAL = "13px"
    FONT_SIZE_LARGE = "16px"
    FONT_SIZE_XLARGE = "22px"

    SPACING_SM = "6px"
    BORDER_RADIUS_SM = "4px"
    BORDER_RADIUS_MD = "6px"

    @staticmethod
    def get_base_stylesheet():
        return f"""
        QWidget {{
            background-color: {BaseStyles.BACKGROUND_PRIMARY};
            color: {BaseStyles.TEXT_PRIMARY};
            font-family: {BaseStyles.FONT_FAMILY};
            font-size: {BaseStyles.FONT_SIZE_NORMAL};
        }}

        QPushButton {{
            background-color: {BaseStyles.ACCENT_PRIMARY};
            border: none;
            padding: 6px 12px;
            border-radius: {BaseStyles.BORDER_RADIUS_SM};
            font-weight: bold;
            color: {BaseStyles.TEXT_PRIMARY};
        }}

        QPushButton:hover {{
            background-color: {BaseStyles.ACCENT_HOVER};
        }}

        QPushButton:pressed {{
            background-color: {BaseStyles.ACCENT_PRESSED};
        }}

        QPushButton:disabled {{
            background-color: {BaseStyles.BACKGROUND_TERTIARY};
            color: {BaseStyles.TEXT_MUTED};
        }}

        QComboBox, QSpinBox, QDoubleSpinBox {{
            background-color: {BaseStyles.BACKGROUND_SECONDARY};
            border: 1px solid {BaseStyles.BORDER_COLOR};
            border-radius: {BaseStyles.BORDER_RADIUS_SM};
            padding: 4px {BaseStyles.SPACING_SM};
            color: {BaseStyles.TEXT_PRIMARY};
        }}

        QComboBox:hover, QSpinBox:hover, QDoubleSpinBox:hover {{
            border-color: {BaseStyles.BORDER_LIGHT};
        }}

        QCheckBox {{
            color: {BaseStyles.TEXT_SECONDARY};
            spacing: {BaseStyles.SPACING_SM};
        }}

        QCheckBox::indicator {{
            width: 14px;
            height: 14px;
            border: 2px solid {BaseStyles.BORDER_COLOR};
            border-radius: 3px;
            background-color: {BaseStyles.BACKGROUND_SECONDARY};
        }}

        QCheckBox::indicator:checked {{
            background-color: {BaseStyles.ACCENT_PRIMARY};
            border-color: {BaseStyles.ACCENT_PRIMARY};
        }}
        """
