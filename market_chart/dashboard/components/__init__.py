"""
Dashboard components. The Qt ChartPanel is imported from .chart_panel
"""
