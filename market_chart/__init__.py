# market_chart/__init__.py
"""
Market Chart - technical indicators and interactive price charts.

Indicators live in market_chart.calculations.indicators, bar models and the
REST fetcher in market_chart.data, and the chart engine in
market_chart.dashboard.components.chart.
"""

__version__ = "0.1.0"
