# market_chart/exceptions.py - Custom exceptions for the chart engine
"""
Custom exception classes for the market_chart package.

The indicator engine never raises for well-formed input (undefined samples
are NaN), so these cover the outer edges only: the bar-fetch collaborator,
the chart-type registry and configuration mutation.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ChartEngineError(Exception):
    """
    [CLASS SUMMARY]
    Purpose: Base exception class for all chart engine errors
    Usage: Base class for inheritance, rarely raised directly
    Attributes:
        - message: Error description
        - details: Additional context dictionary
        - timestamp: When the error occurred (UTC)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        [FUNCTION SUMMARY]
        Purpose: Initialize base exception with message and optional details
        Parameters:
            - message (str): Human-readable error description
            - details (dict, optional): Additional context about the error
        Example: ChartEngineError("Render failed", {"symbol": "AAPL"})
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def __str__(self) -> str:
        """Format error message with details if available"""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class BarFetchError(ChartEngineError):
    """
    [CLASS SUMMARY]
    Purpose: Raised when the market-data collaborator cannot deliver bars
    Usage: Raised by RESTBarFetcher, converted to an empty result by
           fetch_bars_safely so the panel shows its empty state
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 symbol: Optional[str] = None, **kwargs):
        details = kwargs
        if status_code:
            details['status_code'] = status_code
        if symbol:
            details['symbol'] = symbol

        super().__init__(message, details)
        self.status_code = status_code
        self.symbol = symbol


class ChartTypeError(ChartEngineError):
    """Raised when a dataset names a chart type missing from the registry"""

    def __init__(self, chart_type: str, available: Optional[list] = None):
        super().__init__(
            f"Unknown chart type: {chart_type}",
            {'available': ", ".join(available)} if available else None
        )
        self.chart_type = chart_type


class ConfigurationError(ChartEngineError):
    """
    [CLASS SUMMARY]
    Purpose: Raised for invalid chart configuration values
    Common scenarios:
        - Indicator period below 1
        - Unknown theme or preset name
        - Unknown configuration option
    """

    def __init__(self, message: str, option: Optional[str] = None,
                 value: Optional[Any] = None):
        details = {}
        if option is not None:
            details['option'] = option
        if value is not None:
            details['value'] = value

        super().__init__(message, details)
        self.option = option
        self.value = value
