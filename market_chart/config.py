# market_chart/config.py - Configuration and constants for the chart engine
"""
Configuration module for the market_chart package.
Handles environment variables, data-source settings, chart defaults and logging.
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Any, Optional

import pytz
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# .env lives in the project root (one level up from market_chart/)
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


class ChartEngineConfig:
    """
    [CLASS SUMMARY]
    Purpose: Centralized configuration management for the chart engine
    Responsibilities:
        - Load the bar-fetch endpoint settings
        - Provide chart defaults (theme, preset, candle width, zoom step)
        - Configure logging
    Usage:
        config = ChartEngineConfig()
        url = config.api_base_url
    """

    def __init__(self, config_override: Optional[Dict[str, Any]] = None):
        """
        [FUNCTION SUMMARY]
        Purpose: Initialize configuration with environment variables and optional overrides
        Parameters:
            - config_override (dict, optional): Override default settings for testing
        Example: ChartEngineConfig({'theme': 'tradingview'})
        """
        self.config_override = config_override or {}

        self._load_api_config()
        self._load_chart_config()
        self._setup_logging()

    def _get(self, key: str, env_name: str, default: Any) -> Any:
        """Override first, then environment, then default"""
        if key in self.config_override:
            return self.config_override[key]
        return os.getenv(env_name, default)

    def _load_api_config(self):
        """
        [FUNCTION SUMMARY]
        Purpose: Load settings for the REST bar-fetch collaborator
        Sets: api_base_url, bars_endpoint, request_timeout
        """
        self.api_base_url = self._get('api_base_url', 'MARKET_CHART_API_URL',
                                      'http://localhost:8200')
        self.bars_endpoint = f"{self.api_base_url.rstrip('/')}/api/v1/bars"
        self.request_timeout = float(self._get('request_timeout', 'MARKET_CHART_TIMEOUT', 10))

    def _load_chart_config(self):
        """
        [FUNCTION SUMMARY]
        Purpose: Chart defaults shared by every symbol panel
        Sets: theme, preset, candle_width, zoom_step, default_timeframe,
              display_timezone
        """
        self.theme = self._get('theme', 'MARKET_CHART_THEME', 'dark')
        self.preset = self._get('preset', 'MARKET_CHART_PRESET', 'standard')
        self.default_timeframe = self._get('default_timeframe', 'MARKET_CHART_TIMEFRAME', '15Min')

        # Pixel width of one candle body
        self.candle_width = float(self.config_override.get('candle_width', 8))

        # zoom_in() scales the visible window by 1/zoom_step
        self.zoom_step = float(self.config_override.get('zoom_step', 1.1))

        # x-axis labels are rendered in this zone; bars stay UTC
        tz_name = self._get('display_timezone', 'MARKET_CHART_TIMEZONE', 'UTC')
        try:
            self.display_timezone = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            raise ConfigurationError(f"Unknown timezone '{tz_name}'",
                                     option='display_timezone', value=tz_name) from None

    def _setup_logging(self):
        """
        [FUNCTION SUMMARY]
        Purpose: Configure logging for the chart engine
        Sets: Logging format, level, and optional log file
        """
        log_level = self._get('log_level', 'MARKET_CHART_LOG_LEVEL', 'INFO')

        self.logger_config = {
            'level': getattr(logging, str(log_level).upper(), logging.INFO),
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }

        # File logging is opt-in; the engine is normally embedded in a host app
        log_file = self.config_override.get('log_file', os.getenv('MARKET_CHART_LOG_FILE'))
        self.log_file = Path(log_file) if log_file else None
        self.max_log_size = 10 * 1024 * 1024  # 10 MB
        self.log_backup_count = 5

    def get_logger(self, name: str) -> logging.Logger:
        """
        [FUNCTION SUMMARY]
        Purpose: Create a configured logger for a module component
        Parameters:
            - name (str): Logger name (usually __name__ of the calling module)
        Returns: logging.Logger - Configured logger instance
        Example: logger = config.get_logger(__name__)
        """
        logger = logging.getLogger(name)
        logger.setLevel(self.logger_config['level'])

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        formatter = logging.Formatter(
            self.logger_config['format'],
            datefmt=self.logger_config['datefmt']
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.logger_config['level'])
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_log_size,
                backupCount=self.log_backup_count
            )
            file_handler.setLevel(self.logger_config['level'])
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger

    def default_chart_configuration(self):
        """
        [FUNCTION SUMMARY]
        Purpose: Build the ChartConfiguration a freshly mounted panel starts with
        Returns: ChartConfiguration with theme/preset taken from this config
        """
        from .dashboard.components.chart.panel_controller import ChartConfiguration

        return ChartConfiguration(theme=self.theme, preset=self.preset)

    def to_dict(self) -> Dict[str, Any]:
        """
        [FUNCTION SUMMARY]
        Purpose: Export configuration as dictionary for debugging/inspection
        Returns: dict - All configuration values
        """
        return {
            'api_settings': {
                'base_url': self.api_base_url,
                'bars_endpoint': self.bars_endpoint,
                'timeout': self.request_timeout
            },
            'chart_settings': {
                'theme': self.theme,
                'preset': self.preset,
                'default_timeframe': self.default_timeframe,
                'candle_width': self.candle_width,
                'zoom_step': self.zoom_step,
                'display_timezone': self.display_timezone.zone
            },
            'logging': {
                'level': logging.getLevelName(self.logger_config['level']),
                'log_file': str(self.log_file) if self.log_file else None
            }
        }


_config_instance = None


def get_config(reset: bool = False, **overrides) -> ChartEngineConfig:
    """
    [FUNCTION SUMMARY]
    Purpose: Get or create singleton configuration instance
    Parameters:
        - reset (bool): Force create new instance
        - **overrides: Configuration overrides
    Returns: ChartEngineConfig - Configuration instance
    Example: config = get_config(theme='tradingview')
    """
    global _config_instance

    if _config_instance is None or reset or overrides:
        _config_instance = ChartEngineConfig(overrides)

    return _config_instance
