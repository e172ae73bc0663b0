# market_chart/tests/test_config.py
"""
Module: Configuration Tests
Purpose: Environment/override precedence, logging setup and the singleton
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from market_chart.config import ChartEngineConfig, get_config
from market_chart.dashboard.components.chart import ChartConfiguration
from market_chart.exceptions import ConfigurationError


class TestChartEngineConfig:
    """Test configuration sources"""

    def test_defaults(self, monkeypatch):
        for name in ('MARKET_CHART_API_URL', 'MARKET_CHART_THEME', 'MARKET_CHART_PRESET',
                     'MARKET_CHART_TIMEFRAME', 'MARKET_CHART_TIMEZONE', 'MARKET_CHART_LOG_FILE'):
            monkeypatch.delenv(name, raising=False)

        config = ChartEngineConfig()
        assert config.api_base_url == 'http://localhost:8200'
        assert config.bars_endpoint == 'http://localhost:8200/api/v1/bars'
        assert config.theme == 'dark'
        assert config.preset == 'standard'
        assert config.default_timeframe == '15Min'
        assert config.display_timezone.zone == 'UTC'
        assert config.log_file is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv('MARKET_CHART_API_URL', 'http://data:9000/')
        monkeypatch.setenv('MARKET_CHART_THEME', 'tradingview')
        monkeypatch.setenv('MARKET_CHART_TIMEZONE', 'America/New_York')

        config = ChartEngineConfig()
        assert config.bars_endpoint == 'http://data:9000/api/v1/bars'
        assert config.theme == 'tradingview'
        assert config.display_timezone.zone == 'America/New_York'

    def test_override_beats_environment(self, monkeypatch):
        monkeypatch.setenv('MARKET_CHART_THEME', 'tradingview')
        config = ChartEngineConfig({'theme': 'dark', 'zoom_step': 1.5})
        assert config.theme == 'dark'
        assert config.zoom_step == 1.5

    def test_unknown_timezone(self):
        with pytest.raises(ConfigurationError):
            ChartEngineConfig({'display_timezone': 'Mars/Olympus'})

    def test_default_chart_configuration(self):
        config = ChartEngineConfig({'theme': 'tradingview', 'preset': 'enhanced'})
        chart = config.default_chart_configuration()
        assert isinstance(chart, ChartConfiguration)
        assert (chart.theme, chart.preset) == ('tradingview', 'enhanced')
        assert chart.show_volume and not chart.show_sma

    def test_to_dict(self):
        exported = ChartEngineConfig({'log_level': 'DEBUG'}).to_dict()
        assert set(exported) == {'api_settings', 'chart_settings', 'logging'}
        assert exported['logging']['level'] == 'DEBUG'


class TestLogging:
    """Test logger configuration"""

    def test_console_logger(self):
        config = ChartEngineConfig({'log_level': 'WARNING'})
        logger = config.get_logger('market_chart.test_console')
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_rotating_file_handler(self, tmp_path):
        config = ChartEngineConfig({'log_file': str(tmp_path / 'logs' / 'chart.log')})
        logger = config.get_logger('market_chart.test_file')
        try:
            handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
            assert len(handlers) == 1
            assert handlers[0].maxBytes == 10 * 1024 * 1024
            assert (tmp_path / 'logs').is_dir()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

    def test_repeated_setup_does_not_duplicate_handlers(self):
        config = ChartEngineConfig()
        config.get_logger('market_chart.test_dupes')
        logger = config.get_logger('market_chart.test_dupes')
        assert len(logger.handlers) == 1


class TestSingleton:
    """Test get_config"""

    def test_returns_same_instance(self):
        first = get_config(reset=True)
        assert get_config() is first

    def test_overrides_create_new_instance(self):
        first = get_config(reset=True)
        second = get_config(theme='tradingview')
        assert second is not first
        assert second.theme == 'tradingview'
        get_config(reset=True)
