#!/usr/bin/env python3
"""
Run Chart Panel
Execute from root directory: python run_chart_panel.py AAPL SPY
"""

import sys
import argparse

from PyQt6.QtWidgets import QApplication, QMainWindow

from market_chart.config import get_config
from market_chart.data.models import TIMEFRAMES
from market_chart.data.rest_client import RESTBarFetcher
from market_chart.dashboard.components.chart_panel import ChartPanel


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Market Chart - price chart with technical indicators'
    )

    parser.add_argument(
        'symbols',
        nargs='*',
        default=['SPY'],
        help='Symbols to chart; the first with data is the primary (default: SPY)'
    )

    parser.add_argument(
        '--server-url',
        default=None,
        help='Market data server URL (default: MARKET_CHART_API_URL or http://localhost:8200)'
    )

    parser.add_argument(
        '--theme',
        choices=['dark', 'tradingview'],
        default=None,
        help='Chart theme'
    )

    parser.add_argument(
        '--timeframe',
        choices=[tf.value for tf in TIMEFRAMES],
        default=None,
        help='Initial timeframe (default: MARKET_CHART_TIMEFRAME or 15Min)'
    )

    parser.add_argument(
        '--auto-refresh',
        action='store_true',
        help='Refetch bars on the timeframe\'s refresh interval'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args()


def main():
    """Main entry point"""
    args = parse_arguments()

    overrides = {}
    if args.server_url:
        overrides['api_base_url'] = args.server_url
    if args.theme:
        overrides['theme'] = args.theme
        if args.theme == 'tradingview':
            overrides['preset'] = 'enhanced'
    if args.timeframe:
        overrides['default_timeframe'] = args.timeframe
    if args.debug:
        overrides['log_level'] = 'DEBUG'

    config = get_config(**overrides)
    logger = config.get_logger('market_chart')

    logger.info(f"Starting chart panel for {', '.join(args.symbols)}")
    logger.info(f"Data server: {config.api_base_url}")

    app = QApplication(sys.argv)

    window = QMainWindow()
    window.setWindowTitle(f"Market Chart - {' / '.join(args.symbols)}")
    window.resize(1200, 700)

    panel = ChartPanel(args.symbols, fetcher=RESTBarFetcher.from_config(config), config=config)
    window.setCentralWidget(panel)
    window.show()

    panel.load_data()
    if args.auto_refresh:
        panel.auto_refresh_check.setChecked(True)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
