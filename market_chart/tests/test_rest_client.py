# market_chart/tests/test_rest_client.py
"""
Module: REST Bar Fetcher Tests
Purpose: Request building, response parsing and failure mapping, using a
         mocked requests session
"""

from datetime import datetime
from unittest.mock import Mock

import pytest
import requests

from market_chart.data.models import Bar
from market_chart.data.rest_client import RESTBarFetcher, fetch_bars_safely
from market_chart.exceptions import BarFetchError


def response(status=200, payload=None, text=''):
    mock = Mock()
    mock.status_code = status
    mock.text = text
    if isinstance(payload, Exception):
        mock.json.side_effect = payload
    else:
        mock.json.return_value = payload
    return mock


ROWS = [
    {'t': 1704206700000, 'o': 11, 'h': 12, 'l': 10.5, 'c': 11.5, 'v': 200},
    {'t': 1704205800000, 'o': 10, 'h': 11, 'l': 9.5, 'c': 11, 'v': 100},
]


class TestRESTBarFetcher:
    """Test the bars endpoint client"""

    @pytest.fixture
    def session(self):
        session = Mock()
        session.headers = {}
        return session

    @pytest.fixture
    def fetcher(self, session):
        return RESTBarFetcher('http://localhost:8200/', timeout=5, session=session)

    def test_posts_request(self, fetcher, session):
        session.post.return_value = response(payload={'data': ROWS})
        fetcher('aapl', '15Min', 100)

        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs['json']
        assert url == 'http://localhost:8200/api/v1/bars'
        assert body['symbol'] == 'AAPL'
        assert body['timeframe'] == '15min'
        assert body['limit'] == 100
        assert session.post.call_args.kwargs['timeout'] == 5

    def test_parses_and_sorts_bars(self, fetcher, session):
        session.post.return_value = response(payload={'data': ROWS})
        bars = fetcher.get_bars('AAPL', '15Min', 2)

        assert all(isinstance(bar, Bar) for bar in bars)
        assert [bar.close for bar in bars] == [11, 11.5]

    def test_accepts_bare_list(self, fetcher, session):
        session.post.return_value = response(payload=ROWS)
        assert len(fetcher.get_bars('AAPL', '15Min', 2)) == 2

    def test_empty_data(self, fetcher, session):
        session.post.return_value = response(payload={'data': []})
        assert fetcher.get_bars('AAPL', '15Min', 2) == []

    def test_warns_on_missing_prices(self, fetcher, session, caplog):
        rows = ROWS + [{'t': 1704207600000, 'o': 11.5, 'h': 12, 'l': 11, 'v': 50}]
        session.post.return_value = response(payload={'data': rows})
        with caplog.at_level('WARNING', logger='market_chart.data.rest_client'):
            bars = fetcher.get_bars('AAPL', '15Min', 3)

        assert len(bars) == 3
        assert bars[-1].close is None
        assert 'AAPL: 1 of 3 bars have missing prices' in caplog.text

    def test_complete_bars_do_not_warn(self, fetcher, session, caplog):
        session.post.return_value = response(payload={'data': ROWS})
        with caplog.at_level('WARNING', logger='market_chart.data.rest_client'):
            fetcher.get_bars('AAPL', '15Min', 2)
        assert 'missing prices' not in caplog.text

    def test_http_error(self, fetcher, session):
        session.post.return_value = response(status=500, text='server error')
        with pytest.raises(BarFetchError) as info:
            fetcher.get_bars('AAPL', '15Min', 2)
        assert info.value.status_code == 500
        assert info.value.symbol == 'AAPL'

    def test_timeout(self, fetcher, session):
        session.post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(BarFetchError):
            fetcher.get_bars('AAPL', '15Min', 2)

    def test_connection_error(self, fetcher, session):
        session.post.side_effect = requests.exceptions.ConnectionError('refused')
        with pytest.raises(BarFetchError):
            fetcher.get_bars('AAPL', '15Min', 2)

    def test_invalid_json(self, fetcher, session):
        session.post.return_value = response(payload=ValueError('bad json'))
        with pytest.raises(BarFetchError):
            fetcher.get_bars('AAPL', '15Min', 2)

    def test_malformed_row(self, fetcher, session):
        session.post.return_value = response(payload={'data': [{'o': 1, 'c': 2}]})
        with pytest.raises(BarFetchError):
            fetcher.get_bars('AAPL', '15Min', 2)

    @pytest.mark.parametrize("timeframe", ['1Min', '5Min', '15Min', '1Hour', '1Day',
                                           '1Week', '1Month'])
    def test_date_range_precedes_end(self, fetcher, timeframe):
        body = fetcher.build_request('SPY', timeframe, 50)
        start = datetime.strptime(body['start_date'], '%Y-%m-%d')
        end = datetime.strptime(body['end_date'], '%Y-%m-%d')
        assert start < end
        assert body['timeframe'] == timeframe.lower()

    def test_from_config(self):
        config = Mock(api_base_url='http://example:1234', request_timeout=3.0)
        fetcher = RESTBarFetcher.from_config(config)
        assert fetcher.base_url == 'http://example:1234'
        assert fetcher.timeout == 3.0


class TestFetchBarsSafely:
    """Test failure mapping to an empty result"""

    def test_passes_bars_through(self):
        bars = [Mock()]
        assert fetch_bars_safely(lambda s, t, l: bars, 'AAPL', '15Min', 10) == bars

    def test_fetch_error_becomes_empty(self):
        def failing(symbol, timeframe, limit):
            raise BarFetchError("down", symbol=symbol)

        assert fetch_bars_safely(failing, 'AAPL', '15Min', 10) == []

    def test_unexpected_error_becomes_empty(self):
        def broken(symbol, timeframe, limit):
            raise RuntimeError("bug")

        assert fetch_bars_safely(broken, 'AAPL', '15Min', 10) == []

    def test_invalid_return_type(self):
        assert fetch_bars_safely(lambda s, t, l: {'data': []}, 'AAPL', '15Min', 10) == []
