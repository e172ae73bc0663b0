# market_chart/data/rest_client.py
"""
REST bar-fetch collaborator.
Fetches historical bars from the market-data server; all timestamps in UTC.

Any callable get_bars(symbol, timeframe, limit) -> List[Bar] can stand in
for RESTBarFetcher; fetch_bars_safely wraps one so a failed fetch reads as
an empty bar list.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import requests

from .models import Bar
from ..exceptions import BarFetchError

logger = logging.getLogger(__name__)

BarFetcher = Callable[[str, str, int], List[Bar]]

INTRADAY_TIMESPANS = ('1min', '5min', '15min', '30min')


class RESTBarFetcher:
    """
    REST client for the /api/v1/bars endpoint

    Callable as fetcher(symbol, timeframe, limit); raises BarFetchError on
    any transport or HTTP failure.
    """

    def __init__(self, base_url: str = "http://localhost:8200", timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

    @classmethod
    def from_config(cls, config) -> 'RESTBarFetcher':
        return cls(base_url=config.api_base_url, timeout=config.request_timeout)

    def __call__(self, symbol: str, timeframe: str, limit: int) -> List[Bar]:
        return self.get_bars(symbol, timeframe, limit)

    def build_request(self, symbol: str, timeframe: str, limit: int) -> Dict:
        """
        Build the POST body for a bars request

        Args:
            symbol: Stock symbol
            timeframe: 1Min, 5Min, 15Min, 1Hour, 1Day, 1Week, 1Month
            limit: Number of bars to fetch
        """
        timespan = timeframe.lower()
        end_date = datetime.now(timezone.utc)

        if timespan in INTRADAY_TIMESPANS:
            # ~390 minutes per trading day
            minutes = int(timespan.replace('min', ''))
            days_needed = max(3, (limit * minutes) // 390 + 2)
            start_date = end_date - timedelta(days=days_needed)
        elif timespan == '1hour':
            start_date = end_date - timedelta(days=max(3, limit // 6 + 2))
        elif timespan == '1week':
            start_date = end_date - timedelta(weeks=limit + 1)
        elif timespan == '1month':
            start_date = end_date - timedelta(days=31 * (limit + 1))
        else:
            # Calendar days include weekends
            start_date = end_date - timedelta(days=int(limit * 1.5) + 5)

        return {
            "symbol": symbol.upper(),
            "timeframe": timespan,
            "start_date": start_date.strftime('%Y-%m-%d'),
            "end_date": end_date.strftime('%Y-%m-%d'),
            "limit": limit,
            "use_cache": True,
            "validate": False
        }

    def get_bars(self, symbol: str, timeframe: str, limit: int) -> List[Bar]:
        """
        Fetch historical bars

        Returns:
            List of Bar sorted ascending by timestamp (possibly empty)

        Raises:
            BarFetchError: On timeout, connection failure or non-200 status
        """
        url = f"{self.base_url}/api/v1/bars"
        request_data = self.build_request(symbol, timeframe, limit)

        logger.info(f"Fetching bars: {url} with data: {request_data}")

        try:
            response = self.session.post(url, json=request_data, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise BarFetchError("Request timeout - server may be busy", symbol=symbol) from e
        except requests.exceptions.RequestException as e:
            raise BarFetchError(f"Error fetching bars: {e}", symbol=symbol) from e

        if response.status_code != 200:
            raise BarFetchError(
                f"Failed to fetch bars: HTTP {response.status_code}",
                status_code=response.status_code,
                symbol=symbol,
                body=response.text[:200]
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise BarFetchError("Invalid JSON in bars response", symbol=symbol) from e

        rows = payload.get('data') if isinstance(payload, dict) else payload
        if not rows:
            logger.warning(f"No data in response for {symbol}")
            return []

        try:
            bars = sorted((Bar.from_dict(row) for row in rows), key=lambda b: b.timestamp)
        except (KeyError, TypeError, ValueError) as e:
            raise BarFetchError(f"Malformed bar in response: {e}", symbol=symbol) from e

        incomplete = sum(1 for bar in bars if not bar.is_complete)
        if incomplete:
            logger.warning(f"{symbol}: {incomplete} of {len(bars)} bars have missing prices")

        logger.info(f"Fetched {len(bars)} bars for {symbol}")
        return bars


def fetch_bars_safely(fetcher: BarFetcher, symbol: str, timeframe: str, limit: int) -> List[Bar]:
    """
    Call a bar fetcher and map any failure to an empty list.

    An upstream failure is treated exactly like a symbol with no bars, so the
    panel falls back to its empty state.
    """
    try:
        bars = fetcher(symbol, timeframe, limit)
    except BarFetchError as e:
        logger.error(f"Bar fetch failed for {symbol}: {e}")
        return []
    except Exception as e:
        logger.error(f"Unexpected error fetching bars for {symbol}: {e}", exc_info=True)
        return []

    if not isinstance(bars, (list, tuple)):
        logger.error(f"Invalid response format for {symbol}: {type(bars).__name__}")
        return []
    return list(bars)
