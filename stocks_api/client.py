from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
from typing import Callable, List, Mapping, Optional, TypeVar
from urllib.parse import quote, urlsplit

import requests

from .config import ClientConfig
from .errors import ClientClosedError, DecodeError, InvalidURLError, NoDataReturnedError, TransportError
from .models import FinancialMetricsResponse, MarketDataResponse, NewsStory, NewsType, SearchResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


class Endpoint(Enum):
    SEARCH = "search"
    TOP_STORIES = "news"
    COMPANY_NEWS = "company-news"
    MARKET_DATA = "stock/candle"
    FINANCIALS = "stock/metric"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class APIClient:
    """Finnhub REST client.

    Every operation issues exactly one GET on the client's executor and
    returns a ``Future`` that resolves once, either with the decoded record
    or with an ``APIError``.
    """

    DAY = timedelta(days=1)
    COMPANY_NEWS_DAYS = 7
    NEWS_DATE_FORMAT = "%Y-%m-%d"

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
        clock: Clock = _utc_now,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=config.max_workers, thread_name_prefix="stocks-api"
        )
        self._clock = clock

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        if self._owns_session:
            self._session.close()

    # Operations

    def search(self, query: str) -> "Future[SearchResponse]":
        """Look up symbols and company names matching ``query``."""
        return self._get(Endpoint.SEARCH, {"q": query}, SearchResponse.from_json)

    def news(self, news_type: NewsType) -> "Future[List[NewsStory]]":
        if news_type.is_top_stories:
            return self._get(Endpoint.TOP_STORIES, {"category": "general"}, NewsStory.list_from_json)
        today = self._clock()
        week_back = today - self.DAY * self.COMPANY_NEWS_DAYS
        params = {
            "symbol": news_type.symbol,
            "from": week_back.strftime(self.NEWS_DATE_FORMAT),
            "to": today.strftime(self.NEWS_DATE_FORMAT),
        }
        return self._get(Endpoint.COMPANY_NEWS, params, NewsStory.list_from_json)

    def market_data(self, symbol: str, number_of_days: float = 7) -> "Future[MarketDataResponse]":
        """Fetch one-minute candles for the window ending yesterday.

        Finnhub has no data for the current day, so the window is shifted
        back by one day.
        """
        today = self._clock() - self.DAY
        prior = today - self.DAY * number_of_days
        params = {
            "symbol": symbol,
            "resolution": "1",
            "from": str(int(prior.timestamp())),
            "to": str(int(today.timestamp())),
        }
        return self._get(Endpoint.MARKET_DATA, params, MarketDataResponse.from_json)

    def financial_metrics(self, symbol: str) -> "Future[FinancialMetricsResponse]":
        return self._get(
            Endpoint.FINANCIALS, {"symbol": symbol, "metric": "all"}, FinancialMetricsResponse.from_json
        )

    # URL construction

    def build_url(self, endpoint: Endpoint, params: Optional[Mapping[str, str]] = None) -> str:
        """Return the request URL with ``token`` appended as the last parameter."""
        items = list((params or {}).items())
        items.append(("token", self.config.api_key))
        try:
            query = "&".join(f"{name}={quote(str(value), safe='')}" for name, value in items)
        except UnicodeEncodeError as exc:
            raise InvalidURLError(f"Cannot encode query for {endpoint.value}: {exc}", exc) from exc
        url = f"{self.config.base_url}{endpoint.value}?{query}"
        try:
            parts = urlsplit(url)
            hostname = parts.hostname
        except ValueError as exc:
            raise InvalidURLError(f"Invalid request URL for {endpoint.value}: {exc}", exc) from exc
        if parts.scheme not in {"http", "https"} or not hostname:
            raise InvalidURLError(f"Invalid request URL for {endpoint.value}")
        return url

    # Request execution

    def _get(self, endpoint: Endpoint, params: Mapping[str, str], decode: Callable[[object], T]) -> "Future[T]":
        try:
            url = self.build_url(endpoint, params)
        except InvalidURLError as exc:
            logger.warning("Could not build %s request: %s", endpoint.value, exc)
            return _failed(exc)
        try:
            return self._executor.submit(self._fetch, endpoint, url, decode)
        except RuntimeError as exc:
            logger.warning("Could not schedule %s request: %s", endpoint.value, exc)
            return _failed(ClientClosedError(f"Client cannot schedule {endpoint.value} requests", exc))

    def _fetch(self, endpoint: Endpoint, url: str, decode: Callable[[object], T]) -> T:
        logger.debug("GET %s", self._redact(url))
        try:
            response = self._session.get(url, timeout=self.config.timeout)
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as exc:
            message = self._redact(str(exc))
            logger.warning("Finnhub %s rejected URL: %s", endpoint.value, message)
            raise InvalidURLError(message, exc) from exc
        except requests.RequestException as exc:
            logger.warning("Finnhub %s request failed: %s", endpoint.value, self._redact(str(exc)))
            raise TransportError(f"Request to {endpoint.value} failed", exc) from exc

        # Error statuses still carry a JSON body; it fails decoding below.
        status = "" if response.ok else f" (HTTP {response.status_code})"
        if not response.content:
            logger.warning("Finnhub %s returned an empty body%s", endpoint.value, status)
            raise NoDataReturnedError(f"No data returned from {endpoint.value}{status}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Finnhub %s returned invalid JSON%s: %s", endpoint.value, status, exc)
            raise DecodeError(f"Invalid JSON from {endpoint.value}{status}", exc) from exc
        try:
            return decode(payload)
        except DecodeError as exc:
            logger.warning("Finnhub %s payload did not decode%s: %s", endpoint.value, status, exc)
            if status:
                raise DecodeError(f"{exc}{status}", exc) from exc
            raise

    def _redact(self, text: str) -> str:
        api_key = self.config.api_key
        for secret in {api_key, quote(api_key, safe="")}:
            text = text.replace(secret, "***")
        return text


def _failed(exc: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(exc)
    return future
