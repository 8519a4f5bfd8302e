"""Finnhub API client package initializer."""

from .client import APIClient, Endpoint
from .config import ClientConfig
from .errors import APIError, ClientClosedError, DecodeError, InvalidURLError, NoDataReturnedError, TransportError
from .models import (
    CandleStick,
    FinancialMetricsResponse,
    MarketDataResponse,
    Metrics,
    NewsStory,
    NewsType,
    SearchResponse,
    SearchResult,
)

__all__ = [
    "APIClient",
    "APIError",
    "CandleStick",
    "ClientClosedError",
    "ClientConfig",
    "DecodeError",
    "Endpoint",
    "FinancialMetricsResponse",
    "InvalidURLError",
    "MarketDataResponse",
    "Metrics",
    "NewsStory",
    "NewsType",
    "NoDataReturnedError",
    "SearchResponse",
    "SearchResult",
    "TransportError",
]
