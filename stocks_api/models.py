from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Tuple

from .errors import DecodeError


def _expect_mapping(payload: object, record: str) -> Mapping[str, object]:
    if not isinstance(payload, Mapping):
        raise DecodeError(f"{record}: expected a JSON object, got {type(payload).__name__}")
    return payload


def _string(payload: Mapping[str, object], key: str, record: str) -> str:
    if key not in payload:
        raise DecodeError(f"{record}: missing required field '{key}'")
    value = payload[key]
    if not isinstance(value, str):
        raise DecodeError(f"{record}: field '{key}' must be a string")
    return value


def _number(payload: Mapping[str, object], key: str, record: str) -> float:
    if key not in payload:
        raise DecodeError(f"{record}: missing required field '{key}'")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{record}: field '{key}' must be a number")
    return float(value)


def _integer(payload: Mapping[str, object], key: str, record: str) -> int:
    value = _number(payload, key, record)
    if not value.is_integer():
        raise DecodeError(f"{record}: field '{key}' must be an integer")
    return int(value)


def _number_list(payload: Mapping[str, object], key: str, record: str) -> List[float]:
    # Finnhub omits the series entirely when status is "no_data".
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise DecodeError(f"{record}: field '{key}' must be a list")
    numbers: List[float] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise DecodeError(f"{record}: field '{key}' must contain only numbers")
        numbers.append(float(item))
    return numbers


@dataclass(frozen=True, slots=True)
class NewsStory:
    """One news item as returned by the news endpoints."""

    category: str
    datetime: float
    headline: str
    image: str
    related: str
    source: str
    summary: str
    url: str

    @classmethod
    def from_json(cls, payload: object) -> "NewsStory":
        data = _expect_mapping(payload, "NewsStory")
        return cls(
            category=_string(data, "category", "NewsStory"),
            datetime=_number(data, "datetime", "NewsStory"),
            headline=_string(data, "headline", "NewsStory"),
            image=_string(data, "image", "NewsStory"),
            related=_string(data, "related", "NewsStory"),
            source=_string(data, "source", "NewsStory"),
            summary=_string(data, "summary", "NewsStory"),
            url=_string(data, "url", "NewsStory"),
        )

    @classmethod
    def list_from_json(cls, payload: object) -> List["NewsStory"]:
        if not isinstance(payload, list):
            raise DecodeError(f"news: expected a JSON array, got {type(payload).__name__}")
        return [cls.from_json(item) for item in payload]

    def published_at(self) -> datetime:
        return datetime.fromtimestamp(self.datetime, tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class SearchResult:
    description: str
    display_symbol: str
    symbol: str
    type: str

    @classmethod
    def from_json(cls, payload: object) -> "SearchResult":
        data = _expect_mapping(payload, "SearchResult")
        return cls(
            description=_string(data, "description", "SearchResult"),
            display_symbol=_string(data, "displaySymbol", "SearchResult"),
            symbol=_string(data, "symbol", "SearchResult"),
            type=_string(data, "type", "SearchResult"),
        )


@dataclass(frozen=True, slots=True)
class SearchResponse:
    """Symbol lookup results."""

    count: int
    result: Tuple[SearchResult, ...]

    @classmethod
    def from_json(cls, payload: object) -> "SearchResponse":
        data = _expect_mapping(payload, "SearchResponse")
        results = data.get("result")
        if not isinstance(results, list):
            raise DecodeError("SearchResponse: field 'result' must be a list")
        return cls(
            count=_integer(data, "count", "SearchResponse"),
            result=tuple(SearchResult.from_json(item) for item in results),
        )


@dataclass(frozen=True, slots=True)
class CandleStick:
    date: datetime
    high: float
    low: float
    open: float
    close: float


@dataclass(frozen=True, slots=True)
class MarketDataResponse:
    """Candle series for one symbol, as parallel arrays."""

    open: Tuple[float, ...]
    close: Tuple[float, ...]
    high: Tuple[float, ...]
    low: Tuple[float, ...]
    status: str
    timestamps: Tuple[int, ...]

    @classmethod
    def from_json(cls, payload: object) -> "MarketDataResponse":
        data = _expect_mapping(payload, "MarketDataResponse")
        timestamps = []
        for value in _number_list(data, "t", "MarketDataResponse"):
            if not value.is_integer():
                raise DecodeError("MarketDataResponse: field 't' must contain only integers")
            timestamps.append(int(value))
        return cls(
            open=tuple(_number_list(data, "o", "MarketDataResponse")),
            close=tuple(_number_list(data, "c", "MarketDataResponse")),
            high=tuple(_number_list(data, "h", "MarketDataResponse")),
            low=tuple(_number_list(data, "l", "MarketDataResponse")),
            status=_string(data, "s", "MarketDataResponse"),
            timestamps=tuple(timestamps),
        )

    def candle_sticks(self) -> List[CandleStick]:
        """Zip the series into candles, newest first.

        Series of unequal length are truncated to the shortest one.
        """
        candles = [
            CandleStick(
                date=datetime.fromtimestamp(stamp, tz=timezone.utc),
                high=high,
                low=low,
                open=open_,
                close=close,
            )
            for stamp, high, low, open_, close in zip(
                self.timestamps, self.high, self.low, self.open, self.close
            )
        ]
        return sorted(candles, key=lambda candle: candle.date, reverse=True)


@dataclass(frozen=True, slots=True)
class Metrics:
    ten_day_average_trading_volume: float
    annual_week_high: float
    annual_week_low: float
    annual_week_low_date: str
    annual_week_price_return_daily: float
    beta: float

    @classmethod
    def from_json(cls, payload: object) -> "Metrics":
        data = _expect_mapping(payload, "Metrics")
        return cls(
            ten_day_average_trading_volume=_number(data, "10DayAverageTradingVolume", "Metrics"),
            annual_week_high=_number(data, "52WeekHigh", "Metrics"),
            annual_week_low=_number(data, "52WeekLow", "Metrics"),
            annual_week_low_date=_string(data, "52WeekLowDate", "Metrics"),
            annual_week_price_return_daily=_number(data, "52WeekPriceReturnDaily", "Metrics"),
            beta=_number(data, "beta", "Metrics"),
        )


@dataclass(frozen=True, slots=True)
class FinancialMetricsResponse:
    metric: Metrics

    @classmethod
    def from_json(cls, payload: object) -> "FinancialMetricsResponse":
        data = _expect_mapping(payload, "FinancialMetricsResponse")
        if "metric" not in data:
            raise DecodeError("FinancialMetricsResponse: missing required field 'metric'")
        return cls(metric=Metrics.from_json(data["metric"]))


@dataclass(frozen=True, slots=True)
class NewsType:
    """Either the general top-stories feed or news for one company."""

    symbol: Optional[str] = None

    def __post_init__(self) -> None:
        if self.symbol is not None and not self.symbol.strip():
            raise ValueError("Company news requires a symbol")

    @classmethod
    def top_stories(cls) -> "NewsType":
        return cls()

    @classmethod
    def company(cls, symbol: str) -> "NewsType":
        if symbol is None:
            raise ValueError("Company news requires a symbol")
        return cls(symbol=symbol)

    @property
    def is_top_stories(self) -> bool:
        return self.symbol is None
