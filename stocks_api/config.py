from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "https://finnhub.io/api/v1/"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable settings for a Finnhub API client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    max_workers: int = 4

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("ClientConfig requires an API key")
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        import os

        api_key = os.getenv("FINNHUB_API_KEY", "")
        if not api_key.strip():
            raise ValueError("FINNHUB_API_KEY must be set")
        return cls(
            api_key=api_key,
            base_url=os.getenv("FINNHUB_BASE_URL") or DEFAULT_BASE_URL,
            timeout=_parse_number(os.getenv("STOCKS_API_TIMEOUT"), "STOCKS_API_TIMEOUT", float, 10.0),
            max_workers=_parse_number(os.getenv("STOCKS_API_MAX_WORKERS"), "STOCKS_API_MAX_WORKERS", int, 4),
        )


def _parse_number(value: Optional[str], name: str, kind: type, default):
    if value is None or value.strip() == "":
        return default
    try:
        return kind(value)
    except ValueError:
        raise ValueError(f"{name} must be a number if set") from None
