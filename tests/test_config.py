import pytest

from stocks_api import ClientConfig


def test_requires_api_key():
    with pytest.raises(ValueError):
        ClientConfig(api_key="")


def test_base_url_gets_trailing_slash():
    config = ClientConfig(api_key="k", base_url="https://sandbox.example.com/api/v1")
    assert config.base_url == "https://sandbox.example.com/api/v1/"


def test_from_env(monkeypatch):
    monkeypatch.setenv("FINNHUB_API_KEY", "env-key")
    monkeypatch.setenv("STOCKS_API_TIMEOUT", "2.5")
    monkeypatch.delenv("FINNHUB_BASE_URL", raising=False)
    monkeypatch.delenv("STOCKS_API_MAX_WORKERS", raising=False)
    config = ClientConfig.from_env()
    assert config.api_key == "env-key"
    assert config.base_url == "https://finnhub.io/api/v1/"
    assert config.timeout == 2.5
    assert config.max_workers == 4


def test_from_env_rejects_malformed_numbers(monkeypatch):
    monkeypatch.setenv("FINNHUB_API_KEY", "env-key")
    monkeypatch.setenv("STOCKS_API_MAX_WORKERS", "many")
    with pytest.raises(ValueError, match="STOCKS_API_MAX_WORKERS"):
        ClientConfig.from_env()


def test_from_env_names_missing_api_key(monkeypatch):
    monkeypatch.delenv("FINNHUB_API_KEY", raising=False)
    with pytest.raises(ValueError, match="FINNHUB_API_KEY"):
        ClientConfig.from_env()
