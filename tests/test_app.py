import pytest

from app import create_app
from conftest import InlineExecutor, make_response
from stocks_api import APIClient, ClientConfig


@pytest.fixture
def web(client):
    app = create_app(client)
    app.testing = True
    return app.test_client()


def test_health(web):
    assert web.get("/health").get_json() == {"status": "ok"}


def test_search_requires_query(web):
    assert web.get("/search").status_code == 400


def test_company_news_returns_stories(web, session):
    session.response = make_response(
        [
            {
                "category": "company",
                "datetime": 1760000000,
                "headline": "Apple unveils new chip",
                "image": "",
                "related": "AAPL",
                "source": "Reuters",
                "summary": "",
                "url": "https://example.com/a",
            }
        ]
    )
    response = web.get("/news/AAPL")
    assert response.status_code == 200
    assert response.get_json()[0]["headline"] == "Apple unveils new chip"
    assert "symbol=AAPL" in session.calls[0]["url"]


def test_api_failure_maps_to_bad_gateway(web, session):
    session.response = make_response(b"")
    response = web.get("/metrics/AAPL")
    assert response.status_code == 502
    assert response.get_json()["kind"] == "no_data_returned"


def test_market_data_rejects_bad_days(web):
    assert web.get("/market-data/AAPL?days=abc").status_code == 400


def test_bad_gateway_body_never_contains_api_key(session):
    config = ClientConfig(api_key="SECRETKEY", base_url="https://:80/api/v1/")
    app = create_app(APIClient(config, session=session, executor=InlineExecutor()))
    app.testing = True
    response = app.test_client().get("/metrics/AAPL")
    assert response.status_code == 502
    assert response.get_json()["kind"] == "invalid_url"
    assert "SECRETKEY" not in response.get_data(as_text=True)
    assert session.calls == []
