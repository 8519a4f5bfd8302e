from __future__ import annotations

from concurrent.futures import Executor, Future
from datetime import datetime, timezone
import json

import pytest
import requests

from stocks_api import APIClient, ClientConfig

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def make_response(body=b"", status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if not isinstance(body, (bytes, str)):
        body = json.dumps(body)
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.encoding = "utf-8"
    response.url = "https://finnhub.io/api/v1/test"
    return response


class DummySession:
    def __init__(self, response=None, error: Exception | None = None):
        self.calls = []
        self.response = response if response is not None else make_response([])
        self.error = error

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


class InlineExecutor(Executor):
    """Runs submitted work immediately so futures are resolved on return."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


@pytest.fixture
def config():
    return ClientConfig(api_key="test-key")


@pytest.fixture
def session():
    return DummySession()


@pytest.fixture
def client(config, session):
    return APIClient(config, session=session, executor=InlineExecutor(), clock=lambda: FIXED_NOW)
