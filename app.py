from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from flask import Flask, jsonify, request

from stocks_api import APIClient, APIError, ClientConfig, NewsType


def create_app(client: Optional[APIClient] = None) -> Flask:
    app = Flask(__name__)
    api = client or APIClient(ClientConfig.from_env())

    def _resolve(future):
        try:
            return jsonify(_to_json(future.result()))
        except APIError as exc:
            app.logger.warning("Finnhub call failed: %s", exc)
            return jsonify({"error": str(exc), "kind": exc.kind}), 502
        except Exception as exc:  # pragma: no cover - runtime guard
            app.logger.exception("Uncaught exception when handling %s", request.path)
            return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 500

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.get("/search")
    def search():
        query = request.args.get("q")
        if not query:
            return jsonify({"error": "`q` is required"}), 400
        return _resolve(api.search(query))

    @app.get("/news")
    def top_stories():
        return _resolve(api.news(NewsType.top_stories()))

    @app.get("/news/<symbol>")
    def company_news(symbol: str):
        return _resolve(api.news(NewsType.company(symbol)))

    @app.get("/market-data/<symbol>")
    def market_data(symbol: str):
        try:
            days = int(request.args.get("days", "7"))
        except ValueError:
            return jsonify({"error": "`days` must be an integer"}), 400
        if days <= 0:
            return jsonify({"error": "`days` must be positive"}), 400
        return _resolve(api.market_data(symbol, number_of_days=days))

    @app.get("/metrics/<symbol>")
    def financial_metrics(symbol: str):
        return _resolve(api.financial_metrics(symbol))

    return app


def _to_json(value):
    if isinstance(value, list):
        return [_to_json(item) for item in value]
    return asdict(value)


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=8008)
