from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from moodline.app.metrics import REQUEST_COUNT, REQUEST_ERRORS
from moodline.app.middleware import RequestLoggingMiddleware


def _metric_value(counter, **labels) -> float:
    for family in counter.collect():
        for sample in family.samples:
            if sample.name.endswith("_total") and all(
                sample.labels.get(key) == value for key, value in labels.items()
            ):
                return sample.value
    return 0.0


def _app_with_middleware() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/items/{item_id}")
    async def item(item_id: int) -> dict[str, int]:  # pragma: no cover - executed via client
        return {"id": item_id}

    @app.get("/boom")
    async def boom() -> dict[str, str]:  # pragma: no cover - executed via client
        raise RuntimeError("boom")

    return app


def test_success_adds_request_id_and_counts_route_template() -> None:
    app = _app_with_middleware()
    labels = {"method": "GET", "path": "/items/{item_id}", "status": "200"}

    before = _metric_value(REQUEST_COUNT, **labels)
    with TestClient(app) as client:
        response = client.get("/items/7")
    after = _metric_value(REQUEST_COUNT, **labels)

    assert response.status_code == 200
    assert response.headers.get("X-Request-ID")
    assert after == pytest.approx(before + 1.0)


def test_incoming_request_id_is_reused() -> None:
    app = _app_with_middleware()

    with TestClient(app) as client:
        kept = client.get("/items/1", headers={"X-Request-ID": "abc-123"})
        replaced = client.get("/items/1", headers={"X-Request-ID": "x" * 65})

    assert kept.headers["X-Request-ID"] == "abc-123"
    assert replaced.headers["X-Request-ID"] != "x" * 65


def test_access_log_carries_chart_query(caplog: pytest.LogCaptureFixture) -> None:
    app = _app_with_middleware()

    with caplog.at_level(logging.INFO, logger="moodline.request"):
        with TestClient(app) as client:
            client.get("/items/3", params={"mode": "totals", "start": "2024-07-01", "other": "x"})

    (record,) = [r for r in caplog.records if r.name == "moodline.request"]
    assert record.getMessage() == "request complete"
    assert record.status == 200
    assert record.extra_fields == {"query": {"mode": "totals", "start": "2024-07-01"}}


def test_failure_logs_error_and_counts_500() -> None:
    app = _app_with_middleware()
    labels = {"method": "GET", "path": "/boom", "status": "500"}

    before_count = _metric_value(REQUEST_COUNT, **labels)
    before_errors = _metric_value(REQUEST_ERRORS, **labels)

    with TestClient(app) as client:
        with pytest.raises(RuntimeError):
            client.get("/boom")

    assert _metric_value(REQUEST_COUNT, **labels) == pytest.approx(before_count + 1.0)
    assert _metric_value(REQUEST_ERRORS, **labels) == pytest.approx(before_errors + 1.0)
