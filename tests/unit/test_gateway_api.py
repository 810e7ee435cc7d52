"""
Gateway API tests.

The chart handler dependency is overridden, mostly with a stub, so the
tests exercise routing and the error prefix to status mapping.
"""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from chart_lambda.adapters.ids import ShortIdGenerator
from chart_lambda.adapters.local_storage import LocalObjectStorage
from chart_lambda.api.deps import get_chart_handler
from chart_lambda.api.main import app, status_for_error
from chart_lambda.components.handler import ChartHandler, ChartResult
from chart_lambda.core.errors import (
    ChartError,
    ConfigurationError,
    DrawError,
    UploadError,
    ValidationError,
)
from chart_lambda.rules.models import ChartRules


class StubHandler:
    def __init__(self, result: ChartResult) -> None:
        self.result = result
        self.events: list[Any] = []

    async def run(self, event: Any) -> ChartResult:
        self.events.append(event)
        return self.result


@pytest.fixture
def client_for():
    def _make(result: ChartResult) -> tuple[TestClient, StubHandler]:
        handler = StubHandler(result)
        app.dependency_overrides[get_chart_handler] = lambda: handler
        return TestClient(app), handler

    yield _make
    app.dependency_overrides.clear()


def test_health():
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_chart_returns_url(client_for):
    client, handler = client_for(ChartResult.success("https://charts.s3/abc.png?sig"))

    response = client.post("/charts", json={"chartSpec": {"type": "bar"}})

    assert response.status_code == 200
    assert response.json() == {"url": "https://charts.s3/abc.png?sig"}
    assert handler.events == [{"chartSpec": {"type": "bar"}}]


@pytest.mark.parametrize(
    ("error", "expected_status"),
    [
        (ValidationError("Missing field 'chartSpec'"), 400),
        (UploadError("charts"), 403),
        (ConfigurationError("S3_BUCKET"), 500),
        (DrawError(), 500),
    ],
)
def test_error_prefix_maps_to_status(client_for, error: ChartError, expected_status: int):
    client, _ = client_for(ChartResult.failure(error))

    response = client.post("/charts", json={})

    assert response.status_code == expected_status
    assert response.json()["detail"] == str(error)


def test_status_for_error_default():
    assert status_for_error(ChartError("boom")) == 500


@pytest.mark.parametrize("body", [["chartSpec"], "chart", 42])
def test_non_object_body_is_bad_request(tmp_path, body):
    class UnusedFactory:
        def create(self, width, height):
            raise AssertionError("rendering must not start")

    handler = ChartHandler(
        bucket="charts",
        rules=ChartRules(),
        surface_factory=UnusedFactory(),
        storage=LocalObjectStorage(tmp_path),
        id_generator=ShortIdGenerator(),
    )
    app.dependency_overrides[get_chart_handler] = lambda: handler
    try:
        response = TestClient(app).post("/charts", json=body)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["detail"].startswith("[BadRequest]")
