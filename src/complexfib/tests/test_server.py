"""End-to-end tests of the HTTP surface."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from starlette.testclient import TestClient

from complexfib.core import evaluate, format_display
from complexfib.ext.http import create_app
from complexfib.foundation.config import CacheSettings, FibSettings, LoggingSettings, ServerSettings
from complexfib.io.cache import MemoryCache

from .doubles import CountingEvaluator, FlakyCache


def _settings(**cache: object) -> FibSettings:
    return FibSettings(
        cache=CacheSettings(**cache),
        logging=LoggingSettings(format="none"),
        server=ServerSettings(worker_multiplier=1),
    )


@pytest.fixture
def evaluator() -> CountingEvaluator:
    return CountingEvaluator()


@pytest.fixture
def client(evaluator: CountingEvaluator) -> Iterator[TestClient]:
    app = create_app(_settings(), cache=MemoryCache(), evaluator=evaluator)
    with TestClient(app) as c:
        yield c


def test_get(client: TestClient) -> None:
    response = client.get("/fibonacci", params={"number": "5"})

    assert response.status_code == 200
    assert response.json() == {"input": "5", "result": format_display(evaluate(complex(5, 0)))}


def test_get_plus_in_query_string_is_a_separator(client: TestClient) -> None:
    response = client.get("/fibonacci?number=3+4")
    assert response.status_code == 200
    assert response.json()["input"] == "3 4"
    assert response.json()["result"] == format_display(evaluate(complex(3, 4)))


def test_get_encoded_plus(client: TestClient) -> None:
    response = client.get("/fibonacci", params={"number": "3+4"})
    assert response.json()["input"] == "3+4"


def test_post(client: TestClient) -> None:
    response = client.post("/fibonacci", json={"number": "3,5 4"})

    assert response.status_code == 200
    assert response.json() == {"input": "3,5 4", "result": format_display(evaluate(complex(3.5, 4)))}


def test_get_missing_parameter(client: TestClient) -> None:
    response = client.get("/fibonacci")
    assert response.status_code == 400
    assert response.json() == {"error": "Missing 'number' parameter"}


def test_post_invalid_json(client: TestClient) -> None:
    response = client.post("/fibonacci", content=b"number=5", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON format"}


def test_parse_error(client: TestClient) -> None:
    response = client.get("/fibonacci", params={"number": "1 2 3"})
    assert response.status_code == 400
    assert "unsupported number of components" in response.json()["error"]


def test_instability_never_leaks_nan(client: TestClient) -> None:
    response = client.post("/fibonacci", json={"number": "100000"})

    assert response.status_code == 400
    assert response.json() == {"error": "Numerical instability in Fibonacci computation"}
    assert "NaN" not in response.text
    assert "Infinity" not in response.text


@pytest.mark.parametrize(("method", "path"), [
    ("GET", "/"),
    ("GET", "/fib"),
    ("POST", "/fibonacci/5"),
    ("PUT", "/fibonacci"),
    ("DELETE", "/fibonacci"),
    ("PATCH", "/fibonacci"),
])
def test_not_found(client: TestClient, method: str, path: str) -> None:
    response = client.request(method, path)
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_head_never_runs_pipeline(client: TestClient, evaluator: CountingEvaluator) -> None:
    response = client.head("/fibonacci", params={"number": "5"})
    assert response.status_code == 404
    assert evaluator.calls == 0


def test_repeat_requests_hit_cache(client: TestClient, evaluator: CountingEvaluator) -> None:
    a = client.get("/fibonacci", params={"number": "12"})
    b = client.post("/fibonacci", json={"number": "12"})

    assert a.json()["result"] == b.json()["result"]
    assert evaluator.calls == 1


def test_uncached_app(evaluator: CountingEvaluator) -> None:
    with TestClient(create_app(_settings(), cache=None, evaluator=evaluator)) as c:
        assert c.get("/fibonacci", params={"number": "4"}).status_code == 200
        assert c.get("/fibonacci", params={"number": "4"}).status_code == 200
        assert not c.app.state.orchestrator.cached
    assert evaluator.calls == 2


def test_broken_cache_still_serves() -> None:
    app = create_app(_settings(), cache=FlakyCache(fail_get=True, fail_set=True))
    with TestClient(app) as c:
        response = c.get("/fibonacci", params={"number": "8"})
    assert response.status_code == 200
    assert response.json()["result"] == format_display(evaluate(complex(8, 0)))


def test_cache_resolved_from_settings() -> None:
    with TestClient(create_app(_settings(backend="memory"))) as c:
        assert c.app.state.orchestrator.cached
        assert c.get("/fibonacci", params={"number": "1"}).status_code == 200


def test_cache_disabled_in_settings() -> None:
    with TestClient(create_app(_settings(enabled=False))) as c:
        assert not c.app.state.orchestrator.cached
        assert c.get("/fibonacci", params={"number": "1"}).status_code == 200
