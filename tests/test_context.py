import pytest
from fastapi import HTTPException
from starlette.requests import Request

from demo_service.observability.context import RequestObservation, get_trace_context


def test_complete_fills_fields_once() -> None:
    observation = RequestObservation.start(method="GET", path="/items/7")
    start = observation.trace.start_time

    observation.complete(route="/items/{item_id}", status_code=201, now=start + 0.25)

    assert observation.completed
    assert observation.route == "/items/{item_id}"
    assert observation.status_code == 201
    assert observation.duration == pytest.approx(0.25)
    assert observation.level == "info"
    with pytest.raises(RuntimeError):
        observation.complete(route="/items/{item_id}", status_code=500)


def test_route_falls_back_to_raw_path() -> None:
    observation = RequestObservation.start(method="POST", path="/unknown", query="a=1")

    observation.complete(route=None, status_code=404)

    assert observation.route == "/unknown"
    assert observation.full_path == "/unknown?a=1"
    assert observation.level == "error"
    assert observation.duration >= 0


def test_each_observation_gets_a_fresh_trace_id() -> None:
    ids = {RequestObservation.start(method="GET", path="/").trace_id for _ in range(50)}

    assert len(ids) == 50


def test_trace_context_dependency_requires_middleware() -> None:
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "state": {}})

    with pytest.raises(HTTPException) as exc:
        get_trace_context(request)
    assert exc.value.status_code == 500
