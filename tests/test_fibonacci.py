import pytest
from fastapi.testclient import TestClient

from demo_service.services.fibonacci import fibonacci_iterative, fibonacci_recursive


@pytest.mark.parametrize("calculate", [fibonacci_recursive, fibonacci_iterative])
def test_small_values(calculate) -> None:
    assert [calculate(n) for n in range(7)] == [0, 1, 1, 2, 3, 5, 8]


@pytest.mark.parametrize("calculate", [fibonacci_recursive, fibonacci_iterative])
def test_negative_index_is_rejected(calculate) -> None:
    with pytest.raises(ValueError):
        calculate(-1)


def test_iterative_handles_larger_values() -> None:
    assert fibonacci_iterative(20) == 6765
    assert fibonacci_iterative(30) == 832040
    assert fibonacci_iterative(90) == 2880067194370816120


def test_recursive_endpoint(client: TestClient) -> None:
    response = client.get("/fibonacci/recursive/10")

    assert response.status_code == 200
    payload = response.json()
    assert payload["n"] == 10
    assert payload["result"] == 55
    assert payload["algorithm"] == "recursive"
    assert payload["trace_id"] == response.headers["X-Trace-ID"]


def test_iterative_endpoint(client: TestClient) -> None:
    response = client.get("/fibonacci/iterative/30")

    assert response.status_code == 200
    assert response.json()["result"] == 832040
    assert response.json()["algorithm"] == "iterative"


@pytest.mark.parametrize(
    "path",
    [
        "/fibonacci/iterative/abc",
        "/fibonacci/iterative/-3",
        "/fibonacci/iterative/1.5",
        "/fibonacci/recursive/21",
        "/fibonacci/iterative/1_0",
        "/fibonacci/iterative/+5",
        "/fibonacci/iterative/%205",
        "/fibonacci/iterative/\u0663",
    ],
)
def test_invalid_index_returns_400(client: TestClient, path: str) -> None:
    response = client.get(path)

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]
    assert payload["trace_id"] == response.headers["X-Trace-ID"]


def test_oversized_index_reports_the_limit(client: TestClient) -> None:
    response = client.get("/fibonacci/iterative/" + "9" * 5000)

    assert response.status_code == 400
    assert response.json()["error"] == "n must not exceed 10000"


def test_leading_zeros_are_accepted(client: TestClient) -> None:
    response = client.get("/fibonacci/iterative/" + "0" * 5000 + "10")

    assert response.status_code == 200
    assert response.json()["result"] == 55
