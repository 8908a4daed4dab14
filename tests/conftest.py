import json
import logging
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from demo_service.config.settings import Settings
from demo_service.main import create_app
from demo_service.observability.logging import build_json_formatter
from demo_service.observability.metrics import HttpMetrics
from demo_service.observability.middleware import ACCESS_MESSAGE


class JsonRecordCollector(logging.Handler):
    """Keep the rendered JSON of every access record in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.setFormatter(build_json_formatter())
        self.records: list[dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        payload = json.loads(self.format(record))
        if payload.get("message") == ACCESS_MESSAGE:
            self.records.append(payload)


@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="INFO", fibonacci_recursive_max_n=20)


@pytest.fixture
def metrics() -> HttpMetrics:
    return HttpMetrics()


@pytest.fixture
def app(settings: Settings, metrics: HttpMetrics):
    return create_app(settings, metrics=metrics)


@pytest.fixture
def access_records(app) -> Iterator[list[dict[str, Any]]]:
    # Attached after create_app so the logging configuration does not drop it.
    collector = JsonRecordCollector()
    root = logging.getLogger()
    root.addHandler(collector)
    try:
        yield collector.records
    finally:
        root.removeHandler(collector)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def metric_sample(metrics: HttpMetrics) -> Callable[..., float]:
    def sample(name: str, **labels: str) -> float:
        return metrics.registry.get_sample_value(name, labels) or 0.0

    return sample
