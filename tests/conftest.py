"""Pytest fixtures for TelemetryDeck client tests."""

import json
import threading
from collections.abc import Callable, Generator
from dataclasses import dataclass, field

import httpx
import pytest

from telemetrydeck.client import Client, with_diagnostic_sink, with_endpoint, with_http_client

TEST_APP_ID = "11111111-2222-3333-4444-555555555555"
TEST_ENDPOINT = "https://ingest.test/v2/"


class RecordingSink:
    """Collects diagnostic lines from background threads."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self._lock = threading.Lock()

    def write(self, line: str) -> None:
        with self._lock:
            self.lines.append(line)


@dataclass
class FakeIngest:
    """Records requests sent through an ``httpx.MockTransport``."""

    status_code: int = 200
    response_text: str = ""
    requests: list[httpx.Request] = field(default_factory=list)
    handler: Callable[[httpx.Request], httpx.Response] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(self.status_code, text=self.response_text)

    def sent_signals(self) -> list[list[dict]]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def ingest() -> FakeIngest:
    return FakeIngest()


@pytest.fixture
def http_client(ingest: FakeIngest) -> Generator[httpx.Client, None, None]:
    client = httpx.Client(transport=httpx.MockTransport(ingest))
    yield client
    client.close()


@pytest.fixture
def make_client(http_client: httpx.Client, sink: RecordingSink):
    """Build a client wired to the fake ingestion endpoint."""
    created: list[Client] = []

    def factory(*options) -> Client:
        client = Client(
            TEST_APP_ID,
            with_endpoint(TEST_ENDPOINT),
            with_http_client(http_client),
            with_diagnostic_sink(sink),
            *options,
        )
        created.append(client)
        return client

    yield factory

    for client in created:
        client.drain(timeout=5)
