"""Serialize signals and send them without blocking the caller."""

from __future__ import annotations

import json
import threading
import time
from typing import TYPE_CHECKING

import httpx

from telemetrydeck.errors import RequestConstructionError, SerializationError
from telemetrydeck.signals import SignalBody

if TYPE_CHECKING:
    from telemetrydeck.client import Client

CONTENT_TYPE = "application/json; charset=utf-8"


def encode_signals(signals: list[SignalBody]) -> bytes:
    """Encode signals as a compact JSON array."""
    try:
        return json.dumps(
            [signal.to_dict() for signal in signals],
            separators=(",", ":"),
            allow_nan=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode signal payload: {e}") from e


class Dispatcher:
    """Runs each HTTP exchange on its own detached daemon thread.

    Threads are not supervised or cancelable and there is no bound on how
    many run at once. The set of live threads is only kept so callers can
    optionally wait for them with :meth:`drain`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight: set[threading.Thread] = set()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def build_request(self, client: Client, http_client: httpx.Client, body: bytes) -> httpx.Request:
        try:
            request = http_client.build_request(
                "POST",
                client.endpoint,
                content=body,
                headers={"Content-Type": CONTENT_TYPE},
            )
        except httpx.InvalidURL as e:
            raise RequestConstructionError(f"invalid endpoint {client.endpoint!r}: {e}") from e

        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestConstructionError(f"endpoint is not an absolute http(s) URL: {client.endpoint!r}")
        return request

    def dispatch(self, client: Client, signals: list[SignalBody]) -> None:
        """Encode and send ``signals`` in the background.

        Encoding and request errors are raised here. Anything that happens
        once the request exists is reported to the client's sink only.
        """
        body = encode_signals(signals)
        # The send thread uses the client that built the request.
        http_client = client.http_client
        request = self.build_request(client, http_client, body)

        thread = threading.Thread(
            target=self._run,
            args=(client, http_client, request, body),
            name="telemetrydeck-send",
            daemon=True,
        )
        with self._lock:
            self._in_flight.add(thread)
        try:
            thread.start()
        except RuntimeError:
            with self._lock:
                self._in_flight.discard(thread)
            raise

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight sends. Returns True if none are left running."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            pending = list(self._in_flight)

        for thread in pending:
            if deadline is None:
                thread.join()
            else:
                thread.join(max(0.0, deadline - time.monotonic()))
        return not any(thread.is_alive() for thread in pending)

    def _run(self, client: Client, http_client: httpx.Client, request: httpx.Request, body: bytes) -> None:
        try:
            self._exchange(client, http_client, request, body)
        finally:
            with self._lock:
                self._in_flight.discard(threading.current_thread())

    def _exchange(self, client: Client, http_client: httpx.Client, request: httpx.Request, body: bytes) -> None:
        sink = client.sink
        try:
            # Non-streaming send reads the whole body and closes the response.
            response = http_client.send(request)
        except (httpx.HTTPError, RuntimeError) as e:
            # RuntimeError covers stream errors and sends on a closed client.
            sink.write(f"telemetrydeck: sending signal to {request.url} failed: {e}")
            return

        if response is None:
            sink.write(f"telemetrydeck: warning: no response and no error from {request.url}")
            return

        if response.status_code >= 400 and client.test_mode:
            sink.write(f"response status: {response.status_code}")
            sink.write(f"request body: {body.decode('utf-8')}")
            sink.write(f"details: {response.text}")
