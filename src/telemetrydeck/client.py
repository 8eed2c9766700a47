"""TelemetryDeck client and its configuration options."""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from telemetrydeck.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_SECONDS, Settings
from telemetrydeck.dispatch import Dispatcher
from telemetrydeck.errors import MissingAppIDError
from telemetrydeck.identity import generate_user_id, hash_user_id
from telemetrydeck.signals import build_signal
from telemetrydeck.sinks import DiagnosticSink, NullSink

ClientOption = Callable[["Client"], None]


class Client:
    """
    Sends signals for one user of one application.

    Options are applied left to right, so a later option wins when two touch
    the same field:

        client = Client(
            "my-app-id",
            with_user_id("somebody@example.com"),
            with_hash_salt("MySalt"),
        )
        client.send_signal("Command.executed", {"command": "create"})

    Sends never block on the network. Only misuse (empty signal type) and
    local defects (unencodable payload, bad endpoint) raise.
    """

    def __init__(self, app_id: str, *options: ClientOption):
        if not app_id:
            raise MissingAppIDError()

        self._app_id = app_id
        self._endpoint = DEFAULT_ENDPOINT
        self._hash_salt = ""
        self._user_id = generate_user_id()
        self._user_id_hash = hash_user_id(self._user_id, self._hash_salt)
        self._session_id = str(uuid.uuid4())
        self._test_mode = False
        self._sink: DiagnosticSink = NullSink()
        self._timeout = DEFAULT_TIMEOUT_SECONDS

        self._http_client: httpx.Client | None = None
        self._owns_http_client = True
        self._http_lock = threading.Lock()
        self._dispatcher = Dispatcher()

        for option in options:
            option(self)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, *options: ClientOption) -> Client:
        """Build a client from environment settings, then apply ``options``."""
        settings = settings or Settings()

        derived: list[ClientOption] = [
            with_endpoint(settings.endpoint),
            with_timeout(settings.timeout_seconds),
            with_hash_salt(settings.hash_salt),
        ]
        if settings.user_id:
            derived.append(with_user_id(settings.user_id))
        if settings.session_id:
            derived.append(with_session_id(settings.session_id))
        if settings.test_mode:
            derived.append(with_test_mode())

        return cls(settings.app_id, *derived, *options)

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def user_id(self) -> str:
        """The unhashed user identifier. Never transmitted."""
        return self._user_id

    @property
    def user_id_hash(self) -> str:
        """Salted SHA-256 of :attr:`user_id`, sent as ``clientUser``."""
        return self._user_id_hash

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def test_mode(self) -> bool:
        return self._test_mode

    @property
    def sink(self) -> DiagnosticSink:
        return self._sink

    @property
    def http_client(self) -> httpx.Client:
        with self._http_lock:
            if self._http_client is None:
                self._http_client = httpx.Client(timeout=self._timeout)
                self._owns_http_client = True
            return self._http_client

    def send_signal(self, signal_type: str, payload: Mapping[str, Any] | None = None) -> None:
        """Send one signal in the background.

        The signal type is free-form; TelemetryDeck recommends dot-separated
        namespaces such as ``"MyApp.Command.executed"``.

        Raises:
            MissingSignalTypeError: ``signal_type`` is empty.
            SerializationError: the payload is not JSON-encodable.
            RequestConstructionError: the endpoint is not a usable URL.
        """
        signals = build_signal(self, signal_type, payload)
        self._dispatcher.dispatch(self, signals)

    def drain(self, timeout: float | None = None) -> bool:
        """Wait up to ``timeout`` seconds for in-flight sends to finish."""
        return self._dispatcher.drain(timeout)

    def close(self, timeout: float | None = None) -> None:
        """Wait for in-flight sends, then close the HTTP client if we created it."""
        self._dispatcher.drain(timeout)
        with self._http_lock:
            if self._http_client is not None and self._owns_http_client:
                self._http_client.close()
                self._http_client = None

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args) -> None:
        self.close(self._timeout)


def with_endpoint(endpoint: str) -> ClientOption:
    """Send signals to another endpoint, e.g. a test server."""

    def apply(client: Client) -> None:
        client._endpoint = endpoint

    return apply


def with_diagnostic_sink(sink: DiagnosticSink) -> ClientOption:
    """Report background send failures to ``sink``."""

    def apply(client: Client) -> None:
        client._sink = sink

    return apply


def with_hash_salt(salt: str) -> ClientOption:
    """Append ``salt`` to the user ID before hashing (recommended)."""

    def apply(client: Client) -> None:
        client._hash_salt = salt
        client._user_id_hash = hash_user_id(client._user_id, salt)

    return apply


def with_user_id(user_id: str) -> ClientOption:
    """Identify the user explicitly instead of using the machine fingerprint."""

    def apply(client: Client) -> None:
        client._user_id = user_id
        client._user_id_hash = hash_user_id(user_id, client._hash_salt)

    return apply


def with_session_id(session_id: str) -> ClientOption:
    def apply(client: Client) -> None:
        client._session_id = session_id

    return apply


def with_test_mode() -> ClientOption:
    """Mark signals as test data and report HTTP error responses to the sink."""

    def apply(client: Client) -> None:
        client._test_mode = True

    return apply


def with_http_client(http_client: httpx.Client) -> ClientOption:
    """Use a caller-owned ``httpx.Client``. It is not closed by :meth:`Client.close`."""

    def apply(client: Client) -> None:
        client._http_client = http_client
        client._owns_http_client = False

    return apply


def with_timeout(seconds: float) -> ClientOption:
    """Timeout for the HTTP client the Client creates itself."""

    def apply(client: Client) -> None:
        client._timeout = seconds

    return apply
