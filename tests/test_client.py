"""Tests for client construction and options."""

import uuid

import httpx
import pytest

from telemetrydeck.client import (
    Client,
    with_diagnostic_sink,
    with_endpoint,
    with_hash_salt,
    with_http_client,
    with_session_id,
    with_test_mode,
    with_timeout,
    with_user_id,
)
from telemetrydeck.config import DEFAULT_ENDPOINT, Settings
from telemetrydeck.errors import MissingAppIDError
from telemetrydeck.identity import generate_user_id, hash_user_id
from telemetrydeck.sinks import NullSink

APP_ID = "my-app-id"


class TestNewClient:
    def test_empty_app_id_rejected(self):
        with pytest.raises(MissingAppIDError):
            Client("")

    @pytest.mark.parametrize("app_id", ["a", APP_ID, "11111111-2222-3333-4444-555555555555"])
    def test_non_empty_app_id_accepted(self, app_id):
        assert Client(app_id).app_id == app_id

    def test_defaults(self):
        client = Client(APP_ID)

        assert client.endpoint == DEFAULT_ENDPOINT == "https://nom.telemetrydeck.com/v2/"
        assert client.test_mode is False
        assert isinstance(client.sink, NullSink)
        assert client.user_id == generate_user_id()
        assert client.user_id_hash == hash_user_id(client.user_id, "")
        uuid.UUID(client.session_id)

    def test_each_client_gets_new_session(self):
        assert Client(APP_ID).session_id != Client(APP_ID).session_id

    def test_options_override_defaults(self):
        sink = NullSink()
        client = Client(
            APP_ID,
            with_endpoint("http://localhost:8080/v2/"),
            with_session_id("session-1"),
            with_test_mode(),
            with_diagnostic_sink(sink),
        )

        assert client.endpoint == "http://localhost:8080/v2/"
        assert client.session_id == "session-1"
        assert client.test_mode is True
        assert client.sink is sink

    def test_later_option_wins(self):
        client = Client(APP_ID, with_session_id("first"), with_session_id("second"))
        assert client.session_id == "second"


class TestUserIdHash:
    def test_user_id_then_salt(self):
        client = Client(APP_ID, with_user_id("somebody@example.com"), with_hash_salt("MySalt"))

        assert client.user_id == "somebody@example.com"
        assert client.user_id_hash == "c05dc5334d83cca7382bca040f2f6e9de56d57d22814cfc4c39b5a55dbc9ef16"

    def test_salt_then_user_id(self):
        client = Client(APP_ID, with_hash_salt("MySalt"), with_user_id("somebody@example.com"))

        assert client.user_id_hash == "c05dc5334d83cca7382bca040f2f6e9de56d57d22814cfc4c39b5a55dbc9ef16"

    def test_user_id_without_salt(self):
        client = Client(APP_ID, with_user_id("somebody@example.com"))

        assert client.user_id_hash == "787d5b7c06ca0a21c96436cc7c8117e6fe046d0fd7dedcae8c93bfc14b8e5df7"

    def test_salt_rehashes_fallback_user_id(self):
        client = Client(APP_ID, with_hash_salt("pepper"))

        assert client.user_id == generate_user_id()
        assert client.user_id_hash == hash_user_id(generate_user_id(), "pepper")

    def test_last_salt_and_user_id_win(self):
        client = Client(
            APP_ID,
            with_user_id("first"),
            with_hash_salt("a"),
            with_user_id("second"),
            with_hash_salt("b"),
        )

        assert client.user_id_hash == hash_user_id("second", "b")


class TestFromSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TELEMETRYDECK_APP_ID", APP_ID)
        monkeypatch.setenv("TELEMETRYDECK_ENDPOINT", "http://localhost:9000/v2/")
        monkeypatch.setenv("TELEMETRYDECK_HASH_SALT", "MySalt")
        monkeypatch.setenv("TELEMETRYDECK_USER_ID", "somebody@example.com")
        monkeypatch.setenv("TELEMETRYDECK_SESSION_ID", "env-session")
        monkeypatch.setenv("TELEMETRYDECK_TEST_MODE", "true")

        client = Client.from_settings()

        assert client.app_id == APP_ID
        assert client.endpoint == "http://localhost:9000/v2/"
        assert client.session_id == "env-session"
        assert client.test_mode is True
        assert client.user_id_hash == "c05dc5334d83cca7382bca040f2f6e9de56d57d22814cfc4c39b5a55dbc9ef16"

    def test_missing_app_id(self, monkeypatch):
        monkeypatch.delenv("TELEMETRYDECK_APP_ID", raising=False)

        with pytest.raises(MissingAppIDError):
            Client.from_settings(Settings(_env_file=None))

    def test_explicit_options_applied_after_settings(self):
        settings = Settings(_env_file=None, app_id=APP_ID, hash_salt="MySalt", user_id="env-user")

        client = Client.from_settings(settings, with_user_id("somebody@example.com"))

        assert client.user_id == "somebody@example.com"
        assert client.user_id_hash == hash_user_id("somebody@example.com", "MySalt")


class TestHttpClientLifecycle:
    def test_owned_client_created_lazily_with_timeout(self):
        client = Client(APP_ID, with_timeout(2.5))

        http = client.http_client

        assert http is client.http_client
        assert http.timeout.connect == 2.5

        client.close()
        assert http.is_closed

    def test_injected_client_not_closed(self):
        http = httpx.Client()
        try:
            with Client(APP_ID, with_http_client(http)) as client:
                assert client.http_client is http
            assert not http.is_closed
        finally:
            http.close()
