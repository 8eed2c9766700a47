"""Signal envelope and standard payload fields."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from telemetrydeck.errors import MissingSignalTypeError
from telemetrydeck.identity import architecture, operating_system
from telemetrydeck.version import __version__

if TYPE_CHECKING:
    from telemetrydeck.client import Client

SDK_NAME_AND_VERSION = f"telemetrydeck-python/{__version__}"

OPERATING_SYSTEM_KEY = "TelemetryDeck.Device.operatingSystem"
ARCHITECTURE_KEY = "TelemetryDeck.Device.architecture"
SDK_VERSION_KEY = "TelemetryDeck.SDK.nameAndVersion"


@dataclass(frozen=True)
class SignalBody:
    """One signal as sent to the ingestion API."""

    app_id: str
    client_user: str
    session_id: str
    is_test_mode: bool
    type: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "appID": self.app_id,
            "clientUser": self.client_user,
            "sessionID": self.session_id,
            "isTestMode": self.is_test_mode,
            "type": self.type,
            "payload": self.payload,
        }


def standard_fields() -> dict[str, str]:
    return {
        OPERATING_SYSTEM_KEY: operating_system(),
        ARCHITECTURE_KEY: architecture(),
        SDK_VERSION_KEY: SDK_NAME_AND_VERSION,
    }


def build_signal(
    client: Client,
    signal_type: str,
    payload: Mapping[str, Any] | None = None,
) -> list[SignalBody]:
    """Wrap a payload into the wire envelope for ``client``.

    The payload is copied and the standard device and SDK fields are added,
    replacing any caller values under the same keys. The API expects an
    array of signals; exactly one is sent per call.
    """
    if not signal_type:
        raise MissingSignalTypeError()

    body = dict(payload) if payload else {}
    body.update(standard_fields())

    signal = SignalBody(
        app_id=client.app_id,
        client_user=client.user_id_hash,
        session_id=client.session_id,
        is_test_mode=client.test_mode,
        type=signal_type,
        payload=body,
    )
    return [signal]
