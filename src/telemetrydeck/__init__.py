"""Send usage signals to TelemetryDeck."""

from telemetrydeck.client import (
    Client,
    ClientOption,
    with_diagnostic_sink,
    with_endpoint,
    with_hash_salt,
    with_http_client,
    with_session_id,
    with_test_mode,
    with_timeout,
    with_user_id,
)
from telemetrydeck.errors import (
    MissingAppIDError,
    MissingSignalTypeError,
    RequestConstructionError,
    SerializationError,
    TelemetryDeckError,
)
from telemetrydeck.identity import generate_user_id, hash_user_id
from telemetrydeck.sinks import DiagnosticSink, NullSink, StreamSink, StructlogSink
from telemetrydeck.version import __version__

__all__ = [
    "__version__",
    "Client",
    "ClientOption",
    "DiagnosticSink",
    "MissingAppIDError",
    "MissingSignalTypeError",
    "NullSink",
    "RequestConstructionError",
    "SerializationError",
    "StreamSink",
    "StructlogSink",
    "TelemetryDeckError",
    "generate_user_id",
    "hash_user_id",
    "with_diagnostic_sink",
    "with_endpoint",
    "with_hash_salt",
    "with_http_client",
    "with_session_id",
    "with_test_mode",
    "with_timeout",
    "with_user_id",
]
