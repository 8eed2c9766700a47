"""Exceptions raised synchronously by the client."""


class TelemetryDeckError(RuntimeError):
    """Base class for errors surfaced to the caller."""


class MissingAppIDError(TelemetryDeckError):
    """Raised when a client is created without an app ID."""

    def __init__(self) -> None:
        super().__init__("no app ID specified")


class MissingSignalTypeError(TelemetryDeckError):
    """Raised when a signal is sent without a signal type."""

    def __init__(self) -> None:
        super().__init__("no signal type specified")


class SerializationError(TelemetryDeckError):
    """Raised when a signal payload cannot be encoded as JSON."""


class RequestConstructionError(TelemetryDeckError):
    """Raised when the HTTP request cannot be built, e.g. a malformed endpoint."""
