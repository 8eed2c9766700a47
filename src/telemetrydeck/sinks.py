"""Diagnostic sinks for failures in background sends."""

from __future__ import annotations

import threading
from typing import Any, Protocol, TextIO

import structlog


class DiagnosticSink(Protocol):
    def write(self, line: str) -> None:
        """Record one line of diagnostic text."""


class NullSink:
    """Discards everything. Used when no sink is configured."""

    def write(self, line: str) -> None:
        return None


class StructlogSink:
    """Forward diagnostic lines to a structlog logger as warnings."""

    def __init__(self, logger: Any | None = None) -> None:
        self._logger = logger or structlog.get_logger("telemetrydeck")

    def write(self, line: str) -> None:
        self._logger.warning(line)


class StreamSink:
    """Write newline-terminated lines to a text stream.

    Writes are serialized so lines from concurrent sends do not interleave.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def write(self, line: str) -> None:
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()
