"""CLI entry point using Typer."""

import json

import structlog
import typer
from rich.console import Console
from rich.table import Table

from telemetrydeck.client import (
    Client,
    ClientOption,
    with_diagnostic_sink,
    with_endpoint,
    with_hash_salt,
    with_session_id,
    with_test_mode,
    with_user_id,
)
from telemetrydeck.config import Settings
from telemetrydeck.errors import TelemetryDeckError
from telemetrydeck.identity import generate_user_id, hash_user_id
from telemetrydeck.sinks import StructlogSink

app = typer.Typer(
    name="telemetrydeck",
    help="Send usage signals to TelemetryDeck.",
)
console = Console()

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
)

logger = structlog.get_logger()


def _parse_payload(items: list[str]) -> dict:
    payload: dict = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--payload")
        try:
            payload[key] = json.loads(raw)
        except json.JSONDecodeError:
            payload[key] = raw
    return payload


@app.command()
def send(
    signal_type: str = typer.Argument(..., help="Signal type, e.g. MyApp.Command.executed"),
    payload: list[str] = typer.Option(None, "--payload", "-p", help="Payload entry as key=value (repeatable)"),
    app_id: str | None = typer.Option(None, "--app-id", help="TelemetryDeck app ID"),
    user_id: str | None = typer.Option(None, "--user-id", help="User identifier to hash"),
    salt: str | None = typer.Option(None, "--salt", help="Hash salt"),
    session_id: str | None = typer.Option(None, "--session-id", help="Session identifier"),
    endpoint: str | None = typer.Option(None, "--endpoint", help="Ingestion endpoint URL"),
    test_mode: bool = typer.Option(False, "--test-mode", help="Flag the signal as test data"),
    wait: float = typer.Option(10.0, "--wait", help="Seconds to wait for delivery before exiting"),
) -> None:
    """Send a single signal."""
    settings = Settings(app_id=app_id) if app_id else Settings()

    options: list[ClientOption] = [with_diagnostic_sink(StructlogSink(logger))]
    if endpoint:
        options.append(with_endpoint(endpoint))
    if user_id:
        options.append(with_user_id(user_id))
    if salt is not None:
        options.append(with_hash_salt(salt))
    if session_id:
        options.append(with_session_id(session_id))
    if test_mode:
        options.append(with_test_mode())

    try:
        client = Client.from_settings(settings, *options)
        client.send_signal(signal_type, _parse_payload(payload or []))
    except TelemetryDeckError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold blue]Signal queued:[/bold blue] {signal_type}")
    if not client.drain(wait):
        console.print(f"[yellow]Still sending after {wait}s; exiting anyway.[/yellow]")
    client.close(timeout=0)


@app.command()
def identity(
    user_id: str | None = typer.Option(None, "--user-id", help="User identifier (default: machine fingerprint)"),
    salt: str = typer.Option("", "--salt", help="Hash salt"),
) -> None:
    """Show the user ID and the hash that would be sent."""
    resolved = user_id or generate_user_id()

    table = Table(title="Identity")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("User ID", resolved)
    table.add_row("Salt", salt)
    table.add_row("Hash", hash_user_id(resolved, salt))
    console.print(table)


if __name__ == "__main__":
    app()
