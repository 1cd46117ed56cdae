"""
live-client CLI.

Command-line access to the real-time notification channel: listen to
pushed events, ping the server, read stored history, check health.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any

import httpx
import typer
from rich.console import Console
from rich.table import Table

from live_client.components.api.history import NotificationHistoryClient
from live_client.components.effects.console import (
    BellSoundPlayer,
    RichDesktopNotifier,
    RichToaster,
)
from live_client.components.events.types import ClientEvent
from live_client.notification_center import NotificationCenter
from live_shared.auth import (
    EnvTokenProvider,
    FileTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)
from live_shared.config.logging import mask_token, setup_logging
from live_shared.config.settings import settings
from live_shared.utils.exceptions import ApiError

app = typer.Typer(
    name="live-client",
    help="Real-time internship notification client",
    add_completion=False,
)
console = Console()


def _token_provider(token: str | None, token_file: Path | None = None) -> TokenProvider:
    # An explicit file wins over --token, which may come from ACCESS_TOKEN
    if token_file is not None:
        return FileTokenProvider(token_file)
    if token:
        return StaticTokenProvider(token)
    return EnvTokenProvider(settings)


_TOKEN_FILE_HELP = "Read the bearer token from this file on every connect"


def _check_settings() -> None:
    errors = settings.validate_settings()
    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    setup_logging(logging.DEBUG if verbose else None)


# =============================================================================
# Real-time Commands
# =============================================================================

@app.command()
def listen(
    token: str = typer.Option(None, envvar="ACCESS_TOKEN", help="Bearer token"),
    token_file: Path = typer.Option(None, "--token-file", help=_TOKEN_FILE_HELP),
    desktop: bool = typer.Option(False, "--desktop", help="Show desktop-style panels"),
    history: int = typer.Option(0, help="Load this many stored notifications first"),
):
    """Connect and print pushed events until interrupted."""
    _check_settings()
    provider = _token_provider(token, token_file)

    async def _listen():
        center = NotificationCenter(
            settings=settings,
            token_provider=provider,
            toaster=RichToaster(console),
            sound_player=BellSoundPlayer(console),
            desktop_notifier=RichDesktopNotifier(console, grant=desktop),
        )
        center.init()
        await center.request_notification_permission()

        stopped = asyncio.Event()
        center.on(ClientEvent.RECONNECT_FAILED, lambda _data: stopped.set())
        center.on(
            ClientEvent.INTERNSHIP_UPDATED,
            lambda data: console.print(f"[cyan]Internship updated:[/cyan] {data}"),
        )

        if history:
            async with NotificationHistoryClient(
                settings.api_url, provider, timeout=settings.http_timeout
            ) as client:
                try:
                    loaded = await center.load_history(client, limit=history)
                    console.print(f"[blue]Loaded {loaded} stored notifications[/blue]")
                except ApiError as e:
                    console.print(f"[yellow]History unavailable: {e.detail}[/yellow]")

        if not await center.connect():
            raise typer.Exit(1)

        console.print("[green]Listening... (Ctrl+C to stop)[/green]")
        try:
            await stopped.wait()
        finally:
            center.teardown()
            await center.manager.wait_closed()

        console.print(f"[red]✗ {center.connection_status().describe()}[/red]")
        raise typer.Exit(1)

    try:
        asyncio.run(_listen())
    except KeyboardInterrupt:
        console.print("[blue]Stopped[/blue]")


@app.command()
def ping(
    token: str = typer.Option(None, envvar="ACCESS_TOKEN", help="Bearer token"),
    token_file: Path = typer.Option(None, "--token-file", help=_TOKEN_FILE_HELP),
    timeout: float = typer.Option(5.0, help="Seconds to wait for the pong"),
):
    """Connect, send one ping and measure the round trip."""
    _check_settings()
    provider = _token_provider(token, token_file)

    async def _ping():
        center = NotificationCenter(settings=settings, token_provider=provider)
        pong = asyncio.Event()
        center.on(ClientEvent.PONG, lambda _data: pong.set())

        if not await center.connect():
            console.print("[red]✗ Connection failed[/red]")
            return False

        try:
            start = time.perf_counter()
            center.ping()
            await asyncio.wait_for(pong.wait(), timeout=timeout)
            elapsed = (time.perf_counter() - start) * 1000
            console.print(f"[green]✓ Pong in {elapsed:.0f}ms[/green]")
            return True
        except asyncio.TimeoutError:
            console.print(f"[red]✗ No pong within {timeout:g}s[/red]")
            return False
        finally:
            center.teardown()
            await center.manager.wait_closed()

    if not asyncio.run(_ping()):
        raise typer.Exit(1)


# =============================================================================
# REST Commands
# =============================================================================

@app.command()
def history(
    token: str = typer.Option(None, envvar="ACCESS_TOKEN", help="Bearer token"),
    token_file: Path = typer.Option(None, "--token-file", help=_TOKEN_FILE_HELP),
    limit: int = typer.Option(20, help="Page size"),
    offset: int = typer.Option(0, help="Page offset"),
    unread_only: bool = typer.Option(False, "--unread", help="Only unread notifications"),
):
    """Show stored notifications."""

    async def _history():
        async with NotificationHistoryClient(
            settings.api_url, _token_provider(token, token_file), timeout=settings.http_timeout
        ) as client:
            return await client.fetch_notifications(
                unread_only=unread_only, limit=limit, offset=offset
            )

    try:
        page = asyncio.run(_history())
    except ApiError as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Notifications ({page.total_count} total)")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Title")
    table.add_column("Read", justify="center")
    table.add_column("Sent", style="yellow")

    for notification in page.notifications:
        table.add_row(
            str(notification.id),
            notification.type,
            notification.title,
            "✓" if notification.is_read else "",
            notification.sent_at.strftime("%Y-%m-%d %H:%M") if notification.sent_at else "-",
        )

    console.print(table)
    if page.has_more:
        console.print(f"[blue]More available: --offset {offset + limit}[/blue]")


@app.command()
def health():
    """Check API health."""

    async def _health() -> tuple[str, str]:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            try:
                start = time.perf_counter()
                response = await client.get(f"{settings.api_url.rstrip('/')}/health")
                elapsed = (time.perf_counter() - start) * 1000
            except httpx.HTTPError as e:
                return f"✗ {type(e).__name__}", "-"
        if response.status_code == 200:
            return "✓ Healthy", f"{elapsed:.0f}ms"
        return f"✗ Status {response.status_code}", f"{elapsed:.0f}ms"

    status, elapsed = asyncio.run(_health())

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")
    table.add_row("REST API", status, elapsed)
    console.print(table)

    if not status.startswith("✓"):
        raise typer.Exit(1)


@app.command()
def config():
    """Show the effective settings."""
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    values: dict[str, Any] = settings.model_dump()
    values["access_token"] = mask_token(values["access_token"]) if values["access_token"] else "(unset)"
    for name, value in values.items():
        table.add_row(name, str(value))

    console.print(table)

    errors = settings.validate_settings()
    for error in errors:
        console.print(f"[yellow]! {error}[/yellow]")


if __name__ == "__main__":
    app()
