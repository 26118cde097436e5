"""HookRelay server CLI."""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hookrelay import __version__
from hookrelay.config import Settings, get_settings
from hookrelay.errors import RelayError
from hookrelay.registry import EndpointRegistry, create_registry

app = typer.Typer(
    name="hookrelay",
    help="HookRelay - Webhook fan-out relay server",
    no_args_is_help=True,
)

console = Console()

endpoint_app = typer.Typer(help="Endpoint management commands")
app.add_typer(endpoint_app, name="endpoint")


def run_async(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


@asynccontextmanager
async def open_registry() -> AsyncIterator[EndpointRegistry]:
    """Open the configured registry for the duration of one command."""
    registry = create_registry(get_settings())
    try:
        await registry.initialize()
        yield registry
    finally:
        await registry.close()


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from settings)"),
    port: int = typer.Option(None, "--port", help="Bind port (default from settings)"),
):
    """Start the HookRelay API server."""
    import uvicorn

    from hookrelay.logging_config import configure_logging
    from hookrelay.main import create_app

    settings = get_settings()
    configure_logging(settings.log_level)

    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    console.print(f"[green]Starting webhook relay server on {bind_host}:{bind_port}[/green]")

    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level,
        log_config=None,
    )


@app.command()
def version():
    """Show version information."""
    console.print(f"HookRelay version {__version__}")


@app.command()
def show_config():
    """Show current configuration."""
    settings = get_settings()

    table = Table(title="HookRelay Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for field_name in type(settings).model_fields:
        value = getattr(settings, field_name)
        if isinstance(value, Path):
            value = str(value)
        table.add_row(field_name, str(value))

    console.print(table)


# Endpoint commands


@endpoint_app.command("list")
def endpoint_list(
    active_only: bool = typer.Option(False, "--active", help="Only show active endpoints"),
):
    """List registered endpoints."""

    async def list_endpoints():
        async with open_registry() as registry:
            if active_only:
                return await registry.list_active()
            return await registry.list_all()

    endpoints = run_async(list_endpoints())

    table = Table(title="Endpoints")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("URL")
    table.add_column("Active")

    for endpoint in endpoints:
        table.add_row(
            endpoint.id,
            endpoint.name,
            endpoint.url,
            "✓" if endpoint.is_active else "✗",
        )

    console.print(table)


@endpoint_app.command("add")
def endpoint_add(
    name: str = typer.Argument(..., help="Display name"),
    url: str = typer.Argument(..., help="Destination URL"),
    active: bool = typer.Option(False, "--active/--inactive", help="Initial status"),
):
    """Register a new endpoint."""

    async def create():
        async with open_registry() as registry:
            return await registry.create(name=name, url=url, is_active=active)

    try:
        endpoint = run_async(create())
    except RelayError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Created endpoint '{endpoint.name}' (ID: {endpoint.id})[/green]")


def _set_status(endpoint_id: str, is_active: bool) -> None:
    async def update():
        async with open_registry() as registry:
            return await registry.set_status(endpoint_id, is_active)

    try:
        endpoint = run_async(update())
    except RelayError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    state = "activated" if endpoint.is_active else "deactivated"
    console.print(f"[green]Endpoint '{endpoint.name}' {state}[/green]")


@endpoint_app.command("enable")
def endpoint_enable(endpoint_id: str = typer.Argument(..., help="Endpoint ID")):
    """Activate an endpoint."""
    _set_status(endpoint_id, True)


@endpoint_app.command("disable")
def endpoint_disable(endpoint_id: str = typer.Argument(..., help="Endpoint ID")):
    """Deactivate an endpoint."""
    _set_status(endpoint_id, False)


@endpoint_app.command("delete")
def endpoint_delete(
    endpoint_id: str = typer.Argument(..., help="Endpoint ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete an endpoint."""
    if not force:
        confirm = typer.confirm(f"Delete endpoint '{endpoint_id}'?")
        if not confirm:
            raise typer.Abort()

    async def delete():
        async with open_registry() as registry:
            await registry.delete(endpoint_id)

    try:
        run_async(delete())
    except RelayError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Deleted endpoint '{endpoint_id}'[/green]")


@app.command()
def send(
    payload: str = typer.Argument(..., help="JSON payload, or @path to a JSON file"),
    timeout: float = typer.Option(None, "--timeout", help="Per-endpoint timeout in seconds"),
):
    """Dispatch one event to the active endpoints and show the outcomes."""
    from hookrelay.dispatch import DispatchEngine, Event, summary_line

    if payload.startswith("@"):
        path = Path(payload[1:])
        if not path.exists():
            console.print(f"[red]Payload file not found: {path}[/red]")
            raise typer.Exit(1)
        body = path.read_bytes()
    else:
        body = payload.encode()

    try:
        json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        console.print(f"[red]Payload is not valid JSON: {e}[/red]")
        raise typer.Exit(1) from e

    settings = get_settings()
    if timeout is not None:
        try:
            settings = Settings.model_validate(
                {**settings.model_dump(), "dispatch_timeout": timeout}
            )
        except PydanticValidationError as e:
            console.print(f"[red]Invalid --timeout {timeout}: must be greater than 0[/red]")
            raise typer.Exit(1) from e

    async def dispatch():
        async with open_registry() as registry:
            engine = DispatchEngine(registry, settings)
            try:
                return await engine.dispatch(Event(payload=body))
            finally:
                await engine.aclose()

    result = run_async(dispatch())

    table = Table(title=escape(summary_line(result)))
    table.add_column("Endpoint", style="cyan")
    table.add_column("URL")
    table.add_column("Result")
    table.add_column("Status")
    table.add_column("Latency", justify="right")

    for outcome in result.outcomes:
        if outcome.success:
            status_cell = "[green]ok[/green]"
        else:
            status_cell = f"[red]{escape(outcome.error or '')}[/red]"
        table.add_row(
            escape(outcome.endpoint_name or outcome.endpoint_id),
            outcome.url,
            status_cell,
            str(outcome.http_status or ""),
            f"{outcome.latency * 1000:.0f}ms",
        )

    console.print(table)
    if result.failed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
