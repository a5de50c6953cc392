# src/cli/runner.py

"""Headless CLI runner: reuses the async services used by the web API."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.models.price_snapshot import MarketSnapshot
from src.models.weather_snapshot import WeatherSnapshot
from src.services.alerts import market_price_alert, weather_alert
from src.services.market_pipeline import MarketPipeline
from src.services.weather_service import WeatherService
from src.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("agri_feed.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _change_style(change: str) -> str:
    if change.startswith("+"):
        return "green"
    if change.startswith("-"):
        return "red"
    return "dim"


def _print_market_table(snapshot: MarketSnapshot) -> None:
    """Render a Rich table of market prices to stdout."""
    table = Table(
        title=f"Market Prices: {snapshot.source}",
        caption=f"Updated {snapshot.last_updated:%Y-%m-%d %H:%M} UTC",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Crop", max_width=40)
    table.add_column("Price", justify="right", style="bold")
    table.add_column("Unit", justify="center")
    table.add_column("Change", justify="right")

    for idx, p in enumerate(snapshot.prices, 1):
        style = _change_style(p.change_percent)
        table.add_row(
            str(idx),
            p.crop,
            p.price,
            p.unit,
            f"[{style}]{p.change_percent}[/{style}]",
        )

    Console().print(table)


def _print_weather_table(weather: WeatherSnapshot) -> None:
    """Render a Rich table of the weather snapshot to stdout."""
    table = Table(
        title=f"Weather: {weather.location}",
        show_header=False,
        title_style="bold cyan",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Condition", f"{weather.condition} ({weather.description})")
    table.add_row("Temperature", f"{weather.temperature}°C")
    table.add_row("Humidity", f"{weather.humidity}%")
    table.add_row("Wind", f"{weather.wind_speed} km/h")
    table.add_row("Advisory", f"[green]{weather.advisory}[/green]")
    Console().print(table)


def _dump_json(data: dict[str, object]) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def cli_market(
    output_format: str,
    track: bool = False,
    output_dir: str | None = None,
) -> int:
    """Fetch market prices once and return an exit code.

    Exit code is 0 for live data and 1 when the fallback set was served.
    With *track*, the previous snapshot is read from and the new one
    written to the snapshot store, and significant moves are reported.
    """
    store = (
        SnapshotStore(Path(output_dir) if output_dir else None)
        if track
        else None
    )
    previous = store.load_latest() if store else None
    if previous is not None:
        _err.print(
            f"[dim]Comparing against snapshot from "
            f"{previous.last_updated:%Y-%m-%d %H:%M}[/dim]"
        )

    snapshot = await MarketPipeline().run_async(previous)

    if snapshot.is_fallback:
        _err.print(
            f"[yellow]Live prices unavailable, showing "
            f"{snapshot.source}[/yellow]"
        )
    else:
        _err.print(
            f"[green]✓ {snapshot.item_count} prices from "
            f"{snapshot.source}[/green]"
        )

    if store is not None:
        path = store.save(snapshot)
        if path:
            _err.print(f"[dim]Saved snapshot → {path}[/dim]")

    alert = market_price_alert(snapshot)
    if alert:
        _err.print(f"[bold magenta]{alert.title}:[/bold magenta] {alert.body}")

    if output_format == "table":
        _print_market_table(snapshot)
    else:
        _dump_json(snapshot.to_dict())

    return 1 if snapshot.is_fallback else 0


async def cli_weather(location: str | None, output_format: str) -> int:
    """Fetch the weather once; exit code 1 when it was unavailable."""
    weather = await WeatherService().get_weather(location)

    if not weather.is_available:
        _err.print(f"[yellow]{weather.advisory}[/yellow]")

    alert = weather_alert(weather, weather.location)
    if alert:
        _err.print(f"[bold magenta]{alert.title}:[/bold magenta] {alert.body}")

    if output_format == "table":
        _print_weather_table(weather)
    else:
        _dump_json(weather.to_dict())

    return 0 if weather.is_available else 1


async def run_health_check() -> int:
    """Run connectivity health check on all upstream sources."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running upstream health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "-"
        )
        table.add_row(
            r.source_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0


def run_server(host: str, port: int) -> int:
    """Serve the HTTP API with uvicorn until interrupted."""
    import uvicorn

    _err.print(f"[bold]Serving agri_feed on http://{host}:{port}[/bold]")
    uvicorn.run("src.web.app:app", host=host, port=port)
    return 0
