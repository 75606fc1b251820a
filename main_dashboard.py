"""Mini README: Entry point CLI for the FuelEU compliance dashboard.

This script exposes a Typer CLI that starts the FastAPI dashboard under
uvicorn and prints a quick fleet summary from the in-memory ledger. Host,
port and logging level default to the ``FUELEU_`` environment settings.
"""

from __future__ import annotations

import typer
import uvicorn

from fuelcompliance import ComplianceService
from fuelcompliance.configuration import get_settings
from fuelcompliance.logging_utils import configure_root_logger

cli = typer.Typer(help="Launch and inspect the FuelEU compliance dashboard.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 / :: wildcard, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting compliance dashboard on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "fuelcompliance.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def summary() -> None:
    """Print ship balances and banked reserves from a fresh ledger."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    service = ComplianceService(settings=settings)
    for snapshot in service.reporter.ship_snapshots():
        typer.echo(
            f"{snapshot.ship_id:<10} {snapshot.period_year} "
            f"{snapshot.balance_gco2eq:>+18,.0f} gCO2eq  {snapshot.status.value:<9} "
            f"banked {snapshot.banked_gco2eq:,.0f}"
        )


if __name__ == "__main__":
    cli()
