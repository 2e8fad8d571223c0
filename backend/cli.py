"""
Restaurant POS CLI.

Operator commands for the things a cashier cannot do from the UI:
repairing drift after an interrupted operation, forcing a spreadsheet
sync and printing the daily report.
"""

import asyncio
import sys
import time
from datetime import date
from pathlib import Path
from typing import Optional

# Add backend to path for imports when run as a script
sys.path.insert(0, str(Path(__file__).parent))

import httpx
import typer
from rich.console import Console
from rich.table import Table

from shared.config.settings import settings
from shared.infrastructure.db import engine, get_db_context
from pos_api.models import Base
from pos_api.repositories import SqlDataStore
from pos_api.services.domain import CheckoutService, LifecycleError, reconcile as reconcile_store
from pos_api.services.mirror import get_mirror
from pos_api.services.snapshot import take_snapshot

app = typer.Typer(
    name="pos",
    help="Restaurant POS operator CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Consistency Commands
# =============================================================================

@app.command()
def reconcile(
    order_id: Optional[str] = typer.Option(None, "--order-id", "-o", help="Only examine this order"),
):
    """Repair drift between tables, orders and payments."""
    Base.metadata.create_all(bind=engine)

    try:
        with get_db_context() as db:
            report = reconcile_store(SqlDataStore(db), order_id=order_id)
    except LifecycleError as e:
        console.print(f"[red]✗ Reconcile failed: {e.message}[/red]")
        raise typer.Exit(1)

    if report.clean:
        console.print("[green]✓ No drift found[/green]")
        return

    table = Table(title="Reconcile Results")
    table.add_column("Result", style="cyan", no_wrap=True)
    table.add_column("Kind", style="yellow", no_wrap=True)
    table.add_column("Table")
    table.add_column("Order")
    table.add_column("Detail")

    for item in report.repairs:
        table.add_row("repaired", item.kind, item.table_no or "-", item.order_id or "-", item.message)
    for item in report.anomalies:
        table.add_row("[red]needs attention[/red]", item.kind, item.table_no or "-", item.order_id or "-", item.message)

    console.print(table)
    if report.anomalies:
        raise typer.Exit(2)


@app.command()
def sync():
    """Push the current data to the spreadsheet mirror."""
    if not settings.mirror_enabled:
        console.print("[yellow]Spreadsheet mirror is not configured (MIRROR_WEBHOOK_URL)[/yellow]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            snapshot = take_snapshot(SqlDataStore(db))
    except LifecycleError as e:
        console.print(f"[red]✗ Could not read data: {e.message}[/red]")
        raise typer.Exit(1)

    result = asyncio.run(get_mirror().push(snapshot))
    if result.success:
        console.print(f"[green]✓ {result.message}[/green] (version {snapshot.version[:12]})")
    else:
        console.print(f"[red]✗ {result.message}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Reporting Commands
# =============================================================================

@app.command()
def report(
    day: Optional[str] = typer.Option(None, "--day", "-d", help="Day as YYYY-MM-DD (default: today, UTC)"),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the report to this file"),
):
    """Print the daily report."""
    try:
        report_day = date.fromisoformat(day) if day else None
    except ValueError:
        console.print(f"[red]Invalid day '{day}', expected YYYY-MM-DD[/red]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            text = CheckoutService(SqlDataStore(db)).daily_report(report_day)
    except LifecycleError as e:
        console.print(f"[red]✗ Report failed: {e.message}[/red]")
        raise typer.Exit(1)

    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]✓ Report written to {output}[/green]")
    else:
        console.print(text, markup=False, highlight=False)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health/detailed",
        help="Health endpoint of the running API",
    ),
):
    """Check service health."""

    async def _health():
        table = Table(title="Service Health")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Response Time", style="yellow")

        async with httpx.AsyncClient(timeout=5.0) as client:
            try:
                start = time.time()
                response = await client.get(url)
                elapsed = (time.time() - start) * 1000

                if response.status_code == 200:
                    table.add_row("POS API", "✓ Healthy", f"{elapsed:.0f}ms")
                else:
                    table.add_row("POS API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
            except httpx.HTTPError as e:
                table.add_row("POS API", f"✗ {type(e).__name__}", "-")

        mirror_state = "configured" if settings.mirror_enabled else "not configured"
        table.add_row("Spreadsheet mirror", mirror_state, "-")

        console.print(table)

    asyncio.run(_health())


@app.command()
def version():
    """Show version information."""
    table = Table(title="Restaurant POS Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("CLI", "0.1.0")
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Environment", settings.environment)
    table.add_row("Restaurant", settings.restaurant_name)

    console.print(table)


if __name__ == "__main__":
    app()
