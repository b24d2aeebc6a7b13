"""Crawl command implementation."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Config
from ..db import close_connection_pool, validate_connection
from ..exceptions import SessionUnavailableError
from ..pipeline import CrawlSummary, build_orchestrator

console = Console()


def print_crawl_summary(summary: CrawlSummary) -> None:
    """Print crawl cycle summary."""
    table = Table(title="Crawl Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Duration", style="yellow")
    table.add_column("Details", style="dim")

    for report in summary.sources:
        status = "[green]✓[/green]" if report.success else "[red]✗[/red]"
        duration = f"{report.duration:.1f}s" if report.duration > 0 else "-"
        details = f"{report.found} articles" if report.success else (report.error or "Failed")
        table.add_row(report.name, status, duration, details)

    console.print("\n")
    console.print(table)

    style = "green" if not summary.per_source_errors else "yellow"
    failed_sources = ", ".join(summary.per_source_errors) or "none"
    console.print(
        Panel(
            f"Found: {summary.total_found}\n"
            f"Saved: {summary.total_saved}\n"
            f"Duplicates: {summary.duplicates}\n"
            f"Failed to persist: {summary.failed}\n"
            f"Failed sources: {failed_sources}",
            title="Crawl cycle complete",
            style=style,
        )
    )


def crawl_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Run one crawl cycle across all configured sources."""
    try:
        config = Config(config_path)

        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)

        orchestrator = build_orchestrator(config)
        if not orchestrator.extractors:
            console.print("[yellow]No enabled sources configured.[/yellow]")
            raise typer.Exit(1)

        summary = asyncio.run(orchestrator.run_crawl_cycle())
        print_crawl_summary(summary)

    except SessionUnavailableError as e:
        console.print(f"[red]Crawl aborted: {e}[/red]")
        console.print("Install the browser with: [bold]playwright install chromium[/bold]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Crawl interrupted by user[/yellow]")
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()
