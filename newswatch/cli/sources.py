"""Sources management commands."""

from pathlib import Path
from typing import List, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, SourceConfig, load_sources, save_sources
from ..config.models import DEFAULT_USER_AGENT

console = Console()
sources_app = typer.Typer(help="Manage news sources")


def _sources_path(config_path: Optional[Path]) -> Path:
    return Config(config_path).sources_path


@sources_app.command("list")
def sources_list(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """List all configured sources."""
    try:
        sources = load_sources(_sources_path(config_path))
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'newswatch init' first.[/red]")
        raise typer.Exit(1)

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("Link prefixes", style="magenta")
    table.add_column("Landing URL", style="blue")

    for source in sources:
        table.add_row(
            source.name,
            "✓" if source.enabled else "✗",
            ", ".join(source.link_prefixes) or "*",
            source.landing_url,
        )

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    landing_url: str = typer.Option(..., "--url", "-u", help="Landing page listing articles"),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Origin for relative links (default: landing page origin)"
    ),
    link_selectors: List[str] = typer.Option(
        [], "--link-selector", help="Article link selector, in priority order (repeatable)"
    ),
    link_prefixes: List[str] = typer.Option(
        [], "--link-prefix", help="Accepted article path prefix (repeatable)"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Add a new news source."""
    sources_path = _sources_path(config_path)

    try:
        sources = load_sources(sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.landing_url == landing_url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    if base_url is None:
        parsed = httpx.URL(landing_url)
        base_url = f"{parsed.scheme}://{parsed.host}"

    new_source = SourceConfig(
        name=name,
        landing_url=landing_url,
        base_url=base_url,
        link_selectors=link_selectors,
        link_prefixes=link_prefixes,
        enabled=True,
    )

    sources.append(new_source)
    save_sources(sources, sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Remove a source."""
    sources_path = _sources_path(config_path)

    try:
        sources = load_sources(sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found.[/red]")
        raise typer.Exit(1)

    original_count = len(sources)
    sources = [s for s in sources if s.name != name]

    if len(sources) == original_count:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(sources, sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Test landing page connectivity."""
    try:
        sources = load_sources(_sources_path(config_path))
    except FileNotFoundError:
        console.print("[red]Sources file not found.[/red]")
        raise typer.Exit(1)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    with httpx.Client(
        timeout=10.0,
        follow_redirects=True,
        headers={"User-Agent": DEFAULT_USER_AGENT},
    ) as client:
        for source in sources:
            if not source.enabled:
                console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")
                continue

            try:
                response = client.get(source.landing_url)
                response.raise_for_status()
                console.print(f"[green]✅ {source.name}: OK ({response.status_code})[/green]")
            except httpx.HTTPError as e:
                console.print(f"[red]❌ {source.name}: Failed - {e}[/red]")
