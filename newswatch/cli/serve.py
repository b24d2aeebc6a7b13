"""Serve command implementation."""

from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from ..api import CrawlScheduler, create_app
from ..config import Config
from ..db import close_connection_pool
from ..pipeline import build_orchestrator

console = Console()


def serve_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    schedule: bool = typer.Option(
        True, "--schedule/--no-schedule", help="Run crawl cycles on the configured interval"
    ),
) -> None:
    """Serve the article API and run scheduled crawls."""
    config = Config(config_path)
    try:
        settings = config.config
        orchestrator = build_orchestrator(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    scheduler = CrawlScheduler(
        orchestrator.run_crawl_cycle,
        interval_hours=settings.crawl.interval_hours,
    )
    app = create_app(
        repository=orchestrator.repository,
        content_store=orchestrator.persister.content_store,
        scheduler=scheduler,
        signed_url_expiry=settings.storage.signed_url_expiry_seconds,
        run_scheduler=schedule,
    )

    uvicorn.run(
        app,
        host=host or settings.api.host,
        port=port or settings.api.port,
        log_config=None,
    )
    close_connection_pool()
