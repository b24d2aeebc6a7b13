"""Maintenance commands: legacy content migration and orphan sweep."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..db import ArticleRepository, close_connection_pool, validate_connection
from ..pipeline import migrate_legacy_content, sweep_orphaned_blobs
from ..storage import GCSContentStore

console = Console()


def _open_stores(config: Config):
    try:
        db_config = config.get_db_config()
        store = GCSContentStore.from_config(config.get_storage_config())
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    if not validate_connection(db_config):
        console.print("[red]❌ Database connection failed![/red]")
        raise typer.Exit(1)

    return ArticleRepository(db_config), store


def migrate_content_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
    limit: int = typer.Option(0, "--limit", "-n", help="Migrate at most N articles (0: all)"),
) -> None:
    """Move inline bodies of legacy articles into the content store."""
    config = Config(config_path)
    repository, store = _open_stores(config)

    try:
        stats = migrate_legacy_content(
            repository,
            store,
            excerpt_length=config.config.crawl.excerpt_length,
            limit=limit,
        )
    finally:
        close_connection_pool()

    console.print(
        f"Migration complete: [green]{stats['migrated']} migrated[/green], "
        f"[red]{stats['failed']} failed[/red], {stats['skipped']} skipped"
    )
    if stats["failed"]:
        raise typer.Exit(1)


def sweep_orphans_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
    apply: bool = typer.Option(False, "--apply", help="Delete orphans instead of listing them"),
) -> None:
    """Find (and optionally delete) stored bodies no article references."""
    config = Config(config_path)
    repository, store = _open_stores(config)

    try:
        keys = sweep_orphaned_blobs(repository, store, dry_run=not apply)
    finally:
        close_connection_pool()

    if not keys:
        console.print("[green]No orphaned content found.[/green]")
        return

    for key in keys:
        console.print(f"  - {key}")
    if apply:
        console.print(f"[green]Deleted {len(keys)} orphaned blobs.[/green]")
    else:
        console.print(
            f"[yellow]{len(keys)} orphaned blobs found. Re-run with --apply to delete them.[/yellow]"
        )
