"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, save_config, save_sources
from ..config.loader import DEFAULT_CONFIG_DIR
from ..db import init_database, validate_connection
from ..ingestion import create_default_sources

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR,
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newswatch", "--db-name", help="Database name"),
    db_user: str = typer.Option("newswatch", "--db-user", help="Database user"),
    bucket: Optional[str] = typer.Option(
        None, "--bucket", "-b", help="GCS bucket for article bodies"
    ),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default news sources",
    ),
) -> None:
    """Initialize newswatch configuration and database."""
    console.print(Panel.fit("newswatch - Initialization", style="bold blue"))

    # Create configuration directory
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    # Create default configuration
    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "NEWSWATCH_DB_PASSWORD",
            "dsn_env": "NEWSWATCH_DATABASE_URL",
        },
        storage={
            "bucket": bucket,
            "bucket_env": "NEWSWATCH_BUCKET",
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")

    db_config = Config.from_model(config, config_path).get_db_config()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export NEWSWATCH_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ newswatch initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set the content bucket: [bold]export NEWSWATCH_BUCKET=your-bucket[/bold]\n"
            f"2. Install the browser: [bold]playwright install chromium[/bold]\n"
            f"3. Run: [bold]newswatch crawl[/bold] or [bold]newswatch serve[/bold]",
            style="green",
        )
    )
