"""Main CLI application."""

import logging

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

# Load .env file if it exists
load_dotenv()

from .crawl import crawl_command
from .init import init_command
from .maintenance import migrate_content_command, sweep_orphans_command
from .serve import serve_command
from .sources import sources_app

app = typer.Typer(
    name="newswatch",
    help="newswatch - geopolitical news crawler and article API",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )
    # Keep third-party chatter out of INFO output
    for noisy in ("httpx", "urllib3", "google", "trafilatura"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# Register commands
app.command("init")(init_command)
app.command("crawl")(crawl_command)
app.command("serve")(serve_command)
app.command("migrate-content")(migrate_content_command)
app.command("sweep-orphans")(sweep_orphans_command)
app.add_typer(sources_app, name="sources", help="Manage news sources")


if __name__ == "__main__":
    app()
