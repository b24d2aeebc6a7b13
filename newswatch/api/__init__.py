"""HTTP API and crawl scheduling."""

from .app import create_app
from .scheduler import CrawlScheduler

__all__ = ["CrawlScheduler", "create_app"]
