"""Crawl-and-ingest pipeline."""

from .maintenance import find_orphaned_keys, migrate_legacy_content, sweep_orphaned_blobs
from .models import CrawlSummary, PersistOutcome, SourceReport
from .orchestrator import CrawlOrchestrator, build_orchestrator
from .persist import ArticlePersister, make_excerpt

__all__ = [
    "ArticlePersister",
    "CrawlOrchestrator",
    "CrawlSummary",
    "PersistOutcome",
    "SourceReport",
    "build_orchestrator",
    "find_orphaned_keys",
    "make_excerpt",
    "migrate_legacy_content",
    "sweep_orphaned_blobs",
]
