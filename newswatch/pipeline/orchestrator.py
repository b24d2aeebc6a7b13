"""Crawl orchestrator that runs one full crawl-and-ingest cycle."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, AsyncContextManager, Callable, List, Optional, Sequence

from ..config import Config, load_sources
from ..db.articles import ArticleRepository
from ..ingestion import CandidateArticle, SourceExtractor, browser_session, build_extractors
from ..storage import ContentStore, GCSContentStore
from ..tagging import build_tags
from .models import CrawlSummary, PersistOutcome, SourceReport, SourceStage
from .persist import ArticlePersister

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[Any]]


class CrawlOrchestrator:
    """Drive every source extractor and persist the new articles."""

    def __init__(
        self,
        extractors: Sequence[SourceExtractor],
        repository: ArticleRepository,
        content_store: ContentStore,
        countries: Sequence[str],
        session_factory: Optional[SessionFactory] = None,
        excerpt_length: int = 200,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            extractors: Extractors in the order sources should be crawled
            repository: Article metadata store
            content_store: Blob store for article bodies
            countries: Country names for keyword tagging
            session_factory: Returns an async context manager yielding the
                shared rendering session (defaults to a headless browser)
            excerpt_length: Inline excerpt length
        """
        self.extractors = list(extractors)
        self.repository = repository
        self.countries = list(countries)
        self.session_factory = session_factory or browser_session
        self.persister = ArticlePersister(repository, content_store, excerpt_length)

    async def _extract_all(self, session: Any, summary: CrawlSummary) -> List[CandidateArticle]:
        """Run extractors one after another; a failing source yields nothing."""
        candidates: List[CandidateArticle] = []

        for extractor in self.extractors:
            stage = SourceStage(extractor.name)
            stage.start()
            try:
                articles = await extractor.extract(session)
            except Exception as e:
                stage.fail(str(e))
                summary.per_source_errors.append(extractor.name)
                logger.error("Source %s failed: %s", extractor.name, e)
            else:
                stage.complete(len(articles))
                candidates.extend(articles)

            summary.sources.append(
                SourceReport(
                    name=stage.name,
                    found=stage.found,
                    success=stage.success,
                    error=stage.error,
                    duration=stage.duration,
                )
            )

        return candidates

    async def _persist_new(
        self,
        candidates: List[CandidateArticle],
        summary: CrawlSummary,
    ) -> None:
        """Dedup against the repository and persist the rest in discovery order."""
        urls = [candidate.url for candidate in candidates]
        existing = await asyncio.to_thread(self.repository.find_existing_urls, urls)
        logger.info("%d of %d candidates already stored", len(existing), len(candidates))

        seen = set(existing)
        for candidate in candidates:
            if candidate.url in seen:
                summary.duplicates += 1
                continue
            seen.add(candidate.url)

            tags = build_tags(candidate.body or "", self.countries)
            try:
                outcome = await asyncio.to_thread(
                    self.persister.persist, candidate, tags, summary.started_at
                )
            except Exception as e:
                logger.error("Unexpected error persisting %s: %s", candidate.url, e)
                outcome = PersistOutcome.RECORD_FAILED

            if outcome == PersistOutcome.SAVED:
                summary.total_saved += 1
            elif outcome == PersistOutcome.DUPLICATE:
                summary.duplicates += 1
            else:
                summary.failed += 1

    async def run_crawl_cycle(self) -> CrawlSummary:
        """
        Run one crawl cycle across all configured sources.

        Returns:
            Summary counts of the cycle

        Raises:
            SessionUnavailableError: the rendering session could not be started
        """
        summary = CrawlSummary(started_at=datetime.now(timezone.utc))
        logger.info("Starting crawl cycle over %d sources", len(self.extractors))

        async with self.session_factory() as session:
            candidates = await self._extract_all(session, summary)
            summary.total_found = len(candidates)
            if candidates:
                await self._persist_new(candidates, summary)

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Crawl cycle finished: %d new articles saved out of %d found",
            summary.total_saved,
            summary.total_found,
        )
        return summary


def build_orchestrator(config: Config) -> CrawlOrchestrator:
    """Wire an orchestrator from configuration and sources.yaml."""
    settings = config.config
    sources = load_sources(config.sources_path)
    extractors = build_extractors(sources, settings.crawl)

    return CrawlOrchestrator(
        extractors=extractors,
        repository=ArticleRepository(config.get_db_config()),
        content_store=GCSContentStore.from_config(config.get_storage_config()),
        countries=settings.countries,
        session_factory=lambda: browser_session(headless=settings.crawl.headless),
        excerpt_length=settings.crawl.excerpt_length,
    )
