"""Two-phase persistence: body to the content store, then metadata."""

import logging
from datetime import datetime
from typing import Optional

from ..db.articles import ArticleRepository
from ..exceptions import ContentStoreError, DuplicateArticleError
from ..ingestion.models import CandidateArticle
from ..models import Article, GeopoliticalTags
from ..storage import ContentStore
from .models import PersistOutcome

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."


def make_excerpt(body: Optional[str], limit: int = 200) -> str:
    """First limit characters of body, marked when truncated."""
    if not body:
        return ""
    if len(body) > limit:
        return body[:limit] + TRUNCATION_MARKER
    return body


class ArticlePersister:
    """Durably record new articles without dangling content keys."""

    def __init__(
        self,
        repository: ArticleRepository,
        content_store: ContentStore,
        excerpt_length: int = 200,
    ) -> None:
        self.repository = repository
        self.content_store = content_store
        self.excerpt_length = excerpt_length

    def persist(
        self,
        candidate: CandidateArticle,
        tags: GeopoliticalTags,
        crawled_at: datetime,
    ) -> PersistOutcome:
        """
        Persist one candidate.

        The body is written first; a metadata row is only inserted once the
        body write succeeded, so no row ever points at a missing blob. A
        failed insert after a successful upload leaves an orphaned blob,
        which the orphan sweep reclaims.
        """
        content_key = None
        if candidate.body:
            try:
                content_key = self.content_store.put_text(candidate.body, candidate.source)
            except ContentStoreError as e:
                logger.error("Content upload failed for %s, skipping article: %s", candidate.url, e)
                return PersistOutcome.CONTENT_FAILED

        article = Article(
            url=candidate.url,
            title=candidate.title,
            content=make_excerpt(candidate.body, self.excerpt_length),
            content_key=content_key,
            source=candidate.source,
            published_at=candidate.published_at or crawled_at,
            geopolitical_tags=tags,
            metadata=candidate.metadata,
        )

        try:
            self.repository.insert(article)
        except DuplicateArticleError:
            logger.warning(
                "Article inserted concurrently, skipping: %s (orphaned content: %s)",
                candidate.url,
                content_key,
            )
            return PersistOutcome.DUPLICATE
        except Exception as e:
            logger.error(
                "Failed to save %s: %s (orphaned content: %s)", candidate.url, e, content_key
            )
            return PersistOutcome.RECORD_FAILED

        logger.info("Saved article: %s", candidate.title)
        return PersistOutcome.SAVED
