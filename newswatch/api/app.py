"""HTTP API over stored articles plus the manual crawl trigger."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from ..db.articles import ArticleRepository
from ..exceptions import ContentStoreError
from ..models import Article
from ..storage import ContentStore
from .scheduler import CrawlScheduler

logger = logging.getLogger(__name__)


class ContentResponse(BaseModel):
    content: str


class ContentURLResponse(BaseModel):
    url: str
    expires_in: int


class TriggerResponse(BaseModel):
    success: bool
    message: str
    summary: Optional[Dict[str, Any]] = None


def create_app(
    repository: ArticleRepository,
    content_store: ContentStore,
    scheduler: Optional[CrawlScheduler] = None,
    signed_url_expiry: int = 3600,
    run_scheduler: bool = True,
) -> FastAPI:
    """
    Build the API application.

    Args:
        repository: Article metadata store
        content_store: Blob store holding full bodies
        scheduler: Crawl scheduler; its periodic loop runs for the app lifetime
            when run_scheduler is set
        signed_url_expiry: Lifetime of content URLs in seconds
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None and run_scheduler:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()

    app = FastAPI(title="newswatch API", lifespan=lifespan)

    def _get_article(article_id: int) -> Article:
        article = repository.get_by_id(article_id)
        if article is None:
            raise HTTPException(status_code=404, detail="Article not found")
        return article

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/news", response_model=List[Article])
    def list_news():
        return repository.list_all()

    @app.get("/news/search", response_model=List[Article])
    def search_news(q: str = Query("", description="Title search terms")):
        return repository.search(q)

    @app.get("/news/source/{source}", response_model=List[Article])
    def news_by_source(source: str):
        return repository.list_by_source(source)

    @app.get("/news/geopolitical", response_model=List[Article])
    def geopolitical_news():
        return repository.list_geopolitical()

    @app.get("/news/country/{country}", response_model=List[Article])
    def news_by_country(country: str):
        return repository.list_by_country(country)

    @app.get("/news/statistics")
    def statistics():
        return repository.statistics()

    @app.get("/news/{article_id}", response_model=Article)
    def get_news(article_id: int):
        return _get_article(article_id)

    @app.get("/news/{article_id}/content", response_model=ContentResponse)
    def get_full_content(article_id: int):
        article = _get_article(article_id)
        if not article.content_key:
            # Legacy row: the body is still inline
            return ContentResponse(content=article.content)
        try:
            return ContentResponse(content=content_store.get_text(article.content_key))
        except ContentStoreError as e:
            logger.error("Content fetch failed for article %s: %s", article_id, e)
            raise HTTPException(status_code=502, detail="Content store unavailable")

    @app.get("/news/{article_id}/content-url", response_model=ContentURLResponse)
    def get_content_url(article_id: int):
        article = _get_article(article_id)
        if not article.content_key:
            raise HTTPException(status_code=404, detail="Article has no stored content")
        try:
            url = content_store.signed_url(article.content_key, signed_url_expiry)
        except ContentStoreError as e:
            logger.error("Signing failed for article %s: %s", article_id, e)
            raise HTTPException(status_code=502, detail="Content store unavailable")
        return ContentURLResponse(url=url, expires_in=signed_url_expiry)

    @app.post("/scheduler/crawl", response_model=TriggerResponse)
    async def start_crawling():
        if scheduler is None:
            raise HTTPException(status_code=503, detail="Crawler not configured")
        return await scheduler.trigger()

    return app
