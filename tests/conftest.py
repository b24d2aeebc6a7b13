"""Shared fakes for the crawl, persistence and API tests."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

import pytest

from newswatch.config import CrawlConfig, SourceConfig
from newswatch.exceptions import ContentStoreError, DuplicateArticleError
from newswatch.ingestion import CandidateArticle
from newswatch.models import Article


class FakeRepository:
    """In-memory stand-in for ArticleRepository."""

    def __init__(self) -> None:
        self.articles: Dict[int, Article] = {}
        self.next_id = 1
        self.find_calls = 0
        self.fail_insert_urls: Set[str] = set()

    def find_existing_urls(self, urls) -> Set[str]:
        self.find_calls += 1
        stored = {a.url for a in self.articles.values()}
        return {url for url in urls if url in stored}

    def insert(self, article: Article) -> Article:
        if article.url in self.fail_insert_urls:
            raise RuntimeError("database unavailable")
        if any(a.url == article.url for a in self.articles.values()):
            raise DuplicateArticleError(article.url)
        saved = article.model_copy(update={"id": self.next_id})
        self.articles[self.next_id] = saved
        self.next_id += 1
        return saved

    def add(self, **fields: Any) -> Article:
        fields.setdefault("source", "Example")
        fields.setdefault("published_at", datetime(2024, 1, 1, tzinfo=timezone.utc))
        return self.insert(Article(**fields))

    def list_all(self, limit: Optional[int] = None) -> List[Article]:
        articles = list(self.articles.values())
        return articles[:limit] if limit else articles

    def get_by_id(self, article_id: int) -> Optional[Article]:
        return self.articles.get(article_id)

    def list_by_source(self, source: str) -> List[Article]:
        return [a for a in self.articles.values() if a.source == source]

    def search(self, query: str) -> List[Article]:
        return [a for a in self.articles.values() if query.lower() in a.title.lower()]

    def list_by_country(self, country: str) -> List[Article]:
        return [a for a in self.articles.values() if country in a.geopolitical_tags.countries]

    def list_geopolitical(self) -> List[Article]:
        return [a for a in self.articles.values() if not a.geopolitical_tags.is_empty()]

    def statistics(self, top_countries: int = 10) -> Dict[str, Any]:
        return {"total_articles": len(self.articles), "by_source": [], "top_countries": []}

    def list_legacy(self, limit: int = 100) -> List[Article]:
        rows = [a for a in self.articles.values() if a.content_key is None and a.content]
        return rows[:limit]

    def attach_content_key(self, article_id: int, content_key: str, excerpt: str) -> bool:
        article = self.articles.get(article_id)
        if article is None or article.content_key is not None:
            return False
        self.articles[article_id] = article.model_copy(
            update={"content_key": content_key, "content": excerpt}
        )
        return True

    def referenced_content_keys(self) -> Set[str]:
        return {a.content_key for a in self.articles.values() if a.content_key}


class FakeContentStore:
    """In-memory content store; set fail_puts to make uploads fail."""

    def __init__(self) -> None:
        self.blobs: Dict[str, str] = {}
        self.fail_puts = False
        self.fail_gets = False
        self.counter = 0

    def put_text(self, text: str, source: str) -> str:
        if self.fail_puts:
            raise ContentStoreError("upload refused")
        self.counter += 1
        key = f"articles/{source.lower()}/{self.counter}.txt"
        self.blobs[key] = text
        return key

    def get_text(self, key: str) -> str:
        if self.fail_gets or key not in self.blobs:
            raise ContentStoreError(f"missing {key}")
        return self.blobs[key]

    def signed_url(self, key: str, expires_in: int = 3600) -> str:
        return f"https://storage.example.com/{key}?expires={expires_in}"

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)

    def list_keys(self) -> List[str]:
        return list(self.blobs)


class FakePage:
    """
    Browser page driven by a site map.

    site maps url -> {selector: [values]}; the evaluated script is ignored
    since every selector in a map yields exactly what the test wants.
    """

    def __init__(self, site: Dict[str, Dict[str, List[Optional[str]]]], fail_urls=()) -> None:
        self.site = site
        self.fail_urls = set(fail_urls)
        self.url: Optional[str] = None
        self.visited: List[str] = []

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        if url in self.fail_urls:
            raise TimeoutError(f"navigation to {url} timed out")
        self.url = url

    async def wait_for_timeout(self, ms: int) -> None:
        return None

    async def eval_on_selector_all(self, selector: str, script: str) -> List[Optional[str]]:
        return list(self.site.get(self.url, {}).get(selector, []))

    async def content(self) -> str:
        return "<html><body></body></html>"

    async def inner_text(self, selector: str) -> str:
        return ""


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.closed = False

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Shared session handing out one context per source."""

    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.contexts: List[FakeContext] = []

    async def new_context(self, **kwargs: Any) -> FakeContext:
        context = FakeContext(self.page)
        self.contexts.append(context)
        return context


class SessionTracker:
    """Session factory recording acquisitions and releases."""

    def __init__(self, session: Any = None, fail: Optional[Exception] = None) -> None:
        self.session = session if session is not None else MagicMock()
        self.fail = fail
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def __call__(self):
        if self.fail is not None:
            raise self.fail
        self.acquired += 1
        try:
            yield self.session
        finally:
            self.released += 1


def make_candidate(url: str, body: Optional[str] = "Talks between China and Russia.", **kwargs: Any):
    kwargs.setdefault("title", f"Story at {url}")
    kwargs.setdefault("source", "Example")
    return CandidateArticle(url=url, body=body, **kwargs)


def make_extractor(name: str, articles=None, error: Optional[Exception] = None) -> MagicMock:
    extractor = MagicMock()
    extractor.name = name
    if error is not None:
        extractor.extract = AsyncMock(side_effect=error)
    else:
        extractor.extract = AsyncMock(return_value=list(articles or []))
    return extractor


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def content_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def crawl_config() -> CrawlConfig:
    return CrawlConfig(settle_ms=0, courtesy_delay_seconds=0)


@pytest.fixture
def source() -> SourceConfig:
    return SourceConfig(
        name="Example News",
        landing_url="https://news.example.com/world",
        base_url="https://news.example.com/",
        link_selectors=["a.headline"],
        link_prefixes=["/news/"],
        title_selectors=["h1.title", "h1"],
        body_selectors=["div.story p"],
        date_selectors=["time"],
    )
