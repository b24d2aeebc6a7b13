"""Selector-driven article extractor shared by every configured source."""

import asyncio
import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

import pendulum
import trafilatura

from ..config import CrawlConfig, SourceConfig
from ..exceptions import ExtractionError
from .models import CandidateArticle

logger = logging.getLogger(__name__)

# Scripts evaluated against every element matched by a selector
TEXT_SCRIPT = "els => els.map(e => (e.textContent || '').trim())"
HREF_SCRIPT = (
    "els => els.map(e => e.getAttribute('href') "
    "|| (e.querySelector('a') ? e.querySelector('a').getAttribute('href') : null))"
)
DATE_SCRIPT = "els => els.map(e => e.getAttribute('datetime') || (e.textContent || '').trim())"
META_CONTENT_SCRIPT = "els => els.map(e => e.getAttribute('content'))"

FALLBACK_LINK_SELECTOR = "a[href]"
FALLBACK_BODY_SELECTOR = "p"
SKIPPED_LINK_SCHEMES = ("javascript:", "mailto:", "tel:", "#")


def resolve_link(href: Optional[str], base_url: str, prefixes: Sequence[str] = ()) -> Optional[str]:
    """
    Turn a discovered href into a canonical article URL.

    Relative links resolve against base_url and fragments are dropped. Links
    to other hosts, non-article schemes, the site root, or paths outside
    prefixes (when given) yield None.
    """
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith(SKIPPED_LINK_SCHEMES):
        return None

    url, _ = urldefrag(urljoin(base_url + "/", href))
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return None
    if parsed.netloc.lower() != urlparse(base_url).netloc.lower():
        return None
    if parsed.path in ("", "/"):
        return None
    if prefixes and not any(parsed.path.startswith(prefix) for prefix in prefixes):
        return None
    return url


def parse_published(raw: Optional[str]) -> Optional[datetime]:
    """Best-effort parse of a page timestamp; None when unparseable."""
    if not raw or not raw.strip():
        return None
    try:
        parsed = pendulum.parse(raw.strip(), strict=False)
    except (ValueError, TypeError, OverflowError):
        return None
    if not isinstance(parsed, datetime):
        return None
    return datetime.fromisoformat(parsed.isoformat())


class SourceExtractor:
    """Extract candidate articles from one news site."""

    def __init__(self, source: SourceConfig, crawl_config: Optional[CrawlConfig] = None) -> None:
        """Initialize extractor for a configured source."""
        self.source = source
        self.crawl_config = crawl_config or CrawlConfig()

    @property
    def name(self) -> str:
        return self.source.name

    async def _values(self, page: Any, selector: str, script: str) -> List[str]:
        values = await page.eval_on_selector_all(selector, script)
        return [v.strip() for v in values if isinstance(v, str) and v.strip()]

    async def _first_values(self, page: Any, selectors: Sequence[str], script: str) -> List[str]:
        """Values from the first selector that matches anything non-empty."""
        for selector in selectors:
            values = await self._values(page, selector, script)
            if values:
                logger.debug("%s: selector %r matched %d elements", self.name, selector, len(values))
                return values
        return []

    async def _navigate(self, page: Any, url: str) -> None:
        await page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self.crawl_config.page_timeout_ms,
        )
        if self.crawl_config.settle_ms:
            await page.wait_for_timeout(self.crawl_config.settle_ms)

    async def discover_links(self, page: Any) -> List[str]:
        """Collect article URLs from the landing page, in discovery order."""
        selectors = list(self.source.link_selectors) + [FALLBACK_LINK_SELECTOR]
        for selector in selectors:
            links = []
            for href in await self._values(page, selector, HREF_SCRIPT):
                url = resolve_link(href, self.source.base_url, self.source.link_prefixes)
                if url and url != self.source.landing_url and url not in links:
                    links.append(url)
            if links:
                logger.debug("%s: %d links via %r", self.name, len(links), selector)
                return links
        return []

    async def _extract_body(self, page: Any) -> str:
        paragraphs = await self._first_values(page, self.source.body_selectors, TEXT_SCRIPT)
        if not paragraphs:
            paragraphs = await self._values(page, FALLBACK_BODY_SELECTOR, TEXT_SCRIPT)
        if paragraphs:
            return "\n\n".join(paragraphs)

        html = await page.content()
        extracted = await asyncio.to_thread(
            trafilatura.extract,
            html,
            include_comments=False,
            include_tables=False,
            favor_precision=True,
        )
        if extracted and extracted.strip():
            return extracted.strip()

        return (await page.inner_text("body")).strip()

    async def extract_article(self, page: Any, url: str) -> Optional[CandidateArticle]:
        """
        Extract one article page.

        Returns:
            The candidate, or None when title or body could not be found
        """
        await self._navigate(page, url)

        titles = await self._first_values(page, self.source.title_selectors, TEXT_SCRIPT)
        title = titles[0] if titles else ""
        body = await self._extract_body(page)

        if not title or not body:
            logger.warning(
                "Incomplete extraction from %s (title: %s, body: %s)",
                url,
                "ok" if title else "missing",
                "ok" if body else "missing",
            )
            return None

        dates = await self._first_values(page, self.source.date_selectors, DATE_SCRIPT)
        published_at = parse_published(dates[0]) if dates else None

        metadata = {
            "word_count": len(body.split()),
            "landing_url": self.source.landing_url,
        }
        descriptions = await self._values(page, 'meta[name="description"]', META_CONTENT_SCRIPT)
        if descriptions:
            metadata["description"] = descriptions[0]

        return CandidateArticle(
            title=title,
            url=url,
            source=self.source.name,
            body=body,
            published_at=published_at,
            metadata=metadata,
        )

    async def extract(self, session: Any) -> List[CandidateArticle]:
        """
        Crawl the landing page and every discovered article.

        Per-article failures are logged and skipped.

        Raises:
            ExtractionError: the landing page could not be processed
        """
        logger.info("Crawling %s", self.name)
        articles: List[CandidateArticle] = []

        context = await session.new_context(user_agent=self.crawl_config.user_agent)
        try:
            page = await context.new_page()
            try:
                await self._navigate(page, self.source.landing_url)
                links = await self.discover_links(page)
            except Exception as e:
                raise ExtractionError(self.name, f"landing page failed: {e}") from e

            if self.crawl_config.max_articles_per_source:
                links = links[: self.crawl_config.max_articles_per_source]
            logger.info("Found %d article links on %s", len(links), self.name)

            for index, url in enumerate(links):
                if index > 0 and self.crawl_config.courtesy_delay_seconds:
                    await asyncio.sleep(self.crawl_config.courtesy_delay_seconds)

                logger.debug("Processing %s article %d/%d: %s", self.name, index + 1, len(links), url)
                try:
                    article = await self.extract_article(page, url)
                except Exception as e:
                    logger.warning("Error processing %s article %s: %s", self.name, url, e)
                    continue

                if article is not None:
                    articles.append(article)
        finally:
            await context.close()

        logger.info("Extracted %d articles from %s", len(articles), self.name)
        return articles
