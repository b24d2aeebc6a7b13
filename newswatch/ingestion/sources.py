"""Default news sources and extractor construction."""

from typing import List, Optional

from ..config import CrawlConfig, SourceConfig
from .extractor import SourceExtractor


def create_default_sources() -> List[SourceConfig]:
    """Create the default world-news source table."""
    return [
        SourceConfig(
            name="BBC World",
            landing_url="https://www.bbc.com/news/world",
            base_url="https://www.bbc.com",
            link_selectors=[".gs-c-promo-heading", 'a[href^="/news/world"]', ".nw-o-link-split__anchor"],
            link_prefixes=["/news/"],
            title_selectors=["h1", '[data-component="headline"]', ".story-body__h1", ".article-headline__text"],
            body_selectors=[
                '[data-component="text-block"] p',
                ".story-body__inner p",
                ".article__body p",
                ".story-body p",
                "article p",
            ],
            date_selectors=["time[datetime]", '[data-testid="timestamp"]'],
        ),
        SourceConfig(
            name="Al Jazeera",
            landing_url="https://www.aljazeera.com/news/",
            base_url="https://www.aljazeera.com",
            link_selectors=["article a", ".article-card a", ".u-clickable-card__link"],
            link_prefixes=["/news/"],
            title_selectors=["h1", ".article-header h1", ".article__title", ".post-title"],
            body_selectors=[
                ".wysiwyg p",
                ".wysiwyg--all-content p",
                ".article__content p",
                ".article-body p",
                ".article-p-wrapper p",
                "article p",
            ],
            date_selectors=["time[datetime]", ".date-simple span"],
        ),
        SourceConfig(
            name="The Guardian",
            landing_url="https://www.theguardian.com/world",
            base_url="https://www.theguardian.com",
            link_selectors=[".fc-item__link", ".u-faux-block-link__overlay", ".fc-item a", '[data-link-name="article"] a'],
            link_prefixes=["/world/", "/us-news/", "/uk-news/", "/global-development/"],
            title_selectors=["h1", ".content__headline", '[data-gu-name="headline"]'],
            body_selectors=[
                ".article-body-commercial-selector p",
                ".content__article-body p",
                ".article-body p",
                ".js-article__body p",
            ],
            date_selectors=["time", ".content__dateline time", '[data-component="meta-byline"] time'],
        ),
        SourceConfig(
            name="AP News",
            landing_url="https://apnews.com/hub/world-news",
            base_url="https://apnews.com",
            link_selectors=[".PageList-items-item a", ".CardHeadline a", ".headline a", ".Component-headline a"],
            link_prefixes=["/article/"],
            title_selectors=["h1", ".Article-headline", ".CardHeadline", '[data-key="headline"]'],
            body_selectors=[
                ".RichTextStoryBody p",
                ".RichTextBody p",
                ".Article-content p",
                ".article-body p",
                '[data-key="article-body"] p',
            ],
            date_selectors=["time", ".Timestamp", '[data-key="timestamp"]', ".Article-timestamp"],
        ),
        SourceConfig(
            name="Euronews",
            landing_url="https://www.euronews.com/news/international",
            base_url="https://www.euronews.com",
            link_selectors=[".m-object__title a", ".c-teaser__title a", "article a.u-clickable-card__link", ".c-article-teaser a"],
            link_prefixes=["/20"],
            title_selectors=["h1", ".c-article-title", ".o-article__title", ".c-article__title"],
            body_selectors=[".c-article-content p", ".article__content p", ".o-article__body p", ".c-article-body p"],
            date_selectors=["time", ".c-article-date", ".c-article__date", '[data-test="article-dates"]'],
        ),
        SourceConfig(
            name="Foreign Policy",
            landing_url="https://foreignpolicy.com/",
            base_url="https://foreignpolicy.com",
            link_selectors=[".article-card a", ".article-item a", ".article-title a", ".headline a", "h3 a", "h2 a"],
            link_prefixes=["/20"],
            title_selectors=["h1", ".hed", ".article-title", ".post-title"],
            body_selectors=[".content-gated--main-article p", ".post-content-main p", ".article-content p", "article p"],
            date_selectors=["time", ".date-time", ".post-date", '[itemprop="datePublished"]'],
        ),
        SourceConfig(
            name="The Diplomat",
            landing_url="https://thediplomat.com/",
            base_url="https://thediplomat.com",
            # Article paths are dated: /2024/05/slug/
            link_selectors=['article a[href*="/20"]', 'h2 a[href*="/20"]', 'h3 a[href*="/20"]'],
            link_prefixes=["/20"],
            title_selectors=["h1", ".td-title", ".entry-title"],
            body_selectors=["#td-story-body p", ".td-post-content p", "article p"],
            date_selectors=["time", '[itemprop="datePublished"]', ".td-date"],
        ),
    ]


def build_extractors(
    sources: List[SourceConfig], crawl_config: Optional[CrawlConfig] = None
) -> List[SourceExtractor]:
    """One extractor per enabled source, preserving configured order."""
    return [SourceExtractor(source, crawl_config) for source in sources if source.enabled]
