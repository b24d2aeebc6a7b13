"""Exceptions raised across the crawl pipeline."""


class NewsWatchError(Exception):
    """Base class for newswatch errors."""


class SessionUnavailableError(NewsWatchError):
    """The rendering session could not be started. Fatal to a crawl cycle."""


class ExtractionError(NewsWatchError):
    """A source's landing page could not be loaded or processed."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class ContentStoreError(NewsWatchError):
    """A blob read or write against the content store failed."""


class DuplicateArticleError(NewsWatchError):
    """An article with the same URL already exists."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Article already exists: {url}")


class CrawlInProgressError(NewsWatchError):
    """A crawl cycle is already running in this process."""
