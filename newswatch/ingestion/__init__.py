"""Page rendering and per-source article extraction."""

from .extractor import SourceExtractor, parse_published, resolve_link
from .models import CandidateArticle
from .session import browser_session
from .sources import build_extractors, create_default_sources

__all__ = [
    "SourceExtractor",
    "CandidateArticle",
    "browser_session",
    "build_extractors",
    "create_default_sources",
    "parse_published",
    "resolve_link",
]
