"""Keyword-based geopolitical tagging."""

from typing import Iterable, List

from .models import GeopoliticalTags


def extract_countries(text: str, countries: Iterable[str]) -> List[str]:
    """
    Return the configured countries whose name occurs in text.

    Matching is a case-insensitive substring test; results keep the order of
    the configured list.
    """
    if not text:
        return []
    haystack = text.lower()
    return [country for country in countries if country.lower() in haystack]


def build_tags(text: str, countries: Iterable[str]) -> GeopoliticalTags:
    """Build the tag structure for an article body."""
    return GeopoliticalTags(countries=extract_countries(text, countries))
