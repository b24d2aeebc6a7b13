"""Data models for newswatch."""

from .article import Article, GeopoliticalTags

__all__ = ["Article", "GeopoliticalTags"]
