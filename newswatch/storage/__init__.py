"""Blob storage for article bodies."""

from .base import ContentStore, make_content_key, slugify_source
from .gcs import GCSContentStore

__all__ = ["ContentStore", "GCSContentStore", "make_content_key", "slugify_source"]
