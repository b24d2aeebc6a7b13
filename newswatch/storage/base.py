"""Content store interface."""

import re
import time
import uuid
from typing import List, Protocol


class ContentStore(Protocol):
    """Blob key/value store for article bodies."""

    def put_text(self, text: str, source: str) -> str:
        """Store text and return its opaque content key."""
        ...

    def get_text(self, key: str) -> str:
        """Return the text stored under key."""
        ...

    def signed_url(self, key: str, expires_in: int = 3600) -> str:
        """Return a time-limited URL granting direct read access to key."""
        ...

    def delete(self, key: str) -> None:
        """Remove the blob stored under key."""
        ...

    def list_keys(self) -> List[str]:
        """List every key under this store's prefix."""
        ...


def slugify_source(source: str) -> str:
    """Turn a source label into a key-safe path segment."""
    slug = re.sub(r"[^a-z0-9]+", "-", source.lower()).strip("-")
    return slug or "unknown"


def make_content_key(prefix: str, source: str) -> str:
    """Build a fresh key: {prefix}/{source}/{uuid}-{epoch_ms}.txt"""
    return f"{prefix}/{slugify_source(source)}/{uuid.uuid4()}-{int(time.time() * 1000)}.txt"
