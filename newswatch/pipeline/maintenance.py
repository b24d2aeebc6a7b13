"""Maintenance jobs: legacy body migration and orphaned blob reclamation."""

import logging
from typing import Dict, List

from ..db.articles import ArticleRepository
from ..exceptions import ContentStoreError
from ..storage import ContentStore
from .persist import make_excerpt

logger = logging.getLogger(__name__)


def migrate_legacy_content(
    repository: ArticleRepository,
    content_store: ContentStore,
    excerpt_length: int = 200,
    batch_size: int = 100,
    limit: int = 0,
) -> Dict[str, int]:
    """
    Offload inline bodies of legacy rows to the content store.

    Each row's body is uploaded first; only then is the key attached and the
    inline text shrunk to the excerpt. A row that fails keeps its body inline.

    Args:
        batch_size: Rows fetched per round-trip
        limit: Stop after this many rows (0 means no limit)

    Returns:
        Statistics dictionary
    """
    stats = {"migrated": 0, "failed": 0, "skipped": 0}
    failed_ids = set()

    while True:
        rows = [a for a in repository.list_legacy(batch_size + len(failed_ids)) if a.id not in failed_ids]
        if not rows:
            break

        for article in rows:
            if limit and stats["migrated"] + stats["failed"] + stats["skipped"] >= limit:
                return stats

            try:
                key = content_store.put_text(article.content, article.source)
            except ContentStoreError as e:
                logger.error("Migration upload failed for article %s: %s", article.id, e)
                stats["failed"] += 1
                failed_ids.add(article.id)
                continue

            if repository.attach_content_key(
                article.id, key, make_excerpt(article.content, excerpt_length)
            ):
                stats["migrated"] += 1
            else:
                # Migrated concurrently; the upload we just made is unreferenced
                content_store.delete(key)
                stats["skipped"] += 1

            done = stats["migrated"] + stats["skipped"]
            if done and done % 10 == 0:
                logger.info("%d articles migrated", done)

    logger.info(
        "Migration finished: %d migrated, %d failed, %d skipped",
        stats["migrated"],
        stats["failed"],
        stats["skipped"],
    )
    return stats


def find_orphaned_keys(repository: ArticleRepository, content_store: ContentStore) -> List[str]:
    """Content keys present in the store that no article references."""
    referenced = repository.referenced_content_keys()
    return [key for key in content_store.list_keys() if key not in referenced]


def sweep_orphaned_blobs(
    repository: ArticleRepository,
    content_store: ContentStore,
    dry_run: bool = True,
) -> List[str]:
    """
    Delete blobs left behind by failed metadata writes.

    Run it while no crawl cycle is active: a blob uploaded by an in-flight
    cycle is unreferenced until its metadata row is inserted.

    Returns:
        Orphaned keys (deleted unless dry_run)
    """
    orphans = find_orphaned_keys(repository, content_store)
    logger.info("Found %d orphaned blobs", len(orphans))

    if dry_run:
        return orphans

    deleted = []
    for key in orphans:
        try:
            content_store.delete(key)
        except ContentStoreError as e:
            logger.error("Could not delete orphaned blob %s: %s", key, e)
            continue
        deleted.append(key)
    return deleted
