"""Tests for legacy migration and orphan reclamation."""

from newswatch.exceptions import ContentStoreError
from newswatch.pipeline import find_orphaned_keys, migrate_legacy_content, sweep_orphaned_blobs


class TestMigrateLegacyContent:
    """Tests for migrate_legacy_content."""

    def test_moves_inline_bodies(self, repository, content_store) -> None:
        body = "word " * 100
        article = repository.add(url="https://example.com/old", title="Old", content=body)

        stats = migrate_legacy_content(repository, content_store, excerpt_length=20)

        assert stats == {"migrated": 1, "failed": 0, "skipped": 0}
        migrated = repository.get_by_id(article.id)
        assert migrated.content == body[:20] + "..."
        assert content_store.get_text(migrated.content_key) == body

    def test_upload_failure_keeps_body(self, repository, content_store) -> None:
        article = repository.add(url="https://example.com/old", title="Old", content="Body.")
        content_store.fail_puts = True

        stats = migrate_legacy_content(repository, content_store)

        assert stats == {"migrated": 0, "failed": 1, "skipped": 0}
        unchanged = repository.get_by_id(article.id)
        assert unchanged.content == "Body."
        assert unchanged.content_key is None

    def test_batches_and_limit(self, repository, content_store) -> None:
        for i in range(5):
            repository.add(url=f"https://example.com/{i}", title=f"Story {i}", content="Body.")

        stats = migrate_legacy_content(repository, content_store, batch_size=2, limit=3)

        assert stats["migrated"] == 3
        assert len(repository.list_legacy()) == 2

    def test_already_migrated_row_skipped(self, repository, content_store) -> None:
        article = repository.add(url="https://example.com/old", title="Old", content="Body.")
        repository.list_legacy = lambda limit=100: [article]
        repository.attach_content_key(article.id, "articles/example/other.txt", "Body.")

        stats = migrate_legacy_content(repository, content_store, limit=1)

        assert stats["skipped"] == 1
        assert content_store.list_keys() == []


class TestOrphanSweep:
    """Tests for orphan detection and deletion."""

    def test_dry_run_lists_only(self, repository, content_store) -> None:
        referenced = content_store.put_text("kept", "Example")
        repository.add(url="https://example.com/a", title="A", content_key=referenced)
        orphan = content_store.put_text("orphan", "Example")

        assert find_orphaned_keys(repository, content_store) == [orphan]
        assert sweep_orphaned_blobs(repository, content_store) == [orphan]
        assert orphan in content_store.list_keys()

    def test_apply_deletes(self, repository, content_store) -> None:
        referenced = content_store.put_text("kept", "Example")
        repository.add(url="https://example.com/a", title="A", content_key=referenced)
        orphan = content_store.put_text("orphan", "Example")

        deleted = sweep_orphaned_blobs(repository, content_store, dry_run=False)

        assert deleted == [orphan]
        assert content_store.list_keys() == [referenced]

    def test_delete_failure_not_reported(self, repository, content_store) -> None:
        orphan = content_store.put_text("orphan", "Example")

        def refuse(key: str) -> None:
            raise ContentStoreError("permission denied")

        content_store.delete = refuse

        assert sweep_orphaned_blobs(repository, content_store, dry_run=False) == []
        assert orphan in content_store.list_keys()
