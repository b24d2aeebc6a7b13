"""Tests for the GCS content store."""

import re
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gax_exceptions
from google.auth import exceptions as auth_exceptions
from requests import exceptions as requests_exceptions

from conftest import make_candidate

from newswatch.exceptions import ContentStoreError
from newswatch.models import GeopoliticalTags
from newswatch.pipeline import ArticlePersister, PersistOutcome, migrate_legacy_content
from newswatch.storage import GCSContentStore, make_content_key, slugify_source


class TestContentKeys:
    """Tests for key generation."""

    def test_slugify(self) -> None:
        assert slugify_source("BBC World") == "bbc-world"
        assert slugify_source("Al Jazeera!") == "al-jazeera"
        assert slugify_source("???") == "unknown"

    def test_key_shape(self) -> None:
        key = make_content_key("articles", "The Guardian")
        assert re.fullmatch(r"articles/the-guardian/[0-9a-f-]{36}-\d+\.txt", key)

    def test_keys_unique(self) -> None:
        assert make_content_key("articles", "X") != make_content_key("articles", "X")


class TestGCSContentStore:
    """Tests for GCSContentStore against a mocked client."""

    @pytest.fixture
    def blob(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def client(self, blob) -> MagicMock:
        client = MagicMock()
        client.bucket.return_value.blob.return_value = blob
        return client

    @pytest.fixture
    def store(self, client) -> GCSContentStore:
        return GCSContentStore(bucket="news-bodies", key_prefix="articles/", client=client)

    def test_put_text(self, store, client, blob) -> None:
        key = store.put_text("Body text", "AP News")

        assert key.startswith("articles/ap-news/")
        client.bucket.assert_called_with("news-bodies")
        blob.upload_from_string.assert_called_once_with(
            b"Body text", content_type="text/plain; charset=utf-8"
        )

    def test_put_text_failure(self, store, blob) -> None:
        blob.upload_from_string.side_effect = gax_exceptions.ServiceUnavailable("down")
        with pytest.raises(ContentStoreError):
            store.put_text("Body text", "AP News")

    def test_get_text(self, store, blob) -> None:
        blob.download_as_bytes.return_value = "Grüße".encode("utf-8")
        assert store.get_text("articles/x/1.txt") == "Grüße"

    def test_get_missing(self, store, blob) -> None:
        blob.download_as_bytes.side_effect = gax_exceptions.NotFound("gone")
        with pytest.raises(ContentStoreError):
            store.get_text("articles/x/1.txt")

    def test_signed_url(self, store, blob) -> None:
        blob.generate_signed_url.return_value = "https://signed.example.com/x"

        assert store.signed_url("articles/x/1.txt", 600) == "https://signed.example.com/x"
        blob.generate_signed_url.assert_called_once_with(
            version="v4", expiration=timedelta(seconds=600), method="GET"
        )

    def test_delete_missing_ignored(self, store, blob) -> None:
        blob.delete.side_effect = gax_exceptions.NotFound("gone")
        store.delete("articles/x/1.txt")

    def test_list_keys(self, store, client) -> None:
        first, second = MagicMock(), MagicMock()
        first.name = "articles/x/1.txt"
        second.name = "articles/y/2.txt"
        client.list_blobs.return_value = [first, second]

        assert store.list_keys() == ["articles/x/1.txt", "articles/y/2.txt"]
        client.list_blobs.assert_called_once_with("news-bodies", prefix="articles/")

    def test_connection_reset_wrapped(self, store, blob) -> None:
        blob.upload_from_string.side_effect = requests_exceptions.ConnectionError("connection reset")
        with pytest.raises(ContentStoreError):
            store.put_text("Body text", "AP News")

    def test_credential_failure_wrapped(self, store, blob) -> None:
        blob.download_as_bytes.side_effect = auth_exceptions.RefreshError("token expired")
        with pytest.raises(ContentStoreError):
            store.get_text("articles/x/1.txt")

    def test_missing_default_credentials_wrapped(self, monkeypatch) -> None:
        def no_credentials(*args, **kwargs):
            raise auth_exceptions.DefaultCredentialsError("no ADC")

        monkeypatch.setattr("newswatch.storage.gcs.storage.Client", no_credentials)
        store = GCSContentStore(bucket="news-bodies")

        with pytest.raises(ContentStoreError):
            store.list_keys()

    def test_transport_errors_on_delete_and_sign(self, store, blob) -> None:
        blob.delete.side_effect = requests_exceptions.Timeout("read timed out")
        blob.generate_signed_url.side_effect = auth_exceptions.TransportError("metadata server")

        with pytest.raises(ContentStoreError):
            store.delete("articles/x/1.txt")
        with pytest.raises(ContentStoreError):
            store.signed_url("articles/x/1.txt")


class TestTransportFaultsDownstream:
    """Network faults in the store surface as content failures, not crashes."""

    @pytest.fixture
    def store(self) -> GCSContentStore:
        client = MagicMock()
        blob = client.bucket.return_value.blob.return_value
        blob.upload_from_string.side_effect = requests_exceptions.ConnectionError("connection reset")
        return GCSContentStore(bucket="news-bodies", client=client)

    def test_persist_reports_content_failure(self, repository, store) -> None:
        persister = ArticlePersister(repository, store)

        outcome = persister.persist(
            make_candidate("https://example.com/a"),
            GeopoliticalTags(),
            datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

        assert outcome == PersistOutcome.CONTENT_FAILED
        assert repository.list_all() == []

    def test_migration_counts_each_row(self, repository, store) -> None:
        for i in range(3):
            repository.add(url=f"https://example.com/{i}", title=f"Story {i}", content="Body.")

        stats = migrate_legacy_content(repository, store)

        assert stats == {"migrated": 0, "failed": 3, "skipped": 0}
        assert len(repository.list_legacy()) == 3
