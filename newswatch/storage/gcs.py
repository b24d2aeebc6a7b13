"""Google Cloud Storage backed content store."""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as gax_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage
from requests import exceptions as requests_exceptions

from ..exceptions import ContentStoreError
from .base import make_content_key

logger = logging.getLogger(__name__)

# API errors, credential failures and transport faults from the HTTP layer
STORE_ERRORS = (
    gax_exceptions.GoogleAPIError,
    auth_exceptions.GoogleAuthError,
    requests_exceptions.RequestException,
)


class GCSContentStore:
    """Store article bodies as text blobs in a GCS bucket."""

    def __init__(
        self,
        bucket: str,
        key_prefix: str = "articles",
        project: Optional[str] = None,
        client: Optional[storage.Client] = None,
    ) -> None:
        """Initialize content store. The client is created lazily."""
        self.bucket_name = bucket
        self.key_prefix = key_prefix.strip("/")
        self.project = project
        self._client = client

    @classmethod
    def from_config(cls, storage_config: Dict[str, Any]) -> "GCSContentStore":
        """Build a store from a resolved storage config dict."""
        return cls(
            bucket=storage_config["bucket"],
            key_prefix=storage_config.get("key_prefix", "articles"),
            project=storage_config.get("project"),
        )

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client(project=self.project)
        return self._client

    def _blob(self, key: str) -> storage.Blob:
        return self.client.bucket(self.bucket_name).blob(key)

    def put_text(self, text: str, source: str) -> str:
        """Upload text and return the new content key."""
        key = make_content_key(self.key_prefix, source)
        try:
            self._blob(key).upload_from_string(
                text.encode("utf-8"), content_type="text/plain; charset=utf-8"
            )
        except STORE_ERRORS as e:
            raise ContentStoreError(f"Upload of {key} failed: {e}") from e

        logger.debug("Uploaded content to gs://%s/%s", self.bucket_name, key)
        return key

    def get_text(self, key: str) -> str:
        """Download the text stored under key."""
        try:
            return self._blob(key).download_as_bytes().decode("utf-8")
        except gax_exceptions.NotFound as e:
            raise ContentStoreError(f"Content not found: {key}") from e
        except STORE_ERRORS as e:
            raise ContentStoreError(f"Download of {key} failed: {e}") from e

    def signed_url(self, key: str, expires_in: int = 3600) -> str:
        """Generate a V4 signed GET URL valid for expires_in seconds."""
        try:
            return self._blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in),
                method="GET",
            )
        except STORE_ERRORS + (AttributeError,) as e:
            # AttributeError: credentials without a signing key
            raise ContentStoreError(f"Could not sign URL for {key}: {e}") from e

    def delete(self, key: str) -> None:
        """Delete the blob stored under key. Missing blobs are ignored."""
        try:
            self._blob(key).delete()
        except gax_exceptions.NotFound:
            logger.debug("Blob already absent: %s", key)
        except STORE_ERRORS as e:
            raise ContentStoreError(f"Delete of {key} failed: {e}") from e
        else:
            logger.info("Deleted content gs://%s/%s", self.bucket_name, key)

    def list_keys(self) -> List[str]:
        """List every key under the configured prefix."""
        try:
            return [
                blob.name
                for blob in self.client.list_blobs(self.bucket_name, prefix=f"{self.key_prefix}/")
            ]
        except STORE_ERRORS as e:
            raise ContentStoreError(f"Listing gs://{self.bucket_name} failed: {e}") from e
