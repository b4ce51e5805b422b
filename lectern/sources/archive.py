"""Internet Archive plain-text fetcher."""

from __future__ import annotations

import logging

import requests

from lectern.hardening import RetriesExhaustedError, RetryConfig, retry_with_backoff
from lectern.sources.catalog import DEFAULT_TIMEOUT, SourceError

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_URL = "https://archive.org"


class ArchiveFetchError(SourceError):
    """Raised when an archive text cannot be fetched."""


class ArchiveClient:
    """Fetches the OCR plain text (djvu.txt) for an archive identifier.

    Args:
        session: HTTP session. Defaults to a new requests.Session.
        base_url: Archive root URL.
        timeout: Per-request timeout in seconds.
        retry: Retry configuration for transient failures.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_ARCHIVE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry: RetryConfig | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry = retry or RetryConfig()

    def text_url(self, ia_id: str) -> str:
        return f"{self._base_url}/stream/{ia_id}/{ia_id}_djvu.txt"

    def fetch_text(self, ia_id: str) -> str:
        """Fetch the full plain text of one archive item.

        Args:
            ia_id: Internet Archive identifier.

        Returns:
            Raw document text.

        Raises:
            ArchiveFetchError: On a non-success response or exhausted
                retries.
        """
        if not ia_id:
            raise ArchiveFetchError("Archive identifier is empty")
        try:
            response = retry_with_backoff(
                self._session.get, self._retry, self.text_url(ia_id), timeout=self._timeout
            )
            response.raise_for_status()
        except (requests.RequestException, RetriesExhaustedError) as exc:
            logger.warning("Failed to fetch text for %s: %s", ia_id, exc)
            raise ArchiveFetchError(f"Could not fetch text for {ia_id}") from exc
        return response.text
