"""OpenLibrary catalog search client.

Finds books with full text in the Internet Archive for a subject, and
screens their language metadata before any text is fetched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from lectern.hardening import RetriesExhaustedError, RetryConfig, retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://openlibrary.org"
DEFAULT_TIMEOUT = 15.0

_ENGLISH_CODES = frozenset({"eng", "en", "english"})

# Matched as substrings of lower-cased language metadata
_NON_ENGLISH_MARKERS = (
    "rus",
    "russian",
    "ger",
    "german",
    "fre",
    "french",
    "spa",
    "spanish",
    "ita",
    "italian",
    "por",
    "portuguese",
    "dut",
    "dutch",
    "pol",
    "polish",
    "chi",
    "chinese",
    "jap",
    "japanese",
    "ara",
    "arabic",
    "lat",
    "latin",
)


class SourceError(Exception):
    """Base error for catalog and archive failures."""


class CatalogError(SourceError):
    """Raised when a catalog search fails or returns unreadable data."""


@dataclass
class BookRecord:
    """One search hit from the catalog.

    Attributes:
        key: Catalog work key (e.g. "/works/OL123W").
        title: Book title.
        author_name: Author names, primary first.
        ia: Internet Archive identifiers.
        language: Language codes from catalog metadata.
        first_sentence: First sentences recorded by the catalog, if any.
    """

    key: str
    title: str
    author_name: list[str] = field(default_factory=list)
    ia: list[str] = field(default_factory=list)
    language: list[str] = field(default_factory=list)
    first_sentence: list[str] = field(default_factory=list)

    @property
    def primary_author(self) -> str:
        return self.author_name[0] if self.author_name else "Unknown Author"

    @property
    def primary_ia_id(self) -> str | None:
        return self.ia[0] if self.ia else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BookRecord:
        """Deserialize a catalog search document."""
        return cls(
            key=data.get("key", ""),
            title=data.get("title", "Untitled"),
            author_name=list(data.get("author_name") or []),
            ia=list(data.get("ia") or []),
            language=list(data.get("language") or []),
            first_sentence=list(data.get("first_sentence") or []),
        )


@dataclass
class SearchPage:
    """One page of catalog search results.

    Attributes:
        docs: Books on this page.
        num_found: Total matches reported by the catalog.
    """

    docs: list[BookRecord]
    num_found: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchPage:
        """Deserialize a catalog search response."""
        return cls(
            docs=[BookRecord.from_dict(d) for d in data.get("docs") or []],
            num_found=data.get("numFound") or data.get("num_found") or 0,
        )


def has_english_metadata(book: BookRecord) -> bool:
    """Check that a book has an archive id and explicitly English metadata.

    Books without language metadata are rejected, as are books that
    also list a common non-English language.
    """
    if not book.ia:
        return False
    if not book.language:
        return False

    languages = [lang.lower() for lang in book.language]
    if not any(lang in _ENGLISH_CODES or "eng" in lang for lang in languages):
        return False
    return not any(
        marker in lang for lang in languages for marker in _NON_ENGLISH_MARKERS
    )


class OpenLibraryClient:
    """Searches the OpenLibrary catalog for books with full text.

    Args:
        session: HTTP session. Defaults to a new requests.Session.
        base_url: Catalog root URL.
        timeout: Per-request timeout in seconds.
        retry: Retry configuration for transient failures.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_CATALOG_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry: RetryConfig | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry = retry or RetryConfig()

    def search(
        self,
        subject: str,
        offset: int = 0,
        limit: int = 200,
        language: str = "eng",
    ) -> SearchPage:
        """Search for books on a subject that have full text.

        Args:
            subject: Catalog subject (e.g. "fiction").
            offset: Result offset.
            limit: Maximum results to return.
            language: Catalog language filter.

        Returns:
            SearchPage of matching books.

        Raises:
            CatalogError: On HTTP failure, exhausted retries, or a
                response that is not a well-formed search result.
        """
        params = {
            "subject": subject,
            "has_fulltext": "true",
            "language": language,
            "limit": limit,
            "offset": offset,
        }
        url = f"{self._base_url}/search.json"
        try:
            response = retry_with_backoff(
                self._session.get, self._retry, url, params=params, timeout=self._timeout
            )
            response.raise_for_status()
            page = SearchPage.from_dict(response.json())
        except (
            requests.RequestException,
            RetriesExhaustedError,
            ValueError,
            TypeError,
            AttributeError,
        ) as exc:
            logger.warning("Catalog search for %r failed: %s", subject, exc)
            raise CatalogError(f"Catalog search for {subject!r} failed") from exc

        logger.info(
            "Catalog search %r offset=%d returned %d of %d books",
            subject,
            offset,
            len(page.docs),
            page.num_found,
        )
        return page
