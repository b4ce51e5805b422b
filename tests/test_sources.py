"""Tests for the catalog and archive clients."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from lectern.hardening import RetryConfig
from lectern.sources.archive import ArchiveClient, ArchiveFetchError
from lectern.sources.catalog import (
    BookRecord,
    CatalogError,
    OpenLibraryClient,
    SearchPage,
    SourceError,
    has_english_metadata,
)

_NO_WAIT = RetryConfig(max_attempts=2, base_delay=0.0)


def _response(json_data=None, text: str = "", status: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.text = text
    response.json.return_value = json_data
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None
    return response


def _session(*results) -> MagicMock:
    session = MagicMock()
    session.get.side_effect = list(results)
    return session


_SEARCH_JSON = {
    "numFound": 2,
    "docs": [
        {
            "key": "/works/OL1W",
            "title": "The Quiet Voyage",
            "author_name": ["A. Writer", "B. Helper"],
            "ia": ["quietvoyage00"],
            "language": ["eng"],
        },
        {"key": "/works/OL2W", "title": "No Scan"},
    ],
}


# ===================================================================
# Data model
# ===================================================================


class TestBookRecord:
    """Test BookRecord and SearchPage deserialization."""

    def test_from_dict(self) -> None:
        """Test a full search document."""
        book = BookRecord.from_dict(_SEARCH_JSON["docs"][0])
        assert book.title == "The Quiet Voyage"
        assert book.primary_author == "A. Writer"
        assert book.primary_ia_id == "quietvoyage00"
        assert book.language == ["eng"]

    def test_missing_fields(self) -> None:
        """Test defaults for a sparse document."""
        book = BookRecord.from_dict({"key": "/works/OL3W"})
        assert book.title == "Untitled"
        assert book.primary_author == "Unknown Author"
        assert book.primary_ia_id is None
        assert book.language == []

    def test_null_lists(self) -> None:
        """Test null list fields become empty lists."""
        book = BookRecord.from_dict({"key": "k", "title": "t", "ia": None})
        assert book.ia == []

    def test_search_page(self) -> None:
        """Test SearchPage reads numFound and docs."""
        page = SearchPage.from_dict(_SEARCH_JSON)
        assert page.num_found == 2
        assert [b.title for b in page.docs] == ["The Quiet Voyage", "No Scan"]

    def test_search_page_empty(self) -> None:
        """Test an empty response."""
        page = SearchPage.from_dict({})
        assert page.docs == []
        assert page.num_found == 0


class TestHasEnglishMetadata:
    """Test the metadata language screen."""

    @pytest.mark.parametrize(
        ("ia", "language", "expected"),
        [
            (["x"], ["eng"], True),
            (["x"], ["en"], True),
            (["x"], ["English"], True),
            (["x"], ["ENG"], True),
            ([], ["eng"], False),
            (["x"], [], False),
            (["x"], ["fre"], False),
            (["x"], ["eng", "rus"], False),
            (["x"], ["eng", "lat"], False),
            (["x"], ["ger"], False),
        ],
    )
    def test_screen(self, ia: list[str], language: list[str], expected: bool) -> None:
        """Test archive id and language requirements."""
        book = BookRecord(key="k", title="t", ia=ia, language=language)
        assert has_english_metadata(book) is expected


# ===================================================================
# OpenLibraryClient
# ===================================================================


class TestOpenLibraryClient:
    """Test catalog search requests and error wrapping."""

    def test_search_params(self) -> None:
        """Test the request URL and query parameters."""
        session = _session(_response(_SEARCH_JSON))
        client = OpenLibraryClient(session=session, retry=_NO_WAIT)
        page = client.search("poetry", offset=40, limit=50)

        assert page.num_found == 2
        args, kwargs = session.get.call_args
        assert args[0] == "https://openlibrary.org/search.json"
        assert kwargs["params"] == {
            "subject": "poetry",
            "has_fulltext": "true",
            "language": "eng",
            "limit": 50,
            "offset": 40,
        }
        assert kwargs["timeout"] == 15.0

    def test_base_url_trailing_slash(self) -> None:
        """Test a trailing slash on the base URL is tolerated."""
        session = _session(_response({"docs": []}))
        client = OpenLibraryClient(session=session, base_url="http://mirror.test/")
        client.search("drama")
        assert session.get.call_args[0][0] == "http://mirror.test/search.json"

    def test_http_error(self) -> None:
        """Test a non-success status raises CatalogError."""
        session = _session(_response(status=503))
        client = OpenLibraryClient(session=session, retry=_NO_WAIT)
        with pytest.raises(CatalogError) as exc_info:
            client.search("fiction")
        assert isinstance(exc_info.value.__cause__, requests.HTTPError)
        assert isinstance(exc_info.value, SourceError)

    def test_invalid_json(self) -> None:
        """Test an unreadable body raises CatalogError."""
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        client = OpenLibraryClient(session=_session(response), retry=_NO_WAIT)
        with pytest.raises(CatalogError):
            client.search("fiction")

    def test_null_docs_is_empty_page(self) -> None:
        """Test a null docs field reads as no results."""
        client = OpenLibraryClient(session=_session(_response({"docs": None})), retry=_NO_WAIT)
        page = client.search("fiction")
        assert page.docs == []
        assert page.num_found == 0

    @pytest.mark.parametrize(
        "body",
        [["not", "a", "dict"], "oops", {"docs": ["not a document"]}, {"docs": 7}],
    )
    def test_malformed_body(self, body: object) -> None:
        """Test a body that is not a search result raises CatalogError."""
        client = OpenLibraryClient(session=_session(_response(body)), retry=_NO_WAIT)
        with pytest.raises(CatalogError) as exc_info:
            client.search("fiction")
        assert isinstance(exc_info.value.__cause__, (TypeError, AttributeError))

    def test_retries_transient_failure(self) -> None:
        """Test a connection error is retried and then succeeds."""
        session = _session(requests.ConnectionError("reset"), _response(_SEARCH_JSON))
        client = OpenLibraryClient(session=session, retry=_NO_WAIT)
        page = client.search("mystery")
        assert len(page.docs) == 2
        assert session.get.call_count == 2

    def test_retries_exhausted(self) -> None:
        """Test repeated connection errors surface as CatalogError."""
        session = _session(requests.ConnectionError("a"), requests.ConnectionError("b"))
        client = OpenLibraryClient(session=session, retry=_NO_WAIT)
        with pytest.raises(CatalogError):
            client.search("mystery")
        assert session.get.call_count == 2


# ===================================================================
# ArchiveClient
# ===================================================================


class TestArchiveClient:
    """Test archive text fetching."""

    def test_text_url(self) -> None:
        """Test the djvu text URL layout."""
        client = ArchiveClient(session=MagicMock())
        assert client.text_url("abc00") == "https://archive.org/stream/abc00/abc00_djvu.txt"

    def test_fetch_text(self) -> None:
        """Test the response body is returned as-is."""
        session = _session(_response(text="Once upon a time."))
        client = ArchiveClient(session=session, retry=_NO_WAIT)
        assert client.fetch_text("abc00") == "Once upon a time."
        assert session.get.call_args[1]["timeout"] == 15.0

    def test_empty_id(self) -> None:
        """Test an empty identifier fails without a request."""
        session = MagicMock()
        client = ArchiveClient(session=session)
        with pytest.raises(ArchiveFetchError):
            client.fetch_text("")
        session.get.assert_not_called()

    def test_http_error(self) -> None:
        """Test a 404 raises ArchiveFetchError."""
        client = ArchiveClient(session=_session(_response(status=404)), retry=_NO_WAIT)
        with pytest.raises(ArchiveFetchError):
            client.fetch_text("gone00")

    def test_timeout_exhausted(self) -> None:
        """Test repeated timeouts raise ArchiveFetchError."""
        session = _session(requests.Timeout("slow"), requests.Timeout("slow"))
        client = ArchiveClient(session=session, retry=_NO_WAIT)
        with pytest.raises(ArchiveFetchError):
            client.fetch_text("slow00")
        assert session.get.call_count == 2
