"""
Pytest configuration and fixtures for Lectern tests.
"""

from __future__ import annotations

import random

import pytest

from lectern.sources.archive import ArchiveFetchError
from lectern.sources.catalog import BookRecord, CatalogError, SearchPage

# Each line is one presentable sentence carrying at least five common
# English function words, so any strict-mode sample window passes.
NARRATIVE_LINES = [
    "The ship left the harbour at dawn with a full crew and it was cold.",
    "It was a grey morning and the wind came hard from the north as they sailed.",
    "Captain Rowe stood on the deck with his hands in the pockets of a long coat.",
    "Nobody spoke of the storm that had kept them in port for a week.",
    "The cook brought hot tea to the men and it was gone in a moment.",
    "By noon the coast was a thin dark line that lay on the water behind them.",
    "A gull followed the ship for an hour and then turned back to the land.",
    "The young sailor asked if it was always so quiet on the sea in a calm spring.",
    "Rowe laughed and told him to wait for the night watch on the open sea.",
    "When the sun went down it was as if the stars came out of the water.",
]

FRONT_MATTER_LINES = [
    "The Project Gutenberg EBook of The Quiet Voyage",
    "Copyright 1911 by the Estate of the Author",
    "All rights reserved",
    "CONTENTS",
]

CYRILLIC_LINE = "Это был лучший из времён и худший из времён для всех нас в городе."


class FakeCatalog:
    """Catalog stand-in returning a fixed page or raising a fixed error."""

    def __init__(
        self,
        page: SearchPage | None = None,
        error: Exception | None = None,
    ) -> None:
        self._page = page or SearchPage(docs=[], num_found=0)
        self._error = error
        self.calls: list[dict[str, object]] = []

    def search(
        self,
        subject: str,
        offset: int = 0,
        limit: int = 200,
        language: str = "eng",
    ) -> SearchPage:
        self.calls.append(
            {"subject": subject, "offset": offset, "limit": limit, "language": language}
        )
        if self._error is not None:
            raise self._error
        return self._page


class FakeArchive:
    """Archive stand-in serving texts from a dict."""

    def __init__(self, texts: dict[str, str]) -> None:
        self._texts = texts
        self.fetched: list[str] = []

    def fetch_text(self, ia_id: str) -> str:
        self.fetched.append(ia_id)
        if ia_id not in self._texts:
            raise ArchiveFetchError(f"Could not fetch text for {ia_id}")
        return self._texts[ia_id]


def _book(title: str, ia_id: str, language: list[str]) -> BookRecord:
    return BookRecord(
        key=f"/works/{ia_id}",
        title=title,
        author_name=[f"{title} Author"],
        ia=[ia_id],
        language=language,
    )


@pytest.fixture
def narrative_lines() -> list[str]:
    """Presentable narrative sentences, one per line."""
    return list(NARRATIVE_LINES)


@pytest.fixture
def book_text() -> str:
    """A short book: front matter followed by three passes of narrative."""
    return "\n".join(FRONT_MATTER_LINES + NARRATIVE_LINES * 3)


@pytest.fixture
def cyrillic_text() -> str:
    """A long non-English document."""
    return "\n".join([CYRILLIC_LINE] * 40)


@pytest.fixture
def search_page() -> SearchPage:
    """Search hits: two English books, one Russian, one unreadable."""
    return SearchPage(
        docs=[
            _book("The Quiet Voyage", "voyage01", ["eng"]),
            _book("Lost Pages", "missing01", ["eng"]),
            _book("Russian Tales", "ru01", ["rus"]),
            _book("Mislabelled Book", "cyr01", ["eng"]),
        ],
        num_found=1234,
    )


@pytest.fixture
def fake_catalog(search_page: SearchPage) -> FakeCatalog:
    return FakeCatalog(page=search_page)


@pytest.fixture
def fake_archive(book_text: str, cyrillic_text: str) -> FakeArchive:
    return FakeArchive({"voyage01": book_text, "cyr01": cyrillic_text})


@pytest.fixture
def failing_catalog() -> FakeCatalog:
    return FakeCatalog(error=CatalogError("Catalog search for 'fiction' failed"))


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible sampling."""
    return random.Random(42)
