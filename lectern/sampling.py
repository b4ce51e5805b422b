"""Random sentence sampling across catalog books.

Picks a random subject and result offset, screens the hits for English
metadata, fetches a handful of book texts, and draws a few accepted
sentences from each. A failure on one book never aborts the batch.

Example::

    sampler = SentenceSampler()
    result = sampler.sample()
    for s in result.sentences:
        print(f"{s.text} -- {s.book}, {s.author}")
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lectern.config import ExtractionConfig
from lectern.extraction.pipeline import SentencePipeline
from lectern.sources.archive import ArchiveClient
from lectern.sources.catalog import (
    BookRecord,
    OpenLibraryClient,
    SourceError,
    has_english_metadata,
)

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS: tuple[str, ...] = ("fiction", "poetry", "adventure", "mystery", "drama")


# ===================================================================
# Exceptions
# ===================================================================


class SamplingError(Exception):
    """Base error for sampling runs that produce nothing to show.

    Attributes:
        metadata: Search metadata gathered before the run gave up.
    """

    def __init__(self, message: str, metadata: SearchMetadata) -> None:
        super().__init__(message)
        self.metadata = metadata


class NoBooksFoundError(SamplingError):
    """Raised when no search hit has English full text."""


class NoSentencesError(SamplingError):
    """Raised when no selected book yielded a sentence."""


# ===================================================================
# Data model
# ===================================================================


class BookStatus(str, Enum):
    """Outcome of processing one book."""

    SUCCESS = "success"
    FAILED = "failed"
    NO_SENTENCES = "no_sentences"


@dataclass
class SamplerConfig:
    """Configuration for a sampling run.

    Attributes:
        subjects: Catalog subjects to choose from.
        books_per_request: Books selected per run.
        sentences_per_book: Sentences drawn from each successful book.
        search_limit: Catalog results requested.
        max_offset: Upper bound (exclusive) for the random result offset.
        sentences_per_page: Rough sentences-per-page for position estimates.
        language: Catalog language filter.
    """

    subjects: tuple[str, ...] = DEFAULT_SUBJECTS
    books_per_request: int = 6
    sentences_per_book: int = 2
    search_limit: int = 200
    max_offset: int = 1000
    sentences_per_page: int = 20
    language: str = "eng"


@dataclass
class BookDetail:
    """Per-book processing record."""

    title: str
    author: str
    ia_id: str
    status: BookStatus = BookStatus.FAILED
    sentences_found: int = 0
    text_length: int = 0
    position_in_book: str = "Unknown"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "title": self.title,
            "author": self.author,
            "ia_id": self.ia_id,
            "status": self.status.value,
            "sentences_found": self.sentences_found,
            "text_length": self.text_length,
            "position_in_book": self.position_in_book,
        }


@dataclass
class SearchMetadata:
    """Counters and per-book details for one sampling run."""

    subject: str
    total_books_available: int = 0
    total_books_found: int = 0
    books_with_internet_archive: int = 0
    books_selected: int = 0
    books_processed: int = 0
    books_successful: int = 0
    books_failed: int = 0
    total_sentences_extracted: int = 0
    book_details: list[BookDetail] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Fraction of processed books that yielded sentences."""
        if self.books_processed == 0:
            return 0.0
        return self.books_successful / self.books_processed

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "subject": self.subject,
            "total_books_available": self.total_books_available,
            "total_books_found": self.total_books_found,
            "books_with_internet_archive": self.books_with_internet_archive,
            "books_selected": self.books_selected,
            "books_processed": self.books_processed,
            "books_successful": self.books_successful,
            "books_failed": self.books_failed,
            "total_sentences_extracted": self.total_sentences_extracted,
            "success_rate": round(self.success_rate, 4),
            "book_details": [d.to_dict() for d in self.book_details],
        }


@dataclass
class SampledSentence:
    """A sentence with its source attribution."""

    text: str
    book: str
    author: str
    ia_id: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to dictionary."""
        return {
            "text": self.text,
            "book": self.book,
            "author": self.author,
            "ia_id": self.ia_id,
        }


@dataclass
class SampleResult:
    """Sentences drawn in one run plus the metadata behind them."""

    sentences: list[SampledSentence]
    metadata: SearchMetadata

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "sentences": [s.to_dict() for s in self.sentences],
            "search_metadata": self.metadata.to_dict(),
        }


# ===================================================================
# Sampler
# ===================================================================


class SentenceSampler:
    """Draws random sentences from random catalog books.

    Args:
        catalog: Catalog client. Defaults to OpenLibraryClient().
        archive: Archive client. Defaults to ArchiveClient().
        config: Extraction configuration for the sentence pipeline.
        sampler_config: Sampling configuration.
        rng: Random source. Defaults to a new random.Random().
    """

    def __init__(
        self,
        catalog: OpenLibraryClient | None = None,
        archive: ArchiveClient | None = None,
        config: ExtractionConfig | None = None,
        sampler_config: SamplerConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog or OpenLibraryClient()
        self._archive = archive or ArchiveClient()
        self._pipeline = SentencePipeline(config)
        self._config = sampler_config or SamplerConfig()
        self._rng = rng or random.Random()

    def sample(self, subject: str | None = None) -> SampleResult:
        """Run one sampling pass.

        Args:
            subject: Catalog subject. Chosen at random when None.

        Returns:
            SampleResult with sentences and metadata.

        Raises:
            CatalogError: If the catalog search fails.
            NoBooksFoundError: If no hit has English full text.
            NoSentencesError: If no selected book yielded a sentence.
        """
        subject = subject or self._rng.choice(self._config.subjects)
        offset = self._rng.randrange(self._config.max_offset) if self._config.max_offset > 0 else 0

        page = self._catalog.search(
            subject,
            offset=offset,
            limit=self._config.search_limit,
            language=self._config.language,
        )
        candidates = [book for book in page.docs if has_english_metadata(book)]

        metadata = SearchMetadata(
            subject=subject,
            total_books_available=page.num_found,
            total_books_found=len(page.docs),
            books_with_internet_archive=len(candidates),
        )
        if not candidates:
            raise NoBooksFoundError("No books with full text found", metadata)

        selected = self._rng.sample(
            candidates, min(self._config.books_per_request, len(candidates))
        )
        metadata.books_selected = len(selected)

        sentences: list[SampledSentence] = []
        for book in selected:
            metadata.books_processed += 1
            detail = self._process_book(book, sentences)
            metadata.book_details.append(detail)
            if detail.status == BookStatus.SUCCESS:
                metadata.books_successful += 1
                metadata.total_sentences_extracted += detail.sentences_found
            else:
                metadata.books_failed += 1

        if not sentences:
            raise NoSentencesError("Could not extract sentences from books", metadata)
        return SampleResult(sentences=sentences, metadata=metadata)

    def _process_book(self, book: BookRecord, sink: list[SampledSentence]) -> BookDetail:
        """Fetch, gate, and extract one book, appending drawn sentences to sink."""
        ia_id = book.primary_ia_id or ""
        detail = BookDetail(title=book.title, author=book.primary_author, ia_id=ia_id)

        try:
            text = self._archive.fetch_text(ia_id)
        except SourceError as exc:
            logger.info("Skipping %s: %s", book.title, exc)
            return detail
        detail.text_length = len(text)

        result = self._pipeline.process(text)
        if not result.verdict.accepted:
            logger.info("Skipping %s: %s", book.title, result.verdict.reason)
            detail.status = BookStatus.NO_SENTENCES
            return detail
        if not result.sentences:
            logger.info("No sentences extracted from %s", book.title)
            detail.status = BookStatus.NO_SENTENCES
            return detail

        detail.position_in_book = self._estimate_position(len(result.sentences))
        drawn = self._rng.sample(
            result.sentences, min(self._config.sentences_per_book, len(result.sentences))
        )
        sink.extend(
            SampledSentence(text=s, book=book.title, author=book.primary_author, ia_id=ia_id)
            for s in drawn
        )
        detail.sentences_found = len(drawn)
        detail.status = BookStatus.SUCCESS
        return detail

    def _estimate_position(self, sentence_count: int) -> str:
        """Rough "Page N of ~M" label for display."""
        pages = max(1, math.ceil(sentence_count / self._config.sentences_per_page))
        return f"Page {self._rng.randint(1, pages)} of ~{pages}"
