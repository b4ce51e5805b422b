"""Remote sources: the OpenLibrary catalog and Internet Archive texts."""

from lectern.sources.archive import ArchiveClient, ArchiveFetchError
from lectern.sources.catalog import (
    BookRecord,
    CatalogError,
    OpenLibraryClient,
    SearchPage,
    SourceError,
    has_english_metadata,
)

__all__ = [
    "ArchiveClient",
    "ArchiveFetchError",
    "BookRecord",
    "CatalogError",
    "OpenLibraryClient",
    "SearchPage",
    "SourceError",
    "has_english_metadata",
]
