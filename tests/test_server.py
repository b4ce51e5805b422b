"""Tests for the Lectern FastAPI server."""

from __future__ import annotations

import random

import pytest
import requests
from fastapi.testclient import TestClient

from conftest import FakeArchive, FakeCatalog
from lectern import server
from lectern.config import ExtractionConfig
from lectern.sampling import SentenceSampler
from lectern.sources.archive import ArchiveFetchError
from lectern.sources.catalog import CatalogError, SearchPage


@pytest.fixture
def client():
    """Test client with settings and sampler reset around each test."""
    saved = dict(server._state)
    server._state["settings"] = ExtractionConfig().to_dict()
    server._state["sampler"] = None
    yield TestClient(server.app)
    server._state.clear()
    server._state.update(saved)


def _configure(catalog, archive) -> None:
    server.configure(SentenceSampler(catalog=catalog, archive=archive, rng=random.Random(3)))


class _BrokenArchive:
    def fetch_text(self, ia_id: str) -> str:
        raise ArchiveFetchError(f"Could not fetch text for {ia_id}")


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestRandomSentences:
    """Test GET /api/random-sentences."""

    def test_success(
        self, client: TestClient, fake_catalog: FakeCatalog, fake_archive: FakeArchive
    ) -> None:
        """Test a successful draw returns sentences and metadata."""
        _configure(fake_catalog, fake_archive)
        response = client.get("/api/random-sentences", params={"subject": "poetry"})
        assert response.status_code == 200
        data = response.json()
        assert len(data["sentences"]) == 2
        assert data["sentences"][0]["book"] == "The Quiet Voyage"
        assert data["search_metadata"]["subject"] == "poetry"
        assert data["search_metadata"]["books_failed"] == 2
        assert fake_catalog.calls[0]["subject"] == "poetry"

    def test_no_books_is_404(self, client: TestClient, fake_archive: FakeArchive) -> None:
        """Test an empty search maps to 404 with metadata."""
        _configure(FakeCatalog(page=SearchPage(docs=[], num_found=0)), fake_archive)
        response = client.get("/api/random-sentences")
        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error"] == "No books with full text found"
        assert detail["search_metadata"]["total_books_found"] == 0

    def test_no_sentences_is_500(self, client: TestClient, search_page: SearchPage) -> None:
        """Test a run with no sentences maps to 500 with metadata."""
        _configure(FakeCatalog(page=search_page), FakeArchive({}))
        response = client.get("/api/random-sentences")
        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Could not extract sentences from books"
        assert detail["search_metadata"]["books_processed"] == 3

    def test_catalog_failure_is_500(self, client: TestClient, fake_archive: FakeArchive) -> None:
        """Test a catalog failure returns a formatted error without internals."""
        error = CatalogError("Catalog search for 'fiction' failed")
        error.__cause__ = requests.ConnectionError("connection refused")
        _configure(FakeCatalog(error=error), fake_archive)
        response = client.get("/api/random-sentences")
        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to fetch random sentences"
        assert detail["component"] == "catalog"
        assert detail["error_code"] == "SRCH_003"
        assert "technical_detail" not in detail

    def test_malformed_catalog_response_is_500(
        self, client: TestClient, fake_archive: FakeArchive
    ) -> None:
        """Test an unreadable catalog body is reported as a data error."""
        error = CatalogError("Catalog search for 'fiction' failed")
        error.__cause__ = TypeError("'int' object is not iterable")
        _configure(FakeCatalog(error=error), fake_archive)
        response = client.get("/api/random-sentences")
        assert response.status_code == 500
        assert response.json()["detail"]["error_code"] == "SRCH_004"

    def test_all_fetches_fail(self, client: TestClient, search_page: SearchPage) -> None:
        """Test archive failures on every book are a no-sentences outcome."""
        _configure(FakeCatalog(page=search_page), _BrokenArchive())
        response = client.get("/api/random-sentences")
        assert response.status_code == 500
        assert response.json()["detail"]["search_metadata"]["books_failed"] == 3


class TestExtract:
    """Test POST /api/extract."""

    def test_extract(self, client: TestClient, book_text: str) -> None:
        """Test extraction with the default settings."""
        response = client.post("/api/extract", json={"text": book_text})
        assert response.status_code == 200
        data = response.json()
        assert len(data["sentences"]) == 29
        assert data["verdict"]["accepted"] is True
        assert data["verdict"]["mode"] == "strict"
        assert data["total_lines"] == 34
        assert data["log"] is None

    def test_extract_with_log(self, client: TestClient, book_text: str) -> None:
        """Test the filter log can be requested."""
        response = client.post("/api/extract", json={"text": book_text, "include_log": True})
        log = response.json()["log"]
        assert log["stage"] == "pipeline"
        assert len(log["entries"]) == 5

    def test_gate_rejects(self, client: TestClient, cyrillic_text: str) -> None:
        """Test a non-English document comes back with no sentences."""
        response = client.post("/api/extract", json={"text": cyrillic_text})
        assert response.status_code == 200
        data = response.json()
        assert data["sentences"] == []
        assert data["verdict"]["accepted"] is False

    def test_skip_gate(self, client: TestClient, book_text: str) -> None:
        """Test the gate can be bypassed."""
        response = client.post("/api/extract", json={"text": book_text, "skip_gate": True})
        data = response.json()
        assert len(data["sentences"]) == 29
        assert data["verdict"]["reason"] == "Gate skipped"

    def test_variant_override(self, client: TestClient, narrative_lines: list[str]) -> None:
        """Test the request variant overrides the settings."""
        text = "\n".join(
            [narrative_lines[0], ".nav-menu { display: flex; margin: 10px; }", narrative_lines[1]]
        )
        strict = client.post("/api/extract", json={"text": text}).json()
        lenient = client.post("/api/extract", json={"text": text, "variant": "lenient"}).json()
        assert len(strict["sentences"]) == 2
        assert len(lenient["sentences"]) == 1

    def test_invalid_variant(self, client: TestClient) -> None:
        """Test an unknown variant is a validation error."""
        response = client.post("/api/extract", json={"text": "x", "variant": "bogus"})
        assert response.status_code == 422

    def test_missing_text(self, client: TestClient) -> None:
        """Test text is required."""
        assert client.post("/api/extract", json={}).status_code == 422


class TestSettings:
    """Test GET/PUT /api/settings."""

    def test_get_defaults(self, client: TestClient) -> None:
        data = client.get("/api/settings").json()
        assert data["variant"] == "markup_aware"
        assert data["gate_mode"] == "strict"
        assert data["min_length"] == 15

    def test_update(self, client: TestClient) -> None:
        """Test a partial update merges into the current settings."""
        response = client.put("/api/settings", json={"variant": "lenient", "min_length": 20})
        assert response.status_code == 200
        data = response.json()
        assert data["variant"] == "lenient"
        assert data["min_length"] == 20
        assert data["max_length"] == 600
        assert client.get("/api/settings").json()["variant"] == "lenient"

    def test_update_applies_to_extract(self, client: TestClient, book_text: str) -> None:
        """Test updated settings drive later extraction."""
        client.put("/api/settings", json={"min_length": 70})
        sentences = client.post("/api/extract", json={"text": book_text}).json()["sentences"]
        assert sentences
        assert all(len(s) >= 70 for s in sentences)

    def test_invalid_update_rejected(self, client: TestClient) -> None:
        """Test invalid values return 422 and leave settings untouched."""
        response = client.put("/api/settings", json={"min_length": 50, "max_length": 10})
        assert response.status_code == 422
        assert client.get("/api/settings").json()["min_length"] == 15

    def test_bare_string_word_list_rejected(self, client: TestClient) -> None:
        """Test a single string for common_words is not split into letters."""
        response = client.put("/api/settings", json={"common_words": "the"})
        assert response.status_code == 422
        assert len(client.get("/api/settings").json()["common_words"]) == 15

    def test_unknown_keys_ignored(self, client: TestClient) -> None:
        response = client.put("/api/settings", json={"theme": "dark"})
        assert response.status_code == 200
        assert "theme" not in response.json()
