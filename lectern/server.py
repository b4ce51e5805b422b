"""FastAPI server for Lectern.

Serves random sentence samples drawn from Internet Archive books, an
on-demand extraction endpoint for arbitrary text, and the extraction
settings. Endpoints are registered on an ``APIRouter`` so a parent
application can mount them; the standalone ``app`` includes the router
directly::

    uvicorn lectern.server:app --reload --port 8430
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from lectern import __version__
from lectern.config import ExtractionConfig, FilterVariant, GateMode
from lectern.extraction.pipeline import SentencePipeline
from lectern.hardening import ErrorFormatter
from lectern.sampling import NoBooksFoundError, NoSentencesError, SentenceSampler
from lectern.sources.catalog import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter()

app = FastAPI(
    title="Lectern API",
    description="Random presentable sentences from public-domain books",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory state. "sampler" is None until configure() injects one; a
# fresh sampler using the current settings is built per request otherwise.
_state: dict[str, Any] = {
    "settings": ExtractionConfig().to_dict(),
    "sampler": None,
}

_formatter = ErrorFormatter()


# ============================================================================
# Pydantic Models for API
# ============================================================================


class ExtractRequest(BaseModel):
    """Request model for extracting sentences from supplied text."""

    text: str
    variant: FilterVariant | None = None
    gate_mode: GateMode | None = None
    include_log: bool = False
    skip_gate: bool = False


class ExtractResponse(BaseModel):
    """Response model for the extraction endpoint."""

    sentences: list[str]
    verdict: dict[str, Any]
    total_lines: int = 0
    kept_lines: int = 0
    candidate_count: int = 0
    rejected_count: int = 0
    log: dict[str, Any] | None = None


class HealthResponse(BaseModel):
    status: str
    version: str


# ============================================================================
# State helpers
# ============================================================================


def configure(sampler: SentenceSampler | None = None) -> None:
    """Inject a sampler, e.g. one wired to alternate clients.

    Args:
        sampler: Sampler to use for every request, or None to build one
            from the current settings per request.
    """
    _state["sampler"] = sampler


def current_config() -> ExtractionConfig:
    """Return the extraction config built from the current settings."""
    return ExtractionConfig.from_dict(_state["settings"])


def get_sampler() -> SentenceSampler:
    sampler = _state.get("sampler")
    if sampler is None:
        sampler = SentenceSampler(config=current_config())
    return sampler


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@router.get("/api/random-sentences")
def random_sentences(subject: str | None = None) -> dict[str, Any]:
    """Draw random sentences from random catalog books.

    Args:
        subject: Optional catalog subject; random when omitted.
    """
    try:
        result = get_sampler().sample(subject)
    except NoBooksFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail={"error": str(exc), "search_metadata": exc.metadata.to_dict()},
        ) from exc
    except NoSentencesError as exc:
        raise HTTPException(
            status_code=500,
            detail={"error": str(exc), "search_metadata": exc.metadata.to_dict()},
        ) from exc
    except CatalogError as exc:
        logger.warning("Random sentence request failed: %s", exc)
        cause = exc.__cause__ if isinstance(exc.__cause__, Exception) else exc
        formatted = _formatter.format_search_error(cause)
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to fetch random sentences", **formatted.to_dict()},
        ) from exc

    return result.to_dict()


@router.post("/api/extract", response_model=ExtractResponse)
def extract(request: ExtractRequest) -> dict[str, Any]:
    """Extract accepted sentences from supplied raw text.

    Variant and gate mode default to the current settings.
    """
    settings = dict(_state["settings"])
    if request.variant is not None:
        settings["variant"] = request.variant.value
    if request.gate_mode is not None:
        settings["gate_mode"] = request.gate_mode.value
    pipeline = SentencePipeline(ExtractionConfig.from_dict(settings))

    if request.skip_gate:
        sentences = pipeline.extract(request.text)
        verdict = {"accepted": True, "mode": None, "reason": "Gate skipped"}
        return {"sentences": sentences, "verdict": verdict}

    result = pipeline.process(request.text)
    return result.to_dict(include_log=request.include_log)


@router.get("/api/settings")
async def get_settings() -> dict[str, Any]:
    """Get the current extraction settings."""
    return _state["settings"]


@router.put("/api/settings")
async def update_settings(updates: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Update extraction settings; unknown keys are ignored.

    Raises:
        HTTPException: 422 if the merged settings are invalid.
    """
    merged = {**_state["settings"], **updates}
    try:
        config = ExtractionConfig.from_dict(merged)
    except (ValueError, TypeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _state["settings"] = config.to_dict()
    return _state["settings"]


app.include_router(router)


def run_server(host: str = "127.0.0.1", port: int = 8430) -> None:
    """Start the Lectern server via uvicorn.

    Args:
        host: Bind address. Defaults to localhost.
        port: Port number.
    """
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    run_server()
