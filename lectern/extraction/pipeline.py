"""Per-document extraction pipeline.

Composes the language gate, content filter, and sentence extractor.
Each document is processed independently; nothing is carried between
calls, so one pipeline may be shared across threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lectern.config import ExtractionConfig
from lectern.extraction.sentences import ExtractionResult, SentenceExtractor
from lectern.language.gate import LanguageGate, LanguageVerdict
from lectern.qa.filter_log import FilterLog
from lectern.qa.filters import ContentFilter, FilterResult
from lectern.qa.rules import RuleSet


@dataclass
class PipelineResult:
    """Outcome of processing one raw document.

    Attributes:
        verdict: Language gate decision.
        filter_result: Content filter output, or None if the gate rejected.
        extraction: Extractor output, or None if the gate rejected.
    """

    verdict: LanguageVerdict
    filter_result: FilterResult | None = None
    extraction: ExtractionResult | None = None

    @property
    def sentences(self) -> list[str]:
        """Accepted sentences; empty when the document was gated out."""
        if self.extraction is None:
            return []
        return self.extraction.sentences

    @property
    def log(self) -> FilterLog:
        """Combined filter and extractor log."""
        if self.filter_result is None or self.extraction is None:
            return FilterLog(stage="pipeline")
        return self.filter_result.log.merged(self.extraction.log)

    def to_dict(self, include_log: bool = False) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {
            "sentences": self.sentences,
            "verdict": self.verdict.to_dict(),
            "total_lines": self.filter_result.total_lines if self.filter_result else 0,
            "kept_lines": len(self.filter_result.lines) if self.filter_result else 0,
            "candidate_count": self.extraction.candidate_count if self.extraction else 0,
            "rejected_count": self.extraction.rejected_count if self.extraction else 0,
        }
        if include_log:
            data["log"] = self.log.to_dict()
        return data


class SentencePipeline:
    """Raw text in, accepted sentences out.

    Args:
        config: Extraction configuration. Defaults to ExtractionConfig().

    Example::

        pipeline = SentencePipeline()
        result = pipeline.process(raw_text)
        if result.verdict.accepted:
            print(result.sentences)
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        rule_set = RuleSet.for_variant(self.config.variant)
        self._gate = LanguageGate(self.config)
        self._filter = ContentFilter(self.config, rule_set)
        self._extractor = SentenceExtractor(self.config, rule_set)

    def process(self, text: str) -> PipelineResult:
        """Gate, filter, and extract one document.

        Args:
            text: Raw archive text.

        Returns:
            PipelineResult; gated-out documents carry no sentences.
        """
        verdict = self._gate.evaluate(text)
        if not verdict.accepted:
            return PipelineResult(verdict=verdict)
        filtered = self._filter.filter_text(text)
        extraction = self._extractor.extract(filtered.text)
        return PipelineResult(verdict=verdict, filter_result=filtered, extraction=extraction)

    def extract(self, text: str) -> list[str]:
        """Filter and extract without consulting the language gate."""
        return self._extractor.extract_text(self._filter.filter_text(text).text)

    def is_likely_english(self, text: str) -> bool:
        return self._gate.is_likely_english(text)


def extract_sentences(text: str, config: ExtractionConfig | None = None) -> list[str]:
    """Filter raw text and return its accepted sentences in document order.

    Args:
        text: Raw archive text.
        config: Extraction configuration. Defaults to ExtractionConfig().

    Returns:
        Accepted sentences; empty when nothing qualifies.
    """
    return SentencePipeline(config).extract(text)
