"""Sentence segmentation and acceptance filtering.

Splits normalized text on terminal punctuation followed by a capitalized
word, then runs each candidate through an acceptance cascade: length,
keyword deny-list, markup noise, alphabetic content, and letter density.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from lectern.cleaning.normalizer import TextNormalizer
from lectern.config import ExtractionConfig
from lectern.qa.filter_log import FilterCategory, FilterLog
from lectern.qa.patterns import SENTENCE_NOISE_PATTERNS, find_keyword, match_patterns
from lectern.qa.rules import RuleSet

# Terminal punctuation stays with the preceding sentence; the whitespace
# is the separator.
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")

_ASCII_LETTER_RE = re.compile(r"[a-zA-Z]")

# (accepted, category, reason, rule_name)
Verdict = tuple[bool, "FilterCategory | None", str, str]
_ACCEPT: Verdict = (True, None, "", "")


@dataclass
class ExtractionResult:
    """Result of running the extractor over one filtered document.

    Attributes:
        sentences: Accepted sentences, in document order.
        candidate_count: Segments produced by the splitter.
        rejected_count: Candidates rejected by the cascade.
        log: Detailed log of every rejection.
    """

    sentences: list[str]
    candidate_count: int
    rejected_count: int
    log: FilterLog = field(default_factory=lambda: FilterLog(stage="sentence_extractor"))

    @property
    def acceptance_ratio(self) -> float:
        """Fraction of candidates accepted (0.0-1.0)."""
        if self.candidate_count == 0:
            return 0.0
        return len(self.sentences) / self.candidate_count

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "sentences": list(self.sentences),
            "candidate_count": self.candidate_count,
            "rejected_count": self.rejected_count,
            "acceptance_ratio": self.acceptance_ratio,
            "log": self.log.to_dict(),
        }


class SentenceExtractor:
    """Extracts presentable sentences from filtered document text.

    Stateless between calls: the same input always yields the same
    sentences.

    Args:
        config: Extraction configuration. Defaults to ExtractionConfig().
        rule_set: Rules to apply. Defaults to the rule set for
            config.variant.
        normalizer: Text normalizer. Defaults to TextNormalizer().

    Example::

        extractor = SentenceExtractor()
        result = extractor.extract(filtered_text)
        for sentence in result.sentences:
            print(sentence)
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        rule_set: RuleSet | None = None,
        normalizer: TextNormalizer | None = None,
    ) -> None:
        self._config = config or ExtractionConfig()
        self._rule_set = rule_set or RuleSet.for_variant(self._config.variant)
        self._normalizer = normalizer or TextNormalizer()
        self._active = self._rule_set.get_active_categories()
        self._keywords = self._rule_set.get_keywords()
        self._alpha_run_re = re.compile(rf"[a-zA-Z]{{{self._config.min_alpha_run},}}")

    def extract(self, text: str) -> ExtractionResult:
        """Normalize, segment, and filter text.

        Args:
            text: Filtered document text.

        Returns:
            ExtractionResult with accepted sentences and rejection log.
        """
        log = FilterLog(stage="sentence_extractor", variant=self._rule_set.variant.value)
        candidates = self.split(self._normalizer.normalize(text))

        sentences: list[str] = []
        for index, candidate in enumerate(candidates):
            accepted, category, reason, rule_name = self.check_sentence(candidate)
            if accepted:
                sentences.append(candidate)
            elif category is not None:
                log.record(category, reason, rule_name, index, candidate)

        return ExtractionResult(
            sentences=sentences,
            candidate_count=len(candidates),
            rejected_count=len(candidates) - len(sentences),
            log=log,
        )

    def extract_text(self, text: str) -> list[str]:
        """Return only the accepted sentences for text."""
        return self.extract(text).sentences

    @staticmethod
    def split(normalized: str) -> list[str]:
        """Split normalized text into trimmed, non-empty candidate sentences.

        A trailing fragment with no following capitalized word is kept
        as the final candidate.
        """
        if not normalized:
            return []
        parts = (part.strip() for part in _SENTENCE_BOUNDARY_RE.split(normalized))
        return [part for part in parts if part]

    def check_sentence(self, sentence: str) -> Verdict:
        """Evaluate one candidate against the acceptance cascade.

        Args:
            sentence: Trimmed candidate sentence.

        Returns:
            Tuple of (accepted, category, reason, rule_name). The first
            failing check determines the category.
        """
        for check in (
            self._check_length,
            self._check_keywords,
            self._check_markup,
            self._check_alpha_content,
            self._check_letter_density,
        ):
            result = check(sentence)
            if not result[0]:
                return result
        return _ACCEPT

    def _check_length(self, sentence: str) -> Verdict:
        if FilterCategory.LENGTH not in self._active:
            return _ACCEPT
        length = len(sentence)
        if self._config.min_length <= length <= self._config.max_length:
            return _ACCEPT
        return (
            False,
            FilterCategory.LENGTH,
            f"Length {length} outside "
            f"[{self._config.min_length}, {self._config.max_length}]",
            "length_bounds",
        )

    def _check_keywords(self, sentence: str) -> Verdict:
        if FilterCategory.KEYWORD not in self._active:
            return _ACCEPT
        keyword = find_keyword(sentence, self._keywords)
        if keyword is None:
            return _ACCEPT
        return (
            False,
            FilterCategory.KEYWORD,
            f"Contains deny-listed keyword: {keyword!r}",
            "keyword_deny_list",
        )

    def _check_markup(self, sentence: str) -> Verdict:
        if FilterCategory.MARKUP_PATTERN not in self._active:
            return _ACCEPT
        matched = match_patterns(sentence, SENTENCE_NOISE_PATTERNS)
        if matched is not None:
            return (
                False,
                matched.category,
                f"Matched pattern: {matched.name}",
                matched.name,
            )
        periods = sentence.count(".")
        if periods > self._config.max_period_count:
            return (
                False,
                FilterCategory.MARKUP_PATTERN,
                f"{periods} periods suggests chained identifiers",
                "period_chain",
            )
        return _ACCEPT

    def _check_alpha_content(self, sentence: str) -> Verdict:
        if FilterCategory.ALPHA_CONTENT not in self._active:
            return _ACCEPT
        if self._alpha_run_re.search(sentence):
            return _ACCEPT
        return (
            False,
            FilterCategory.ALPHA_CONTENT,
            f"No run of {self._config.min_alpha_run} letters",
            "alpha_content",
        )

    def _check_letter_density(self, sentence: str) -> Verdict:
        if FilterCategory.LETTER_DENSITY not in self._active:
            return _ACCEPT
        ratio = letter_ratio(sentence)
        if ratio > self._config.min_letter_ratio:
            return _ACCEPT
        return (
            False,
            FilterCategory.LETTER_DENSITY,
            f"Letter ratio {ratio:.2f} at or below {self._config.min_letter_ratio}",
            "letter_density",
        )


def letter_ratio(text: str) -> float:
    """ASCII letters divided by total characters; 0.0 for empty text."""
    if not text:
        return 0.0
    return len(_ASCII_LETTER_RE.findall(text)) / len(text)
