"""Heuristic English-likelihood gate for whole documents.

Decides whether a document is worth extracting from at all, using the
share of ASCII letters among cleaned characters and, in strict mode, the
presence of common English function words in a sample window. A rejected
document is a normal outcome, not an error.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from lectern.config import ExtractionConfig, GateMode

_DIGIT_RE = re.compile(r"\d+")
_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RUN_RE = re.compile(r"\s+")
_ASCII_LETTER_RE = re.compile(r"[a-zA-Z]")


@dataclass(frozen=True)
class LanguageVerdict:
    """Outcome of gating one document.

    Attributes:
        accepted: Whether the document should be processed.
        mode: Gate mode that produced the verdict.
        letter_ratio: ASCII letters over cleaned characters analyzed.
        common_word_count: Common words found (strict mode only).
        analyzed_chars: Cleaned characters analyzed.
        reason: Human-readable explanation.
    """

    accepted: bool
    mode: GateMode
    letter_ratio: float
    common_word_count: int
    analyzed_chars: int
    reason: str

    def __bool__(self) -> bool:
        return self.accepted

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "accepted": self.accepted,
            "mode": self.mode.value,
            "letter_ratio": round(self.letter_ratio, 4),
            "common_word_count": self.common_word_count,
            "analyzed_chars": self.analyzed_chars,
            "reason": self.reason,
        }


class LanguageGate:
    """Accepts or rejects whole documents as likely English.

    Lenient mode analyzes the whole text and needs only a modest letter
    share. Strict mode analyzes a window between config.sample_start and
    config.sample_end of the text (past the front matter, clear of the
    tail), requires a higher letter share, and requires common English
    function words.

    Args:
        config: Extraction configuration. Defaults to ExtractionConfig().
        mode: Gate mode. Defaults to config.gate_mode.
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        mode: GateMode | str | None = None,
    ) -> None:
        self._config = config or ExtractionConfig()
        self._mode = GateMode(mode) if mode is not None else self._config.gate_mode

    @property
    def mode(self) -> GateMode:
        return self._mode

    def evaluate(self, text: str) -> LanguageVerdict:
        """Gate a document.

        Args:
            text: Raw document text.

        Returns:
            LanguageVerdict with the decision and the statistics behind it.
        """
        if self._mode == GateMode.STRICT:
            return self._evaluate_strict(text)
        return self._evaluate_lenient(text)

    def is_likely_english(self, text: str) -> bool:
        return self.evaluate(text).accepted

    def _evaluate_lenient(self, text: str) -> LanguageVerdict:
        cleaned = clean_for_analysis(text)
        ratio = ascii_letter_ratio(cleaned)
        if len(cleaned) <= self._config.min_analyzable_chars:
            return self._verdict(True, ratio, 0, cleaned, "Insufficient text to analyze")
        if ratio > self._config.lenient_letter_ratio:
            return self._verdict(True, ratio, 0, cleaned, f"Letter ratio {ratio:.0%}")
        return self._verdict(
            False,
            ratio,
            0,
            cleaned,
            f"Letter ratio {ratio:.0%} at or below {self._config.lenient_letter_ratio:.0%}",
        )

    def _evaluate_strict(self, text: str) -> LanguageVerdict:
        cleaned = clean_for_analysis(self.sample_window(text))
        ratio = ascii_letter_ratio(cleaned)
        if len(cleaned) <= self._config.min_analyzable_chars:
            return self._verdict(True, ratio, 0, cleaned, "Insufficient text to analyze")
        if ratio < self._config.strict_letter_ratio:
            return self._verdict(
                False,
                ratio,
                0,
                cleaned,
                f"Letter ratio {ratio:.0%} below {self._config.strict_letter_ratio:.0%}",
            )

        found = count_common_words(cleaned, self._config.common_words)
        if found < self._config.min_common_words:
            return self._verdict(
                False,
                ratio,
                found,
                cleaned,
                f"Found {found}/{len(self._config.common_words)} common English words",
            )
        return self._verdict(
            True,
            ratio,
            found,
            cleaned,
            f"Letter ratio {ratio:.0%}, {found} common English words",
        )

    def sample_window(self, text: str) -> str:
        """Slice the strict-mode sample window out of text."""
        start = math.floor(len(text) * self._config.sample_start)
        end = math.floor(len(text) * self._config.sample_end)
        return text[start:end]

    def _verdict(
        self,
        accepted: bool,
        ratio: float,
        common_words: int,
        cleaned: str,
        reason: str,
    ) -> LanguageVerdict:
        return LanguageVerdict(
            accepted=accepted,
            mode=self._mode,
            letter_ratio=ratio,
            common_word_count=common_words,
            analyzed_chars=len(cleaned),
            reason=reason,
        )


def clean_for_analysis(text: str) -> str:
    """Drop digits, blank out punctuation, and collapse whitespace.

    Letters outside ASCII are kept so that they count against the
    ASCII-letter ratio.
    """
    text = _DIGIT_RE.sub("", text)
    text = _NON_WORD_RE.sub(" ", text)
    return _WHITESPACE_RUN_RE.sub(" ", text).strip()


def ascii_letter_ratio(cleaned: str) -> float:
    """ASCII letters over total characters; 0.0 for empty text."""
    if not cleaned:
        return 0.0
    return len(_ASCII_LETTER_RE.findall(cleaned)) / len(cleaned)


def count_common_words(cleaned: str, words: tuple[str, ...]) -> int:
    """Count how many of words appear space-delimited in the lower-cased text."""
    lowered = cleaned.lower()
    return sum(1 for word in words if f" {word} " in lowered)


def is_likely_english(
    text: str,
    mode: GateMode | str | None = None,
    config: ExtractionConfig | None = None,
) -> bool:
    """Return True if text passes the language gate.

    Args:
        text: Raw document text.
        mode: Gate mode. Defaults to the config's gate_mode.
        config: Extraction configuration. Defaults to ExtractionConfig().
    """
    return LanguageGate(config, mode).is_likely_english(text)
