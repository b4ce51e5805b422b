"""Extraction configuration and policy selection.

Every heuristic constant used by the content filter, sentence extractor,
and language gate lives here as a named field with a documented default,
so thresholds can be tuned without touching extraction logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FilterVariant(str, Enum):
    """Which filter rule set to apply.

    LENIENT only rejects legal and structural boilerplate. MARKUP_AWARE
    additionally drops style/markup/script noise at line and sentence
    level.
    """

    LENIENT = "lenient"
    MARKUP_AWARE = "markup_aware"


class GateMode(str, Enum):
    """Language gate strictness."""

    LENIENT = "lenient"
    STRICT = "strict"


DEFAULT_COMMON_WORDS: tuple[str, ...] = (
    "the",
    "and",
    "is",
    "in",
    "to",
    "of",
    "a",
    "that",
    "it",
    "was",
    "for",
    "on",
    "with",
    "as",
    "be",
)


@dataclass
class ExtractionConfig:
    """Configuration for the filter, extractor, and language gate."""

    # Policy selection
    variant: FilterVariant = FilterVariant.MARKUP_AWARE
    gate_mode: GateMode = GateMode.STRICT

    # Content filter
    front_matter_fraction: float = 0.15  # Leading share of lines treated as front matter

    # Sentence acceptance
    min_length: int = 15  # Inclusive
    max_length: int = 600  # Inclusive
    min_alpha_run: int = 3  # Consecutive ASCII letters required somewhere
    min_letter_ratio: float = 0.3  # Letters / total chars must exceed this
    max_period_count: int = 4  # More periods than this reads as chained class names

    # Language gate
    min_analyzable_chars: int = 100  # At or below this, accept for lack of signal
    lenient_letter_ratio: float = 0.3
    strict_letter_ratio: float = 0.6
    sample_start: float = 0.2
    sample_end: float = 0.3
    min_common_words: int = 5
    common_words: tuple[str, ...] = field(default=DEFAULT_COMMON_WORDS)

    def __post_init__(self) -> None:
        self.variant = FilterVariant(self.variant)
        self.gate_mode = GateMode(self.gate_mode)
        if isinstance(self.common_words, str):
            raise ValueError("common_words must be a list of words, not a string")
        if not all(isinstance(w, str) for w in self.common_words):
            raise ValueError("common_words entries must be strings")
        self.common_words = tuple(w.lower() for w in self.common_words)

        if self.min_length < 0 or self.max_length < self.min_length:
            raise ValueError(
                f"Invalid length bounds: [{self.min_length}, {self.max_length}]"
            )
        for name in (
            "front_matter_fraction",
            "min_letter_ratio",
            "lenient_letter_ratio",
            "strict_letter_ratio",
            "sample_start",
            "sample_end",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.sample_start >= self.sample_end:
            raise ValueError("sample_start must be less than sample_end")
        if self.min_alpha_run < 1:
            raise ValueError("min_alpha_run must be at least 1")
        if self.max_period_count < 0 or self.min_analyzable_chars < 0:
            raise ValueError("Counts must be non-negative")
        if self.min_common_words < 0:
            raise ValueError("min_common_words must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant": self.variant.value,
            "gate_mode": self.gate_mode.value,
            "front_matter_fraction": self.front_matter_fraction,
            "min_length": self.min_length,
            "max_length": self.max_length,
            "min_alpha_run": self.min_alpha_run,
            "min_letter_ratio": self.min_letter_ratio,
            "max_period_count": self.max_period_count,
            "min_analyzable_chars": self.min_analyzable_chars,
            "lenient_letter_ratio": self.lenient_letter_ratio,
            "strict_letter_ratio": self.strict_letter_ratio,
            "sample_start": self.sample_start,
            "sample_end": self.sample_end,
            "min_common_words": self.min_common_words,
            "common_words": list(self.common_words),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtractionConfig:
        """Build a config from a dict, ignoring unknown keys.

        Raises:
            ValueError: If a value is out of range or an enum value is
                unknown.
        """
        defaults = cls()
        return cls(
            variant=data.get("variant", defaults.variant),
            gate_mode=data.get("gate_mode", defaults.gate_mode),
            front_matter_fraction=data.get(
                "front_matter_fraction", defaults.front_matter_fraction
            ),
            min_length=data.get("min_length", defaults.min_length),
            max_length=data.get("max_length", defaults.max_length),
            min_alpha_run=data.get("min_alpha_run", defaults.min_alpha_run),
            min_letter_ratio=data.get("min_letter_ratio", defaults.min_letter_ratio),
            max_period_count=data.get("max_period_count", defaults.max_period_count),
            min_analyzable_chars=data.get(
                "min_analyzable_chars", defaults.min_analyzable_chars
            ),
            lenient_letter_ratio=data.get(
                "lenient_letter_ratio", defaults.lenient_letter_ratio
            ),
            strict_letter_ratio=data.get(
                "strict_letter_ratio", defaults.strict_letter_ratio
            ),
            sample_start=data.get("sample_start", defaults.sample_start),
            sample_end=data.get("sample_end", defaults.sample_end),
            min_common_words=data.get("min_common_words", defaults.min_common_words),
            common_words=data.get("common_words", defaults.common_words),
        )
