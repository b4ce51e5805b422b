"""Text normalizer for flattening filtered archive text.

Applies a fixed sequence of cleaning operations that turn line-broken
OCR text into a single whitespace-normalized string ready for sentence
segmentation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

# --- Compiled patterns for cleaning operations ---

# Line-end hyphenation: "word-\n" followed by lowercase continuation
_HYPHEN_BREAK_RE = re.compile(r"(\w)-\r?\n([a-z])")

# Runs of line breaks, then any whitespace run
_NEWLINE_RUN_RE = re.compile(r"[\r\n]+")
_WHITESPACE_RUN_RE = re.compile(r"\s+")

# Anything but word characters, whitespace, and terminal punctuation.
# Underscores count as word characters to \w, so they are listed explicitly.
_SPECIAL_CHAR_RE = re.compile(r"[^\w\s.!?]|_")


@dataclass
class CleaningResult:
    """Result of normalizing one text.

    Attributes:
        text: Normalized text.
        operations_applied: Names of operations that changed the text,
            in the order they ran.
    """

    text: str
    operations_applied: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "text": self.text,
            "operations_applied": self.operations_applied,
        }


class TextNormalizer:
    """Flattens filtered text into a single cleaned line.

    Args:
        repair_hyphenation: If True, rejoin words split across lines
            with a trailing hyphen before line breaks are collapsed.
            When False, a hyphen at a line end becomes a space like any
            other symbol, so "well-\\nknown" reads "well known".

    Example::

        normalizer = TextNormalizer()
        flat = normalizer.normalize("It was  a dark\\nand stormy night.")
    """

    def __init__(self, repair_hyphenation: bool = False) -> None:
        self._repair_hyphenation = repair_hyphenation

    def normalize(self, text: str) -> str:
        """Return the normalized form of text."""
        return self.clean(text).text

    def clean(self, text: str) -> CleaningResult:
        """Run all cleaning operations and report which changed the text.

        Args:
            text: Filtered document text.

        Returns:
            CleaningResult with normalized text and applied operations.
        """
        applied: list[str] = []
        if self._repair_hyphenation:
            text = self._repair_hyphens(text, applied)
        text = self._collapse_whitespace(text, applied)
        text = self._strip_special_chars(text, applied)
        text = self._collapse_whitespace(text, applied)
        return CleaningResult(text=text, operations_applied=applied)

    @staticmethod
    def _repair_hyphens(text: str, applied: list[str]) -> str:
        """Rejoin words split across lines with hyphens.

        Handles patterns like "impor-\\ntant" -> "important".
        """
        result = _HYPHEN_BREAK_RE.sub(r"\1\2", text)
        if result != text:
            applied.append("repair_hyphenation")
        return result

    @staticmethod
    def _collapse_whitespace(text: str, applied: list[str]) -> str:
        """Collapse line-break and whitespace runs to single spaces and strip."""
        result = _NEWLINE_RUN_RE.sub(" ", text)
        result = _WHITESPACE_RUN_RE.sub(" ", result).strip()
        if result != text and "collapse_whitespace" not in applied:
            applied.append("collapse_whitespace")
        return result

    @staticmethod
    def _strip_special_chars(text: str, applied: list[str]) -> str:
        """Replace symbols and punctuation other than . ! ? with spaces."""
        result = _SPECIAL_CHAR_RE.sub(" ", text)
        if result != text:
            applied.append("strip_special_chars")
        return result
