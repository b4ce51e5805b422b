"""Content filter for stripping front matter and markup noise.

Reduces a raw archive text dump to the lines presumed to be narrative
content. Lines are only ever dropped, never rewritten or reordered.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any

from lectern.config import ExtractionConfig
from lectern.qa.filter_log import FilterCategory, FilterLog
from lectern.qa.patterns import LINE_NOISE_PATTERNS, match_patterns
from lectern.qa.rules import RuleSet

# Only "\n" (optionally after "\r") breaks a line; a trailing newline
# yields a final empty line.
_LINE_BREAK_RE = re.compile(r"\r?\n")


@dataclass
class FilterResult:
    """Result of running the content filter over a document.

    Attributes:
        lines: Surviving lines, in original order.
        total_lines: Lines in the raw input.
        noise_dropped: Lines dropped as markup noise.
        front_matter_dropped: Lines dropped as front matter.
        log: Detailed log of all filtering decisions.
    """

    lines: list[str]
    total_lines: int
    noise_dropped: int
    front_matter_dropped: int
    log: FilterLog = field(default_factory=lambda: FilterLog(stage="content_filter"))

    @property
    def text(self) -> str:
        """Surviving lines joined with line breaks."""
        return "\n".join(self.lines)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "total_lines": self.total_lines,
            "kept_lines": len(self.lines),
            "noise_dropped": self.noise_dropped,
            "front_matter_dropped": self.front_matter_dropped,
            "log": self.log.to_dict(),
        }


class ContentFilter:
    """Strips markup noise and front matter from raw archive text.

    Noise lines are removed first; the front-matter skip is then taken
    as a fixed fraction of the lines that remain.

    Args:
        config: Extraction configuration. Defaults to ExtractionConfig().
        rule_set: Rules to apply. Defaults to the rule set for
            config.variant.

    Example::

        f = ContentFilter()
        result = f.filter_text(raw_text)
        print(f"{len(result.lines)} of {result.total_lines} lines kept")
    """

    def __init__(
        self,
        config: ExtractionConfig | None = None,
        rule_set: RuleSet | None = None,
    ) -> None:
        self._config = config or ExtractionConfig()
        self._rule_set = rule_set or RuleSet.for_variant(self._config.variant)

    def filter_text(self, text: str) -> FilterResult:
        """Run the content filter over raw text.

        Args:
            text: Raw archive text.

        Returns:
            FilterResult with surviving lines, counts, and log.
        """
        active = self._rule_set.get_active_categories()
        log = FilterLog(stage="content_filter", variant=self._rule_set.variant.value)
        raw_lines = _LINE_BREAK_RE.split(text) if text else []

        kept: list[tuple[int, str]] = []
        for index, line in enumerate(raw_lines):
            if FilterCategory.MARKUP_LINE in active:
                matched = match_patterns(line, LINE_NOISE_PATTERNS)
                if matched is not None:
                    log.record(
                        matched.category,
                        f"Matched pattern: {matched.name}",
                        matched.name,
                        index,
                        line,
                    )
                    continue
            kept.append((index, line))

        skip = 0
        if FilterCategory.FRONT_MATTER in active:
            skip = self.front_matter_count(len(kept), self._config.front_matter_fraction)
            for index, line in kept[:skip]:
                log.record(
                    FilterCategory.FRONT_MATTER,
                    f"Within leading {self._config.front_matter_fraction:.0%} of lines",
                    "front_matter_skip",
                    index,
                    line,
                )

        return FilterResult(
            lines=[line for _, line in kept[skip:]],
            total_lines=len(raw_lines),
            noise_dropped=len(raw_lines) - len(kept),
            front_matter_dropped=skip,
            log=log,
        )

    def filter_lines(self, text: str) -> list[str]:
        """Return only the surviving lines for text."""
        return self.filter_text(text).lines

    @staticmethod
    def front_matter_count(line_count: int, fraction: float) -> int:
        """Number of leading lines to skip, clamped to the document.

        Args:
            line_count: Lines available.
            fraction: Share of lines treated as front matter.

        Returns:
            floor(fraction * line_count), within [0, line_count].
        """
        return max(0, min(line_count, math.floor(line_count * fraction)))
