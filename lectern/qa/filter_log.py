"""Filter log data structures for the extraction audit trail.

Records every dropped line and rejected sentence candidate so reviewers
can inspect what was filtered and why, and tune the heuristics against
real documents.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class FilterCategory(str, Enum):
    """Why a line or sentence candidate was dropped."""

    FRONT_MATTER = "front_matter"
    MARKUP_LINE = "markup_line"
    LENGTH = "length"
    KEYWORD = "keyword"
    MARKUP_PATTERN = "markup_pattern"
    ALPHA_CONTENT = "alpha_content"
    LETTER_DENSITY = "letter_density"


@dataclass
class FilterLogEntry:
    """A single filtering decision.

    Attributes:
        category: Why the text was dropped.
        reason: Human-readable explanation.
        rule_name: Which rule or pattern matched.
        position: Line index (content filter) or candidate index
            (sentence extractor).
        content_preview: First 80 chars of the dropped text.
    """

    category: FilterCategory
    reason: str
    rule_name: str
    position: int
    content_preview: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "category": self.category.value,
            "reason": self.reason,
            "rule_name": self.rule_name,
            "position": self.position,
            "content_preview": self.content_preview,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterLogEntry:
        """Deserialize from dictionary."""
        return cls(
            category=FilterCategory(data["category"]),
            reason=data["reason"],
            rule_name=data["rule_name"],
            position=data["position"],
            content_preview=data["content_preview"],
        )


@dataclass
class FilterLog:
    """Log of filtering decisions for one stage run over one document.

    Attributes:
        stage: Which stage produced the log ("content_filter",
            "sentence_extractor", or "pipeline" once merged).
        variant: Filter variant in effect.
        entries: All filtering decisions.
        created_at: When the log was created.
    """

    stage: str
    variant: str = "markup_aware"
    entries: list[FilterLogEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def filtered_count(self) -> int:
        """Total number of filtering decisions."""
        return len(self.entries)

    def record(
        self,
        category: FilterCategory,
        reason: str,
        rule_name: str,
        position: int,
        content: str,
    ) -> None:
        """Append an entry, truncating content to a preview."""
        self.entries.append(
            FilterLogEntry(
                category=category,
                reason=reason,
                rule_name=rule_name,
                position=position,
                content_preview=content[:80],
            )
        )

    def by_category(self) -> dict[FilterCategory, list[FilterLogEntry]]:
        """Group entries by filter category.

        Returns:
            Dict mapping category to list of entries.
        """
        result: dict[FilterCategory, list[FilterLogEntry]] = {}
        for entry in self.entries:
            result.setdefault(entry.category, []).append(entry)
        return result

    def merged(self, other: FilterLog, stage: str = "pipeline") -> FilterLog:
        """Return a new log holding this log's entries followed by other's."""
        return FilterLog(
            stage=stage,
            variant=self.variant,
            entries=[*self.entries, *other.entries],
            created_at=self.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "stage": self.stage,
            "variant": self.variant,
            "entries": [e.to_dict() for e in self.entries],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterLog:
        """Deserialize from dictionary."""
        return cls(
            stage=data["stage"],
            variant=data.get("variant", "markup_aware"),
            entries=[FilterLogEntry.from_dict(e) for e in data.get("entries", [])],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def save(self, path: Path) -> None:
        """Save log to JSON file.

        Args:
            path: Destination file path.
        """
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> FilterLog:
        """Load log from JSON file.

        Args:
            path: Source file path.

        Returns:
            Deserialized FilterLog.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)
