"""Configurable filtering rules per filter variant.

The lenient and markup-aware variants share one rule catalogue; the
markup-aware variant simply enables the markup rules. This keeps the
differences between variants data, not duplicated code paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lectern.config import FilterVariant
from lectern.qa.filter_log import FilterCategory
from lectern.qa.patterns import LEGAL_KEYWORDS, MARKUP_KEYWORDS, STRUCTURAL_KEYWORDS

# Rules that only the markup-aware variant enables
_MARKUP_RULES = frozenset({"markup_line_filter", "markup_keywords", "markup_patterns"})


@dataclass
class FilterRule:
    """A single configurable filtering rule.

    Attributes:
        name: Human-readable rule name.
        description: What this rule does.
        categories: Which filter categories this rule targets.
        keywords: Deny-list keywords contributed by this rule.
        enabled: Whether this rule is active.
    """

    name: str
    description: str
    categories: list[FilterCategory] = field(default_factory=list)
    keywords: tuple[str, ...] = ()
    enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "categories": [c.value for c in self.categories],
            "keywords": list(self.keywords),
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterRule:
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            description=data["description"],
            categories=[FilterCategory(c) for c in data.get("categories", [])],
            keywords=tuple(data.get("keywords", ())),
            enabled=data.get("enabled", True),
        )


@dataclass
class RuleSet:
    """Collection of rules for one filter variant.

    Attributes:
        name: Human-readable name for this rule set.
        variant: Filter variant this rule set implements.
        rules: List of filter rules.
    """

    name: str
    variant: FilterVariant = FilterVariant.MARKUP_AWARE
    rules: list[FilterRule] = field(default_factory=list)

    def get_active_categories(self) -> set[FilterCategory]:
        """Get all filter categories that are enabled.

        Returns:
            Set of active FilterCategory values.
        """
        categories: set[FilterCategory] = set()
        for rule in self.rules:
            if rule.enabled:
                categories.update(rule.categories)
        return categories

    def get_keywords(self) -> tuple[str, ...]:
        """Get the combined deny-list of all enabled rules, in rule order."""
        keywords: list[str] = []
        for rule in self.rules:
            if rule.enabled:
                keywords.extend(rule.keywords)
        return tuple(keywords)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "variant": self.variant.value,
            "rules": [r.to_dict() for r in self.rules],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuleSet:
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            variant=FilterVariant(data.get("variant", FilterVariant.MARKUP_AWARE.value)),
            rules=[FilterRule.from_dict(r) for r in data.get("rules", [])],
        )

    @classmethod
    def default(cls) -> RuleSet:
        """Create the markup-aware rule set with every rule enabled.

        Returns:
            RuleSet with all filter categories active.
        """
        return cls(
            name="markup_aware",
            variant=FilterVariant.MARKUP_AWARE,
            rules=[
                FilterRule(
                    name="front_matter_skip",
                    description="Drop the leading share of lines as front matter",
                    categories=[FilterCategory.FRONT_MATTER],
                ),
                FilterRule(
                    name="markup_line_filter",
                    description="Drop style, markup, and script lines",
                    categories=[FilterCategory.MARKUP_LINE],
                ),
                FilterRule(
                    name="length_bounds",
                    description="Reject sentences outside the length bounds",
                    categories=[FilterCategory.LENGTH],
                ),
                FilterRule(
                    name="legal_keywords",
                    description="Reject license and legal boilerplate",
                    categories=[FilterCategory.KEYWORD],
                    keywords=LEGAL_KEYWORDS,
                ),
                FilterRule(
                    name="structural_keywords",
                    description="Reject page, chapter, and index furniture",
                    categories=[FilterCategory.KEYWORD],
                    keywords=STRUCTURAL_KEYWORDS,
                ),
                FilterRule(
                    name="markup_keywords",
                    description="Reject sentences naming style or markup terms",
                    categories=[FilterCategory.KEYWORD],
                    keywords=MARKUP_KEYWORDS,
                ),
                FilterRule(
                    name="markup_patterns",
                    description="Reject selector chains, units, and brace blocks",
                    categories=[FilterCategory.MARKUP_PATTERN],
                ),
                FilterRule(
                    name="alpha_content",
                    description="Require a run of consecutive letters",
                    categories=[FilterCategory.ALPHA_CONTENT],
                ),
                FilterRule(
                    name="letter_density",
                    description="Require a minimum share of letters",
                    categories=[FilterCategory.LETTER_DENSITY],
                ),
            ],
        )

    @classmethod
    def for_variant(cls, variant: FilterVariant | str) -> RuleSet:
        """Create the rule set for a filter variant.

        Args:
            variant: FilterVariant or its string value.

        Returns:
            RuleSet with variant-specific rules enabled.
        """
        variant = FilterVariant(variant)
        base = cls.default()
        if variant == FilterVariant.LENIENT:
            base.name = "lenient"
            base.variant = FilterVariant.LENIENT
            for rule in base.rules:
                if rule.name in _MARKUP_RULES:
                    rule.enabled = False
        return base
