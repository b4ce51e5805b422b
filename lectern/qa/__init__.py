"""Content filtering for front matter and markup noise.

Drops license/front-matter lines and style, markup, and script noise
from raw archive text, and holds the pattern library and deny-lists the
sentence extractor reuses. Every drop is recorded in a FilterLog so the
heuristics can be audited and tuned.
"""

from lectern.qa.filter_log import FilterCategory, FilterLog, FilterLogEntry
from lectern.qa.filters import ContentFilter, FilterResult
from lectern.qa.patterns import CompiledPattern, find_keyword, match_patterns
from lectern.qa.rules import FilterRule, RuleSet

__all__ = [
    "CompiledPattern",
    "ContentFilter",
    "FilterCategory",
    "FilterLog",
    "FilterLogEntry",
    "FilterResult",
    "FilterRule",
    "RuleSet",
    "find_keyword",
    "match_patterns",
]
