"""Pattern library for non-prose content detection.

Compiled regex patterns for identifying style rules, markup tags, script
statements, and other noise that leaks into archive text dumps, plus the
keyword deny-lists used to reject boilerplate sentences.

The pattern set grew out of observed bad output rather than a grammar of
markup; treat it as a baseline to refine against sample documents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lectern.qa.filter_log import FilterCategory


@dataclass
class CompiledPattern:
    """A compiled regex pattern for content matching.

    Attributes:
        name: Rule name for audit trail.
        category: Filter category this pattern detects.
        pattern: Compiled regex.
        match_type: How to apply: 'full', 'prefix', or 'contains'.
    """

    name: str
    category: FilterCategory
    pattern: re.Pattern[str]
    match_type: str  # "full" | "prefix" | "contains"


_IDENT = r"[a-zA-Z0-9_\-]+"

# -----------------------------------------------------------------
# Line-level markup noise (applied to stripped lines)
# -----------------------------------------------------------------

LINE_NOISE_PATTERNS: list[CompiledPattern] = [
    CompiledPattern(
        name="style_selector",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(rf"[.#]{_IDENT}(?:\s+\{{|\s+{_IDENT}\s*\{{|$)"),
        match_type="prefix",
    ),
    CompiledPattern(
        name="style_class_definition",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"\.[\w\-]+(?:\s+[\w\-]+)*\s*(?:\{|:|$)"),
        match_type="prefix",
    ),
    CompiledPattern(
        name="style_property",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(
            r"(?:display|margin|padding|border|background|color|font"
            r"|width|height|position|flex|grid)\b",
            re.IGNORECASE,
        ),
        match_type="prefix",
    ),
    CompiledPattern(
        name="markup_mixed",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(
            r"(?:button|label|div|span|style|class|id)\s*[.#{:]",
            re.IGNORECASE,
        ),
        match_type="prefix",
    ),
    CompiledPattern(
        name="markup_tag",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"^<[^>]+>|</[^>]+>$"),
        match_type="contains",
    ),
    CompiledPattern(
        name="brace_block",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"\{.*\}"),
        match_type="full",
    ),
    CompiledPattern(
        name="web_component",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"(?:shady dom|shadow dom|web component)", re.IGNORECASE),
        match_type="prefix",
    ),
    CompiledPattern(
        name="style_reference",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"styles?\s+(?:for|in|of)\s+", re.IGNORECASE),
        match_type="prefix",
    ),
    CompiledPattern(
        name="vendor_prefix",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"webkit|mozilla|moz-"),
        match_type="contains",
    ),
    CompiledPattern(
        name="script_statement",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"(?:true|false|null|undefined|var|let|const|function)\s*[{(=;]"),
        match_type="prefix",
    ),
    CompiledPattern(
        name="style_value",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r":\s*\d+px|:\s*#[0-9a-fA-F]{3,6}|:\s*rgba?\("),
        match_type="contains",
    ),
    CompiledPattern(
        name="bracket_only",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"[{}\[\]();]+"),
        match_type="full",
    ),
    CompiledPattern(
        name="numbered_brace",
        category=FilterCategory.MARKUP_LINE,
        pattern=re.compile(r"\d+\s*\{"),
        match_type="prefix",
    ),
]

# -----------------------------------------------------------------
# Sentence-level markup noise
# -----------------------------------------------------------------

SENTENCE_NOISE_PATTERNS: list[CompiledPattern] = [
    CompiledPattern(
        name="selector_chain",
        category=FilterCategory.MARKUP_PATTERN,
        pattern=re.compile(
            r"\.(?:media|button|label|web|menu|nav|header|footer|container|wrapper)"
            r"\s+(?:button|label|display|none|flex|grid|style)",
            re.IGNORECASE,
        ),
        match_type="contains",
    ),
    CompiledPattern(
        name="style_unit",
        category=FilterCategory.MARKUP_PATTERN,
        pattern=re.compile(r"\d+px|\d+em|\d+rem|rgba?\(|#[0-9a-fA-F]{3,6}"),
        match_type="contains",
    ),
    CompiledPattern(
        name="brace_block",
        category=FilterCategory.MARKUP_PATTERN,
        pattern=re.compile(r"\{.*\}", re.DOTALL),
        match_type="contains",
    ),
    CompiledPattern(
        name="display_value",
        category=FilterCategory.MARKUP_PATTERN,
        pattern=re.compile(r"display\s+(?:none|block|flex|grid|inline)", re.IGNORECASE),
        match_type="contains",
    ),
]

# -----------------------------------------------------------------
# Keyword deny-lists (case-insensitive substring match)
# -----------------------------------------------------------------

LEGAL_KEYWORDS: tuple[str, ...] = (
    "gnu",
    "gpl",
    "license",
    "copyright",
    "gutenberg",
    "warranty",
    "redistribution",
    "permission",
    "terms and conditions",
    "free software foundation",
    "all rights reserved",
)

STRUCTURAL_KEYWORDS: tuple[str, ...] = (
    "page",
    "chapter",
    "table of contents",
    "index",
)

MARKUP_KEYWORDS: tuple[str, ...] = (
    "css",
    "html",
    "style",
    "display",
    "margin",
    "padding",
    "border",
    "webkit",
    "mozilla",
    "shadow dom",
    "shady dom",
    "web component",
)


def match_patterns(
    text: str,
    candidates: list[CompiledPattern] | None = None,
) -> CompiledPattern | None:
    """Return the first matching pattern or None.

    Args:
        text: Text content to check. Leading and trailing whitespace
            is ignored.
        candidates: Patterns to try. Defaults to LINE_NOISE_PATTERNS.

    Returns:
        First matching CompiledPattern, or None.
    """
    if candidates is None:
        candidates = LINE_NOISE_PATTERNS

    stripped = text.strip()
    for cp in candidates:
        if cp.match_type == "full":
            if cp.pattern.fullmatch(stripped):
                return cp
        elif cp.match_type == "prefix":
            if cp.pattern.match(stripped):
                return cp
        elif cp.match_type == "contains":
            if cp.pattern.search(stripped):
                return cp
    return None


def find_keyword(text: str, keywords: tuple[str, ...] | list[str]) -> str | None:
    """Return the first deny-listed keyword found in text, or None.

    Matching is a case-insensitive substring test.
    """
    lowered = text.lower()
    for keyword in keywords:
        if keyword.lower() in lowered:
            return keyword
    return None
