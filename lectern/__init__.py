"""Lectern: presentable sentences from public-domain book scans.

Filters front matter and markup noise out of raw archive text, extracts
well-formed sentences, and gates out documents that are unlikely to be
English.
"""

from lectern.config import ExtractionConfig, FilterVariant, GateMode
from lectern.extraction import SentenceExtractor, SentencePipeline, extract_sentences
from lectern.language import LanguageGate, is_likely_english
from lectern.qa import ContentFilter

__version__ = "0.1.0"

__all__ = [
    "ContentFilter",
    "ExtractionConfig",
    "FilterVariant",
    "GateMode",
    "LanguageGate",
    "SentenceExtractor",
    "SentencePipeline",
    "extract_sentences",
    "is_likely_english",
]
