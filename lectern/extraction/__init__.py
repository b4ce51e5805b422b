"""Sentence extraction from filtered archive text.

Segments normalized text on terminal punctuation and keeps only
candidates that pass the acceptance cascade. SentencePipeline composes
the language gate, content filter, and extractor for raw documents.
"""

from lectern.extraction.pipeline import PipelineResult, SentencePipeline, extract_sentences
from lectern.extraction.sentences import ExtractionResult, SentenceExtractor, letter_ratio

__all__ = [
    "ExtractionResult",
    "PipelineResult",
    "SentenceExtractor",
    "SentencePipeline",
    "extract_sentences",
    "letter_ratio",
]
