"""Text cleaning and normalization.

Collapses line breaks and whitespace, optionally repairs line-end hyphenation, and
strips symbols other than terminal punctuation ahead of sentence
segmentation.
"""

from lectern.cleaning.normalizer import CleaningResult, TextNormalizer

__all__ = [
    "CleaningResult",
    "TextNormalizer",
]
