"""Heuristic English-likelihood gate for whole documents."""

from lectern.language.gate import LanguageGate, LanguageVerdict, is_likely_english

__all__ = [
    "LanguageGate",
    "LanguageVerdict",
    "is_likely_english",
]
