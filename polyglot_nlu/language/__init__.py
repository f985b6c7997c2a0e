"""
Language utilities for intent prediction.

Contains:
- SpellChecker: nearest-vocabulary spelling correction
"""

from .spell_checker import SpellChecker

__all__ = [
    "SpellChecker",
]
