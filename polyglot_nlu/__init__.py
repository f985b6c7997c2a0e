"""
Multi-language intent prediction with spell-check ensembling.

This package turns raw user text into intent predictions:

Architecture:
- SpellChecker: corrects words missing from a model's vocabulary
- EnsembleClassifier: merges predictions on original and corrected text
- PredictionOrchestrator: picks a per-language model and falls back across languages
"""

__version__ = "0.1.0"
