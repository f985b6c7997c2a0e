"""
Inference module for multi-language intent prediction.

Implements:
- Language detection with ordered language fallback
- Lazy, concurrency-safe model fetching per language
- Standardized prediction payload generation
"""

from .model_registry import LanguageModelRegistry
from .orchestrator import BatchPredictionPipeline, PredictionOrchestrator
from .predictor import PredictionResult

__all__ = [
    "LanguageModelRegistry",
    "BatchPredictionPipeline",
    "PredictionOrchestrator",
    "PredictionResult",
]
