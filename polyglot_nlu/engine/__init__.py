"""
Engine module: model loading, caching and inference on raw text.
"""

from .cache import CacheStats, ModelCache
from .engine import Engine, LoadedModel, LocalEngine

__all__ = [
    "CacheStats",
    "ModelCache",
    "Engine",
    "LoadedModel",
    "LocalEngine",
]
