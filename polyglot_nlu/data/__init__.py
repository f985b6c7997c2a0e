"""
Data module for intent prediction.

This module handles:
- Tokenized utterances with token vectors
- Vocabulary lookups for spelling correction
- Persistent model storage
"""

from .utterance import Token, Utterance, tokenize
from .model_store import FileModelStore, InMemoryModelStore, ModelStore

__all__ = [
    "FileModelStore",
    "InMemoryModelStore",
    "ModelStore",
    "Token",
    "Utterance",
    "tokenize",
]
