"""
Models module for intent prediction.

Contains:
- Model identity: specifications, model ids and trained artifacts
- TorchIntentClassifier: reference classifier over sentence embeddings
- EnsembleClassifier: spell-check decorator merging two prediction passes
"""

from .intent_classifier import (
    NONE_INTENT,
    IntentClassifier,
    IntentPrediction,
    IntentPredictions,
    IntentTrainInput,
    TorchIntentClassifier,
)
from .model_id import Model, ModelId, ModelIdService, ModelQuery, Specifications
from .spellcheck_classifier import EnsembleClassifier, merge_spell_checked

__all__ = [
    "NONE_INTENT",
    "IntentClassifier",
    "IntentPrediction",
    "IntentPredictions",
    "IntentTrainInput",
    "TorchIntentClassifier",
    "Model",
    "ModelId",
    "ModelIdService",
    "ModelQuery",
    "Specifications",
    "EnsembleClassifier",
    "merge_spell_checked",
]
