"""
Training module for the reference intent classifier.
"""

from .trainer import IntentTrainer, TrainingMetrics

__all__ = [
    "IntentTrainer",
    "TrainingMetrics",
]
