"""
Prediction result payload returned by the orchestrator.
"""

import json
from dataclasses import dataclass, field
from typing import Optional

from ..models.intent_classifier import NONE_INTENT, IntentPrediction, IntentPredictions


@dataclass
class PredictionResult:
    """
    Standardized prediction payload for downstream consumption.

    ``errored`` results are produced internally for languages whose engine
    call failed; the orchestrator never returns one to its caller.
    """
    # Core prediction
    intents: list[IntentPrediction] = field(default_factory=list)
    oos: float = 0.0

    # Language and timing metadata
    errored: bool = False
    language: str = ""
    elapsed_ms: float = 0.0
    detected_language: Optional[str] = None

    @classmethod
    def from_predictions(
        cls,
        predictions: IntentPredictions,
        language: str,
        elapsed_ms: float,
    ) -> "PredictionResult":
        return cls(
            intents=list(predictions.intents),
            oos=predictions.oos,
            errored=False,
            language=language,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def failed(cls, language: str, elapsed_ms: float) -> "PredictionResult":
        return cls(errored=True, language=language, elapsed_ms=elapsed_ms)

    @property
    def top_intent(self) -> Optional[IntentPrediction]:
        """Most confident intent other than the background intent."""
        candidates = [i for i in self.intents if i.name != NONE_INTENT]
        return max(candidates, key=lambda i: i.confidence) if candidates else None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "intents": [i.to_dict() for i in self.intents],
            "oos": self.oos,
            "errored": self.errored,
            "language": self.language,
            "elapsed_ms": self.elapsed_ms,
        }
        if self.detected_language is not None:
            result["detected_language"] = self.detected_language
        return result

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
