"""
Spell-check ensemble around an intent classifier.

When an utterance has a spell-corrected alternative, the inner classifier
runs on both forms and the two prediction sets are merged: correction may
raise confidences but never overturns an original prediction that was at
least as confident. The OOS score always comes from the corrected pass.
"""

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..data.utterance import Utterance
from ..errors import ModelLoadingError, NotTrained
from .intent_classifier import (
    NONE_INTENT,
    IntentClassifier,
    IntentPrediction,
    IntentPredictions,
    IntentTrainInput,
    ProgressCallback,
)

logger = logging.getLogger(__name__)


class EnsembleModel(BaseModel):
    """Persisted envelope; the inner model is an opaque string owned by the inner classifier."""
    model_config = ConfigDict(populate_by_name=True)

    inner_clf_model: StrictStr = Field(alias="innerClfModel")


@dataclass(frozen=True)
class Predictors:
    inner_clf: IntentClassifier


@dataclass(frozen=True)
class Untrained:
    pass


@dataclass(frozen=True)
class Trained:
    model: EnsembleModel


@dataclass(frozen=True)
class Ready:
    model: EnsembleModel
    predictors: Predictors


ClassifierState = Union[Untrained, Trained, Ready]


def _most_confident(predictions: IntentPredictions) -> Optional[IntentPrediction]:
    best = None
    for intent in predictions.intents:
        if intent.name == NONE_INTENT:
            continue
        if best is None or intent.confidence > best.confidence:
            best = intent
    return best


def merge_spell_checked(
    original: IntentPredictions,
    spell_checked: IntentPredictions,
) -> IntentPredictions:
    """
    Merge predictions made on the original and the spell-checked utterance.

    Args:
        original: Predictions on the original utterance
        spell_checked: Predictions on the corrected utterance

    Returns:
        Merged predictions; intents keep the original order

    Raises:
        ValueError: If the two sets do not share the same intent names
    """
    if {i.name for i in original.intents} != {i.name for i in spell_checked.intents}:
        raise ValueError("Original and spell-checked predictions must share the same intents")

    merged = copy.deepcopy(original)

    best_original = _most_confident(original)
    best_spell_checked = _most_confident(spell_checked)
    original_conf = best_original.confidence if best_original else 0.0
    spell_checked_conf = best_spell_checked.confidence if best_spell_checked else 0.0

    if original.intents and original_conf <= spell_checked_conf:
        for intent in merged.intents:
            intent.confidence = max(intent.confidence, spell_checked.get(intent.name).confidence)

    merged.oos = spell_checked.oos
    return merged


class EnsembleClassifier(IntentClassifier):
    """Decorator combining predictions on original and spell-checked utterances."""

    display_name = "Spell-check Intent Classifier"
    name = "spellcheck-classifier"

    def __init__(self, inner_clf: IntentClassifier):
        self.inner_clf = inner_clf
        self._state: ClassifierState = Untrained()

    @property
    def state(self) -> ClassifierState:
        return self._state

    async def train(self, train_input: IntentTrainInput, progress: Optional[ProgressCallback] = None) -> None:
        await self.inner_clf.train(train_input, progress)
        self._state = Trained(EnsembleModel(inner_clf_model=self.inner_clf.serialize()))

    def serialize(self) -> str:
        if isinstance(self._state, Untrained):
            raise NotTrained(self.display_name, "serialize")
        return self._state.model.model_dump_json(by_alias=True)

    async def load(self, serialized: str) -> None:
        try:
            model = EnsembleModel.model_validate_json(serialized)
            predictors = await self._make_predictors(model)
        except Exception as err:
            raise ModelLoadingError(self.display_name, err) from err
        self._state = Ready(model, predictors)

    async def _make_predictors(self, model: EnsembleModel) -> Predictors:
        await self.inner_clf.load(model.inner_clf_model)
        return Predictors(inner_clf=self.inner_clf)

    async def predict(self, utterance: Utterance) -> IntentPredictions:
        if isinstance(self._state, Untrained):
            raise NotTrained(self.display_name, "predict")

        if isinstance(self._state, Trained):
            self._state = Ready(self._state.model, await self._make_predictors(self._state.model))

        inner_clf = self._state.predictors.inner_clf
        spell_checked = utterance.spell_checked
        if str(spell_checked) != str(utterance):
            logger.debug(f"Predicting on original and spell-checked {str(spell_checked)!r}")
            original, corrected = await asyncio.gather(
                inner_clf.predict(utterance),
                inner_clf.predict(spell_checked),
            )
            return merge_spell_checked(original, corrected)

        return await inner_clf.predict(utterance)
