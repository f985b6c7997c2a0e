"""
Prediction engine: loads trained models and runs them on raw text.

The engine owns the model cache. ``LocalEngine`` is the in-process
implementation used by the CLI scripts and the tests; the orchestrator only
relies on the abstract ``Engine`` capabilities.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import numpy as np

from ..config import Config
from ..data.utterance import Utterance, tokenize
from ..data.vocab import is_word
from ..errors import ModelLoadingError, ModelNotFound
from ..language.spell_checker import SpellChecker
from ..models.intent_classifier import (
    IntentPredictions,
    IntentTrainInput,
    ProgressCallback,
    TorchIntentClassifier,
)
from ..models.model_id import Model, ModelId, ModelIdService, Specifications
from ..models.spellcheck_classifier import EnsembleClassifier
from .cache import ModelCache

logger = logging.getLogger(__name__)


class Engine(ABC):
    """Capabilities the prediction orchestrator consumes."""

    @abstractmethod
    def has_model(self, model_id: ModelId) -> bool:
        ...

    @abstractmethod
    async def load_model(self, model: Model) -> None:
        """Load a model into the cache; loading a resident model is a no-op."""

    @abstractmethod
    async def predict(self, text: str, model_id: ModelId) -> IntentPredictions:
        ...

    @abstractmethod
    async def detect_language(self, text: str, models_by_lang: Mapping[str, ModelId]) -> Optional[str]:
        ...

    @abstractmethod
    def get_specifications(self) -> Specifications:
        ...


@dataclass
class LoadedModel:
    """A model ready for inference."""
    model_id: ModelId
    vocab: dict[str, np.ndarray]
    classifier: EnsembleClassifier
    spell_checker: SpellChecker


class LocalEngine(Engine):
    """In-process engine running spell-checked torch intent classifiers."""

    def __init__(
        self,
        config: Optional[Config] = None,
        id_service: Optional[ModelIdService] = None,
    ):
        self.config = config or Config()
        self.id_service = id_service or ModelIdService()
        self._cache: ModelCache[LoadedModel] = ModelCache(self.config.engine.model_cache_size)

    @property
    def cache(self) -> ModelCache[LoadedModel]:
        return self._cache

    def get_specifications(self) -> Specifications:
        return Specifications(
            engine_version=self.config.engine.engine_version,
            classifier=f"{EnsembleClassifier.name}/{TorchIntentClassifier.name}",
            vector_dim=self.config.engine.vector_dim,
        )

    def has_model(self, model_id: ModelId) -> bool:
        return self._cache.has(model_id)

    async def load_model(self, model: Model) -> None:
        await self._cache.load(model.model_id, lambda: self._make_loaded_model(model))

    async def _make_loaded_model(self, model: Model) -> LoadedModel:
        expected = self.id_service.compute_specification_hash(self.get_specifications())
        if model.model_id.specification_hash != expected:
            raise ModelLoadingError(
                "LocalEngine",
                ValueError(f"model {self.id_service.to_string(model.model_id)} was trained with other specifications"),
            )

        try:
            content = json.loads(model.content)
            vocab = {
                token: np.asarray(vector, dtype=np.float32)
                for token, vector in content["vocab"].items()
            }
            classifier_model = content["classifier"]
        except (ValueError, KeyError, TypeError) as err:
            raise ModelLoadingError("LocalEngine", err) from err

        classifier = EnsembleClassifier(TorchIntentClassifier(self.config.classifier))
        await classifier.load(classifier_model)

        logger.info(f"Loaded model {self.id_service.to_string(model.model_id)}")
        return LoadedModel(
            model_id=model.model_id,
            vocab=vocab,
            classifier=classifier,
            spell_checker=SpellChecker(vocab, self.config.spellcheck),
        )

    async def train(
        self,
        language_code: str,
        intents: Mapping[str, Sequence[str]],
        vocab: Mapping[str, Sequence[float]],
        none_utterances: Sequence[str] = (),
        progress: Optional[ProgressCallback] = None,
    ) -> Model:
        """
        Train a model for one language.

        Args:
            language_code: Language of the training data
            intents: Example texts per intent name
            vocab: Token vectors; every vector must have the engine's dimension
            none_utterances: Background examples matching no intent
            progress: Optional callback receiving completion in [0, 1]

        Returns:
            The trained, not yet persisted, Model
        """
        dim = self.config.engine.vector_dim
        vocab = {token.lower(): np.asarray(vector, dtype=np.float32) for token, vector in vocab.items()}
        bad = [token for token, vector in vocab.items() if vector.shape != (dim,)]
        if bad:
            raise ValueError(f"Vectors of {bad[:5]} do not have dimension {dim}")

        def to_utterance(text: str) -> Utterance:
            return Utterance.from_text(text, vocab, language_code, dim)

        train_input = IntentTrainInput(
            language_code=language_code,
            intents={name: [to_utterance(t) for t in texts] for name, texts in intents.items()},
            none_utterances=[to_utterance(t) for t in none_utterances],
        )

        classifier = EnsembleClassifier(TorchIntentClassifier(self.config.classifier))
        await classifier.train(train_input, progress)

        content = json.dumps({
            "language_code": language_code,
            "vocab": {token: vector.tolist() for token, vector in sorted(vocab.items())},
            "classifier": classifier.serialize(),
        })
        model_id = self.id_service.compute_id(content, self.get_specifications(), language_code)
        logger.info(f"Trained model {self.id_service.to_string(model_id)}")
        return Model(model_id=model_id, content=content)

    def _build_utterance(self, text: str, loaded: LoadedModel) -> Utterance:
        utterance = Utterance.from_text(
            text,
            loaded.vocab,
            loaded.model_id.language_code,
            self.config.engine.vector_dim,
        )
        if self.config.spellcheck.enabled:
            utterance.set_spell_checked(loaded.spell_checker.predict(utterance))
        return utterance

    async def predict(self, text: str, model_id: ModelId) -> IntentPredictions:
        loaded = self._cache.get(model_id)
        if loaded is None:
            raise ModelNotFound(model_id)

        utterance = self._build_utterance(text, loaded)
        return await loaded.classifier.predict(utterance)

    async def detect_language(self, text: str, models_by_lang: Mapping[str, ModelId]) -> Optional[str]:
        """
        Detect the language of a text from the vocabularies of loaded models.

        Each language scores the share of word tokens found in its model's
        vocabulary; ties go to the language listed first.

        Returns:
            Best scoring language, or None when no loaded model covers any word
        """
        words = [t.lower() for t in tokenize(text) if is_word(t)]
        if not words:
            return None

        scores: dict[str, float] = {}
        for language, model_id in models_by_lang.items():
            loaded = self._cache.peek(model_id)
            if loaded is None:
                continue
            scores[language] = sum(1 for w in words if w in loaded.vocab) / len(words)

        if not scores:
            return None
        best = max(scores, key=scores.get)
        return best if scores[best] > 0 else None
