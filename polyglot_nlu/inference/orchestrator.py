"""
Multi-language prediction orchestration.

The orchestrator:
1. Detects the language of the input using the models already loaded
2. Tries the detected, anticipated and default languages in that order
3. Lazily fetches and loads a model for a language when none is resident
4. Returns the first prediction that did not fail

Languages are tried strictly one after the other: the next language is only
worth its cost once the previous one proved unusable.
"""

import asyncio
import logging
import time
from typing import AsyncIterator, Callable, Mapping, Optional

from ..data.model_store import ModelStore
from ..engine.engine import Engine
from ..errors import NoModelAvailable
from ..models.model_id import Model, ModelId, ModelIdService
from .model_registry import LanguageModelRegistry
from .predictor import PredictionResult

logger = logging.getLogger(__name__)


class PredictionOrchestrator:
    """
    Prediction entry point with language fallback.

    Failures of language detection, of the model store and of a single
    language's prediction are logged and only make that step unusable;
    ``NoModelAvailable`` is raised when every candidate language failed.
    """

    def __init__(
        self,
        engine: Engine,
        model_store: ModelStore,
        default_language: str,
        anticipated_language: Optional[str] = None,
        models_by_lang: Optional[Mapping[str, ModelId]] = None,
        id_service: Optional[ModelIdService] = None,
        registry: Optional[LanguageModelRegistry] = None,
    ):
        self.engine = engine
        self.model_store = model_store
        self.default_language = default_language
        self.anticipated_language = anticipated_language
        self.id_service = id_service or ModelIdService()
        self.registry = registry or LanguageModelRegistry(models_by_lang)

        # Statistics tracking
        self._predictions = 0
        self._fallbacks = 0
        self._detection_failures = 0
        self._exhausted = 0

    async def predict(self, text: str, anticipated_language: Optional[str] = None) -> PredictionResult:
        """
        Predict intents for a text, falling back across languages.

        Args:
            text: Raw user text
            anticipated_language: Overrides the language anticipated at construction

        Returns:
            PredictionResult of the first usable language, with detected_language set

        Raises:
            NoModelAvailable: If no candidate language produced a usable prediction
        """
        self._predictions += 1
        loaded_models = self._loaded_models()

        detected_language: Optional[str] = None
        try:
            detected_language = await self.engine.detect_language(text, loaded_models)
        except Exception as e:
            self._detection_failures += 1
            logger.error(
                f'An error occurred when detecting language for input "{text}". '
                f"Falling back on default language: {self.default_language}.",
                exc_info=e,
            )

        anticipated = anticipated_language or self.anticipated_language
        languages_to_try: list[str] = []
        for lang in (detected_language, anticipated, self.default_language):
            if lang is not None and lang not in languages_to_try:
                languages_to_try.append(lang)

        result: Optional[PredictionResult] = None
        for lang in languages_to_try:
            result = await self._try_predict_in_language(text, lang)
            if not self._is_empty_or_error(result):
                break

        if self._is_empty_or_error(result):
            self._exhausted += 1
            raise NoModelAvailable(languages_to_try)

        if result.language != languages_to_try[0]:
            self._fallbacks += 1

        result.detected_language = detected_language
        return result

    def _loaded_models(self) -> dict[str, ModelId]:
        """Split tracked models into loaded and missing; warn about the missing ones."""
        cache_state = {
            lang: (model_id, self.engine.has_model(model_id))
            for lang, model_id in self.registry.snapshot().items()
        }

        missing = {
            lang: self.id_service.to_string(model_id)
            for lang, (model_id, loaded) in cache_state.items()
            if not loaded
        }
        if missing:
            logger.warning(
                f"About to detect language, but the following models are not loaded: {missing}. "
                "Make sure the model cache is large enough to fit all languages."
            )

        return {lang: model_id for lang, (model_id, loaded) in cache_state.items() if loaded}

    async def _try_predict_in_language(self, text: str, language: str) -> Optional[PredictionResult]:
        model_id = self.registry.get(language)

        if model_id is None or not self.engine.has_model(model_id):
            model = await self._fetch_model(language)
            if model is None:
                return None

            fetched_id = self.id_service.to_id(model)
            await self.registry.compare_and_set(language, model_id, fetched_id)
            model_id = fetched_id
            try:
                await self.engine.load_model(model)
            except Exception as e:
                logger.error(
                    f"An error occurred when loading model {self.id_service.to_string(model_id)}",
                    exc_info=e,
                )
                return None

        t0 = time.monotonic()
        try:
            predictions = await self.engine.predict(text, model_id)
        except Exception as e:
            logger.error(
                f'An error occurred when predicting for input "{text}" '
                f"with model {self.id_service.to_string(model_id)}",
                exc_info=e,
            )
            return PredictionResult.failed(language, self._elapsed_ms(t0))

        return PredictionResult.from_predictions(predictions, language, self._elapsed_ms(t0))

    async def _fetch_model(self, language: str) -> Optional[Model]:
        """
        Fetch the model to use for a language.

        A tracked id is fetched exactly; otherwise the latest model compatible
        with the engine's specifications. Store failures count as "no model".
        """
        model_id = self.registry.get(language)
        try:
            if model_id is not None:
                return await self.model_store.get_model(model_id)

            specifications = self.engine.get_specifications()
            query = self.id_service.brief_query(specifications, language)
            return await self.model_store.get_latest_model(query)
        except Exception as e:
            logger.warning(f"No model could be fetched for language '{language}': {e}")
            return None

    @staticmethod
    def _is_empty_or_error(result: Optional[PredictionResult]) -> bool:
        return result is None or result.errored

    @staticmethod
    def _elapsed_ms(t0: float) -> float:
        return (time.monotonic() - t0) * 1000

    def get_statistics(self) -> dict:
        """
        Get prediction statistics.

        Returns:
            Dictionary with call counts and rates
        """
        total = self._predictions
        if total == 0:
            return {}

        return {
            "total_predictions": total,
            "language_fallbacks": self._fallbacks,
            "detection_failures": self._detection_failures,
            "no_model_available": self._exhausted,
            "fallback_rate": self._fallbacks / total,
            "failure_rate": self._exhausted / total,
        }

    def reset_statistics(self):
        """Reset prediction statistics."""
        self._predictions = 0
        self._fallbacks = 0
        self._detection_failures = 0
        self._exhausted = 0


class BatchPredictionPipeline:
    """
    High-throughput batch prediction.

    Texts of one batch are predicted concurrently; a text for which no
    model is available yields None instead of failing the batch.
    """

    def __init__(
        self,
        orchestrator: PredictionOrchestrator,
        batch_size: int = 16,
    ):
        self.orchestrator = orchestrator
        self.batch_size = batch_size

    async def _predict_batch(self, texts: list[str]) -> list[Optional[PredictionResult]]:
        outcomes = await asyncio.gather(
            *(self.orchestrator.predict(text) for text in texts),
            return_exceptions=True,
        )

        results: list[Optional[PredictionResult]] = []
        for text, outcome in zip(texts, outcomes):
            if isinstance(outcome, NoModelAvailable):
                logger.warning(f'No prediction for "{text}": {outcome}')
                results.append(None)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)
        return results

    async def process(
        self,
        texts: list[str],
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> list[Optional[PredictionResult]]:
        """
        Process a list of texts in batches.

        Args:
            texts: Texts to predict
            progress_callback: Optional callback(processed, total)

        Returns:
            One result per text, None where no model was available
        """
        results: list[Optional[PredictionResult]] = []
        total = len(texts)

        for i in range(0, total, self.batch_size):
            results.extend(await self._predict_batch(texts[i : i + self.batch_size]))

            if progress_callback:
                progress_callback(len(results), total)

        return results

    async def process_stream(self, texts: list[str]) -> AsyncIterator[Optional[PredictionResult]]:
        """Yield results batch by batch as they complete."""
        for i in range(0, len(texts), self.batch_size):
            for result in await self._predict_batch(texts[i : i + self.batch_size]):
                yield result
