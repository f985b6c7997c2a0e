"""
Per-language model id registry shared by concurrent prediction requests.
"""

import asyncio
import logging
from typing import Mapping, Optional

from ..models.model_id import ModelId

logger = logging.getLogger(__name__)


class LanguageModelRegistry:
    """
    Tracks which model id the orchestrator uses for each language.

    Holds at most one id per language. Writes go through
    ``compare_and_set`` under a per-language lock so two requests that
    both found a language without a loaded model cannot silently
    overwrite each other.
    """

    def __init__(self, models_by_lang: Optional[Mapping[str, ModelId]] = None):
        self._models: dict[str, ModelId] = dict(models_by_lang or {})
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, language: str) -> Optional[ModelId]:
        return self._models.get(language)

    def snapshot(self) -> dict[str, ModelId]:
        """Copy of the current language -> model id mapping."""
        return dict(self._models)

    def languages(self) -> list[str]:
        return list(self._models)

    async def compare_and_set(
        self,
        language: str,
        expected: Optional[ModelId],
        model_id: ModelId,
    ) -> bool:
        """
        Register ``model_id`` for a language if the entry still equals ``expected``.

        Args:
            language: Language code
            expected: Id the caller last saw for the language (None if untracked)
            model_id: Id to register

        Returns:
            True if the entry was updated, False if another request changed it first
        """
        lock = self._locks.setdefault(language, asyncio.Lock())
        async with lock:
            current = self._models.get(language)
            if current != expected:
                logger.debug(
                    f"Model for '{language}' changed concurrently "
                    f"(expected {expected}, found {current})"
                )
                return False
            self._models[language] = model_id
            return True

    def __contains__(self, language: str) -> bool:
        return language in self._models

    def __len__(self) -> int:
        return len(self._models)
