"""
Persistent storage of trained models.

Latest-model ordering: greatest ``created_on`` wins; on equal timestamps the
most recently saved model wins.
"""

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..errors import ModelNotFound
from ..models.model_id import Model, ModelId, ModelIdService, ModelQuery

logger = logging.getLogger(__name__)


class ModelStore(ABC):
    """Storage of trained models addressable by id."""

    @abstractmethod
    async def save_model(self, model: Model) -> None:
        ...

    @abstractmethod
    async def get_model(self, model_id: ModelId) -> Model:
        """Fetch a model by id, raising ModelNotFound when absent."""

    @abstractmethod
    async def get_latest_model(self, query: ModelQuery) -> Model:
        """Fetch the most recent model matching the query, raising ModelNotFound when none does."""

    @abstractmethod
    async def list_models(self, query: Optional[ModelQuery] = None) -> list[ModelId]:
        ...


class InMemoryModelStore(ModelStore):
    """Model store kept in process memory."""

    def __init__(self, id_service: Optional[ModelIdService] = None):
        self.id_service = id_service or ModelIdService()
        self._models: dict[ModelId, Model] = {}
        self._save_order: dict[ModelId, int] = {}
        self._counter = 0

    async def save_model(self, model: Model) -> None:
        self._counter += 1
        self._models[model.model_id] = model
        self._save_order[model.model_id] = self._counter

    async def get_model(self, model_id: ModelId) -> Model:
        try:
            return self._models[model_id]
        except KeyError:
            raise ModelNotFound(model_id) from None

    async def get_latest_model(self, query: ModelQuery) -> Model:
        candidates = [m for m in self._models.values() if self.id_service.matches(m.model_id, query)]
        if not candidates:
            raise ModelNotFound(query)
        return max(candidates, key=lambda m: (m.created_on, self._save_order[m.model_id]))

    async def list_models(self, query: Optional[ModelQuery] = None) -> list[ModelId]:
        return [
            model_id for model_id in self._models
            if query is None or self.id_service.matches(model_id, query)
        ]


class FileModelStore(ModelStore):
    """
    Model store backed by a directory, one JSON file per model.

    Files are named after the model id string, so the id of a stored model
    is known without reading it.
    """

    SUFFIX = ".model.json"

    def __init__(self, models_dir: str, id_service: Optional[ModelIdService] = None):
        self.models_dir = Path(models_dir)
        self.id_service = id_service or ModelIdService()
        os.makedirs(self.models_dir, exist_ok=True)

    def _path(self, model_id: ModelId) -> Path:
        return self.models_dir / f"{self.id_service.to_string(model_id)}{self.SUFFIX}"

    async def save_model(self, model: Model) -> None:
        path = self._path(model.model_id)
        payload = json.dumps(model.to_dict())
        await asyncio.to_thread(path.write_text, payload, "utf-8")
        logger.info(f"Saved model to {path}")

    async def get_model(self, model_id: ModelId) -> Model:
        path = self._path(model_id)
        if not path.exists():
            raise ModelNotFound(model_id)
        raw = await asyncio.to_thread(path.read_text, "utf-8")
        return Model.from_dict(json.loads(raw))

    async def get_latest_model(self, query: ModelQuery) -> Model:
        model_ids = await self.list_models(query)
        if not model_ids:
            raise ModelNotFound(query)

        models = [await self.get_model(model_id) for model_id in model_ids]
        return max(
            models,
            key=lambda m: (m.created_on, self._path(m.model_id).stat().st_mtime_ns),
        )

    async def list_models(self, query: Optional[ModelQuery] = None) -> list[ModelId]:
        model_ids = []
        for path in sorted(self.models_dir.glob(f"*{self.SUFFIX}")):
            try:
                model_id = self.id_service.from_string(path.name[: -len(self.SUFFIX)])
            except ValueError:
                logger.warning(f"Ignoring unrecognized file in model store: {path}")
                continue
            if query is None or self.id_service.matches(model_id, query):
                model_ids.append(model_id)
        return model_ids
