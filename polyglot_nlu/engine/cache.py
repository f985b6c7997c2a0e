"""Cache of loaded models for inference."""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..models.model_id import ModelId

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheStats:
    """Model cache statistics."""
    total_entries: int
    hit_count: int
    miss_count: int
    load_count: int
    eviction_count: int
    hit_rate: float


class ModelCache(Generic[T]):
    """
    Bounded LRU cache of loaded models keyed by ModelId.

    Concurrent loads of the same id are serialized on a per-id lock and a
    load of an id already resident is a no-op, so many callers may ask for
    a model while it is built at most once. A lock only lives while some
    load of its id is in flight.
    """

    def __init__(self, max_entries: int = 8):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: "OrderedDict[ModelId, T]" = OrderedDict()
        self._locks: dict[ModelId, asyncio.Lock] = {}
        self._pending: dict[ModelId, int] = {}
        self._hits = 0
        self._misses = 0
        self._loads = 0
        self._evictions = 0

    def has(self, model_id: ModelId) -> bool:
        return model_id in self._entries

    def get(self, model_id: ModelId) -> Optional[T]:
        """Get a loaded model, marking it as recently used."""
        entry = self._entries.get(model_id)
        if entry is None:
            self._misses += 1
            return None

        self._hits += 1
        self._entries.move_to_end(model_id)
        return entry

    def peek(self, model_id: ModelId) -> Optional[T]:
        """Get a loaded model without touching recency or statistics."""
        return self._entries.get(model_id)

    async def load(self, model_id: ModelId, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Make sure a model is resident, building it with ``factory`` if needed.

        Args:
            model_id: Id of the model to load
            factory: Coroutine function building the loaded model

        Returns:
            The resident model
        """
        lock = self._locks.setdefault(model_id, asyncio.Lock())
        self._pending[model_id] = self._pending.get(model_id, 0) + 1
        try:
            async with lock:
                existing = self._entries.get(model_id)
                if existing is not None:
                    self._entries.move_to_end(model_id)
                    logger.debug(f"Model {model_id} already loaded")
                    return existing

                entry = await factory()
                self._entries[model_id] = entry
                self._loads += 1

                while len(self._entries) > self._max_entries:
                    self._evict_oldest()

                return entry
        finally:
            self._pending[model_id] -= 1
            if self._pending[model_id] == 0:
                del self._pending[model_id]
                del self._locks[model_id]

    def _evict_oldest(self):
        """Evict least recently used entry."""
        model_id, _ = self._entries.popitem(last=False)
        self._evictions += 1
        logger.info(f"Evicted model {model_id} from cache")

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        total = self._hits + self._misses
        return CacheStats(
            total_entries=len(self._entries),
            hit_count=self._hits,
            miss_count=self._misses,
            load_count=self._loads,
            eviction_count=self._evictions,
            hit_rate=self._hits / total if total > 0 else 0.0,
        )
