"""
Model identity: specifications fingerprint, model ids and trained artifacts.
"""

import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone


def _hash(payload: str, length: int = 16) -> str:
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:length]


@dataclass(frozen=True)
class Specifications:
    """Compatibility fingerprint of an engine; models trained under other specifications are never selected."""
    engine_version: str
    classifier: str
    vector_dim: int


@dataclass(frozen=True)
class ModelQuery:
    """Partial model id used to look up the latest compatible model."""
    specification_hash: str
    language_code: str


@dataclass(frozen=True)
class ModelId:
    """Immutable fingerprint identifying exactly one trained model."""
    language_code: str
    specification_hash: str
    content_hash: str


@dataclass
class Model:
    """Opaque trained artifact addressable by its ModelId."""
    model_id: ModelId
    content: str
    created_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "model_id": asdict(self.model_id),
            "content": self.content,
            "created_on": self.created_on.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Model":
        return cls(
            model_id=ModelId(**data["model_id"]),
            content=data["content"],
            created_on=datetime.fromisoformat(data["created_on"]),
        )


class ModelIdService:
    """Builds, formats and parses model ids."""

    SEPARATOR = "."

    def compute_specification_hash(self, specifications: Specifications) -> str:
        return _hash(json.dumps(asdict(specifications), sort_keys=True))

    def compute_id(self, content: str, specifications: Specifications, language_code: str) -> ModelId:
        return ModelId(
            language_code=language_code,
            specification_hash=self.compute_specification_hash(specifications),
            content_hash=_hash(content),
        )

    def to_id(self, model: Model) -> ModelId:
        return model.model_id

    def to_string(self, model_id: ModelId) -> str:
        return self.SEPARATOR.join(
            [model_id.content_hash, model_id.specification_hash, model_id.language_code]
        )

    def from_string(self, value: str) -> ModelId:
        parts = value.split(self.SEPARATOR)
        if len(parts) != 3 or not all(parts):
            raise ValueError(f"Invalid model id string: {value!r}")
        content_hash, specification_hash, language_code = parts
        return ModelId(
            language_code=language_code,
            specification_hash=specification_hash,
            content_hash=content_hash,
        )

    def brief_query(self, specifications: Specifications, language_code: str) -> ModelQuery:
        return ModelQuery(
            specification_hash=self.compute_specification_hash(specifications),
            language_code=language_code,
        )

    def matches(self, model_id: ModelId, query: ModelQuery) -> bool:
        return (
            model_id.specification_hash == query.specification_hash
            and model_id.language_code == query.language_code
        )
