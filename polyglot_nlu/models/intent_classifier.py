"""
Intent classifier interface and a reference torch implementation.

The reference classifier:
- Embeds an utterance as the mean of its token vectors
- Adds a small classification head for intent prediction
- Always carries the background "none" intent, whose probability is the OOS score
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
import torch
import torch.nn as nn

from ..config import ClassifierConfig
from ..data.utterance import Utterance
from ..errors import NotTrained
from ..training.trainer import IntentTrainer

logger = logging.getLogger(__name__)

NONE_INTENT = "none"

ProgressCallback = Callable[[float], None]


@dataclass
class IntentPrediction:
    """A single intent with its confidence in [0, 1]."""
    name: str
    confidence: float

    def to_dict(self) -> dict:
        return {"name": self.name, "confidence": self.confidence}


@dataclass
class IntentPredictions:
    """Ordered intent predictions plus an out-of-scope score."""
    intents: list[IntentPrediction] = field(default_factory=list)
    oos: float = 0.0

    def get(self, name: str) -> Optional[IntentPrediction]:
        return next((i for i in self.intents if i.name == name), None)

    def to_dict(self) -> dict:
        return {
            "intents": [i.to_dict() for i in self.intents],
            "oos": self.oos,
        }


@dataclass
class IntentTrainInput:
    """Training examples for one language."""
    language_code: str
    intents: dict[str, list[Utterance]]
    none_utterances: list[Utterance] = field(default_factory=list)


class IntentClassifier(ABC):
    """Capability set shared by every intent classifier."""

    name: str = "intent-classifier"

    @abstractmethod
    async def train(self, train_input: IntentTrainInput, progress: Optional[ProgressCallback] = None) -> None:
        ...

    @abstractmethod
    def serialize(self) -> str:
        ...

    @abstractmethod
    async def load(self, serialized: str) -> None:
        ...

    @abstractmethod
    async def predict(self, utterance: Utterance) -> IntentPredictions:
        ...


class IntentClassificationHead(nn.Module):
    """Classification head for intent prediction."""

    def __init__(
        self,
        input_dim: int,
        hidden_size: int,
        num_labels: int,
        dropout: float = 0.1,
    ):
        super().__init__()
        self.dense = nn.Linear(input_dim, hidden_size)
        self.dropout = nn.Dropout(dropout)
        self.classifier = nn.Linear(hidden_size, num_labels)
        self.activation = nn.GELU()

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        """
        Args:
            features: [batch, input_dim] sentence embeddings

        Returns:
            logits: [batch, num_labels]
        """
        x = self.dense(features)
        x = self.activation(x)
        x = self.dropout(x)
        return self.classifier(x)


class TorchIntentClassifier(IntentClassifier):
    """
    Feed-forward intent classifier over sentence embeddings.

    Serialized form is plain JSON (labels, dimensions and weights as nested
    lists), so a loaded classifier reproduces the trained one exactly.
    """

    name = "torch-intent-classifier"

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()
        self._labels: list[str] = []
        self._input_dim: int = 0
        self._head: Optional[IntentClassificationHead] = None

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    async def train(self, train_input: IntentTrainInput, progress: Optional[ProgressCallback] = None) -> None:
        labels = sorted(name for name in train_input.intents if name != NONE_INTENT)
        labels.append(NONE_INTENT)

        rows: list[np.ndarray] = []
        targets: list[int] = []
        for idx, label in enumerate(labels):
            examples = train_input.intents.get(label, [])
            if label == NONE_INTENT:
                examples = list(examples) + list(train_input.none_utterances)
            for utt in examples:
                if len(utt):
                    rows.append(utt.sentence_embedding())
                    targets.append(idx)

        if not rows:
            raise ValueError(f"No training utterances for language {train_input.language_code!r}")

        input_dim = int(rows[0].shape[0])
        if not any(t == len(labels) - 1 for t in targets):
            # Without background examples the none class anchors on the empty embedding
            rows.append(np.zeros(input_dim, dtype=np.float32))
            targets.append(len(labels) - 1)

        torch.manual_seed(self.config.seed)
        head = IntentClassificationHead(
            input_dim=input_dim,
            hidden_size=self.config.hidden_size,
            num_labels=len(labels),
            dropout=self.config.dropout,
        )
        trainer = IntentTrainer(head, self.config)
        trainer.train(
            torch.tensor(np.stack(rows), dtype=torch.float32),
            torch.tensor(targets, dtype=torch.long),
            progress=progress,
        )

        self._labels = labels
        self._input_dim = input_dim
        self._head = head

    def serialize(self) -> str:
        if self._head is None:
            raise NotTrained(self.name, "serialize")
        return json.dumps({
            "labels": self._labels,
            "input_dim": self._input_dim,
            "hidden_size": self._head.dense.out_features,
            "state": {k: v.tolist() for k, v in self._head.state_dict().items()},
        })

    async def load(self, serialized: str) -> None:
        data = json.loads(serialized)
        head = IntentClassificationHead(
            input_dim=data["input_dim"],
            hidden_size=data["hidden_size"],
            num_labels=len(data["labels"]),
            dropout=self.config.dropout,
        )
        state = {k: torch.tensor(v, dtype=torch.float32) for k, v in data["state"].items()}
        head.load_state_dict(state)
        head.eval()

        self._labels = list(data["labels"])
        self._input_dim = int(data["input_dim"])
        self._head = head

    async def predict(self, utterance: Utterance) -> IntentPredictions:
        if self._head is None:
            raise NotTrained(self.name, "predict")

        if len(utterance):
            features = torch.from_numpy(utterance.sentence_embedding())
        else:
            features = torch.zeros(self._input_dim, dtype=torch.float32)

        with torch.no_grad():
            logits = self._head(features.unsqueeze(0))
            probs = torch.softmax(logits, dim=-1).squeeze(0).tolist()

        intents = [IntentPrediction(name, float(p)) for name, p in zip(self._labels, probs)]
        oos = next(i.confidence for i in intents if i.name == NONE_INTENT)
        return IntentPredictions(intents=intents, oos=oos)
