"""
Tokenized, vectorized representation of user text.

Handles:
- Tokenization of raw text
- Token vectors looked up from a model vocabulary
- The optional spell-checked alternative of an utterance
"""

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import numpy as np

from .vocab import is_word

TOKEN_RE = re.compile(r"\w+(?:['’-]\w+)*|[^\w\s]", re.UNICODE)

DEFAULT_POS = "N/A"


def tokenize(text: str) -> list[str]:
    """Split text into word and punctuation tokens, dropping whitespace."""
    return TOKEN_RE.findall(text)


@dataclass
class Token:
    """A single utterance token."""
    value: str
    vector: np.ndarray
    pos: str = DEFAULT_POS
    entities: list[str] = field(default_factory=list)

    @property
    def is_word(self) -> bool:
        return is_word(self.value)

    def to_string(self, lower_case: bool = False) -> str:
        return self.value.lower() if lower_case else self.value


class Utterance:
    """Ordered sequence of tokens in one language."""

    def __init__(
        self,
        tokens: Sequence[str],
        vectors: Sequence[Sequence[float]],
        pos_tags: Sequence[str],
        language_code: str,
        entities: Optional[Sequence[Sequence[str]]] = None,
    ):
        if not (len(tokens) == len(vectors) == len(pos_tags)):
            raise ValueError("tokens, vectors and pos_tags must have the same length")
        entities = entities or [[] for _ in tokens]

        self.language_code = language_code
        self.tokens: list[Token] = [
            Token(
                value=value,
                vector=np.asarray(vector, dtype=np.float32),
                pos=pos,
                entities=list(ents),
            )
            for value, vector, pos, ents in zip(tokens, vectors, pos_tags, entities)
        ]
        self._spell_checked: Optional["Utterance"] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        vocab: Mapping[str, Sequence[float]],
        language_code: str,
        vector_dim: int,
    ) -> "Utterance":
        """
        Build an utterance from raw text using a vocabulary of token vectors.

        Tokens missing from the vocabulary get a zero vector.
        """
        values = tokenize(text)
        zeros = np.zeros(vector_dim, dtype=np.float32)
        vectors = [vocab.get(v.lower(), zeros) for v in values]
        return cls(values, vectors, [DEFAULT_POS] * len(values), language_code)

    @property
    def spell_checked(self) -> "Utterance":
        """Spell-corrected alternative, or the utterance itself when there is none."""
        return self._spell_checked if self._spell_checked is not None else self

    def set_spell_checked(self, alternative: Optional["Utterance"]) -> None:
        if alternative is not None and len(alternative.tokens) != len(self.tokens):
            raise ValueError(
                f"Spell-checked utterance has {len(alternative.tokens)} tokens, "
                f"expected {len(self.tokens)}"
            )
        self._spell_checked = alternative

    def sentence_embedding(self) -> np.ndarray:
        """Mean of the token vectors."""
        if not self.tokens:
            raise ValueError("Cannot embed an empty utterance")
        return np.mean([t.vector for t in self.tokens], axis=0).astype(np.float32)

    def __len__(self) -> int:
        return len(self.tokens)

    def __str__(self) -> str:
        return " ".join(t.value for t in self.tokens)

    def __repr__(self) -> str:
        return f"Utterance({str(self)!r}, language_code={self.language_code!r})"
