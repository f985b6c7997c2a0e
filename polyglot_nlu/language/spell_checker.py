"""
Nearest-vocabulary spelling correction.

Each word token missing from the vocabulary is replaced by its closest
vocabulary entry when both are long enough for the correction to be
trusted. Unlike a plain nearest-entry lookup, candidates more than
``max_edit_distance`` edits away are dropped (set it to None to keep any
nearest entry). The result is an alternative utterance with the same
token count, or None when nothing was corrected.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

import numpy as np

from ..config import SpellCheckConfig
from ..data.utterance import Token, Utterance
from ..data.vocab import get_closest_spelling_token, is_word

logger = logging.getLogger(__name__)


@dataclass
class AlternateToken:
    """Candidate token of the spell-checked utterance."""
    value: str
    vector: np.ndarray
    pos: str
    is_alter: bool = False


class SpellChecker:
    """Vocabulary-based spell checker."""

    def __init__(
        self,
        vocab: Mapping[str, Sequence[float]],
        config: Optional[SpellCheckConfig] = None,
    ):
        self.vocab = vocab
        self.config = config or SpellCheckConfig()
        self._vocab_keys = list(vocab.keys())

    def predict(self, utterance: Utterance) -> Optional[Utterance]:
        """
        Produce a spell-corrected alternative of an utterance.

        Args:
            utterance: Utterance to correct

        Returns:
            A new Utterance in the same language, or None when no token
            was altered (callers then use the original utterance only)
        """
        alt_tokens = [self._correct_token(token) for token in utterance.tokens]

        has_alternate = (
            len(alt_tokens) == len(utterance.tokens)
            and any(t.is_alter for t in alt_tokens)
        )
        if not has_alternate:
            return None

        corrected = Utterance(
            [t.value for t in alt_tokens],
            [t.vector for t in alt_tokens],
            [t.pos for t in alt_tokens],
            utterance.language_code,
        )
        logger.debug(f"Spell-checked {str(utterance)!r} -> {str(corrected)!r}")
        return corrected

    def _correct_token(self, token: Token) -> AlternateToken:
        str_tok = token.to_string(lower_case=True)
        if not token.is_word or str_tok in self.vocab or token.entities:
            return self._keep(token)

        closest = get_closest_spelling_token(
            str_tok,
            self._vocab_keys,
            max_edit_distance=self.config.max_edit_distance,
        )
        if closest is None or not self._is_closest_token_valid(token, closest):
            return self._keep(token)

        return AlternateToken(
            value=closest,
            vector=np.asarray(self.vocab[closest], dtype=np.float32),
            pos=token.pos,
            is_alter=True,
        )

    def _is_closest_token_valid(self, original: Token, closest: str) -> bool:
        # Short tokens are too ambiguous to correct reliably
        min_len = self.config.min_token_length
        return is_word(closest) and len(original.value) >= min_len and len(closest) >= min_len

    @staticmethod
    def _keep(token: Token) -> AlternateToken:
        return AlternateToken(value=token.value, vector=token.vector, pos=token.pos)
