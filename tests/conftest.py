"""Shared fixtures: small deterministic vocabularies and engine configuration."""

import numpy as np
import pytest

from polyglot_nlu.config import ClassifierConfig, Config, EngineConfig
from polyglot_nlu.data.utterance import Utterance

VECTOR_DIM = 16

EN_WORDS = [
    "hello", "there", "friend", "good", "morning",
    "order", "pizza", "please", "want", "buy", "now",
    "weather", "today", "rain", "world",
]
FR_WORDS = [
    "bonjour", "salut", "ami", "commander", "pizza",
    "veux", "acheter", "maintenant", "meteo", "pluie",
]


def make_vocab(words, dim=VECTOR_DIM, seed=0):
    rng = np.random.default_rng(seed)
    return {w: rng.normal(size=dim).astype(np.float32) for w in words}


def make_utterance(text, vocab=None, language_code="en", dim=VECTOR_DIM):
    return Utterance.from_text(text, vocab or {}, language_code, dim)


@pytest.fixture
def en_vocab():
    return make_vocab(EN_WORDS, seed=1)


@pytest.fixture
def fr_vocab():
    return make_vocab(FR_WORDS, seed=2)


@pytest.fixture
def config():
    return Config(
        classifier=ClassifierConfig(hidden_size=32, num_epochs=150, learning_rate=2e-2, seed=7),
        engine=EngineConfig(vector_dim=VECTOR_DIM, model_cache_size=4),
    )
