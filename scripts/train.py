#!/usr/bin/env python3
"""
Training script for a per-language intent model.

This script:
1. Loads intent examples and a vocabulary of token vectors
2. Trains the spell-checked intent classifier for one language
3. Saves the resulting model to the model store
"""

import argparse
import asyncio
import json
import logging
import random
from collections import defaultdict
from pathlib import Path

import numpy as np
import torch
from tqdm import tqdm

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from polyglot_nlu.config import Config
from polyglot_nlu.data.model_store import FileModelStore
from polyglot_nlu.engine.engine import LocalEngine
from polyglot_nlu.models.intent_classifier import NONE_INTENT

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def set_seed(seed: int):
    """Set random seed for reproducibility."""
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def load_examples_from_jsonl(path: str) -> dict[str, list[str]]:
    """Load {"text", "intent"} examples grouped by intent."""
    examples = defaultdict(list)
    with open(path, "r") as f:
        for line in f:
            if not line.strip():
                continue
            data = json.loads(line)
            examples[data["intent"]].append(data["text"])
    return dict(examples)


def load_vocab(path: str) -> dict[str, list[float]]:
    """Load a {token: vector} JSON vocabulary."""
    with open(path, "r") as f:
        return json.load(f)


async def run(args, config: Config):
    examples = load_examples_from_jsonl(args.train_data)
    none_utterances = examples.pop(NONE_INTENT, [])
    vocab = load_vocab(args.vocab)
    logger.info(
        f"Loaded {sum(len(v) for v in examples.values())} examples for "
        f"{len(examples)} intents and {len(vocab)} vocabulary entries"
    )

    engine = LocalEngine(config)
    store = FileModelStore(config.storage.models_dir, engine.id_service)

    with tqdm(total=100, desc=f"Training [{args.language}]") as progress_bar:
        def on_progress(p: float):
            progress_bar.update(round(p * 100) - progress_bar.n)

        model = await engine.train(
            args.language,
            examples,
            vocab,
            none_utterances=none_utterances,
            progress=on_progress,
        )

    await store.save_model(model)
    logger.info(f"Model id: {engine.id_service.to_string(model.model_id)}")


def main():
    parser = argparse.ArgumentParser(description="Train an intent model for one language")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--language",
        type=str,
        required=True,
        help="Language code of the training data",
    )
    parser.add_argument(
        "--train-data",
        type=str,
        required=True,
        help="Path to JSONL file with {\"text\", \"intent\"} examples",
    )
    parser.add_argument(
        "--vocab",
        type=str,
        required=True,
        help="Path to JSON file mapping tokens to vectors",
    )
    parser.add_argument(
        "--models-dir",
        type=str,
        default=None,
        help="Directory of the model store",
    )
    parser.add_argument(
        "--epochs",
        type=int,
        default=None,
        help="Number of training epochs",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed",
    )
    args = parser.parse_args()

    config = Config.from_yaml(args.config) if args.config else Config()
    if args.models_dir:
        config.storage.models_dir = args.models_dir
    if args.epochs:
        config.classifier.num_epochs = args.epochs
    if args.seed is not None:
        config.classifier.seed = args.seed

    set_seed(config.classifier.seed)
    asyncio.run(run(args, config))


if __name__ == "__main__":
    main()
