#!/usr/bin/env python3
"""
Inference script for multi-language intent prediction.

This script:
1. Opens the model store and an in-process engine
2. Predicts intents with language detection and fallback
3. Outputs standardized prediction payloads
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from tqdm import tqdm

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from polyglot_nlu.config import Config
from polyglot_nlu.data.model_store import FileModelStore
from polyglot_nlu.engine.engine import LocalEngine
from polyglot_nlu.errors import NoModelAvailable
from polyglot_nlu.inference.orchestrator import BatchPredictionPipeline, PredictionOrchestrator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_texts_from_jsonl(path: str) -> list[str]:
    """Load {"text"} records from a JSONL file."""
    texts = []
    with open(path, "r") as f:
        for line in f:
            if line.strip():
                texts.append(json.loads(line)["text"])
    return texts


async def run(args, config: Config):
    engine = LocalEngine(config)
    store = FileModelStore(config.storage.models_dir, engine.id_service)
    orchestrator = PredictionOrchestrator(
        engine=engine,
        model_store=store,
        default_language=config.orchestrator.default_language,
        anticipated_language=config.orchestrator.anticipated_language,
        id_service=engine.id_service,
    )

    if args.text:
        try:
            result = await orchestrator.predict(args.text)
        except NoModelAvailable as e:
            logger.error(str(e))
            return

        print("\n" + "=" * 60)
        print("PREDICTION RESULT")
        print("=" * 60)
        print(result.to_json())
        print("=" * 60)

    elif args.input:
        logger.info(f"Loading texts from {args.input}")
        texts = load_texts_from_jsonl(args.input)
        logger.info(f"Processing {len(texts)} texts")

        pipeline = BatchPredictionPipeline(
            orchestrator=orchestrator,
            batch_size=config.orchestrator.batch_size,
        )
        with tqdm(total=len(texts), desc="Predicting") as progress_bar:
            results = await pipeline.process(
                texts,
                progress_callback=lambda done, total: progress_bar.update(done - progress_bar.n),
            )

        with open(args.output, "w") as f:
            for text, result in zip(texts, results):
                record = result.to_dict() if result is not None else {"error": "no_model_available"}
                record["text"] = text
                f.write(json.dumps(record) + "\n")

        logger.info(f"Saved predictions to {args.output}")

        print("\n" + "=" * 60)
        print("INFERENCE STATISTICS")
        print("=" * 60)
        for key, value in orchestrator.get_statistics().items():
            if isinstance(value, float):
                print(f"{key}: {value:.4f}")
            else:
                print(f"{key}: {value}")
        print("=" * 60)

    else:
        print("\nEntering interactive mode. Type 'quit' to exit.\n")

        while True:
            try:
                user_input = (await asyncio.to_thread(input, "Text: ")).strip()
            except (KeyboardInterrupt, EOFError):
                break
            if user_input.lower() == "quit":
                break
            if not user_input:
                continue

            try:
                result = await orchestrator.predict(user_input)
            except NoModelAvailable as e:
                print(f"Error: {e}")
                continue

            print("\nResult:")
            print(result.to_json())
            print()


def main():
    parser = argparse.ArgumentParser(description="Predict intents for user text")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--models-dir",
        type=str,
        default=None,
        help="Directory of the model store",
    )
    parser.add_argument(
        "--text",
        type=str,
        help="Text for single prediction",
    )
    parser.add_argument(
        "--input",
        type=str,
        help="Path to input JSONL file with {\"text\"} records",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="predictions.jsonl",
        help="Path to output predictions file",
    )
    parser.add_argument(
        "--default-language",
        type=str,
        default=None,
        help="Language used when detection and the anticipated language fail",
    )
    parser.add_argument(
        "--anticipated-language",
        type=str,
        default=None,
        help="Language expected for the user",
    )
    parser.add_argument(
        "--no-spellcheck",
        action="store_true",
        help="Disable spelling correction",
    )
    args = parser.parse_args()

    config = Config.from_yaml(args.config) if args.config else Config()
    if args.models_dir:
        config.storage.models_dir = args.models_dir
    if args.default_language:
        config.orchestrator.default_language = args.default_language
    if args.anticipated_language:
        config.orchestrator.anticipated_language = args.anticipated_language
    if args.no_spellcheck:
        config.spellcheck.enabled = False

    asyncio.run(run(args, config))


if __name__ == "__main__":
    main()
