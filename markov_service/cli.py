#!/usr/bin/env python3
"""
Command-line Markov text generator.

Reads a text file, trains a chain on its words and prints a new
sequence of at most NWORDS words.
"""

import argparse
import re
import sys
from typing import List, Optional

from markov_service.config import settings
from markov_service.services.chain_builder import read_tokens
from markov_service.services.chain_generator import get_rng, seed_rng
from markov_service.services.markov import MarkovModel
from markov_service.utils.logger import setup_logger

logger = setup_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_word_count(value: str) -> int:
    """Leading integer of value, 0 when there is none."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="markov-text",
        description="Generate text from a Markov chain trained on FILE",
    )
    parser.add_argument("file", help="Training text file")
    parser.add_argument("nwords", nargs="?", type=parse_word_count, default=settings.OUTPUT_LENGTH,
                        help="Maximum number of words to generate")
    parser.add_argument("--order", type=int, default=settings.PREFIX_ORDER,
                        help="Prefix length in words")
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED,
                        help="Random seed for reproducible output")
    parser.add_argument("--max-word-length", type=int, default=settings.MAX_WORD_LENGTH,
                        help="Split longer words into chunks of this size")
    args = parser.parse_args(argv)
    if args.order < 1:
        parser.error("--order must be >= 1")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    # argparse exits with status 2 on usage errors; unreadable input returns 1
    args = parse_args(argv)

    if args.seed is not None:
        rng = seed_rng(args.seed)
    else:
        rng = get_rng()

    model = MarkovModel(order=args.order, max_word_length=args.max_word_length)
    try:
        with open(args.file, "r", encoding="utf-8", errors="replace") as f:
            model.train(read_tokens(f, model.max_word_length))
    except OSError as e:
        print(f"{args.file}: {e.strerror}", file=sys.stderr)
        return 1

    result = model.sample(max_tokens=args.nwords, rng=rng)
    logger.debug(f"[MARKOV] Emitted {len(result.tokens)} words ({result.stop_reason.value})")
    sys.stdout.write(result.text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
