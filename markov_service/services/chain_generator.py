"""
Chain generation: walks a built PrefixIndex and emits tokens.

Each step looks up the current window, draws one suffix uniformly over
its stored occurrences, and slides the window forward. Generation ends
when the window is unknown, its bag is empty, the end sentinel is drawn,
or max_tokens tokens have been emitted.
"""
from __future__ import annotations

import random
import time
from enum import Enum
from typing import Iterator, Optional

from markov_service.config import settings
from markov_service.services.prefix_index import SENTINEL, PrefixIndex
from markov_service.utils.logger import setup_logger

logger = setup_logger(__name__)


class GeneratorState(str, Enum):
    RUNNING = "running"
    STOPPED_BY_MISSING_ENTRY = "missing_entry"
    STOPPED_BY_EMPTY_BAG = "empty_bag"
    STOPPED_BY_SENTINEL = "sentinel"
    STOPPED_BY_LENGTH_LIMIT = "length_limit"


# Process-wide random source, seeded once
_RNG: Optional[random.Random] = None


def get_rng() -> random.Random:
    """Get or create the process random source."""
    global _RNG
    if _RNG is None:
        seed = settings.RANDOM_SEED
        if seed is None:
            seed = time.time_ns()
        _RNG = random.Random(seed)
        logger.debug(f"[MARKOV] Random source seeded with {seed}")
    return _RNG


def seed_rng(seed: Optional[int]) -> random.Random:
    """Reseed the process random source. None falls back to the clock."""
    global _RNG
    _RNG = random.Random(time.time_ns() if seed is None else seed)
    return _RNG


class ChainGenerator:
    """
    Consumed-once iterator over generated tokens.

    The index is only read, so several generators may share one.
    """

    def __init__(
        self,
        index: PrefixIndex,
        max_tokens: int,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            index: Built prefix index
            max_tokens: Upper bound on emitted tokens; <= 0 emits nothing
            rng: Random source; defaults to the process one
        """
        self.index = index
        self.max_tokens = max_tokens
        self.rng = rng if rng is not None else get_rng()
        self.state = GeneratorState.RUNNING
        self.emitted = 0
        self._window = index.start_window()

    @property
    def stopped(self) -> bool:
        return self.state is not GeneratorState.RUNNING

    def _stop(self, state: GeneratorState):
        self.state = state
        logger.debug(f"[MARKOV] Generation stopped ({state.value}) after {self.emitted} tokens")
        raise StopIteration

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self.stopped:
            raise StopIteration

        if self.emitted >= self.max_tokens:
            self._stop(GeneratorState.STOPPED_BY_LENGTH_LIMIT)

        entry = self.index.lookup(self._window)
        if entry is None:
            self._stop(GeneratorState.STOPPED_BY_MISSING_ENTRY)

        n = len(entry)
        if n == 0:
            self._stop(GeneratorState.STOPPED_BY_EMPTY_BAG)

        token = entry.suffixes[self.rng.randrange(n)]
        if token == SENTINEL:
            self._stop(GeneratorState.STOPPED_BY_SENTINEL)

        self._window.pop(0)
        self._window.append(token)
        self.emitted += 1
        return token


def generate(
    index: PrefixIndex,
    max_tokens: int,
    rng: Optional[random.Random] = None,
) -> ChainGenerator:
    """Start generating from the all-sentinel window."""
    return ChainGenerator(index, max_tokens, rng=rng)
