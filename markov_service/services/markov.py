"""
Markov chain text model (CPU-only).

Fixed prefix order, trained once from a whitespace-delimited token
stream, then sampled any number of times. Models live in memory for
the lifetime of the process only.
"""
from __future__ import annotations

import io
import itertools
import random
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from markov_service.config import settings
from markov_service.services.chain_builder import build, read_tokens
from markov_service.services.chain_generator import ChainGenerator, GeneratorState
from markov_service.services.errors import (
    ChainResourceError,
    ModelNotFoundError,
    ModelStateError,
)
from markov_service.services.prefix_index import IndexStats, PrefixIndex
from markov_service.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class GenerationResult:
    """Tokens produced by one generation run and why it ended."""
    tokens: List[str] = field(default_factory=list)
    stop_reason: GeneratorState = GeneratorState.RUNNING

    @property
    def text(self) -> str:
        return " ".join(self.tokens)


class MarkovModel:
    def __init__(self, order: Optional[int] = None, max_word_length: Optional[int] = None):
        self.order = order if order is not None else settings.PREFIX_ORDER
        self.max_word_length = (
            max_word_length if max_word_length is not None else settings.MAX_WORD_LENGTH
        )
        self.index = PrefixIndex(order=self.order)
        self._trained = False

    @property
    def is_trained(self) -> bool:
        return self._trained

    def train(self, tokens: Iterable[str]) -> "MarkovModel":
        """
        Build the chain from a token stream. Allowed once per model.

        Raises:
            ModelStateError: The model was already trained
            ChainResourceError: Memory ran out while building

        Any failure leaves the model untrained with an empty index.
        """
        if self._trained:
            raise ModelStateError("model is already trained; create a new one")

        try:
            build(tokens, index=self.index)
        except BaseException:
            self.index = PrefixIndex(order=self.order)
            raise

        self._trained = True
        logger.info(f"[MARKOV] Trained order-{self.order} model with {len(self.index)} prefixes")
        return self

    def train_text(self, text: str) -> "MarkovModel":
        return self.train(read_tokens(io.StringIO(text), self.max_word_length))

    def train_corpus(self, corpus: List[str]) -> "MarkovModel":
        """Train on lines read back-to-back as one token stream."""
        return self.train(
            itertools.chain.from_iterable(
                read_tokens(io.StringIO(line), self.max_word_length) for line in corpus
            )
        )

    def generator(self, max_tokens: Optional[int] = None, rng: Optional[random.Random] = None) -> ChainGenerator:
        if not self._trained:
            raise ModelStateError("model is not trained")
        if max_tokens is None:
            max_tokens = settings.OUTPUT_LENGTH
        return ChainGenerator(self.index, max_tokens, rng=rng)

    def sample(self, max_tokens: Optional[int] = None, rng: Optional[random.Random] = None) -> GenerationResult:
        gen = self.generator(max_tokens, rng=rng)
        try:
            tokens = list(gen)
        except MemoryError as e:
            raise ChainResourceError("out of memory during generation") from e
        return GenerationResult(tokens=tokens, stop_reason=gen.state)

    def generate_tokens(self, max_tokens: Optional[int] = None, rng: Optional[random.Random] = None) -> List[str]:
        return self.sample(max_tokens, rng=rng).tokens

    def generate(self, max_tokens: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
        return self.sample(max_tokens, rng=rng).text

    def get_stats(self) -> IndexStats:
        return self.index.get_stats()


def train_from_corpus(lines: List[str], order: int = 2) -> MarkovModel:
    model = MarkovModel(order)
    model.train_corpus(lines)
    return model


class ModelRegistry:
    """
    Named in-memory models, oldest evicted first once full.

    Guarded by a lock because sync endpoints run in a thread pool.
    """

    def __init__(self, max_models: int = 32):
        self.max_models = max_models
        self._models: "OrderedDict[str, MarkovModel]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, name: str, model: MarkovModel):
        with self._lock:
            if name in self._models:
                raise ModelStateError(f"model {name!r} already exists")
            while len(self._models) >= self.max_models:
                evicted, _ = self._models.popitem(last=False)
                logger.info(f"[MARKOV] Registry full, evicted {evicted!r}")
            self._models[name] = model

    def get(self, name: str) -> MarkovModel:
        with self._lock:
            model = self._models.get(name)
        if model is None:
            raise ModelNotFoundError(name)
        return model

    def remove(self, name: str):
        with self._lock:
            if self._models.pop(name, None) is None:
                raise ModelNotFoundError(name)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._models)

    def clear(self):
        with self._lock:
            self._models.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._models

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)


# Singleton instance
_REGISTRY: Optional[ModelRegistry] = None


def get_registry() -> ModelRegistry:
    """Get or create singleton ModelRegistry."""
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = ModelRegistry(max_models=settings.MAX_MODELS)
    return _REGISTRY
