"""
Markov chain services: prefix index, chain builder, generator and model facade.
"""

from .prefix_index import SENTINEL, ChainEntry, IndexStats, PrefixIndex
from .chain_builder import build, read_tokens
from .chain_generator import ChainGenerator, GeneratorState, generate, get_rng, seed_rng
from .errors import ChainResourceError, MarkovError, ModelNotFoundError, ModelStateError
from .markov import GenerationResult, MarkovModel, ModelRegistry, get_registry, train_from_corpus

__all__ = [
    "SENTINEL",
    "ChainEntry",
    "IndexStats",
    "PrefixIndex",
    "build",
    "read_tokens",
    "ChainGenerator",
    "GeneratorState",
    "generate",
    "get_rng",
    "seed_rng",
    "ChainResourceError",
    "MarkovError",
    "ModelNotFoundError",
    "ModelStateError",
    "GenerationResult",
    "MarkovModel",
    "ModelRegistry",
    "get_registry",
    "train_from_corpus",
]
