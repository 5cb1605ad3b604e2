"""
Shared pytest fixtures for Markov chain tests.
"""
import random
from pathlib import Path
from typing import List

import pytest

from markov_service.services.markov import get_registry


# Every prefix has exactly one suffix, so generation is fully determined
GOLDEN_TOKENS = ["the", "quick", "fox", "the", "lazy", "fox"]


class FixedDraws:
    """Random stand-in returning scripted randrange() results."""

    def __init__(self, draws: List[int]):
        self.draws = list(draws)
        self.calls: List[int] = []

    def randrange(self, n: int) -> int:
        self.calls.append(n)
        return self.draws.pop(0) % n


@pytest.fixture
def golden_tokens() -> List[str]:
    """Branch-free training corpus."""
    return list(GOLDEN_TOKENS)


@pytest.fixture
def sample_corpus() -> List[str]:
    """Sample text corpus for chain training."""
    return [
        "the cat sat on the mat",
        "the cat ate the rat",
        "the dog sat on the log",
        "a bird sat on the cat",
    ]


@pytest.fixture
def fixed_draws():
    """Factory for scripted random sources."""
    return FixedDraws


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def corpus_file(tmp_path) -> Path:
    """Temporary training text file."""
    path = tmp_path / "corpus.txt"
    path.write_text("the quick fox\n  the lazy\tfox\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_registry():
    """Keep the model registry empty between tests."""
    get_registry().clear()
    yield
    get_registry().clear()
