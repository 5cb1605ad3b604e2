"""
Tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from markov_service.config import Settings


class TestSettings:
    """Test suite for Settings."""

    def test_chain_defaults(self, monkeypatch):
        """Test chain options default to order 2 and 100 words."""
        for name in ["PREFIX_ORDER", "OUTPUT_LENGTH", "RANDOM_SEED", "MAX_WORD_LENGTH"]:
            monkeypatch.delenv(name, raising=False)

        cfg = Settings(_env_file=None)

        assert cfg.PREFIX_ORDER == 2
        assert cfg.OUTPUT_LENGTH == 100
        assert cfg.RANDOM_SEED is None
        assert cfg.MAX_WORD_LENGTH == 99

    def test_environment_override(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("PREFIX_ORDER", "3")
        monkeypatch.setenv("RANDOM_SEED", "42")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        cfg = Settings(_env_file=None)

        assert cfg.PREFIX_ORDER == 3
        assert cfg.RANDOM_SEED == 42
        assert cfg.LOG_LEVEL == "debug"

    def test_invalid_order(self, monkeypatch):
        """Test prefix order below 1 is rejected."""
        monkeypatch.setenv("PREFIX_ORDER", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_non_positive_output_length_allowed(self, monkeypatch):
        """Test zero output length is accepted and means no output."""
        monkeypatch.setenv("OUTPUT_LENGTH", "0")

        assert Settings(_env_file=None).OUTPUT_LENGTH == 0
