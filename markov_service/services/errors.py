"""
Exception types raised by the Markov chain services.

Normal generation endings (missing prefix, empty bag, end sentinel,
length limit) are states, not errors, and never show up here.
"""


class MarkovError(Exception):
    """Base class for Markov service errors."""


class ChainResourceError(MarkovError):
    """Ran out of memory while building or sampling a chain. Fatal."""


class ModelStateError(MarkovError):
    """Operation not allowed in the model's current lifecycle phase."""


class ModelNotFoundError(MarkovError, KeyError):
    """No model registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"model not found: {self.name!r}"
