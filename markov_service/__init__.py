"""
Markov chain text generation service.
"""

__version__ = "1.0.0"
