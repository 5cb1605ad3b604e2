"""
Chain construction: turns a token stream into a PrefixIndex.
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional, TextIO

from markov_service.services.errors import ChainResourceError
from markov_service.services.prefix_index import SENTINEL, PrefixIndex
from markov_service.utils.logger import setup_logger

logger = setup_logger(__name__)

# C-locale isspace set; other Unicode separators stay inside tokens
_WHITESPACE = re.compile(r"[ \t\n\v\f\r]+")


def read_tokens(stream: TextIO, max_word_length: int = 99) -> Iterator[str]:
    """
    Yield whitespace-delimited tokens from a text stream.

    Tokens longer than max_word_length come out as consecutive chunks of
    at most that many characters. A non-positive bound disables chunking.
    A read error ends the stream like EOF does.
    """
    lines = iter(stream)
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except OSError as e:
            logger.warning(f"[MARKOV] Read failed, ending token stream: {e}")
            return

        for word in _WHITESPACE.split(line):
            if not word:
                continue
            if max_word_length <= 0 or len(word) <= max_word_length:
                yield word
                continue
            for i in range(0, len(word), max_word_length):
                yield word[i:i + max_word_length]


def build(
    tokens: Iterable[str],
    order: int = 2,
    index: Optional[PrefixIndex] = None,
) -> PrefixIndex:
    """
    Build a prefix index from a token stream.

    Every token is recorded as a suffix of the window that preceded it,
    starting from a window of N sentinels. A final sentinel is recorded
    after the last token so generation can find the natural end.

    Args:
        tokens: Token stream, consumed once
        order: Prefix length N, ignored when index is given
        index: Empty index to fill instead of allocating one

    Returns:
        The filled PrefixIndex

    Raises:
        ChainResourceError: Memory ran out; nothing partial is returned
    """
    if index is None:
        index = PrefixIndex(order=order)
    elif len(index):
        raise ValueError("build() needs an empty index")

    window = index.start_window()
    count = 0

    try:
        for token in tokens:
            entry = index.lookup_or_create(window)
            index.insert_suffix(entry, token)
            window.pop(0)
            window.append(token)
            count += 1

        index.insert_suffix(index.lookup_or_create(window), SENTINEL)
    except MemoryError as e:
        logger.error(f"[ERR] Out of memory after {count} tokens")
        raise ChainResourceError(f"out of memory after {count} tokens") from e

    logger.debug(
        f"[MARKOV] Built order-{index.order} chain: {count} tokens, {len(index)} prefixes"
    )
    return index
