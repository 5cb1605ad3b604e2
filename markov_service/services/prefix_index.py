"""
Prefix index for fixed-order Markov chains.

Maps each ordered N-token prefix to the bag of tokens observed right
after it. Suffixes keep their multiplicity: a token seen k times after
a prefix is stored k times, which is what weights sampling.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

# Start/end of stream marker. Whitespace splitting never yields it.
SENTINEL = "\n"

Prefix = Tuple[str, ...]


@dataclass
class ChainEntry:
    """One prefix and the suffixes recorded for it, in insertion order."""
    prefix: Prefix
    suffixes: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.suffixes)


@dataclass
class IndexStats:
    """Summary of a built index."""
    order: int = 0
    prefixes: int = 0
    suffixes: int = 0
    vocabulary: int = 0
    max_branching: int = 0
    top_prefixes: List[Tuple[Prefix, int]] = field(default_factory=list)


class PrefixIndex:
    """
    Hash index from N-token prefixes to chain entries.

    Keys are tuples, so equality is positional and hashing is
    order-sensitive. Collisions are handled by the dict itself.
    """

    def __init__(self, order: int = 2):
        """
        Initialize an empty index.

        Args:
            order: Number of tokens in every prefix (N >= 1)
        """
        if order < 1:
            raise ValueError(f"prefix order must be >= 1, got {order}")
        self.order = order
        self._entries: Dict[Prefix, ChainEntry] = {}

    def _key(self, prefix: Sequence[str]) -> Prefix:
        key = tuple(prefix)
        if len(key) != self.order:
            raise ValueError(
                f"prefix has {len(key)} tokens, index order is {self.order}"
            )
        return key

    def start_window(self) -> List[str]:
        """Fresh window of N sentinels, owned by the caller."""
        return [SENTINEL] * self.order

    def lookup(self, prefix: Sequence[str]) -> Optional[ChainEntry]:
        """Return the entry for an exact prefix match, or None. Never creates."""
        return self._entries.get(self._key(prefix))

    def lookup_or_create(self, prefix: Sequence[str]) -> ChainEntry:
        """Return the entry for prefix, storing a new empty one if absent."""
        key = self._key(prefix)
        entry = self._entries.get(key)
        if entry is None:
            entry = ChainEntry(prefix=key)
            self._entries[key] = entry
        return entry

    def insert_suffix(self, entry: ChainEntry, token: str):
        """Append token to the entry's suffix bag."""
        entry.suffixes.append(token)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, prefix: object) -> bool:
        if not isinstance(prefix, (tuple, list)) or len(prefix) != self.order:
            return False
        return tuple(prefix) in self._entries

    def __iter__(self) -> Iterator[ChainEntry]:
        return iter(self._entries.values())

    def prefixes(self) -> Iterable[Prefix]:
        return self._entries.keys()

    def get_stats(self, top_k: int = 10) -> IndexStats:
        """Get statistics about the index."""
        vocab: Counter = Counter()
        branching = 0
        sizes = []

        for entry in self._entries.values():
            vocab.update(t for t in entry.suffixes if t != SENTINEL)
            branching = max(branching, len(set(entry.suffixes)))
            sizes.append((entry.prefix, len(entry)))

        sizes.sort(key=lambda x: x[1], reverse=True)

        return IndexStats(
            order=self.order,
            prefixes=len(self._entries),
            suffixes=sum(n for _, n in sizes),
            vocabulary=len(vocab),
            max_branching=branching,
            top_prefixes=sizes[:top_k],
        )
