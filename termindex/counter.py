"""
Per-document term frequency counter.

A counter is built once from a document's token stream and then handed to
the inverted index, which freezes it. Counts are always >= 1; an absent
term simply reads as 0.
"""

from collections import Counter
from typing import Iterable, Iterator

from .errors import FrozenCounterError


class TermFrequencyCounter:
    """
    Term -> count mapping for exactly one document.
    - label: document identifier (e.g. URL), fixed at construction
    - equality and hashing use the label only, so a set of counters
      holds at most one counter per document
    """

    __slots__ = ("_label", "_counts", "_frozen")

    def __init__(self, label: str) -> None:
        self._label = label
        self._counts: Counter[str] = Counter()
        self._frozen = False

    @classmethod
    def from_tokens(cls, label: str, tokens: Iterable[str]) -> "TermFrequencyCounter":
        """Build a counter for label from a single authoritative token stream."""
        counter = cls(label)
        counter.ingest(tokens)
        return counter

    @property
    def label(self) -> str:
        return self._label

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Disallow further mutation. Called when the counter is shared."""
        self._frozen = True

    def get(self, term: str) -> int:
        """Return the count for term, or 0 if it was never seen."""
        return self._counts.get(term, 0)

    def increment(self, term: str) -> None:
        """Add one occurrence of term. Empty terms are dropped."""
        if not term:
            return
        if self._frozen:
            raise FrozenCounterError(self._label)
        self._counts[term] += 1

    def ingest(self, tokens: Iterable[str]) -> None:
        """
        Count every token in tokens (may be a lazy generator).
        Not idempotent: ingesting the same stream twice double-counts.
        """
        for token in tokens:
            self.increment(token)

    def total_count(self) -> int:
        """Sum of all counts; equals the number of non-empty tokens ingested."""
        return sum(self._counts.values())

    def terms(self) -> Iterator[str]:
        return iter(self._counts)

    def items(self) -> Iterator[tuple[str, int]]:
        return iter(self._counts.items())

    def to_dict(self) -> dict[str, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __contains__(self, term: object) -> bool:
        return term in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TermFrequencyCounter):
            return NotImplemented
        return self._label == other._label

    def __hash__(self) -> int:
        return hash(self._label)

    def __repr__(self) -> str:
        return (
            f"TermFrequencyCounter(label={self._label!r}, "
            f"terms={len(self._counts)}, total={self.total_count()})"
        )
