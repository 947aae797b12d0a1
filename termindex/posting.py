"""
Inverted index data structure.

Maps each term to the set of document counters that contain it, and each
document label to its current counter. Re-ingesting a label retracts the
old counter's postings before installing the new one, so re-indexing is
idempotent with respect to final state.
"""

import logging
import threading
from typing import AbstractSet, Iterator

from .counter import TermFrequencyCounter

logger = logging.getLogger(__name__)

_NO_POSTINGS: frozenset = frozenset()


class InvertedIndex:
    """
    Inverted index: map from term -> set of TermFrequencyCounter.
    Mutations (ingest/remove) are serialized behind a single writer lock.
    """

    def __init__(self) -> None:
        self._postings: dict[str, set[TermFrequencyCounter]] = {}
        self._by_label: dict[str, TermFrequencyCounter] = {}
        self._lock = threading.RLock()

    def ingest(self, counter: TermFrequencyCounter) -> None:
        """Install or replace the postings for counter.label."""
        with self._lock:
            old = self._by_label.get(counter.label)
            if old is not None:
                self._retract(old)
            for term, count in counter.items():
                assert count >= 1, f"zero count for {term!r} in {counter.label!r}"
                self._postings.setdefault(term, set()).add(counter)
            self._by_label[counter.label] = counter
            counter.freeze()
        logger.debug(
            "Indexed %r (%d terms, %d tokens%s)",
            counter.label,
            len(counter),
            counter.total_count(),
            ", replaced previous version" if old is not None else "",
        )

    def remove(self, label: str) -> bool:
        """Retract all postings for label. Returns False if it was not indexed."""
        with self._lock:
            old = self._by_label.pop(label, None)
            if old is None:
                return False
            self._retract(old)
        logger.debug("Removed %r from index", label)
        return True

    def _retract(self, old: TermFrequencyCounter) -> None:
        # Caller holds the lock.
        for term in old.terms():
            postings = self._postings.get(term)
            if postings is None:
                continue
            postings.discard(old)
            if not postings:
                del self._postings[term]

    def lookup(self, term: str) -> set[TermFrequencyCounter]:
        """Return a copy of the postings set for term, or an empty set."""
        with self._lock:
            return set(self._postings.get(term, ()))

    def postings_view(self, term: str) -> AbstractSet[TermFrequencyCounter]:
        """
        Live postings set for term, without copying (empty if absent).
        Read-only; hold `lock` while using it if ingests may run concurrently.
        """
        return self._postings.get(term, _NO_POSTINGS)

    @property
    def lock(self):
        """The writer lock serializing ingest/remove."""
        return self._lock

    def postings_size(self, term: str) -> int:
        """Number of documents containing term (0 if absent)."""
        postings = self._postings.get(term)
        return len(postings) if postings else 0

    def get_document(self, label: str) -> TermFrequencyCounter | None:
        return self._by_label.get(label)

    def document_count(self) -> int:
        return len(self._by_label)

    def term_count(self) -> int:
        return len(self._postings)

    def labels(self) -> Iterator[str]:
        return iter(list(self._by_label))

    def terms(self) -> Iterator[str]:
        """Iterate over all terms in the index."""
        return iter(list(self._postings))

    def check_invariants(self) -> None:
        """Raise AssertionError if any structural invariant is violated."""
        with self._lock:
            for term, postings in self._postings.items():
                assert postings, f"empty postings set stored for {term!r}"
                for counter in postings:
                    assert counter.get(term) >= 1, (
                        f"{counter.label!r} posted under {term!r} with zero count"
                    )
                    assert self._by_label.get(counter.label) is counter, (
                        f"stale counter for {counter.label!r} under {term!r}"
                    )
            for label, counter in self._by_label.items():
                assert counter.label == label, f"label mismatch for {label!r}"
                for term in counter.terms():
                    assert counter in self._postings.get(term, ()), (
                        f"{label!r} missing from postings of {term!r}"
                    )

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def to_dict(self) -> dict:
        """Plain-data view: term -> {label: count}, sorted by term and label."""
        with self._lock:
            return {
                term: {
                    c.label: c.get(term)
                    for c in sorted(self._postings[term], key=lambda c: c.label)
                }
                for term in sorted(self._postings)
            }
