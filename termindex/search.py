"""
Conjunctive (AND) search over an InvertedIndex.

Query terms are processed smallest postings set first, so intersection
cost is bounded by the rarest term's document frequency times the number
of terms, not by corpus size. Documents are ranked by summed raw term
frequency, ties broken by label.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, NamedTuple, Optional, Set

from .counter import TermFrequencyCounter
from .posting import InvertedIndex


class SearchResult(NamedTuple):
    label: str
    score: int


def intersect_postings(
    postings_sets: List[AbstractSet[TermFrequencyCounter]],
) -> Set[TermFrequencyCounter]:
    """
    Intersect postings sets (AND query).
    Starts from the smallest set and keeps only candidates that are members
    of every other set, stopping as soon as no candidate is left.
    """
    if not postings_sets:
        return set()
    postings_sets = sorted(postings_sets, key=len)
    candidates = set(postings_sets[0])
    for other in postings_sets[1:]:
        if not candidates:
            break
        candidates = {c for c in candidates if c in other}
    return candidates


def rank_documents(
    counters: Iterable[TermFrequencyCounter],
    terms: Iterable[str],
) -> List[SearchResult]:
    """
    Score(d) = sum over query terms of tf(t, d).
    Sorted by score descending, then label ascending.
    """
    terms = list(terms)
    ranked = [
        SearchResult(c.label, sum(c.get(t) for t in terms)) for c in counters
    ]
    ranked.sort(key=lambda r: (-r.score, r.label))
    return ranked


class SearchEngine:
    """Stateless query layer over an InvertedIndex."""

    def __init__(self, index: InvertedIndex) -> None:
        self.index = index

    def search(
        self,
        terms: Iterable[str],
        top_k: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Return documents containing every term, ranked by summed frequency.
        An empty query, or any term with no postings, yields [].
        """
        query = {t for t in terms if t}
        if not query:
            return []

        # Live views: only the smallest set is copied, the rest get membership tests.
        with self.index.lock:
            postings_sets = []
            for term in query:
                postings = self.index.postings_view(term)
                if not postings:
                    return []
                postings_sets.append(postings)
            matched = intersect_postings(postings_sets)

        ranked = rank_documents(matched, query)
        if top_k is not None:
            ranked = ranked[:top_k]
        return ranked

    def lookup(self, term: str) -> List[SearchResult]:
        """Single-term postings as ranked results."""
        return self.search([term])
