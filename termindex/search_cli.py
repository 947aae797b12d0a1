"""
Command-line driver: builds an in-memory index from document directories
and answers AND queries against it.

Usage:
    termindex data/                      # interactive query loop
    termindex data/ --query "java island"
    termindex data/ --lookup java
    termindex data/ --stats
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Sequence, TextIO

from .index_builder import build_index_from_directories
from .posting import InvertedIndex
from .search import SearchEngine, SearchResult
from .tokenizer import tokenize

DEFAULT_TOP_K = 10


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def normalize_query(raw_query: str, stem: bool = True) -> List[str]:
    """
    Tokenize (and stem) the raw query string using the same logic as indexing.
    """
    return tokenize(raw_query, stem=stem)


def format_results(results: Sequence[SearchResult]) -> List[str]:
    return [
        f"{rank:2d}. score={r.score}  {r.label}"
        for rank, r in enumerate(results, start=1)
    ]


def answer_query(
    engine: SearchEngine,
    raw_query: str,
    *,
    stem: bool = True,
    top_k: int = DEFAULT_TOP_K,
    out: TextIO | None = None,
) -> List[SearchResult]:
    out = out or sys.stdout
    query_terms = normalize_query(raw_query, stem=stem)
    if not query_terms:
        print("No valid terms in query.", file=out)
        return []
    results = engine.search(query_terms, top_k=top_k)
    if not results:
        print("No documents matched all query terms.", file=out)
        return []
    print(f"Top {len(results)} results:", file=out)
    for line in format_results(results):
        print(line, file=out)
    return results


def run_search_loop(
    engine: SearchEngine,
    *,
    stem: bool = True,
    top_k: int = DEFAULT_TOP_K,
) -> None:
    """
    Interactive command-line search loop.
    """
    print("Enter queries (AND semantics). Empty line or Ctrl+C to exit.")
    while True:
        try:
            raw_query = input("query> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not raw_query:
            break
        answer_query(engine, raw_query, stem=stem, top_k=top_k)


def print_stats(index: InvertedIndex, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    print("| Metric                      | Value |", file=out)
    print("|-----------------------------|-------|", file=out)
    print(f"| Number of indexed documents | {index.document_count()} |", file=out)
    print(f"| Number of unique terms      | {index.term_count()} |", file=out)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Term-frequency inverted index search.")
    parser.add_argument(
        "data_dirs",
        type=Path,
        nargs="+",
        help="Directories of .html/.txt/.json documents to index.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--query", help="Run a single AND query and exit.")
    mode.add_argument("--lookup", metavar="TERM", help="Show the postings for one term and exit.")
    mode.add_argument("--stats", action="store_true", help="Print index statistics and exit.")
    parser.add_argument(
        "--top",
        type=_positive_int,
        default=DEFAULT_TOP_K,
        help="Number of top results to show.",
    )
    parser.add_argument(
        "--no-stem",
        action="store_true",
        help="Disable Porter stemming of documents and queries.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    stem = not args.no_stem
    index = build_index_from_directories(*args.data_dirs, stem=stem)
    if index.document_count() == 0:
        print("No HTML, text or JSON documents found.", file=sys.stderr)
        return 1
    engine = SearchEngine(index)

    if args.stats:
        print_stats(index)
    elif args.lookup is not None:
        terms = normalize_query(args.lookup, stem=stem)
        results = engine.lookup(terms[0]) if len(terms) == 1 else []
        if not results:
            print(f"No postings for {args.lookup!r}.")
        for line in format_results(results):
            print(line)
    elif args.query is not None:
        answer_query(engine, args.query, stem=stem, top_k=args.top)
    else:
        print(f"Loaded {index.document_count()} documents, {index.term_count()} terms.")
        run_search_loop(engine, stem=stem, top_k=args.top)
    return 0


if __name__ == "__main__":
    sys.exit(main())
