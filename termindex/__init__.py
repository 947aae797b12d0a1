"""Term-frequency inverted index and conjunctive search."""

from .counter import TermFrequencyCounter
from .errors import DocumentReadError, FrozenCounterError, TermIndexError
from .posting import InvertedIndex
from .search import SearchEngine, SearchResult, intersect_postings, rank_documents
from .index_builder import build_index_from_directory, build_index_from_directories
from .tokenizer import tokenize, get_tokens_from_html
