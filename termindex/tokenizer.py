"""
HTML text extraction and tokenizer feeding the term counters.
Produces lowercase, alphanumeric-only tokens; Porter stemming is optional.
"""

import re
import warnings
from pathlib import Path
from typing import Iterator

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer

from .errors import DocumentReadError

# Word runs, keeping contractions and hyphenations together until stripped
TOKEN_PATTERN = r"\w+(?:['\-]\w+)*"

_STEMMER = PorterStemmer()
_WORD_TOKENIZER = RegexpTokenizer(TOKEN_PATTERN)
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def stem_token(word: str) -> str:
    """Return Porter stem of word."""
    return _STEMMER.stem(word)


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def iter_tokens(text: str, stem: bool = False) -> Iterator[str]:
    """
    Lazily yield normalized tokens from text: lowercased, stripped to
    alphanumerics (so "Don't" -> "dont", "e-mail" -> "email"), optionally
    stemmed. Tokens that strip to nothing are skipped.
    """
    if not text:
        return
    for raw in _WORD_TOKENIZER.tokenize(text):
        token = _NON_ALNUM.sub("", raw.lower())
        if not token:
            continue
        yield stem_token(token) if stem else token


def tokenize(text: str, stem: bool = False) -> list[str]:
    """Tokenize text into a list of normalized terms."""
    return list(iter_tokens(text, stem=stem))


def get_tokens_from_html(html_content: str, stem: bool = False) -> list[str]:
    """
    Extract text from HTML and return its token list.
    """
    return tokenize(extract_text_from_html(html_content), stem=stem)


def read_text_file(filepath: Path) -> str:
    """
    Read a text/HTML file, trying common encodings in turn.
    """
    for encoding in ("utf-8", "cp1252"):
        try:
            return Path(filepath).read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise DocumentReadError(f"Could not decode file: {filepath}")
