"""
Index builder: turns document files into term counters and ingests them.
Supports .html/.htm (text extracted with BeautifulSoup), .txt, and .json
files carrying "content" (and optionally "url", used as the label).
"""

import json
import logging
import os
from pathlib import Path
from urllib.parse import urlparse

from .counter import TermFrequencyCounter
from .errors import DocumentReadError
from .posting import InvertedIndex
from .tokenizer import extract_text_from_html, iter_tokens, read_text_file

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = frozenset({".html", ".htm", ".txt", ".json"})
HTML_SUFFIXES = frozenset({".html", ".htm"})


def _strip_fragment(url: str) -> str:
    """Remove URL fragment (#...) so fragments of one page share a label."""
    parsed = urlparse(url)
    if parsed.fragment:
        parsed = parsed._replace(fragment="")
    return parsed.geturl()


def read_document(filepath: Path) -> tuple[str, str | None, bool]:
    """
    Read a document file.
    Returns (content, url or None, is_html).
    - .json: content from "content", url from "url" (fragment stripped);
      content is treated as HTML.
    - .html/.htm: raw markup.
    - anything else: plain text.
    Raises DocumentReadError if the file cannot be decoded or parsed.
    """
    filepath = Path(filepath)
    suffix = filepath.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(filepath.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DocumentReadError(f"Invalid JSON document {filepath}: {e}") from e
        if not isinstance(data, dict) or "content" not in data:
            raise DocumentReadError(f"JSON file has no 'content' field: {filepath}")
        if not isinstance(data["content"], str):
            raise DocumentReadError(f"JSON 'content' is not a string: {filepath}")
        url = data.get("url")
        if url is not None:
            url = _strip_fragment(str(url))
        return data["content"], url, True
    return read_text_file(filepath), None, suffix in HTML_SUFFIXES


def counter_from_file(
    filepath: Path,
    *,
    root_dir: Path | None = None,
    stem: bool = True,
) -> TermFrequencyCounter:
    """
    Build the term counter for one file. The label is the document URL when
    the file carries one, otherwise its path relative to root_dir.
    """
    filepath = Path(filepath)
    content, url, is_html = read_document(filepath)
    if url is not None:
        label = url
    else:
        try:
            label = filepath.relative_to(root_dir).as_posix() if root_dir else filepath.as_posix()
        except ValueError:
            label = filepath.name
    text = extract_text_from_html(content) if is_html else content
    return TermFrequencyCounter.from_tokens(label, iter_tokens(text, stem=stem))


def _document_files(data_dir: Path) -> list[Path]:
    return sorted(
        (p for p in data_dir.rglob("*") if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES),
        key=lambda p: str(p),
    )


def build_index_from_directory(
    data_dir: Path,
    *,
    index: InvertedIndex | None = None,
    root_dir: Path | None = None,
    seen_labels: set[str] | None = None,
    stem: bool = True,
) -> InvertedIndex:
    """
    Ingest every supported document under data_dir (recursive) into index
    (a new one if not given). Path labels are relative to root_dir
    (default: data_dir). Unreadable files are logged and skipped; a document
    whose label was already produced by this build replaces the earlier one
    with a warning. Labels indexed before the build are replaced silently.
    """
    index = index if index is not None else InvertedIndex()
    data_dir = Path(data_dir)
    root_dir = Path(root_dir) if root_dir is not None else data_dir
    seen_labels = seen_labels if seen_labels is not None else set()
    ingested = skipped = 0

    for filepath in _document_files(data_dir):
        try:
            counter = counter_from_file(filepath, root_dir=root_dir, stem=stem)
        except (DocumentReadError, OSError) as e:
            logger.warning("Could not read %s: %s", filepath, e)
            skipped += 1
            continue
        if counter.label in seen_labels:
            logger.warning("Duplicate label %r: %s replaces an earlier document", counter.label, filepath)
        seen_labels.add(counter.label)
        index.ingest(counter)
        ingested += 1

    logger.info(
        "Indexed %d documents from %s (%d skipped); index has %d documents, %d terms",
        ingested,
        data_dir,
        skipped,
        index.document_count(),
        index.term_count(),
    )
    return index


def build_index_from_directories(
    *data_dirs: Path,
    stem: bool = True,
) -> InvertedIndex:
    """
    Build a single inverted index from multiple data directories.
    With more than one directory, path labels are relative to their common
    parent (e.g. "d1/index.html", "d2/index.html") so they stay distinct.
    Missing directories are logged and skipped.
    """
    existing: list[Path] = []
    for data_dir in data_dirs:
        data_dir = Path(data_dir)
        if not data_dir.is_dir():
            logger.warning("Skipping missing data directory: %s", data_dir)
            continue
        data_dir = data_dir.resolve()
        if data_dir not in existing:
            existing.append(data_dir)

    index = InvertedIndex()
    if not existing:
        return index
    if len(existing) == 1:
        root_dir = existing[0]
    else:
        root_dir = Path(os.path.commonpath(existing))
    seen_labels: set[str] = set()
    for data_dir in existing:
        build_index_from_directory(
            data_dir, index=index, root_dir=root_dir, seen_labels=seen_labels, stem=stem
        )
    return index
