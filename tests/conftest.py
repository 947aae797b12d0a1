import pytest

from termindex import InvertedIndex, SearchEngine, TermFrequencyCounter


@pytest.fixture
def java_index():
    # Document "A": java programming java; document "B": java island
    index = InvertedIndex()
    index.ingest(TermFrequencyCounter.from_tokens("A", ["java", "programming", "java"]))
    index.ingest(TermFrequencyCounter.from_tokens("B", ["java", "island"]))
    return index


@pytest.fixture
def engine(java_index):
    return SearchEngine(java_index)
