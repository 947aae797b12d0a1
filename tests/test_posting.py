import pytest

from termindex import FrozenCounterError, InvertedIndex, TermFrequencyCounter


def _labels(postings):
    return sorted(c.label for c in postings)


def test_lookup_java_scenario(java_index):
    postings = java_index.lookup("java")
    assert _labels(postings) == ["A", "B"]
    counts = {c.label: c.get("java") for c in postings}
    assert counts == {"A": 2, "B": 1}


def test_lookup_absent_term_is_empty_set(java_index):
    result = java_index.lookup("python")
    assert result == set()
    assert isinstance(result, set)


def test_lookup_returns_copy(java_index):
    java_index.lookup("java").clear()
    assert len(java_index.lookup("java")) == 2


def test_counts(java_index):
    assert java_index.document_count() == 2
    assert java_index.term_count() == 3
    assert len(java_index) == 3
    assert "island" in java_index
    assert java_index.postings_size("java") == 2
    assert java_index.postings_size("missing") == 0


def test_every_posting_has_positive_count(java_index):
    for term in java_index.terms():
        for counter in java_index.lookup(term):
            assert counter.get(term) >= 1
    java_index.check_invariants()


def test_reingest_replaces_previous_content():
    replaced = InvertedIndex()
    replaced.ingest(TermFrequencyCounter.from_tokens("A", ["old", "shared", "shared"]))
    replaced.ingest(TermFrequencyCounter.from_tokens("B", ["shared"]))
    replaced.ingest(TermFrequencyCounter.from_tokens("A", ["new", "shared"]))

    fresh = InvertedIndex()
    fresh.ingest(TermFrequencyCounter.from_tokens("B", ["shared"]))
    fresh.ingest(TermFrequencyCounter.from_tokens("A", ["new", "shared"]))

    assert "old" not in replaced
    assert replaced.lookup("old") == set()
    assert replaced.to_dict() == fresh.to_dict()
    assert replaced.to_dict()["shared"] == {"A": 1, "B": 1}
    assert replaced.document_count() == 2
    replaced.check_invariants()


def test_reingest_same_content_many_times_is_idempotent():
    index = InvertedIndex()
    for _ in range(5):
        index.ingest(TermFrequencyCounter.from_tokens("A", ["a", "b", "a"]))
    assert index.document_count() == 1
    assert index.to_dict() == {"a": {"A": 2}, "b": {"A": 1}}
    (counter,) = index.lookup("a")
    assert counter is index.get_document("A")


def test_reingest_same_counter_object():
    index = InvertedIndex()
    counter = TermFrequencyCounter.from_tokens("A", ["a"])
    index.ingest(counter)
    index.ingest(counter)
    assert index.to_dict() == {"a": {"A": 1}}
    index.check_invariants()


def test_ingest_freezes_counter():
    index = InvertedIndex()
    counter = TermFrequencyCounter.from_tokens("A", ["a"])
    index.ingest(counter)
    with pytest.raises(FrozenCounterError):
        counter.increment("b")


def test_ingest_empty_document():
    index = InvertedIndex()
    index.ingest(TermFrequencyCounter("empty"))
    assert index.document_count() == 1
    assert index.term_count() == 0
    assert list(index.labels()) == ["empty"]


def test_remove_document(java_index):
    assert java_index.remove("A") is True
    assert java_index.remove("A") is False
    assert "programming" not in java_index
    assert _labels(java_index.lookup("java")) == ["B"]
    assert java_index.get_document("A") is None
    assert java_index.document_count() == 1
    java_index.check_invariants()


def test_check_invariants_detects_empty_postings(java_index):
    java_index._postings["ghost"] = set()
    with pytest.raises(AssertionError):
        java_index.check_invariants()


def test_concurrent_reingest_and_lookup_keep_invariants():
    import threading

    from termindex import SearchEngine

    index = InvertedIndex()
    versions = [["alpha", "shared"], ["beta", "shared", "shared"]]
    labels = [f"doc{i}" for i in range(4)]
    errors = []
    stop = threading.Event()

    def writer(label):
        try:
            for i in range(200):
                index.ingest(TermFrequencyCounter.from_tokens(label, versions[i % 2]))
        except Exception as e:
            errors.append(e)

    def reader():
        engine = SearchEngine(index)
        try:
            while not stop.is_set():
                for term in ("alpha", "beta", "shared"):
                    for counter in index.lookup(term):
                        assert counter.get(term) >= 1
                        assert counter.label in labels
                for label, score in engine.search(["shared"]):
                    assert score in (1, 2)
        except Exception as e:
            errors.append(e)

    writers = [threading.Thread(target=writer, args=(label,)) for label in labels]
    readers = [threading.Thread(target=reader) for _ in range(2)]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert errors == []
    index.check_invariants()
    assert index.document_count() == 4
    assert "alpha" not in index
    assert sorted(c.label for c in index.lookup("beta")) == labels
    assert {c.get("shared") for c in index.lookup("shared")} == {2}
