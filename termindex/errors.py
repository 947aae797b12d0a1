"""Exceptions raised by the term index package."""


class TermIndexError(Exception):
    """Base class for all termindex errors."""


class FrozenCounterError(TermIndexError, RuntimeError):
    """A counter was mutated after being linked into an index."""

    def __init__(self, label: str) -> None:
        super().__init__(f"Counter for {label!r} is frozen and cannot be modified")
        self.label = label


class DocumentReadError(TermIndexError, ValueError):
    """A document file could not be read or decoded."""
