from __future__ import annotations


class BadQuery(ValueError):
    """Query missing or shorter than the minimum length after trimming."""

    def __init__(self, message: str = "search query too short") -> None:
        super().__init__(message)


class IndexBuildError(RuntimeError):
    """Corpus could not be read or indexed. Fatal at startup."""
