# backend/DB/api.py
from __future__ import annotations
from typing import List, Protocol


class CorpusIndex(Protocol):
    """What the query resolver needs from an index (SuffixArrayIndex or a test double)."""

    # Read
    def lookup(self, pattern: bytes, limit: int = -1) -> List[int]: ...
    def bytes(self) -> memoryview: ...
    def __len__(self) -> int: ...
