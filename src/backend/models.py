from __future__ import annotations
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class Snippet:
    offset: int     # byte offset of the match in the corpus
    start: int      # window start (clamped to 0)
    end: int        # window end, exclusive (clamped to len(corpus))
    text: str       # corpus[start:end] decoded as utf-8 (invalid bytes replaced)

    def to_dict(self) -> dict:
        return asdict(self)
