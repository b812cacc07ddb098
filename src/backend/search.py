from __future__ import annotations
import logging
from typing import Iterable, List

from .config import MAX_CONTEXT, MIN_QUERY
from .models import Snippet
from .normalize import validate_query, derive_variants, query_bytes
from .DB.api import CorpusIndex

log = logging.getLogger(__name__)


def resolve_offsets(index: CorpusIndex, variants: Iterable[str]) -> List[int]:
    """
    Look up every variant once and merge the hits into one ascending list.
    Equal offsets are collapsed: a variant that is a prefix of another one
    (possible when case mapping changes the byte length) can hit the same spot.
    """
    offsets: set[int] = set()
    for v in variants:
        if not v:
            continue
        offsets.update(index.lookup(query_bytes(v), -1))
    # ascending order: earlier passages first, sequential reads over the buffer
    return sorted(offsets)


def extract_snippet(corpus: memoryview | bytes, offset: int, half_width: int = MAX_CONTEXT) -> Snippet:
    """Window [offset - W, offset + W) clamped to the corpus bounds."""
    start = max(0, offset - half_width)
    end = min(len(corpus), offset + half_width)
    text = bytes(corpus[start:end]).decode("utf-8", errors="replace")
    return Snippet(offset=offset, start=start, end=end, text=text)


def search(
    index: CorpusIndex,
    query: str | None,
    *,
    half_width: int = MAX_CONTEXT,
    min_len: int = MIN_QUERY,
) -> List[Snippet]:
    """
    validate -> variants -> lookup per variant -> merge/sort -> windows.
    Raises BadQuery before touching the index; no matches returns [].
    """
    q = validate_query(query, min_len=min_len)
    variants = derive_variants(q)
    offsets = resolve_offsets(index, variants)
    log.debug("query=%r variants=%s hits=%d", q, variants, len(offsets))

    buf = index.bytes()
    return [extract_snippet(buf, off, half_width) for off in offsets]
