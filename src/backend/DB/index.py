from __future__ import annotations
import bisect
import logging
import time
from array import array
from typing import List

from ..errors import IndexBuildError

log = logging.getLogger(__name__)


class SuffixArrayIndex:
    """
    Suffix array over an immutable byte corpus.

    The corpus is copied once into an owned `bytes` object; `sa` holds every
    start offset sorted by the suffix that begins there. All suffixes sharing
    a prefix are contiguous in `sa`, so a lookup is two binary searches
    (O(m log n)) plus the size of the answer.

    Nothing mutates an index after build(); one instance can be read from many
    request threads at once.
    """

    __slots__ = ("_data", "_sa")

    def __init__(self, data: bytes, sa: array) -> None:
        self._data = data
        self._sa = sa

    # ---- Build (offline) ----
    @classmethod
    def build(cls, corpus) -> "SuffixArrayIndex":
        try:
            data = bytes(corpus)
        except TypeError as e:
            raise IndexBuildError(f"corpus must be bytes-like, got {type(corpus).__name__}") from e

        t0 = time.perf_counter()
        try:
            sa = _suffix_array(data)
        except MemoryError as e:
            raise IndexBuildError(f"not enough memory to index {len(data):,} bytes") from e
        log.info("Suffix array built: bytes=%d in %.2fs", len(data), time.perf_counter() - t0)
        return cls(data, sa)

    @classmethod
    def from_parts(cls, corpus: bytes, sa: array) -> "SuffixArrayIndex":
        """Reattach a persisted suffix array to its corpus."""
        data = bytes(corpus)
        if len(sa) != len(data):
            raise IndexBuildError(
                f"suffix array length {len(sa):,} does not match corpus length {len(data):,}"
            )
        return cls(data, sa)

    # ---- Query ----
    def lookup(self, pattern: bytes, limit: int = -1) -> List[int]:
        """
        Return start offsets of every occurrence of `pattern` (suffix-array
        order, not sorted). limit < 0 returns all matches; otherwise at most
        `limit` offsets.
        """
        if not pattern:
            raise ValueError("lookup(): pattern must be non-empty")
        if limit == 0 or not self._sa:
            return []

        data = self._data
        m = len(pattern)

        def prefix(off: int) -> bytes:
            return data[off:off + m]

        lo = bisect.bisect_left(self._sa, pattern, key=prefix)
        hi = bisect.bisect_right(self._sa, pattern, lo=lo, key=prefix)
        if 0 < limit < hi - lo:
            hi = lo + limit
        return self._sa[lo:hi].tolist()

    # ---- Getters ----
    def bytes(self) -> memoryview:
        """Read-only view of the corpus (no copy)."""
        return memoryview(self._data)

    @property
    def suffix_array(self) -> array:
        return self._sa

    def __len__(self) -> int:
        return len(self._data)


def _suffix_array(data: bytes) -> array:
    """
    Prefix doubling: after round k, suffixes are ordered by their first 2k
    bytes. Each round re-sorts by (rank[i], rank[i+k]) packed into one int.
    Stops early once all ranks are distinct.
    """
    n = len(data)
    if n == 0:
        return array("q")

    rank: List[int] = list(data)
    sa: List[int] = sorted(range(n), key=rank.__getitem__)
    base = max(n, 256) + 1  # > any rank + 1

    k = 1
    while True:
        # missing second half (i + k >= n) sorts first
        keys = [rank[i] * base + rank[i + k] + 1 for i in range(n - k)]
        keys.extend(rank[i] * base for i in range(max(0, n - k), n))
        sa.sort(key=keys.__getitem__)

        new_rank = [0] * n
        r = 0
        prev = keys[sa[0]]
        for i in sa:
            cur = keys[i]
            if cur != prev:
                r += 1
                prev = cur
            new_rank[i] = r
        rank = new_rank

        if r == n - 1 or k >= n:
            break
        log.debug("suffix sort: k=%d distinct=%d/%d", k, r + 1, n)
        k <<= 1

    return array("q", sa)
