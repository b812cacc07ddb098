# backend/engine.py
from __future__ import annotations

import logging
import os
from typing import List, Optional

from . import config as CFG
from .errors import IndexBuildError
from .loader import load_corpus
from .models import Snippet
from .search import search
from .DB.index import SuffixArrayIndex
from .DB.storage import save_index, load_index

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - corpus loading (loader.load_corpus),
      - the suffix array index (SuffixArrayIndex), optionally cached on disk,
      - the query pipeline (search.search).

    An Engine owns exactly one immutable index. Build it once at startup, then
    share it across request threads; nothing here takes a lock.

    Public API (used by CLI/Flask):
      * Engine.from_file(path, cache=...): read corpus -> load/build index
      * Engine.from_bytes(data):           build index from bytes in memory
      * search(query):                     return snippets in corpus order
      * shutdown():                        drop the index
    """

    # ------------- lifecycle -------------

    def __init__(self, index: SuffixArrayIndex, *, half_width: int = CFG.MAX_CONTEXT) -> None:
        self.index: Optional[SuffixArrayIndex] = index
        self.half_width = int(half_width)

    @classmethod
    def from_bytes(cls, data: bytes, *, half_width: int = CFG.MAX_CONTEXT) -> "Engine":
        return cls(SuffixArrayIndex.build(data), half_width=half_width)

    # /* ~~~ Read the corpus file and reuse a cached suffix array when it matches ~~~ */
    @classmethod
    def from_file(
        cls,
        path: str = CFG.CORPUS_PATH,
        *,
        cache: Optional[str] = None,           # suffix array cache file
        half_width: int = CFG.MAX_CONTEXT,
        verbose: bool = False,
    ) -> "Engine":
        if verbose:
            logging.basicConfig(level=logging.INFO)

        data = load_corpus(path)

        idx: Optional[SuffixArrayIndex] = None
        if cache and os.path.exists(cache):
            try:
                idx = load_index(cache, data)
                log.info("Loaded suffix array cache %s", cache)
            except IndexBuildError as e:
                log.warning("Ignoring index cache: %s", e)

        if idx is None:
            log.info("Building suffix array (%d bytes)", len(data))
            idx = SuffixArrayIndex.build(data)
            if cache:
                log.info("Saving suffix array cache to %s", cache)
                try:
                    save_index(idx, cache)
                except IndexBuildError as e:
                    # the cache is optional; keep serving from the fresh index
                    log.warning("Could not save index cache: %s", e)

        return cls(idx, half_width=half_width)

    # ------------- query -------------

    def search(self, query: str | None) -> List[Snippet]:
        if self.index is None:
            raise RuntimeError("Engine not initialized or already shut down.")
        return search(self.index, query, half_width=self.half_width)

    @property
    def corpus_size(self) -> int:
        return len(self.index) if self.index is not None else 0

    # ------------- teardown -------------

    def shutdown(self) -> None:
        self.index = None
        log.info("Engine shutdown complete")
