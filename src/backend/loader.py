from __future__ import annotations
import logging
import os

from .errors import IndexBuildError

log = logging.getLogger(__name__)


def load_corpus(path: str) -> bytes:
    """Read the whole corpus file into memory. Raises IndexBuildError if unreadable."""
    path = os.path.abspath(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise IndexBuildError(f"Load: {e}") from e
    log.info("Loaded corpus %s (%d bytes)", path, len(data))
    return data
