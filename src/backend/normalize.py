from __future__ import annotations
from typing import List, Optional

from .config import MIN_QUERY
from .errors import BadQuery


def validate_query(raw: Optional[str], min_len: int = MIN_QUERY) -> str:
    """
    Trim the raw query and enforce the minimum length (in utf-8 bytes).
    Raises BadQuery for a missing or too-short query.
    """
    if raw is None:
        raise BadQuery()
    q = raw.strip()
    try:
        size = len(query_bytes(q))
    except UnicodeEncodeError as e:
        # lone surrogate that is not an escaped byte
        raise BadQuery("search query is not valid text") from e
    if size < min_len:
        raise BadQuery()
    return q


def query_bytes(s: str) -> bytes:
    """
    utf-8 bytes of a query. Undecodable bytes that reached us as lone
    surrogates (argv, os.fsdecode) are restored to the original bytes.
    """
    return s.encode("utf-8", "surrogateescape")


def _is_separator(ch: str) -> bool:
    """Word boundary for title-casing: whitespace, or ASCII punctuation/symbols."""
    if ch.isspace():
        return True
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    return False


def title_case(s: str) -> str:
    """
    Upper-case the first letter of each word, leave the rest untouched.
    Unlike str.title(), digits and underscores do not start a new word
    ("3rd" stays "3rd").
    """
    out: list[str] = []
    prev_sep = True
    for ch in s:
        out.append(ch.upper() if prev_sep else ch)
        prev_sep = _is_separator(ch)
    return "".join(out)


def derive_variants(query: str) -> List[str]:
    """
    Literal, lower, upper and title-case forms of the query, in that order,
    with duplicates and empty strings removed.
    """
    lower = query.lower()
    candidates = (query, lower, query.upper(), title_case(lower))

    seen: set[str] = set()
    variants: List[str] = []
    for c in candidates:
        if c and c not in seen:
            seen.add(c)
            variants.append(c)
    return variants
