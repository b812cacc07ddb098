from __future__ import annotations
import hashlib
import os
import struct
import sys
from array import array

from .index import SuffixArrayIndex
from ..errors import IndexBuildError

# File format:
#   0..3    : b"SAX2"
#   4..11   : N (uint64) = corpus length in bytes
#   12..43  : blake2b-256 digest of the corpus
#   44..75  : blake2b-256 digest of the suffix array payload below
#   76..    : N * int64 suffix array entries (little-endian)

_MAGIC = b"SAX2"
_U64 = struct.Struct("<Q")
_DIGEST_SIZE = 32
_HEADER_SIZE = len(_MAGIC) + _U64.size + 2 * _DIGEST_SIZE


def corpus_digest(data) -> bytes:
    return hashlib.blake2b(data, digest_size=_DIGEST_SIZE).digest()


def save_index(index: SuffixArrayIndex, path: str) -> None:
    """
    Write the suffix array next to fingerprints of the corpus it indexes and
    of the array itself. Raises IndexBuildError if the file cannot be written;
    no partial file is left behind.
    """
    path = os.path.abspath(path)

    sa = array("q", index.suffix_array)
    if sys.byteorder != "little":
        sa.byteswap()
    payload = sa.tobytes()

    tmp = f"{path}.tmp"
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(tmp, "wb") as f:
            f.write(_MAGIC)
            f.write(_U64.pack(len(index)))
            f.write(corpus_digest(index.bytes()))
            f.write(corpus_digest(payload))
            f.write(payload)
        os.replace(tmp, path)
    except OSError as e:
        try:
            os.remove(tmp)
        except OSError:
            pass  # never created
        raise IndexBuildError(f"cannot write index cache {path}: {e}") from e


def load_index(path: str, corpus: bytes) -> SuffixArrayIndex:
    """
    Read a cache written by save_index() and attach it to `corpus`.
    Raises IndexBuildError if the file is malformed, corrupted, or was built
    from a different corpus.
    """
    try:
        with open(path, "rb") as f:
            header = f.read(_HEADER_SIZE)
            payload = f.read()
    except OSError as e:
        raise IndexBuildError(f"cannot read index cache {path}: {e}") from e

    if len(header) != _HEADER_SIZE or header[:4] != _MAGIC:
        raise IndexBuildError(f"{path} is not a suffix array cache")

    n = _U64.unpack_from(header, 4)[0]
    pos = 4 + _U64.size
    digest = header[pos:pos + _DIGEST_SIZE]
    sa_digest = header[pos + _DIGEST_SIZE:]
    if n != len(corpus) or digest != corpus_digest(corpus):
        raise IndexBuildError(f"{path} was built from a different corpus")

    sa = array("q")
    if len(payload) != n * sa.itemsize:
        raise IndexBuildError(f"{path} is truncated")
    if sa_digest != corpus_digest(payload):
        raise IndexBuildError(f"{path} is corrupted")
    sa.frombytes(payload)
    if sys.byteorder != "little":
        sa.byteswap()
    return SuffixArrayIndex.from_parts(corpus, sa)
