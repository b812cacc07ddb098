"""Suffix-array substring search over one immutable text corpus."""
from .engine import Engine
from .errors import BadQuery, IndexBuildError
from .models import Snippet

__all__ = ["Engine", "BadQuery", "IndexBuildError", "Snippet"]
