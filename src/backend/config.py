import os

# context bytes shown on each side of a match
MAX_CONTEXT: int = 50

# minimum query length in bytes (after trimming)
MIN_QUERY: int = 2

# corpus file loaded at startup
CORPUS_PATH: str = "completeworks.txt"

# /* ~~~ HTTP listener defaults (PORT env var wins at startup) ~~~ */
DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3001

# Progress logging (set SHAKESEARCH_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("SHAKESEARCH_VERBOSE") == "1"


def resolve_port(value: int | None = None) -> int:
    """Explicit value > $PORT > DEFAULT_PORT."""
    if value is not None:
        return int(value)
    env = os.environ.get("PORT", "")
    return int(env) if env else DEFAULT_PORT
