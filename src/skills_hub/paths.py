"""Path normalization helpers.

Paths are compared and stored as forward-slash strings without a trailing
separator so that the same directory always produces the same key.
"""

from pathlib import Path


def normalize_path(raw: str | Path) -> str:
    """Normalize a path string for storage and comparison.

    Backslashes become forward slashes, surrounding whitespace and trailing
    slashes are removed. An empty result normalizes to "/".
    """
    text = str(raw).replace("\\", "/").strip()
    text = text.rstrip("/")
    if not text:
        return "/"
    return text


def path_tail(raw: str | Path) -> str:
    """Return the last non-empty segment of a path."""
    segments = [segment for segment in normalize_path(raw).split("/") if segment]
    if not segments:
        return ""
    return segments[-1]


def join_home_path(home: Path, relative: str) -> str:
    """Join a home-relative path and normalize the result."""
    relative_path = relative.lstrip("/").lstrip("\\")
    return normalize_path(home / relative_path)
