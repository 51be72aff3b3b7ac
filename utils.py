"""Utility helpers shared across server modules."""

from pathlib import Path

CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".gif": "image/gif",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".mp4": "video/mp4",
}
DEFAULT_CONTENT_TYPE = "text/plain"


def get_content_type(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def is_within_root(filename: str, doc_root: str) -> bool:
    """Return False when ``filename`` resolves outside of ``doc_root``."""
    try:
        root = Path(doc_root).resolve()
        candidate = Path(filename).resolve()
        candidate.relative_to(root)
    except (OSError, ValueError):
        return False
    return True
