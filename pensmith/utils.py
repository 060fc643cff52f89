"""Utility helpers: text file I/O and word counting.

Public helpers:
- save_text(path, content)
- read_text(path)
- count_words(text)
- slugify(text)
"""
from __future__ import annotations
from pathlib import Path
import re

from .context import MissingFileError, PenError

_WS_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def save_text(path: str | Path, content: str) -> None:
    """Overwrite `path` with `content`, creating parent directories. Not atomic."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def read_text(path: str | Path, *, errors: str = "strict") -> str:
    """Read UTF-8 text. errors="replace" substitutes U+FFFD for undecodable bytes."""
    p = Path(path)
    if not p.exists():
        raise MissingFileError(f"Required file not found: {path}")
    try:
        return p.read_text(encoding="utf-8", errors=errors)
    except (OSError, UnicodeDecodeError) as e:
        raise PenError(f"Unable to read file {path}: {e}")


def count_words(text: str) -> int:
    return len([w for w in _WS_RE.split(text.strip()) if w])


def slugify(text: str, max_len: int = 50) -> str:
    """Lowercase ASCII slug for filenames: runs of other characters become '-'."""
    slug = _SLUG_RE.sub("-", text.lower()).strip("-")
    return slug[:max_len]
