"""Markdown documents with an optional YAML frontmatter header.

A document looks like:

    ---
    title: Example
    tags: [a, b]
    ---

    Body text...

Decoding is deliberately forgiving: content that does not start with a
delimiter line, has no closing delimiter, or carries a header that is not a
valid YAML mapping is returned whole as body with an empty header. The
original input is never lost and decode never raises. Config loading
(config.py) takes the opposite, strict stance.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .logging import log_warning as _log_warning
from .utils import read_text, save_text

DELIMITER = "---"

_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSE_RE = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)


def split_frontmatter(raw: str) -> Optional[Tuple[str, str]]:
    """Return (header_text, remainder) or None when there is no delimited header block."""
    m_open = _OPEN_RE.match(raw)
    if not m_open:
        return None
    m_close = _CLOSE_RE.search(raw, m_open.end())
    if not m_close:
        return None
    return raw[m_open.end():m_close.start()], raw[m_close.end():]


def decode(raw: str) -> Tuple[Dict[str, Any], str]:
    parts = split_frontmatter(raw)
    if parts is None:
        return {}, raw
    header_text, remainder = parts
    try:
        header = yaml.safe_load(header_text)
    except Exception:
        return {}, raw
    if header is None:
        header = {}
    if not isinstance(header, dict):
        return {}, raw
    return header, remainder.strip()


def encode(header: Dict[str, Any], body: str) -> str:
    if not header:
        return body
    dumped = yaml.safe_dump(header, sort_keys=False, allow_unicode=True)
    return f"{DELIMITER}\n{dumped}{DELIMITER}\n\n{body}"


def read_markdown(path: str | Path) -> Tuple[Dict[str, Any], str]:
    # Undecodable bytes become U+FFFD so one bad file cannot abort a corpus pass
    raw = read_text(path, errors="replace")
    header, body = decode(raw)
    if not header and body is raw and _OPEN_RE.match(raw):
        _log_warning(f"frontmatter: unreadable header in {path}; treating whole file as body")
    return header, body


def write_markdown(path: str | Path, header: Dict[str, Any], body: str) -> Path:
    save_text(path, encode(header, body))
    return Path(path)
