"""Token counting helpers using tiktoken when available.

- count_text_tokens(text: str, model: str) -> int

Claude models have no public tiktoken encoding; o200k_base is used as an
approximation. If no encoding loads, falls back to a chars-per-token estimate.
"""
from __future__ import annotations

import tiktoken

from .sampling import CHARS_PER_TOKEN


def _encoding_for_model(model: str):
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        pass
    try:
        return tiktoken.get_encoding("o200k_base")
    except Exception:
        # Encoding files are fetched on first use; offline runs land here
        return None


def count_text_tokens(text: str, model: str) -> int:
    enc = _encoding_for_model(model)
    if enc is None:
        return int((len(text or "") / CHARS_PER_TOKEN) + 0.5)
    return len(enc.encode(text or ""))
