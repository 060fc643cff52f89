"""Prompt template resolution and interpolation.

Templates are markdown files addressed by name, optionally grouped with a
path segment (e.g. "analyze" or "format/linkedin"). Resolution walks an
ordered list of roots and the first hit wins:

1. <workspace>/.pensmith/prompts  (user overrides, when present)
2. pensmith/prompts               (bundled with the package)

Interpolation replaces {{name}} tokens in a single pass. Unbound tokens are
left as-is and inserted values are never re-scanned.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .config import MARKER_DIR
from .context import TemplateNotFound
from .logging import log_run as _log_run
from .utils import read_text
from .workspace import find_workspace_root

BUNDLED_PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")


def user_prompts_dir(start: str | Path | None = None) -> Optional[Path]:
    root = find_workspace_root(start)
    if root is None:
        return None
    d = root / MARKER_DIR / "prompts"
    return d if d.is_dir() else None


def template_roots(start: str | Path | None = None) -> List[Path]:
    roots: List[Path] = []
    user_dir = user_prompts_dir(start)
    if user_dir is not None:
        roots.append(user_dir)
    roots.append(BUNDLED_PROMPTS_DIR)
    return roots


def template_filename(name: str) -> str:
    return name if name.endswith(".md") else f"{name}.md"


def resolve_template(name: str, roots: Optional[Sequence[Path]] = None) -> Path:
    filename = template_filename(name)
    search = list(roots) if roots is not None else template_roots()
    for root in search:
        candidate = Path(root) / filename
        if not candidate.resolve().is_relative_to(Path(root).resolve()):
            raise TemplateNotFound(f"Invalid prompt name: {name} (must stay inside {root})")
        if candidate.is_file():
            _log_run(f"template: {name} -> {candidate}")
            return candidate
    searched = ", ".join(str(r) for r in search) or "(no roots)"
    raise TemplateNotFound(
        f"Prompt not found: {name}. Add {filename} under {MARKER_DIR}/prompts/ (searched: {searched})"
    )


def load_prompt(name: str, roots: Optional[Sequence[Path]] = None) -> str:
    return read_text(resolve_template(name, roots))


def interpolate(template: str, bindings: Mapping[str, str]) -> str:
    def _sub(m: "re.Match[str]") -> str:
        key = m.group(1)
        if key in bindings:
            return str(bindings[key])
        return m.group(0)

    return _TOKEN_RE.sub(_sub, template)


def apply_template(name: str, bindings: Mapping[str, str], roots: Optional[Sequence[Path]] = None) -> str:
    return interpolate(load_prompt(name, roots), bindings)
