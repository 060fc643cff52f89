"""Workspace discovery.

A workspace is any directory containing the `.pensmith` marker directory.
The root is resolved fresh on every call by walking upward from a start
directory; there is no cached "current workspace".
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .config import MARKER_DIR, PLATFORMS
from .context import WorkspaceNotFound


WORKSPACE_DIRS: List[str] = [
    f"{MARKER_DIR}/prompts",
    f"{MARKER_DIR}/prompts/format",
    "writing/import",
    "writing/raw",
    "writing/drafts",
] + [f"writing/content/{p}" for p in PLATFORMS]


def find_workspace_root(start: str | Path | None = None) -> Optional[Path]:
    """Return the nearest ancestor of `start` (inclusive) holding the marker, else None."""
    current = Path(start).resolve() if start is not None else Path.cwd().resolve()
    while True:
        if (current / MARKER_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def has_workspace(start: str | Path | None = None) -> bool:
    return find_workspace_root(start) is not None


def require_workspace_root(start: str | Path | None = None) -> Path:
    root = find_workspace_root(start)
    if root is None:
        raise WorkspaceNotFound(Path(start) if start is not None else Path.cwd())
    return root


def get_path(*segments: str, start: str | Path | None = None) -> Path:
    """Join `segments` under the workspace root; raises WorkspaceNotFound."""
    return require_workspace_root(start).joinpath(*segments)


def init_workspace(root: str | Path) -> List[Path]:
    """Create the standard workspace directory layout under `root`.

    Existing directories are left alone. Returns the directories in creation order.
    """
    base = Path(root)
    created: List[Path] = []
    for rel in WORKSPACE_DIRS:
        d = base / rel
        d.mkdir(parents=True, exist_ok=True)
        created.append(d)
    return created
