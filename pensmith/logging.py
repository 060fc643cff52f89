"""Logging helpers: run log, breadcrumbs and warnings.

Logs live in the workspace marker directory (.pensmith/). Outside a
workspace the file-based helpers are no-ops; nothing here may break a command.

Public API:
- crash_trace_file() -> Optional[str]
- breadcrumb(label: str) -> None
- log_warning(msg: str) -> None
- log_error_base(msg: str) -> None
- log_run(msg: str) -> None
"""
from __future__ import annotations
from pathlib import Path
from typing import Optional
import os
import sys
import time


def crash_trace_file() -> Optional[str]:
    return os.getenv("PEN_CRASH_TRACE_FILE")


def _log_dir() -> Optional[Path]:
    from .workspace import find_workspace_root, MARKER_DIR  # lazy import to avoid cycles
    root = find_workspace_root()
    if root is None:
        return None
    return root / MARKER_DIR


def _timestamp() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


def breadcrumb(label: str) -> None:
    path = crash_trace_file()
    try:
        if path:
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{_timestamp()} pid={os.getpid()} | {label}\n")
                f.flush()
        log_run(f"BREADCRUMB | {label}")
        if os.getenv("PEN_DEBUG", "0") == "1":
            sys.stderr.write(f"[crumb] {label}\n")
            sys.stderr.flush()
    except Exception:
        pass


def log_warning(msg: str) -> None:
    """Log a warning message to stdout and run.log."""
    try:
        text = f"WARNING: {msg}"
        print(text)
        log_run(text)
    except Exception:
        pass


def log_error_base(msg: str) -> None:
    """Append an error message to .pensmith/run_error.log (and run.log)."""
    try:
        base = _log_dir()
        if base is not None:
            base.mkdir(parents=True, exist_ok=True)
            with (base / "run_error.log").open("a", encoding="utf-8") as f:
                f.write(f"[{_timestamp()}] {msg}\n")
        log_run(f"ERROR: {msg}")
    except Exception:
        pass


def log_run(msg: str) -> None:
    """Append a message to the unified .pensmith/run.log file."""
    try:
        base = _log_dir()
        if base is None:
            return
        with (base / "run.log").open("a", encoding="utf-8") as f:
            f.write(f"[{_timestamp()}] {msg}\n")
    except Exception:
        pass
