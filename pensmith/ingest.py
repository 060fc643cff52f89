"""Import loose markdown files into the workspace with generated metadata.

Each source file without a title in its header is sent to the completion
service with the `ingest` prompt. The YAML reply becomes the new header, the
file is written as `<date>_<slug>.md` under the destination directory and the
source is removed. Files that already carry a title are left in place.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from .corpus import list_markdown_files
from .frontmatter import read_markdown, write_markdown
from .logging import log_error_base as _log_error_base, log_run as _log_run, log_warning as _log_warning
from .templates import interpolate, load_prompt
from .utils import count_words, slugify

INGEST_SYSTEM = "You are a metadata extraction assistant."
INGEST_MAX_TOKENS = 500
UNTITLED = "Untitled"

CompleteFn = Callable[..., str]


@dataclass
class IngestReport:
    ingested: int = 0
    skipped: int = 0
    failed: int = 0
    outputs: List[Path] = field(default_factory=list)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _strip_fences(response: str) -> str:
    lines = [ln for ln in response.strip().splitlines() if not ln.strip().startswith("```")]
    return "\n".join(lines).strip()


def default_metadata() -> Dict[str, Any]:
    return {"title": UNTITLED, "date": None, "tags": [], "summary": ""}


def parse_metadata(response: str) -> Dict[str, Any]:
    """Parse the YAML metadata reply, falling back to defaults on anything unusable."""
    try:
        parsed = yaml.safe_load(_strip_fences(response))
    except Exception:
        parsed = None
    if not isinstance(parsed, dict):
        _log_warning("ingest: could not parse metadata, using defaults")
        return default_metadata()
    tags = parsed.get("tags")
    date = parsed.get("date")
    return {
        "title": str(parsed.get("title") or UNTITLED),
        "date": str(date) if date else None,
        "tags": [str(t) for t in tags] if isinstance(tags, list) else [],
        "summary": str(parsed.get("summary") or ""),
    }


def generate_filename(metadata: Dict[str, Any], today: Optional[str] = None) -> str:
    date = slugify(str(metadata.get("date") or "")) or today or _today()
    slug = slugify(str(metadata.get("title") or "")) or "untitled"
    return f"{date}_{slug}.md"


def _unique_path(path: Path) -> Path:
    n = 2
    candidate = path
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}-{n}{path.suffix}")
        n += 1
    return candidate


def ingest_file(
    path: Path,
    platform: str,
    template: str,
    dest_dir: Path,
    complete_fn: CompleteFn,
    today: Optional[str] = None,
) -> Optional[Path]:
    """Ingest one file and return the written path, or None if it already has a title."""
    header, body = read_markdown(path)
    if header.get("title"):
        return None
    today = today or _today()
    response = complete_fn(
        interpolate(template, {"content": body}),
        system=INGEST_SYSTEM,
        max_tokens=INGEST_MAX_TOKENS,
    )
    metadata = parse_metadata(response)
    out_header = {
        "title": metadata["title"],
        "date": metadata["date"] or today,
        "platform": platform,
        "word_count": count_words(body),
        "tags": metadata["tags"],
        "summary": metadata["summary"],
    }
    out_path = _unique_path(Path(dest_dir) / generate_filename(metadata, today))
    return write_markdown(out_path, out_header, body)


def ingest_directory(
    source_dir: Path,
    platform: str,
    dest_dir: Path,
    complete_fn: CompleteFn,
    today: Optional[str] = None,
) -> IngestReport:
    report = IngestReport()
    template = load_prompt("ingest")
    for path in list_markdown_files(source_dir):
        try:
            out_path = ingest_file(path, platform, template, dest_dir, complete_fn, today)
            if out_path is not None:
                path.unlink()
        except Exception as e:
            # One failing file must not stop the batch
            _log_error_base(f"ingest: {path}: {e}")
            print(f"  {path.name} - failed")
            print(f"    {e}")
            report.failed += 1
            continue
        if out_path is None:
            print(f"  {path.name} - skipped (already has metadata)")
            report.skipped += 1
            continue
        _log_run(f"ingest: {path} -> {out_path}")
        print(f"  {path.name} -> {out_path.name}")
        report.ingested += 1
        report.outputs.append(out_path)
    return report
