"""Writing-sample collection from the published content tree.

Each category (platform) has its own directory under writing/content/.
Every markdown file found below it becomes one Sample.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .config import PLATFORMS
from .frontmatter import read_markdown
from .utils import count_words
from .workspace import get_path

UNTITLED = "Untitled"


@dataclass(frozen=True)
class Sample:
    category: str
    title: str
    content: str
    word_count: int
    char_count: int
    path: Optional[Path] = None


def list_markdown_files(directory: str | Path) -> List[Path]:
    return sorted(p for p in Path(directory).rglob("*.md") if p.is_file())


def sample_from_document(category: str, header: dict, body: str, path: Optional[Path] = None) -> Sample:
    title = header.get("title")
    wc = header.get("word_count")
    if not isinstance(wc, int) or isinstance(wc, bool):
        wc = count_words(body)
    return Sample(
        category=category,
        title=str(title) if title else UNTITLED,
        content=body,
        word_count=wc,
        char_count=len(body),
        path=path,
    )


def collect_samples(categories: Sequence[str] = PLATFORMS, base_dir: str | Path | None = None) -> List[Sample]:
    """Decode every document under <base_dir>/<category>, in category order.

    Missing category directories are skipped; a partial corpus is not an error.
    """
    base = Path(base_dir) if base_dir is not None else get_path("writing", "content")
    samples: List[Sample] = []
    for category in categories:
        category_dir = base / category
        if not category_dir.is_dir():
            continue
        for path in list_markdown_files(category_dir):
            header, body = read_markdown(path)
            samples.append(sample_from_document(category, header, body, path))
    return samples
