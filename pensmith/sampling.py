"""Representative, budget-bounded sample selection for style analysis.

The global character budget is split equally across every category that has
at least one sample, so a prolific category cannot crowd out a thin one.
Within a category, samples are taken in order while they fit whole; the
first sample that does not fit is truncated to the remaining headroom if
that headroom exceeds the fragment floor, and the category stops there.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Sequence

from .corpus import Sample
from .env import env_int
from .utils import count_words

DEFAULT_SAMPLE_TOKENS = 100_000
CHARS_PER_TOKEN = 4
DEFAULT_BUDGET_CHARS = DEFAULT_SAMPLE_TOKENS * CHARS_PER_TOKEN

# Fragments at or below this many characters carry too little signal to keep
MIN_FRAGMENT_CHARS = 1000


@dataclass
class CategoryStats:
    total: int = 0
    included: int = 0
    chars: int = 0


@dataclass
class SelectionResult:
    selected: List[Sample] = field(default_factory=list)
    by_category: Dict[str, CategoryStats] = field(default_factory=dict)
    total_samples: int = 0
    total_selected: int = 0
    total_chars: int = 0
    per_category_budget: int = 0

    @property
    def categories(self) -> List[str]:
        """Categories that contributed at least one selected sample, in order."""
        return [c for c, st in self.by_category.items() if st.included > 0]


def budget_from_env() -> int:
    return env_int("PEN_SAMPLE_BUDGET_CHARS", DEFAULT_BUDGET_CHARS)


def group_by_category(samples: Sequence[Sample]) -> Dict[str, List[Sample]]:
    groups: Dict[str, List[Sample]] = {}
    for s in samples:
        groups.setdefault(s.category, []).append(s)
    return groups


def truncate_sample(sample: Sample, length: int) -> Sample:
    content = sample.content[:length]
    return replace(sample, content=content, char_count=len(content), word_count=count_words(content))


def select_representative_samples(
    samples: Sequence[Sample],
    budget: int = DEFAULT_BUDGET_CHARS,
    *,
    min_fragment: int = MIN_FRAGMENT_CHARS,
) -> SelectionResult:
    groups = group_by_category(samples)
    result = SelectionResult(total_samples=len(samples))
    if not groups:
        return result

    per_budget = max(budget, 0) // len(groups)
    result.per_category_budget = per_budget

    for category, group in groups.items():
        stats = CategoryStats(total=len(group))
        for sample in group:
            if stats.chars + sample.char_count <= per_budget:
                result.selected.append(sample)
                stats.included += 1
                stats.chars += sample.char_count
                continue
            headroom = per_budget - stats.chars
            if headroom > min_fragment:
                result.selected.append(truncate_sample(sample, headroom))
                stats.included += 1
                stats.chars += headroom
            break
        result.by_category[category] = stats
        result.total_chars += stats.chars

    result.total_selected = len(result.selected)
    return result


def format_samples(selected: Sequence[Sample]) -> str:
    return "\n\n---\n\n".join(
        f"## Sample {i}: {s.title} ({s.category})\n\n{s.content}" for i, s in enumerate(selected, start=1)
    )


def _kilo(chars: int) -> int:
    # Half-up, so 2500 chars reads as ~3k rather than banker's-rounded ~2k
    return int(chars / 1000 + 0.5)


def summarize(result: SelectionResult) -> List[str]:
    lines = [
        f"  {category}: {st.total} samples, {st.included} included (~{_kilo(st.chars)}k chars)"
        for category, st in result.by_category.items()
    ]
    lines.append(
        f"  Total: {result.total_samples} samples, {result.total_selected} included "
        f"(~{_kilo(result.total_chars)}k chars)"
    )
    return lines
