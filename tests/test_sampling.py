import pytest

from pensmith.corpus import Sample
from pensmith.sampling import (
    DEFAULT_BUDGET_CHARS,
    MIN_FRAGMENT_CHARS,
    budget_from_env,
    format_samples,
    select_representative_samples,
    summarize,
)


def _sample(category: str, size: int, title: str = "T") -> Sample:
    content = "x" * size
    return Sample(category=category, title=title, content=content, word_count=1, char_count=size)


def test_three_categories_split_budget_equally():
    # 3 categories x 50,000 chars each (4 x 12,500) against a 30,000 budget
    samples = [_sample(c, 12_500, f"{c}{i}") for c in ("blog", "linkedin", "substack") for i in range(4)]
    result = select_representative_samples(samples, 30_000)

    assert result.per_category_budget == 10_000
    assert result.total_samples == 12
    assert result.total_chars <= 30_000
    assert len(result.categories) == 3
    for category in ("blog", "linkedin", "substack"):
        stats = result.by_category[category]
        assert stats.total == 4
        # First sample does not fit whole; truncated to the 10k headroom
        assert stats.included == 1
        assert stats.chars == 10_000
    assert all(s.char_count == 10_000 and len(s.content) == 10_000 for s in result.selected)


def test_whole_samples_then_truncated_tail():
    samples = [_sample("blog", 4_000, "a"), _sample("blog", 4_000, "b"), _sample("blog", 4_000, "c"), _sample("blog", 10, "d")]
    result = select_representative_samples(samples, 10_000)
    assert [s.title for s in result.selected] == ["a", "b", "c"]
    assert result.selected[-1].char_count == 2_000
    assert result.selected[-1].content == "x" * 2_000
    # Processing stops after a truncation even though "d" would fit
    assert result.by_category["blog"].included == 3
    assert result.by_category["blog"].chars == 10_000


def test_headroom_at_floor_is_dropped():
    samples = [_sample("blog", 9_000, "a"), _sample("blog", 5_000, "b"), _sample("blog", 10, "c")]
    result = select_representative_samples(samples, 10_000, min_fragment=1_000)
    assert [s.title for s in result.selected] == ["a"]
    assert result.by_category["blog"].chars == 9_000
    assert result.by_category["blog"].included == 1


def test_headroom_just_above_floor_is_truncated():
    samples = [_sample("blog", 8_999, "a"), _sample("blog", 5_000, "b")]
    result = select_representative_samples(samples, 10_000, min_fragment=1_000)
    assert [s.title for s in result.selected] == ["a", "b"]
    assert result.selected[-1].char_count == 1_001


def test_floor_is_tunable():
    samples = [_sample("blog", 95, "a"), _sample("blog", 50, "b")]
    assert len(select_representative_samples(samples, 100, min_fragment=4).selected) == 2
    assert len(select_representative_samples(samples, 100, min_fragment=5).selected) == 1


def test_prolific_category_does_not_starve_thin_one():
    samples = [_sample("blog", 1_000, f"b{i}") for i in range(100)] + [_sample("twitter", 300, "t")]
    result = select_representative_samples(samples, 10_000, min_fragment=100)
    assert result.per_category_budget == 5_000
    assert result.by_category["blog"].included == 5
    assert result.by_category["blog"].chars == 5_000
    assert result.by_category["twitter"].included == 1
    assert result.by_category["twitter"].chars == 300


def test_grouping_preserves_encounter_order():
    samples = [_sample("twitter", 10, "t1"), _sample("blog", 10, "b1"), _sample("twitter", 10, "t2")]
    result = select_representative_samples(samples, 1_000)
    assert list(result.by_category) == ["twitter", "blog"]
    assert [s.title for s in result.selected] == ["t1", "t2", "b1"]


@pytest.mark.parametrize("budget", [0, 1, 7, 999, 10_001, 123_457])
def test_budget_bounds_hold(budget):
    samples = [_sample(c, n) for c in ("blog", "linkedin", "substack") for n in (10, 3_000, 7_777, 2)]
    result = select_representative_samples(samples, budget, min_fragment=3)
    k = 3
    assert result.total_chars <= k * (budget // k)
    for stats in result.by_category.values():
        assert stats.chars <= budget // k
    assert result.total_chars == sum(s.char_count for s in result.selected)


def test_deterministic():
    samples = [_sample(c, n, f"{c}-{n}") for c in ("blog", "twitter") for n in (500, 2_500, 9_000)]
    a = select_representative_samples(samples, 12_345, min_fragment=200)
    b = select_representative_samples(list(samples), 12_345, min_fragment=200)
    assert a == b


def test_no_samples_returns_empty_result():
    result = select_representative_samples([], 10_000)
    assert result.selected == []
    assert result.by_category == {}
    assert result.total_chars == 0
    assert result.per_category_budget == 0


def test_zero_budget_selects_nothing():
    result = select_representative_samples([_sample("blog", 10)], 0)
    assert result.selected == []
    assert result.by_category["blog"].total == 1
    assert result.by_category["blog"].included == 0


def test_budget_from_env(monkeypatch: pytest.MonkeyPatch):
    assert budget_from_env() == DEFAULT_BUDGET_CHARS == 400_000
    monkeypatch.setenv("PEN_SAMPLE_BUDGET_CHARS", "5000")
    assert budget_from_env() == 5_000
    monkeypatch.setenv("PEN_SAMPLE_BUDGET_CHARS", "lots")
    assert budget_from_env() == DEFAULT_BUDGET_CHARS


def test_format_samples_and_summary():
    selected = [
        Sample(category="blog", title="First", content="Alpha", word_count=1, char_count=5),
        Sample(category="twitter", title="Untitled", content="Beta", word_count=1, char_count=4),
    ]
    assert format_samples(selected) == "## Sample 1: First (blog)\n\nAlpha\n\n---\n\n## Sample 2: Untitled (twitter)\n\nBeta"
    result = select_representative_samples(selected, 100)
    lines = summarize(result)
    assert lines[0] == "  blog: 1 samples, 1 included (~0k chars)"
    assert lines[-1] == "  Total: 2 samples, 2 included (~0k chars)"


def test_default_floor_constant():
    assert MIN_FRAGMENT_CHARS == 1000


def test_summary_rounds_half_up():
    result = select_representative_samples([_sample("blog", 2500), _sample("blog", 1500)], 10_000)
    lines = summarize(result)
    assert lines[0] == "  blog: 2 samples, 2 included (~4k chars)"
    result = select_representative_samples([_sample("blog", 2500)], 10_000)
    assert summarize(result)[-1] == "  Total: 1 samples, 1 included (~3k chars)"
