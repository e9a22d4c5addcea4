import pytest

from skillgap.schemas.skills import GapSize, OverallGap, Priority, Skill, SkillCategory, SkillGap, SkillLevel
from skillgap.services.gap_service import (
    AIGapAnalysis,
    aggregate_overall_gap,
    analyze_gaps,
    assign_priority,
    blend_analysis,
    classify_gap,
    compute_gaps,
    estimate_weeks,
    group_by_category,
    load_skills,
    near_level_skills,
    select_focus,
    sort_by_priority,
)


LEVELS = [SkillLevel.BEGINNER, SkillLevel.INTERMEDIATE, SkillLevel.ADVANCED, SkillLevel.EXPERT]
GAP_ORDER = [GapSize.NONE, GapSize.SMALL, GapSize.MEDIUM, GapSize.LARGE]


def skill(name: str, level: str = "beginner", category: str = "Other") -> Skill:
    return Skill(name=name, level=level, category=category)


def gap(name: str, size: GapSize, priority: Priority) -> SkillGap:
    return SkillGap(skill=skill(name), current_level="beginner", required_level="expert", gap=size, priority=priority)


@pytest.mark.parametrize("level", LEVELS)
def test_classify_gap_equal_levels_is_none(level) -> None:
    assert classify_gap(level, level) == GapSize.NONE


@pytest.mark.parametrize("current", LEVELS)
def test_classify_gap_monotonic_in_required_level(current) -> None:
    sizes = [GAP_ORDER.index(classify_gap(current, required)) for required in LEVELS]
    assert sizes == sorted(sizes)


@pytest.mark.parametrize(
    "current,required,expected",
    [
        ("beginner", "intermediate", GapSize.SMALL),
        ("beginner", "advanced", GapSize.MEDIUM),
        ("beginner", "expert", GapSize.LARGE),
        ("expert", "beginner", GapSize.NONE),
        ("Advanced", "EXPERT", GapSize.SMALL),
    ],
)
def test_classify_gap_thresholds(current, required, expected) -> None:
    assert classify_gap(current, required) == expected


def test_classify_gap_unknown_levels_count_as_beginner() -> None:
    assert classify_gap("guru", "expert") == GapSize.LARGE
    assert classify_gap(None, "intermediate") == GapSize.SMALL
    assert classify_gap("intermediate", "something") == GapSize.NONE


@pytest.mark.parametrize("is_required", [True, False])
def test_assign_priority_none_is_always_low(is_required) -> None:
    assert assign_priority(GapSize.NONE, is_required) == Priority.LOW


def test_assign_priority_required() -> None:
    assert assign_priority(GapSize.LARGE) == Priority.HIGH
    assert assign_priority(GapSize.MEDIUM) == Priority.HIGH
    assert assign_priority(GapSize.SMALL) == Priority.MEDIUM


def test_assign_priority_preferred() -> None:
    assert assign_priority(GapSize.LARGE, False) == Priority.MEDIUM
    assert assign_priority(GapSize.MEDIUM, False) == Priority.MEDIUM
    assert assign_priority(GapSize.SMALL, False) == Priority.LOW


def test_compute_gaps_skips_met_requirements() -> None:
    current = [skill("Python", "expert"), skill("SQL", "advanced")]
    required = [skill("python", "advanced"), skill("SQL", "advanced"), skill("Go", "intermediate")]
    gaps = compute_gaps(current, required, [])
    assert [g.skill.name for g in gaps] == ["Go"]
    assert all(g.gap != GapSize.NONE for g in gaps)


def test_compute_gaps_missing_skill_is_large_and_high_even_when_preferred() -> None:
    gaps = compute_gaps([], [], [skill("Kubernetes", "intermediate")])
    assert len(gaps) == 1
    only = gaps[0]
    assert only.gap == GapSize.LARGE
    assert only.priority == Priority.HIGH
    assert only.current_level == SkillLevel.BEGINNER
    assert only.required_level == SkillLevel.INTERMEDIATE


def test_compute_gaps_matched_preferred_skill_uses_required_priority() -> None:
    gaps = compute_gaps([skill("React", "beginner")], [], [skill("React", "advanced")])
    assert gaps[0].gap == GapSize.MEDIUM
    assert gaps[0].priority == Priority.HIGH


def test_compute_gaps_first_case_insensitive_match_wins() -> None:
    current = [skill("docker", "expert"), skill("Docker", "beginner")]
    assert compute_gaps(current, [skill("DOCKER", "advanced")], []) == []


def test_compute_gaps_keeps_target_order() -> None:
    required = [skill("A", "expert"), skill("B", "expert")]
    preferred = [skill("C", "expert")]
    assert [g.skill.name for g in compute_gaps([], required, preferred)] == ["A", "B", "C"]


def test_aggregate_overall_gap() -> None:
    assert aggregate_overall_gap([]) == OverallGap.SMALL
    assert aggregate_overall_gap([gap("a", GapSize.SMALL, Priority.MEDIUM)]) == OverallGap.MEDIUM
    assert aggregate_overall_gap([gap("a", GapSize.NONE, Priority.LOW), gap("b", GapSize.SMALL, Priority.LOW)]) == (
        OverallGap.SMALL
    )
    assert aggregate_overall_gap([gap("a", GapSize.MEDIUM, Priority.HIGH), gap("b", GapSize.LARGE, Priority.HIGH)]) == (
        OverallGap.LARGE
    )
    # Mean of exactly 2 is no longer "medium".
    assert aggregate_overall_gap([gap("a", GapSize.SMALL, Priority.LOW), gap("b", GapSize.LARGE, Priority.HIGH)]) == (
        OverallGap.LARGE
    )


def test_estimate_weeks() -> None:
    assert estimate_weeks([]) == 0
    assert estimate_weeks([gap("a", GapSize.SMALL, Priority.MEDIUM)]) == 2
    assert estimate_weeks([gap("a", GapSize.LARGE, Priority.HIGH)]) == 12
    # 0.6 * 6 + 0.4 * 4 = 5.2
    assert estimate_weeks([gap("a", GapSize.SMALL, Priority.LOW), gap("b", GapSize.MEDIUM, Priority.HIGH)]) == 6


def test_estimate_weeks_exact_integer_result_is_not_rounded_up() -> None:
    # 0.6 * 12 + 0.4 * 7 is exactly 10.
    gaps = [gap("a", GapSize.SMALL, Priority.LOW), gap("b", GapSize.LARGE, Priority.HIGH)]
    assert estimate_weeks(gaps) == 10


def test_select_focus_limits_and_excludes_low() -> None:
    gaps = [gap(f"m{i}", GapSize.SMALL, Priority.MEDIUM) for i in range(3)]
    gaps += [gap(f"h{i}", GapSize.LARGE, Priority.HIGH) for i in range(4)]
    gaps.append(gap("low", GapSize.SMALL, Priority.LOW))
    focus = select_focus(gaps)
    assert focus == ["h0", "h1", "h2", "h3", "m0"]
    assert "low" not in select_focus([gap("low", GapSize.SMALL, Priority.LOW)])


def test_analyze_gaps_concrete_scenario() -> None:
    result = analyze_gaps(
        [skill("Python", "intermediate")],
        [skill("Python", "expert"), skill("Docker", "beginner")],
        [],
    )
    python, docker = result.skill_gaps
    assert (python.gap, python.priority) == (GapSize.MEDIUM, Priority.HIGH)
    assert (docker.gap, docker.priority, docker.current_level) == (GapSize.LARGE, Priority.HIGH, SkillLevel.BEGINNER)
    assert result.overall_gap == OverallGap.LARGE
    assert result.estimated_time_to_close == 11
    assert result.recommended_focus == ["Python", "Docker"]


def test_analyze_gaps_full_match() -> None:
    result = analyze_gaps([skill("Go", "expert")], [skill("Go", "expert")], [])
    assert result.skill_gaps == []
    assert result.overall_gap == OverallGap.SMALL
    assert result.estimated_time_to_close == 0
    assert result.recommended_focus == []


def test_blend_without_ai_is_manual_result() -> None:
    required = [skill("Rust", "advanced")]
    manual = compute_gaps([], required, [])
    assert blend_analysis(None, manual) == analyze_gaps([], required, [])


def test_blend_prefers_ai_fields() -> None:
    manual = compute_gaps([], [skill("Rust", "advanced")], [])
    ai_gap = gap("Elixir", GapSize.SMALL, Priority.LOW)
    ai = AIGapAnalysis(
        skill_gaps=[ai_gap],
        overall_gap=OverallGap.MEDIUM,
        recommended_focus=["Elixir"],
        estimated_time_to_close=7,
    )
    result = blend_analysis(ai, manual)
    assert result.skill_gaps == [ai_gap]
    assert result.overall_gap == OverallGap.MEDIUM
    assert result.recommended_focus == ["Elixir"]
    assert result.estimated_time_to_close == 7


def test_blend_fallback_aggregates_follow_selected_gaps() -> None:
    manual = compute_gaps([], [skill("Rust", "advanced")], [])
    ai_gap = gap("Elixir", GapSize.SMALL, Priority.MEDIUM)
    result = blend_analysis(AIGapAnalysis(skill_gaps=[ai_gap]), manual)
    assert result.skill_gaps == [ai_gap]
    assert result.overall_gap == OverallGap.MEDIUM
    assert result.recommended_focus == ["Elixir"]
    assert result.estimated_time_to_close == 2


def test_blend_treats_empty_ai_fields_as_absent() -> None:
    manual = compute_gaps([], [skill("Rust", "advanced")], [])
    result = blend_analysis(AIGapAnalysis(recommended_focus=[], estimated_time_to_close=0), manual)
    assert result.skill_gaps == manual
    assert result.recommended_focus == ["Rust"]
    assert result.estimated_time_to_close == 12
    assert result.overall_gap == OverallGap.LARGE


def test_group_by_category_keeps_first_seen_order() -> None:
    skills = [
        skill("Python", category="Programming Languages"),
        skill("Postgres", category="Databases"),
        skill("Go", category="programming languages"),
        skill("Juggling", category="Circus"),
    ]
    grouped = group_by_category(skills)
    assert list(grouped) == [SkillCategory.PROGRAMMING_LANGUAGES.value, "Databases", "Other"]
    assert [s.name for s in grouped["Programming Languages"]] == ["Python", "Go"]


def test_sort_by_priority_is_stable_and_does_not_mutate() -> None:
    gaps = [
        gap("low", GapSize.SMALL, Priority.LOW),
        gap("high-medium", GapSize.MEDIUM, Priority.HIGH),
        gap("mid", GapSize.SMALL, Priority.MEDIUM),
        gap("high-large-1", GapSize.LARGE, Priority.HIGH),
        gap("high-large-2", GapSize.LARGE, Priority.HIGH),
    ]
    before = list(gaps)
    ordered = sort_by_priority(gaps)
    assert [g.skill.name for g in ordered] == ["high-large-1", "high-large-2", "high-medium", "mid", "low"]
    assert gaps == before


def test_near_level_skills_excludes_experts() -> None:
    skills = [skill("a", "expert"), skill("b", "advanced"), skill("c", "beginner")]
    assert [s.name for s in near_level_skills(skills)] == ["b", "c"]


def test_load_skills_skips_unusable_entries() -> None:
    raw = [
        {"name": "Python", "level": "expert", "category": "Programming Languages", "id": "s1"},
        {"name": "  "},
        "Docker",
        {"name": "SQL", "yearsOfExperience": 3},
    ]
    skills = load_skills(raw)
    assert [s.name for s in skills] == ["Python", "SQL"]
    assert skills[0].id == "s1"
    assert skills[1].years_of_experience == 3
    assert load_skills(None) == []


@pytest.mark.parametrize(
    "enum, expected",
    [
        (SkillLevel, SkillLevel.BEGINNER),
        (SkillCategory, SkillCategory.OTHER),
        (GapSize, GapSize.MEDIUM),
        (OverallGap, OverallGap.MEDIUM),
        (Priority, Priority.MEDIUM),
    ],
)
def test_unknown_enum_values_coerce_to_default(enum, expected) -> None:
    assert enum.default() is expected
    assert enum.coerce("wizard") is expected
    assert enum.coerce(None) is expected
    assert enum.coerce(42) is expected
    assert enum.coerce(f"  {expected.value.upper()} ") is expected
