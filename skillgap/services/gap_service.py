# gap_service.py
"""Deterministic skill-gap scoring.

Everything here is a pure function over in-memory schema objects: no I/O, no
settings, no logging. The request handlers fetch skills, call into this module,
optionally blend in an LLM answer, and persist the result themselves.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from skillgap.schemas.skills import (
    GapAnalysisResult,
    GapSize,
    OverallGap,
    Priority,
    Skill,
    SkillGap,
    SkillLevel,
)


FOCUS_LIMIT = 5

_GAP_SCORES = {
    GapSize.NONE: 0,
    GapSize.SMALL: 1,
    GapSize.MEDIUM: 2,
    GapSize.LARGE: 3,
}

# Weeks needed to close a single gap of each size.
_GAP_WEEKS = {
    GapSize.NONE: 0,
    GapSize.SMALL: 2,
    GapSize.MEDIUM: 6,
    GapSize.LARGE: 12,
}

_PRIORITY_ORDER = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


def classify_gap(current_level: SkillLevel | str | None, required_level: SkillLevel | str | None) -> GapSize:
    current = SkillLevel.coerce(current_level)
    required = SkillLevel.coerce(required_level)
    difference = required.rank - current.rank

    if difference <= 0:
        return GapSize.NONE
    if difference == 1:
        return GapSize.SMALL
    if difference == 2:
        return GapSize.MEDIUM
    return GapSize.LARGE


def assign_priority(gap: GapSize, is_required: bool = True) -> Priority:
    if gap == GapSize.NONE:
        return Priority.LOW

    if is_required:
        if gap in (GapSize.LARGE, GapSize.MEDIUM):
            return Priority.HIGH
        return Priority.MEDIUM

    # Preferred skills are never escalated above medium.
    if gap in (GapSize.LARGE, GapSize.MEDIUM):
        return Priority.MEDIUM
    return Priority.LOW


def _skill_key(name: str) -> str:
    return (name or "").lower()


def _find_current(current_skills: Sequence[Skill], name: str) -> Skill | None:
    key = _skill_key(name)
    for skill in current_skills:
        if _skill_key(skill.name) == key:
            return skill
    return None


def compute_gaps(
    current_skills: Sequence[Skill],
    required_skills: Sequence[Skill],
    preferred_skills: Sequence[Skill],
) -> list[SkillGap]:
    """Gaps for every target skill the current set does not already satisfy.

    Targets are assessed required-first. Priority is always assigned as if the
    target were required, so a missing preferred skill scores the same as a
    missing required one.
    """

    gaps: list[SkillGap] = []
    for target in [*required_skills, *preferred_skills]:
        current = _find_current(current_skills, target.name)

        if current is None:
            gaps.append(
                SkillGap(
                    skill=target,
                    current_level=SkillLevel.BEGINNER,
                    required_level=target.level,
                    gap=GapSize.LARGE,
                    priority=assign_priority(GapSize.LARGE, True),
                )
            )
            continue

        gap = classify_gap(current.level, target.level)
        if gap == GapSize.NONE:
            continue
        gaps.append(
            SkillGap(
                skill=target,
                current_level=current.level,
                required_level=target.level,
                gap=gap,
                priority=assign_priority(gap, True),
            )
        )
    return gaps


def aggregate_overall_gap(skill_gaps: Sequence[SkillGap]) -> OverallGap:
    if not skill_gaps:
        return OverallGap.SMALL

    total = sum(_GAP_SCORES[gap.gap] for gap in skill_gaps)
    count = len(skill_gaps)

    # Compare mean < 1 and mean < 2 without dividing.
    if total < count:
        return OverallGap.SMALL
    if total < 2 * count:
        return OverallGap.MEDIUM
    return OverallGap.LARGE


def estimate_weeks(skill_gaps: Sequence[SkillGap]) -> int:
    """ceil(0.6 * slowest + 0.4 * mean), in weeks; 0 when there is nothing to close."""

    if not skill_gaps:
        return 0

    estimates = [_GAP_WEEKS[gap.gap] for gap in skill_gaps]
    count = len(estimates)
    # (6 * max * n + 4 * sum) / (10 * n), rounded up with integer arithmetic.
    numerator = 6 * max(estimates) * count + 4 * sum(estimates)
    denominator = 10 * count
    return -(-numerator // denominator)


def select_focus(skill_gaps: Sequence[SkillGap], limit: int = FOCUS_LIMIT) -> list[str]:
    high = [gap.skill.name for gap in skill_gaps if gap.priority == Priority.HIGH]
    medium = [gap.skill.name for gap in skill_gaps if gap.priority == Priority.MEDIUM]
    return (high + medium)[:limit]


def summarize_gaps(skill_gaps: Sequence[SkillGap]) -> GapAnalysisResult:
    return GapAnalysisResult(
        skill_gaps=list(skill_gaps),
        overall_gap=aggregate_overall_gap(skill_gaps),
        recommended_focus=select_focus(skill_gaps),
        estimated_time_to_close=estimate_weeks(skill_gaps),
    )


def analyze_gaps(
    current_skills: Sequence[Skill],
    required_skills: Sequence[Skill],
    preferred_skills: Sequence[Skill],
) -> GapAnalysisResult:
    return summarize_gaps(compute_gaps(current_skills, required_skills, preferred_skills))


@dataclass
class AIGapAnalysis:
    """Whatever the LLM managed to return; `None` / empty means "not provided"."""

    skill_gaps: list[SkillGap] = field(default_factory=list)
    overall_gap: OverallGap | None = None
    recommended_focus: list[str] = field(default_factory=list)
    estimated_time_to_close: int | None = None


def blend_analysis(ai: AIGapAnalysis | None, manual_gaps: Sequence[SkillGap]) -> GapAnalysisResult:
    """Prefer LLM output field by field, falling back to deterministic scoring.

    Fallback aggregates are computed over the gap list that is actually
    returned, so the summary always agrees with `skill_gaps`.
    """

    if ai is None:
        return summarize_gaps(manual_gaps)

    skill_gaps = list(ai.skill_gaps) if ai.skill_gaps else list(manual_gaps)

    overall_gap = ai.overall_gap or aggregate_overall_gap(skill_gaps)
    recommended_focus = list(ai.recommended_focus) if ai.recommended_focus else select_focus(skill_gaps)
    if ai.estimated_time_to_close and ai.estimated_time_to_close > 0:
        weeks = ai.estimated_time_to_close
    else:
        weeks = estimate_weeks(skill_gaps)

    return GapAnalysisResult(
        skill_gaps=skill_gaps,
        overall_gap=overall_gap,
        recommended_focus=recommended_focus,
        estimated_time_to_close=weeks,
    )


def group_by_category(skills: Iterable[Skill]) -> dict[str, list[Skill]]:
    grouped: dict[str, list[Skill]] = {}
    for skill in skills:
        grouped.setdefault(skill.category.value, []).append(skill)
    return grouped


def sort_by_priority(skill_gaps: Iterable[SkillGap]) -> list[SkillGap]:
    # sorted() is stable, so equal (priority, gap) pairs keep their input order.
    return sorted(
        skill_gaps,
        key=lambda gap: (_PRIORITY_ORDER[gap.priority], _GAP_SCORES[gap.gap]),
        reverse=True,
    )


def near_level_skills(skills: Iterable[Skill]) -> list[Skill]:
    return [skill for skill in skills if skill.level.rank < SkillLevel.EXPERT.rank]


def load_skills(raw: Any) -> list[Skill]:
    """Rebuild `Skill` objects from a stored JSON list, skipping unusable entries."""

    if not isinstance(raw, list):
        return []
    skills: list[Skill] = []
    for item in raw:
        if isinstance(item, Skill):
            skills.append(item)
        elif isinstance(item, dict) and str(item.get("name") or "").strip():
            skills.append(Skill.model_validate(item))
    return skills
