from __future__ import annotations

import json
import logging
import math
from typing import Any, Sequence

from skillgap.llm import prompts
from skillgap.llm.client import LLMError, LLMResponseError, OpenRouterClient
from skillgap.schemas.skills import (
    GapAnalysisResult,
    GapSize,
    OverallGap,
    Priority,
    Skill,
    SkillCategory,
    SkillGap,
    SkillLevel,
)
from skillgap.services.gap_service import AIGapAnalysis, blend_analysis, compute_gaps


logger = logging.getLogger(__name__)


DEFAULT_INSIGHTS: dict[str, Any] = {
    "strengths": [],
    "weaknesses": [],
    "recommendations": [],
    "market_demand": "medium",
    "growth_areas": [],
}


def _skills_json(skills: Sequence[Skill]) -> str:
    return json.dumps([skill.model_dump(mode="json", exclude_none=True) for skill in skills], ensure_ascii=False)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _gap_from_payload(item: Any) -> SkillGap | None:
    if not isinstance(item, dict):
        return None
    raw_skill = item.get("skill")
    name = raw_skill.get("name") if isinstance(raw_skill, dict) else raw_skill
    name = str(name or "").strip()
    if not name:
        return None

    current = _pick(item, "currentLevel", "current_level")
    required = _pick(item, "requiredLevel", "required_level")
    return SkillGap(
        skill=Skill(id=name, name=name, category=SkillCategory.OTHER, level=SkillLevel.coerce(current)),
        current_level=SkillLevel.coerce(current),
        required_level=SkillLevel.coerce(required) if required is not None else SkillLevel.INTERMEDIATE,
        gap=GapSize.coerce(item.get("gap")),
        priority=Priority.coerce(item.get("priority")),
    )


def parse_ai_gap_analysis(payload: Any) -> AIGapAnalysis:
    """Turn the model's JSON into an `AIGapAnalysis`, leaving missing fields unset."""

    if not isinstance(payload, dict):
        raise LLMResponseError("Gap analysis response is not an object")

    raw_gaps = _pick(payload, "skillGaps", "skill_gaps")
    gaps: list[SkillGap] = []
    if isinstance(raw_gaps, list):
        for item in raw_gaps:
            gap = _gap_from_payload(item)
            if gap is not None:
                gaps.append(gap)

    overall_raw = _pick(payload, "overallGap", "overall_gap")
    overall = OverallGap.coerce(overall_raw) if overall_raw is not None else None

    focus_raw = _pick(payload, "recommendedFocus", "recommended_focus")
    focus = [str(name).strip() for name in focus_raw if str(name).strip()] if isinstance(focus_raw, list) else []

    weeks_raw = _pick(payload, "estimatedTimeToClose", "estimated_time_to_close")
    weeks: int | None = None
    if (
        isinstance(weeks_raw, (int, float))
        and not isinstance(weeks_raw, bool)
        and not (isinstance(weeks_raw, float) and not math.isfinite(weeks_raw))
        and weeks_raw > 0
    ):
        weeks = int(round(weeks_raw))

    return AIGapAnalysis(skill_gaps=gaps, overall_gap=overall, recommended_focus=focus, estimated_time_to_close=weeks)


def request_ai_gap_analysis(
    llm: OpenRouterClient, current_skills: Sequence[Skill], target_skills: Sequence[Skill]
) -> AIGapAnalysis | None:
    """Ask the model for a gap analysis; `None` on any failure."""

    prompt = prompts.render(
        prompts.GAP_ANALYSIS,
        currentSkills=_skills_json(current_skills),
        requiredSkills=_skills_json(target_skills),
    )
    try:
        payload = llm.complete_json(llm.models.gap_analysis, prompts.GAP_ANALYSIS_SYSTEM, prompt)
        return parse_ai_gap_analysis(payload)
    except LLMError as exc:
        logger.warning("analysis.ai_gap_failed falling back to manual scoring error=%s", exc)
        return None


def run_gap_analysis(
    llm: OpenRouterClient,
    current_skills: Sequence[Skill],
    required_skills: Sequence[Skill],
    preferred_skills: Sequence[Skill],
) -> GapAnalysisResult:
    ai = request_ai_gap_analysis(llm, current_skills, [*required_skills, *preferred_skills])
    manual_gaps = compute_gaps(current_skills, required_skills, preferred_skills)
    return blend_analysis(ai, manual_gaps)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def generate_skill_insights(llm: OpenRouterClient, skills: Sequence[Skill]) -> dict[str, Any]:
    prompt = prompts.render(prompts.INSIGHTS, skills=_skills_json(skills))
    try:
        payload = llm.complete_json(llm.models.gap_analysis, prompts.INSIGHTS_SYSTEM, prompt)
        if not isinstance(payload, dict):
            raise LLMResponseError("Insights response is not an object")
    except LLMError as exc:
        logger.warning("analysis.insights_failed error=%s", exc)
        return dict(DEFAULT_INSIGHTS)

    demand = str(_pick(payload, "marketDemand", "market_demand") or "medium").lower()
    return {
        "strengths": _string_list(payload.get("strengths")),
        "weaknesses": _string_list(payload.get("weaknesses")),
        "recommendations": _string_list(payload.get("recommendations")),
        "market_demand": demand if demand in {"high", "medium", "low"} else "medium",
        "growth_areas": _string_list(_pick(payload, "growthAreas", "growth_areas")),
    }
