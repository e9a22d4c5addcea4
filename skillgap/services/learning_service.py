from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Iterable, Sequence
from uuid import uuid4

from skillgap.llm import prompts
from skillgap.llm.client import LLMError, LLMResponseError, OpenRouterClient
from skillgap.schemas.learning import PathPlan, PathRecommendations, PathResource
from skillgap.schemas.skills import GapSize, Priority, SkillGap, SkillLevel


logger = logging.getLogger(__name__)

DEFAULT_TIMELINE_WEEKS = 12
WEEKS_PER_GAP = 3
DEFAULT_STRATEGY = "Focus on high-priority skills first, then build foundational knowledge"

_FALLBACK_HOURS = {GapSize.LARGE: 20, GapSize.MEDIUM: 12, GapSize.SMALL: 6, GapSize.NONE: 6}
_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

_PATH_TYPES = {"course", "book", "video", "article", "project"}
_PATH_DIFFICULTIES = {"beginner", "intermediate", "advanced"}
_PATH_COSTS = {"free", "paid", "freemium"}

TRENDING_SKILLS = ["JavaScript", "Python", "React", "AWS", "Docker", "Kubernetes"]
LEARNING_TIPS = [
    "Practice with real projects",
    "Join online communities",
    "Follow industry leaders",
    "Set specific learning goals",
]

_SLUG_RE = re.compile(r"\s+")


def _resource_id() -> str:
    return f"resource_{uuid4().hex[:12]}"


def _slug(name: str) -> str:
    return _SLUG_RE.sub("-", name.strip().lower())


def _difficulty_for(level: SkillLevel) -> str:
    return "advanced" if level == SkillLevel.EXPERT else level.value


def fallback_learning_path(skill_gaps: Sequence[SkillGap]) -> PathPlan:
    """Deterministic plan: one free course per gap, highest priority first."""

    ordered = sorted(skill_gaps, key=lambda gap: _PRIORITY_RANK[gap.priority], reverse=True)
    resources = [
        PathResource(
            id=_resource_id(),
            title=f"Learn {gap.skill.name}",
            type="course",
            url=f"https://example.com/learn/{_slug(gap.skill.name)}",
            difficulty=_difficulty_for(gap.current_level),
            estimated_hours=_FALLBACK_HOURS[gap.gap],
            cost="free",
        )
        for gap in skill_gaps
    ]
    return PathPlan(
        resources=resources,
        estimated_timeline=math.ceil(len(skill_gaps) * WEEKS_PER_GAP),
        priority_order=[gap.skill.id for gap in ordered],
        learning_strategy=DEFAULT_STRATEGY,
    )


def _choice(value: Any, allowed: set[str], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if (isinstance(value, float) and not math.isfinite(value)) or value <= 0:
        return default
    return int(round(value))


def parse_learning_path(payload: Any, skill_gaps: Sequence[SkillGap]) -> PathPlan:
    if not isinstance(payload, dict):
        raise LLMResponseError("Learning path response is not an object")

    raw_resources = payload.get("resources")
    resources: list[PathResource] = []
    for item in raw_resources if isinstance(raw_resources, list) else []:
        if not isinstance(item, dict):
            continue
        resources.append(
            PathResource(
                id=_resource_id(),
                title=str(item.get("title") or ""),
                type=_choice(item.get("type"), _PATH_TYPES, "course"),
                url=str(item.get("url") or ""),
                difficulty=_choice(item.get("difficulty"), _PATH_DIFFICULTIES, "beginner"),
                estimated_hours=_positive_int(item.get("estimatedHours", item.get("estimated_hours")), 10),
                cost=_choice(item.get("cost"), _PATH_COSTS, "free"),
            )
        )

    order = payload.get("priorityOrder", payload.get("priority_order"))
    if isinstance(order, list) and order:
        priority_order = [str(v) for v in order if str(v).strip()]
    else:
        priority_order = [gap.skill.id for gap in skill_gaps]

    timeline = payload.get("estimatedTimeline", payload.get("estimated_timeline"))
    strategy = payload.get("learningStrategy", payload.get("learning_strategy"))
    return PathPlan(
        resources=resources,
        estimated_timeline=_positive_int(timeline, DEFAULT_TIMELINE_WEEKS),
        priority_order=priority_order,
        learning_strategy=strategy if isinstance(strategy, str) else "",
    )


def generate_learning_path(
    llm: OpenRouterClient, skill_gaps: Sequence[SkillGap], preferences: dict[str, Any] | None = None
) -> PathPlan:
    prompt = prompts.render(
        prompts.LEARNING_PATH,
        preferences=json.dumps(preferences or {}, ensure_ascii=False),
        skillGaps=json.dumps([gap.model_dump(mode="json") for gap in skill_gaps], ensure_ascii=False),
    )
    try:
        payload = llm.complete_json(llm.models.learning_path, prompts.LEARNING_PATH_SYSTEM, prompt)
        return parse_learning_path(payload, skill_gaps)
    except LLMError as exc:
        logger.warning("learning.path_failed using fallback plan error=%s", exc)
        return fallback_learning_path(skill_gaps)


def personalized_recommendations(recent_gap_lists: Sequence[Sequence[SkillGap]]) -> PathRecommendations:
    if not recent_gap_lists:
        return PathRecommendations(
            next_steps=["Upload your resume to get started"],
            trending_skills=TRENDING_SKILLS[:4],
            learning_tips=["Focus on one skill at a time", "Build projects to practice"],
        )

    all_gaps = [gap for gaps in recent_gap_lists for gap in gaps]
    high_priority = [gap.skill.name for gap in all_gaps if gap.priority == Priority.HIGH][:3]
    next_steps = [f"Focus on improving {name}" for name in high_priority]
    if not next_steps:
        next_steps.append("Great job! Consider learning new technologies to stay competitive")

    return PathRecommendations(
        next_steps=next_steps,
        trending_skills=list(TRENDING_SKILLS),
        learning_tips=list(LEARNING_TIPS),
        skill_focus=high_priority,
    )


# --- catalog matching -----------------------------------------------------


def _lowered(values: Iterable[Any]) -> set[str]:
    return {str(v).strip().lower() for v in values if str(v).strip()}


def skills_overlap(resource_skills: Any, wanted: Iterable[str]) -> bool:
    if not isinstance(resource_skills, list):
        return False
    return bool(_lowered(resource_skills) & _lowered(wanted))


def skill_mentioned(resource_skills: Any, name: str) -> bool:
    """Substring match of `name` against any of the resource's skill names."""

    if not isinstance(resource_skills, list):
        return False
    needle = name.strip().lower()
    return any(needle in str(skill).lower() for skill in resource_skills)


def missing_skills(current: Sequence[str], targets: Sequence[str]) -> list[str]:
    have = _lowered(current)
    return [skill for skill in targets if skill.strip().lower() not in have]


def gaps_for_recommendations(raw: Any) -> list[SkillGap]:
    if not isinstance(raw, list):
        return []
    return [SkillGap.model_validate(item) for item in raw if isinstance(item, dict)]
