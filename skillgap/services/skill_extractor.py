# skill_extractor.py
import logging
from typing import Any

from pydantic import ValidationError

from skillgap.llm import prompts
from skillgap.llm.client import LLMError, LLMResponseError, OpenRouterClient
from skillgap.schemas.skills import ExtractedJobSkills, Skill


logger = logging.getLogger(__name__)


def _clamp_confidence(value: Any, default: float | None) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return max(0.0, min(1.0, float(value)))


def _to_skill(item: Any, *, confidence_default: float | None = None) -> Skill | None:
    if not isinstance(item, dict):
        return None
    name = str(item.get("name") or "").strip()
    if not name:
        return None
    try:
        return Skill(
            name=name,
            category=item.get("category"),
            level=item.get("level"),
            confidence=_clamp_confidence(item.get("confidence"), confidence_default),
        )
    except ValidationError:
        logger.warning("skill_extractor.skip_invalid_skill name=%s", name)
        return None


def skills_from_payload(raw: Any, *, confidence_default: float | None = None) -> list[Skill]:
    if not isinstance(raw, list):
        raise LLMResponseError("AI response is not an array")
    skills: list[Skill] = []
    for item in raw:
        skill = _to_skill(item, confidence_default=confidence_default)
        if skill is not None:
            skills.append(skill)
    return skills


def extract_resume_skills(llm: OpenRouterClient, resume_text: str) -> list[Skill]:
    """Skills found in resume text; an empty list when the model is unavailable or misbehaves."""

    prompt = prompts.render(prompts.RESUME_SKILLS, categories=prompts.CATEGORY_HINT, resumeText=resume_text)
    try:
        payload = llm.complete_json(llm.models.skill_extraction, prompts.RESUME_SKILLS_SYSTEM, prompt)
        return skills_from_payload(payload, confidence_default=0.8)
    except LLMError as exc:
        logger.warning("skill_extractor.resume_failed error=%s", exc)
        return []


def extract_job_skills(llm: OpenRouterClient, description: str) -> ExtractedJobSkills:
    prompt = prompts.render(prompts.JOB_SKILLS, categories=prompts.CATEGORY_HINT, description=description)
    try:
        payload = llm.complete_json(llm.models.skill_extraction, prompts.JOB_SKILLS_SYSTEM, prompt)
        if not isinstance(payload, dict) or "required" not in payload or "preferred" not in payload:
            raise LLMResponseError("Invalid skills format")
        return ExtractedJobSkills(
            required=skills_from_payload(payload["required"]),
            preferred=skills_from_payload(payload["preferred"]),
        )
    except LLMError as exc:
        logger.warning("skill_extractor.job_failed error=%s", exc)
        return ExtractedJobSkills()


def extract_resource_skills(llm: OpenRouterClient, title: str, description: str, resource_type: str) -> list[str]:
    prompt = prompts.render(prompts.RESOURCE_SKILLS, title=title, type=resource_type, description=description)
    try:
        payload = llm.complete_json(llm.models.skill_extraction, prompts.RESOURCE_SKILLS_SYSTEM, prompt)
        if not isinstance(payload, list) or not all(isinstance(s, str) for s in payload):
            raise LLMResponseError("Invalid skills format from AI")
        return [s.strip() for s in payload if s.strip()]
    except LLMError as exc:
        logger.warning("skill_extractor.resource_failed error=%s", exc)
        return []
