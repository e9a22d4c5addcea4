import json

import pytest

from skillgap.llm import prompts
from skillgap.llm.client import LLMConfig, LLMError, LLMResponseError, LLMUnavailableError, OpenRouterClient, parse_json_content
from skillgap.schemas.skills import GapSize, OverallGap, Priority, Skill, SkillCategory, SkillLevel
from skillgap.services.analysis_service import (
    DEFAULT_INSIGHTS,
    generate_skill_insights,
    parse_ai_gap_analysis,
    run_gap_analysis,
)
from skillgap.services.skill_extractor import (
    extract_job_skills,
    extract_resource_skills,
    extract_resume_skills,
    skills_from_payload,
)


def test_parse_json_content_strips_code_fences() -> None:
    assert parse_json_content('```json\n[{"name": "Python"}]\n```') == [{"name": "Python"}]
    assert parse_json_content('{"a": 1}') == {"a": 1}


@pytest.mark.parametrize("content", [None, "", "   ", "not json"])
def test_parse_json_content_rejects_bad_replies(content) -> None:
    with pytest.raises(LLMResponseError):
        parse_json_content(content)


def test_client_without_api_key_is_unavailable() -> None:
    llm = OpenRouterClient(LLMConfig(api_key=None, base_url="https://openrouter.ai/api/v1"))
    assert llm.available is False
    with pytest.raises(LLMUnavailableError):
        llm.complete_json(llm.models.gap_analysis, "system", "user")


def test_render_replaces_every_placeholder() -> None:
    rendered = prompts.render(prompts.GAP_ANALYSIS, currentSkills="[1]", requiredSkills="[2]")
    assert "Current skills: [1]" in rendered
    assert "Required skills: [2]" in rendered
    assert "{currentSkills}" not in rendered
    # Literal JSON braces survive rendering.
    assert '"skillGaps"' in rendered


def test_skills_from_payload_coerces_fields() -> None:
    skills = skills_from_payload(
        [
            {"name": " Python ", "category": "programming languages", "level": "EXPERT", "confidence": 1.7},
            {"name": "Mystery", "category": "Alchemy", "level": "wizard"},
            {"name": ""},
            "junk",
        ],
        confidence_default=0.8,
    )
    assert [s.name for s in skills] == ["Python", "Mystery"]
    assert skills[0].category == SkillCategory.PROGRAMMING_LANGUAGES
    assert skills[0].level == SkillLevel.EXPERT
    assert skills[0].confidence == 1.0
    assert skills[1].category == SkillCategory.OTHER
    assert skills[1].level == SkillLevel.BEGINNER
    assert skills[1].confidence == 0.8


def test_skills_from_payload_requires_a_list() -> None:
    with pytest.raises(LLMResponseError):
        skills_from_payload({"skills": []})


def test_extract_resume_skills_falls_back_to_empty(fake_llm) -> None:
    assert extract_resume_skills(fake_llm, "Python developer") == []
    fake_llm.reply(prompts.RESUME_SKILLS_SYSTEM, {"not": "a list"})
    assert extract_resume_skills(fake_llm, "Python developer") == []


def test_extract_resume_skills_uses_model_reply(fake_llm) -> None:
    fake_llm.reply(prompts.RESUME_SKILLS_SYSTEM, [{"name": "Python", "level": "advanced"}])
    skills = extract_resume_skills(fake_llm, "Python developer")
    assert [s.name for s in skills] == ["Python"]
    assert "Python developer" in fake_llm.calls[-1]["user"]
    assert fake_llm.calls[-1]["model"] == fake_llm.models.skill_extraction


def test_extract_job_skills_requires_both_lists(fake_llm) -> None:
    fake_llm.reply(prompts.JOB_SKILLS_SYSTEM, {"required": [{"name": "Go"}]})
    result = extract_job_skills(fake_llm, "We need Go")
    assert result.required == [] and result.preferred == []

    fake_llm.reply(prompts.JOB_SKILLS_SYSTEM, {"required": [{"name": "Go"}], "preferred": [{"name": "K8s"}]})
    result = extract_job_skills(fake_llm, "We need Go")
    assert [s.name for s in result.required] == ["Go"]
    assert [s.name for s in result.preferred] == ["K8s"]


def test_extract_resource_skills(fake_llm) -> None:
    fake_llm.reply(prompts.RESOURCE_SKILLS_SYSTEM, ["React", " ", "Redux"])
    assert extract_resource_skills(fake_llm, "React course", "Learn React", "course") == ["React", "Redux"]
    fake_llm.reply(prompts.RESOURCE_SKILLS_SYSTEM, ["React", 3])
    assert extract_resource_skills(fake_llm, "React course", "Learn React", "course") == []


def test_parse_ai_gap_analysis_accepts_camel_case() -> None:
    ai = parse_ai_gap_analysis(
        {
            "skillGaps": [
                {"skill": "Docker", "currentLevel": "beginner", "requiredLevel": "advanced", "gap": "medium", "priority": "high"},
                {"skill": {"name": "Go"}, "gap": "huge"},
                {"skill": ""},
            ],
            "overallGap": "LARGE",
            "recommendedFocus": ["Docker", ""],
            "estimatedTimeToClose": 9,
        }
    )
    assert [g.skill.name for g in ai.skill_gaps] == ["Docker", "Go"]
    docker, go = ai.skill_gaps
    assert docker.required_level == SkillLevel.ADVANCED
    assert go.required_level == SkillLevel.INTERMEDIATE
    assert go.gap == GapSize.MEDIUM
    assert go.priority == Priority.MEDIUM
    assert ai.overall_gap == OverallGap.LARGE
    assert ai.recommended_focus == ["Docker"]
    assert ai.estimated_time_to_close == 9


def test_parse_ai_gap_analysis_leaves_missing_fields_unset() -> None:
    ai = parse_ai_gap_analysis({"estimatedTimeToClose": -3})
    assert ai.skill_gaps == []
    assert ai.overall_gap is None
    assert ai.recommended_focus == []
    assert ai.estimated_time_to_close is None


def test_run_gap_analysis_falls_back_when_model_fails(fake_llm) -> None:
    fake_llm.reply(prompts.GAP_ANALYSIS_SYSTEM, LLMError("timeout"))
    current = [Skill(name="Python", level="intermediate")]
    required = [Skill(name="Python", level="expert"), Skill(name="Docker", level="beginner")]
    result = run_gap_analysis(fake_llm, current, required, [])
    assert [g.skill.name for g in result.skill_gaps] == ["Python", "Docker"]
    assert result.overall_gap == OverallGap.LARGE
    assert result.estimated_time_to_close == 11


def test_run_gap_analysis_blends_partial_reply(fake_llm) -> None:
    fake_llm.reply(prompts.GAP_ANALYSIS_SYSTEM, {"overallGap": "small", "skillGaps": []})
    result = run_gap_analysis(fake_llm, [], [Skill(name="Rust", level="advanced")], [])
    assert [g.skill.name for g in result.skill_gaps] == ["Rust"]
    assert result.overall_gap == OverallGap.SMALL
    assert result.recommended_focus == ["Rust"]
    assert result.estimated_time_to_close == 12


@pytest.mark.parametrize("raw", ['{"skillGaps": [], "estimatedTimeToClose": Infinity}', '{"estimatedTimeToClose": 1e999}', '{"estimatedTimeToClose": NaN}'])
def test_run_gap_analysis_ignores_non_finite_weeks(fake_llm, raw) -> None:
    fake_llm.reply(prompts.GAP_ANALYSIS_SYSTEM, json.loads(raw))
    current = [Skill(name="Python", level="intermediate")]
    required = [Skill(name="Python", level="expert"), Skill(name="Docker", level="beginner")]
    result = run_gap_analysis(fake_llm, current, required, [])
    assert result.estimated_time_to_close == 11
    assert result.overall_gap == OverallGap.LARGE


def test_parse_ai_gap_analysis_accepts_large_integer_weeks() -> None:
    ai = parse_ai_gap_analysis(json.loads('{"estimatedTimeToClose": 1' + "0" * 400 + "}"))
    assert ai.estimated_time_to_close == 10**400


def test_generate_skill_insights(fake_llm) -> None:
    assert generate_skill_insights(fake_llm, []) == DEFAULT_INSIGHTS

    fake_llm.reply(
        prompts.INSIGHTS_SYSTEM,
        {"strengths": ["Python"], "marketDemand": "HIGH", "growthAreas": ["Cloud"], "weaknesses": "none"},
    )
    insights = generate_skill_insights(fake_llm, [Skill(name="Python")])
    assert insights["strengths"] == ["Python"]
    assert insights["market_demand"] == "high"
    assert insights["growth_areas"] == ["Cloud"]
    assert insights["weaknesses"] == []
