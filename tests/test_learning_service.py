import json

import pytest

from skillgap.llm import prompts
from skillgap.schemas.skills import GapSize, Priority, Skill, SkillGap
from skillgap.services.learning_service import (
    DEFAULT_STRATEGY,
    DEFAULT_TIMELINE_WEEKS,
    fallback_learning_path,
    gaps_for_recommendations,
    generate_learning_path,
    missing_skills,
    personalized_recommendations,
    skill_mentioned,
    skills_overlap,
)


def make_gap(skill_id: str, name: str, size: str, priority: str, current: str = "beginner") -> SkillGap:
    return SkillGap(
        skill=Skill(id=skill_id, name=name),
        current_level=current,
        required_level="expert",
        gap=size,
        priority=priority,
    )


def test_fallback_learning_path() -> None:
    gaps = [
        make_gap("s1", "Machine Learning", "small", "low"),
        make_gap("s2", "Docker", "large", "high", current="expert"),
        make_gap("s3", "SQL", "medium", "medium", current="intermediate"),
        make_gap("s4", "Go", "large", "high"),
    ]
    plan = fallback_learning_path(gaps)

    assert plan.priority_order == ["s2", "s4", "s3", "s1"]
    assert plan.estimated_timeline == 12
    assert plan.learning_strategy == DEFAULT_STRATEGY

    titles = [r.title for r in plan.resources]
    assert titles == ["Learn Machine Learning", "Learn Docker", "Learn SQL", "Learn Go"]
    ml, docker, sql, _ = plan.resources
    assert ml.url == "https://example.com/learn/machine-learning"
    assert (ml.estimated_hours, docker.estimated_hours, sql.estimated_hours) == (6, 20, 12)
    assert docker.difficulty == "advanced"
    assert sql.difficulty == "intermediate"
    assert all(r.type == "course" and r.cost == "free" for r in plan.resources)
    assert len({r.id for r in plan.resources}) == 4


def test_generate_learning_path_uses_fallback_when_model_is_unavailable(fake_llm) -> None:
    gaps = [make_gap("s1", "Rust", "medium", "high")]
    plan = generate_learning_path(fake_llm, gaps)
    assert plan.priority_order == ["s1"]
    assert plan.estimated_timeline == 3


def test_generate_learning_path_applies_defaults_to_model_reply(fake_llm) -> None:
    fake_llm.reply(
        prompts.LEARNING_PATH_SYSTEM,
        {
            "resources": [
                {"title": "Rust Book", "type": "book", "url": "https://doc.rust-lang.org/book/", "estimatedHours": 30},
                {"title": "Mystery", "type": "podcast", "difficulty": "ninja", "cost": "priceless"},
                "junk",
            ],
            "learningStrategy": "Read, then build",
        },
    )
    gaps = [make_gap("s1", "Rust", "medium", "high"), make_gap("s2", "Go", "small", "low")]
    plan = generate_learning_path(fake_llm, gaps, {"budget": "free"})

    book, mystery = plan.resources
    assert (book.type, book.estimated_hours, book.difficulty, book.cost) == ("book", 30, "beginner", "free")
    assert (mystery.type, mystery.difficulty, mystery.cost, mystery.estimated_hours) == ("course", "beginner", "free", 10)
    assert plan.estimated_timeline == DEFAULT_TIMELINE_WEEKS
    assert plan.priority_order == ["s1", "s2"]
    assert plan.learning_strategy == "Read, then build"
    assert '"budget": "free"' in fake_llm.calls[-1]["user"]


def test_personalized_recommendations_without_history() -> None:
    recs = personalized_recommendations([])
    assert recs.next_steps == ["Upload your resume to get started"]
    assert len(recs.trending_skills) == 4
    assert recs.skill_focus == []


def test_personalized_recommendations_from_recent_gaps() -> None:
    recent = [
        [make_gap("a", "Docker", "large", "high"), make_gap("b", "SQL", "small", "low")],
        [make_gap("c", "Go", "medium", "high"), make_gap("d", "K8s", "large", "high"), make_gap("e", "AWS", "large", "high")],
    ]
    recs = personalized_recommendations(recent)
    assert recs.skill_focus == ["Docker", "Go", "K8s"]
    assert recs.next_steps[0] == "Focus on improving Docker"


def test_personalized_recommendations_without_high_priority_gaps() -> None:
    recs = personalized_recommendations([[make_gap("b", "SQL", "small", "low")]])
    assert recs.next_steps == ["Great job! Consider learning new technologies to stay competitive"]


def test_gaps_for_recommendations_reads_stored_json() -> None:
    stored = [make_gap("a", "Docker", "large", "high").model_dump(mode="json"), "junk"]
    gaps = gaps_for_recommendations(stored)
    assert [g.skill.name for g in gaps] == ["Docker"]
    assert gaps[0].gap == GapSize.LARGE and gaps[0].priority == Priority.HIGH
    assert gaps_for_recommendations(None) == []


def test_catalog_matching_helpers() -> None:
    assert skills_overlap(["React", "Redux"], ["redux"])
    assert not skills_overlap(["React"], ["Vue"])
    assert not skills_overlap(None, ["React"])
    assert skill_mentioned(["JavaScript"], "script")
    assert not skill_mentioned(["Go"], "Rust")
    assert missing_skills(["python", "SQL"], ["Python", "Docker", "sql"]) == ["Docker"]


@pytest.mark.parametrize("raw", ['{"estimatedTimeline": 1e999}', '{"estimatedTimeline": -Infinity}', '{"estimatedTimeline": NaN}'])
def test_generate_learning_path_ignores_non_finite_timeline(fake_llm, raw) -> None:
    fake_llm.reply(prompts.LEARNING_PATH_SYSTEM, json.loads(raw))
    plan = generate_learning_path(fake_llm, [make_gap("s1", "Rust", "medium", "high")])
    assert plan.estimated_timeline == DEFAULT_TIMELINE_WEEKS == 12
    assert plan.priority_order == ["s1"]


def test_generate_learning_path_ignores_infinite_resource_hours(fake_llm) -> None:
    fake_llm.reply(
        prompts.LEARNING_PATH_SYSTEM,
        json.loads('{"resources": [{"title": "Rust Book", "estimatedHours": Infinity}], "estimatedTimeline": 4}'),
    )
    plan = generate_learning_path(fake_llm, [make_gap("s1", "Rust", "medium", "high")])
    assert plan.resources[0].estimated_hours == 10
    assert plan.estimated_timeline == 4
