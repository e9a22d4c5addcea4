from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from skillgap.database import get_db
from skillgap.llm.client import OpenRouterClient
from skillgap.models.job_description import JobDescription
from skillgap.models.resume import Resume
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user, get_llm_client
from skillgap.schemas.job_description import (
    JobDescriptionAnalyzeRequest,
    JobDescriptionCreate,
    JobDescriptionRead,
    JobDescriptionResponse,
    SkillComparisonCounts,
    SkillComparisonResponse,
)
from skillgap.schemas.skills import ExtractedJobSkills
from skillgap.services.gap_service import load_skills
from skillgap.services.skill_extractor import extract_job_skills


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-description", tags=["job-description"])


def _get_owned_job(db: Session, job_id: str, user_id: int) -> JobDescription:
    job = (
        db.query(JobDescription)
        .filter(JobDescription.id == job_id, JobDescription.user_id == user_id)
        .one_or_none()
    )
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job description not found")
    return job


def _store_skills(job: JobDescription, skills: ExtractedJobSkills) -> None:
    job.required_skills = [skill.model_dump(mode="json") for skill in skills.required]
    job.preferred_skills = [skill.model_dump(mode="json") for skill in skills.preferred]


@router.post("/", response_model=JobDescriptionResponse, status_code=status.HTTP_201_CREATED)
def create_job_description(
    payload: JobDescriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> JobDescriptionResponse:
    skills = extract_job_skills(llm, payload.description)
    job = JobDescription(
        user_id=current_user.id,
        title=payload.title,
        company=payload.company,
        description=payload.description,
    )
    _store_skills(job, skills)
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info(
        "job_description.created id=%s required=%d preferred=%d",
        job.id,
        len(skills.required),
        len(skills.preferred),
    )
    return JobDescriptionResponse(job_description=JobDescriptionRead.model_validate(job), extracted_skills=skills)


@router.get("/", response_model=list[JobDescriptionRead])
def list_job_descriptions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[JobDescriptionRead]:
    rows = (
        db.query(JobDescription)
        .filter(JobDescription.user_id == current_user.id)
        .order_by(JobDescription.created_at.desc())
        .all()
    )
    return [JobDescriptionRead.model_validate(row) for row in rows]


@router.post("/analyze", response_model=ExtractedJobSkills)
def analyze_job_description(
    payload: JobDescriptionAnalyzeRequest,
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> ExtractedJobSkills:
    """Extract skills from a description without saving anything."""
    return extract_job_skills(llm, payload.description)


@router.get("/{job_id}", response_model=JobDescriptionRead)
def get_job_description(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobDescriptionRead:
    return JobDescriptionRead.model_validate(_get_owned_job(db, job_id, current_user.id))


@router.put("/{job_id}", response_model=JobDescriptionResponse)
def update_job_description(
    job_id: str,
    payload: JobDescriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> JobDescriptionResponse:
    job = _get_owned_job(db, job_id, current_user.id)
    skills = extract_job_skills(llm, payload.description)
    job.title = payload.title
    job.company = payload.company
    job.description = payload.description
    _store_skills(job, skills)
    db.add(job)
    db.commit()
    db.refresh(job)
    return JobDescriptionResponse(job_description=JobDescriptionRead.model_validate(job), extracted_skills=skills)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job_description(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    job = _get_owned_job(db, job_id, current_user.id)
    db.delete(job)
    db.commit()
    logger.info("job_description.deleted id=%s user_id=%s", job_id, current_user.id)


@router.post("/{job_id}/reanalyze", response_model=JobDescriptionResponse)
def reanalyze_job_description(
    job_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> JobDescriptionResponse:
    job = _get_owned_job(db, job_id, current_user.id)
    skills = extract_job_skills(llm, job.description)
    _store_skills(job, skills)
    db.add(job)
    db.commit()
    db.refresh(job)
    return JobDescriptionResponse(job_description=JobDescriptionRead.model_validate(job), extracted_skills=skills)


@router.get("/{job_id}/compare/{resume_id}", response_model=SkillComparisonResponse)
def compare_with_resume(
    job_id: str,
    resume_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SkillComparisonResponse:
    job = _get_owned_job(db, job_id, current_user.id)
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == current_user.id).one_or_none()
    if resume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")

    current = load_skills(resume.extracted_skills)
    targets = load_skills(job.required_skills) + load_skills(job.preferred_skills)
    target_names = {skill.name.lower() for skill in targets}
    matching = [skill for skill in current if skill.name.lower() in target_names]

    return SkillComparisonResponse(
        current_skills=current,
        required_skills=targets,
        comparison=SkillComparisonCounts(
            total_required=len(targets),
            total_current=len(current),
            matching_skills=matching,
        ),
    )
