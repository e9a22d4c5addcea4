from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillgap.database import get_db
from skillgap.llm.client import OpenRouterClient
from skillgap.models.job_description import JobDescription
from skillgap.models.resume import Resume
from skillgap.models.skill_analysis import SkillAnalysis
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user, get_llm_client
from skillgap.schemas.analysis import (
    AnalysisHistoryResponse,
    AnalysisSummary,
    AnalyzeRequest,
    AnalyzeResponse,
    InsightsResponse,
    SkillAnalysisDetail,
    SkillAnalysisRead,
    SkillInsights,
)
from skillgap.schemas.skills import GapAnalysisResult, Priority
from skillgap.services.analysis_service import generate_skill_insights, run_gap_analysis
from skillgap.services.gap_service import group_by_category, load_skills


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/skill-analysis", tags=["skill-analysis"])


def _get_owned_analysis(db: Session, analysis_id: str, user_id: int) -> SkillAnalysis:
    analysis = (
        db.query(SkillAnalysis)
        .filter(SkillAnalysis.id == analysis_id, SkillAnalysis.user_id == user_id)
        .one_or_none()
    )
    if analysis is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return analysis


def _apply_result(row: SkillAnalysis, result: GapAnalysisResult) -> None:
    row.skill_gaps = [gap.model_dump(mode="json") for gap in result.skill_gaps]
    row.overall_gap = result.overall_gap.value
    row.recommended_focus = list(result.recommended_focus)
    row.estimated_time_to_close = result.estimated_time_to_close


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    payload: AnalyzeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> AnalyzeResponse:
    resume_id = str(payload.resume_id)
    job_id = str(payload.job_description_id)

    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == current_user.id).one_or_none()
    if resume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    job = (
        db.query(JobDescription)
        .filter(JobDescription.id == job_id, JobDescription.user_id == current_user.id)
        .one_or_none()
    )
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job description not found")

    current = load_skills(resume.extracted_skills)
    required = load_skills(job.required_skills)
    preferred = load_skills(job.preferred_skills)
    result = run_gap_analysis(llm, current, required, preferred)

    saved: SkillAnalysisRead | None = None
    row = SkillAnalysis(user_id=current_user.id, resume_id=resume_id, job_description_id=job_id)
    _apply_result(row, result)
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
        saved = SkillAnalysisRead.model_validate(row)
    except SQLAlchemyError as exc:
        # The analysis is still returned when it cannot be stored.
        db.rollback()
        logger.error("skill_analysis.save_failed user_id=%s error=%s", current_user.id, exc)

    summary = AnalysisSummary(
        total_current_skills=len(current),
        total_required_skills=len(required),
        total_preferred_skills=len(preferred),
        total_gaps=len(result.skill_gaps),
        critical_gaps=sum(1 for gap in result.skill_gaps if gap.priority == Priority.HIGH),
    )
    logger.info(
        "skill_analysis.completed user_id=%s gaps=%d overall=%s weeks=%d",
        current_user.id,
        summary.total_gaps,
        result.overall_gap.value,
        result.estimated_time_to_close,
    )
    return AnalyzeResponse(analysis=result, saved_analysis=saved, summary=summary)


@router.get("/", response_model=list[SkillAnalysisRead])
def list_analyses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[SkillAnalysisRead]:
    rows = (
        db.query(SkillAnalysis)
        .filter(SkillAnalysis.user_id == current_user.id)
        .order_by(SkillAnalysis.created_at.desc())
        .all()
    )
    return [SkillAnalysisRead.model_validate(row) for row in rows]


@router.get("/history", response_model=AnalysisHistoryResponse)
def analysis_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AnalysisHistoryResponse:
    rows = (
        db.query(SkillAnalysis)
        .filter(SkillAnalysis.user_id == current_user.id)
        .order_by(SkillAnalysis.created_at.desc())
        .all()
    )
    analyses = []
    for row in rows:
        detail = SkillAnalysisDetail.model_validate(row)
        # History only carries titles; skill lists stay on the detail view.
        if detail.resume is not None:
            detail.resume.extracted_skills = None
        if detail.job_description is not None:
            detail.job_description.required_skills = None
            detail.job_description.preferred_skills = None
        analyses.append(detail)
    return AnalysisHistoryResponse(analyses=analyses)


@router.get("/insights", response_model=InsightsResponse)
def skill_insights(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> InsightsResponse:
    resumes = db.query(Resume).filter(Resume.user_id == current_user.id).all()
    skills = [skill for resume in resumes for skill in load_skills(resume.extracted_skills)]
    insights = generate_skill_insights(llm, skills)
    return InsightsResponse(insights=SkillInsights(**insights), skills_by_category=group_by_category(skills))


@router.get("/{analysis_id}", response_model=SkillAnalysisDetail)
def get_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SkillAnalysisDetail:
    return SkillAnalysisDetail.model_validate(_get_owned_analysis(db, analysis_id, current_user.id))


@router.post("/{analysis_id}/reanalyze", response_model=SkillAnalysisRead)
def reanalyze(
    analysis_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> SkillAnalysisRead:
    row = _get_owned_analysis(db, analysis_id, current_user.id)
    if row.resume is None or row.job_description is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis inputs no longer exist")

    result = run_gap_analysis(
        llm,
        load_skills(row.resume.extracted_skills),
        load_skills(row.job_description.required_skills),
        load_skills(row.job_description.preferred_skills),
    )
    _apply_result(row, result)
    db.add(row)
    db.commit()
    db.refresh(row)
    return SkillAnalysisRead.model_validate(row)
