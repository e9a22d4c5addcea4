from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from skillgap.database import get_db
from skillgap.llm.client import OpenRouterClient
from skillgap.models.learning_path import LearningPath
from skillgap.models.learning_resource import LearningResource
from skillgap.models.skill_analysis import SkillAnalysis
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user, get_llm_client
from skillgap.schemas.learning import (
    CatalogCost,
    CatalogDifficulty,
    CatalogResourceType,
    GeneratePathRequest,
    GeneratePathResponse,
    LearningPathRead,
    PathPlan,
    PathRecommendations,
    ProgressUpdate,
    RegeneratePathRequest,
    ResourceRead,
    ResourcesResponse,
)
from skillgap.services.learning_service import (
    gaps_for_recommendations,
    generate_learning_path,
    personalized_recommendations,
    skill_mentioned,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learning-path", tags=["learning-path"])

RECENT_ANALYSES = 3


def _get_owned_path(db: Session, path_id: str, user_id: int) -> LearningPath:
    path = db.query(LearningPath).filter(LearningPath.id == path_id, LearningPath.user_id == user_id).one_or_none()
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Learning path not found")
    return path


def _apply_plan(row: LearningPath, plan: PathPlan) -> None:
    row.resources = [resource.model_dump(mode="json") for resource in plan.resources]
    row.estimated_timeline = plan.estimated_timeline
    row.priority_order = list(plan.priority_order)
    row.learning_strategy = plan.learning_strategy


@router.post("/generate", response_model=GeneratePathResponse, status_code=status.HTTP_201_CREATED)
def generate_path(
    payload: GeneratePathRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> GeneratePathResponse:
    if not payload.skill_gaps:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one skill gap is required")

    plan = generate_learning_path(llm, payload.skill_gaps, payload.preferences)
    row = LearningPath(
        user_id=current_user.id,
        skill_gaps=[gap.model_dump(mode="json") for gap in payload.skill_gaps],
    )
    _apply_plan(row, plan)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "learning_path.generated id=%s gaps=%d resources=%d",
        row.id,
        len(payload.skill_gaps),
        len(plan.resources),
    )
    return GeneratePathResponse(learning_path=LearningPathRead.model_validate(row), ai_recommendations=plan)


@router.get("/", response_model=list[LearningPathRead])
def list_paths(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[LearningPathRead]:
    rows = (
        db.query(LearningPath)
        .filter(LearningPath.user_id == current_user.id)
        .order_by(LearningPath.created_at.desc())
        .all()
    )
    return [LearningPathRead.model_validate(row) for row in rows]


@router.get("/recommendations", response_model=PathRecommendations)
def path_recommendations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PathRecommendations:
    recent = (
        db.query(SkillAnalysis)
        .filter(SkillAnalysis.user_id == current_user.id)
        .order_by(SkillAnalysis.created_at.desc())
        .limit(RECENT_ANALYSES)
        .all()
    )
    return personalized_recommendations([gaps_for_recommendations(row.skill_gaps) for row in recent])


@router.get("/resources/{skill_name}", response_model=ResourcesResponse)
def resources_for_skill(
    skill_name: str,
    difficulty: CatalogDifficulty | None = Query(default=None),
    resource_type: CatalogResourceType | None = Query(default=None, alias="type"),
    cost: CatalogCost | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResourcesResponse:
    query = db.query(LearningResource)
    if difficulty:
        query = query.filter(LearningResource.difficulty == difficulty)
    if resource_type:
        query = query.filter(LearningResource.type == resource_type)
    if cost:
        query = query.filter(LearningResource.cost == cost)
    rows = query.order_by(LearningResource.rating.desc()).all()
    matches = [row for row in rows if skill_mentioned(row.skills, skill_name)]
    return ResourcesResponse(resources=[ResourceRead.model_validate(row) for row in matches])


@router.get("/{path_id}", response_model=LearningPathRead)
def get_path(
    path_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LearningPathRead:
    return LearningPathRead.model_validate(_get_owned_path(db, path_id, current_user.id))


@router.put("/{path_id}/progress", response_model=LearningPathRead)
def update_progress(
    path_id: str,
    payload: ProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LearningPathRead:
    row = _get_owned_path(db, path_id, current_user.id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return LearningPathRead.model_validate(row)


@router.post("/{path_id}/regenerate", response_model=GeneratePathResponse)
def regenerate_path(
    path_id: str,
    payload: RegeneratePathRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> GeneratePathResponse:
    row = _get_owned_path(db, path_id, current_user.id)
    preferences = payload.preferences if payload is not None else None
    plan = generate_learning_path(llm, gaps_for_recommendations(row.skill_gaps), preferences)
    _apply_plan(row, plan)
    db.add(row)
    db.commit()
    db.refresh(row)
    return GeneratePathResponse(learning_path=LearningPathRead.model_validate(row), ai_recommendations=plan)
