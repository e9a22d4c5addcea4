from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillgap.database import get_db
from skillgap.llm.client import OpenRouterClient
from skillgap.models.learning_resource import LearningResource
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user, get_llm_client
from skillgap.schemas.learning import (
    BySkillsRequest,
    BySkillsResponse,
    CatalogCost,
    CatalogDifficulty,
    CatalogResourceType,
    Pagination,
    ResourceAnalyzeRequest,
    ResourceAnalyzeResponse,
    ResourceCreate,
    ResourceCreateResponse,
    ResourceListResponse,
    ResourceRead,
    ResourceRecommendationRequest,
    ResourceRecommendationResponse,
    ResourceUpdate,
)
from skillgap.services.learning_service import missing_skills, skills_overlap
from skillgap.services.skill_extractor import extract_resource_skills


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learning-resources", tags=["learning-resources"])


def _get_resource(db: Session, resource_id: str) -> LearningResource:
    resource = db.query(LearningResource).filter(LearningResource.id == resource_id).one_or_none()
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Learning resource not found")
    return resource


@router.post("/", response_model=ResourceCreateResponse, status_code=status.HTTP_201_CREATED)
def create_resource(
    payload: ResourceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> ResourceCreateResponse:
    skills = [s for s in payload.skills if s]
    extracted: list[str] | None = None
    if not skills and payload.description:
        extracted = extract_resource_skills(llm, payload.title, payload.description, payload.type) or None
        skills = extracted or []

    resource = LearningResource(
        title=payload.title,
        type=payload.type,
        url=str(payload.url),
        difficulty=payload.difficulty,
        estimated_hours=payload.estimated_hours,
        cost=payload.cost,
        skills=skills,
        rating=payload.rating,
        description=payload.description,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("learning_resource.created id=%s by user_id=%s", resource.id, current_user.id)
    return ResourceCreateResponse(learning_resource=ResourceRead.model_validate(resource), extracted_skills=extracted)


@router.get("/", response_model=ResourceListResponse)
def list_resources(
    resource_type: CatalogResourceType | None = Query(default=None, alias="type"),
    difficulty: CatalogDifficulty | None = Query(default=None),
    cost: CatalogCost | None = Query(default=None),
    skill: str | None = Query(default=None),
    min_rating: float | None = Query(default=None, ge=0, le=5),
    max_hours: int | None = Query(default=None, ge=1),
    search: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResourceListResponse:
    query = db.query(LearningResource)
    if resource_type:
        query = query.filter(LearningResource.type == resource_type)
    if difficulty:
        query = query.filter(LearningResource.difficulty == difficulty)
    if cost:
        query = query.filter(LearningResource.cost == cost)
    if min_rating is not None:
        query = query.filter(LearningResource.rating >= min_rating)
    if max_hours is not None:
        query = query.filter(LearningResource.estimated_hours <= max_hours)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(LearningResource.title.ilike(pattern), LearningResource.description.ilike(pattern)))

    rows = query.order_by(LearningResource.created_at.desc()).all()
    if skill:
        # JSON columns differ per backend, so skill containment is checked here.
        rows = [row for row in rows if isinstance(row.skills, list) and skill in row.skills]

    total = len(rows)
    page = rows[offset : offset + limit]
    return ResourceListResponse(
        learning_resources=[ResourceRead.model_validate(row) for row in page],
        pagination=Pagination(total=total, limit=limit, offset=offset, has_more=offset + limit < total),
    )


@router.post("/by-skills", response_model=BySkillsResponse)
def resources_by_skills(
    payload: BySkillsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BySkillsResponse:
    query = db.query(LearningResource)
    if payload.difficulty:
        query = query.filter(LearningResource.difficulty == payload.difficulty)
    rows = query.order_by(LearningResource.rating.desc()).all()
    matches = [row for row in rows if skills_overlap(row.skills, payload.skills)][: payload.limit]
    return BySkillsResponse(
        learning_resources=[ResourceRead.model_validate(row) for row in matches],
        skills_queried=payload.skills,
    )


@router.post("/recommendations", response_model=ResourceRecommendationResponse)
def recommend_resources(
    payload: ResourceRecommendationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResourceRecommendationResponse:
    gaps = missing_skills(payload.current_skills, payload.target_skills)
    if not gaps:
        return ResourceRecommendationResponse(
            current_skills=payload.current_skills,
            target_skills=payload.target_skills,
            message="No skill gaps identified - you already have all target skills!",
        )

    rows = (
        db.query(LearningResource)
        .filter(LearningResource.difficulty == payload.difficulty)
        .order_by(LearningResource.rating.desc())
        .all()
    )
    matches = [row for row in rows if skills_overlap(row.skills, gaps)][: payload.limit]
    return ResourceRecommendationResponse(
        learning_resources=[ResourceRead.model_validate(row) for row in matches],
        skill_gaps=gaps,
        current_skills=payload.current_skills,
        target_skills=payload.target_skills,
    )


@router.post("/analyze", response_model=ResourceAnalyzeResponse)
def analyze_resource(
    payload: ResourceAnalyzeRequest,
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> ResourceAnalyzeResponse:
    return ResourceAnalyzeResponse(
        extracted_skills=extract_resource_skills(llm, payload.title, payload.description, payload.type)
    )


@router.get("/{resource_id}", response_model=ResourceRead)
def get_resource(
    resource_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResourceRead:
    return ResourceRead.model_validate(_get_resource(db, resource_id))


@router.put("/{resource_id}", response_model=ResourceRead)
def update_resource(
    resource_id: str,
    payload: ResourceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResourceRead:
    resource = _get_resource(db, resource_id)
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("url") is not None:
        update_data["url"] = str(update_data["url"])
    for field, value in update_data.items():
        if value is None and field != "description":
            continue
        setattr(resource, field, value)
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return ResourceRead.model_validate(resource)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    resource_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    resource = _get_resource(db, resource_id)
    db.delete(resource)
    db.commit()
    logger.info("learning_resource.deleted id=%s by user_id=%s", resource_id, current_user.id)
