from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillgap.config import settings
from skillgap.database import get_db
from skillgap.llm.client import OpenRouterClient
from skillgap.models.resume import Resume
from skillgap.models.user import User
from skillgap.routers.dependencies import get_current_user, get_llm_client, get_storage
from skillgap.schemas.resume import ResumeRead, ResumeUploadResponse
from skillgap.services.skill_extractor import extract_resume_skills
from skillgap.services.storage import FileStorage
from skillgap.services.text_extractor import (
    ALLOWED_CONTENT_TYPES,
    ALLOWED_EXTENSIONS,
    TextExtractionError,
    extract_text,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume", tags=["resume"])

PREVIEW_CHARS = 500
MAX_FILE_NAME = 255


def _get_owned_resume(db: Session, resume_id: str, user_id: int) -> Resume:
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == user_id).one_or_none()
    if resume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    return resume


def _validate_upload(upload: UploadFile) -> str:
    file_name = upload.filename or ""
    if not file_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(file_name) > MAX_FILE_NAME:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File name too long. Maximum 255 characters allowed.",
        )
    ext = Path(file_name).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file extension '{ext}'. Allowed extensions: {', '.join(ALLOWED_EXTENSIONS)}",
        )
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type '{content_type}'. Allowed types: {', '.join(ALLOWED_CONTENT_TYPES)}",
        )
    return file_name


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_CHARS:
        return text
    return text[:PREVIEW_CHARS] + "..."


@router.get("/", response_model=list[ResumeRead])
def list_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ResumeRead]:
    rows = (
        db.query(Resume)
        .filter(Resume.user_id == current_user.id)
        .order_by(Resume.uploaded_at.desc())
        .all()
    )
    return [ResumeRead.model_validate(row) for row in rows]


@router.post("/upload", response_model=ResumeUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_resume(
    resume: UploadFile = File(...),
    title: str | None = Form(default=None, max_length=100),
    description: str | None = Form(default=None, max_length=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    llm: OpenRouterClient = Depends(get_llm_client),
    storage: FileStorage = Depends(get_storage),
) -> ResumeUploadResponse:
    file_name = _validate_upload(resume)

    data = resume.file.read(settings.max_upload_bytes + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.max_upload_bytes // (1024 * 1024)}MB.",
        )

    try:
        text = extract_text(data, file_name).strip()
    except TextExtractionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Could not extract text from file")

    skills = extract_resume_skills(llm, text)

    key = storage.save(storage.resume_key(current_user.id, file_name), data)
    row = Resume(
        user_id=current_user.id,
        title=(title or "").strip() or file_name,
        description=(description or "").strip(),
        file_name=file_name,
        storage_path=key,
        content_type=resume.content_type,
        extracted_text=text,
        extracted_skills=[skill.model_dump(mode="json") for skill in skills],
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.remove(key)
        logger.exception("resume.save_failed user_id=%s key=%s", current_user.id, key)
        raise
    db.refresh(row)

    logger.info("resume.uploaded id=%s user_id=%s skills=%d", row.id, current_user.id, len(skills))
    return ResumeUploadResponse(
        resume=ResumeRead.model_validate(row),
        extracted_skills=skills,
        extracted_text=_preview(text),
    )


@router.get("/{resume_id}", response_model=ResumeRead)
def get_resume(
    resume_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ResumeRead:
    return ResumeRead.model_validate(_get_owned_resume(db, resume_id, current_user.id))


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resume(
    resume_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: FileStorage = Depends(get_storage),
) -> None:
    row = _get_owned_resume(db, resume_id, current_user.id)
    key = row.storage_path
    db.delete(row)
    db.commit()
    storage.remove(key)
    logger.info("resume.deleted id=%s user_id=%s", resume_id, current_user.id)
