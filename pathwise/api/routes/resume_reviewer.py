"""
Resume reviewer endpoints.

Upload -> text extraction -> AI (or rule-based) analysis -> stored review.
Reviews keep their extracted text so they can be re-analyzed with a new
target role without re-uploading.
"""
import logging
import math
import os
import secrets
import time
from collections import Counter
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from pathwise.core import config
from pathwise.core.auth_dependency import get_db, get_current_user_obj
from pathwise.db.models.resume_review import (
    ResumeReview,
    REVIEW_STATUSES,
    STATUS_PROCESSING,
    STATUS_COMPLETED,
    STATUS_FAILED,
)
from pathwise.db.models.user import User
from pathwise.schemas.resume_review import (
    ReanalyzeRequest,
    ResumeReviewUpdate,
    ResumeReviewSummary,
    ResumeReviewDetail,
)
from pathwise.services.resume_analyzer import ResumeAnalysisError, analyze_resume
from pathwise.services.resume_parser import ResumeParseError, SUPPORTED_FILE_TYPES, parse_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resume-reviewer", tags=["Resume Reviewer"])

EXPERIENCE_LEVELS = ("entry", "junior", "mid", "senior", "executive")
CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def _get_review_or_404(db: Session, user_id: int, review_id: int) -> ResumeReview:
    review = db.query(ResumeReview).filter(
        ResumeReview.id == review_id,
        ResumeReview.user_id == user_id
    ).first()
    if not review:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume review not found")
    return review


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _mark_failed(db: Session, review: ResumeReview) -> None:
    review.analysis_status = STATUS_FAILED
    review.last_updated = datetime.utcnow()
    db.commit()


def _store_upload(user_id: int, extension: str, data: bytes) -> str:
    resume_dir = os.path.join(config.UPLOAD_DIR, "resumes")
    os.makedirs(resume_dir, exist_ok=True)
    path = os.path.join(resume_dir, f"{user_id}_{secrets.token_hex(8)}.{extension}")
    with open(path, "wb") as f:
        f.write(data)
    return path


@router.post("/analyze")
def analyze(
    resume: Optional[UploadFile] = File(None),
    target_role: Optional[str] = Form(None),
    target_industry: Optional[str] = Form(None),
    experience_level: Optional[str] = Form(None),
    additional_context: Optional[str] = Form(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Upload a resume (PDF, DOC or DOCX, max 10MB) and analyze it.

    The review row is created before parsing, so a file that cannot be
    read still leaves a `failed` review behind.
    """
    started = time.monotonic()

    if resume is None or not resume.filename:
        raise HTTPException(status_code=400, detail="No resume file uploaded")

    extension = os.path.splitext(resume.filename)[1].lower().lstrip(".")
    content_type = (resume.content_type or "").lower()
    if extension not in SUPPORTED_FILE_TYPES or content_type not in CONTENT_TYPES.values():
        raise HTTPException(status_code=400, detail="Only PDF, DOC, and DOCX files are allowed")

    experience_level = experience_level or "mid"
    if experience_level not in EXPERIENCE_LEVELS:
        raise HTTPException(
            status_code=400,
            detail={"message": "Validation failed", "errors": [f"experience_level: must be one of {', '.join(EXPERIENCE_LEVELS)}"]}
        )

    data = resume.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(data) > config.MAX_RESUME_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 10MB")

    file_path = _store_upload(user.id, extension, data)
    review = ResumeReview(
        user_id=user.id,
        file_name=resume.filename,
        file_path=file_path,
        file_type=extension,
        file_size=len(data),
        target_role=target_role,
        target_industry=target_industry,
        experience_level=experience_level,
        additional_context=additional_context,
        extracted_text="",
        extracted_sections={},
        analysis_status=STATUS_PROCESSING,
        implemented_suggestions=[],
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info(f"Resume review started: review_id={review.id}, user_id={user.id}, type={extension}, size={len(data)}")

    try:
        parsed = parse_resume(data, extension)
        review.extracted_text = parsed.text
        review.extracted_sections = parsed.sections
        db.commit()

        result = analyze_resume(
            parsed.text,
            sections=parsed.sections,
            target_role=target_role,
            target_industry=target_industry,
            experience_level=experience_level,
            additional_context=additional_context,
            file_type=extension,
        )
    except (ResumeParseError, ResumeAnalysisError) as e:
        _mark_failed(db, review)
        logger.warning(f"Resume review failed: review_id={review.id}: {e}")
        raise HTTPException(status_code=400, detail={"message": str(e), "review_id": review.id})
    except Exception as e:
        db.rollback()
        _mark_failed(db, review)
        logger.error(f"Resume review crashed: review_id={review.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to analyze resume content", "review_id": review.id}
        )

    processing_time = _elapsed_ms(started)
    review.analysis_result = result.to_dict()
    review.analysis_status = STATUS_COMPLETED
    review.processing_time = processing_time
    review.analyzed_at = datetime.utcnow()
    db.commit()
    logger.info(f"Resume review completed: review_id={review.id}, score={result.overall_score}, source={result.source}, ms={processing_time}")

    return {
        "success": True,
        "message": "Resume analysis completed successfully",
        "analysis": result.to_dict(),
        "review_id": review.id,
        "processing_time": processing_time,
    }


@router.post("/reanalyze/{review_id}")
def reanalyze(
    review_id: int,
    payload: Optional[ReanalyzeRequest] = None,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Analyze the stored text again, optionally with new context. The extracted text is never changed."""
    review = _get_review_or_404(db, user.id, review_id)
    if not review.extracted_text:
        raise HTTPException(status_code=400, detail="No extracted text available for reanalysis")

    started = time.monotonic()
    payload = payload or ReanalyzeRequest()
    review.target_role = payload.target_role or review.target_role
    review.target_industry = payload.target_industry or review.target_industry
    review.experience_level = payload.experience_level or review.experience_level
    review.additional_context = payload.additional_context or review.additional_context
    review.analysis_status = STATUS_PROCESSING
    db.commit()

    try:
        result = analyze_resume(
            review.extracted_text,
            sections=review.extracted_sections or None,
            target_role=review.target_role,
            target_industry=review.target_industry,
            experience_level=review.experience_level,
            additional_context=review.additional_context,
            file_type=review.file_type,
        )
    except Exception as e:
        db.rollback()
        _mark_failed(db, review)
        logger.error(f"Resume reanalysis failed: review_id={review.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reanalyze resume"
        )

    processing_time = _elapsed_ms(started)
    review.analysis_result = result.to_dict()
    review.analysis_status = STATUS_COMPLETED
    review.processing_time = processing_time
    review.analyzed_at = datetime.utcnow()
    review.last_updated = datetime.utcnow()
    db.commit()

    return {
        "success": True,
        "message": "Resume reanalysis completed successfully",
        "analysis": result.to_dict(),
        "review_id": review.id,
        "processing_time": processing_time,
    }


@router.get("/reviews")
def list_reviews(
    status_filter: Optional[str] = Query(None, alias="status", description="pending | processing | completed | failed"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    query = db.query(ResumeReview).filter(ResumeReview.user_id == user.id)
    if status_filter in REVIEW_STATUSES:
        query = query.filter(ResumeReview.analysis_status == status_filter)

    total = query.count()
    reviews = (
        query.order_by(ResumeReview.analyzed_at.desc(), ResumeReview.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "success": True,
        "reviews": [ResumeReviewSummary.model_validate(r).model_dump(mode="json") for r in reviews],
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit),
        },
    }


@router.get("/reviews/{review_id}")
def get_review(review_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    review = _get_review_or_404(db, user.id, review_id)
    return {"success": True, "review": ResumeReviewDetail.model_validate(review).model_dump(mode="json")}


@router.put("/reviews/{review_id}")
def update_review(
    review_id: int,
    payload: ResumeReviewUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    review = _get_review_or_404(db, user.id, review_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "implemented_suggestions":
            value = value or []
        setattr(review, field, value)
    review.last_updated = datetime.utcnow()
    db.commit()
    db.refresh(review)

    return {
        "success": True,
        "message": "Resume review updated successfully",
        "review": ResumeReviewDetail.model_validate(review).model_dump(mode="json"),
    }


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    review = _get_review_or_404(db, user.id, review_id)
    file_path = review.file_path

    db.delete(review)
    db.commit()

    try:
        if file_path and os.path.exists(file_path):
            os.remove(file_path)
    except OSError as e:
        logger.error(f"Failed to remove resume file {file_path}: {e}")

    logger.info(f"Resume review deleted: review_id={review_id}, user_id={user.id}")
    return {"success": True, "message": "Resume review deleted successfully"}


@router.get("/reviews/{review_id}/download")
def download_resume(review_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    review = _get_review_or_404(db, user.id, review_id)
    if not review.file_path or not os.path.exists(review.file_path):
        raise HTTPException(status_code=404, detail="Resume file not found")

    return FileResponse(
        review.file_path,
        media_type=CONTENT_TYPES.get(review.file_type, "application/octet-stream"),
        filename=review.file_name,
    )


@router.get("/insights")
def insights(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    """Aggregate statistics over the user's completed reviews, newest first."""
    reviews = (
        db.query(ResumeReview)
        .filter(ResumeReview.user_id == user.id, ResumeReview.analysis_status == STATUS_COMPLETED)
        .order_by(ResumeReview.analyzed_at.desc(), ResumeReview.id.desc())
        .all()
    )

    if not reviews:
        return {
            "success": True,
            "insights": {
                "total_reviews": 0,
                "average_score": 0,
                "improvement_trend": [],
                "top_weaknesses": [],
                "completion_rate": 0,
                "average_processing_time": 0,
            },
        }

    results = [review.analysis_result or {} for review in reviews]
    total_reviews = len(reviews)
    average_score = sum(result.get("overall_score") or 0 for result in results) / total_reviews

    improvement_trend = [
        {
            "date": review.analyzed_at.isoformat() if review.analyzed_at else None,
            "score": result.get("overall_score") or 0,
            "file_name": review.file_name,
        }
        for review, result in list(zip(reviews, results))[:5]
    ]

    weakness_counts = Counter(
        weakness
        for result in results
        for section in result.get("section_analysis") or []
        for weakness in section.get("weaknesses") or []
    )
    top_weaknesses = [
        {"weakness": weakness, "count": count}
        for weakness, count in weakness_counts.most_common(5)
    ]

    total_suggestions = sum(
        len((result.get("recommendations") or {}).get("immediate") or [])
        + len((result.get("recommendations") or {}).get("short_term") or [])
        for result in results
    )
    implemented = sum(len(review.implemented_suggestions or []) for review in reviews)
    completion_rate = implemented / total_suggestions * 100 if total_suggestions else 0
    average_processing_time = sum(review.processing_time or 0 for review in reviews) / total_reviews

    return {
        "success": True,
        "insights": {
            "total_reviews": total_reviews,
            "average_score": round(average_score, 1),
            "improvement_trend": improvement_trend,
            "top_weaknesses": top_weaknesses,
            "completion_rate": round(completion_rate, 1),
            "average_processing_time": round(average_processing_time),
        },
    }
