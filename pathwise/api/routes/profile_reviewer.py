"""
Profile reviewer endpoints for LinkedIn and GitHub profiles.
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pathwise.core.auth_dependency import get_db, get_current_user_obj
from pathwise.db.models.profile_review import ProfileReview
from pathwise.db.models.user import User
from pathwise.schemas.profile_review import ProfileAnalysisRequest, ReviewNotesUpdate
from pathwise.services.profile_reviewer import (
    ProfileFetchError,
    analyze_profile,
    missing_linkedin_fields,
    validate_profile_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile-reviewer", tags=["Profile Reviewer"])

PROFILE_TYPES = ("linkedin", "github")
RECENT_REVIEWS_LIMIT = 10


def _review_payload(review: ProfileReview) -> dict:
    return {
        "id": review.id,
        "profile_url": review.profile_url,
        "profile_type": review.profile_type,
        "analysis_result": review.analysis_result,
        "additional_context": review.additional_context,
        "linkedin_data": review.linkedin_data,
        "notes": review.notes,
        "completed_suggestions": review.completed_suggestions or [],
        "analyzed_at": review.analyzed_at.isoformat() if review.analyzed_at else None,
        "last_updated": review.last_updated.isoformat() if review.last_updated else None,
    }


def _get_review_or_404(db: Session, user_id: int, review_id: int) -> ProfileReview:
    review = db.query(ProfileReview).filter(
        ProfileReview.id == review_id,
        ProfileReview.user_id == user_id
    ).first()
    if not review:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile review not found")
    return review


@router.post("/analyze")
def analyze(
    payload: ProfileAnalysisRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Review a profile and store the result. Re-analyzing the same URL
    replaces the earlier review for that URL.
    """
    profile_url = payload.profile_url.strip()
    if not validate_profile_url(profile_url, payload.profile_type):
        raise HTTPException(status_code=400, detail=f"Please provide a valid {payload.profile_type} profile URL")

    linkedin_data = None
    if payload.profile_type == "linkedin":
        linkedin_data = payload.linkedin_data.model_dump(mode="json") if payload.linkedin_data else None
        missing = missing_linkedin_fields(linkedin_data)
        if missing:
            raise HTTPException(
                status_code=400,
                detail={
                    "message": f"Missing required LinkedIn profile information: {', '.join(missing)}",
                    "missing_fields": missing,
                    "requires_linkedin_data": True,
                }
            )

    try:
        result = analyze_profile(
            payload.profile_type,
            profile_url,
            linkedin_data=linkedin_data,
            additional_context=payload.additional_context,
        )
    except ProfileFetchError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "message": "Unable to access GitHub profile. Please ensure the profile is public and the username is correct.",
                "error": str(e),
            }
        )

    try:
        review = db.query(ProfileReview).filter(
            ProfileReview.user_id == user.id,
            ProfileReview.profile_url == profile_url
        ).first()
        if not review:
            review = ProfileReview(user_id=user.id, profile_url=profile_url, completed_suggestions=[])
            db.add(review)

        review.profile_type = payload.profile_type
        review.analysis_result = result.to_dict()
        review.additional_context = payload.additional_context
        review.linkedin_data = linkedin_data
        review.analyzed_at = datetime.utcnow()
        review.last_updated = datetime.utcnow()
        db.commit()
        db.refresh(review)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to store profile review: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze profile"
        )

    logger.info(f"Profile reviewed: review_id={review.id}, user_id={user.id}, type={payload.profile_type}, score={result.overall_score}")
    return {
        "success": True,
        "message": "Profile analysis completed successfully",
        "analysis": result.to_dict(),
        "review_id": review.id,
    }


@router.get("/reviews")
def list_reviews(
    profile_type: Optional[str] = Query(None, description="linkedin | github"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    query = db.query(ProfileReview).filter(ProfileReview.user_id == user.id)
    if profile_type in PROFILE_TYPES:
        query = query.filter(ProfileReview.profile_type == profile_type)

    reviews = (
        query.order_by(ProfileReview.analyzed_at.desc(), ProfileReview.id.desc())
        .limit(RECENT_REVIEWS_LIMIT)
        .all()
    )
    return {"success": True, "reviews": [_review_payload(r) for r in reviews], "count": len(reviews)}


@router.get("/reviews/{review_id}")
def get_review(review_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    review = _get_review_or_404(db, user.id, review_id)
    return {"success": True, "review": _review_payload(review)}


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    review = _get_review_or_404(db, user.id, review_id)
    db.delete(review)
    db.commit()
    return {"success": True, "message": "Profile review deleted successfully"}


@router.put("/reviews/{review_id}/notes")
def update_notes(
    review_id: int,
    payload: ReviewNotesUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    review = _get_review_or_404(db, user.id, review_id)
    review.notes = payload.notes
    review.completed_suggestions = payload.completed_suggestions or []
    review.last_updated = datetime.utcnow()
    db.commit()
    db.refresh(review)
    return {
        "success": True,
        "message": "Review notes updated successfully",
        "review": _review_payload(review),
    }


@router.get("/insights")
def insights(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    reviews = (
        db.query(ProfileReview)
        .filter(ProfileReview.user_id == user.id)
        .order_by(ProfileReview.analyzed_at.desc(), ProfileReview.id.desc())
        .all()
    )
    if not reviews:
        return {
            "success": True,
            "insights": {
                "total_reviews": 0,
                "average_score": 0,
                "improvement_trend": [],
                "top_suggestions": [],
                "completion_rate": 0,
            },
        }

    results = [review.analysis_result or {} for review in reviews]
    total_reviews = len(reviews)
    average_score = sum(result.get("overall_score") or 0 for result in results) / total_reviews

    improvement_trend = [
        {
            "date": review.analyzed_at.isoformat() if review.analyzed_at else None,
            "score": result.get("overall_score") or 0,
            "profile_type": review.profile_type,
        }
        for review, result in list(zip(reviews, results))[:5]
    ]

    suggestions = [s for result in results for s in result.get("suggestions") or [] if isinstance(s, dict)]
    category_counts = Counter(s.get("category", "general") for s in suggestions)
    top_suggestions = [
        {"category": category, "count": count}
        for category, count in category_counts.most_common(5)
    ]

    completed = sum(len(review.completed_suggestions or []) for review in reviews)
    completion_rate = completed / len(suggestions) * 100 if suggestions else 0

    return {
        "success": True,
        "insights": {
            "total_reviews": total_reviews,
            "average_score": round(average_score, 1),
            "improvement_trend": improvement_trend,
            "top_suggestions": top_suggestions,
            "completion_rate": round(completion_rate, 1),
        },
    }
