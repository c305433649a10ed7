"""
Career path endpoints: AI roadmap generation, stored path CRUD, saved
path on the profile, skill gap analysis and resource recommendations.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pathwise.core.auth_dependency import get_db, get_current_user_obj
from pathwise.db.models.career_path import CareerPath
from pathwise.db.models.user import User
from pathwise.schemas.career import (
    CareerPathData,
    CareerPathUpdate,
    GenerateCareerPathRequest,
    SaveCareerPathRequest,
    SkillGapRequest,
)
from pathwise.services import career_service
from pathwise.services.profile_service import get_profile, get_or_create_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/career", tags=["Career"])

PATH_FIELDS = (
    "title", "description", "duration", "difficulty", "total_weeks", "prerequisites", "outcomes",
    "skills_to_learn", "market_demand", "average_salary", "job_titles", "weekly_plan",
)


def _career_path_payload(path: CareerPath) -> dict:
    payload = {field: getattr(path, field) for field in PATH_FIELDS}
    payload.update({
        "id": path.id,
        "target_role": path.target_role,
        "timeframe": path.timeframe,
        "pace": path.pace,
        "custom_skills": path.custom_skills or [],
        "custom_interests": path.custom_interests or [],
        "is_active": path.is_active,
        "generated_at": path.generated_at.isoformat() if path.generated_at else None,
        "last_updated": path.last_updated.isoformat() if path.last_updated else None,
    })
    return payload


def _get_career_path_or_404(db: Session, user_id: int) -> CareerPath:
    path = db.query(CareerPath).filter(CareerPath.user_id == user_id).first()
    if not path:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No career path found")
    return path


@router.post("/generate-path")
def generate_path(
    payload: GenerateCareerPathRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Generate a roadmap toward the target role and store it as the user's
    active career path, replacing any previous one.

    Skills, interests, experience level and timeframe default to the
    profile's values.
    """
    profile = get_profile(db, user.id)
    experience = (profile.experience or {}) if profile else {}
    career_goals = (profile.career_goals or {}) if profile else {}

    current_skills = payload.custom_skills or (profile.skills if profile else None) or []
    interests = payload.custom_interests or (profile.interests if profile else None) or []
    experience_level = experience.get("level") or career_service.DEFAULT_EXPERIENCE_LEVEL
    timeframe = payload.timeframe or career_goals.get("timeframe") or career_service.DEFAULT_TIMEFRAME

    generated = career_service.generate_career_path(
        target_role=payload.target_role,
        current_skills=current_skills,
        experience_level=experience_level,
        timeframe=timeframe,
        interests=interests,
        pace=payload.pace,
    )

    try:
        path = db.query(CareerPath).filter(CareerPath.user_id == user.id).first()
        if not path:
            path = CareerPath(user_id=user.id)
            db.add(path)

        for field, value in generated.to_dict().items():
            if field in PATH_FIELDS:
                setattr(path, field, value)
        path.target_role = payload.target_role
        path.timeframe = timeframe
        path.pace = payload.pace
        path.custom_skills = payload.custom_skills or []
        path.custom_interests = payload.custom_interests or []
        path.is_active = True
        path.generated_at = datetime.utcnow()

        db.commit()
        db.refresh(path)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to store career path: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate career path"
        )

    logger.info(f"Career path generated: user_id={user.id}, role={payload.target_role}, weeks={path.total_weeks}")
    return {
        "success": True,
        "message": "Career path generated successfully",
        "career_path": _career_path_payload(path),
    }


@router.get("/path")
def get_path(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    path = _get_career_path_or_404(db, user.id)
    return {"success": True, "career_path": _career_path_payload(path)}


@router.put("/path")
def update_path(
    payload: CareerPathUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    path = _get_career_path_or_404(db, user.id)
    updates = payload.model_dump(exclude_unset=True)

    if "weekly_plan" in updates and updates["weekly_plan"] is not None:
        # stored plans keep the normalized WeeklyPlan shape
        updates["weekly_plan"] = [
            week.to_dict() for week in CareerPathData.lenient(
                {"title": path.title, "weekly_plan": updates["weekly_plan"]}
            ).weekly_plan
        ]

    for field, value in updates.items():
        if value is not None:
            setattr(path, field, value)
    db.commit()
    db.refresh(path)

    return {
        "success": True,
        "message": "Career path updated successfully",
        "career_path": _career_path_payload(path),
    }


@router.delete("/path")
def delete_path(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    path = _get_career_path_or_404(db, user.id)
    db.delete(path)
    db.commit()
    logger.info(f"Career path deleted: user_id={user.id}")
    return {"success": True, "message": "Career path deleted successfully"}


@router.post("/save-path")
def save_path(
    payload: SaveCareerPathRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    if not payload.career_path:
        raise HTTPException(status_code=400, detail="Career path data is required")

    saved = CareerPathData.lenient(payload.career_path)
    profile = get_or_create_profile(db, user.id)
    profile.saved_career_path = saved.to_dict()
    profile.career_path_generated_at = datetime.utcnow()
    db.commit()

    return {"success": True, "message": "Career path saved successfully"}


@router.get("/saved-path")
def get_saved_path(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    profile = get_profile(db, user.id)
    if not profile or not profile.saved_career_path:
        raise HTTPException(status_code=404, detail="No saved career path found")

    return {
        "success": True,
        "career_path": profile.saved_career_path,
        "generated_at": profile.career_path_generated_at.isoformat() if profile.career_path_generated_at else None,
    }


@router.post("/analyze-skills")
def analyze_skills(
    payload: SkillGapRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    profile = get_profile(db, user.id)
    current_skills = (profile.skills if profile else None) or []
    analysis = career_service.analyze_skill_gap(current_skills, payload.target_role)
    return {
        "success": True,
        "message": "Skill gap analysis completed",
        "analysis": analysis.to_dict(),
    }


@router.get("/resources")
def get_resources(
    skill: Optional[str] = Query(None, description="Skill to find resources for"),
    level: str = Query("beginner", description="beginner | intermediate | advanced"),
    user: User = Depends(get_current_user_obj),
):
    if not skill or not skill.strip():
        raise HTTPException(status_code=400, detail="Skill parameter is required")

    resources = career_service.recommend_resources(skill.strip(), level)
    return {
        "success": True,
        "message": "Resources generated successfully",
        "resources": [resource.to_dict() for resource in resources],
    }
