"""
Profile endpoints: read, update, learning progress, avatar and deletion.
"""
import logging
import os
import secrets
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from pathwise.core import config
from pathwise.core.auth_dependency import get_db, get_current_user_obj
from pathwise.db.models.user import User
from pathwise.schemas.profile import ProfileUpdate, LearningProgressUpdate, ProfileResponse
from pathwise.services.profile_service import get_profile, get_or_create_profile, is_profile_complete

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])

AVATAR_EXTENSIONS = {"jpeg", "jpg", "png", "gif"}
AVATAR_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
AVATAR_URL_PREFIX = "/uploads/avatars"


def _profile_payload(profile) -> dict:
    return ProfileResponse.model_validate(profile).model_dump(mode="json")


@router.get("")
def read_profile(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    profile = get_or_create_profile(db, user.id)
    return {"success": True, "profile": _profile_payload(profile)}


@router.put("")
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Update the provided profile fields.

    Nested records (education, career_goals, experience) are replaced as a
    whole. `name` updates the account's display name.
    """
    try:
        profile = get_or_create_profile(db, user.id)
        updates = payload.model_dump(exclude_unset=True, mode="json")

        name = updates.pop("name", None)
        if name:
            user.name = name.strip()

        for field, value in updates.items():
            setattr(profile, field, value)
        profile.is_complete = is_profile_complete(profile)

        db.commit()
        db.refresh(profile)
        logger.info(f"Profile updated: user_id={user.id}, fields={sorted(updates)}, complete={profile.is_complete}")
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update profile: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

    return {"success": True, "message": "Profile updated successfully", "profile": _profile_payload(profile)}


@router.put("/learning-progress")
def update_learning_progress(
    payload: LearningProgressUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    profile = get_or_create_profile(db, user.id)
    progress = payload.learning_progress.model_dump(mode="json")
    if not progress.get("started_at"):
        previous = profile.learning_progress or {}
        progress["started_at"] = previous.get("started_at") or datetime.utcnow().isoformat()
    progress["last_activity_at"] = datetime.utcnow().isoformat()

    profile.learning_progress = progress
    db.commit()
    db.refresh(profile)

    return {
        "success": True,
        "message": "Learning progress updated successfully",
        "profile": _profile_payload(profile),
    }


@router.post("/avatar")
def upload_avatar(
    avatar: UploadFile = File(...),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    extension = os.path.splitext(avatar.filename or "")[1].lower().lstrip(".")
    if extension not in AVATAR_EXTENSIONS or (avatar.content_type or "").lower() not in AVATAR_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Only image files (jpeg, jpg, png, gif) are allowed")

    data = avatar.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(data) > config.MAX_AVATAR_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB")

    avatar_dir = os.path.join(config.UPLOAD_DIR, "avatars")
    os.makedirs(avatar_dir, exist_ok=True)
    file_name = f"{user.id}_{secrets.token_hex(8)}.{extension}"
    with open(os.path.join(avatar_dir, file_name), "wb") as f:
        f.write(data)

    avatar_url = f"{AVATAR_URL_PREFIX}/{file_name}"
    profile = get_or_create_profile(db, user.id)
    profile.avatar = avatar_url
    user.avatar = avatar_url
    db.commit()
    logger.info(f"Avatar uploaded: user_id={user.id}, size={len(data)}")

    return {"success": True, "message": "Avatar uploaded successfully", "avatar_url": avatar_url}


@router.delete("")
def delete_profile(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    """Delete the profile only; the account and its reviews are kept."""
    profile = get_profile(db, user.id)
    if profile:
        db.delete(profile)
        db.commit()
        logger.info(f"Profile deleted: user_id={user.id}")
    return {"success": True, "message": "Profile deleted successfully"}


@router.get("/status")
def profile_status(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    profile = get_profile(db, user.id)
    return {
        "success": True,
        "has_profile": profile is not None,
        "is_complete": bool(profile and profile.is_complete),
        "profile": _profile_payload(profile) if profile else None,
    }
