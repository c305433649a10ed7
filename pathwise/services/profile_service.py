"""
Profile lookup and completeness rules shared by the profile and career routes.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from pathwise.db.models.profile import Profile

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: int) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def get_or_create_profile(db: Session, user_id: int) -> Profile:
    """Profiles are created lazily, empty, the first time they are needed."""
    profile = get_profile(db, user_id)
    if profile:
        return profile

    profile = Profile(user_id=user_id, skills=[], interests=[])
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"Profile created: user_id={user_id}")
    return profile


def is_profile_complete(profile: Profile) -> bool:
    """Complete means bio, target role, experience level and at least one skill."""
    career_goals = profile.career_goals or {}
    experience = profile.experience or {}
    return bool(
        profile.bio
        and career_goals.get("target_role")
        and experience.get("level")
        and profile.skills
    )
