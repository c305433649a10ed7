"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from pathwise.db.models.user import User
from pathwise.db.models.profile import Profile
from pathwise.db.models.career_path import CareerPath
from pathwise.db.models.resume_review import ResumeReview
from pathwise.db.models.profile_review import ProfileReview

# Explicitly export all models for clarity
__all__ = [
    "User",
    "Profile",
    "CareerPath",
    "ResumeReview",
    "ProfileReview",
]
