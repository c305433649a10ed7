"""
Profile model - one per user, created lazily on first read.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathwise.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    bio = Column(Text, nullable=True)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    avatar = Column(String, nullable=True)

    # Structured blobs, shapes defined in pathwise.schemas.profile
    education = Column(JSON, nullable=True)  # Education
    career_goals = Column(JSON, nullable=True)  # CareerGoals
    skills = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    experience = Column(JSON, nullable=True)  # Experience

    is_complete = Column(Boolean, nullable=False, default=False)

    saved_career_path = Column(JSON, nullable=True)  # CareerPathData
    career_path_generated_at = Column(DateTime, nullable=True)
    learning_progress = Column(JSON, nullable=True)  # LearningProgress

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<Profile(id={self.id}, user_id={self.user_id}, complete={self.is_complete})>"
