from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathwise.db.base import Base


class ProfileReview(Base):
    __tablename__ = "profile_reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    profile_url = Column(String, nullable=False)
    profile_type = Column(String, nullable=False)  # "linkedin" | "github"

    analysis_result = Column(JSON, nullable=False)  # ProfileAnalysisResult
    additional_context = Column(Text, nullable=True)
    linkedin_data = Column(JSON, nullable=True)

    notes = Column(Text, nullable=True)
    completed_suggestions = Column(JSON, nullable=False, default=list)

    analyzed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="profile_reviews")

    __table_args__ = (
        UniqueConstraint('user_id', 'profile_url', name='uq_profile_review_user_url'),
        Index('idx_profile_review_user_analyzed', 'user_id', 'analyzed_at'),
    )
