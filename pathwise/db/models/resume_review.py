"""
Resume review model - an uploaded resume moving through parse and analysis.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from pathwise.db.base import Base

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
REVIEW_STATUSES = (STATUS_PENDING, STATUS_PROCESSING, STATUS_COMPLETED, STATUS_FAILED)


class ResumeReview(Base):
    """
    Resume review record.

    `analysis_result` is only meaningful while `analysis_status` is
    "completed". Failed reviews keep `extracted_text` so they can be
    re-analyzed without another upload.
    """
    __tablename__ = "resume_reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Uploaded file
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_type = Column(String, nullable=False)  # "pdf" | "doc" | "docx"
    file_size = Column(Integer, nullable=False, default=0)

    # Analysis context
    target_role = Column(String, nullable=True)
    target_industry = Column(String, nullable=True)
    experience_level = Column(String, nullable=False, default="mid")
    additional_context = Column(Text, nullable=True)

    # Pipeline output
    extracted_text = Column(Text, nullable=False, default="")
    extracted_sections = Column(JSON, nullable=False, default=dict)
    analysis_result = Column(JSON, nullable=True)  # ResumeAnalysisResult
    analysis_status = Column(String, nullable=False, default=STATUS_PENDING, index=True)
    processing_time = Column(Integer, nullable=True)  # milliseconds

    # User feedback
    user_notes = Column(Text, nullable=True)
    implemented_suggestions = Column(JSON, nullable=False, default=list)
    rating = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)

    analyzed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="resume_reviews")

    __table_args__ = (
        Index('idx_resume_review_user_analyzed', 'user_id', 'analyzed_at'),
    )

    def __repr__(self):
        return f"<ResumeReview(id={self.id}, file='{self.file_name}', status='{self.analysis_status}')>"
